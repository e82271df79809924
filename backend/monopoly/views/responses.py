"""Response shaping and request body parsing shared by the resource handlers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, ValidationError
from starlette.responses import JSONResponse

from shared.db.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from starlette.requests import Request

ModelT = TypeVar("ModelT", bound=BaseModel)


class InvalidBodyError(Exception):
    """The request body is not valid JSON or does not match the expected input."""


def json_response(data: BaseModel | Sequence[BaseModel]) -> JSONResponse:
    if isinstance(data, BaseModel):
        return JSONResponse(data.model_dump(mode="json", by_alias=True))
    return JSONResponse([item.model_dump(mode="json", by_alias=True) for item in data])


def return_data_or_404(data: BaseModel | Sequence[BaseModel] | None) -> JSONResponse:
    """Send data as JSON, or signal 404 when the lookup found nothing."""
    if data is None:
        raise NotFoundError
    return json_response(data)


def _describe_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error["loc"]) or "body"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


async def parse_body(request: Request, model: type[ModelT]) -> ModelT:
    """Decode the JSON body into the given input model before it reaches storage."""
    raw_body = await request.body()
    try:
        body = json.loads(raw_body)
    except (ValueError, json.JSONDecodeError) as e:  # fmt: skip
        raise InvalidBodyError("Invalid JSON body") from e

    if not isinstance(body, dict):
        raise InvalidBodyError("Request body must be a JSON object")

    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise InvalidBodyError(_describe_errors(e)) from e
