"""Validation helpers for service settings read from the environment."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic_settings import EnvSettingsSource

if TYPE_CHECKING:
    from pydantic.fields import FieldInfo


def parse_string_list(value: str | list[str], *, allow_empty: bool = False) -> list[str]:
    """Parse a string list given as a list, a JSON array string, or a comma-separated string.

    Raises ValueError for blank strings and malformed JSON, and for empty
    lists unless allow_empty is set.
    """
    if isinstance(value, list):
        items = value
    else:
        stripped = value.strip()
        if not stripped:
            raise ValueError("String list value must not be empty")
        if stripped.startswith("["):
            try:
                items = json.loads(stripped)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON array: {e}") from e
            if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
                raise ValueError("JSON value must be an array of strings")
        else:
            items = [part.strip() for part in stripped.split(",") if part.strip()]

    if not allow_empty and not items:
        raise ValueError("String list value must not be empty")
    return items


class StringListEnvSettingsSource(EnvSettingsSource):
    """Env settings source that hands the named list fields to validators as raw strings.

    pydantic-settings JSON-decodes list-typed env values before validators
    run, which rejects the comma-separated form. Fields named here skip that
    step so parse_string_list sees the original text.
    """

    def __init__(self, settings_cls: Any, string_list_fields: frozenset[str]) -> None:  # noqa: ANN401
        super().__init__(settings_cls)
        self._string_list_fields = string_list_fields

    def prepare_field_value(
        self,
        field_name: str,
        field: FieldInfo,
        value: Any,  # noqa: ANN401
        value_is_complex: bool,  # noqa: FBT001
    ) -> Any:  # noqa: ANN401
        if field_name in self._string_list_fields and isinstance(value, str):
            return value
        return super().prepare_field_value(field_name, field, value, value_is_complex)
