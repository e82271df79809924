"""Path parameter convertors for the Monopoly routes."""

from __future__ import annotations

from starlette.convertors import Convertor, register_url_convertor


class RowIdConvertor(Convertor[int]):
    """Unsigned decimal ids of at most 19 digits, the width of a SQLite INTEGER key.

    Longer digit runs do not match the route and get a 404. Values between
    2**63 and 10**19 - 1 still match; the repositories treat them as unknown ids.
    """

    regex = "[0-9]{1,19}"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(value)


register_url_convertor("row_id", RowIdConvertor())
