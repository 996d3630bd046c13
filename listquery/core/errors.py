from __future__ import annotations


class QueryArgumentError(ValueError):
    """Rejected client input in a listing query string.

    ``kind`` is a stable machine-readable code, ``argument`` names the
    query-string key (or field) that failed validation.
    """

    kind = "InvalidQueryArgument"

    def __init__(self, argument: str, message: str | None = None):
        self.argument = argument
        self.message = message or f'Invalid query string argument "{argument}"'
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        return {"detail": self.message, "code": self.kind, "argument": self.argument}


class InvalidPageNumber(QueryArgumentError):
    kind = "InvalidPageNumber"


class InvalidPageSize(QueryArgumentError):
    kind = "InvalidPageSize"


class InvalidSortField(QueryArgumentError):
    kind = "InvalidSortField"


class InvalidSortDirection(QueryArgumentError):
    kind = "InvalidSortDirection"


class InvalidSearchColumn(QueryArgumentError):
    kind = "InvalidSearchColumn"


class InvalidQuickSearch(QueryArgumentError):
    kind = "InvalidQuickSearch"


class MalformedFilterValue(QueryArgumentError):
    kind = "MalformedFilterValue"


class UnresolvedFilterField(QueryArgumentError):
    kind = "UnresolvedFilterField"
