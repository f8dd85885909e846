"""Exception types shared by the loader, the query services and the API."""


class DrgExplorerError(Exception):
    """Base class for all application errors."""


class InvalidFilterError(DrgExplorerError, ValueError):
    """Raised when a request is missing a required filter or carries a malformed one."""


class StoreUnavailableError(DrgExplorerError):
    """Raised when the backing record store cannot be opened or reached."""


class SourceMissingError(DrgExplorerError):
    """Raised when the source archive, its CSV member, or a required column is absent."""


class RowParseError(DrgExplorerError, ValueError):
    """Raised when a source row carries a value that cannot be parsed.

    Attributes:
        row: 1-based data row number (the header is not counted).
        field: Source column name.
        value: The raw value that failed to parse.
    """

    def __init__(self, row: int, field: str, value: object, reason: str) -> None:
        self.row = row
        self.field = field
        self.value = value
        super().__init__(f"Row {row}: invalid {field} {value!r} ({reason})")
