"""Exception hierarchy for catalog resolution and store access."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class NotFoundError(CatalogError):
    """A path segment has no matching child at some catalog level.

    ``level`` is one of ``brand``, ``model``, ``year`` or ``engine``.
    """

    def __init__(self, level: str, segment: str) -> None:
        self.level = level
        self.segment = segment
        super().__init__(f"No {level} matching '{segment}'")

    def to_dict(self) -> dict[str, str]:
        return {
            "error": f"{self.level.capitalize()} not found",
            "level": self.level,
            "segment": self.segment,
        }


class CatalogStoreError(CatalogError):
    """The content store could not be reached or returned a bad payload."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Catalog store {operation} failed: {detail}")
