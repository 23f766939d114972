"""Exception hierarchy for loading and querying the content index"""


class ContentError(Exception):
    """Base class for all content index errors."""


class LoadError(ContentError):
    """Fatal error while building the index; no partial index is produced."""


class FrontmatterError(LoadError):
    """Unclosed delimiter, malformed YAML, or invalid metadata values."""


class DuplicateSlugError(LoadError):
    """Two documents resolved to the same slug."""

    def __init__(self, slug: str, first: str, second: str):
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(f"duplicate slug {slug!r}: {first!r} and {second!r}")


class NotFoundError(ContentError, LookupError):
    """Expected, non-fatal lookup miss."""


class DocumentNotFoundError(NotFoundError):
    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"document not found: {slug!r}")


class AssetNotFoundError(NotFoundError):
    def __init__(self, slug: str, filename: str):
        self.slug = slug
        self.filename = filename
        super().__init__(f"asset not found: {slug!r}/{filename!r}")


class InvalidAssetPathError(ContentError, ValueError):
    """Asset filename escapes the bundle directory."""
