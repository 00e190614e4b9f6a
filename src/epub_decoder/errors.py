"""Exceptions raised while decoding EPUB containers."""


class EpubError(Exception):
    """Base class for all decoding errors."""


class FormatError(EpubError, ValueError):
    """A required file or attribute is missing or unreadable."""


class ManifestIntegrityError(EpubError, RuntimeError):
    """The manifest references an item id it never declares.

    Raised for media overlays pointing at an undeclared id. Unlike
    FormatError this is not isolated per item and aborts the manifest.
    """


class ResourceNotFoundError(EpubError, LookupError):
    """A declared resource is absent from the archive."""

    def __init__(self, path: str):
        super().__init__(f"Resource not found in archive: {path}")
        self.path = path
