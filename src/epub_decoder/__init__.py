"""Decode EPUB containers into metadata, manifest, spine and table of contents."""

from epub_decoder.config import DEFAULT_CONFIG, DecoderConfig
from epub_decoder.document import Epub
from epub_decoder.errors import (
    EpubError,
    FormatError,
    ManifestIntegrityError,
    ResourceNotFoundError,
)
from epub_decoder.models import (
    DocumentMetadata,
    DublinCoreMetadata,
    Item,
    ItemMediaType,
    ItemProperty,
    Metadata,
    Section,
)

__all__ = [
    "Epub",
    "DecoderConfig",
    "DEFAULT_CONFIG",
    # Errors
    "EpubError",
    "FormatError",
    "ManifestIntegrityError",
    "ResourceNotFoundError",
    # Models
    "Metadata",
    "DublinCoreMetadata",
    "DocumentMetadata",
    "Item",
    "ItemMediaType",
    "ItemProperty",
    "Section",
]
