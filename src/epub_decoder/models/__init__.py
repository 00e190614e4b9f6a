"""Data models."""

from epub_decoder.models.item import Item, ItemMediaType, ItemProperty
from epub_decoder.models.metadata import (
    DocumentMetadata,
    DublinCoreMetadata,
    Metadata,
)
from epub_decoder.models.section import Section

__all__ = [
    # Metadata models
    "Metadata",
    "DublinCoreMetadata",
    "DocumentMetadata",
    # Manifest models
    "Item",
    "ItemMediaType",
    "ItemProperty",
    # Reading order models
    "Section",
]
