"""Manifest items and their enumerations."""

from __future__ import annotations

import posixpath
from enum import Enum
from urllib.parse import unquote

from pydantic import BaseModel, Field, PrivateAttr

from epub_decoder.core.archive import Archive
from epub_decoder.errors import ResourceNotFoundError
from epub_decoder.models.metadata import DocumentMetadata


class ItemProperty(str, Enum):
    """Special uses a manifest item may declare in its properties attribute."""

    COVER_IMAGE = "cover-image"
    MATHML = "mathml"
    SCRIPTED = "scripted"
    SVG = "svg"
    REMOTE_RESOURCES = "remote-resources"
    SWITCH = "switch"
    NAV = "nav"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_value(cls, value: str) -> ItemProperty:
        """Map a properties token, falling back to UNSUPPORTED."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNSUPPORTED


class ItemMediaType(str, Enum):
    """Core media types of EPUB publication resources."""

    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"
    SVG = "image/svg+xml"
    WEBP = "image/webp"
    MP3 = "audio/mpeg"
    MP4_AUDIO = "audio/mp4"
    OGG_AUDIO = "audio/ogg"
    MP4_VIDEO = "video/mp4"
    WEBM_VIDEO = "video/webm"
    CSS = "text/css"
    TTF = "font/ttf"
    OTF = "font/otf"
    WOFF = "font/woff"
    WOFF2 = "font/woff2"
    SFNT = "application/font-sfnt"
    OPENTYPE = "application/vnd.ms-opentype"
    FONT_WOFF = "application/font-woff"
    XHTML = "application/xhtml+xml"
    HTML = "text/html"
    JAVASCRIPT = "application/javascript"
    ECMASCRIPT = "application/ecmascript"
    TEXT_JAVASCRIPT = "text/javascript"
    NCX = "application/x-dtbncx+xml"
    SMIL = "application/smil+xml"
    PLS = "application/pls+xml"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_value(cls, value: str) -> ItemMediaType:
        """Map a media-type attribute, ignoring parameters and case."""
        base = value.split(";", 1)[0].strip().lower()
        try:
            return cls(base)
        except ValueError:
            return cls.UNSUPPORTED


class Item(BaseModel):
    """A resource declared in the manifest."""

    id: str
    href: str
    media_type: ItemMediaType
    properties: list[ItemProperty] = Field(default_factory=list)
    media_overlay: Item | None = None
    refinements: list[DocumentMetadata] = Field(default_factory=list)

    _base_directory: str = PrivateAttr(default="")
    _archive: Archive | None = PrivateAttr(default=None)

    def bind(self, archive: Archive, base_directory: str) -> Item:
        """Attach the archive the item's content is read from."""
        self._archive = archive
        self._base_directory = base_directory
        return self

    @property
    def file_name(self) -> str:
        return self.href.split("/")[-1]

    @property
    def path(self) -> str:
        """Archive path of the item, resolved against the base directory."""
        href = unquote(self.href.split("#", 1)[0])
        if not self._base_directory:
            return posixpath.normpath(href)
        return posixpath.normpath(posixpath.join(self._base_directory, href))

    @property
    def file_content(self) -> bytes:
        """Raw bytes of the resource.

        Raises:
            ResourceNotFoundError: If the archive has no entry at path
        """
        if self._archive is None:
            raise ResourceNotFoundError(self.path)
        return self._archive.read(self.path)

    def has_property(self, prop: ItemProperty) -> bool:
        return prop in self.properties
