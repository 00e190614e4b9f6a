"""The Epub document: lazily resolved views over an EPUB archive."""

import logging
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from lxml import etree

from epub_decoder.config import DEFAULT_CONFIG, DecoderConfig
from epub_decoder.core.archive import Archive
from epub_decoder.core.container import (
    base_directory,
    find_root_file_path,
    read_package_document,
)
from epub_decoder.core.manifest import build_items
from epub_decoder.core.metadata import build_metadata
from epub_decoder.core.navigation import (
    NavigationContext,
    build_spine_sections,
    normalize_href,
    resolve_navigation,
)
from epub_decoder.models.item import Item, ItemProperty
from epub_decoder.models.metadata import DocumentMetadata, DublinCoreMetadata, Metadata
from epub_decoder.models.section import Section

log = logging.getLogger(__name__)

T = TypeVar("T")

_VIEWS = (
    "root_file_path",
    "package",
    "metadata",
    "items",
    "sections",
    "navigation",
)


class Epub:
    """An EPUB publication.

    Every view (metadata, items, sections, navigation) is computed on first
    access and memoized for the lifetime of the instance. A failed
    computation raises and leaves the view uncomputed.
    """

    def __init__(self, archive: Archive, config: DecoderConfig | None = None):
        self.archive = archive
        self.config = config or DEFAULT_CONFIG
        self._cache: dict[str, Any] = {}
        self._locks = {name: threading.Lock() for name in _VIEWS}

    @classmethod
    def from_bytes(cls, data: bytes, config: DecoderConfig | None = None) -> "Epub":
        return cls(Archive(data), config)

    @classmethod
    def from_file(cls, path: Path | str, config: DecoderConfig | None = None) -> "Epub":
        """Read an EPUB from disk.

        Raises:
            ValueError: If the file does not have the .epub extension
            FileNotFoundError: If the file does not exist
        """
        config = config or DEFAULT_CONFIG
        path = Path(path)
        if path.suffix.lower() != config.file_extension:
            raise ValueError(
                f"Unsupported format: {path.suffix}. Expected {config.file_extension}"
            )
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        log.debug(f"Reading EPUB {path}")
        return cls(Archive(path.read_bytes()), config)

    def _memoized(self, name: str, compute: Callable[[], T]) -> T:
        if name in self._cache:
            return self._cache[name]
        with self._locks[name]:
            if name not in self._cache:
                self._cache[name] = compute()
            return self._cache[name]

    # -------------------------------------------------------------------------
    # Package document
    # -------------------------------------------------------------------------

    @property
    def root_file_path(self) -> str:
        """Archive path of the package document (usually content.opf)."""
        return self._memoized(
            "root_file_path", lambda: find_root_file_path(self.archive, self.config)
        )

    @property
    def base_directory(self) -> str:
        return base_directory(self.root_file_path)

    @property
    def _package(self) -> etree._Element:
        return self._memoized(
            "package", lambda: read_package_document(self.archive, self.root_file_path)
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def metadata(self) -> list[Metadata]:
        """Top-level metadata records, refinements folded into their targets."""
        return self._memoized("metadata", lambda: build_metadata(self._package))

    @property
    def items(self) -> list[Item]:
        """Manifest resources in declaration order."""
        return self._memoized(
            "items",
            lambda: build_items(
                self._package, self.metadata, self.archive, self.base_directory
            ),
        )

    @property
    def sections(self) -> list[Section]:
        """Spine sections in reading order."""
        return self._memoized(
            "sections", lambda: build_spine_sections(self._package, self.items)
        )

    @property
    def navigation(self) -> list[Section]:
        """Table of contents.

        Resolved from the navigation document (EPUB 3), then the NCX
        (EPUB 2), then the linear spine as a last resort.
        """
        return self._memoized(
            "navigation",
            lambda: resolve_navigation(
                NavigationContext(
                    package=self._package,
                    items=self.items,
                    spine_sections=self.sections,
                    config=self.config,
                )
            ),
        )

    # -------------------------------------------------------------------------
    # Convenience accessors
    # -------------------------------------------------------------------------

    def _dublin_core(self, key: str) -> list[DublinCoreMetadata]:
        return [
            record
            for record in self.metadata
            if isinstance(record, DublinCoreMetadata) and record.key == key
        ]

    @property
    def title(self) -> str:
        titles = self._dublin_core("title")
        return (titles[0].value or "") if titles else ""

    @property
    def authors(self) -> list[str]:
        return [record.value or "" for record in self._dublin_core("creator")]

    @property
    def language(self) -> str | None:
        languages = self._dublin_core("language")
        return languages[0].value if languages else None

    @property
    def identifier(self) -> str | None:
        identifiers = self._dublin_core("identifier")
        return identifiers[0].value if identifiers else None

    @property
    def cover(self) -> Item | None:
        """Cover image item.

        EPUB 3 flags it with the cover-image property; EPUB 2 names it with
        <meta name="cover" content="item-id"/>.
        """
        for item in self.items:
            if item.has_property(ItemProperty.COVER_IMAGE):
                return item

        cover_meta = next(
            (
                record
                for record in self.metadata
                if isinstance(record, DocumentMetadata) and record.name == "cover"
            ),
            None,
        )
        if cover_meta is not None and cover_meta.value:
            return self.get_item(cover_meta.value)
        return None

    def get_item(self, item_id: str) -> Item | None:
        return next((item for item in self.items if item.id == item_id), None)

    def read(self, href: str) -> bytes:
        """Content of the resource at href, relative to the package document.

        Raises:
            ResourceNotFoundError: If the archive has no such entry
        """
        return self.archive.read(normalize_href(href, relative_to=self.root_file_path))

    # -------------------------------------------------------------------------
    # Equality
    # -------------------------------------------------------------------------

    def _state(self) -> tuple:
        return (
            self._cache.get("metadata"),
            self._cache.get("items"),
            self._cache.get("sections"),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Epub):
            return NotImplemented
        return self._state() == other._state()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        computed = [name for name in _VIEWS if name in self._cache]
        return f"Epub(root={self._cache.get('root_file_path')!r}, computed={computed})"
