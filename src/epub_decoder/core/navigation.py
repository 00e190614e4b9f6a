"""Spine sections and table-of-contents resolution."""

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Callable
from urllib.parse import unquote

from lxml import etree

from epub_decoder.config import DEFAULT_CONFIG, DecoderConfig
from epub_decoder.core.markup import (
    children,
    descendants,
    find_first,
    first_child,
    local_path,
    parse_xml,
    text_of,
)
from epub_decoder.errors import FormatError, ResourceNotFoundError
from epub_decoder.models.item import Item, ItemProperty
from epub_decoder.models.section import Section

log = logging.getLogger(__name__)

OPS_NAMESPACE = "http://www.idpf.org/2007/ops"

_SPINE_PATH = "/" + local_path("package", "spine")
_EPUB_TYPE = f"{{{OPS_NAMESPACE}}}type"


def normalize_href(href: str, relative_to: str = "") -> str:
    """Drop the fragment and resolve href against the directory of relative_to."""
    path = unquote(href.split("#", 1)[0])
    directory = posixpath.dirname(relative_to)
    if directory:
        path = posixpath.join(directory, path)
    return posixpath.normpath(path)


def build_href_map(items: list[Item]) -> dict[str, Item]:
    """Index items by normalized href; the first declaration wins."""
    href_map: dict[str, Item] = {}
    for item in items:
        href_map.setdefault(normalize_href(item.href), item)
    return href_map


# =============================================================================
# Spine
# =============================================================================


def find_spine(package: etree._Element) -> etree._Element:
    spine = find_first(package, _SPINE_PATH)
    if spine is None:
        raise FormatError("spine not found")
    return spine


def build_spine_sections(package: etree._Element, items: list[Item]) -> list[Section]:
    """Resolve spine itemrefs against the manifest in document order.

    Unresolved idrefs are dropped, so reading orders stay dense.
    """
    by_id: dict[str, Item] = {}
    for item in items:
        by_id.setdefault(item.id, item)

    sections: list[Section] = []
    for itemref in descendants(find_spine(package), "itemref"):
        idref = itemref.get("idref")
        item = by_id.get(idref) if idref else None
        if item is None:
            log.debug(f"Spine reference {idref!r} not in manifest, skipping")
            continue
        sections.append(
            Section(
                content=item,
                reading_order=len(sections) + 1,
                linear=itemref.get("linear") == "yes",
            )
        )
    return sections


# =============================================================================
# Navigation tiers
# =============================================================================


@dataclass
class NavigationContext:
    """Inputs shared by every navigation tier."""

    package: etree._Element
    items: list[Item]
    spine_sections: list[Section]
    config: DecoderConfig = DEFAULT_CONFIG
    href_map: dict[str, Item] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.href_map:
            self.href_map = build_href_map(self.items)


def _read_markup(item: Item) -> etree._Element | None:
    try:
        return parse_xml(item.file_content, source=item.path, recover=True)
    except (FormatError, ResourceNotFoundError) as e:
        log.warning(f"Cannot read navigation source {item.href}: {e}")
        return None


def _is_toc_nav(nav: etree._Element) -> bool:
    epub_type = nav.get(_EPUB_TYPE) or nav.get("epub:type") or ""
    return "toc" in epub_type.split()


def find_toc_nav(items: list[Item]) -> tuple[Item, etree._Element] | None:
    """First <nav epub:type="toc"> among nav-flagged items, with its document."""
    for item in items:
        if not item.has_property(ItemProperty.NAV):
            continue
        root = _read_markup(item)
        if root is None:
            continue
        for nav in descendants(root, "nav"):
            if _is_toc_nav(nav):
                return item, nav
    return None


def from_nav_document(ctx: NavigationContext) -> list[Section] | None:
    """EPUB 3 navigation document.

    Each top-level <li> contributes its first link as a section; further
    links inside it become subsections unless they point at a fragment.
    One counter numbers top-level and nested entries alike.
    """
    found = find_toc_nav(ctx.items)
    if found is None:
        return None
    nav_item, nav = found

    top_list = first_child(nav, "ol")
    if top_list is None:
        top_list = first_child(nav, "ul")
    if top_list is None:
        return None

    sections: list[Section] = []

    def emit(href: str, title: str, sub_section: bool) -> None:
        target = normalize_href(href, relative_to=nav_item.href)
        item = ctx.href_map.get(target)
        if item is None:
            if ctx.config.strict_navigation:
                raise FormatError(f"navigation link target not in manifest: {href}")
            log.warning(f"Navigation link {href!r} not in manifest, skipping")
            return
        sections.append(
            Section(
                content=item,
                reading_order=len(sections) + 1,
                title=title or None,
                sub_section=sub_section,
            )
        )

    for entry in children(top_list, "li"):
        links = [a for a in descendants(entry, "a") if a.get("href") is not None]
        if not links:
            continue

        first, *nested = links
        emit(first.get("href"), text_of(first), sub_section=False)

        for link in nested:
            href = link.get("href")
            if "#" in href:
                continue
            emit(href, text_of(link), sub_section=True)

    return sections or None


def from_ncx(ctx: NavigationContext) -> list[Section] | None:
    """EPUB 2 NCX document named by the spine's toc attribute (flat)."""
    toc_id = find_spine(ctx.package).get("toc")
    if toc_id is None:
        return None

    toc_item = next((item for item in ctx.items if item.id == toc_id), None)
    if toc_item is None:
        log.debug(f"Spine toc {toc_id!r} not in manifest")
        return None

    root = _read_markup(toc_item)
    if root is None:
        return None

    nav_maps = descendants(root, "navMap")
    if not nav_maps:
        return None

    sections: list[Section] = []
    for nav_point in children(nav_maps[0], "navPoint"):
        label = first_child(nav_point, "navLabel")
        content = first_child(nav_point, "content")
        src = content.get("src") if content is not None else None
        if label is None or src is None:
            log.debug("Skipping navPoint without label or content")
            continue

        item = ctx.href_map.get(normalize_href(src, relative_to=toc_item.href))
        if item is None:
            log.debug(f"NCX entry {src!r} not in manifest, skipping")
            continue

        text = first_child(label, "text")
        title = text_of(text if text is not None else label)
        sections.append(
            Section(
                content=item,
                reading_order=len(sections) + 1,
                title=title or None,
            )
        )

    return sections or None


def from_spine(ctx: NavigationContext) -> list[Section] | None:
    """Spine order minus leading navigation and non-linear sections."""
    remaining = list(ctx.spine_sections)
    while remaining and remaining[0].content.has_property(ItemProperty.NAV):
        remaining.pop(0)
    while remaining and not remaining[0].linear:
        remaining.pop(0)

    return [
        section.renumbered(position)
        for position, section in enumerate(remaining, start=1)
    ] or None


@dataclass
class NavigationTier:
    """A table-of-contents source, tried in priority order."""

    name: str
    fn: Callable[[NavigationContext], list[Section] | None]
    description: str


# Navigation document (EPUB 3) takes precedence over NCX (EPUB 2)
NAVIGATION_TIERS: list[NavigationTier] = [
    NavigationTier(
        name="nav",
        fn=from_nav_document,
        description="EPUB 3 navigation document",
    ),
    NavigationTier(
        name="ncx",
        fn=from_ncx,
        description="EPUB 2 NCX table of contents",
    ),
    NavigationTier(
        name="spine",
        fn=from_spine,
        description="Linear spine order",
    ),
]


def resolve_navigation(ctx: NavigationContext) -> list[Section]:
    """Return the sections of the first tier that produces any."""
    for tier in NAVIGATION_TIERS:
        sections = tier.fn(ctx)
        if sections:
            log.debug(f"Navigation resolved from {tier.name}: {len(sections)} sections")
            return sections
        log.debug(f"Navigation tier {tier.name} ({tier.description}): no results")

    log.warning("No table of contents could be resolved")
    return []
