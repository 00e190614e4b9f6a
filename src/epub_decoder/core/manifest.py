"""Build manifest items, resolving media overlays and refinements."""

import logging
from collections import defaultdict

from lxml import etree

from epub_decoder.core.archive import Archive
from epub_decoder.core.markup import find_first, local_name, local_path
from epub_decoder.errors import FormatError, ManifestIntegrityError
from epub_decoder.models.item import Item, ItemMediaType, ItemProperty
from epub_decoder.models.metadata import DocumentMetadata, Metadata

log = logging.getLogger(__name__)

_MANIFEST_PATH = "/" + local_path("package", "manifest")


def build_items(
    package: etree._Element,
    metadata: list[Metadata],
    archive: Archive,
    base_directory: str,
) -> list[Item]:
    """Parse every manifest <item>, skipping malformed ones.

    Raises:
        FormatError: If the package document has no manifest
        ManifestIntegrityError: If a media-overlay names an undeclared id
    """
    block = find_first(package, _MANIFEST_PATH)
    if block is None:
        raise FormatError("manifest not found")

    elements = [el for el in block.iterdescendants() if local_name(el) == "item"]
    by_id: dict[str, etree._Element] = {}
    for element in elements:
        by_id.setdefault(element.get("id"), element)

    items: list[Item] = []
    for element in elements:
        overlay_element = None
        overlay_id = element.get("media-overlay")
        if overlay_id is not None:
            overlay_element = by_id.get(overlay_id)
            if overlay_element is None:
                raise ManifestIntegrityError(
                    f"Media overlay with id {overlay_id} not found or not declared"
                )

        try:
            overlay = (
                _item_from_element(overlay_element, archive, base_directory)
                if overlay_element is not None
                else None
            )
            item = _item_from_element(element, archive, base_directory, overlay)
        except FormatError as exc:
            log.warning(f"Skipping manifest item {element.get('id')!r}: {exc}")
            continue
        items.append(item)

    refinements = _refinements_by_target(metadata)
    for item in items:
        _attach_refinements(item, refinements)
        if item.media_overlay is not None:
            _attach_refinements(item.media_overlay, refinements)

    return items


def _item_from_element(
    element: etree._Element,
    archive: Archive,
    base_directory: str,
    media_overlay: Item | None = None,
) -> Item:
    properties = element.get("properties")
    item = Item(
        id=_required(element, "id"),
        href=_required(element, "href"),
        media_type=ItemMediaType.from_value(_required(element, "media-type")),
        properties=[ItemProperty.from_value(p) for p in properties.split()]
        if properties
        else [],
        media_overlay=media_overlay,
    )
    return item.bind(archive, base_directory)


def _required(element: etree._Element, attribute: str) -> str:
    value = element.get(attribute)
    if value is None:
        raise FormatError(f"{attribute} is a required attribute for manifest items")
    return value


def _refinements_by_target(metadata: list[Metadata]) -> dict[str, list[DocumentMetadata]]:
    index: dict[str, list[DocumentMetadata]] = defaultdict(list)
    for record in metadata:
        if isinstance(record, DocumentMetadata) and record.refines_to is not None:
            index[record.refines_to].append(record)
    return index


def _attach_refinements(item: Item, index: dict[str, list[DocumentMetadata]]) -> None:
    item.refinements.extend(index.get(item.id, []))
