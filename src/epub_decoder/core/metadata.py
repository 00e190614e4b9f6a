"""Build metadata records and fold refinements into their targets."""

import logging

from lxml import etree

from epub_decoder.core.markup import find_first, local_name, local_path, text_of
from epub_decoder.models.metadata import DocumentMetadata, DublinCoreMetadata, Metadata

log = logging.getLogger(__name__)

DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"

_METADATA_PATH = "/" + local_path("package", "metadata")


def build_metadata(package: etree._Element) -> list[Metadata]:
    """Parse the <metadata> block into top-level records.

    A <meta refines="#x"> is folded into the record with id "x" only if that
    record appeared earlier in the document; otherwise it stays top-level.
    """
    block = find_first(package, _METADATA_PATH)
    if block is None:
        log.warning("Package document has no metadata block")
        return []

    records: list[Metadata] = []
    by_id: dict[str, Metadata] = {}

    for element in block.iterdescendants():
        name = local_name(element)
        if name is None:
            continue

        if _is_dublin_core(element):
            record: Metadata = _dublin_core_from_element(element, name)
        elif name == "meta":
            record = _document_metadata_from_element(element)
            target = by_id.get(record.refines_to) if record.refines_to else None
            if target is not None:
                target.refinements.append(record)
                continue
            if record.refines_to:
                log.debug(f"Refinement target {record.refines_to!r} not declared before use")
        else:
            continue

        records.append(record)
        if record.id and record.id not in by_id:
            by_id[record.id] = record

    return records


def _is_dublin_core(element: etree._Element) -> bool:
    return etree.QName(element).namespace == DC_NAMESPACE or element.prefix == "dc"


def _dublin_core_from_element(element: etree._Element, key: str) -> DublinCoreMetadata:
    return DublinCoreMetadata(
        key=key,
        id=element.get("id"),
        value=text_of(element) or None,
    )


def _document_metadata_from_element(element: etree._Element) -> DocumentMetadata:
    refines = element.get("refines")
    content = element.get("content")
    return DocumentMetadata(
        id=element.get("id"),
        name=element.get("name"),
        property=element.get("property"),
        scheme=element.get("scheme"),
        content=content,
        refines_to=refines.lstrip("#") if refines else None,
        value=text_of(element) or content,
    )
