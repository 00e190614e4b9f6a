"""Namespace-agnostic helpers over lxml element trees."""

from lxml import etree

from epub_decoder.errors import FormatError


def _parser(recover: bool) -> etree.XMLParser:
    # Parsers are not shared between threads
    return etree.XMLParser(resolve_entities=False, no_network=True, recover=recover)


def parse_xml(data: bytes, source: str = "", recover: bool = False) -> etree._Element:
    """Parse bytes into an element tree and return its root element.

    recover=True tolerates sloppy XHTML (stray entities, unclosed tags).

    Raises:
        FormatError: If the document is not well-formed
    """
    try:
        root = etree.fromstring(data, _parser(recover))
    except etree.XMLSyntaxError as exc:
        raise FormatError(f"malformed markup in {source or 'document'}: {exc}") from exc
    if root is None:
        raise FormatError(f"empty markup in {source or 'document'}")
    return root


def local_path(*names: str) -> str:
    """Build a relative XPath that matches each step by local name."""
    return "/".join(f"*[local-name()='{name}']" for name in names)


def local_name(element: etree._Element) -> str | None:
    """Local part of the element tag; None for comments and processing instructions."""
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def find_first(element: etree._Element, path: str) -> etree._Element | None:
    matches = element.xpath(path)
    return matches[0] if matches else None


def children(element: etree._Element, name: str) -> list[etree._Element]:
    """Direct children with the given local name."""
    return [child for child in element if local_name(child) == name]


def first_child(element: etree._Element, name: str) -> etree._Element | None:
    for child in element:
        if local_name(child) == name:
            return child
    return None


def descendants(element: etree._Element, name: str) -> list[etree._Element]:
    """All descendants with the given local name, in document order."""
    return element.xpath(".//*[local-name()=$name]", name=name)


def text_of(element: etree._Element) -> str:
    """Concatenated text content with whitespace collapsed."""
    return " ".join(element.xpath("string()").split())
