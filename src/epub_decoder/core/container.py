"""Locate the package document through META-INF/container.xml."""

import logging
import posixpath

from lxml import etree

from epub_decoder.config import DEFAULT_CONFIG, DecoderConfig
from epub_decoder.core.archive import Archive
from epub_decoder.core.markup import find_first, local_path, parse_xml
from epub_decoder.errors import FormatError

log = logging.getLogger(__name__)

_ROOTFILE_PATH = "/" + local_path("container", "rootfiles", "rootfile")


def find_root_file_path(archive: Archive, config: DecoderConfig = DEFAULT_CONFIG) -> str:
    """Return the archive path of the package document (usually content.opf).

    Raises:
        FormatError: If the container file or its full-path attribute is missing
    """
    content = archive.find(config.container_path)
    if content is None:
        raise FormatError("container not found")

    container = parse_xml(content, source=config.container_path)
    rootfile = find_first(container, _ROOTFILE_PATH)
    path = rootfile.get("full-path") if rootfile is not None else None
    if not path:
        raise FormatError("root path attribute missing")

    log.debug(f"Package document at {path}")
    return path


def base_directory(root_file_path: str) -> str:
    """Directory every manifest href is relative to ("" for the archive root)."""
    return posixpath.dirname(root_file_path)


def read_package_document(archive: Archive, root_file_path: str) -> etree._Element:
    """Parse the package document.

    Raises:
        FormatError: If the package document is absent or malformed
    """
    content = archive.find(root_file_path)
    if content is None:
        raise FormatError("package document not found")
    return parse_xml(content, source=root_file_path)
