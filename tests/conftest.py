"""EPUB fixture builders.

All fixtures are built in memory with zipfile; no sample files on disk.
"""

import io
import zipfile
from pathlib import Path

import pytest

CONTAINER_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container" version="1.0">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>"""


def build_opf(
    metadata: str = "",
    manifest: str = "",
    spine: str = "",
    spine_attrs: str = "",
) -> str:
    """Build an OPF package document from raw block contents."""
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf"
         xmlns:dc="http://purl.org/dc/elements/1.1/"
         version="3.0" unique-identifier="uid">
  <metadata>
{metadata}
  </metadata>
  <manifest>
{manifest}
  </manifest>
  <spine{spine_attrs}>
{spine}
  </spine>
</package>"""


def item(
    item_id: str,
    href: str,
    media_type: str = "application/xhtml+xml",
    **attrs: str,
) -> str:
    """A manifest <item>; keyword names use _ for - (media_overlay=...)."""
    extra = "".join(f' {k.replace("_", "-")}="{v}"' for k, v in attrs.items())
    return f'    <item id="{item_id}" href="{href}" media-type="{media_type}"{extra}/>'


def itemref(idref: str, linear: str | None = None) -> str:
    linear_attr = f' linear="{linear}"' if linear is not None else ""
    return f'    <itemref idref="{idref}"{linear_attr}/>'


def build_chapter(title: str, body: str = "") -> str:
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>{title}</title></head>
<body>
<h1>{title}</h1>
{body or "<p>Some words in this chapter.</p>"}
</body>
</html>"""


def build_nav(entries: list) -> str:
    """entries: [(label, href), ...] or [(label, href, [(label, href), ...]), ...]"""
    li_items = []
    for entry in entries:
        label, href = entry[0], entry[1]
        nested = ""
        if len(entry) > 2:
            sub = "".join(f'<li><a href="{h}">{l}</a></li>' for l, h in entry[2])
            nested = f"<ol>{sub}</ol>"
        li_items.append(f'      <li><a href="{href}">{label}</a>{nested}</li>')
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops">
<body>
  <nav epub:type="landmarks"><ol><li><a href="landmark.xhtml">Landmark</a></li></ol></nav>
  <nav epub:type="toc">
    <h1>Contents</h1>
    <ol>
{chr(10).join(li_items)}
    </ol>
  </nav>
</body>
</html>"""


def build_ncx(entries: list[tuple[str | None, str | None]]) -> str:
    """entries: [(label, src), ...]; None drops navLabel or content."""
    points = []
    for i, (label, src) in enumerate(entries):
        label_el = f"<navLabel><text>{label}</text></navLabel>" if label is not None else ""
        content_el = f'<content src="{src}"/>' if src is not None else ""
        points.append(
            f'    <navPoint id="np{i}" playOrder="{i + 1}">{label_el}{content_el}</navPoint>'
        )
    return f"""\
<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <navMap>
{chr(10).join(points)}
  </navMap>
</ncx>"""


def make_epub(
    files: dict[str, str | bytes],
    opf_path: str | None = "OEBPS/content.opf",
) -> bytes:
    """Build an EPUB ZIP in memory. opf_path=None omits container.xml."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip")
        if opf_path is not None:
            zf.writestr("META-INF/container.xml", CONTAINER_XML.format(opf_path=opf_path))
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


SAMPLE_METADATA = """\
    <dc:identifier id="uid">urn:uuid:1234</dc:identifier>
    <dc:title id="t1">Sample Book</dc:title>
    <dc:creator id="creator1">Ada Writer</dc:creator>
    <meta refines="#creator1" property="role" scheme="marc:relators">aut</meta>
    <dc:creator>Bob Helper</dc:creator>
    <dc:language>en</dc:language>
    <meta property="dcterms:modified">2024-01-01T00:00:00Z</meta>
    <meta refines="#ch1" property="title-type">main</meta>
    <meta refines="#ch1_overlay" property="media:duration">0:01:00</meta>"""

SAMPLE_MANIFEST = "\n".join(
    [
        item("nav", "nav.xhtml", properties="nav"),
        item("ncx", "toc.ncx", "application/x-dtbncx+xml"),
        item("cover", "images/cover.jpg", "image/jpeg", properties="cover-image"),
        item("ch1", "ch1.xhtml", media_overlay="ch1_overlay"),
        item("ch1_overlay", "ch1.smil", "application/smil+xml"),
        item("ch2", "ch2.xhtml"),
        item("ch3", "ch3.xhtml"),
    ]
)

SAMPLE_SPINE = "\n".join(
    [
        itemref("nav", "no"),
        itemref("ch1", "yes"),
        itemref("ch2", "yes"),
        itemref("ch3", "yes"),
    ]
)


def sample_files() -> dict[str, str | bytes]:
    return {
        "OEBPS/content.opf": build_opf(
            SAMPLE_METADATA, SAMPLE_MANIFEST, SAMPLE_SPINE, spine_attrs=' toc="ncx"'
        ),
        "OEBPS/nav.xhtml": build_nav(
            [
                ("Chapter One", "ch1.xhtml", [("Part A", "ch2.xhtml"), ("Anchor", "ch2.xhtml#a")]),
                ("Chapter Three", "ch3.xhtml#start"),
            ]
        ),
        "OEBPS/toc.ncx": build_ncx([("NCX One", "ch1.xhtml"), ("NCX Two", "ch2.xhtml")]),
        "OEBPS/images/cover.jpg": b"\xff\xd8\xff\xe0fakejpeg",
        "OEBPS/ch1.xhtml": build_chapter("Chapter One"),
        "OEBPS/ch1.smil": "<smil/>",
        "OEBPS/ch2.xhtml": build_chapter("Chapter Two"),
        "OEBPS/ch3.xhtml": build_chapter("Chapter Three"),
    }


@pytest.fixture
def sample_epub_bytes() -> bytes:
    """A complete EPUB 3 book with nav, NCX, cover and a media overlay."""
    return make_epub(sample_files())


@pytest.fixture
def sample_epub_path(tmp_path: Path, sample_epub_bytes: bytes) -> Path:
    path = tmp_path / "sample.epub"
    path.write_bytes(sample_epub_bytes)
    return path
