"""Convert section content into readable text for display."""

import warnings
from typing import Literal

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from markdownify import markdownify as md

from epub_decoder.models.section import Section

# Content documents are XHTML; parsing them as HTML is intended
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

OutputFormat = Literal["markdown", "text", "html"]


class ContentProcessor:
    """Render XHTML content documents as markdown, plain text or cleaned HTML."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def process(self, html_content: bytes, output_format: OutputFormat = "markdown") -> str:
        """Convert HTML to specified format."""
        soup = self._soup(html_content)

        for tag in soup(["script", "style", "nav", "header", "footer", "aside"]):
            tag.decompose()

        if output_format == "html":
            return str(soup.body or soup)
        elif output_format == "text":
            return self._to_plain_text(soup)
        else:
            return self._to_markdown(soup)

    def process_section(self, section: Section, output_format: OutputFormat = "markdown") -> str:
        return self.process(section.content.file_content, output_format)

    def extract_title(self, html_content: bytes) -> str | None:
        """First non-empty h1, h2 or <title> of the document."""
        soup = self._soup(html_content)
        for tag in ["h1", "h2", "title"]:
            element = soup.find(tag)
            if element:
                text = element.get_text(strip=True)
                if text:
                    return text
        return None

    def count_words(self, html_content: bytes) -> int:
        soup = self._soup(html_content)
        return len(soup.get_text(separator=" ", strip=True).split())

    def _soup(self, html_content: bytes) -> BeautifulSoup:
        return BeautifulSoup(html_content, "lxml", from_encoding=self.encoding)

    def _to_markdown(self, soup: BeautifulSoup) -> str:
        body = soup.body or soup
        markdown = md(str(body), heading_style="ATX", bullets="-", strip=["a"])

        # Collapse runs of blank lines
        cleaned = []
        prev_blank = False
        for line in (line.rstrip() for line in markdown.split("\n")):
            is_blank = not line.strip()
            if is_blank and prev_blank:
                continue
            cleaned.append(line)
            prev_blank = is_blank

        return "\n".join(cleaned).strip()

    def _to_plain_text(self, soup: BeautifulSoup) -> str:
        paragraphs = []
        for p in soup.find_all(["p", "h1", "h2", "h3", "h4", "h5", "h6", "li"]):
            text = p.get_text(strip=True)
            if text:
                paragraphs.append(text)
        return "\n\n".join(paragraphs)
