"""
HTML simplification into a readable markdown article.

This module chains three libraries:
1. readability: Mozilla's readability algorithm isolates the article body
2. trafilatura: page metadata (article title, site name)
3. markdownify: renders the article body as markdown

BeautifulSoup is used in between to drop presentation classes and to read
the document title when no article title is found.
"""

from __future__ import annotations

from bs4 import BeautifulSoup
from markdownify import ATX, UNDERSCORE, MarkdownConverter, chomp
from readability import Document
import trafilatura

from ..core.types import SIMPLIFY_FAILED, SimplificationFailure, SimplifiedArticle
from ..logging_utils import get_logger


logger = get_logger("extract")

MIN_TEXT_LENGTH = 20
PRESERVED_CLASSES = ("code",)
UNTITLED = "Untitled Page"


class ArticleMarkdownConverter(MarkdownConverter):
    """Markdown converter with fixed output conventions.

    ATX headings, "-" bullets, "_" emphasis and "**" strong. Both <pre> and
    <code> always render as fenced blocks; a <code> inside a <pre> is
    fenced once, by the <pre>.
    """

    def __init__(self, **options):
        options.setdefault("heading_style", ATX)
        options.setdefault("bullets", "-")
        options.setdefault("strong_em_symbol", UNDERSCORE)
        super().__init__(**options)

    def convert_pre(self, el, text, parent_tags):
        return fence(text)

    def convert_code(self, el, text, parent_tags):
        if "pre" in parent_tags:
            return text
        return fence(text)

    def convert_strong(self, el, text, parent_tags):
        if "_noformat" in parent_tags:
            return text
        prefix, suffix, text = chomp(text)
        if not text:
            return ""
        return f"{prefix}**{text}**{suffix}"

    convert_b = convert_strong


def fence(content: str) -> str:
    return "\n```\n" + content + "\n```\n"


def extract_content(html: str) -> str:
    """Simplify HTML and return the text handed to the paginator.

    Failures are returned as an inline notice rather than raised.
    """
    return simplify(html).text


def simplify(html: str) -> SimplifiedArticle | SimplificationFailure:
    """Extract the main article of an HTML page as markdown.

    Args:
        html: The HTML content to simplify

    Returns:
        SimplifiedArticle on success, or SimplificationFailure when no
        article could be isolated or parsing raised
    """
    try:
        doc = Document(html, min_text_length=MIN_TEXT_LENGTH)
        content = _strip_classes(doc.summary())
        if not content.get_text(strip=True):
            return SimplificationFailure()

        metadata = trafilatura.extract_metadata(html)
        title = (metadata.title if metadata else None) or _document_title(html) or UNTITLED
        site_name = (metadata.sitename if metadata else None) or ""

        markdown = ArticleMarkdownConverter().convert_soup(content)
        return SimplifiedArticle(
            title=title.strip(),
            site_name=site_name.strip(),
            body_markdown=_trim(markdown),
        )
    except Exception as exc:  # noqa: BLE001
        logger.error("Error processing HTML content: %s", exc)
        return SimplificationFailure(f"{SIMPLIFY_FAILED}: {exc}")


def _strip_classes(content_html: str) -> BeautifulSoup:
    """Drop every class attribute except the preserved ones."""
    soup = BeautifulSoup(content_html, "html.parser")
    for tag in soup.find_all(class_=True):
        kept = [name for name in tag.get("class", []) if name in PRESERVED_CLASSES]
        if kept:
            tag["class"] = kept
        else:
            del tag["class"]
    return soup


def _document_title(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title and soup.title.string:
        return soup.title.string.strip() or None
    return None


def _trim(markdown: str) -> str:
    return markdown.lstrip("\t\r\n").rstrip()
