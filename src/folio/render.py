"""Markdown to HTML rendering for articles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import markdown

from folio.config import DEFAULT_EXTENSIONS

if TYPE_CHECKING:
    from folio.articles.model import Article

logger = logging.getLogger(__name__)


@dataclass
class RenderedArticle:
    """HTML output for one article."""

    slug: str
    title: str
    html: str
    excerpt_html: str
    has_teaser: bool


def render_markdown(text: str, extensions: list[str] | None = None) -> str:
    """Render markdown to an HTML fragment.

    Fenced code blocks keep their language hint as ``class="language-<hint>"``.
    """
    return markdown.markdown(
        text,
        extensions=list(DEFAULT_EXTENSIONS if extensions is None else extensions),
        output_format="html",
    )


def render_article(article: Article, extensions: list[str] | None = None) -> RenderedArticle:
    """Render the full body and the teaser. The more marker is dropped."""
    html = render_markdown(article.full_body, extensions)
    excerpt_html = render_markdown(article.teaser, extensions) if article.has_teaser else html
    logger.debug("Rendered %s (%d chars)", article.slug, len(html))
    return RenderedArticle(
        slug=article.slug,
        title=article.title,
        html=html,
        excerpt_html=excerpt_html,
        has_teaser=article.has_teaser,
    )
