"""Export rendered articles: one HTML page per article plus index.json."""

from __future__ import annotations

import html
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from folio.render import render_article

if TYPE_CHECKING:
    from folio.articles.store import ArticleStore

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<article>
<header>
<h1>{title}</h1>
<p class="meta">{byline}</p>
</header>
{body}
</article>
</body>
</html>
"""


def _byline(author: str, created: str | None, tags: list[str]) -> str:
    parts = [p for p in (author, created) if p]
    if tags:
        parts.append(", ".join(tags))
    return html.escape(" · ".join(parts))


def build_site(
    store: ArticleStore,
    output_dir: Path,
    include_drafts: bool = False,
    extensions: list[str] | None = None,
) -> int:
    """Write <slug>.html for each article and an index.json summary. Returns count."""
    output_dir.mkdir(parents=True, exist_ok=True)
    summaries: list[dict] = []
    for article in store.articles(include_drafts=include_drafts):
        rendered = render_article(article, extensions)
        created = article.created_at.isoformat() if article.created_at else None
        page = PAGE_TEMPLATE.format(
            title=html.escape(article.title),
            byline=_byline(article.author, created[:10] if created else None, article.tags),
            body=rendered.html,
        )
        (output_dir / f"{article.slug}.html").write_text(page, encoding="utf-8")
        summaries.append(
            {
                "slug": article.slug,
                "title": article.title,
                "created_at": created,
                "author": article.author,
                "tags": article.tags,
                "publish": article.publish,
                "excerpt_html": rendered.excerpt_html,
            }
        )
    (output_dir / "index.json").write_text(
        json.dumps(summaries, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    logger.info("Wrote %d articles to %s", len(summaries), output_dir)
    return len(summaries)
