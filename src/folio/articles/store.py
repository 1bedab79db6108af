"""Article corpus: in-memory index over a directory of markdown files.

Markdown files are the source of truth. Each file carries YAML front matter
(title, created_at, publish, author, tags). The index is built once at
startup and updated incrementally on writes, so listing and filtering never
rescan the disk.
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path

from folio.articles.model import Article, ArticleParseError, load_article
from folio.config import DEFAULT_MORE_MARKER

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def slugify(title: str) -> str:
    """Lowercase ASCII slug: accents folded, runs of other chars to hyphens."""
    text = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.strip().lower())
    text = re.sub(r"-{2,}", "-", text).strip("-")
    return text or "untitled"


def _sort_key(article: Article) -> tuple[bool, datetime]:
    """Descending key: dated before undated. Naive timestamps compare as UTC."""
    dt = article.created_at
    if dt is None:
        return (False, _EPOCH)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (True, dt)


def _cell(text: str) -> str:
    """Escape pipes so a value stays inside one table cell."""
    return text.replace("|", "\\|")


class ArticleStore:
    """Read/write access to a directory of articles."""

    def __init__(self, root: Path, more_marker: str = DEFAULT_MORE_MARKER) -> None:
        self.root = root
        self.more_marker = more_marker
        self._index: dict[str, Article] = {}
        self.failures: dict[str, str] = {}
        self._build_index()

    # ── Index ─────────────────────────────────────────────────

    def _build_index(self) -> None:
        """Scan the content directory once and parse every article."""
        self._index.clear()
        self.failures.clear()
        if not self.root.is_dir():
            logger.warning("Content directory %s does not exist", self.root)
            return
        for md_file in sorted(self.root.rglob("*.md")):
            self.reload(md_file)
        logger.info(
            "Indexed %d articles from %s (%d failed)",
            len(self._index),
            self.root,
            len(self.failures),
        )

    def reload(self, path: Path) -> Article | None:
        """Re-read a single file into the index, or record why it failed."""
        key = str(path)
        self._index.pop(key, None)
        self.failures.pop(key, None)
        if not path.exists():
            return None
        try:
            article = load_article(path, self.more_marker)
        except ArticleParseError as e:
            logger.warning("Skipping %s: %s", path, e)
            self.failures[key] = str(e)
            return None
        self._index[key] = article
        return article

    def __len__(self) -> int:
        return len(self._index)

    # ── Queries ───────────────────────────────────────────────

    def articles(self, include_drafts: bool = False, tag: str | None = None) -> list[Article]:
        """Articles newest first, optionally including drafts or filtered by tag."""
        selected = [
            a
            for a in self._index.values()
            if (include_drafts or a.publish) and (tag is None or tag in a.tags)
        ]
        # stable sort: equal timestamps stay in slug order
        selected.sort(key=lambda a: a.slug)
        selected.sort(key=_sort_key, reverse=True)
        return selected

    def published(self) -> list[Article]:
        return self.articles()

    def drafts(self) -> list[Article]:
        return [a for a in self.articles(include_drafts=True) if not a.publish]

    def find(self, slug: str) -> Article | None:
        """Look up an article by its slug (file stem)."""
        for article in self._index.values():
            if article.slug == slug:
                return article
        return None

    def tags(self, include_drafts: bool = False) -> dict[str, int]:
        """Tag -> article count, most used first, then alphabetical."""
        counts: Counter[str] = Counter()
        for article in self.articles(include_drafts=include_drafts):
            counts.update(dict.fromkeys(article.tags, 1))
        return dict(sorted(counts.items(), key=lambda kv: (-kv[1], kv[0])))

    def search(self, query: str, include_drafts: bool = False) -> list[Article]:
        """Case-insensitive match on title and tags first, then body."""
        q = query.lower().strip()
        if not q:
            return []
        head: list[Article] = []
        tail: list[Article] = []
        for article in self.articles(include_drafts=include_drafts):
            if q in article.title.lower() or any(q in t.lower() for t in article.tags):
                head.append(article)
            elif q in article.body.lower():
                tail.append(article)
        return head + tail

    # ── Writes ────────────────────────────────────────────────

    def _resolve_path(self, title: str) -> Path:
        """New file path for a title, with numeric suffixes on collision."""
        slug = slugify(title)
        path = self.root / f"{slug}.md"
        counter = 2
        while path.exists():
            path = self.root / f"{slug}-{counter}.md"
            counter += 1
        return path

    def _render_new_article(
        self, title: str, author: str, tags: list[str], body: str
    ) -> str:
        """Markdown source for a new draft."""
        ts = datetime.now().astimezone().isoformat(timespec="seconds")
        text = body.strip() or f"Teaser for {title}.\n\n{self.more_marker}\n\nRest of the article."
        return (
            f"---\n"
            f"title: {json.dumps(title, ensure_ascii=False)}\n"
            f"created_at: {ts}\n"
            f"publish: false\n"
            f"author: {json.dumps(author, ensure_ascii=False)}\n"
            f"tags: {json.dumps(tags, ensure_ascii=False)}\n"
            f"---\n\n"
            f"{text}\n"
        )

    def create(
        self,
        title: str,
        author: str = "",
        tags: list[str] | None = None,
        body: str = "",
    ) -> Article:
        """Write a new unpublished article and add it to the index."""
        if not title.strip():
            raise ValueError("title must not be empty")
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._resolve_path(title)
        path.write_text(
            self._render_new_article(title.strip(), author, list(tags or []), body),
            encoding="utf-8",
        )
        article = self.reload(path)
        if article is None:
            raise ArticleParseError(self.failures.get(str(path), f"cannot parse {path}"))
        logger.info("Created draft %s (%s)", article.slug, path)
        return article

    # ── Manifest ──────────────────────────────────────────────

    def manifest(self, include_drafts: bool = True) -> str:
        """Markdown table summarizing the corpus."""
        rows = self.articles(include_drafts=include_drafts)
        if not rows:
            return ""
        out = "| Date | Slug | Title | Tags | Status |\n|------|------|-------|------|--------|\n"
        for a in rows:
            day = a.created_at.date().isoformat() if a.created_at else "-"
            status = "published" if a.publish else "draft"
            title = _cell(a.title)
            tags = _cell(", ".join(a.tags))
            out += f"| {day} | {_cell(a.slug)} | {title} | {tags} | {status} |\n"
        return out
