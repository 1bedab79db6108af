"""Structural checks for article front matter and bodies.

Validation never raises: each rule yields a ValidationIssue. Errors mean the
article cannot be published as-is; warnings point at likely authoring slips.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from folio.articles.model import Article, marker_pattern, parse_timestamp, unclosed_fence
from folio.config import DEFAULT_MORE_MARKER

if TYPE_CHECKING:
    from folio.articles.store import ArticleStore

KNOWN_FIELDS = {"title", "created_at", "publish", "author", "tags", "newsletter", "image", "img"}


@dataclass(frozen=True)
class ValidationIssue:
    """One problem found in one article."""

    path: Path
    field: str
    message: str
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        return f"{self.path}: [{self.severity}] {self.field}: {self.message}"


def _required_string(path: Path, metadata: dict, key: str) -> list[ValidationIssue]:
    if key not in metadata or metadata[key] is None:
        return [ValidationIssue(path, key, "missing")]
    value = metadata[key]
    if not isinstance(value, str):
        return [ValidationIssue(path, key, f"must be a string, got {type(value).__name__}")]
    if not value.strip():
        return [ValidationIssue(path, key, "must not be empty")]
    return []


def validate_metadata(path: Path, metadata: dict) -> list[ValidationIssue]:
    """Check one front-matter mapping."""
    issues: list[ValidationIssue] = []
    issues += _required_string(path, metadata, "title")
    issues += _required_string(path, metadata, "author")

    if metadata.get("created_at") is None:
        issues.append(ValidationIssue(path, "created_at", "missing"))
    else:
        try:
            parse_timestamp(metadata["created_at"])
        except ValueError as e:
            issues.append(ValidationIssue(path, "created_at", str(e)))

    if "publish" not in metadata:
        issues.append(ValidationIssue(path, "publish", "missing"))
    elif not isinstance(metadata["publish"], bool):
        issues.append(
            ValidationIssue(path, "publish", f"must be true or false, got {metadata['publish']!r}")
        )

    tags = metadata.get("tags")
    if tags is None:
        issues.append(ValidationIssue(path, "tags", "missing"))
    elif not isinstance(tags, list):
        issues.append(ValidationIssue(path, "tags", f"must be a list, got {type(tags).__name__}"))
    else:
        if any(not isinstance(t, str) or not t.strip() for t in tags):
            issues.append(ValidationIssue(path, "tags", "every tag must be a non-empty string"))
        seen: set[str] = set()
        for t in tags:
            if isinstance(t, str) and t in seen:
                issues.append(ValidationIssue(path, "tags", f"duplicate tag {t!r}", "warning"))
            seen.add(t if isinstance(t, str) else repr(t))

    for key in ("newsletter", "image", "img"):
        value = metadata.get(key)
        if value is not None and not isinstance(value, str):
            issues.append(
                ValidationIssue(path, key, f"must be a string, got {type(value).__name__}")
            )

    for key in sorted(set(metadata) - KNOWN_FIELDS, key=str):
        issues.append(ValidationIssue(path, str(key), "unknown field", "warning"))
    return issues


def validate_body(
    path: Path, body: str, more_marker: str = DEFAULT_MORE_MARKER
) -> list[ValidationIssue]:
    """Check the markdown body."""
    issues: list[ValidationIssue] = []
    if not body.strip():
        issues.append(ValidationIssue(path, "body", "empty", "warning"))
        return issues
    markers = len(marker_pattern(more_marker).findall(body))
    if markers > 1:
        issues.append(
            ValidationIssue(path, "body", f"{markers} more markers, only the first splits", "warning")
        )
    if unclosed_fence(body):
        issues.append(ValidationIssue(path, "body", "unclosed code fence", "warning"))
    return issues


def validate_article(article: Article, more_marker: str | None = None) -> list[ValidationIssue]:
    """Metadata and body checks. The marker defaults to the one the article was loaded with."""
    marker = article.more_marker if more_marker is None else more_marker
    return validate_metadata(article.path, article.metadata) + validate_body(
        article.path, article.body, marker
    )


def validate_corpus(store: ArticleStore) -> list[ValidationIssue]:
    """Validate every article, parse failures, and cross-article clashes."""
    issues: list[ValidationIssue] = [
        ValidationIssue(Path(path), "front_matter", message)
        for path, message in sorted(store.failures.items())
    ]
    articles = sorted(store.articles(include_drafts=True), key=lambda a: str(a.path))

    by_title: dict[str, list[Article]] = defaultdict(list)
    by_slug: dict[str, list[Article]] = defaultdict(list)
    for article in articles:
        issues += validate_article(article)
        if article.title:
            by_title[article.title.casefold()].append(article)
        by_slug[article.slug].append(article)

    for group in by_title.values():
        for article in group[1:]:
            issues.append(
                ValidationIssue(
                    article.path, "title", f"same title as {group[0].path}", "warning"
                )
            )
    for slug, group in by_slug.items():
        for article in group[1:]:
            issues.append(
                ValidationIssue(article.path, "slug", f"{slug!r} already used by {group[0].path}")
            )
    return issues


def has_errors(issues: list[ValidationIssue]) -> bool:
    return any(i.severity == "error" for i in issues)
