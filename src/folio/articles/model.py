"""Article record, front-matter coercion and teaser splitting."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path

import frontmatter
import yaml

from folio.config import DEFAULT_MORE_MARKER

_FENCE_RE = re.compile(r"^[ \t]*(?P<fence>`{3,}|~{3,})[ \t]*(?P<lang>[\w+#.-]*)", re.MULTILINE)

_TIMESTAMP_FORMATS = (
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
)


class ArticleParseError(ValueError):
    """Raised when an article file cannot be read or its front matter parsed."""


def marker_pattern(marker: str) -> re.Pattern[str]:
    """Compile the more marker, matching any whitespace inside it loosely."""
    parts = marker.strip().split()
    return re.compile(r"\s*".join(re.escape(p) for p in parts) or re.escape(marker))


def parse_timestamp(value: object) -> datetime | None:
    """Coerce a front-matter timestamp. Raises ValueError on unparseable input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str):
        raise ValueError(f"unsupported timestamp type: {type(value).__name__}")
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"unparseable timestamp: {value!r}")


def _scan_fences(body: str) -> tuple[list[str], bool]:
    """Walk fence lines. Returns (language hints in order, whether one is left open)."""
    languages: list[str] = []
    open_fence: str | None = None
    for match in _FENCE_RE.finditer(body):
        fence = match.group("fence")
        if open_fence is None:
            open_fence = fence
            languages.append(match.group("lang"))
        elif fence[0] == open_fence[0] and len(fence) >= len(open_fence) and not match.group("lang"):
            open_fence = None
    return languages, open_fence is not None


def code_languages(body: str) -> list[str]:
    """Language hints of fenced code blocks, in order ("" for untagged blocks)."""
    return _scan_fences(body)[0]


def unclosed_fence(body: str) -> bool:
    return _scan_fences(body)[1]


def _coerce_tags(value: object) -> list[str]:
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if t is not None and str(t).strip()]
    return []


def _coerce_str(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_str(value: object) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    return str(value)


@dataclass
class Article:
    """A single markdown article with its front matter."""

    path: Path
    title: str
    created_at: datetime | None
    publish: bool
    author: str
    tags: list[str]
    body: str
    newsletter: str | None = None
    image: str | None = None
    metadata: dict = field(default_factory=dict)
    more_marker: str = DEFAULT_MORE_MARKER

    @property
    def slug(self) -> str:
        return self.path.stem

    def _split(self) -> list[str]:
        return marker_pattern(self.more_marker).split(self.body, maxsplit=1)

    @property
    def has_teaser(self) -> bool:
        return len(self._split()) == 2

    @property
    def teaser(self) -> str:
        return self._split()[0].strip()

    @property
    def full_body(self) -> str:
        parts = self._split()
        if len(parts) == 1:
            return self.body
        return f"{parts[0].rstrip()}\n\n{parts[1].lstrip()}".strip()

    @property
    def code_languages(self) -> list[str]:
        return code_languages(self.body)

    @classmethod
    def from_post(
        cls, path: Path, metadata: dict, body: str, more_marker: str = DEFAULT_MORE_MARKER
    ) -> Article:
        """Build an article from parsed front matter, tolerating bad fields."""
        try:
            created_at = parse_timestamp(metadata.get("created_at"))
        except ValueError:
            created_at = None
        image = metadata.get("image")
        if image is None:
            image = metadata.get("img")
        return cls(
            path=path,
            title=_coerce_str(metadata.get("title")),
            created_at=created_at,
            publish=metadata.get("publish") is True,
            author=_coerce_str(metadata.get("author")),
            tags=_coerce_tags(metadata.get("tags")),
            body=body.strip(),
            newsletter=_optional_str(metadata.get("newsletter")),
            image=_optional_str(image),
            metadata=metadata,
            more_marker=more_marker,
        )


def load_article(path: Path, more_marker: str = DEFAULT_MORE_MARKER) -> Article:
    """Read one markdown file with YAML front matter."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ArticleParseError(f"cannot read {path}: {e}") from e

    handler = frontmatter.YAMLHandler()
    if not handler.detect(text):
        return Article.from_post(path, {}, text, more_marker)
    try:
        fm, content = handler.split(text)
    except ValueError as e:
        raise ArticleParseError(f"unterminated front matter in {path}") from e
    try:
        metadata = handler.load(fm)
    except yaml.YAMLError as e:
        raise ArticleParseError(f"invalid front matter in {path}: {e}") from e
    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        raise ArticleParseError(
            f"front matter in {path} is not a mapping (got {type(metadata).__name__})"
        )
    return Article.from_post(path, metadata, content, more_marker)
