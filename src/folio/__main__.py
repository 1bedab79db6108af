"""Entry point: python -m folio <command>

- check:   Validate every article's front matter and body
- list:    Published articles, newest first (--drafts, --tag)
- tags:    Tag counts
- search:  Articles matching a query
- show:    Metadata and teaser of one article
- render:  HTML for one article
- build:   Export rendered pages + index.json
- new:     Create a draft
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from folio.config import FolioConfig, load_config


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="folio", description="Article corpus toolkit")
    parser.add_argument("--config", type=Path, help="path to folio.toml")
    parser.add_argument("--content", type=Path, help="content directory (overrides config)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("check", help="validate all articles")

    p = sub.add_parser("list", help="list articles")
    p.add_argument("--drafts", action="store_true", help="include unpublished articles")
    p.add_argument("--tag", help="only articles with this tag")

    p = sub.add_parser("tags", help="tag counts")
    p.add_argument("--drafts", action="store_true")

    p = sub.add_parser("search", help="search titles, tags and bodies")
    p.add_argument("query")
    p.add_argument("--drafts", action="store_true")

    p = sub.add_parser("show", help="metadata and teaser of one article")
    p.add_argument("slug")

    p = sub.add_parser("render", help="render one article to HTML")
    p.add_argument("slug")
    p.add_argument("--excerpt", action="store_true", help="render only the teaser")

    p = sub.add_parser("build", help="export rendered articles")
    p.add_argument("--output", type=Path)
    p.add_argument("--drafts", action="store_true")

    p = sub.add_parser("new", help="create a draft")
    p.add_argument("title")
    p.add_argument("--author")
    p.add_argument("--tag", action="append", default=[], dest="tags")
    return parser


def _format_line(article) -> str:
    day = article.created_at.date().isoformat() if article.created_at else "----------"
    flag = "" if article.publish else " (draft)"
    tags = f"  [{', '.join(article.tags)}]" if article.tags else ""
    return f"{day}  {article.slug}  {article.title}{flag}{tags}"


def run(argv: list[str] | None = None) -> int:
    """Parse arguments, dispatch a command, return the exit code."""
    args = _build_parser().parse_args(argv)
    config: FolioConfig = load_config(args.config)
    if args.content:
        config.content.dir = args.content
    _setup_logging(config.log_level)

    from folio.articles.store import ArticleStore

    store = ArticleStore(config.content.dir, config.content.more_marker)

    if args.command == "check":
        from folio.articles.validation import has_errors, validate_corpus

        issues = validate_corpus(store)
        for issue in issues:
            print(issue)
        errors = sum(1 for i in issues if i.severity == "error")
        print(f"{len(store)} articles, {errors} errors, {len(issues) - errors} warnings")
        return 1 if has_errors(issues) else 0

    if args.command == "list":
        for article in store.articles(include_drafts=args.drafts, tag=args.tag):
            print(_format_line(article))
        return 0

    if args.command == "tags":
        for tag, count in store.tags(include_drafts=args.drafts).items():
            print(f"{count:4d}  {tag}")
        return 0

    if args.command == "search":
        for article in store.search(args.query, include_drafts=args.drafts):
            print(_format_line(article))
        return 0

    if args.command in ("show", "render"):
        article = store.find(args.slug)
        if article is None:
            print(f"No article with slug '{args.slug}'", file=sys.stderr)
            return 1
        if args.command == "show":
            print(f"title:      {article.title}")
            print(f"created_at: {article.created_at.isoformat() if article.created_at else '-'}")
            print(f"publish:    {'true' if article.publish else 'false'}")
            print(f"author:     {article.author}")
            print(f"tags:       {', '.join(article.tags)}")
            if article.code_languages:
                print(f"code:       {', '.join(lang or '(none)' for lang in article.code_languages)}")
            print()
            print(article.teaser)
            return 0

        from folio.render import render_article

        rendered = render_article(article, config.build.markdown_extensions)
        print(rendered.excerpt_html if args.excerpt else rendered.html)
        return 0

    if args.command == "build":
        from folio.site import build_site

        count = build_site(
            store,
            args.output or config.build.output_dir,
            include_drafts=args.drafts or config.build.include_drafts,
            extensions=config.build.markdown_extensions,
        )
        print(f"Built {count} articles")
        return 0

    if args.command == "new":
        try:
            article = store.create(
                args.title,
                author=args.author or config.content.default_author,
                tags=args.tags,
            )
        except ValueError as e:
            print(f"Cannot create article: {e}", file=sys.stderr)
            return 1
        print(article.path)
        return 0

    return 2


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
