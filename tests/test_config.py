"""Tests for configuration loading."""

import pytest
from pathlib import Path

from folio.config import DEFAULT_EXTENSIONS, DEFAULT_MORE_MARKER, load_config

_ENV_KEYS = [
    "FOLIO_CONTENT_DIR",
    "FOLIO_MORE_MARKER",
    "FOLIO_AUTHOR",
    "FOLIO_OUTPUT_DIR",
    "FOLIO_INCLUDE_DRAFTS",
    "FOLIO_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self):
        config = load_config()
        assert config.content.dir == Path("articles")
        assert config.content.more_marker == DEFAULT_MORE_MARKER
        assert config.build.output_dir == Path("_site")
        assert config.build.include_drafts is False
        assert config.build.markdown_extensions == DEFAULT_EXTENSIONS
        assert config.log_level == "INFO"

    def test_default_extensions_not_shared(self):
        config = load_config()
        config.build.markdown_extensions.append("toc")
        assert "toc" not in DEFAULT_EXTENSIONS

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FOLIO_CONTENT_DIR", "/srv/posts")
        monkeypatch.setenv("FOLIO_INCLUDE_DRAFTS", "yes")
        monkeypatch.setenv("FOLIO_LOG_LEVEL", "DEBUG")

        config = load_config()
        assert config.content.dir == Path("/srv/posts")
        assert config.build.include_drafts is True
        assert config.log_level == "DEBUG"

    def test_toml_file(self, tmp_path: Path):
        toml_path = tmp_path / "custom.toml"
        toml_path.write_text("""
log_level = "WARNING"

[content]
dir = "posts"
more_marker = "<!--more-->"
default_author = "Jane Doe"

[build]
output_dir = "public"
include_drafts = true
markdown_extensions = ["fenced_code"]
""")
        config = load_config(toml_path)
        assert config.content.dir == Path("posts")
        assert config.content.more_marker == "<!--more-->"
        assert config.content.default_author == "Jane Doe"
        assert config.build.output_dir == Path("public")
        assert config.build.include_drafts is True
        assert config.build.markdown_extensions == ["fenced_code"]
        assert config.log_level == "WARNING"

    def test_cwd_folio_toml_discovered(self, tmp_path: Path):
        (tmp_path / "folio.toml").write_text('[content]\ndir = "blog"\n')
        config = load_config()
        assert config.content.dir == Path("blog")

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("FOLIO_OUTPUT_DIR", "dist")
        monkeypatch.setenv("FOLIO_INCLUDE_DRAFTS", "0")

        toml_path = tmp_path / "folio.toml"
        toml_path.write_text('[build]\noutput_dir = "public"\ninclude_drafts = true\n')
        config = load_config(toml_path)
        assert config.build.output_dir == Path("dist")  # env wins
        assert config.build.include_drafts is False
