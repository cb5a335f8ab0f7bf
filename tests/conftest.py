"""Shared pytest fixtures for footnote_munger tests."""

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

CHAPTER_FILE = "part0014.html"
FOOTNOTE_FILE = "part0020.html"


def make_tree(html: str) -> BeautifulSoup:
    """Parse an HTML snippet into a bare document tree, without normalization."""
    return BeautifulSoup(html, "html.parser")


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def chapter_html(fixtures_dir: Path) -> str:
    """Load the Calibre-style chapter fixture."""
    return (fixtures_dir / CHAPTER_FILE).read_text(encoding="utf-8")


@pytest.fixture
def footnotes_html(fixtures_dir: Path) -> str:
    """Load the Calibre-style footnote container fixture."""
    return (fixtures_dir / FOOTNOTE_FILE).read_text(encoding="utf-8")


@pytest.fixture
def input_dir(tmp_path: Path, chapter_html: str, footnotes_html: str) -> Path:
    """A directory laid out like the command line's default input directory."""
    directory = tmp_path / "input"
    directory.mkdir()
    (directory / CHAPTER_FILE).write_text(chapter_html, encoding="utf-8")
    (directory / FOOTNOTE_FILE).write_text(footnotes_html, encoding="utf-8")
    return directory


@pytest.fixture
def messages() -> list:
    """Collect log messages; pass ``messages.append`` as the log callable."""
    return []
