# ABOUTME: Shared pytest fixtures for shelfmark tests.
# ABOUTME: Provides sample EPUB files, built schedule directories, and fake candidate sources.

from pathlib import Path

import pytest
from ebooklib import epub

from shelfmark.classification.builder import build_schedules
from shelfmark.classification.schedule import ScheduleIndex
from shelfmark.metadata.types import SourceRecord
from tests.fixtures.source_responses import ISBN


class FakeSource:
    """Candidate source returning a canned record (or None) for any ISBN."""

    def __init__(
        self,
        name: str,
        record: SourceRecord | None = None,
        *,
        reports_authors: bool = True,
    ) -> None:
        self._name = name
        self._record = record
        self._reports_authors = reports_authors
        self.requests: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def reports_authors(self) -> bool:
        return self._reports_authors

    def fetch(self, isbn: str) -> SourceRecord | None:
        self.requests.append(isbn)
        return self._record


def make_epub(
    path: Path,
    *,
    title: str,
    authors: list[str] | None = None,
    isbn: str | None = None,
) -> Path:
    """Write a minimal valid EPUB with the given metadata."""
    book = epub.EpubBook()
    book.set_identifier(f"urn:isbn:{isbn}" if isbn else "shelfmark-test-id")
    book.set_title(title)
    book.set_language("en")
    for author in authors or []:
        book.add_author(author)

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    # Add navigation
    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def classification_xml(fixtures_dir: Path) -> Path:
    """A small MARCXML classification dataset."""
    return fixtures_dir / "classification_sample.xml"


@pytest.fixture
def schedule_dir(tmp_path: Path, classification_xml: Path) -> Path:
    """A schedule directory built from the sample classification dataset."""
    target = tmp_path / "schedules"
    build_schedules(classification_xml, target)
    return target


@pytest.fixture
def schedule_index(schedule_dir: Path) -> ScheduleIndex:
    """An index over the built sample schedules."""
    return ScheduleIndex(schedule_dir)


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a minimal valid EPUB with a known ISBN and metadata."""
    return make_epub(
        tmp_path / "learning_python.epub",
        title="Lerning Pyton",
        authors=["Unknown"],
        isbn=ISBN,
    )


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """Create a corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def minimal_epub(tmp_path: Path) -> Path:
    """Create an EPUB with minimal metadata (only title, no ISBN)."""
    return make_epub(tmp_path / "minimal.epub", title="Untitled Book")
