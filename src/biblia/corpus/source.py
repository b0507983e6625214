"""
Source Loader
=============

Fetches the Bible as a hierarchical XML document and parses it into an
immutable tree of books, chapters and verses.

Expected layout (tag names are not checked, only the nesting depth)::

    <bible>
      <book name="Gênesis">
        <chapter>
          <verse>No princípio Deus criou os céus e a terra.</verse>
          ...
        </chapter>
        ...
      </book>
      ...
    </bible>

The default source is the Nova Versão Internacional published in the
thiagobodruk/biblia repository. Locators starting with ``http://`` or
``https://`` are fetched with a single GET; ``file://`` URIs and plain
paths are read from the local filesystem.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from .errors import MalformedSource, SourceUnavailable

logger = logging.getLogger(__name__)

NVI_URL = "https://raw.githubusercontent.com/thiagobodruk/biblia/master/xml/nvi.min.xml"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Chapter:
    """A chapter: verse texts in order, verse number = position + 1."""
    verses: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.verses)


@dataclass(frozen=True)
class Book:
    """A book of the Bible, identified by its name."""
    name: str
    chapters: tuple[Chapter, ...]

    @property
    def verse_count(self) -> int:
        return sum(len(c) for c in self.chapters)


@dataclass(frozen=True)
class Corpus:
    """The parsed source document: books in document order."""
    books: tuple[Book, ...]

    @property
    def book_names(self) -> list[str]:
        return [b.name for b in self.books]

    @property
    def verse_count(self) -> int:
        return sum(b.verse_count for b in self.books)

    def summary(self) -> dict:
        return {
            "books": len(self.books),
            "chapters": sum(len(b.chapters) for b in self.books),
            "verses": self.verse_count,
            "book_names": self.book_names,
        }


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _is_url(locator: str) -> bool:
    return locator.startswith(("http://", "https://"))


def _local_path(locator: str) -> Path:
    if locator.startswith("file:"):
        return Path(url2pathname(urlparse(locator).path))
    return Path(locator)


def fetch_source(locator: str | Path, timeout: Optional[float] = None) -> bytes:
    """Retrieve the raw bytes behind a URL or file path."""
    locator = str(locator)

    if _is_url(locator):
        logger.info(f"Fetching corpus from {locator}")
        try:
            resp = requests.get(locator, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise SourceUnavailable(f"Failed to fetch {locator}: {e}") from e
        return resp.content

    logger.info(f"Reading corpus from {locator}")
    try:
        return _local_path(locator).read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"Failed to read {locator}: {e}") from e


def parse_corpus(data: bytes | str) -> Corpus:
    """
    Parse an XML document into a Corpus.

    Raises MalformedSource when the document does not parse, when a book
    has no ``name`` attribute, when a chapter holds no verse elements or
    text of its own, when a verse has child elements, or when two books
    share a name.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise MalformedSource(f"Could not parse corpus XML: {e}") from e

    books: list[Book] = []
    seen: set[str] = set()

    for b_idx, book_el in enumerate(root, 1):
        name = book_el.get("name")
        if name is None:
            raise MalformedSource(
                f"Book element #{b_idx} <{book_el.tag}> has no 'name' attribute"
            )
        if name in seen:
            raise MalformedSource(f"Duplicate book name {name!r}")
        seen.add(name)

        chapters = []
        for c_idx, chapter_el in enumerate(book_el, 1):
            if len(chapter_el) == 0 or (chapter_el.text or "").strip():
                raise MalformedSource(
                    f"{name} chapter #{c_idx} <{chapter_el.tag}> is not a list "
                    "of verses; expected book > chapter > verse nesting"
                )
            verses = []
            for v_idx, verse_el in enumerate(chapter_el, 1):
                if len(verse_el):
                    raise MalformedSource(
                        f"{name} {c_idx}:{v_idx} has nested elements; "
                        "expected a plain text verse"
                    )
                verses.append(verse_el.text or "")
            chapters.append(Chapter(verses=tuple(verses)))

        books.append(Book(name=name, chapters=tuple(chapters)))

    if not books:
        raise MalformedSource(f"Root element <{root.tag}> contains no books")

    return Corpus(books=tuple(books))


def load_corpus(locator: str | Path, timeout: Optional[float] = None) -> Corpus:
    """Fetch and parse the corpus in one step."""
    corpus = parse_corpus(fetch_source(locator, timeout=timeout))
    logger.info(
        f"Parsed {len(corpus.books)} books, {corpus.verse_count} verses"
    )
    return corpus
