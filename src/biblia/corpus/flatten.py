"""
Flattening Pipeline
===================

Walks the corpus tree and yields one Record per verse, carrying the
book and testament context down to every chapter and verse. Records come
out in document order: books as they appear, then chapters, then verses.

The walk is a generator so the sink can consume it without holding the
whole table in memory. Calling ``flatten`` again on the same corpus
yields the same sequence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping

from .errors import UnclassifiedBook
from .source import Corpus
from .testament import Testament


@dataclass(frozen=True)
class Record:
    """A single verse with its full context."""
    testament: Testament
    book: str
    chapter: int
    verse: int
    text: str

    @property
    def reference(self) -> str:
        return f"{self.book} {self.chapter}:{self.verse}"


def flatten(
    corpus: Corpus,
    testament_map: Mapping[str, Testament],
) -> Iterator[Record]:
    """
    Yield every verse of ``corpus`` as a Record.

    Verse text is passed through unchanged. Chapter and verse numbers are
    1-based positions in the source.

    Raises:
        UnclassifiedBook: a book has no entry in ``testament_map``.
    """
    for book in corpus.books:
        try:
            testament = testament_map[book.name]
        except KeyError:
            raise UnclassifiedBook(book.name) from None

        for chapter_num, chapter in enumerate(book.chapters, 1):
            for verse_num, text in enumerate(chapter.verses, 1):
                yield Record(
                    testament=testament,
                    book=book.name,
                    chapter=chapter_num,
                    verse=verse_num,
                    text=text,
                )
