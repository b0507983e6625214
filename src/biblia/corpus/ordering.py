"""
Categorical Order Assigner
==========================

Attaches canonical ordering to the flattened records so that any later
grouping or sorting by book or testament follows biblical order rather
than alphabetical order ("Amós" must not sort before "Gênesis").

BookOrder is taken once from the corpus itself, never recomputed from
the records. The records keep their physical order; consumers that need
sorted output use ``OrderedRecords.sort_key``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from .errors import OrderMismatch
from .flatten import Record
from .source import Corpus
from .testament import TESTAMENT_ORDER, Testament

logger = logging.getLogger(__name__)


class BookOrder:
    """Total order over book names, equal to their appearance order."""

    def __init__(self, names: Sequence[str]):
        names = tuple(names)
        rank: dict[str, int] = {}
        for i, name in enumerate(names):
            if name in rank:
                raise OrderMismatch(f"Book {name!r} listed twice in book order")
            rank[name] = i
        self._names = names
        self._rank = rank

    @classmethod
    def from_corpus(cls, corpus: Corpus) -> BookOrder:
        return cls(corpus.book_names)

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    def index(self, name: str) -> int:
        try:
            return self._rank[name]
        except KeyError:
            raise OrderMismatch(f"Book {name!r} is not in book order") from None

    def __contains__(self, name: object) -> bool:
        return name in self._rank

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BookOrder):
            return NotImplemented
        return self._names == other._names

    def __repr__(self) -> str:
        return f"BookOrder({list(self._names)!r})"


@dataclass
class OrderedRecords:
    """
    Record stream annotated with book and testament order.

    Iterating checks that every record's book is in ``book_order`` and,
    once the stream is exhausted, that every book in ``book_order`` was
    seen. Either violation raises OrderMismatch.
    """
    records: Iterable[Record]
    book_order: BookOrder
    testament_order: tuple[Testament, ...] = TESTAMENT_ORDER
    _testament_rank: dict[Testament, int] = field(init=False, repr=False)

    def __post_init__(self):
        if len(set(self.testament_order)) != len(self.testament_order):
            raise OrderMismatch("Testament order lists a testament twice")
        self._testament_rank = {t: i for i, t in enumerate(self.testament_order)}

    def __iter__(self) -> Iterator[Record]:
        seen: set[str] = set()
        for rec in self.records:
            if rec.book not in self.book_order:
                raise OrderMismatch(
                    f"Record {rec.reference} references a book absent from book order"
                )
            seen.add(rec.book)
            yield rec

        missing = [name for name in self.book_order if name not in seen]
        if missing:
            raise OrderMismatch(f"Books in book order without any verse: {missing}")
        logger.debug(f"Order check passed for {len(seen)} books")

    def sort_key(self, record: Record) -> tuple[int, int, int, int]:
        """Key sorting records by (testament, book, chapter, verse)."""
        return (
            self._testament_rank[record.testament],
            self.book_order.index(record.book),
            record.chapter,
            record.verse,
        )

    @property
    def book_labels(self) -> list[str]:
        return list(self.book_order.names)

    @property
    def testament_labels(self) -> list[str]:
        return [t.label for t in self.testament_order]


def assign_order(
    records: Iterable[Record],
    book_order: BookOrder,
    testament_order: Sequence[Testament] = TESTAMENT_ORDER,
) -> OrderedRecords:
    """Annotate a record stream with canonical book and testament order."""
    return OrderedRecords(
        records=records,
        book_order=book_order,
        testament_order=tuple(testament_order),
    )
