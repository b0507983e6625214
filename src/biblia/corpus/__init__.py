"""
Corpus Package
==============

Ingestion of the Bible text: load the XML source, classify books into
testaments, flatten to one record per verse, attach canonical ordering
and persist the result.

Usage::

    from biblia.corpus import load_corpus, classify, flatten, BookOrder
    from biblia.corpus import assign_order, write_records

    corpus = load_corpus(NVI_URL)
    records = flatten(corpus, classify(corpus.book_names, "Malaquias"))
    ordered = assign_order(records, BookOrder.from_corpus(corpus))
    write_records(ordered, "datasets/bible.csv")
"""

from .errors import (
    CorpusError,
    SourceUnavailable,
    MalformedSource,
    BoundaryNotFound,
    UnclassifiedBook,
    OrderMismatch,
)
from .source import NVI_URL, Book, Chapter, Corpus, fetch_source, parse_corpus, load_corpus
from .testament import DEFAULT_BOUNDARY, TESTAMENT_ORDER, Testament, classify
from .flatten import Record, flatten
from .ordering import BookOrder, OrderedRecords, assign_order
from .sink import DEFAULT_OUTPUT, HEADER, read_records, write_records

__all__ = [
    "CorpusError",
    "SourceUnavailable",
    "MalformedSource",
    "BoundaryNotFound",
    "UnclassifiedBook",
    "OrderMismatch",
    "NVI_URL",
    "Book",
    "Chapter",
    "Corpus",
    "fetch_source",
    "parse_corpus",
    "load_corpus",
    "DEFAULT_BOUNDARY",
    "TESTAMENT_ORDER",
    "Testament",
    "classify",
    "Record",
    "flatten",
    "BookOrder",
    "OrderedRecords",
    "assign_order",
    "DEFAULT_OUTPUT",
    "HEADER",
    "read_records",
    "write_records",
]
