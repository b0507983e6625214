"""
Corpus Errors
=============

Failure kinds raised while ingesting the Bible corpus. None of them is
recoverable within a run: the pipeline aborts and the output file is
left untouched.
"""


class CorpusError(Exception):
    """Base class for all ingestion failures."""


class SourceUnavailable(CorpusError):
    """The source locator could not be retrieved (network or file error)."""


class MalformedSource(CorpusError):
    """The source document failed to parse or has the wrong nesting."""


class BoundaryNotFound(CorpusError):
    """The testament boundary book is absent from the book list."""

    def __init__(self, boundary: str):
        super().__init__(f"Boundary book {boundary!r} not found in corpus")
        self.boundary = boundary


class UnclassifiedBook(CorpusError):
    """A book reached flattening without a testament assignment."""

    def __init__(self, book: str):
        super().__init__(f"Book {book!r} has no testament classification")
        self.book = book


class OrderMismatch(CorpusError):
    """Book order and the flattened records disagree on the set of books."""
