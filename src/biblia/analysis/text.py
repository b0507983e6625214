"""
Text Normalization
==================

Word-level tokenization of verse records.

Portuguese text is lowercased and folded to ASCII letters before
splitting ("Gênesis" -> "genesis", "coração" -> "coracao"), so that
accented and unaccented spellings count as the same word. Stop words
are folded the same way before comparison.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass, replace
from typing import Iterable, Iterator

import nltk
from nltk.stem import SnowballStemmer
from nltk.tokenize import RegexpTokenizer

from ..corpus.flatten import Record
from ..corpus.testament import Testament

logger = logging.getLogger(__name__)

_WORD_TOKENIZER = RegexpTokenizer(r"\w+")


@dataclass(frozen=True)
class Token:
    """One word of one verse."""
    testament: Testament
    book: str
    chapter: int
    verse: int
    word: str


def fold_diacritics(text: str) -> str:
    """Strip combining marks after NFKD decomposition."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def tokenize(text: str) -> list[str]:
    """Lowercase, fold diacritics and split into words. Numbers are dropped."""
    words = _WORD_TOKENIZER.tokenize(fold_diacritics(text.lower()))
    return [w for w in words if not w.isdigit()]


def unnest_tokens(records: Iterable[Record]) -> Iterator[Token]:
    """Expand each record into one Token per word, keeping its context."""
    for rec in records:
        for word in tokenize(rec.text):
            yield Token(
                testament=rec.testament,
                book=rec.book,
                chapter=rec.chapter,
                verse=rec.verse,
                word=word,
            )


def load_stopwords(language: str = "portuguese", extra: Iterable[str] = ()) -> set[str]:
    """
    NLTK stop-word list for ``language`` plus ``extra``, diacritic-folded.

    Downloads the NLTK ``stopwords`` corpus on first use.
    """
    from nltk.corpus import stopwords

    try:
        words = stopwords.words(language)
    except LookupError:
        logger.info("NLTK stopwords corpus not found, downloading")
        nltk.download("stopwords", quiet=True)
        words = stopwords.words(language)

    return {fold_diacritics(w.lower()) for w in [*words, *extra]}


def remove_stopwords(tokens: Iterable[Token], stopwords: set[str]) -> list[Token]:
    return [t for t in tokens if t.word not in stopwords]


def stem_tokens(tokens: Iterable[Token], language: str = "portuguese") -> list[Token]:
    """Replace each token's word with its Snowball stem."""
    stemmer = SnowballStemmer(language)
    return [replace(t, word=stemmer.stem(t.word)) for t in tokens]
