"""
Descriptive Statistics
======================

Frequency-based summaries over tokenized verses:

    word_counts           Overall or per-group word frequencies
    tf_idf                Term frequency-inverse document frequency per book
    sentiment             Polarity lexicon lookup summed per group
    bigrams               Adjacent word pairs within a verse
    bigram_graph          Directed word-adjacency network
    document_term_matrix  Sparse book x term count matrix

Grouping is either by ``"book"`` or by ``"testament"``. Groups appear in
the order they are first seen, which for records in source order is the
canonical biblical order.
"""

from __future__ import annotations

import csv
import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import networkx as nx
import numpy as np
from nltk.util import bigrams as nltk_bigrams
from numpy.typing import NDArray
from scipy.sparse import csr_matrix

from ..corpus.flatten import Record
from .text import Token, fold_diacritics, tokenize

logger = logging.getLogger(__name__)

GROUPINGS = ("book", "testament")


def _group_key(item: Token | Record, by: str) -> str:
    if by == "book":
        return item.book
    if by == "testament":
        return item.testament.label
    raise ValueError(f"Unknown grouping: {by!r} (expected one of {GROUPINGS})")


# ---------------------------------------------------------------------------
# Word counts
# ---------------------------------------------------------------------------

def word_counts(
    tokens: Iterable[Token],
    by: Optional[str] = None,
) -> dict[str, int] | dict[str, dict[str, int]]:
    """
    Word frequencies, most common first.

    With ``by=None`` returns ``{word: n}`` over all tokens; otherwise
    ``{group: {word: n}}``.
    """
    if by is None:
        return dict(Counter(t.word for t in tokens).most_common())

    grouped: dict[str, Counter] = {}
    for t in tokens:
        grouped.setdefault(_group_key(t, by), Counter())[t.word] += 1
    return {g: dict(c.most_common()) for g, c in grouped.items()}


def count_triples(tokens: Iterable[Token], by: str = "book") -> list[tuple[str, str, int]]:
    """(document, term, count) triples with documents defined by ``by``."""
    counts: Counter = Counter((_group_key(t, by), t.word) for t in tokens)
    return [(doc, term, n) for (doc, term), n in counts.items()]


# ---------------------------------------------------------------------------
# TF-IDF
# ---------------------------------------------------------------------------

@dataclass
class TfIdfScore:
    document: str
    term: str
    n: int
    tf: float
    idf: float
    tf_idf: float


def tf_idf(triples: Iterable[tuple[str, str, int]]) -> list[TfIdfScore]:
    """
    Compute tf-idf for (document, term, count) triples.

        tf     = n / total terms in the document
        idf    = ln(number of documents / documents containing the term)
        tf_idf = tf * idf

    Output keeps the input order.
    """
    triples = list(triples)
    if not triples:
        return []

    docs = [d for d, _, _ in triples]
    terms = [t for _, t, _ in triples]
    n = np.array([c for _, _, c in triples], dtype=float)

    doc_totals: Counter = Counter()
    term_docs: dict[str, set[str]] = {}
    for d, t, c in triples:
        doc_totals[d] += c
        term_docs.setdefault(t, set()).add(d)

    n_docs = len(doc_totals)
    totals = np.array([doc_totals[d] for d in docs], dtype=float)
    doc_freq = np.array([len(term_docs[t]) for t in terms], dtype=float)

    tf = n / totals
    idf = np.log(n_docs / doc_freq)
    scores = tf * idf

    return [
        TfIdfScore(
            document=docs[i],
            term=terms[i],
            n=int(n[i]),
            tf=float(tf[i]),
            idf=float(idf[i]),
            tf_idf=float(scores[i]),
        )
        for i in range(len(triples))
    ]


def top_terms(scores: Iterable[TfIdfScore], n: int = 10) -> dict[str, list[tuple[str, float]]]:
    """Highest tf-idf terms per document. Ties break alphabetically."""
    per_doc: dict[str, list[TfIdfScore]] = {}
    for s in scores:
        per_doc.setdefault(s.document, []).append(s)
    return {
        doc: [
            (s.term, s.tf_idf)
            for s in sorted(items, key=lambda s: (-s.tf_idf, s.term))[:n]
        ]
        for doc, items in per_doc.items()
    }


# ---------------------------------------------------------------------------
# Sentiment
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LexiconEntry:
    """Polarity of a lexicon term and its grammatical category."""
    type: str
    polarity: int


@dataclass
class SentimentSummary:
    """Polarity totals for one group of tokens."""
    score: int = 0
    positive: int = 0
    negative: int = 0
    matched: int = 0
    by_type: dict[str, int] = field(default_factory=dict)

    def add(self, entry: LexiconEntry) -> None:
        self.score += entry.polarity
        self.matched += 1
        if entry.polarity > 0:
            self.positive += 1
        elif entry.polarity < 0:
            self.negative += 1
        self.by_type[entry.type] = self.by_type.get(entry.type, 0) + entry.polarity


def load_lexicon(path: str | Path) -> dict[str, LexiconEntry]:
    """
    Load a polarity lexicon from a CSV with columns ``term,type,polarity``
    (the OpLexicon layout). Terms are diacritic-folded to match tokens;
    the first entry for a term wins.
    """
    path = Path(path)
    lexicon: dict[str, LexiconEntry] = {}

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        required = {"term", "type", "polarity"}
        if not required.issubset(reader.fieldnames or []):
            raise ValueError(
                f"Lexicon {path} must have columns {sorted(required)}, "
                f"found {reader.fieldnames}"
            )
        for row in reader:
            term = fold_diacritics(row["term"].strip().lower())
            if term and term not in lexicon:
                lexicon[term] = LexiconEntry(
                    type=row["type"].strip(),
                    polarity=int(row["polarity"]),
                )

    logger.info(f"Loaded {len(lexicon)} lexicon terms from {path}")
    return lexicon


def sentiment(
    tokens: Iterable[Token],
    lexicon: dict[str, LexiconEntry],
    by: str = "book",
) -> dict[str, SentimentSummary]:
    """Sum lexicon polarity per group. Words not in the lexicon are ignored."""
    result: dict[str, SentimentSummary] = {}
    for t in tokens:
        summary = result.setdefault(_group_key(t, by), SentimentSummary())
        entry = lexicon.get(t.word)
        if entry is not None:
            summary.add(entry)
    return result


# ---------------------------------------------------------------------------
# Bigrams
# ---------------------------------------------------------------------------

def bigrams(
    records: Iterable[Record],
    stopwords: Optional[set[str]] = None,
) -> Counter:
    """
    Count adjacent word pairs inside each verse.

    Pairs never span verse boundaries. A pair is dropped when either word
    is a stop word.
    """
    stopwords = stopwords or set()
    counts: Counter = Counter()
    for rec in records:
        for w1, w2 in nltk_bigrams(tokenize(rec.text)):
            if w1 in stopwords or w2 in stopwords:
                continue
            counts[(w1, w2)] += 1
    return counts


def bigram_graph(counts: Counter, min_count: int = 2) -> nx.DiGraph:
    """Directed graph of bigrams seen at least ``min_count`` times."""
    G = nx.DiGraph()
    for (w1, w2), n in counts.items():
        if n >= min_count:
            G.add_edge(w1, w2, weight=n)
    logger.info(
        f"Bigram network: {G.number_of_nodes()} words, "
        f"{G.number_of_edges()} edges (n >= {min_count})"
    )
    return G


# ---------------------------------------------------------------------------
# Document-term matrix
# ---------------------------------------------------------------------------

@dataclass
class DocumentTermMatrix:
    """Sparse counts with row (document) and column (term) labels."""
    matrix: csr_matrix
    documents: list[str]
    terms: list[str]

    @property
    def shape(self) -> tuple[int, int]:
        return self.matrix.shape

    @property
    def sparsity(self) -> float:
        rows, cols = self.shape
        if rows * cols == 0:
            return 0.0
        return 1.0 - self.matrix.nnz / (rows * cols)

    def row(self, document: str) -> NDArray[np.int64]:
        return self.matrix[self.documents.index(document)].toarray().ravel()


def document_term_matrix(triples: Iterable[tuple[str, str, int]]) -> DocumentTermMatrix:
    """Cast (document, term, count) triples to a sparse matrix."""
    doc_idx: dict[str, int] = {}
    term_idx: dict[str, int] = {}
    rows, cols, data = [], [], []

    for d, t, c in triples:
        rows.append(doc_idx.setdefault(d, len(doc_idx)))
        cols.append(term_idx.setdefault(t, len(term_idx)))
        data.append(c)

    matrix = csr_matrix(
        (np.array(data, dtype=np.int64), (rows, cols)),
        shape=(len(doc_idx), len(term_idx)),
    )
    return DocumentTermMatrix(
        matrix=matrix,
        documents=list(doc_idx),
        terms=list(term_idx),
    )
