"""
Analysis Package
================

Descriptive NLP statistics over the flattened Bible records.

This package provides two modules:

    text
        Tokenization with diacritic folding, stop-word removal and
        Snowball stemming. Produces Token rows that keep the verse
        context (testament, book, chapter, verse).

    stats
        Word counts, tf-idf per book, lexicon-based sentiment, bigram
        counts and networks, and the sparse document-term matrix.

Usage::

    from biblia.analysis import unnest_tokens, load_stopwords, remove_stopwords
    from biblia.analysis import count_triples, tf_idf, top_terms

    tokens = remove_stopwords(unnest_tokens(records), load_stopwords())
    top = top_terms(tf_idf(count_triples(tokens, by="book")), n=10)
"""

from .text import (
    Token,
    fold_diacritics,
    tokenize,
    unnest_tokens,
    load_stopwords,
    remove_stopwords,
    stem_tokens,
)
from .stats import (
    word_counts,
    count_triples,
    TfIdfScore,
    tf_idf,
    top_terms,
    LexiconEntry,
    SentimentSummary,
    load_lexicon,
    sentiment,
    bigrams,
    bigram_graph,
    DocumentTermMatrix,
    document_term_matrix,
)

__all__ = [
    "Token",
    "fold_diacritics",
    "tokenize",
    "unnest_tokens",
    "load_stopwords",
    "remove_stopwords",
    "stem_tokens",
    "word_counts",
    "count_triples",
    "TfIdfScore",
    "tf_idf",
    "top_terms",
    "LexiconEntry",
    "SentimentSummary",
    "load_lexicon",
    "sentiment",
    "bigrams",
    "bigram_graph",
    "DocumentTermMatrix",
    "document_term_matrix",
]
