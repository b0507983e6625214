"""
Biblia NLP Study
================

Downloads the Portuguese Bible (NVI) as XML, flattens it into one row
per verse with testament and book context, and computes descriptive
statistics over the text: word frequencies, tf-idf per book, lexicon
sentiment, bigram networks and a document-term matrix.

Book and testament order always follow the source document, never the
alphabet, so every grouped summary reads in canonical biblical order.
"""

__version__ = "0.1.0"
