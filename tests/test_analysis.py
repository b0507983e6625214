"""
Tests for the text analysis helpers.

Stop words are passed explicitly so no NLTK data download is needed.
"""

import math

import pytest
from nltk.stem import SnowballStemmer

from biblia.analysis.text import (
    Token,
    fold_diacritics,
    remove_stopwords,
    stem_tokens,
    tokenize,
    unnest_tokens,
)
from biblia.analysis.stats import (
    bigram_graph,
    bigrams,
    count_triples,
    document_term_matrix,
    load_lexicon,
    sentiment,
    tf_idf,
    top_terms,
    word_counts,
)
from biblia.corpus.flatten import Record
from biblia.corpus.testament import Testament


STOPWORDS = {"a", "e", "o", "de", "da", "que"}


def _make_records() -> list[Record]:
    return [
        Record(Testament.OLD, "Salmos", 23, 1, "O Senhor é o meu pastor; de nada terei falta."),
        Record(Testament.OLD, "Salmos", 23, 2, "Em verdes pastagens me faz repousar."),
        Record(Testament.NEW, "João", 3, 16, "Porque Deus tanto amou o mundo que deu o seu Filho."),
        Record(Testament.NEW, "João", 14, 27, "Deixo-lhes a paz; a minha paz lhes dou."),
    ]


class TestText:
    """Test tokenization and normalization."""

    def test_fold_diacritics(self):
        assert fold_diacritics("Gênesis coração João") == "Genesis coracao Joao"

    def test_tokenize(self):
        assert tokenize("No princípio, Deus criou 3 céus!") == [
            "no", "principio", "deus", "criou", "ceus",
        ]

    def test_unnest_keeps_context(self):
        tokens = list(unnest_tokens(_make_records()[:1]))
        assert tokens[0] == Token(Testament.OLD, "Salmos", 23, 1, "o")
        assert {t.book for t in tokens} == {"Salmos"}
        assert "e" in [t.word for t in tokens]  # "é" folds to "e"

    def test_remove_stopwords(self):
        tokens = remove_stopwords(unnest_tokens(_make_records()), STOPWORDS)
        words = [t.word for t in tokens]
        assert "o" not in words
        assert "senhor" in words
        assert "paz" in words

    def test_stem_tokens(self):
        tokens = list(unnest_tokens(_make_records()[2:3]))
        stemmed = stem_tokens(tokens, "portuguese")
        stemmer = SnowballStemmer("portuguese")
        assert [t.word for t in stemmed] == [stemmer.stem(t.word) for t in tokens]
        assert [t.verse for t in stemmed] == [t.verse for t in tokens]


class TestWordCounts:
    """Test frequency tables."""

    def test_overall(self):
        tokens = remove_stopwords(unnest_tokens(_make_records()), STOPWORDS)
        counts = word_counts(tokens)
        assert counts["paz"] == 2
        assert counts["lhes"] == 2
        assert next(iter(counts)) in {"paz", "lhes"}
        assert list(counts.values()) == sorted(counts.values(), reverse=True)

    def test_by_book(self):
        tokens = remove_stopwords(unnest_tokens(_make_records()), STOPWORDS)
        counts = word_counts(tokens, by="book")
        assert list(counts) == ["Salmos", "João"]
        assert counts["João"]["paz"] == 2
        assert "paz" not in counts["Salmos"]

    def test_by_testament(self):
        tokens = list(unnest_tokens(_make_records()))
        counts = word_counts(tokens, by="testament")
        assert list(counts) == ["Velho Testamento", "Novo Testamento"]

    def test_unknown_grouping(self):
        with pytest.raises(ValueError):
            word_counts(unnest_tokens(_make_records()), by="chapter")


class TestTfIdf:
    """Test tf-idf weights."""

    TRIPLES = [("A", "x", 2), ("A", "y", 2), ("B", "x", 1), ("B", "z", 3)]

    def test_scores(self):
        scores = {(s.document, s.term): s for s in tf_idf(self.TRIPLES)}
        assert scores[("A", "x")].idf == pytest.approx(0.0)
        assert scores[("A", "y")].tf == pytest.approx(0.5)
        assert scores[("A", "y")].tf_idf == pytest.approx(0.5 * math.log(2))
        assert scores[("B", "z")].tf_idf == pytest.approx(0.75 * math.log(2))

    def test_empty(self):
        assert tf_idf([]) == []

    def test_top_terms(self):
        top = top_terms(tf_idf(self.TRIPLES), n=1)
        assert top == {
            "A": [("y", pytest.approx(0.5 * math.log(2)))],
            "B": [("z", pytest.approx(0.75 * math.log(2)))],
        }

    def test_count_triples(self):
        tokens = remove_stopwords(unnest_tokens(_make_records()), STOPWORDS)
        triples = count_triples(tokens, by="book")
        assert ("João", "paz", 2) in triples
        assert all(n > 0 for _, _, n in triples)


class TestSentiment:
    """Test lexicon lookup."""

    def _write_lexicon(self, tmp_path):
        path = tmp_path / "lexicon.csv"
        path.write_text(
            "term,type,polarity\n"
            "amou,vb,1\n"
            "paz,noun,1\n"
            "falta,noun,-1\n"
            "paz,adj,-1\n",
            encoding="utf-8",
        )
        return path

    def test_load_lexicon(self, tmp_path):
        lexicon = load_lexicon(self._write_lexicon(tmp_path))
        assert lexicon["paz"].polarity == 1  # first entry wins
        assert lexicon["falta"].type == "noun"

    def test_bad_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("word,score\npaz,1\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_lexicon(path)

    def test_sentiment_by_book(self, tmp_path):
        lexicon = load_lexicon(self._write_lexicon(tmp_path))
        scores = sentiment(unnest_tokens(_make_records()), lexicon, by="book")
        assert scores["Salmos"].score == -1
        assert scores["Salmos"].negative == 1
        assert scores["João"].score == 3
        assert scores["João"].positive == 3
        assert scores["João"].by_type == {"vb": 1, "noun": 2}


class TestBigrams:
    """Test word adjacency counting."""

    def test_pairs_within_verse(self):
        records = [
            Record(Testament.NEW, "X", 1, 1, "Graça e paz"),
            Record(Testament.NEW, "X", 1, 2, "graça e paz, paz eterna"),
        ]
        counts = bigrams(records, {"e"})
        assert counts == {("paz", "paz"): 1, ("paz", "eterna"): 1}
        assert ("paz", "graca") not in counts

    def test_graph(self):
        records = [Record(Testament.NEW, "X", 1, i, "paz eterna") for i in range(1, 4)]
        records.append(Record(Testament.NEW, "X", 1, 4, "vida eterna"))
        G = bigram_graph(bigrams(records), min_count=2)
        assert list(G.edges(data=True)) == [("paz", "eterna", {"weight": 3})]


class TestDocumentTermMatrix:
    """Test the sparse document-term matrix."""

    def test_shape_and_values(self):
        dtm = document_term_matrix([("A", "x", 2), ("A", "y", 1), ("B", "x", 4)])
        assert dtm.documents == ["A", "B"]
        assert dtm.terms == ["x", "y"]
        assert dtm.shape == (2, 2)
        assert dtm.row("B").tolist() == [4, 0]
        assert dtm.sparsity == pytest.approx(0.25)
