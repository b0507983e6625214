"""
Main Pipeline
=============

Orchestrates the Biblia NLP Study.

Pipeline Phases:
    1. CORPUS   - Fetch the XML source, classify testaments, flatten to
                  one record per verse and write the CSV snapshot
    2. ANALYSIS - Tokenize the snapshot and compute word counts, tf-idf,
                  bigrams, the document-term matrix and (optionally)
                  lexicon sentiment

The corpus phase streams records straight into the sink; the analysis
phase reads the written snapshot back. Any failure aborts the run, and
the CSV is either a complete snapshot or left as it was.
"""

from __future__ import annotations

import json
import logging
import time
from collections import Counter
from pathlib import Path
from typing import Optional

import networkx as nx
from scipy.sparse import save_npz

from .config import PipelineConfig
from .corpus.errors import CorpusError
from .corpus.flatten import Record, flatten
from .corpus.ordering import BookOrder, assign_order
from .corpus.sink import read_records, write_records
from .corpus.source import load_corpus
from .corpus.testament import TESTAMENT_ORDER, classify
from .analysis.text import load_stopwords, remove_stopwords, stem_tokens, unnest_tokens
from .analysis.stats import (
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

logger = logging.getLogger(__name__)

PHASES = ("corpus", "analysis")


class Pipeline:
    """
    Orchestrates the complete study.

    Usage:
        config = PipelineConfig.from_yaml("configs/default.yaml")
        pipeline = Pipeline(config)
        results = pipeline.run()
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.output_dir = Path(config.analysis.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Pipeline state: populated as phases complete
        self.book_order: Optional[BookOrder] = None
        self.records: list[Record] = []

    def run(self) -> dict:
        """
        Run all configured pipeline phases.

        Returns:
            Dict of phase_name -> result summary.

        Raises:
            The first error raised by any phase. Later phases do not run.
        """
        results = {}
        phases = self.config.phases
        total_start = time.time()

        unknown = [p for p in phases if p not in PHASES]
        if unknown:
            raise ValueError(f"Unknown phases: {unknown} (expected {list(PHASES)})")

        logger.info("Starting Biblia NLP Study pipeline")
        logger.info(f"Phases to run: {phases}")
        logger.info(f"Output directory: {self.output_dir}")

        for phase in phases:
            phase_start = time.time()
            logger.info(f"\n{'='*60}")
            logger.info(f"PHASE: {phase.upper()}")
            logger.info(f"{'='*60}")

            try:
                if phase == "corpus":
                    results[phase] = self._run_corpus()
                elif phase == "analysis":
                    results[phase] = self._run_analysis()
            except Exception as e:
                logger.error(f"Phase {phase} failed: {e}", exc_info=True)
                raise

            elapsed = time.time() - phase_start
            logger.info(f"Phase {phase} completed in {elapsed:.1f}s")

        total_elapsed = time.time() - total_start
        logger.info(f"\n{'='*60}")
        logger.info(f"Pipeline completed in {total_elapsed:.1f}s")
        logger.info(f"{'='*60}")

        self._save_summary(results, total_elapsed)

        return results

    def _run_corpus(self) -> dict:
        """Phase 1: Ingest the XML source and write the CSV snapshot."""
        cfg = self.config.corpus

        corpus = load_corpus(cfg.source_url, timeout=cfg.timeout)
        testament_map = classify(corpus.book_names, cfg.boundary_book)
        self.book_order = BookOrder.from_corpus(corpus)

        ordered = assign_order(
            flatten(corpus, testament_map),
            self.book_order,
            TESTAMENT_ORDER,
        )
        n_written = write_records(ordered, cfg.output_path)

        testament_books = Counter(t.label for t in testament_map.values())
        summary = {
            **corpus.summary(),
            "records_written": n_written,
            "output_path": str(cfg.output_path),
            "boundary_book": cfg.boundary_book,
            "books_per_testament": {
                t.label: testament_books.get(t.label, 0) for t in TESTAMENT_ORDER
            },
        }
        logger.info(
            f"Corpus written: {n_written} verses from {summary['books']} books "
            f"({summary['books_per_testament']})"
        )

        with open(self.output_dir / "corpus_summary.json", "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, ensure_ascii=False)

        return summary

    def _run_analysis(self) -> dict:
        """Phase 2: Descriptive statistics over the CSV snapshot."""
        cfg = self.config.analysis

        self.records = read_records(self.config.corpus.output_path)
        if not self.records:
            raise RuntimeError(
                f"No records in {self.config.corpus.output_path}; run the corpus phase first"
            )

        if self.book_order is None:
            self.book_order = self._load_book_order()

        stopwords = load_stopwords(cfg.language, extra=cfg.extra_stopwords)
        tokens = remove_stopwords(unnest_tokens(self.records), stopwords)
        if cfg.stem:
            tokens = stem_tokens(tokens, cfg.language)
        logger.info(f"{len(tokens)} tokens after stop-word removal")

        # Word counts
        counts = {
            "overall": dict(list(word_counts(tokens).items())[: cfg.top_n]),
            "by_group": {
                g: dict(list(c.items())[: cfg.top_n])
                for g, c in word_counts(tokens, by=cfg.group_by).items()
            },
        }
        self._write_json("word_counts.json", counts)

        # TF-IDF
        triples = count_triples(tokens, by=cfg.group_by)
        top = top_terms(tf_idf(triples), n=cfg.top_n)
        self._write_json("tfidf.json", top)

        # Bigrams
        pair_counts = bigrams(self.records, stopwords)
        graph = bigram_graph(pair_counts, min_count=cfg.min_bigram_count)
        self._write_json(
            "bigrams.json",
            [
                {"word1": w1, "word2": w2, "n": n}
                for (w1, w2), n in pair_counts.most_common(cfg.top_n * 5)
            ],
        )
        self._write_json("bigram_network.json", _graph_to_dict(graph))

        # Document-term matrix
        dtm = document_term_matrix(triples)
        save_npz(self.output_dir / "dtm.npz", dtm.matrix)
        self._write_json("dtm_index.json", {"documents": dtm.documents, "terms": dtm.terms})

        results_summary = {
            "n_records": len(self.records),
            "n_tokens": len(tokens),
            "vocabulary_size": len(dtm.terms),
            "group_by": cfg.group_by,
            "dtm_shape": list(dtm.shape),
            "dtm_sparsity": dtm.sparsity,
            "n_bigrams": len(pair_counts),
            "bigram_network": {
                "nodes": graph.number_of_nodes(),
                "edges": graph.number_of_edges(),
            },
        }

        # Sentiment (optional: needs a lexicon file)
        if cfg.sentiment_lexicon:
            lexicon = load_lexicon(cfg.sentiment_lexicon)
            scores = sentiment(tokens, lexicon, by=cfg.group_by)
            self._write_json(
                "sentiment.json",
                {
                    g: {
                        "score": s.score,
                        "positive": s.positive,
                        "negative": s.negative,
                        "matched": s.matched,
                        "by_type": s.by_type,
                    }
                    for g, s in scores.items()
                },
            )
            results_summary["sentiment_groups"] = len(scores)
        else:
            logger.info("No sentiment lexicon configured, skipping sentiment")

        return results_summary

    def _load_book_order(self) -> Optional[BookOrder]:
        """Book order saved by an earlier corpus phase, if any."""
        path = self.output_dir / "corpus_summary.json"
        if not path.exists():
            logger.warning(f"{path} not found, book order unavailable")
            return None
        with open(path, encoding="utf-8") as f:
            return BookOrder(json.load(f)["book_names"])

    def _write_json(self, filename: str, data) -> None:
        with open(self.output_dir / filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def _save_summary(self, results: dict, total_elapsed: float) -> None:
        """Save pipeline run summary."""
        summary = {
            "total_elapsed_seconds": total_elapsed,
            "phases_run": list(results.keys()),
            "config": {
                "source_url": self.config.corpus.source_url,
                "boundary_book": self.config.corpus.boundary_book,
                "output_path": self.config.corpus.output_path,
                "language": self.config.analysis.language,
            },
            "book_order": list(self.book_order) if self.book_order else [],
            "results": results,
        }

        with open(self.output_dir / "pipeline_summary.json", "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, default=str, ensure_ascii=False)

        logger.info(f"Summary saved to {self.output_dir / 'pipeline_summary.json'}")


def _graph_to_dict(G: nx.DiGraph) -> dict:
    return {
        "nodes": list(G.nodes),
        "edges": [
            {"source": u, "target": v, "weight": d["weight"]}
            for u, v, d in G.edges(data=True)
        ],
    }


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for running the pipeline from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Biblia NLP Study Pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run with default config
    python -m biblia.pipeline

    # Run with custom config
    python -m biblia.pipeline --config configs/custom.yaml

    # Only rebuild the CSV snapshot from a local copy
    python -m biblia.pipeline --phases corpus --source nvi.min.xml
        """,
    )
    parser.add_argument(
        "--config", "-c",
        default="configs/default.yaml",
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--phases", "-p",
        nargs="+",
        choices=PHASES,
        help="Specific phases to run (overrides config)",
    )
    parser.add_argument(
        "--source", "-s",
        help="Corpus URL or XML file path (overrides config)",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output directory (overrides config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Load config
    config_path = Path(args.config)
    if config_path.exists():
        config = PipelineConfig.from_yaml(config_path)
    else:
        logger.info(f"Config file {config_path} not found, using defaults")
        config = PipelineConfig()

    # Apply overrides
    if args.phases:
        config.phases = args.phases
    if args.source:
        config.corpus.source_url = args.source
    if args.output:
        config.analysis.output_dir = args.output

    try:
        Pipeline(config).run()
    except CorpusError as e:
        print(f"\nPIPELINE ABORTED: {e}")
        return 1

    print("\n" + "=" * 60)
    print("PIPELINE COMPLETE")
    print("=" * 60)
    print(f"  Corpus snapshot: {config.corpus.output_path}")
    print(f"  Results saved to: {config.analysis.output_dir}/")

    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
