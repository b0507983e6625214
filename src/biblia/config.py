"""
Configuration
=============

Central configuration for the Biblia NLP Study pipeline.
Loads from YAML config files with sensible defaults.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from .corpus.sink import DEFAULT_OUTPUT
from .corpus.source import NVI_URL
from .corpus.testament import DEFAULT_BOUNDARY


@dataclass
class CorpusConfig:
    """Corpus ingestion configuration."""
    source_url: str = NVI_URL  # URL or local file path
    boundary_book: str = DEFAULT_BOUNDARY  # last Old Testament book
    output_path: str = DEFAULT_OUTPUT
    timeout: Optional[float] = 60.0


@dataclass
class AnalysisConfig:
    """Analysis and output configuration."""
    output_dir: str = "output"
    language: str = "portuguese"
    extra_stopwords: list[str] = field(default_factory=list)
    stem: bool = False
    group_by: str = "book"  # "book" or "testament"
    top_n: int = 10
    min_bigram_count: int = 20
    sentiment_lexicon: Optional[str] = None  # CSV: term,type,polarity


@dataclass
class PipelineConfig:
    """Master configuration for the full pipeline."""
    corpus: CorpusConfig = field(default_factory=CorpusConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)

    # Pipeline control: which phases to run
    phases: list[str] = field(default_factory=lambda: [
        "corpus",
        "analysis",
    ])

    @classmethod
    def from_yaml(cls, path: str | Path) -> PipelineConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "corpus" in data:
            config.corpus = CorpusConfig(**data["corpus"])
        if "analysis" in data:
            config.analysis = AnalysisConfig(**data["analysis"])
        if "phases" in data:
            config.phases = data["phases"]

        return config

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = dataclasses.asdict(self)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
