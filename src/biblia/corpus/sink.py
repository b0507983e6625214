"""
Persistence Sink
================

Writes the flattened records as a CSV table::

    testamento,livro,capitulo,versiculo,text
    Velho Testamento,Gênesis,1,1,No princípio Deus criou os céus e a terra.

The file is written to a temporary path next to the destination and
moved into place only after the last record, so a failed run leaves any
previous snapshot untouched.
"""

from __future__ import annotations

import csv
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable

from .flatten import Record
from .testament import Testament

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "datasets/bible.csv"
HEADER = ["testamento", "livro", "capitulo", "versiculo", "text"]


def write_records(records: Iterable[Record], path: str | Path = DEFAULT_OUTPUT) -> int:
    """
    Stream records to ``path``. Returns the number of rows written.

    Any exception raised while consuming ``records`` propagates after the
    temporary file is removed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    n = 0
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(HEADER)
            for rec in records:
                writer.writerow(
                    [rec.testament.label, rec.book, rec.chapter, rec.verse, rec.text]
                )
                n += 1
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Wrote {n} records to {path}")
    return n


def read_records(path: str | Path = DEFAULT_OUTPUT) -> list[Record]:
    """Load a table written by ``write_records`` back into Records."""
    path = Path(path)
    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames != HEADER:
            raise ValueError(
                f"{path} has header {reader.fieldnames}, expected {HEADER}"
            )
        return [
            Record(
                testament=Testament(row["testamento"]),
                book=row["livro"],
                chapter=int(row["capitulo"]),
                verse=int(row["versiculo"]),
                text=row["text"],
            )
            for row in reader
        ]
