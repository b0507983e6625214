"""
Testament Classifier
====================

Partitions the ordered list of book names into the Old and New
Testaments. Every book up to and including the boundary book (Malaquias
in the Portuguese canon) belongs to the Old Testament; every book after
it to the New.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from .errors import BoundaryNotFound

DEFAULT_BOUNDARY = "Malaquias"


class Testament(Enum):
    """Testament label as written to the output table."""
    OLD = "Velho Testamento"
    NEW = "Novo Testamento"

    __test__ = False  # name starts with "Test"; keep pytest from collecting it

    @property
    def label(self) -> str:
        return self.value


# Canonical order: Old before New
TESTAMENT_ORDER: tuple[Testament, ...] = (Testament.OLD, Testament.NEW)


def classify(
    book_names: Sequence[str],
    boundary: str = DEFAULT_BOUNDARY,
) -> dict[str, Testament]:
    """
    Map each book name to its testament.

    The boundary match is exact and case-sensitive. If a name occurs more
    than once, the first occurrence decides the boundary index.

    Raises:
        BoundaryNotFound: ``boundary`` is not in ``book_names``.
    """
    names = list(book_names)
    try:
        cut = names.index(boundary)
    except ValueError:
        raise BoundaryNotFound(boundary) from None

    mapping: dict[str, Testament] = {}
    for i, name in enumerate(names):
        mapping.setdefault(name, Testament.OLD if i <= cut else Testament.NEW)
    return mapping
