"""
Batch reordering: texts are sent to inference sorted by length, then results
are put back in submission order before they are scattered.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BatchMapping:
    """sorted_to_original[i] is the submission index of the i-th sorted text."""

    sorted_to_original: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.sorted_to_original)


def sort_by_length(texts: list[str]) -> tuple[list[str], BatchMapping]:
    """Stable sort by string length. Returns the sorted texts and the mapping needed to restore order."""
    order = sorted(range(len(texts)), key=lambda i: len(texts[i]))
    return [texts[i] for i in order], BatchMapping(tuple(order))


def restore_order(results: list[Any], mapping: BatchMapping) -> list[Any]:
    """Inverse of sort_by_length applied to the results. Raises ValueError on a count mismatch."""
    if len(results) != len(mapping):
        raise ValueError(f"inference returned {len(results)} results for {len(mapping)} texts")
    restored: list[Any] = [None] * len(results)
    for sorted_index, original_index in enumerate(mapping.sorted_to_original):
        restored[original_index] = results[sorted_index]
    return restored
