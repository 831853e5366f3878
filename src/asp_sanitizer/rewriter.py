"""Apply a resolved edit plan to source bytes."""

from __future__ import annotations

from collections.abc import Iterable

from .config import CandidateEdit


def apply_edits(source: bytes, edits: Iterable[CandidateEdit]) -> bytes:
    """
    Replace each edit's span in the source with its replacement text.

    Edits are applied from the end of the source towards the start, so the
    offsets of edits not yet applied stay valid. Bytes outside the edited
    spans are returned unchanged.

    Args:
        source: Original UTF-8 encoded source
        edits: Non-overlapping edits with offsets into ``source``

    Returns:
        The rewritten source

    Raises:
        ValueError: If an edit span lies outside the source
    """
    result = source
    size = len(source)

    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        if not 0 <= edit.start <= edit.end <= size:
            raise ValueError(
                f"Edit span [{edit.start}, {edit.end}) is outside source of {size} bytes"
            )
        result = result[:edit.start] + edit.replacement.encode("utf-8") + result[edit.end:]

    return result
