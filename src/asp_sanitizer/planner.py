"""
Edit planning for asp-sanitizer.

Walks a syntax tree, collects candidate redactions from the classifier,
and resolves overlapping candidates into a non-overlapping edit plan.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterable

from tree_sitter import Node, Tree

from .classifier import classify_assignment, classify_opaque_token
from .config import CandidateEdit, SanitizerConfig
from .grammars import NodeShape

logger = logging.getLogger(__name__)


def walk(root: Node) -> Generator[Node, None, None]:
    """
    Yield every node of a tree, depth first.

    Sibling order is not significant to callers; overlap resolution runs
    over the full candidate set afterwards.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(node.children)


def collect_candidates(
    tree: Tree,
    source: bytes,
    shape: NodeShape,
    config: SanitizerConfig,
) -> list[CandidateEdit]:
    """
    Collect candidate edits from both heuristics.

    An opaque-token candidate is dropped when any candidate already starts
    at the same offset. Other overlaps are left for resolve_overlaps().
    """
    candidates: list[CandidateEdit] = []
    starts: set[int] = set()

    for node in walk(tree.root_node):
        edit = classify_assignment(node, source, shape, config)
        if edit is not None:
            candidates.append(edit)
            starts.add(edit.start)

        edit = classify_opaque_token(node, source, shape, config)
        if edit is not None and edit.start not in starts:
            candidates.append(edit)
            starts.add(edit.start)

    return candidates


def resolve_overlaps(candidates: Iterable[CandidateEdit]) -> list[CandidateEdit]:
    """
    Select a non-overlapping subset of candidate edits.

    Candidates are ordered by start ascending, then end descending, and
    swept left to right: a candidate is accepted only if it starts at or
    after the end of the last accepted one. Overlapping candidates are
    dropped whole, never merged or trimmed.

    The sweep favours earlier and larger spans. It is deterministic but not
    guaranteed to redact the most text.

    Args:
        candidates: Proposed edits, in any order

    Returns:
        Accepted edits ordered by start offset
    """
    ordered = sorted(candidates, key=lambda e: (e.start, -e.end))

    accepted: list[CandidateEdit] = []
    last_end = -1

    for edit in ordered:
        if edit.start >= last_end:
            accepted.append(edit)
            last_end = edit.end

    return accepted


def plan_edits(
    tree: Tree,
    source: bytes,
    shape: NodeShape,
    config: SanitizerConfig,
) -> list[CandidateEdit]:
    """Collect candidates from a tree and resolve them into an edit plan."""
    candidates = collect_candidates(tree, source, shape, config)
    plan = resolve_overlaps(candidates)
    logger.debug("Planned %d of %d candidate edits", len(plan), len(candidates))
    return plan
