"""
Sensitivity heuristics for asp-sanitizer.

Two independent checks run over syntax nodes:

- Assignment targets: a value bound to a name containing a sensitive
  substring (password, token, key, ...) is redacted when it is a literal.
- Opaque tokens: any string literal that is long and made only of
  token-like characters is redacted regardless of context.

Both are lexical heuristics. Long benign strings (hashes, slugs) can be
flagged; secrets built at runtime are not seen.
"""

from __future__ import annotations

import re

from tree_sitter import Node

from .config import (
    OPAQUE_TOKEN_MIN_LENGTH,
    RULE_OPAQUE_TOKEN,
    RULE_SENSITIVE_ASSIGNMENT,
    SENSITIVE_NAMES,
    CandidateEdit,
    SanitizerConfig,
)
from .grammars import NodeAccessor, NodeShape

OPAQUE_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]{20,}$")

QUOTE_CHARS = "'\""


def node_text(node: Node, source: bytes) -> str:
    """Source text covered by a node."""
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def strip_quotes(text: str) -> str:
    """Strip surrounding quote characters from a literal."""
    return text.strip(QUOTE_CHARS)


def is_sensitive_name(text: str, names: tuple[str, ...] = SENSITIVE_NAMES) -> bool:
    """Check if an identifier contains any sensitive substring (case-insensitive)."""
    lowered = text.lower()
    return any(name in lowered for name in names)


def looks_like_opaque_token(text: str, min_length: int = OPAQUE_TOKEN_MIN_LENGTH) -> bool:
    """
    Check if a literal looks like an opaque secret token.

    The text is stripped of surrounding quotes, must be longer than
    ``min_length`` and consist only of letters, digits, ``_``, ``.`` and ``-``.
    """
    stripped = strip_quotes(text)
    return len(stripped) > min_length and OPAQUE_TOKEN_PATTERN.match(stripped) is not None


def _first_match(node: Node, accessors: tuple[NodeAccessor, ...]) -> Node | None:
    for accessor in accessors:
        child = accessor(node)
        if child is not None:
            return child
    return None


def assignment_target(node: Node, shape: NodeShape) -> Node | None:
    """Name side of an assignment-like node."""
    return _first_match(node, shape.target_accessors)


def assignment_value(node: Node, shape: NodeShape) -> Node | None:
    """Value side of an assignment-like node."""
    return _first_match(node, shape.value_accessors)


def classify_assignment(
    node: Node,
    source: bytes,
    shape: NodeShape,
    config: SanitizerConfig,
) -> CandidateEdit | None:
    """
    Propose redacting the value of a sensitive assignment.

    Only the value span is replaced, never the name or the operator.

    Returns:
        A candidate edit, or None if the node is not a sensitive literal
        assignment
    """
    if node.type not in shape.assignment_types:
        return None

    target = assignment_target(node, shape)
    value = assignment_value(node, shape)

    # A single-child node resolves to the same node on both sides
    if target is None or value is None or target == value:
        return None

    if not is_sensitive_name(node_text(target, source), config.sensitive_names):
        return None

    if value.type not in shape.literal_types:
        return None

    return CandidateEdit(
        start=value.start_byte,
        end=value.end_byte,
        replacement=config.replacement,
        rule=RULE_SENSITIVE_ASSIGNMENT,
    )


def classify_opaque_token(
    node: Node,
    source: bytes,
    shape: NodeShape,
    config: SanitizerConfig,
) -> CandidateEdit | None:
    """
    Propose redacting a string literal that looks like an opaque token.

    String prefixes such as Python's ``r`` and ``b`` are dropped before the
    check; the edit still covers the prefix.

    Returns:
        A candidate edit covering the whole node, or None
    """
    if not config.opaque_tokens_enabled or node.type not in shape.string_types:
        return None

    text = node_text(node, source)
    if shape.string_prefixes:
        text = text.lstrip(shape.string_prefixes)
    if strip_quotes(text) in config.allowlist_strings:
        return None

    if not looks_like_opaque_token(text, config.opaque_min_length):
        return None

    return CandidateEdit(
        start=node.start_byte,
        end=node.end_byte,
        replacement=config.replacement,
        rule=RULE_OPAQUE_TOKEN,
    )
