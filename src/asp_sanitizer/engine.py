"""
Parser engine for asp-sanitizer.

Wraps a single reusable tree-sitter parser. The parser is stateful (its
active grammar is mutable), so every parse runs while holding the engine
lock; callers that need parallel parses create separate engines.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from enum import Enum

from tree_sitter import Language, Parser, Tree

logger = logging.getLogger(__name__)


class SanitizerError(Exception):
    """Base error for asp-sanitizer."""

    pass


class EngineInitError(SanitizerError):
    """The one-time parser engine setup failed; nothing can be sanitized."""

    pass


class EngineState(str, Enum):
    """Process-wide initialization state of the parser engine."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    FAILED = "failed"


_state = EngineState.NOT_STARTED
_state_lock = threading.Lock()
_engine: ParserEngine | None = None


def engine_state() -> EngineState:
    """Get the current engine initialization state."""
    return _state


def _probe_runtime() -> None:
    """Check that the tree-sitter runtime can build a parser."""
    Parser()


def initialize_engine() -> None:
    """
    Run the one-time parser engine setup.

    Calls after a successful setup are no-ops. A failed setup leaves the
    state FAILED and raises EngineInitError; a later call retries.

    Raises:
        EngineInitError: If the tree-sitter runtime is unusable
    """
    global _state

    with _state_lock:
        if _state is EngineState.READY:
            return

        _state = EngineState.IN_PROGRESS
        try:
            _probe_runtime()
        except Exception as e:
            _state = EngineState.FAILED
            raise EngineInitError(f"Tree-sitter parser engine is unavailable: {e}") from e

        _state = EngineState.READY
        logger.debug("Parser engine initialized")


def reset_engine() -> None:
    """Tear down the process-wide engine and return to NOT_STARTED."""
    global _state, _engine

    with _state_lock:
        _engine = None
        _state = EngineState.NOT_STARTED


def get_engine() -> ParserEngine:
    """Get the shared process engine, initializing it on first use."""
    global _engine

    initialize_engine()
    with _state_lock:
        if _engine is not None:
            return _engine

    # Built outside the lock: ParserEngine() may re-run initialize_engine()
    engine = ParserEngine()
    with _state_lock:
        if _engine is None:
            _engine = engine
        return _engine


class ParserEngine:
    """
    A tree-sitter parser guarded by a lock.

    The parser is only reachable through ``acquire()``, which hands it out
    to one caller at a time.
    """

    def __init__(self) -> None:
        if _state is not EngineState.READY:
            initialize_engine()
        self._parser = Parser()
        self._lock = threading.Lock()

    @contextmanager
    def acquire(self) -> Generator[Parser, None, None]:
        """Hold the parser exclusively for the duration of the block."""
        with self._lock:
            yield self._parser

    def parse(self, source: bytes, grammar: Language) -> Tree | None:
        """
        Parse source bytes with the given grammar.

        Args:
            source: UTF-8 encoded source text
            grammar: Loaded grammar to parse with

        Returns:
            The syntax tree, or None if the parser produced no usable tree
        """
        with self.acquire() as parser:
            parser.language = grammar
            tree = parser.parse(source)

        if tree is None or tree.root_node is None:
            return None

        return tree
