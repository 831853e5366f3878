"""
Source-code secret sanitizer for asp-sanitizer.

Parses a snippet with tree-sitter, finds likely secrets (credential
assignments and long opaque tokens) and replaces them with a placeholder.
Everything outside the redacted spans is returned byte-for-byte.

Unsupported languages, grammars that fail to load and sources that do
not parse are passed through unchanged. Only a failure to set up the
parser engine itself is raised to the caller.
"""

from __future__ import annotations

import logging

from .config import SanitizerConfig
from .engine import ParserEngine, get_engine
from .grammars import GrammarRegistry, get_node_shape, get_registry, normalize_language
from .planner import plan_edits
from .rewriter import apply_edits

logger = logging.getLogger(__name__)


class CodeSanitizer:
    """
    Redacts likely secrets from source code.

    Features:
    - TypeScript, JavaScript and Python grammars, loaded on first use
    - Sensitive assignment detection (``apiKey = "..."``)
    - Opaque token detection for long token-like string literals
    - Allowlist for literal values that must never be redacted
    - Per-rule redaction statistics
    """

    def __init__(
        self,
        config: SanitizerConfig | None = None,
        registry: GrammarRegistry | None = None,
        engine: ParserEngine | None = None,
    ):
        """
        Initialize the sanitizer.

        Args:
            config: Sanitizer configuration (defaults if omitted)
            registry: Grammar registry (the shared process registry if omitted)
            engine: Parser engine (the shared process engine if omitted)
        """
        self.config = config or SanitizerConfig()
        self.registry = registry or get_registry()
        self._engine = engine

        self.redaction_counts: dict[str, int] = {}

    @property
    def engine(self) -> ParserEngine:
        """The parser engine, initialized on first access."""
        if self._engine is None:
            self._engine = get_engine()
        return self._engine

    def sanitize(self, code: str, language: str) -> str:
        """
        Redact likely secrets from a code snippet.

        Args:
            code: Source text
            language: Language name (typescript, javascript, python),
                matched case-insensitively

        Returns:
            The sanitized source, or ``code`` unchanged when the language
            is unsupported or the source cannot be parsed

        Raises:
            EngineInitError: If the parser engine cannot be initialized
        """
        if not self.config.enabled:
            return code

        engine = self.engine

        grammar = self.registry.resolve(language)
        if grammar is None:
            logger.debug("No grammar for %r, passing source through", language)
            return code

        source = code.encode("utf-8")
        tree = engine.parse(source, grammar)
        if tree is None:
            logger.debug("Parser produced no tree for %r source", language)
            return code

        shape = get_node_shape(normalize_language(language))
        if shape is None:
            logger.debug("No node shape for %r, passing source through", language)
            return code

        edits = plan_edits(tree, source, shape, self.config)
        if not edits:
            return code

        for edit in edits:
            self.redaction_counts[edit.rule] = self.redaction_counts.get(edit.rule, 0) + 1

        return apply_edits(source, edits).decode("utf-8")

    def get_stats(self) -> dict[str, int]:
        """Get redaction statistics."""
        return dict(sorted(self.redaction_counts.items(), key=lambda x: -x[1]))

    def reset_stats(self) -> None:
        """Reset redaction statistics."""
        self.redaction_counts.clear()


def create_sanitizer(
    config: SanitizerConfig | None = None,
    registry: GrammarRegistry | None = None,
) -> CodeSanitizer:
    """Factory function to create a sanitizer instance."""
    return CodeSanitizer(config=config, registry=registry)


_default_sanitizer: CodeSanitizer | None = None


def sanitize(code: str, language: str) -> str:
    """Sanitize with a shared default-configured sanitizer."""
    global _default_sanitizer

    if _default_sanitizer is None:
        _default_sanitizer = CodeSanitizer()
    return _default_sanitizer.sanitize(code, language)
