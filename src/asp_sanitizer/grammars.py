"""
Grammar registry for asp-sanitizer.

Maps a language key to a loadable tree-sitter grammar and caches loaded
grammars for the lifetime of the process. Also carries the per-language
node-shape table the classifier uses to find assignment targets, values
and string literals.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from tree_sitter import Language, Node

logger = logging.getLogger(__name__)

# Errors a grammar package can raise while being located or loaded.
# ValueError covers tree-sitter's "Incompatible Language version" check.
GRAMMAR_LOAD_ERRORS = (ImportError, OSError, ValueError, TypeError, AttributeError)


class GrammarSource(ABC):
    """Abstract loader for one language's grammar artifact."""

    name: str = ""

    @abstractmethod
    def load(self) -> Language:
        """Load the grammar. Raises on a missing or unusable artifact."""
        pass


class PythonGrammar(GrammarSource):
    name = "python"

    def load(self) -> Language:
        import tree_sitter_python

        return Language(tree_sitter_python.language())


class JavaScriptGrammar(GrammarSource):
    name = "javascript"

    def load(self) -> Language:
        import tree_sitter_javascript

        return Language(tree_sitter_javascript.language())


class TypeScriptGrammar(GrammarSource):
    name = "typescript"

    def load(self) -> Language:
        import tree_sitter_typescript

        return Language(tree_sitter_typescript.language_typescript())


GRAMMAR_SOURCES: dict[str, GrammarSource] = {
    source.name: source
    for source in (TypeScriptGrammar(), JavaScriptGrammar(), PythonGrammar())
}


def normalize_language(language: str) -> str:
    """Normalize a user-supplied language name to a registry key."""
    return language.strip().lower()


def supported_languages() -> list[str]:
    """Language keys with a registered grammar source."""
    return sorted(GRAMMAR_SOURCES)


def is_supported(language: str) -> bool:
    """Check whether a language key has a registered grammar source."""
    return normalize_language(language) in GRAMMAR_SOURCES


class GrammarRegistry:
    """
    Lazily loads and caches grammars by language key.

    Only successful loads are cached. A failed load returns None for that
    call and is retried on the next one, so a grammar installed after
    start-up is picked up without a restart.

    Concurrent first use may load the same grammar twice; loads have no
    side effects beyond filling the cache and either result is kept.
    """

    def __init__(self, sources: dict[str, GrammarSource] | None = None):
        self.sources = dict(GRAMMAR_SOURCES if sources is None else sources)
        self._cache: dict[str, Language] = {}

    def resolve(self, language: str) -> Language | None:
        """
        Resolve a language name to a loaded grammar.

        Args:
            language: Language name, matched case-insensitively

        Returns:
            The loaded grammar, or None if the language is unsupported or
            its grammar could not be loaded
        """
        key = normalize_language(language)

        cached = self._cache.get(key)
        if cached is not None:
            return cached

        source = self.sources.get(key)
        if source is None:
            return None

        try:
            grammar = source.load()
        except GRAMMAR_LOAD_ERRORS as e:
            logger.warning("Failed to load %s grammar: %s", key, e)
            return None

        logger.debug("Loaded %s grammar", key)
        self._cache[key] = grammar
        return grammar

    def is_loaded(self, language: str) -> bool:
        """Check whether a grammar is already cached."""
        return normalize_language(language) in self._cache

    def clear(self) -> None:
        """Drop all cached grammars."""
        self._cache.clear()


_default_registry = GrammarRegistry()


def get_registry() -> GrammarRegistry:
    """Get the process-wide grammar registry."""
    return _default_registry


# Accessor strategies, evaluated in order until one yields a node
NodeAccessor = Callable[[Node], "Node | None"]


def field_child(name: str) -> NodeAccessor:
    """Accessor returning the child stored under a named field."""

    def access(node: Node) -> Node | None:
        return node.child_by_field_name(name)

    return access


def first_child(node: Node) -> Node | None:
    return node.children[0] if node.children else None


def last_child(node: Node) -> Node | None:
    return node.children[-1] if node.children else None


@dataclass(frozen=True)
class NodeShape:
    """
    How one language family spells the constructs the classifier inspects.

    Attributes:
        assignment_types: Node types that bind a value to a name
        string_types: Node types checked for opaque tokens
        literal_types: Value node types redacted after a sensitive name
        target_accessors: Strategies for the name side of an assignment
        value_accessors: Strategies for the value side of an assignment
        string_prefixes: Letters that may precede a string literal's opening quote
    """

    assignment_types: frozenset[str]
    string_types: frozenset[str]
    literal_types: frozenset[str]
    target_accessors: tuple[NodeAccessor, ...] = (
        field_child("left"),
        field_child("name"),
        first_child,
    )
    value_accessors: tuple[NodeAccessor, ...] = (
        field_child("right"),
        field_child("value"),
        last_child,
    )
    string_prefixes: str = ""


ECMASCRIPT_SHAPE = NodeShape(
    assignment_types=frozenset({"variable_declarator", "assignment_expression"}),
    string_types=frozenset({"string", "string_fragment"}),
    literal_types=frozenset({"string", "string_fragment", "number"}),
)

# Python string bodies are not checked on their own: a quoted placeholder
# inside an f-string would close the literal. f is not a stripped prefix,
# so f-strings never match the token pattern.
PYTHON_SHAPE = NodeShape(
    assignment_types=frozenset({"assignment"}),
    string_types=frozenset({"string"}),
    literal_types=frozenset({"string", "integer", "float"}),
    string_prefixes="rRbBuU",
)

NODE_SHAPES: dict[str, NodeShape] = {
    "javascript": ECMASCRIPT_SHAPE,
    "typescript": ECMASCRIPT_SHAPE,
    "python": PYTHON_SHAPE,
}


def get_node_shape(language: str) -> NodeShape | None:
    """Get the node shape for a language key, or None if there is none."""
    return NODE_SHAPES.get(normalize_language(language))
