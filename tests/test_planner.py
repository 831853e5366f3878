"""Tests for edit planning and overlap resolution."""

from asp_sanitizer.config import (
    RULE_OPAQUE_TOKEN,
    RULE_SENSITIVE_ASSIGNMENT,
    CandidateEdit,
    SanitizerConfig,
)
from asp_sanitizer.engine import ParserEngine
from asp_sanitizer.grammars import GrammarRegistry, get_node_shape
from asp_sanitizer.planner import collect_candidates, plan_edits, resolve_overlaps, walk


def parse(code: str, language: str):
    source = code.encode("utf-8")
    grammar = GrammarRegistry().resolve(language)
    tree = ParserEngine().parse(source, grammar)
    return tree, source


def edit(start: int, end: int, rule: str = RULE_SENSITIVE_ASSIGNMENT) -> CandidateEdit:
    return CandidateEdit(start=start, end=end, replacement="X", rule=rule)


class TestResolveOverlaps:
    """Tests for the greedy overlap sweep."""

    def test_empty(self):
        """Test that no candidates gives an empty plan."""
        assert resolve_overlaps([]) == []

    def test_disjoint_edits_all_accepted(self):
        """Test that non-overlapping edits are kept and ordered by start."""
        edits = [edit(20, 25), edit(0, 5), edit(10, 15)]
        assert resolve_overlaps(edits) == [edit(0, 5), edit(10, 15), edit(20, 25)]

    def test_same_start_prefers_larger_span(self):
        """Test that the outer span wins when two start at the same offset."""
        inner = edit(10, 15)
        outer = edit(10, 30)

        assert resolve_overlaps([inner, outer]) == [outer]
        assert resolve_overlaps([outer, inner]) == [outer]

    def test_nested_span_dropped(self):
        """Test that a span inside an accepted one is dropped whole."""
        assert resolve_overlaps([edit(0, 20), edit(5, 10)]) == [edit(0, 20)]

    def test_partial_overlap_dropped(self):
        """Test that a later overlapping span is rejected, not trimmed."""
        assert resolve_overlaps([edit(0, 10), edit(8, 20)]) == [edit(0, 10)]

    def test_adjacent_spans_both_accepted(self):
        """Test that touching half-open spans do not overlap."""
        assert resolve_overlaps([edit(0, 10), edit(10, 20)]) == [edit(0, 10), edit(10, 20)]

    def test_greedy_not_globally_optimal(self):
        """Test that an early large span blocks two smaller later ones."""
        edits = [edit(0, 30), edit(5, 10), edit(20, 25)]
        assert resolve_overlaps(edits) == [edit(0, 30)]

    def test_accepted_spans_never_overlap(self):
        """Test the non-overlap invariant over a dense candidate set."""
        edits = [edit(s, s + w) for s in range(0, 50, 3) for w in (1, 4, 7)]
        plan = resolve_overlaps(edits)

        for previous, current in zip(plan, plan[1:]):
            assert previous.end <= current.start

    def test_deterministic(self):
        """Test that input order does not change the plan."""
        edits = [edit(3, 9), edit(0, 4), edit(3, 12), edit(12, 14)]
        assert resolve_overlaps(edits) == resolve_overlaps(list(reversed(edits)))


class TestWalk:
    """Tests for the tree walk."""

    def test_visits_every_node(self):
        """Test that the walk reaches leaves as well as the root."""
        tree, _ = parse('const apiKey = "abc";', "typescript")
        types = [node.type for node in walk(tree.root_node)]

        assert types[0] == "program"
        assert "variable_declarator" in types
        assert "string_fragment" in types
        assert "identifier" in types

    def test_visits_each_node_once(self):
        """Test that no node is yielded twice."""
        tree, _ = parse("const a = 1; const b = 2;", "javascript")
        spans = [(n.type, n.start_byte, n.end_byte) for n in walk(tree.root_node)]

        assert len(spans) == len(set(spans))


class TestCollectCandidates:
    """Tests for candidate collection."""

    def test_assignment_and_fragment_candidates(self):
        """Test both heuristics firing on the same literal."""
        code = 'const apiKey = "sk-1234567890abcdef12345678";'
        tree, source = parse(code, "typescript")
        candidates = collect_candidates(
            tree, source, get_node_shape("typescript"), SanitizerConfig()
        )

        string_start = code.index('"')
        starts = [c.start for c in candidates]

        # Value span from the assignment; the string node itself is deduplicated
        assert starts.count(string_start) == 1
        assert any(
            c.start == string_start and c.rule == RULE_SENSITIVE_ASSIGNMENT for c in candidates
        )
        # The fragment inside the quotes is proposed separately
        assert any(
            c.start == string_start + 1 and c.rule == RULE_OPAQUE_TOKEN for c in candidates
        )

    def test_plan_keeps_outer_literal(self):
        """Test that the planned edit covers the quoted literal."""
        code = 'const apiKey = "sk-1234567890abcdef12345678";'
        tree, source = parse(code, "typescript")
        plan = plan_edits(tree, source, get_node_shape("typescript"), SanitizerConfig())

        assert len(plan) == 1
        assert plan[0].start == code.index('"')
        assert plan[0].end == code.rindex('"') + 1

    def test_no_candidates_for_safe_code(self):
        """Test that plain code yields nothing."""
        tree, source = parse('const other = "safe";', "typescript")
        shape = get_node_shape("typescript")

        assert collect_candidates(tree, source, shape, SanitizerConfig()) == []
