"""Tests for the text rewriter."""

import pytest

from asp_sanitizer.config import CandidateEdit
from asp_sanitizer.rewriter import apply_edits


def edit(start: int, end: int, replacement: str = "<R>") -> CandidateEdit:
    return CandidateEdit(start=start, end=end, replacement=replacement)


class TestApplyEdits:
    """Tests for apply_edits."""

    def test_no_edits(self):
        """Test that an empty plan returns the source unchanged."""
        assert apply_edits(b"hello world", []) == b"hello world"

    def test_single_edit(self):
        """Test a single replacement."""
        assert apply_edits(b"key = 'abc';", [edit(6, 11)]) == b"key = <R>;"

    def test_multiple_edits_any_order(self):
        """Test that offsets stay valid regardless of input order."""
        source = b"a=111; b=222; c=333;"
        edits = [edit(2, 5, "X"), edit(16, 19, "ZZZZZ"), edit(9, 12, "")]

        assert apply_edits(source, edits) == b"a=X; b=; c=ZZZZZ;"
        assert apply_edits(source, list(reversed(edits))) == b"a=X; b=; c=ZZZZZ;"

    def test_edit_at_boundaries(self):
        """Test edits touching the start and end of the source."""
        assert apply_edits(b"abcdef", [edit(0, 2), edit(4, 6)]) == b"<R>cd<R>"

    def test_empty_span_inserts(self):
        """Test that a zero-width span inserts the replacement."""
        assert apply_edits(b"ab", [edit(1, 1, "-")]) == b"a-b"

    def test_multibyte_replacement(self):
        """Test that the replacement is encoded as UTF-8."""
        assert apply_edits(b"x=1", [edit(2, 3, "é")]) == "x=é".encode()

    def test_many_edits(self):
        """Test a large number of adjacent edits."""
        source = b"0123456789" * 100
        edits = [edit(i, i + 1, "_") for i in range(0, len(source), 2)]
        result = apply_edits(source, edits)

        assert len(result) == len(source)
        assert result[1::2] == source[1::2]

    def test_out_of_range_span_rejected(self):
        """Test that spans outside the source raise ValueError."""
        with pytest.raises(ValueError):
            apply_edits(b"abc", [edit(2, 10)])

    def test_inverted_span_rejected(self):
        """Test that end < start raises ValueError."""
        with pytest.raises(ValueError):
            apply_edits(b"abcdef", [edit(4, 2)])
