"""Tests for textual relationship extraction."""

from unittest.mock import patch

import pytest

from protomap.analyzer.pattern_extractor import (
	ExtractionResult,
	MembershipMode,
	PatternExtractor,
	extract_composition,
	extract_parent,
)


@pytest.mark.unit
@pytest.mark.analyzer
class TestExtractParent:
	"""Parent extraction from the prototype assignment convention."""

	@pytest.mark.parametrize(
		("source", "expected"),
		[
			("Circle.prototype = new Shape(", "Shape"),
			("function Circle() {}\nCircle.prototype = new Shape;", "Shape"),
			("Widget.prototype = new ui.Base;", "ui.Base"),
		],
	)
	def test_parent_after_marker(self, source: str, expected: str) -> None:
		"""The parent runs from the marker to the last character of the text, exclusive."""
		assert extract_parent(source) == expected

	def test_no_marker(self) -> None:
		"""Texts without the marker declare no parent."""
		assert extract_parent("function Shape() { this.p = new Point(1, 2); }") == ""

	def test_marker_at_start_is_ignored(self) -> None:
		"""A marker at position zero does not count."""
		assert extract_parent("prototype = new Shape;") == ""

	def test_trailing_text_is_kept(self) -> None:
		"""Only the final character is trimmed, even when more text follows the declaration."""
		source = "Circle.prototype = new Shape;\nvar x = 1;"
		assert extract_parent(source) == "Shape;\nvar x = 1"

	def test_first_marker_wins(self) -> None:
		"""The first prototype assignment is the one used."""
		source = "A.prototype = new B;\nC.prototype = new D;"
		assert extract_parent(source).startswith("B;")


@pytest.mark.unit
@pytest.mark.analyzer
class TestExtractComposition:
	"""Composed type extraction from constructor calls."""

	def test_dedup_first_seen_order(self) -> None:
		"""Repeated types are listed once in first-seen order."""
		assert extract_composition("a = new Foo(); b = new Bar(); c = new Foo();") == ["Foo", "Bar"]

	def test_empty_text(self) -> None:
		"""No constructor calls means no composed types."""
		assert extract_composition("") == []

	def test_constructor_without_parenthesis_is_skipped(self) -> None:
		"""A constructor call without an argument list yields no candidate."""
		assert extract_composition("A.prototype = new Shape;") == []

	def test_loose_mode_treats_substrings_as_duplicates(self) -> None:
		"""A name contained in an already listed name is dropped in loose mode."""
		source = "a = new FooBar(); b = new Foo();"
		assert extract_composition(source, MembershipMode.LOOSE) == ["FooBar"]

	def test_strict_mode_uses_exact_names(self) -> None:
		"""Strict mode keeps names that are substrings of listed ones."""
		source = "a = new FooBar(); b = new Foo(); c = new Foo();"
		assert extract_composition(source, MembershipMode.STRICT) == ["FooBar", "Foo"]

	def test_prototype_assignment_with_call_counts_as_composition(self) -> None:
		"""The prototype marker contains the composition marker."""
		source = "this.p = new Point(0, 0);\nCircle.prototype = new Shape();"
		assert extract_composition(source) == ["Point", "Shape"]


@pytest.mark.unit
@pytest.mark.analyzer
class TestPatternExtractor:
	"""The extractor facade."""

	def test_extract(self) -> None:
		"""Both relationships are extracted together."""
		extractor = PatternExtractor()
		result = extractor.extract("this.p = new Point(0, 0);\nCircle.prototype = new Shape;")

		assert result == ExtractionResult(parent_name="Shape", composed_types=("Point",))

	def test_membership_from_string(self) -> None:
		"""Membership modes may be given by name."""
		assert PatternExtractor("strict").membership is MembershipMode.STRICT

	def test_invalid_membership(self) -> None:
		"""Unknown membership modes are rejected."""
		with pytest.raises(ValueError, match="bogus"):
			PatternExtractor("bogus")

	def test_failure_yields_empty_result(self) -> None:
		"""Internal failures are logged and degrade to an empty result."""
		extractor = PatternExtractor()
		with patch("protomap.analyzer.pattern_extractor.extract_parent", side_effect=RuntimeError("boom")):
			result = extractor.extract("Circle.prototype = new Shape;")

		assert result == ExtractionResult()
