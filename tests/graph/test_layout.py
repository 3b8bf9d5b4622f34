"""Tests for the grid layout."""

import pytest

from protomap.config import DEFAULT_CONFIG
from protomap.graph.layout import GridLayout


@pytest.mark.unit
@pytest.mark.graph
class TestGridLayout:
	"""Column-major grid placement."""

	def test_first_column(self) -> None:
		"""Three nodes fill the first column."""
		assert GridLayout().positions(3) == [(300, 100), (300, 250), (300, 400)]

	def test_fourth_node_wraps(self) -> None:
		"""The fourth node starts the next column."""
		assert GridLayout().positions(4)[3] == (450, 100)

	def test_many_nodes(self) -> None:
		"""Columns keep wrapping every three nodes."""
		positions = GridLayout().positions(7)
		assert positions[5] == (450, 400)
		assert positions[6] == (600, 100)

	def test_no_nodes(self) -> None:
		"""An empty input has no positions."""
		assert GridLayout().layout([]) == []

	def test_layout_pairs_items_with_positions(self) -> None:
		"""Items keep their order and receive consecutive positions."""
		assert GridLayout().layout(["a", "b"]) == [("a", 300, 100), ("b", 300, 250)]

	def test_layout_is_deterministic(self) -> None:
		"""The same input always gets the same coordinates."""
		layout = GridLayout()
		assert layout.positions(5) == layout.positions(5)

	def test_from_config_defaults_match(self) -> None:
		"""The default layout section reproduces the standard grid."""
		assert GridLayout.from_config(DEFAULT_CONFIG["layout"]) == GridLayout()

	def test_from_config_ignores_unknown_keys(self) -> None:
		"""Custom values apply and unknown keys are dropped."""
		layout = GridLayout.from_config({"origin_x": "10", "max_y": 100, "colour": "red"})

		assert layout.origin_x == 10
		assert layout.positions(2) == [(10, 100), (160, 100)]
