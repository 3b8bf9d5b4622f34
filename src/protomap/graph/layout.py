"""Deterministic grid layout for graph nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
	from collections.abc import Iterable

T = TypeVar("T")


@dataclass(frozen=True)
class GridLayout:
	"""
	Column-major grid placement.

	Nodes fill a column top to bottom, stepping ``step_y`` each time; once y
	exceeds ``max_y`` the next node starts a new column ``step_x`` to the right.
	"""

	origin_x: int = 300
	origin_y: int = 100
	step_x: int = 150
	step_y: int = 150
	max_y: int = 400

	@classmethod
	def from_config(cls, layout_config: dict[str, Any] | None) -> GridLayout:
		"""Create a layout from the ``layout`` config section, ignoring unknown keys."""
		layout_config = layout_config or {}
		known = {key: int(value) for key, value in layout_config.items() if key in cls.__dataclass_fields__}
		return cls(**known)

	def positions(self, count: int) -> list[tuple[int, int]]:
		"""
		Compute positions for ``count`` consecutive nodes.

		Args:
		        count: Number of nodes

		Returns:
		        list[tuple[int, int]]: (x, y) per node, in order

		"""
		x, y = self.origin_x, self.origin_y
		result = []
		for _ in range(count):
			result.append((x, y))
			y += self.step_y
			if y > self.max_y:
				x += self.step_x
				y = self.origin_y
		return result

	def layout(self, items: Iterable[T]) -> list[tuple[T, int, int]]:
		"""
		Assign a grid position to each item in iteration order.

		Args:
		        items: Items to place (entities or resource names)

		Returns:
		        list[tuple[T, int, int]]: (item, x, y) triples

		"""
		items = list(items)
		return [(item, x, y) for item, (x, y) in zip(items, self.positions(len(items)), strict=True)]
