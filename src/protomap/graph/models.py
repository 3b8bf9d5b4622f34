"""Wire models for the graph document consumed by the rendering surface."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

NODE_WIDTH = 100
NODE_HEIGHT = 50

Anchor = Literal["top", "bottom"]


class Node(BaseModel):
	"""A positioned box on the canvas."""

	model_config = ConfigDict(populate_by_name=True)

	id: int
	x: int
	y: int
	width: int = NODE_WIDTH
	height: int = NODE_HEIGHT
	label: str = Field(alias="txt")


class Connection(BaseModel):
	"""A directed link from a child node to its parent node."""

	model_config = ConfigDict(populate_by_name=True)

	node_a: int = Field(alias="nodeA")
	node_b: int = Field(alias="nodeB")
	anchor_a: Anchor = Field(default="top", alias="conA")
	anchor_b: Anchor = Field(default="bottom", alias="conB")


class GraphDocument(BaseModel):
	"""Nodes and connections of one view."""

	nodes: list[Node] = Field(default_factory=list)
	connections: list[Connection] = Field(default_factory=list)

	def to_wire(self) -> dict:
		"""Dump the document using the renderer's field names."""
		return self.model_dump(by_alias=True)

	def to_json(self, indent: int | None = None) -> str:
		"""Serialize the document to JSON using the renderer's field names."""
		return self.model_dump_json(by_alias=True, indent=indent)

	@classmethod
	def from_json(cls, data: str | bytes) -> GraphDocument:
		"""Parse a wire document."""
		return cls.model_validate_json(data)


class ViewEnvelope(BaseModel):
	"""A document bundled with the name-indexed source texts of its entities."""

	document: GraphDocument
	sources: dict[str, str] = Field(default_factory=dict)
