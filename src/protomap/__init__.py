"""protomap - map prototype inheritance and composition across a project's sources."""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "protomap contributors"

from protomap.analyzer import Entity, EntityRegistry, MembershipMode, PatternExtractor, RelationshipResolver
from protomap.graph import GraphDocument, GraphSerializer, GridLayout, ViewResult, ViewType
from protomap.session import ProjectSession

__all__ = [
	"Entity",
	"EntityRegistry",
	"GraphDocument",
	"GraphSerializer",
	"GridLayout",
	"MembershipMode",
	"PatternExtractor",
	"ProjectSession",
	"RelationshipResolver",
	"ViewResult",
	"ViewType",
	"__version__",
]
