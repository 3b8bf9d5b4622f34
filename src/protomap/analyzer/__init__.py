"""Relationship extraction and resolution for protomap."""

from .pattern_extractor import ExtractionResult, MembershipMode, PatternExtractor
from .registry import Entity, EntityRegistry
from .resolver import RelationshipResolver

__all__ = [
	"Entity",
	"EntityRegistry",
	"ExtractionResult",
	"MembershipMode",
	"PatternExtractor",
	"RelationshipResolver",
]
