"""Exception hierarchy for protomap."""


class ProtomapError(Exception):
	"""Base class for all protomap errors."""


class ConfigError(ProtomapError):
	"""Exception raised for configuration errors."""


class ProjectSourceError(ProtomapError):
	"""Raised when a project's files cannot be enumerated or read."""


class MaterializationError(ProtomapError):
	"""Raised when the entity registry cannot be populated from its collaborator."""
