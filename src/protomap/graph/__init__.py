"""Layout and serialization of project graphs."""

from .layout import GridLayout
from .models import Connection, GraphDocument, Node, ViewEnvelope
from .serializer import GraphSerializer, ViewResult, ViewType

__all__ = [
	"Connection",
	"GraphDocument",
	"GraphSerializer",
	"GridLayout",
	"Node",
	"ViewEnvelope",
	"ViewResult",
	"ViewType",
]
