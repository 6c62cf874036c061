"""Schema parsers for the ``npm audit --json`` generations."""

from .base import AuditSchemaParser
from .npm6 import Npm6AuditParser
from .npm7 import Npm7AuditParser
from .registry import SchemaRegistry

# Register built-in parsers, newest generation first
registry = SchemaRegistry()
registry.register(Npm7AuditParser())
registry.register(Npm6AuditParser())

__all__ = [
    "AuditSchemaParser",
    "Npm6AuditParser",
    "Npm7AuditParser",
    "SchemaRegistry",
    "registry",
]
