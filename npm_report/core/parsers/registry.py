"""Ordered registry of audit schema parsers."""

from typing import Dict, FrozenSet, List, Optional

from ..models import AuditGeneration
from .base import AuditSchemaParser


class SchemaRegistry:
    """Registry of schema parsers, tried in registration order."""

    def __init__(self) -> None:
        """Initialize the schema registry."""
        self._parsers: Dict[AuditGeneration, AuditSchemaParser] = {}

    def register(self, parser: AuditSchemaParser) -> None:
        """Register a parser after the ones already present.

        Args:
            parser: Parser instance to register

        Raises:
            ValueError: If the generation already has a parser
        """
        if parser.generation in self._parsers:
            raise ValueError(f"Generation {parser.generation.value} is already registered")
        self._parsers[parser.generation] = parser

    def get_parser(self, generation: AuditGeneration) -> Optional[AuditSchemaParser]:
        """Get the parser for a generation.

        Args:
            generation: Schema generation

        Returns:
            Parser instance or None if not registered
        """
        return self._parsers.get(generation)

    def parsers(self) -> List[AuditSchemaParser]:
        """Parsers in priority order, newest generation first."""
        return list(self._parsers.values())

    def get_supported_generations(self) -> List[AuditGeneration]:
        return list(self._parsers.keys())

    def known_keys(self) -> FrozenSet[str]:
        """Every top-level key some registered generation understands."""
        keys: FrozenSet[str] = frozenset()
        for parser in self._parsers.values():
            keys |= parser.known_keys
        return keys
