"""
RDF codec registry.

Maps media types to parser and serializer callables so that callers can
convert between text and QuadDataset without knowing which codec handles
a format. ``application/nquads`` and ``text/turtle`` are registered on
import; applications may register their own codecs or replace these.

A parser is called as ``parser(source)`` and returns a QuadDataset.
A serializer is called as ``serializer(dataset, context)`` and returns text;
``context`` is an optional JSON-LD context that codecs may use for prefixes.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from jsonld_rdf.constants import NQUADS_FORMAT, TURTLE_FORMAT
from jsonld_rdf.dataset import QuadDataset
from jsonld_rdf.errors import UnknownFormatError
from jsonld_rdf.formats.nquads import parse_nquads, serialize_nquads
from jsonld_rdf.formats.turtle import parse_turtle, serialize_turtle

logger = logging.getLogger(__name__)

Parser = Callable[[Any], QuadDataset]
Serializer = Callable[[QuadDataset, Optional[Dict[str, Any]]], str]


def _serialize_nquads(dataset: QuadDataset, context: Optional[Dict[str, Any]] = None) -> str:
    return serialize_nquads(dataset)


class CodecRegistry:
    """
    Registry of RDF parsers and serializers keyed by media type.
    """

    def __init__(self):
        self._parsers: Dict[str, Parser] = {}
        self._serializers: Dict[str, Serializer] = {}

    def register_parser(self, format: str, parser: Parser) -> None:
        """Register (or replace) the parser for a media type."""
        self._parsers[format] = parser
        logger.debug(f"Registered RDF parser for {format}")

    def remove_parser(self, format: str) -> None:
        """Remove the parser for a media type; unknown types are ignored."""
        self._parsers.pop(format, None)

    def get_parser(self, format: str) -> Parser:
        """Get the parser for a media type."""
        try:
            return self._parsers[format]
        except KeyError:
            raise UnknownFormatError(format) from None

    def register_serializer(self, format: str, serializer: Serializer) -> None:
        """Register (or replace) the serializer for a media type."""
        self._serializers[format] = serializer
        logger.debug(f"Registered RDF serializer for {format}")

    def remove_serializer(self, format: str) -> None:
        """Remove the serializer for a media type; unknown types are ignored."""
        self._serializers.pop(format, None)

    def get_serializer(self, format: str) -> Serializer:
        """Get the serializer for a media type."""
        try:
            return self._serializers[format]
        except KeyError:
            raise UnknownFormatError(format) from None

    def parser_formats(self) -> List[str]:
        return list(self._parsers)

    def serializer_formats(self) -> List[str]:
        return list(self._serializers)


def create_default_registry() -> CodecRegistry:
    """Create a registry holding the built-in N-Quads and Turtle codecs."""
    registry = CodecRegistry()
    registry.register_parser(NQUADS_FORMAT, parse_nquads)
    registry.register_parser(TURTLE_FORMAT, parse_turtle)
    registry.register_serializer(NQUADS_FORMAT, _serialize_nquads)
    registry.register_serializer(TURTLE_FORMAT, serialize_turtle)
    return registry


# Global registry instance
_global_registry = create_default_registry()


def get_global_registry() -> CodecRegistry:
    """Get the global codec registry."""
    return _global_registry


def register_parser(format: str, parser: Parser) -> None:
    _global_registry.register_parser(format, parser)


def remove_parser(format: str) -> None:
    _global_registry.remove_parser(format)


def get_parser(format: str) -> Parser:
    return _global_registry.get_parser(format)


def register_serializer(format: str, serializer: Serializer) -> None:
    _global_registry.register_serializer(format, serializer)


def remove_serializer(format: str) -> None:
    _global_registry.remove_serializer(format)


def get_serializer(format: str) -> Serializer:
    return _global_registry.get_serializer(format)


def from_rdf(source: Any, format: str = NQUADS_FORMAT) -> QuadDataset:
    """
    Parse RDF text into a dataset.

    Args:
        source: RDF content (usually a string)
        format: Media type of the content

    Returns:
        QuadDataset

    Raises:
        UnknownFormatError: no parser is registered for ``format``
    """
    parser = get_parser(format)
    return parser(source)


def to_rdf(
    dataset: QuadDataset,
    format: str = NQUADS_FORMAT,
    context: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Serialize a dataset to RDF text.

    Args:
        dataset: QuadDataset to write
        format: Media type of the output
        context: Optional JSON-LD context (used by Turtle for prefixes)

    Returns:
        Serialized text

    Raises:
        UnknownFormatError: no serializer is registered for ``format``
    """
    serializer = get_serializer(format)
    return serializer(dataset, context)
