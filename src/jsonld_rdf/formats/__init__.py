"""
RDF Format Parsers and Serializers.

Supports:
- N-Quads (.nq), the canonical form of a dataset
- Turtle (.ttl) with prefix compaction and blank node inlining
"""

from jsonld_rdf.formats.nquads import (
    NQuadsParser,
    NQuadsSerializer,
    parse_nquads,
    serialize_nquad,
    serialize_nquads,
)
from jsonld_rdf.formats.turtle import TurtleParser, TurtleSerializer, parse_turtle, serialize_turtle

__all__ = [
    # N-Quads
    "NQuadsParser",
    "NQuadsSerializer",
    "parse_nquads",
    "serialize_nquad",
    "serialize_nquads",
    # Turtle
    "TurtleParser",
    "TurtleSerializer",
    "parse_turtle",
    "serialize_turtle",
]
