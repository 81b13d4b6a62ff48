"""
jsonld-rdf: RDF dataset codecs for the JSON-LD toolkit.

Parses and writes Turtle and N-Quads through a common quad dataset model,
with adapters for rdflib and pyoxigraph.
"""

__version__ = "0.1.0"

from jsonld_rdf.dataset import IRI, BlankNode, Literal, Node, NodeKind, Quad, QuadDataset, make_node
from jsonld_rdf.errors import (
    ConfigValidationError,
    InvalidInputError,
    MalformedLiteralError,
    ParseError,
    RDFCodecError,
    UnknownFormatError,
)
from jsonld_rdf.config import CodecConfig, NQuadsConfig, TurtleConfig, get_default_config
from jsonld_rdf.formats import (
    NQuadsParser,
    NQuadsSerializer,
    TurtleParser,
    TurtleSerializer,
    parse_nquads,
    parse_turtle,
    serialize_nquads,
    serialize_turtle,
)
from jsonld_rdf.codecs import (
    from_rdf,
    get_parser,
    get_serializer,
    register_parser,
    register_serializer,
    remove_parser,
    remove_serializer,
    to_rdf,
)

__all__ = [
    # Dataset model
    "IRI",
    "BlankNode",
    "Literal",
    "Node",
    "NodeKind",
    "Quad",
    "QuadDataset",
    "make_node",
    # Errors
    "RDFCodecError",
    "InvalidInputError",
    "ParseError",
    "UnknownFormatError",
    "MalformedLiteralError",
    "ConfigValidationError",
    # Configuration
    "CodecConfig",
    "TurtleConfig",
    "NQuadsConfig",
    "get_default_config",
    # Codecs
    "NQuadsParser",
    "NQuadsSerializer",
    "TurtleParser",
    "TurtleSerializer",
    "parse_nquads",
    "parse_turtle",
    "serialize_nquads",
    "serialize_turtle",
    # Registry
    "from_rdf",
    "to_rdf",
    "register_parser",
    "remove_parser",
    "get_parser",
    "register_serializer",
    "remove_serializer",
    "get_serializer",
]
