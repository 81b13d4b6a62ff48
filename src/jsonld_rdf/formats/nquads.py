"""
N-Quads codec for QuadDataset.

Every non-blank, non-comment line holds one statement: a subject, a
predicate, an object and an optional graph label, closed by a dot. A line
without a graph label belongs to the default graph ("@default").

The parser matches each line against a single regular expression and
reports the line and column of the first element that fails. The
serializer writes one escaped line per quad and sorts the lines, so equal
datasets always produce identical text.
"""

import logging
import re
from io import TextIOBase
from pathlib import Path
from typing import Optional, Set, Union

from jsonld_rdf.config import NQuadsConfig
from jsonld_rdf.constants import BLANK_NODE_PREFIX, DEFAULT_GRAPH, RDF_LANGSTRING, XSD_STRING
from jsonld_rdf.dataset import IRI, BlankNode, Literal, Quad, QuadDataset
from jsonld_rdf.errors import InvalidInputError, ParseError

logger = logging.getLogger(__name__)


# =============================================================================
# Escaping
# =============================================================================

_ESCAPES = {
    "\\": "\\\\",
    "\t": "\\t",
    "\n": "\\n",
    "\r": "\\r",
    '"': '\\"',
}

_UNESCAPES = {
    "t": "\t",
    "b": "\b",
    "n": "\n",
    "r": "\r",
    "f": "\f",
    '"': '"',
    "'": "'",
    "\\": "\\",
}

_ESCAPE_CHARS = re.compile(r'[\\\t\n\r"]')
_ESCAPE_SEQUENCE = re.compile(
    r"\\(?:([tbnrf\"'\\])|u([0-9A-Fa-f]{4})|U([0-9A-Fa-f]{8}))"
)


def escape(value: str) -> str:
    """Escape backslash, tab, newline, carriage return and double quote."""
    return _ESCAPE_CHARS.sub(lambda m: _ESCAPES[m.group(0)], value)


def _unescape_match(match: "re.Match") -> str:
    if match.group(1) is not None:
        return _UNESCAPES[match.group(1)]
    return chr(int(match.group(2) or match.group(3), 16))


def unescape(value: str) -> str:
    """Decode ECHAR (``\\t``, ``\\"`` ...) and UCHAR (``\\u00e9``) sequences."""
    return _ESCAPE_SEQUENCE.sub(_unescape_match, value)


# =============================================================================
# Grammar
# =============================================================================

_IRI = r"(?:<([^>]*)>)"
_BNODE = r"(_:(?:[A-Za-z0-9_][A-Za-z0-9_.-]*))"
_PLAIN = r'"([^"\\]*(?:\\.[^"\\]*)*)"'
_DATATYPE = r"(?:\^\^" + _IRI + r")"
_LANGUAGE = r"(?:@([a-zA-Z]+(?:-[a-zA-Z0-9]+)*))"
_LITERAL = r"(?:" + _PLAIN + r"(?:" + _DATATYPE + r"|" + _LANGUAGE + r")?)"
_WS = r"[ \t]+"
_WSO = r"[ \t]*"

_SUBJECT = r"(?:" + _IRI + r"|" + _BNODE + r")" + _WS
_PROPERTY = _IRI + _WS
_OBJECT = r"(?:" + _IRI + r"|" + _BNODE + r"|" + _LITERAL + r")" + _WSO
_GRAPH = r"(?:\.|(?:(?:" + _IRI + r"|" + _BNODE + r")" + _WSO + r"\.))"

QUAD_PATTERN = re.compile(r"^" + _WSO + _SUBJECT + _PROPERTY + _OBJECT + _GRAPH + _WSO + r"$")
EOLN_PATTERN = re.compile(r"\r\n|\n|\r")
SKIP_PATTERN = re.compile(r"^" + _WSO + r"(?:#.*)?$")

# each element of a quad in turn, used to locate where a bad line stops matching
_PARTIAL_PATTERNS = [
    re.compile(_WSO + _SUBJECT),
    re.compile(_WSO + _SUBJECT + _PROPERTY),
    re.compile(_WSO + _SUBJECT + _PROPERTY + _OBJECT),
    re.compile(_WSO + _SUBJECT + _PROPERTY + _OBJECT + _GRAPH),
]


def _error_column(line: str) -> int:
    """1-based column of the first character no quad element accepts."""
    end = re.match(_WSO, line).end()
    for pattern in _PARTIAL_PATTERNS:
        match = pattern.match(line)
        if match is None:
            break
        end = match.end()
    return end + 1


class NQuadsParser:
    """
    Parser for N-Quads format.

    Format:
        <subject> <predicate> <object> .
        <subject> <predicate> <object> <graph> .

    Blank lines and ``#`` comment lines are skipped.
    """

    def __init__(self, config: Optional[NQuadsConfig] = None):
        self.config = config or NQuadsConfig()

    def parse(self, source: Union[str, TextIOBase]) -> QuadDataset:
        """
        Parse N-Quads content.

        Args:
            source: N-Quads content as string or text stream

        Returns:
            QuadDataset with one graph per distinct graph label

        Raises:
            InvalidInputError: source is not text
            ParseError: a line is not a valid quad
        """
        if isinstance(source, TextIOBase):
            source = source.read()
        if not isinstance(source, str):
            raise InvalidInputError("N-Quads parser requires a string input", source)

        dataset = QuadDataset()
        seen: Optional[Set[Quad]] = set() if self.config.deduplicate else None

        for line_number, line in enumerate(EOLN_PATTERN.split(source), start=1):
            if SKIP_PATTERN.match(line):
                continue
            quad = self._parse_line(line, line_number)
            if seen is not None:
                if quad in seen:
                    continue
                seen.add(quad)
            dataset.add(quad)

        logger.debug(f"Parsed {len(dataset)} quads from N-Quads input")
        return dataset

    def parse_file(self, path: Union[str, Path]) -> QuadDataset:
        """Parse an N-Quads file (UTF-8)."""
        return self.parse(Path(path).read_text(encoding="utf-8"))

    def _parse_line(self, line: str, line_number: int) -> Quad:
        match = QUAD_PATTERN.match(line)
        if match is None:
            raise ParseError("Error while parsing N-Quads; invalid quad", line_number, _error_column(line))
        groups = match.groups()

        if groups[0] is not None:
            subject = IRI(unescape(groups[0]))
        else:
            subject = BlankNode(groups[1])

        predicate = IRI(unescape(groups[2]))

        if groups[3] is not None:
            obj = IRI(unescape(groups[3]))
        elif groups[4] is not None:
            obj = BlankNode(groups[4])
        else:
            language = groups[7]
            if groups[6] is not None:
                datatype = unescape(groups[6])
            elif language is not None:
                datatype = RDF_LANGSTRING
            else:
                datatype = XSD_STRING
            obj = Literal(unescape(groups[5]), datatype, language)

        if groups[8] is not None:
            graph = unescape(groups[8])
        elif groups[9] is not None:
            graph = groups[9]
        else:
            graph = DEFAULT_GRAPH

        return Quad(subject, predicate, obj, graph)


class NQuadsSerializer:
    """
    Serializer for N-Quads format.

    Writes one line per quad; lines are sorted unless
    ``NQuadsConfig.sort_output`` is disabled.
    """

    def __init__(self, config: Optional[NQuadsConfig] = None):
        self.config = config or NQuadsConfig()

    def serialize(self, dataset: QuadDataset) -> str:
        """
        Serialize a dataset to N-Quads.

        Args:
            dataset: QuadDataset to write

        Returns:
            N-Quads formatted string, every line terminated by a newline
        """
        lines = [serialize_nquad(quad) for quad in dataset.quads()]
        if self.config.sort_output:
            lines.sort()
        return "".join(lines)


def _format_term(node) -> str:
    if node.is_iri():
        return f"<{node.value}>"
    if node.is_blank_node():
        return node.value
    text = f'"{escape(node.value)}"'
    if node.language is not None:
        return f"{text}@{node.language}"
    if node.datatype != XSD_STRING:
        return f"{text}^^<{node.datatype}>"
    return text


def serialize_nquad(quad: Quad) -> str:
    """Convert one quad to an N-Quads line (including the trailing newline)."""
    parts = [
        _format_term(quad.subject),
        _format_term(quad.predicate),
        _format_term(quad.object),
    ]
    if quad.graph != DEFAULT_GRAPH:
        if quad.graph.startswith(BLANK_NODE_PREFIX):
            parts.append(quad.graph)
        else:
            parts.append(f"<{quad.graph}>")
    return " ".join(parts) + " .\n"


def parse_nquads(source: Union[str, TextIOBase], config: Optional[NQuadsConfig] = None) -> QuadDataset:
    """
    Parse N-Quads content.

    Args:
        source: N-Quads content as string or text stream
        config: Optional N-Quads settings

    Returns:
        QuadDataset
    """
    parser = NQuadsParser(config)
    return parser.parse(source)


def serialize_nquads(dataset: QuadDataset, config: Optional[NQuadsConfig] = None) -> str:
    """
    Serialize a dataset to canonical (sorted) N-Quads.

    Args:
        dataset: QuadDataset to write
        config: Optional N-Quads settings

    Returns:
        N-Quads formatted string
    """
    serializer = NQuadsSerializer(config)
    return serializer.serialize(dataset)
