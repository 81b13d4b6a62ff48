"""
Turtle Parser and Serializer.

Supports the Turtle subset used by the JSON-LD toolkit:
- @prefix / @base directives (and SPARQL-style PREFIX / BASE) at the top
  of the document
- IRIs <...>, prefixed names p:local, blank node labels _:name
- Anonymous blank nodes [ ... ], nested to any depth
- The 'a' keyword for rdf:type
- Literals "..." / '...' with ^^datatype or @language, plus numeric and
  boolean shorthand
- Statement separators , ; .

The parser works line by line on the remaining text of the current line,
trying each production in a fixed priority order (subject, predicate,
object, continuation). The serializer groups statements by subject,
inlines blank nodes that are referenced exactly once and wraps long lines.

Reference: https://www.w3.org/TR/turtle/
"""

import logging
import re
from dataclasses import dataclass, field
from io import TextIOBase
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
from urllib.parse import urljoin

from jsonld_rdf.config import TurtleConfig
from jsonld_rdf.constants import (
    DEFAULT_GRAPH,
    RDF_TYPE,
    XSD_BOOLEAN,
    XSD_DECIMAL,
    XSD_DOUBLE,
    XSD_INTEGER,
    XSD_STRING,
)
from jsonld_rdf.dataset import IRI, BlankNode, Literal, Node, Quad, QuadDataset
from jsonld_rdf.errors import InvalidInputError, ParseError
from jsonld_rdf.formats.nquads import EOLN_PATTERN, escape, unescape

logger = logging.getLogger(__name__)


# =============================================================================
# Grammar
# =============================================================================

PN_PREFIX = r"(?:[^\W\d_](?:[\w.-]*[\w-])?)?"
_PN_LOCAL_ESC = r"\\[_~.\-!$&'()*+,;=/?#@%]"
PN_LOCAL = r"(?:[\w:%-]|" + _PN_LOCAL_ESC + r")(?:[\w.:%-]|" + _PN_LOCAL_ESC + r")*"

IRIREF_PATTERN = re.compile(r"<([^>]*)>")
PNAME_PATTERN = re.compile(r"(?P<prefix>" + PN_PREFIX + r"):(?P<local>" + PN_LOCAL + r")?")
BNODE_PATTERN = re.compile(r"_:[\w][\w.-]*")
STRING_PATTERN = re.compile(
    r"(?:\"(?P<dq>(?:[^\"\\\n]|\\.)*)\"|'(?P<sq>(?:[^'\\\n]|\\.)*)')"
    r"(?:\^\^(?:<(?P<dt_iri>[^>]*)>|(?P<dt_prefix>" + PN_PREFIX + r"):(?P<dt_local>" + PN_LOCAL + r")?)"
    r"|@(?P<lang>[a-zA-Z]+(?:-[a-zA-Z0-9]+)*))?"
)
NUMBER_PATTERN = re.compile(
    r"[+-]?(?:(?P<double>\d+\.\d*[eE][+-]?\d+|\.\d+[eE][+-]?\d+|\d+[eE][+-]?\d+)"
    r"|(?P<decimal>\d*\.\d+)|(?P<integer>\d+))"
)
BOOLEAN_PATTERN = re.compile(r"(?:true|false)(?=[\s,;.\]]|$)")
A_KEYWORD_PATTERN = re.compile(r"a(?=[ \t]|$)")
ANON_PATTERN = re.compile(r"\[[ \t]*\]")

PREFIX_ID_PATTERN = re.compile(r"@prefix[ \t]+(" + PN_PREFIX + r"):[ \t]*<([^>]*)>[ \t]*\.")
BASE_PATTERN = re.compile(r"@base[ \t]+<([^>]*)>[ \t]*\.")
SPARQL_PREFIX_PATTERN = re.compile(r"(?i:PREFIX)[ \t]+(" + PN_PREFIX + r"):[ \t]*<([^>]*)>")
SPARQL_BASE_PATTERN = re.compile(r"(?i:BASE)[ \t]+<([^>]*)>")

WHITESPACE_PATTERN = re.compile(r"[ \t]*")
LOCAL_ESCAPE_PATTERN = re.compile(r"\\(.)")
SCHEME_PATTERN = re.compile(r"[A-Za-z][A-Za-z0-9+.-]*:")
LOCAL_NAME_PATTERN = re.compile(PN_LOCAL)
PREFIX_NAME_PATTERN = re.compile(PN_PREFIX)


# =============================================================================
# Parser
# =============================================================================

@dataclass
class _Frame:
    """Subject and predicate saved when descending into [ ... ]."""
    subject: Optional[Node]
    predicate: Optional[IRI]


class _ParserState:
    """
    Mutable state of one parse call.

    Keeps the cursor (line buffer, line number, position), the statement
    being built, the namespace table and the stack of open [ ... ] frames.
    """

    def __init__(self, text: str, blank_node_prefix: str):
        self.lines = EOLN_PATTERN.split(text)
        self.line: Optional[str] = None
        self.line_number = 0
        self.position = 0
        self.subject: Optional[Node] = None
        self.predicate: Optional[IRI] = None
        self.namespaces: Dict[str, str] = {}
        self.base: Optional[str] = None
        self.blank_node_prefix = blank_node_prefix
        self.bnodes = 0
        # labels written in the document; generated labels must not reuse them
        self.labels = {match.group(0).rstrip(".") for match in BNODE_PATTERN.finditer(text)}
        self.frames: List[_Frame] = []
        self._next_line()
        self._skip_blank()

    def _next_line(self) -> None:
        if self.line_number < len(self.lines):
            self.line = self.lines[self.line_number]
            self.line_number += 1
            self.position = 0
        else:
            self.line = None

    def _skip_blank(self) -> None:
        """Drop whitespace, comments and empty lines in front of the cursor."""
        while self.line is not None:
            skipped = WHITESPACE_PATTERN.match(self.line).end()
            if skipped:
                self.position += skipped
                self.line = self.line[skipped:]
            if self.line and not self.line.startswith("#"):
                return
            self._next_line()
        if not self.end_is_ok():
            raise self.error("unexpected end of input")

    def end_is_ok(self) -> bool:
        return self.subject is None and not self.frames

    def advance(self, length: int) -> None:
        """Consume ``length`` characters and move to the next token."""
        if length <= 0:
            return
        self.position += length
        self.line = self.line[length:]
        self._skip_blank()

    def push(self) -> None:
        self.frames.append(_Frame(self.subject, self.predicate))
        self.subject = None
        self.predicate = None

    def pop(self) -> None:
        bnode = self.subject
        frame = self.frames.pop()
        if frame.subject is None:
            # [ ... ] in subject position: the blank node stays the subject
            self.subject = bnode
            self.predicate = None
        else:
            self.subject = frame.subject
            self.predicate = frame.predicate

    def new_blank_node(self) -> BlankNode:
        while True:
            self.bnodes += 1
            label = f"{self.blank_node_prefix}{self.bnodes}"
            if label not in self.labels:
                return BlankNode(label)

    def resolve(self, iri: str) -> str:
        if self.base is None or SCHEME_PATTERN.match(iri):
            return iri
        resolved = urljoin(self.base, iri)
        # urljoin drops an empty fragment
        if iri.endswith("#") and not resolved.endswith("#"):
            resolved += "#"
        return resolved

    def expand_name(self, prefix: str, local: str) -> str:
        local = LOCAL_ESCAPE_PATTERN.sub(r"\1", local)
        if prefix in self.namespaces:
            return self.namespaces[prefix] + local
        # unknown prefix: rejoin the original name
        logger.warning(
            f"Unknown prefix '{prefix}:' on line {self.line_number}; "
            f"keeping '{prefix}:{local}' as an IRI"
        )
        return f"{prefix}:{local}"

    def error(self, message: str) -> ParseError:
        return ParseError(message, self.line_number, self.position + 1)


def _name_length(match: "re.Match", local_group: str) -> int:
    """
    Length of a prefixed name match without trailing dots.

    The local name grammar accepts '.', so "ex:o." swallows the dot that
    ends the statement; the dot is left on the line.
    """
    local = match.group(local_group) or ""
    return match.end() - (len(local) - len(local.rstrip(".")))


class TurtleParser:
    """
    Parser for Turtle format.

    Each call to parse() creates its own state, so a parser can be reused
    for many documents (but not from several threads at once).

        @prefix ex: <http://example.org/> .

        ex:alice a ex:Person ;
            ex:knows [ ex:name "Bob"@en ] .
    """

    def __init__(self, config: Optional[TurtleConfig] = None):
        self.config = config or TurtleConfig()

    def parse(self, source: Union[str, TextIOBase]) -> QuadDataset:
        """
        Parse Turtle content.

        Args:
            source: Turtle content as string or text stream

        Returns:
            QuadDataset with all statements in the default graph and the
            declared prefixes as namespaces

        Raises:
            InvalidInputError: source is not text
            ParseError: the first grammar violation found
        """
        if isinstance(source, TextIOBase):
            source = source.read()
        if not isinstance(source, str):
            raise InvalidInputError("Turtle parser requires a string input", source)

        dataset = QuadDataset()
        state = _ParserState(source, self.config.blank_node_prefix)
        self._parse_document(state, dataset)
        logger.debug(
            f"Parsed {len(dataset)} triples from {len(state.lines)} lines of Turtle "
            f"({len(state.namespaces)} prefixes)"
        )
        return dataset

    def parse_file(self, path: Union[str, Path]) -> QuadDataset:
        """Parse a Turtle file (UTF-8)."""
        return self.parse(Path(path).read_text(encoding="utf-8"))

    def _parse_document(self, state: _ParserState, dataset: QuadDataset) -> None:
        in_prologue = True

        while state.line is not None:
            # prefixes are only accepted at the top of the document
            if in_prologue:
                if self._parse_directive(state, dataset):
                    continue
                in_prologue = False

            if state.subject is None:
                self._parse_subject(state)

            if state.predicate is None:
                self._parse_predicate(state)

            if state.line.startswith("[") and not ANON_PATTERN.match(state.line):
                bnode = state.new_blank_node()
                dataset.add(Quad(state.subject, state.predicate, bnode, DEFAULT_GRAPH))
                state.push()
                state.subject = bnode
                state.advance(1)
                continue

            obj, length = self._match_object(state)
            if obj is None:
                raise state.error("missing expected object or blank node")
            dataset.add(Quad(state.subject, state.predicate, obj, DEFAULT_GRAPH))
            state.advance(length)

            while state.line.startswith("]"):
                if not state.frames:
                    raise state.error('unexpected "]"')
                state.pop()
                state.advance(1)

            # after "[ ... ]" as subject there is no predicate to continue
            if state.predicate is None and state.line[:1] in (",", ";"):
                raise state.error("missing expected predicate")

            if state.line.startswith(","):
                state.advance(1)
            elif state.line.startswith(";"):
                state.predicate = None
                state.advance(1)
            elif state.line.startswith("."):
                if state.frames:
                    raise state.error('missing expected "]"')
                state.subject = None
                state.predicate = None
                state.advance(1)
            elif state.predicate is None:
                # "[ ... ] predicate object ." form
                continue
            else:
                raise state.error(
                    'missing expected "]" "," ";" or "."'
                )

    def _parse_directive(self, state: _ParserState, dataset: QuadDataset) -> bool:
        line = state.line
        match = PREFIX_ID_PATTERN.match(line) or SPARQL_PREFIX_PATTERN.match(line)
        if match:
            prefix, iri = match.group(1), state.resolve(match.group(2))
            state.namespaces[prefix] = iri
            dataset.set_namespace(prefix, iri)
            state.advance(match.end())
            return True

        match = BASE_PATTERN.match(line) or SPARQL_BASE_PATTERN.match(line)
        if match:
            state.base = state.resolve(match.group(1))
            state.advance(match.end())
            return True

        return False

    def _match_resource(self, state: _ParserState, blank_nodes: bool) -> Tuple[Optional[Node], int]:
        """Match an IRI, a prefixed name or (optionally) a blank node label."""
        line = state.line

        match = IRIREF_PATTERN.match(line)
        if match:
            return IRI(state.resolve(match.group(1))), match.end()

        match = PNAME_PATTERN.match(line)
        if match:
            local = (match.group("local") or "").rstrip(".")
            return IRI(state.expand_name(match.group("prefix"), local)), _name_length(match, "local")

        if blank_nodes:
            match = BNODE_PATTERN.match(line)
            if match:
                label = match.group(0).rstrip(".")
                return BlankNode(label), len(label)

        return None, 0

    def _parse_subject(self, state: _ParserState) -> None:
        subject, length = self._match_resource(state, blank_nodes=True)
        if subject is not None:
            state.subject = subject
            state.advance(length)
        elif ANON_PATTERN.match(state.line):
            state.subject = state.new_blank_node()
            state.advance(ANON_PATTERN.match(state.line).end())
        elif state.line.startswith("["):
            bnode = state.new_blank_node()
            state.push()
            state.subject = bnode
            state.advance(1)
        else:
            raise state.error("missing expected subject")

    def _parse_predicate(self, state: _ParserState) -> None:
        predicate, length = self._match_resource(state, blank_nodes=False)
        if predicate is not None:
            state.predicate = predicate
            state.advance(length)
        elif A_KEYWORD_PATTERN.match(state.line):
            state.predicate = IRI(RDF_TYPE)
            state.advance(1)
        else:
            raise state.error("missing expected predicate")

    def _match_object(self, state: _ParserState) -> Tuple[Optional[Node], int]:
        obj, length = self._match_resource(state, blank_nodes=True)
        if obj is not None:
            return obj, length

        line = state.line
        match = ANON_PATTERN.match(line)
        if match:
            return state.new_blank_node(), match.end()

        match = STRING_PATTERN.match(line)
        if match:
            raw = match.group("dq") if match.group("dq") is not None else match.group("sq")
            value = unescape(raw)
            if match.group("lang"):
                return Literal(value, language=match.group("lang")), match.end()
            if match.group("dt_iri") is not None:
                return Literal(value, state.resolve(match.group("dt_iri"))), match.end()
            if match.group("dt_prefix") is not None:
                length = _name_length(match, "dt_local")
                local = (match.group("dt_local") or "").rstrip(".")
                return Literal(value, state.expand_name(match.group("dt_prefix"), local)), length
            return Literal(value, XSD_STRING), match.end()

        match = NUMBER_PATTERN.match(line)
        if match:
            if match.group("double"):
                datatype = XSD_DOUBLE
            elif match.group("decimal"):
                datatype = XSD_DECIMAL
            else:
                datatype = XSD_INTEGER
            return Literal(match.group(0), datatype), match.end()

        match = BOOLEAN_PATTERN.match(line)
        if match:
            return Literal(match.group(0), XSD_BOOLEAN), match.end()

        return None, 0


# =============================================================================
# Serializer
# =============================================================================

@dataclass
class _Subject:
    """A subject with its predicates; objects are rendered text or nested subjects."""
    label: str
    predicates: Dict[str, List[Union[str, "_Subject"]]] = field(default_factory=dict)
    blank: bool = False


@dataclass
class _Reference:
    """Where a blank node appears as an object."""
    owner: str
    objects: List[Union[str, _Subject]]
    index: int


class _Compactor:
    """Turns IRIs into prefixed names and remembers which prefixes were used."""

    def __init__(self, namespaces: Dict[str, str]):
        # namespace IRI -> prefix, in table order
        self.namespaces = namespaces
        self.used: Dict[str, str] = {}

    def compact(self, iri: str) -> str:
        best = None
        for namespace in self.namespaces:
            if iri.startswith(namespace) and (best is None or len(namespace) > len(best)):
                local = iri[len(namespace):]
                if local == "" or (LOCAL_NAME_PATTERN.fullmatch(local) and not local.endswith(".")):
                    best = namespace
        if best is None:
            return f"<{iri}>"
        prefix = self.namespaces[best]
        self.used.setdefault(best, prefix)
        return f"{prefix}:{iri[len(best):]}"

    def node(self, node: Node) -> str:
        if node.is_blank_node():
            return node.value
        return self.compact(node.value)

    def header(self) -> str:
        return "".join(f"@prefix {prefix}: <{iri}> .\n" for iri, prefix in self.used.items())


def _is_prefix_iri(iri: str) -> bool:
    return iri[-1:] in (":", "/", "?", "#", "[", "]", "@")


class TurtleSerializer:
    """
    Serializer for Turtle format.

    Args:
        context: Optional JSON-LD context whose terms provide extra prefixes
        config: Line length, indentation and named graph handling
    """

    def __init__(self, context: Optional[Dict[str, Any]] = None, config: Optional[TurtleConfig] = None):
        self.context = context
        self.config = config or TurtleConfig()

    def serialize(self, dataset: QuadDataset) -> str:
        """
        Serialize a dataset to Turtle.

        Args:
            dataset: QuadDataset to write; it is not modified

        Returns:
            Turtle formatted string
        """
        compactor = _Compactor(self._namespaces(dataset))
        subjects, refs = self._group(dataset, compactor)
        self._inline(subjects, refs)

        parts = []
        for subject in subjects.values():
            # a blank subject that nothing points at needs no label
            anonymous = subject.blank and subject.label not in refs
            parts.append(self._render(subject, 0, 0, nested=False, anonymous=anonymous)[0])
        body = "".join(parts)
        header = compactor.header()
        logger.debug(f"Serialized {len(subjects)} subjects to Turtle using {len(compactor.used)} prefixes")
        return header + "\n" + body if header else body

    def _namespaces(self, dataset: QuadDataset) -> Dict[str, str]:
        """Build the namespace -> prefix table: dataset, context, then defaults."""
        table: Dict[str, str] = {}

        def add(prefix: str, iri: Any) -> None:
            if isinstance(iri, str) and iri and PREFIX_NAME_PATTERN.fullmatch(prefix):
                table.setdefault(iri, prefix)

        for prefix, iri in dataset.namespaces.items():
            add(prefix, iri)

        context = self.context or {}
        if isinstance(context.get("@context"), dict):
            context = context["@context"]
        for term, value in context.items():
            if term.startswith("@"):
                continue
            if isinstance(value, dict):
                value = value.get("@id")
            if isinstance(value, str) and _is_prefix_iri(value):
                add(term, value)

        for prefix, iri in self.config.default_prefixes.items():
            add(prefix, iri)
        return table

    def _group(self, dataset: QuadDataset, compactor: _Compactor) -> Tuple[Dict[str, _Subject], Dict[str, List[_Reference]]]:
        subjects: Dict[str, _Subject] = {}
        refs: Dict[str, List[_Reference]] = {}

        if self.config.include_named_graphs:
            graph_names = dataset.graph_names()
        else:
            graph_names = [DEFAULT_GRAPH]
            dropped = [g for g in dataset.graph_names() if g != DEFAULT_GRAPH and dataset.get_quads(g)]
            if dropped:
                logger.warning(f"Turtle output skips {len(dropped)} named graph(s): {', '.join(dropped)}")

        for graph_name in graph_names:
            for quad in dataset.get_quads(graph_name):
                key = compactor.node(quad.subject)
                if quad.predicate.value == RDF_TYPE:
                    predicate = "a"
                else:
                    predicate = compactor.compact(quad.predicate.value)

                subject = subjects.setdefault(key, _Subject(key, blank=quad.subject.is_blank_node()))
                objects = subject.predicates.setdefault(predicate, [])

                obj = quad.object
                if obj.is_literal():
                    objects.append(self._render_literal(obj, compactor))
                    continue
                if obj.is_blank_node():
                    refs.setdefault(obj.value, []).append(_Reference(key, objects, len(objects)))
                objects.append(compactor.node(obj))

        return subjects, refs

    def _render_literal(self, literal: Literal, compactor: _Compactor) -> str:
        text = f'"{escape(literal.value)}"'
        if literal.language is not None:
            return f"{text}@{literal.language}"
        if literal.datatype and literal.datatype != XSD_STRING:
            return f"{text}^^{compactor.compact(literal.datatype)}"
        return text

    def _inline(self, subjects: Dict[str, _Subject], refs: Dict[str, List[_Reference]]) -> None:
        """Nest every blank node referenced exactly once at its reference."""
        parents: Dict[str, str] = {}
        for label, references in refs.items():
            if len(references) != 1 or label not in subjects:
                continue
            ref = references[0]
            owner = ref.owner
            while owner is not None and owner != label:
                owner = parents.get(owner)
            if owner == label:
                # nesting would put the node inside itself
                continue
            ref.objects[ref.index] = subjects.pop(label)
            parents[label] = ref.owner

    def _render(
        self, subject: _Subject, indent: int, column: int, nested: bool, anonymous: bool = False
    ) -> Tuple[str, int]:
        """
        Render a subject block starting at ``column``; returns (text, end column).

        Nested and anonymous blocks are bracketed as [ ... ]; other blocks
        start with the subject's name.
        """
        max_length = self.config.max_line_length
        margin = (indent + 1) * self.config.indent_width
        parts = []

        head = "[ " if nested or anonymous else subject.label + " "
        parts.append(head)
        column += len(head)

        predicates = list(subject.predicates.items())
        for p_index, (predicate, objects) in enumerate(predicates):
            parts.append(predicate + " ")
            column += len(predicate) + 1

            for o_index, obj in enumerate(objects):
                more = o_index < len(objects) - 1
                text, end = self._render_object(obj, indent, column)
                first_line = text.split("\n", 1)[0]
                if (1 if more else 0) + column + len(first_line) > max_length and column > margin:
                    parts[-1] = parts[-1].rstrip(" ")
                    parts.append("\n" + " " * margin)
                    column = margin
                    text, end = self._render_object(obj, indent, column)
                parts.append(text)
                column = end
                if more:
                    parts.append(",")
                    column += 1
                    if column < max_length:
                        parts.append(" ")
                        column += 1

            if p_index < len(predicates) - 1:
                parts.append(" ;\n" + " " * margin)
                column = margin

        if nested:
            parts.append(" ]")
            column += 2
        else:
            parts.append(" ] .\n\n" if anonymous else " .\n\n")
            column = 0
        return "".join(parts), column

    def _render_object(self, obj: Union[str, _Subject], indent: int, column: int) -> Tuple[str, int]:
        if isinstance(obj, _Subject):
            return self._render(obj, indent + 1, column, nested=True)
        return obj, column + len(obj)


def parse_turtle(source: Union[str, TextIOBase], config: Optional[TurtleConfig] = None) -> QuadDataset:
    """
    Parse Turtle content.

    Args:
        source: Turtle content as string or text stream
        config: Optional Turtle settings

    Returns:
        QuadDataset with triples and prefixes
    """
    parser = TurtleParser(config)
    return parser.parse(source)


def serialize_turtle(
    dataset: QuadDataset,
    context: Optional[Dict[str, Any]] = None,
    config: Optional[TurtleConfig] = None,
) -> str:
    """
    Serialize a dataset to Turtle.

    Args:
        dataset: QuadDataset to write
        context: Optional JSON-LD context supplying prefixes
        config: Optional Turtle settings

    Returns:
        Turtle formatted string
    """
    serializer = TurtleSerializer(context, config)
    return serializer.serialize(dataset)
