"""
Quad Dataset model.

The canonical in-memory representation shared by every codec:
- Nodes: IRIs, blank nodes and literals
- Quads: (subject, predicate, object, graph) statements
- QuadDataset: graph name -> ordered quads, plus a namespace table

Datasets are plain data. Insertion preserves order and never deduplicates;
validating arguments is the job of the codec that produces them.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import polars as pl

from jsonld_rdf.constants import (
    BLANK_NODE_PREFIX,
    DEFAULT_GRAPH,
    RDF_LANGSTRING,
    XSD_BOOLEAN,
    XSD_DOUBLE,
    XSD_INTEGER,
    XSD_STRING,
)
from jsonld_rdf.errors import MalformedLiteralError


# =============================================================================
# Nodes
# =============================================================================

class NodeKind(Enum):
    """RDF node kinds, valued with the JSON-LD RDF dataset type names."""
    IRI = "IRI"
    BLANK_NODE = "blank node"
    LITERAL = "literal"


# Sort rank: literals < blank nodes < IRIs
_KIND_RANK = {NodeKind.LITERAL: 0, NodeKind.BLANK_NODE: 1, NodeKind.IRI: 2}

_NUMERIC = re.compile(r"^[+-]?[0-9]+((?:\.?[0-9]+((?:E?[+-]?[0-9]+)|)|))$")


@dataclass(frozen=True)
class Node:
    """Base class of IRI, BlankNode and Literal."""
    value: str

    kind = None  # type: Optional[NodeKind]

    def is_iri(self) -> bool:
        return self.kind is NodeKind.IRI

    def is_blank_node(self) -> bool:
        return self.kind is NodeKind.BLANK_NODE

    def is_literal(self) -> bool:
        return self.kind is NodeKind.LITERAL

    def sort_key(self) -> Tuple[int, str, str, str]:
        return (_KIND_RANK[self.kind], self.value, "", "")

    def __lt__(self, other: "Node") -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def to_object(self, use_native_types: bool = False) -> Dict[str, Any]:
        """Convert to a JSON-LD node reference."""
        return {"@id": self.value}


@dataclass(frozen=True)
class IRI(Node):
    """An absolute or relative IRI reference."""

    kind = NodeKind.IRI


@dataclass(frozen=True)
class BlankNode(Node):
    """A blank node; ``value`` is the full label, e.g. ``_:b1``."""

    kind = NodeKind.BLANK_NODE

    @property
    def label(self) -> str:
        """The label without the ``_:`` marker."""
        return self.value[len(BLANK_NODE_PREFIX):]


@dataclass(frozen=True)
class Literal(Node):
    """
    A literal value.

    A literal without datatype is an ``xsd:string``; a literal with a
    language tag is an ``rdf:langString``. Combining a language tag with
    any other datatype raises MalformedLiteralError.
    """
    datatype: Optional[str] = None
    language: Optional[str] = None

    kind = NodeKind.LITERAL

    def __post_init__(self):
        if self.language:
            if self.datatype not in (None, XSD_STRING, RDF_LANGSTRING):
                raise MalformedLiteralError(
                    f"Literal {self.value!r} has language {self.language!r} "
                    f"and datatype {self.datatype!r}"
                )
            object.__setattr__(self, "datatype", RDF_LANGSTRING)
        else:
            object.__setattr__(self, "language", None)
            if self.datatype is None:
                object.__setattr__(self, "datatype", XSD_STRING)

    def sort_key(self) -> Tuple[int, str, str, str]:
        return (_KIND_RANK[self.kind], self.value, self.datatype, self.language or "")

    def to_object(self, use_native_types: bool = False) -> Dict[str, Any]:
        """
        Convert to a JSON-LD value object.

        With ``use_native_types`` booleans, integers and doubles whose lexical
        form is valid become native Python values.
        """
        rval: Dict[str, Any] = {"@value": self.value}
        if self.language is not None:
            rval["@language"] = self.language
            return rval
        datatype = self.datatype
        if datatype == XSD_STRING:
            return rval
        if use_native_types:
            if datatype == XSD_BOOLEAN and self.value in ("true", "false"):
                rval["@value"] = self.value == "true"
                return rval
            if _NUMERIC.match(self.value):
                if datatype == XSD_INTEGER and str(int(self.value)) == self.value:
                    rval["@value"] = int(self.value)
                    return rval
                if datatype == XSD_DOUBLE:
                    rval["@value"] = float(self.value)
                    return rval
        rval["@type"] = datatype
        return rval


def make_node(value: Union[str, Node]) -> Node:
    """Build an IRI or BlankNode from a string; nodes pass through."""
    if isinstance(value, Node):
        return value
    if value.startswith(BLANK_NODE_PREFIX):
        return BlankNode(value)
    return IRI(value)


# =============================================================================
# Quads
# =============================================================================

@dataclass(frozen=True)
class Quad:
    """An RDF statement in a graph (a triple when graph is the default)."""
    subject: Node
    predicate: IRI
    object: Node
    graph: str = DEFAULT_GRAPH

    @property
    def is_triple(self) -> bool:
        return self.graph == DEFAULT_GRAPH

    def sort_key(self) -> tuple:
        return (
            self.graph,
            self.subject.sort_key(),
            self.predicate.sort_key(),
            self.object.sort_key(),
        )

    def __lt__(self, other: "Quad") -> bool:
        if not isinstance(other, Quad):
            return NotImplemented
        return self.sort_key() < other.sort_key()


# =============================================================================
# Dataset
# =============================================================================

class QuadDataset:
    """
    Mapping from graph name to an ordered list of quads.

    The default graph ``@default`` always exists. A namespace table
    (prefix -> IRI) travels with the dataset so that the Turtle serializer
    can compact IRIs the way the source document did.
    """

    def __init__(self):
        self._graphs: Dict[str, List[Quad]] = {DEFAULT_GRAPH: []}
        self._namespaces: Dict[str, str] = {}

    # -- insertion ------------------------------------------------------------

    def add(self, quad: Quad) -> None:
        """Append a quad to its graph."""
        self._graphs.setdefault(quad.graph, []).append(quad)

    def add_quad(
        self,
        subject: Union[str, Node],
        predicate: Union[str, IRI],
        obj: Union[str, Node],
        graph: Optional[str] = None,
    ) -> None:
        """
        Append a statement to ``graph`` (the default graph when None).

        Strings starting with ``_:`` become blank nodes, other strings IRIs.
        """
        graph = graph or DEFAULT_GRAPH
        if not isinstance(predicate, IRI):
            predicate = IRI(predicate)
        self.add(Quad(make_node(subject), predicate, make_node(obj), graph))

    def add_triple(
        self,
        subject: Union[str, Node],
        predicate: Union[str, IRI],
        obj: Union[str, Node],
        graph: str = DEFAULT_GRAPH,
    ) -> None:
        """Append a statement whose object is an IRI, blank node or Node."""
        self.add_quad(subject, predicate, obj, graph)

    def add_literal(
        self,
        subject: Union[str, Node],
        predicate: Union[str, IRI],
        value: str,
        datatype: Optional[str] = None,
        language: Optional[str] = None,
        graph: str = DEFAULT_GRAPH,
    ) -> None:
        """Append a statement whose object is a literal."""
        self.add_quad(subject, predicate, Literal(value, datatype, language), graph)

    # -- namespaces -----------------------------------------------------------

    @property
    def namespaces(self) -> Dict[str, str]:
        return self._namespaces

    def set_namespace(self, prefix: str, iri: str) -> None:
        self._namespaces[prefix] = iri

    def get_namespace(self, prefix: str) -> Optional[str]:
        return self._namespaces.get(prefix)

    def clear_namespaces(self) -> None:
        self._namespaces.clear()

    def get_context(self) -> Dict[str, str]:
        """Return the namespaces as a JSON-LD context (``""`` becomes ``@vocab``)."""
        context = dict(self._namespaces)
        if "" in context:
            context["@vocab"] = context.pop("")
        return context

    def parse_context(self, context: Dict[str, Any]) -> None:
        """Record the prefix definitions found in a JSON-LD context."""
        for key, value in context.items():
            if key == "@vocab":
                if value is None or isinstance(value, str):
                    self.set_namespace("", value)
            elif key == "@context":
                if isinstance(value, dict):
                    self.parse_context(value)
            elif key.startswith("@"):
                continue
            elif isinstance(value, str):
                self.set_namespace(key, value)
            elif isinstance(value, dict) and isinstance(value.get("@id"), str):
                self.set_namespace(key, value["@id"])

    # -- access ---------------------------------------------------------------

    def graph_names(self) -> List[str]:
        return list(self._graphs)

    def get_quads(self, graph_name: str) -> List[Quad]:
        return self._graphs.get(graph_name, [])

    def quads(self) -> Iterator[Quad]:
        """Iterate over every quad, graph by graph, in insertion order."""
        for quads in self._graphs.values():
            yield from quads

    def __iter__(self) -> Iterator[Quad]:
        return self.quads()

    def __len__(self) -> int:
        return sum(len(quads) for quads in self._graphs.values())

    def is_empty(self) -> bool:
        return len(self) == 0

    def __repr__(self) -> str:
        return f"QuadDataset(graphs={len(self._graphs)}, quads={len(self)})"

    # -- columnar export ------------------------------------------------------

    def to_columnar(self) -> Tuple[List[str], List[str], List[str], List[str]]:
        """Extract (graphs, subjects, predicates, objects) string columns."""
        quads = list(self.quads())
        return (
            [q.graph for q in quads],
            [q.subject.value for q in quads],
            [q.predicate.value for q in quads],
            [q.object.value for q in quads],
        )

    def to_frame(self) -> pl.DataFrame:
        """One row per quad, objects split into value, kind, datatype, language."""
        graphs, subjects, predicates, objects = self.to_columnar()
        quads = list(self.quads())
        return pl.DataFrame(
            {
                "graph": graphs,
                "subject": subjects,
                "predicate": predicates,
                "object": objects,
                "object_kind": [q.object.kind.value for q in quads],
                "datatype": [getattr(q.object, "datatype", None) for q in quads],
                "language": [getattr(q.object, "language", None) for q in quads],
            },
            schema={
                "graph": pl.Utf8,
                "subject": pl.Utf8,
                "predicate": pl.Utf8,
                "object": pl.Utf8,
                "object_kind": pl.Utf8,
                "datatype": pl.Utf8,
                "language": pl.Utf8,
            },
        )
