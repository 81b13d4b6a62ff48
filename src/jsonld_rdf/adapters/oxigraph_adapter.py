"""
pyoxigraph adapter.

Moves quads between a pyoxigraph Store (Rust) and QuadDataset, so that
data loaded or queried with Oxigraph can be written with the jsonld_rdf
codecs and the other way around.
"""

import logging
from typing import Dict, Iterable, Optional, Union

from pyoxigraph import BlankNode as OxBlankNode
from pyoxigraph import DefaultGraph, NamedNode, Store
from pyoxigraph import Literal as OxLiteral
from pyoxigraph import Quad as OxQuad

from jsonld_rdf.constants import BLANK_NODE_PREFIX, DEFAULT_GRAPH, XSD_STRING
from jsonld_rdf.dataset import IRI, BlankNode, Literal, Node, Quad, QuadDataset
from jsonld_rdf.errors import InvalidInputError

logger = logging.getLogger(__name__)


class OxigraphAdapter:
    """
    Bridge between pyoxigraph and QuadDataset.

    Oxigraph blank nodes are renamed to ``_:t1``, ``_:t2``, ... keyed by
    their Oxigraph identifier, one table per import.
    """

    def __init__(self):
        self._bnode_names: Dict[str, str] = {}

    def _blank_node_name(self, node_id: str) -> str:
        name = self._bnode_names.get(node_id)
        if name is None:
            name = f"{BLANK_NODE_PREFIX}t{len(self._bnode_names) + 1}"
            self._bnode_names[node_id] = name
        return name

    def import_store(self, source: Union[Store, Iterable[OxQuad]]) -> QuadDataset:
        """
        Import every quad of a Store, or an iterable of pyoxigraph quads.

        Args:
            source: pyoxigraph Store or iterable of Quad / Triple objects

        Returns:
            QuadDataset (Oxigraph keeps no prefixes, so no namespaces)
        """
        if isinstance(source, Store):
            quads = source.quads_for_pattern(None, None, None, None)
        elif isinstance(source, (str, bytes)) or not hasattr(source, "__iter__"):
            raise InvalidInputError("Oxigraph adapter expects a Store or an iterable of quads", source)
        else:
            quads = source

        self._bnode_names = {}
        dataset = QuadDataset()
        for quad in quads:
            graph = getattr(quad, "graph_name", None)
            dataset.add(Quad(
                self._to_node(quad.subject),
                IRI(quad.predicate.value),
                self._to_node(quad.object),
                self._graph_name(graph),
            ))

        logger.debug(f"Imported {len(dataset)} quads from Oxigraph")
        return dataset

    def _graph_name(self, graph) -> str:
        if graph is None or isinstance(graph, DefaultGraph):
            return DEFAULT_GRAPH
        if isinstance(graph, OxBlankNode):
            return self._blank_node_name(graph.value)
        return graph.value

    def _to_node(self, term) -> Node:
        if isinstance(term, NamedNode):
            return IRI(term.value)
        if isinstance(term, OxBlankNode):
            return BlankNode(self._blank_node_name(term.value))
        if isinstance(term, OxLiteral):
            if term.language:
                return Literal(term.value, language=term.language)
            return Literal(term.value, term.datatype.value)
        raise InvalidInputError(f"Unsupported Oxigraph term: {term!r}", term)

    def export_dataset(self, dataset: QuadDataset, store: Optional[Store] = None) -> Store:
        """
        Export a QuadDataset into a pyoxigraph Store.

        Args:
            dataset: QuadDataset to export
            store: Existing store to add to (a new in-memory Store by default)

        Returns:
            The store holding the quads
        """
        store = store if store is not None else Store()
        for quad in dataset.quads():
            store.add(OxQuad(
                self._from_node(quad.subject),
                NamedNode(quad.predicate.value),
                self._from_node(quad.object),
                self._from_graph_name(quad.graph),
            ))
        if dataset.namespaces:
            logger.debug(f"Oxigraph store keeps no prefixes; {len(dataset.namespaces)} namespaces not exported")
        logger.debug(f"Exported {len(dataset)} quads to Oxigraph")
        return store

    def _from_graph_name(self, name: str):
        if name == DEFAULT_GRAPH:
            return DefaultGraph()
        if name.startswith(BLANK_NODE_PREFIX):
            return OxBlankNode(name[len(BLANK_NODE_PREFIX):])
        return NamedNode(name)

    def _from_node(self, node: Node):
        if isinstance(node, Literal):
            if node.language is not None:
                return OxLiteral(node.value, language=node.language)
            if node.datatype == XSD_STRING:
                return OxLiteral(node.value)
            return OxLiteral(node.value, datatype=NamedNode(node.datatype))
        if node.is_blank_node():
            return OxBlankNode(node.label)
        return NamedNode(node.value)


def import_store(source: Union[Store, Iterable[OxQuad]]) -> QuadDataset:
    """Import a pyoxigraph Store (or iterable of quads) into a QuadDataset."""
    return OxigraphAdapter().import_store(source)


def export_to_store(dataset: QuadDataset, store: Optional[Store] = None) -> Store:
    """Export a QuadDataset to a pyoxigraph Store."""
    return OxigraphAdapter().export_dataset(dataset, store)
