"""
rdflib adapter.

Converts rdflib Graph and Dataset objects to QuadDataset and back.
Namespace bindings travel with the data so that Turtle output keeps the
prefixes of the source graph.
"""

import logging
from typing import Dict, Optional, Union

from rdflib import BNode, Dataset, Graph, URIRef
from rdflib import Literal as RDFLibLiteral
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID

from jsonld_rdf.constants import BLANK_NODE_PREFIX, DEFAULT_GRAPH, XSD_STRING
from jsonld_rdf.dataset import IRI, BlankNode, Literal, Node, Quad, QuadDataset
from jsonld_rdf.errors import InvalidInputError

logger = logging.getLogger(__name__)


class RDFLibAdapter:
    """
    Bridge between rdflib and QuadDataset.

    Blank nodes coming from rdflib are renamed to ``_:t1``, ``_:t2``, ...
    in order of first appearance; the same rdflib blank node always gets
    the same label within one import.
    """

    def __init__(self):
        self._bnode_names: Dict[str, str] = {}

    def _blank_node_name(self, node_id: str) -> str:
        name = self._bnode_names.get(node_id)
        if name is None:
            name = f"{BLANK_NODE_PREFIX}t{len(self._bnode_names) + 1}"
            self._bnode_names[node_id] = name
        return name

    # -- import ---------------------------------------------------------------

    def import_graph(self, graph: Graph) -> QuadDataset:
        """
        Import an rdflib Graph or Dataset.

        Args:
            graph: rdflib Graph (triples go to the default graph) or
                Dataset (named graphs are kept)

        Returns:
            QuadDataset with the graph's namespace bindings
        """
        if not isinstance(graph, Graph):
            raise InvalidInputError("rdflib adapter expects a Graph or Dataset", graph)

        self._bnode_names = {}
        dataset = QuadDataset()
        for prefix, namespace in graph.namespaces():
            dataset.set_namespace(prefix, str(namespace))

        if isinstance(graph, Dataset):
            for s, p, o, g in graph.quads((None, None, None, None)):
                dataset.add(Quad(self._to_node(s), IRI(str(p)), self._to_node(o), self._graph_name(g)))
        else:
            for s, p, o in graph:
                dataset.add(Quad(self._to_node(s), IRI(str(p)), self._to_node(o), DEFAULT_GRAPH))

        logger.debug(f"Imported {len(dataset)} quads from rdflib")
        return dataset

    def _graph_name(self, graph) -> str:
        if isinstance(graph, Graph):
            graph = graph.identifier
        if graph is None or graph == DATASET_DEFAULT_GRAPH_ID:
            return DEFAULT_GRAPH
        if isinstance(graph, BNode):
            return self._blank_node_name(str(graph))
        return str(graph)

    def _to_node(self, term) -> Node:
        if isinstance(term, BNode):
            return BlankNode(self._blank_node_name(str(term)))
        if isinstance(term, RDFLibLiteral):
            datatype = str(term.datatype) if term.datatype is not None else None
            return Literal(str(term), datatype, term.language)
        if isinstance(term, URIRef):
            return IRI(str(term))
        raise InvalidInputError(f"Unsupported rdflib term: {term!r}", term)

    # -- export ---------------------------------------------------------------

    def export_dataset(self, dataset: QuadDataset) -> Dataset:
        """
        Export a QuadDataset to an rdflib Dataset.

        Literal lexical forms are kept as they are (no normalization) and
        ``xsd:string`` literals become plain literals.
        """
        result = Dataset()
        for prefix, namespace in dataset.namespaces.items():
            result.bind(prefix, URIRef(namespace))

        for graph_name in dataset.graph_names():
            quads = dataset.get_quads(graph_name)
            if graph_name == DEFAULT_GRAPH:
                target = result
            else:
                target = result.graph(self._from_graph_name(graph_name))
            for quad in quads:
                target.add((
                    self._from_node(quad.subject),
                    URIRef(quad.predicate.value),
                    self._from_node(quad.object),
                ))

        logger.debug(f"Exported {len(dataset)} quads to rdflib")
        return result

    def _from_graph_name(self, name: str) -> Union[URIRef, BNode]:
        if name.startswith(BLANK_NODE_PREFIX):
            return BNode(name[len(BLANK_NODE_PREFIX):])
        return URIRef(name)

    def _from_node(self, node: Node):
        if isinstance(node, Literal):
            if node.language is not None:
                return RDFLibLiteral(node.value, lang=node.language)
            if node.datatype == XSD_STRING:
                return RDFLibLiteral(node.value)
            return RDFLibLiteral(node.value, datatype=URIRef(node.datatype), normalize=False)
        if node.is_blank_node():
            return BNode(node.label)
        return URIRef(node.value)


def import_graph(graph: Graph, adapter: Optional[RDFLibAdapter] = None) -> QuadDataset:
    """Import an rdflib Graph or Dataset into a QuadDataset."""
    return (adapter or RDFLibAdapter()).import_graph(graph)


def export_to_rdflib(dataset: QuadDataset) -> Dataset:
    """Export a QuadDataset to an rdflib Dataset."""
    return RDFLibAdapter().export_dataset(dataset)
