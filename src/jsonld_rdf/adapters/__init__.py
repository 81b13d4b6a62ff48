"""
Adapters between QuadDataset and third-party RDF libraries.

- rdflib: Graph / Dataset
- pyoxigraph: Store
"""

from jsonld_rdf.adapters.oxigraph_adapter import OxigraphAdapter, export_to_store, import_store
from jsonld_rdf.adapters.rdflib_adapter import RDFLibAdapter, export_to_rdflib, import_graph

__all__ = [
    "RDFLibAdapter",
    "import_graph",
    "export_to_rdflib",
    "OxigraphAdapter",
    "import_store",
    "export_to_store",
]
