"""
RDF and XSD vocabulary used by the codecs.
"""

RDF_SYNTAX_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDF_SCHEMA_NS = "http://www.w3.org/2000/01/rdf-schema#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"

XSD_BOOLEAN = XSD_NS + "boolean"
XSD_DOUBLE = XSD_NS + "double"
XSD_INTEGER = XSD_NS + "integer"
XSD_DECIMAL = XSD_NS + "decimal"
XSD_STRING = XSD_NS + "string"

RDF_TYPE = RDF_SYNTAX_NS + "type"
RDF_FIRST = RDF_SYNTAX_NS + "first"
RDF_REST = RDF_SYNTAX_NS + "rest"
RDF_NIL = RDF_SYNTAX_NS + "nil"
RDF_LANGSTRING = RDF_SYNTAX_NS + "langString"

# Graph id of the unnamed graph
DEFAULT_GRAPH = "@default"

BLANK_NODE_PREFIX = "_:"

# Media types understood by jsonld_rdf.codecs
NQUADS_FORMAT = "application/nquads"
TURTLE_FORMAT = "text/turtle"
