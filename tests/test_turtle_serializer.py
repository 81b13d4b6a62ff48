"""Tests for the Turtle serializer."""
import logging

import pytest

from jsonld_rdf.config import TurtleConfig
from jsonld_rdf.constants import RDF_TYPE, XSD_INTEGER, XSD_NS
from jsonld_rdf.dataset import QuadDataset
from jsonld_rdf.formats.turtle import TurtleSerializer, serialize_turtle


A = "http://a/"


@pytest.fixture
def nested_dataset():
    """s p _:b1 . _:b1 p2 o2 ."""
    ds = QuadDataset()
    ds.add_triple(A + "s", A + "p", "_:b1")
    ds.add_triple("_:b1", A + "p2", A + "o2")
    return ds


# ========== Layout Tests ==========

class TestLayout:
    def test_empty_dataset(self):
        assert serialize_turtle(QuadDataset()) == ""

    def test_single_triple(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", A + "o")
        assert serialize_turtle(ds) == "<http://a/s> <http://a/p> <http://a/o> .\n\n"

    def test_predicates_separated_by_semicolon(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p1", A + "o1")
        ds.add_triple(A + "s", A + "p2", A + "o2")
        assert serialize_turtle(ds) == (
            "<http://a/s> <http://a/p1> <http://a/o1> ;\n"
            "    <http://a/p2> <http://a/o2> .\n\n"
        )

    def test_objects_separated_by_comma(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", A + "o1")
        ds.add_triple(A + "s", A + "p", A + "o2")
        assert serialize_turtle(ds) == "<http://a/s> <http://a/p> <http://a/o1>, <http://a/o2> .\n\n"

    def test_subjects_in_first_seen_order(self):
        ds = QuadDataset()
        ds.add_triple(A + "b", A + "p", A + "o")
        ds.add_triple(A + "a", A + "p", A + "o")
        ds.add_triple(A + "b", A + "q", A + "o")
        output = serialize_turtle(ds)
        assert output.index("<http://a/b>") < output.index("<http://a/a>")
        assert output.count("<http://a/b>") == 1

    def test_rdf_type_as_a(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", RDF_TYPE, A + "C")
        assert serialize_turtle(ds) == "<http://a/s> a <http://a/C> .\n\n"

    def test_custom_indent(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p1", A + "o1")
        ds.add_triple(A + "s", A + "p2", A + "o2")
        output = serialize_turtle(ds, config=TurtleConfig(indent_width=2))
        assert ";\n  <http://a/p2>" in output


# ========== Line Wrapping Tests ==========

class TestWrapping:
    def test_long_object_list_wraps(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", A + "o1")
        ds.add_triple(A + "s", A + "p", A + "o2")
        output = serialize_turtle(ds, config=TurtleConfig(max_line_length=30))
        assert output == (
            "<http://a/s> <http://a/p>\n"
            "    <http://a/o1>,\n"
            "    <http://a/o2> .\n\n"
        )

    def test_default_length_does_not_wrap_short_lines(self):
        ds = QuadDataset()
        for i in range(3):
            ds.add_triple(A + "s", A + "p", A + f"o{i}")
        assert "\n" not in serialize_turtle(ds).rstrip("\n")

    def test_many_objects_stay_under_limit(self):
        ds = QuadDataset()
        for i in range(40):
            ds.add_triple(A + "s", A + "p", A + f"object{i}")
        output = serialize_turtle(ds, config=TurtleConfig(max_line_length=80))
        assert all(len(line) <= 80 for line in output.splitlines())


# ========== Literal Rendering Tests ==========

class TestLiterals:
    def test_plain_literal(self):
        ds = QuadDataset()
        ds.add_literal(A + "s", A + "p", "hello")
        assert serialize_turtle(ds) == '<http://a/s> <http://a/p> "hello" .\n\n'

    def test_language_literal(self):
        ds = QuadDataset()
        ds.add_literal(A + "s", A + "p", "hallo", language="de")
        assert '"hallo"@de' in serialize_turtle(ds)

    def test_typed_literal(self):
        ds = QuadDataset()
        ds.add_literal(A + "s", A + "p", "5", XSD_INTEGER)
        assert f'"5"^^<{XSD_INTEGER}>' in serialize_turtle(ds)

    def test_typed_literal_with_prefix(self):
        ds = QuadDataset()
        ds.set_namespace("xsd", XSD_NS)
        ds.add_literal(A + "s", A + "p", "5", XSD_INTEGER)
        output = serialize_turtle(ds)
        assert output.startswith(f"@prefix xsd: <{XSD_NS}> .\n\n")
        assert '"5"^^xsd:integer' in output

    def test_escaped_literal(self):
        ds = QuadDataset()
        ds.add_literal(A + "s", A + "p", 'line "one"\nline two')
        assert '"line \\"one\\"\\nline two"' in serialize_turtle(ds)


# ========== Blank Node Inlining Tests ==========

class TestInlining:
    def test_once_referenced_blank_node_is_inlined(self, nested_dataset):
        assert serialize_turtle(nested_dataset) == \
            "<http://a/s> <http://a/p> [ <http://a/p2> <http://a/o2> ] .\n\n"

    def test_source_dataset_not_modified(self, nested_dataset):
        serialize_turtle(nested_dataset)
        assert len(nested_dataset) == 2

    def test_nested_predicates_indented(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", "_:b1")
        ds.add_triple("_:b1", A + "p2", A + "o2")
        ds.add_triple("_:b1", A + "p3", A + "o3")
        assert serialize_turtle(ds) == (
            "<http://a/s> <http://a/p> [ <http://a/p2> <http://a/o2> ;\n"
            "        <http://a/p3> <http://a/o3> ] .\n\n"
        )

    def test_recursive_inlining(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", "_:x")
        ds.add_triple("_:x", A + "q", "_:y")
        ds.add_triple("_:y", A + "r", A + "o")
        assert serialize_turtle(ds) == \
            "<http://a/s> <http://a/p> [ <http://a/q> [ <http://a/r> <http://a/o> ] ] .\n\n"

    def test_shared_blank_node_stays_top_level(self):
        ds = QuadDataset()
        ds.add_triple(A + "s1", A + "p", "_:shared")
        ds.add_triple(A + "s2", A + "p", "_:shared")
        ds.add_triple("_:shared", A + "q", A + "o")
        output = serialize_turtle(ds)
        assert "_:shared <http://a/q> <http://a/o> .\n\n" in output
        assert output.count("_:shared") == 3
        assert "[" not in output

    def test_blank_node_without_statements_keeps_label(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", "_:leaf")
        assert serialize_turtle(ds) == "<http://a/s> <http://a/p> _:leaf .\n\n"

    def test_unreferenced_blank_subject_is_bracketed(self):
        ds = QuadDataset()
        ds.add_triple("_:root", A + "p", A + "o")
        assert serialize_turtle(ds) == "[ <http://a/p> <http://a/o> ] .\n\n"

    def test_bracketed_subject_with_nested_node(self):
        ds = QuadDataset()
        ds.add_triple("_:root", A + "p", "_:child")
        ds.add_triple("_:root", A + "q", A + "o")
        ds.add_triple("_:child", A + "r", A + "t")
        assert serialize_turtle(ds) == (
            "[ <http://a/p> [ <http://a/r> <http://a/t> ] ;\n"
            "    <http://a/q> <http://a/o> ] .\n\n"
        )

    def test_cycle_is_not_inlined_into_itself(self):
        ds = QuadDataset()
        ds.add_triple("_:a", A + "p", "_:b")
        ds.add_triple("_:b", A + "p", "_:a")
        assert serialize_turtle(ds) == "_:a <http://a/p> [ <http://a/p> _:a ] .\n\n"

    def test_self_reference_is_not_inlined(self):
        ds = QuadDataset()
        ds.add_triple("_:a", A + "p", "_:a")
        assert serialize_turtle(ds) == "_:a <http://a/p> _:a .\n\n"


# ========== Prefix Tests ==========

class TestPrefixes:
    def test_dataset_namespaces(self):
        ds = QuadDataset()
        ds.set_namespace("ex", "http://example.com/")
        ds.add_literal("http://example.com/s", "http://example.com/p", "v")
        assert serialize_turtle(ds) == (
            "@prefix ex: <http://example.com/> .\n"
            "\n"
            'ex:s ex:p "v" .\n\n'
        )

    def test_unused_prefixes_omitted(self):
        ds = QuadDataset()
        ds.set_namespace("ex", "http://example.com/")
        ds.set_namespace("other", "http://other.org/")
        ds.add_triple("http://example.com/s", "http://example.com/p", "http://example.com/o")
        output = serialize_turtle(ds)
        assert "@prefix other:" not in output
        assert output.count("@prefix") == 1

    def test_header_in_first_use_order(self):
        ds = QuadDataset()
        ds.set_namespace("a", "http://a.org/")
        ds.set_namespace("b", "http://b.org/")
        ds.add_triple("http://b.org/s", "http://a.org/p", "http://b.org/o")
        output = serialize_turtle(ds)
        assert output.startswith("@prefix b: <http://b.org/> .\n@prefix a: <http://a.org/> .\n\n")

    def test_longest_namespace_wins(self):
        ds = QuadDataset()
        ds.set_namespace("ex", "http://example.com/")
        ds.set_namespace("exv", "http://example.com/vocab#")
        ds.add_triple("http://example.com/s", "http://example.com/vocab#name", "http://example.com/o")
        output = serialize_turtle(ds)
        assert "ex:s exv:name ex:o ." in output

    def test_local_name_that_would_not_parse_stays_iri(self):
        ds = QuadDataset()
        ds.set_namespace("ex", "http://example.com/")
        ds.add_triple("http://example.com/a/b", "http://example.com/p", "http://example.com/o.")
        output = serialize_turtle(ds)
        assert "<http://example.com/a/b> ex:p <http://example.com/o.> ." in output

    def test_context_prefixes(self):
        ds = QuadDataset()
        ds.add_triple("http://schema.org/thing", "http://schema.org/name", "http://schema.org/x")
        context = {"schema": "http://schema.org/"}
        output = serialize_turtle(ds, context=context)
        assert output.startswith("@prefix schema: <http://schema.org/> .\n\n")
        assert "schema:thing schema:name schema:x ." in output

    def test_context_document_and_id_terms(self):
        ds = QuadDataset()
        ds.add_triple("http://xmlns.com/foaf/0.1/me", RDF_TYPE, "http://xmlns.com/foaf/0.1/Person")
        context = {"@context": {"@vocab": "http://ignored/", "foaf": {"@id": "http://xmlns.com/foaf/0.1/"}}}
        assert "foaf:me a foaf:Person ." in serialize_turtle(ds, context=context)

    def test_context_terms_that_are_not_namespaces_ignored(self):
        ds = QuadDataset()
        ds.add_triple("http://schema.org/name", "http://schema.org/p", "http://schema.org/o")
        context = {"name": "http://schema.org/name"}
        assert "@prefix" not in serialize_turtle(ds, context=context)

    def test_default_prefixes_from_config(self):
        ds = QuadDataset()
        ds.add_literal(A + "s", A + "p", "5", XSD_INTEGER)
        config = TurtleConfig(default_prefixes={"xsd": XSD_NS})
        assert '"5"^^xsd:integer' in serialize_turtle(ds, config=config)

    def test_dataset_namespace_beats_context_on_same_iri(self):
        ds = QuadDataset()
        ds.set_namespace("ex", "http://example.com/")
        ds.add_triple("http://example.com/s", "http://example.com/p", "http://example.com/o")
        output = serialize_turtle(ds, context={"other": "http://example.com/"})
        assert "ex:s ex:p ex:o ." in output


# ========== Named Graph Tests ==========

class TestNamedGraphs:
    def test_named_graphs_skipped_with_warning(self, caplog):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", A + "o")
        ds.add_triple(A + "s", A + "p", A + "other", graph=A + "g")
        with caplog.at_level(logging.WARNING, logger="jsonld_rdf.formats.turtle"):
            output = serialize_turtle(ds)
        assert "<http://a/other>" not in output
        assert "named graph" in caplog.text

    def test_include_named_graphs(self):
        ds = QuadDataset()
        ds.add_triple(A + "s", A + "p", A + "o")
        ds.add_triple(A + "s", A + "p", A + "other", graph=A + "g")
        serializer = TurtleSerializer(config=TurtleConfig(include_named_graphs=True))
        assert serializer.serialize(ds) == "<http://a/s> <http://a/p> <http://a/o>, <http://a/other> .\n\n"
