"""
Unit tests for the tree-sitter document.
"""

from nodehop.core import NodePosition, Point
from nodehop.hosts import TreeSitterDocument


class TestParsing:
    def test_root_is_module(self, make_doc):
        doc = make_doc("x = 1\n")
        assert doc.root().type == "module"
        assert doc.root().named

    def test_reparse_only_after_write(self, make_doc, find):
        doc = make_doc("f(a, b)\n")
        tree = doc.host_tree
        assert doc.host_tree is tree

        a = find(doc, "identifier", "a")
        doc.buffer.set_text(a.position, ["z"])
        assert doc.host_tree is not tree
        assert find(doc, "identifier", "z").range == (0, 2, 0, 3)

    def test_old_nodes_keep_their_snapshot(self, make_doc, find):
        doc = make_doc("f(a, b)\n")
        a = find(doc, "identifier", "a")
        doc.buffer.set_text(a.position, ["zzz"])
        doc.root()
        assert a.text == "a"

    def test_unicode_columns_are_characters(self, make_doc, find):
        doc = make_doc("s = 'éé' + a\n")
        a = find(doc, "identifier", "a")
        assert a.range == (0, 11, 0, 12)
        assert a.raw.start_point[1] == 13
        assert doc.node_at(0, 11) == a

    def test_from_file_and_save(self, tmp_path):
        path = tmp_path / "mod.py"
        path.write_text("x = 1\n", encoding="utf-8")

        doc = TreeSitterDocument.from_file(path, language="python")
        doc.buffer.set_text(NodePosition.from_range(0, 4, 0, 5), ["2"])
        doc.save(path)
        assert path.read_text(encoding="utf-8") == "x = 2\n"


class TestNodes:
    def test_equality_is_identity_in_same_parse(self, make_doc, find):
        doc = make_doc("f(a, b)\n")
        statement = find(doc, "expression_statement")
        call = find(doc, "call")
        assert statement.range == call.range
        assert statement != call
        assert call == statement.named_child(0)
        assert len({call, statement.named_child(0)}) == 1

    def test_nodes_of_different_parses_differ(self, make_doc, find):
        doc = make_doc("f(a, b)\n")
        before = find(doc, "call")
        doc.buffer.set_text(NodePosition.from_range(0, 0, 0, 0), [""])
        after = find(doc, "call")
        assert before.range == after.range
        assert before != after

    def test_relations(self, make_doc, find):
        doc = make_doc("f(a, b)\n")
        args = find(doc, "argument_list")
        assert [c.type for c in args.children()] == ["(", "identifier", ",", "identifier", ")"]
        assert args.child(9) is None
        assert args.named_child(-1) is None
        a = args.named_child(0)
        assert a.next_named_sibling().text == "b"
        assert a.next_sibling().type == ","
        assert a.prev_sibling().type == "("
        assert a.prev_named_sibling() is None
        assert a.parent() == args

    def test_text_multiline(self, make_doc, find):
        doc = make_doc("def f():\n    pass\n")
        assert find(doc, "function_definition").text == "def f():\n    pass"


class TestLookups:
    def test_node_at_moves_cursor(self, make_doc):
        doc = make_doc("x = 1\n")
        node = doc.node_at(0, 4)
        assert node.type == "integer"
        assert doc.cursor == Point(0, 4)

    def test_smallest_node_at_cursor(self, make_doc):
        doc = make_doc("x = 1\n")
        doc.cursor = Point(0, 0)
        assert doc.smallest_node_at_cursor().text == "x"

    def test_descendant_for_range_exact(self, make_doc):
        doc = make_doc("f(a, b)\n")
        node = doc.descendant_for_range(NodePosition.from_range(0, 5, 0, 6))
        assert node.text == "b"

    def test_descendant_for_range_containing(self, make_doc):
        doc = make_doc("f(a, b)\n")
        node = doc.descendant_for_range(NodePosition.from_range(0, 2, 0, 6))
        assert node.type == "argument_list"


class TestInjections:
    SOURCE = 'x = "y = 1"\nz = "w"\n'

    def test_injected_trees_are_parsed(self, make_doc):
        doc = make_doc(self.SOURCE, injections={"string_content": "python"})
        regions = [t.region.as_tuple() for t in doc.injected_trees]
        assert sorted(regions) == [(0, 5, 0, 10), (1, 5, 1, 6)]
        assert all(t.language == "python" for t in doc.injected_trees)

    def test_innermost_first(self, make_doc):
        doc = make_doc(self.SOURCE, injections={"string_content": "python"})
        widths = [t.region.stop.col - t.region.start.col for t in doc.injected_trees]
        assert widths == sorted(widths)

    def test_cursor_lookup_prefers_injected_tree(self, make_doc):
        doc = make_doc(self.SOURCE, injections={"string_content": "python"})
        doc.cursor = Point(0, 5)
        injected = doc.smallest_node_at_cursor(ignore_injections=False)
        host = doc.smallest_node_at_cursor(ignore_injections=True)

        assert injected.tree.region is not None
        assert injected.text == "y"
        assert host.tree is doc.host_tree

    def test_cursor_outside_injection(self, make_doc):
        doc = make_doc(self.SOURCE, injections={"string_content": "python"})
        doc.cursor = Point(0, 0)
        node = doc.smallest_node_at_cursor(ignore_injections=False)
        assert node.tree is doc.host_tree

    def test_no_injections_configured(self, make_doc):
        assert make_doc(self.SOURCE).injected_trees == []

    def test_descendant_for_range_in_injection(self, make_doc):
        doc = make_doc(self.SOURCE, injections={"string_content": "python"})
        node = doc.descendant_for_range(NodePosition.from_range(0, 9, 0, 10))
        assert node.type == "integer"
        assert node.tree.region is not None
