"""
Unit tests for the interactive node mode.
"""

import logging

import pytest

from nodehop.config import EditorConfig
from nodehop.core import NodePosition, Point
from nodehop.editor import Editor, Selection
from nodehop.hosts import TreeSitterDocument

SOURCE = "f(a, b)\nz = 0\n"


class NoNodeDocument(TreeSitterDocument):
    def smallest_node_at_cursor(self, ignore_injections=True):
        return None


class LostDocument(TreeSitterDocument):
    def descendant_for_range(self, position):
        return None


@pytest.fixture
def doc(make_doc):
    document = make_doc(SOURCE)
    document.cursor = Point(0, 2)
    return document


@pytest.fixture
def editor(doc):
    return Editor(doc)


def press_all(editor, keys):
    for key in keys.split():
        assert editor.press(key), key


class TestEnterExit:
    def test_toggle_enters_on_line_node(self, editor):
        assert editor.press("<M-v>")
        assert editor.on
        assert editor.current_node().type == "expression_statement"
        assert editor.current_node().range == (0, 0, 0, 7)

    def test_keys_ignored_outside_mode(self, editor, doc):
        assert not editor.press("h")
        assert not editor.on
        assert doc.cursor == Point(0, 2)

    def test_toggle_outer(self, editor, doc):
        doc.cursor = Point(1, 0)
        assert editor.press("<S-M-v>")
        assert editor.current_node().type == "expression_statement"
        assert editor.current_node().range == (1, 0, 1, 5)

    @pytest.mark.parametrize("key", ["q", "<Esc>", "<M-v>", "<S-M-v>"])
    def test_exit_keys(self, editor, key):
        editor.enter()
        assert editor.press(key)
        assert not editor.on
        assert editor.current_node() is None
        assert editor.selection() is None
        assert editor.markers() == {}

    def test_unbound_key_inside_mode(self, editor):
        editor.enter()
        assert not editor.press("z")
        assert editor.on

    def test_no_node_under_cursor(self, caplog):
        document = NoNodeDocument(SOURCE, language="python")
        editor = Editor(document)
        with caplog.at_level(logging.ERROR, logger="nodehop.editor"):
            assert not editor.enter()
        assert not editor.on
        assert "Syntax node not found" in caplog.text


class TestMovement:
    def test_descend_to_argument(self, editor):
        editor.enter()
        press_all(editor, "l l j l")
        assert editor.current_node().text == "a"

    def test_parent_round_trip(self, editor):
        editor.enter()
        press_all(editor, "l l j l")
        press_all(editor, "h h h l l l")
        assert editor.current_node().text == "a"

    def test_first_and_last_sibling(self, editor):
        editor.enter()
        press_all(editor, "l l j l G")
        assert editor.current_node().text == "b"
        press_all(editor, "gg")
        assert editor.current_node().text == "a"

    def test_outermost_and_innermost(self, editor):
        editor.enter()
        press_all(editor, "l l j l")
        leaf = editor.current_node()
        press_all(editor, "H")
        # The wrapping statement was skipped on the way up
        assert editor.current_node().type == "call"
        assert editor.current_node().range == (0, 0, 0, 7)
        press_all(editor, "L")
        assert editor.current_node() == leaf

    def test_named_toggle_changes_moves(self, editor):
        editor.enter()
        press_all(editor, "l l j l <S-M-n> j")
        assert editor.current_node().type == ","
        assert "NODE(all)" in editor.status()

    def test_cursor_follows_current(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l j")
        assert doc.cursor == Point(0, 5)


class TestSwap:
    def test_swap_next_keeps_moved_node(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l J")
        assert doc.text == "f(b, a)\nz = 0\n"
        assert editor.current_node().text == "a"
        assert editor.current_node().range == (0, 5, 0, 6)

    def test_swap_prev_moves_node_back(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l J K")
        assert doc.text == SOURCE
        assert editor.current_node().range == (0, 2, 0, 3)

    def test_swap_next_then_continue_moving(self, editor):
        editor.enter()
        press_all(editor, "l l j l J k")
        assert editor.current_node().text == "b"

    def test_swap_without_sibling(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l j")
        assert editor.swap_next() is None
        assert doc.text == SOURCE
        assert editor.current_node().text == "b"

    def test_statement_swap(self, editor, doc):
        editor.enter()
        press_all(editor, "J")
        assert doc.text == "z = 0\nf(a, b)\n"
        assert editor.current_node().range == (1, 0, 1, 7)

    def test_unresolved_swap_reseeds_at_cursor(self):
        document = LostDocument(SOURCE, language="python")
        document.cursor = Point(0, 2)
        editor = Editor(document)
        editor.enter()
        press_all(editor, "l l j l")

        assert editor.swap_next() is None
        assert document.text == "f(b, a)\nz = 0\n"
        node = editor.current_node()
        assert node.text == "a"
        assert node.tree is document.host_tree


class TestVisualAndInsert:
    def test_nodewise_selection_joins_anchor(self, editor):
        editor.enter()
        press_all(editor, "l l v j")
        assert editor.selection() == NodePosition.from_range(0, 0, 0, 7)
        assert editor.status().startswith("-- VISUAL NODE")

    def test_nodewise_toggle_off(self, editor):
        editor.enter()
        press_all(editor, "l l v j v")
        assert editor.nodewise_start is None
        assert editor.selection() == NodePosition.from_range(0, 1, 0, 7)

    def test_append(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l a")
        assert not editor.on
        assert doc.cursor == Point(0, 3)

    def test_prepend(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l j j i")
        assert not editor.on
        assert doc.cursor == Point(0, 5)

    def test_visual_selects_and_exits_without_select_mode(self, doc):
        editor = Editor(doc, EditorConfig(select_current_node=False))
        editor.enter()
        press_all(editor, "l l j l v")

        assert not editor.on
        assert editor.nodewise_start is None
        assert editor.last_selection == Selection(NodePosition.from_range(0, 2, 0, 3))
        assert editor.last_selection.anchor == Point(0, 2)
        assert doc.cursor == Point(0, 3)

    def test_visual_select_back(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l b")

        selection = editor.last_selection
        assert not editor.on
        assert selection.backward
        assert selection.position == NodePosition.from_range(0, 2, 0, 3)
        assert selection.anchor == Point(0, 3)
        assert selection.cursor == Point(0, 2)
        assert doc.cursor == Point(0, 2)

    def test_enter_clears_last_selection(self, editor):
        editor.enter()
        press_all(editor, "b")
        assert editor.last_selection is not None
        editor.enter()
        assert editor.last_selection is None

    def test_open_below(self, editor, doc):
        editor.enter()
        press_all(editor, "l l j l o")
        assert not editor.on
        assert doc.text == "f(a, b)\n\nz = 0\n"
        assert doc.cursor == Point(1, 0)

    def test_open_above(self, editor, doc):
        doc.cursor = Point(1, 0)
        editor.enter()
        press_all(editor, "<S-o>")
        assert not editor.on
        assert doc.text == "f(a, b)\n\nz = 0\n"
        assert doc.cursor == Point(1, 0)

    def test_open_keeps_indentation(self, make_doc):
        document = make_doc("def f():\n    x = 1\n")
        document.cursor = Point(1, 4)
        editor = Editor(document)

        editor.enter()
        assert editor.open_below() == Point(2, 4)
        assert document.text == "def f():\n    x = 1\n    \n"

        document.cursor = Point(1, 4)
        editor.enter()
        assert editor.open_above() == Point(1, 4)
        assert document.text == "def f():\n    \n    x = 1\n    \n"

    def test_open_below_multiline_node(self, make_doc):
        document = make_doc("def f():\n    pass\nz = 0\n")
        editor = Editor(document)
        editor.enter()
        assert editor.current_node().type == "function_definition"

        editor.open_below()
        assert document.text == "def f():\n    pass\n    \nz = 0\n"


class TestDisplay:
    def test_status(self, editor):
        editor.enter()
        assert editor.status() == "-- NODE SELECT -- expression_statement"

    def test_markers_with_selection(self, editor):
        editor.enter()
        press_all(editor, "l l j l")
        markers = editor.markers()
        assert set(markers) == {"parent", "next"}
        assert markers["next"] == NodePosition.from_range(0, 5, 0, 6)

    def test_markers_without_selection(self, doc):
        editor = Editor(doc, EditorConfig(select_current_node=False))
        editor.enter()
        press_all(editor, "l l j l")
        markers = editor.markers()
        assert set(markers) == {"parent", "next", "current"}
        assert markers["current"] == NodePosition.from_range(0, 2, 0, 3)
        assert "SELECT" not in editor.status()

    def test_custom_keymaps(self, doc):
        config = EditorConfig.from_dict({"keymaps": {"child": "<Down>"}})
        editor = Editor(doc, config)
        editor.enter()
        assert editor.press("<Down>")
        assert editor.current_node().type == "call"
        assert not editor.press("l")
