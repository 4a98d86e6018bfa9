"""Tests for jsontwin/clipboard.py module."""

import json

import pytest

from jsontwin.clipboard import build_payload, copy_text, paste, unique_key
from jsontwin.errors import NotFound, ParseError, UnsupportedOperation
from jsontwin.selection import flatten_document


def fixed_clock():
    return 1.5


def _payload(doc, ids):
    return build_payload(doc, frozenset(ids), flatten_document(doc))


class TestCopy:
    """Test payload shape and serialization."""

    def test_array_parent_gives_list_in_tree_order(self):
        doc = {"xs": [10, 20, 30]}
        assert _payload(doc, ["root.xs.2", "root.xs.0"]) == [10, 30]

    def test_object_parent_gives_mapping(self):
        doc = {"a": 1, "b": {"c": 2}}
        assert _payload(doc, ["root.b.c", "root.a"]) == {"a": 1, "c": 2}

    def test_first_node_decides_shape(self):
        doc = {"xs": [10], "y": 2}
        assert _payload(doc, ["root.xs.0", "root.y"]) == [10, 2]

    def test_root_uses_literal_key(self):
        doc = {"a": 1}
        assert _payload(doc, ["root"]) == {"root": {"a": 1}}

    def test_empty_selection(self):
        assert _payload({"a": 1}, []) is None
        assert copy_text({"a": 1}, frozenset(), ["root", "root.a"]) is None

    def test_copy_text_is_indented_json(self):
        doc = {"a": 1}
        text = copy_text(doc, frozenset({"root.a"}), flatten_document(doc))
        assert text == '{\n  "a": 1\n}'

    def test_payload_is_a_copy(self):
        doc = {"o": {"k": [1]}}
        payload = _payload(doc, ["root.o"])
        payload["o"]["k"].append(2)
        assert doc == {"o": {"k": [1]}}


class TestUniqueKey:
    """Test collision renaming."""

    def test_free_key_kept(self):
        assert unique_key({"a": 1}, "b") == "b"

    def test_suffix_increments(self):
        assert unique_key({"x": 1}, "x") == "x_copy1"
        assert unique_key({"x": 1, "x_copy1": 1}, "x") == "x_copy2"


class TestPaste:
    """Test inserting clipboard text."""

    def test_collision_renames_then_increments(self):
        doc = {"x": 1}
        doc = paste(doc, "root", '{"x": 2}')
        assert doc == {"x": 1, "x_copy1": 2}
        doc = paste(doc, "root", '{"x": 3}')
        assert list(doc) == ["x", "x_copy1", "x_copy2"]
        assert doc["x_copy2"] == 3

    def test_after_leaf_in_array(self):
        assert paste([1, 2, 3], "root.0", "[9, 8]") == [1, 9, 8, 2, 3]

    def test_single_value_wrapped_for_array(self):
        assert paste([1], "root", '{"k": 1}') == [1, {"k": 1}]

    def test_onto_array_container_appends(self):
        assert paste({"xs": [1]}, "root.xs", "[2, 3]") == {"xs": [1, 2, 3]}

    def test_leaf_in_object_merges_into_parent(self):
        new = paste({"a": 1, "b": 2}, "root.a", '{"c": 3}')
        assert list(new.items()) == [("a", 1), ("b", 2), ("c", 3)]

    def test_bare_value_into_object_gets_generated_key(self):
        new = paste({"a": 1}, "root", '"s"', clock=fixed_clock)
        assert new == {"a": 1, "item_1500_0": "s"}

    def test_array_into_object_keys_each_item(self):
        new = paste({}, "root", "[true, null]", clock=fixed_clock)
        assert new == {"item_1500_0": True, "item_1500_1": None}

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            paste({"a": 1}, "root", "{not json")

    def test_no_target_is_noop(self):
        doc = {"a": 1}
        assert paste(doc, None, "[1]") is doc

    def test_stale_target(self):
        with pytest.raises(NotFound):
            paste({"a": 1}, "root.b", "[1]")

    def test_input_not_mutated(self):
        doc = {"xs": [1]}
        paste(doc, "root.xs", "[2]")
        assert doc == {"xs": [1]}


class TestCutPaste:
    """Test paste with a pending cut-set."""

    def test_move_within_array_keeps_length(self):
        assert paste([1, 2, 3], "root.2", "[1]", cut_ids=["root.0"]) == [2, 3, 1]

    def test_move_into_other_object(self):
        new = paste({"x": 1, "o": {}}, "root.o", '{"x": 1}', cut_ids=["root.x"])
        assert new == {"o": {"x": 1}}

    def test_cut_into_own_object_renames_before_removal(self):
        assert paste({"x": 1}, "root", '{"x": 1}', cut_ids=["root.x"]) == {"x_copy1": 1}

    def test_paste_into_cut_node_rejected(self):
        with pytest.raises(UnsupportedOperation):
            paste({"o": {"a": 1}}, "root.o.a", '{"b": 2}', cut_ids=["root.o"])

    def test_root_in_cut_set_ignored(self):
        assert paste([1], "root", "[2]", cut_ids=["root"]) == [1, 2]

    def test_nested_arrays_leave_no_holes(self):
        doc = {"l": [[1, 2], [3]]}
        new = paste(doc, "root.l.0.0", "[2, [3]]", cut_ids=["root.l.0.1", "root.l.1"])
        assert new == {"l": [[1, 2, [3]]]}
        assert "null" not in json.dumps(new)
