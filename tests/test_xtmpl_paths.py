"""Tests for path resolution and variable binding."""

import pytest

from xtmpl.compiler import VariableBinder, resolve_path
from xtmpl.compiler.paths import placeholder, unwrap_placeholder
from xtmpl.environment.exceptions import TemplateSyntaxError
from xtmpl.nodes import Bind, Ref

ROOT = Ref("$data")
STACK = [ROOT, Ref("b"), Ref("$value@1")]


class TestResolvePath:
    """resolve_path() against a scope stack."""

    def test_relative(self):
        resolved = resolve_path("a.x", STACK)
        assert resolved.base == Ref("$value@1")
        assert resolved.name == "a"
        assert resolved.rest == ("x",)

    def test_dot_slash_is_relative(self):
        assert resolve_path("./a", STACK) == resolve_path("a", STACK)

    @pytest.mark.parametrize(("path", "base"), [("../a", Ref("b")), ("../../a", ROOT)])
    def test_parent_climbs(self, path, base):
        resolved = resolve_path(path, STACK)
        assert resolved.base == base
        assert resolved.name == "a"

    def test_climb_above_root(self):
        with pytest.raises(TemplateSyntaxError, match="climbs 3"):
            resolve_path("../../../a", STACK)

    def test_root(self):
        resolved = resolve_path("/a.b", STACK)
        assert resolved.base == ROOT
        assert resolved.name == "a"
        assert resolved.rest == ("b",)

    @pytest.mark.parametrize("path", ["this", "./", "./this"])
    def test_this(self, path):
        resolved = resolve_path(path, STACK)
        assert resolved.name is None
        assert resolved.direct() == Ref("$value@1")

    def test_parent_this(self):
        assert resolve_path("../this", STACK).direct() == Ref("b")

    def test_this_prefix_and_suffix(self):
        assert resolve_path("this.a", STACK).name == "a"
        assert resolve_path("a.this", STACK).name == "a"

    def test_helper_local(self):
        resolved = resolve_path("$value.name.0", STACK)
        assert resolved.name is None
        assert resolved.direct() == Ref("$value", ("name", 0))

    def test_dot_slash_helper_local(self):
        assert resolve_path("./$key", STACK) == resolve_path("$key", STACK)

    @pytest.mark.parametrize("path", ["../$key", "../../$value.name", "/$key"])
    def test_helper_local_through_other_scope(self, path):
        with pytest.raises(TemplateSyntaxError, match="cannot be reached"):
            resolve_path(path, STACK)

    def test_parent_property_named_like_local(self):
        resolved = resolve_path("../this.$ref", STACK)
        assert resolved.base == Ref("b")
        assert resolved.name == "$ref"

    def test_numeric_segments(self):
        resolved = resolve_path("list.3.name", STACK)
        assert resolved.rest == (3, "name")

        resolved = resolve_path("3", STACK)
        assert resolved.identifier == "$n3"
        assert resolved.key == 3

    @pytest.mark.parametrize("path", ["a..b", "a.", "..."])
    def test_empty_segment(self, path):
        with pytest.raises(TemplateSyntaxError, match="Invalid path"):
            resolve_path(path, STACK)


class TestPlaceholders:
    def test_roundtrip(self):
        assert placeholder("12") == "$n12"
        assert unwrap_placeholder("$n12") == 12

    def test_names_unchanged(self):
        assert placeholder("name") == "name"
        assert unwrap_placeholder("name") == "name"
        assert unwrap_placeholder("$nope") == "$nope"

    def test_non_ascii_digits_are_names(self):
        assert placeholder("²") == "²"


class TestVariableBinder:
    """VariableBinder.bind() hoisting rules."""

    def test_binds_first_property_once(self):
        bound = [{}]
        binds, refs = VariableBinder().bind(["a.b", "a.c"], bound, [ROOT])
        assert binds == [Bind(0, 0, -1, "a", ROOT, "a")]
        assert refs == [Ref("a", ("b",)), Ref("a", ("c",))]
        assert bound == [{"a": (ROOT, "a")}]

    def test_keyed_by_resolved_property(self):
        binds, refs = VariableBinder().bind(["./a", "a", "this.a", "/a"], [{}], [ROOT])
        assert len(binds) == 1
        assert refs == [Ref("a")] * 4

    def test_already_bound(self):
        bound = [{"a": (ROOT, "a")}]
        binds, refs = VariableBinder().bind(["a.x"], bound, [ROOT])
        assert binds == []
        assert refs == [Ref("a", ("x",))]

    def test_outer_binding_reused(self):
        bound = [{"a": (ROOT, "a")}, {}]
        binds, refs = VariableBinder().bind(["../a"], bound, [ROOT, Ref("b")])
        assert binds == []
        assert refs == [Ref("a")]
        assert bound[1] == {}

    def test_conflicting_name_renamed(self):
        bound = [{"a": (ROOT, "a")}, {}]
        binds, refs = VariableBinder().bind(["a"], bound, [ROOT, Ref("b")])
        assert [(bind.target, bind.source, bind.key) for bind in binds] == [("a@1", Ref("b"), "a")]
        assert refs == [Ref("a@1")]

    def test_unbound_references(self):
        binds, refs = VariableBinder().bind(["this", "$key", "../this"], [{}, {}], [ROOT, Ref("b")])
        assert binds == []
        assert refs == [Ref("b"), Ref("$key"), ROOT]

    def test_numeric_property(self):
        binds, refs = VariableBinder().bind(["0.name"], [{}], [ROOT])
        assert binds[0].target == "$n0"
        assert binds[0].key == 0
        assert refs == [Ref("$n0", ("name",))]

    def test_location_and_parent(self):
        binds, _ = VariableBinder().bind(["a"], [{}], [ROOT], lineno=3, col_offset=4, parent=7)
        assert (binds[0].lineno, binds[0].col_offset, binds[0].parent) == (3, 4, 7)

    def test_fresh_names_are_unique(self):
        binder = VariableBinder()
        assert binder.fresh("a") == "a@1"
        assert binder.fresh("a") == "a@2"
