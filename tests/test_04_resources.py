#!/usr/bin/env python
# -----------------------------------------------------------------------------
"""
Resource and factory tests
==========================
  - Repository / ResourceScope lookup, extension fallback, boundaries
  - Top-level render() by path, path#subskin and skin object
  - extends resolution (sibling first, then scope), cycles
  - Skin cache and invalidation
"""
# -----------------------------------------------------------------------------

from __future__ import annotations

import os

import pytest

from pyskin.services.resources import Repository, ResourceScope
from pyskin.services.skins import (
    Buffer,
    Skin,
    SkinCycleError,
    SkinFactory,
    SkinNotFoundError,
    UnknownSkinError,
    render,
    render_to_string,
    resolve_skin,
)

from conftest import write_skin


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 1. Repositories and scopes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestRepository:

    def test_get_resource(self, skin_dir, make_skin):
        make_skin("page.skin", "x")
        resource = Repository(skin_dir).get_resource("page.skin")
        assert resource.exists()
        assert resource.name == "page.skin"
        assert resource.read_text() == "x"

    def test_extension_fallback(self, skin_dir, make_skin):
        make_skin("page.skin", "x")
        resource = Repository(skin_dir).get_resource("page")
        assert resource.exists()
        assert resource.name == "page.skin"

    def test_missing_resource(self, skin_dir):
        resource = Repository(skin_dir).get_resource("nope.skin")
        assert not resource.exists()
        assert resource.mtime == 0.0
        with pytest.raises(FileNotFoundError):
            resource.read_text()

    def test_path_outside_boundary_never_exists(self, tmp_path, skin_dir):
        (tmp_path / "outside.skin").write_text("secret", encoding="utf-8")
        resource = Repository(skin_dir).get_resource("../outside.skin")
        assert not resource.exists()

    def test_subdirectory(self, skin_dir, make_skin):
        make_skin("themes/dark/page.skin", "dark")
        assert Repository(skin_dir).get_resource("themes/dark/page.skin").exists()

    def test_parent_repository_is_containing_directory(self, skin_dir, make_skin):
        make_skin("themes/page.skin", "x")
        make_skin("themes/base.skin", "b")
        resource = Repository(skin_dir).get_resource("themes/page.skin")
        sibling = resource.parent_repository.get_resource("base.skin")
        assert sibling.exists()
        assert sibling.read_text() == "b"
        # the boundary is inherited, not narrowed
        assert resource.parent_repository.get_resource("../themes/base.skin").exists()


class TestResourceScope:

    def test_first_existing_match_wins(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        write_skin(first, "a.skin", "first")
        write_skin(second, "a.skin", "second")
        write_skin(second, "b.skin", "only second")
        scope = ResourceScope(first, second)
        assert scope.get_resource("a.skin").read_text() == "first"
        assert scope.get_resource("b.skin").read_text() == "only second"

    def test_missing_everywhere_returns_first_repository_result(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        first.mkdir()
        second.mkdir()
        resource = ResourceScope(first, second).get_resource("nope.skin")
        assert not resource.exists()
        assert resource.repository.root == first.resolve()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 2. Top-level render
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestRenderEntryPoint:

    @pytest.fixture(autouse=True)
    def page(self, make_skin):
        make_skin("page.skin", 'Hello <% name %><% subskin "item" %>[<% name %>]')

    def test_render_by_path(self, scope):
        assert render_to_string("page.skin", {"name": "Ann"}, scope) == "Hello Ann"

    def test_render_subskin_by_fragment(self, scope):
        assert render_to_string("page.skin#item", {"name": "Ann"}, scope) == "[Ann]"

    def test_missing_subskin_renders_nothing(self, scope):
        assert render_to_string("page.skin#nope", {}, scope) == ""

    def test_render_into_given_buffer(self, scope):
        buf = Buffer(">")
        result = render("page.skin", {"name": "B"}, scope, buf)
        assert result is buf
        assert buf.getvalue() == ">Hello B"

    def test_render_skin_object(self):
        assert render_to_string(Skin(["x"])) == "x"

    def test_render_with_factory(self, factory):
        assert render_to_string("page.skin", {"name": "F"}, factory=factory) == "Hello F"

    def test_render_any_object_with_render(self):
        class Widget:
            def render(self, context, buffer):
                buffer.write("widget:", context["n"])

        assert render_to_string(Widget(), {"n": 1}) == "widget:1"

    @pytest.mark.parametrize("value", [42, None, ["page.skin"]])
    def test_unknown_skin_object(self, value):
        buf = Buffer()
        with pytest.raises(UnknownSkinError):
            render(value, {}, buffer=buf)
        assert buf.length == 0

    def test_unknown_skin_is_a_type_error(self):
        with pytest.raises(TypeError):
            render(42)

    def test_missing_skin_file(self, scope):
        with pytest.raises(SkinNotFoundError):
            render("nope.skin", {}, scope)

    def test_resolve_skin(self, scope):
        skin = resolve_skin("page.skin#item", scope)
        assert skin.name == "item"
        assert resolve_skin("page.skin#nope", scope) is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 3. extends
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestExtends:

    def test_sibling_parent_preferred(self, factory, make_skin):
        make_skin("base.skin", "root base")
        make_skin("themes/base.skin", "theme base")
        make_skin("themes/page.skin", '<% extends "base.skin" %>')
        assert factory.get_skin("themes/page.skin").render().getvalue() == "theme base"

    def test_falls_back_to_scope(self, factory, make_skin):
        make_skin("shared.skin", "shared <% subskin \"row\" %>row")
        make_skin("themes/page.skin", '<% extends "shared.skin" %>')
        skin = factory.get_skin("themes/page.skin")
        assert skin.render().getvalue() == "shared "
        assert skin.render_subskin("row").getvalue() == "row"

    def test_parent_subskins_and_main(self, factory, make_skin):
        make_skin("layout.skin", '<html><% render "body" %></html><% subskin "body" %>default')
        make_skin("page.skin", '<% extends "layout" %><% subskin "body" %>page body')
        assert factory.get_skin("page.skin").render().getvalue() == "<html>page body</html>"

    def test_missing_parent(self, factory, make_skin):
        make_skin("page.skin", '<% extends "nope.skin" %>')
        with pytest.raises(SkinNotFoundError):
            factory.get_skin("page.skin")

    def test_circular_extends(self, factory, make_skin):
        make_skin("a.skin", '<% extends "b.skin" %>a')
        make_skin("b.skin", '<% extends "a.skin" %>b')
        with pytest.raises(SkinCycleError, match="Circular extends"):
            factory.get_skin("a.skin")

    def test_self_extends(self, factory, make_skin):
        make_skin("a.skin", '<% extends "a.skin" %>a')
        with pytest.raises(SkinCycleError):
            factory.get_skin("a.skin")

    def test_factory_usable_after_cycle(self, factory, make_skin):
        make_skin("a.skin", '<% extends "a.skin" %>a')
        make_skin("ok.skin", "ok")
        with pytest.raises(SkinCycleError):
            factory.get_skin("a.skin")
        assert factory.get_skin("ok.skin").render().getvalue() == "ok"


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 4. Cache
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TestSkinCache:

    def test_source_is_resolved_path(self, factory, make_skin):
        path = make_skin("page.skin", "x")
        assert factory.get_skin("page.skin").source == str(path.resolve())

    def test_cached_skin_reused(self, factory, make_skin):
        make_skin("page.skin", "x")
        assert factory.get_skin("page.skin") is factory.get_skin("page.skin")

    def test_modified_file_rebuilt(self, factory, make_skin):
        path = make_skin("page.skin", "old")
        first = factory.get_skin("page.skin")
        path.write_text("new", encoding="utf-8")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))
        second = factory.get_skin("page.skin")
        assert second is not first
        assert second.render().getvalue() == "new"

    def test_modified_parent_rebuilds_child(self, factory, make_skin):
        base = make_skin("base.skin", "old base")
        make_skin("child.skin", '<% extends "base.skin" %>')
        first = factory.get_skin("child.skin")
        assert first.render().getvalue() == "old base"
        base.write_text("new base", encoding="utf-8")
        stat = base.stat()
        os.utime(base, (stat.st_atime, stat.st_mtime + 10))
        second = factory.get_skin("child.skin")
        assert second is not first
        assert second.render().getvalue() == "new base"
        assert factory.get_skin("child.skin") is second

    def test_modified_grandparent_rebuilds_chain(self, factory, make_skin):
        root = make_skin("root.skin", "v1")
        make_skin("middle.skin", '<% extends "root.skin" %>')
        make_skin("leaf.skin", '<% extends "middle.skin" %>')
        assert factory.get_skin("leaf.skin").render().getvalue() == "v1"
        root.write_text("v2", encoding="utf-8")
        stat = root.stat()
        os.utime(root, (stat.st_atime, stat.st_mtime + 10))
        assert factory.get_skin("leaf.skin").render().getvalue() == "v2"

    def test_clear(self, factory, make_skin):
        make_skin("page.skin", "x")
        first = factory.get_skin("page.skin")
        factory.clear()
        assert factory.get_skin("page.skin") is not first

    def test_cache_disabled(self, scope, make_skin):
        make_skin("page.skin", "x")
        factory = SkinFactory(scope, cache=False)
        assert factory.get_skin("page.skin") is not factory.get_skin("page.skin")
