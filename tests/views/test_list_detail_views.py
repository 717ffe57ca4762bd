"""Tests for the list and detail views."""

import pytest

from kvlens.views import DetailView, KeyMode, KeyPress, ListView, Navigate, SearchQuery
from kvlens.views.list_view import build_items
from kvlens.views.schema import DetailConfig, DetailSection, ListConfig


@pytest.fixture
def list_config():
    return ListConfig(
        title_field="name",
        subtitle_field="description",
        badge_fields=["tier"],
        secondary_fields=["region"],
    )


@pytest.fixture
def provider():
    return {
        "name": "aws",
        "description": "Amazon Web Services",
        "tags": ["cloud", "iaas"],
        "region": "us-east-1",
        "tier": "gold",
        "internal": "secret",
    }


class TestBuildItems:
    """Test card data extraction."""

    def test_fields(self, providers, list_config):
        items = build_items(providers, list_config)
        assert [item.title for item in items] == ["aws", "gcp", "local"]
        assert items[0].subtitle == "Amazon Web Services"
        assert items[0].badges == ["gold"]
        assert items[0].secondary == ["us-east-1"]

    def test_non_objects_skipped(self, list_config):
        items = build_items([{"name": "a"}, 3, {"name": "b"}], list_config)
        assert [(item.index, item.title) for item in items] == [(0, "a"), (2, "b")]


class TestListView:
    """Test cursor movement, search and drill-down."""

    def test_metadata(self, providers, list_config):
        view = ListView(providers, list_config, heading="☁ Providers")
        assert view.title == "☁ Providers"
        assert view.handles_search
        assert view.search_title == "Filter"
        assert view.position() == (3, 1, "1/3")

    def test_vim_movement(self, providers, list_config):
        view = ListView(providers, list_config)
        view, _ = view.update(KeyPress("j"))
        view, _ = view.update(KeyPress("j"))
        view, _ = view.update(KeyPress("j"))
        assert view.selected == 2
        view, _ = view.update(KeyPress("g"))
        assert view.selected == 0
        view, _ = view.update(KeyPress("G"))
        assert view.selected == 2
        view, _ = view.update(KeyPress("k"))
        assert view.selected == 1

    def test_emacs_movement(self, providers, list_config):
        view = ListView(providers, list_config, key_mode=KeyMode.EMACS)
        view, _ = view.update(KeyPress("j"))
        assert view.selected == 0
        view, _ = view.update(KeyPress("ctrl+n"))
        assert view.selected == 1

    def test_enter_navigates_to_item(self, providers, list_config):
        view = ListView(providers, list_config)
        view.update(KeyPress("down"))
        _, command = view.update(KeyPress("enter"))
        assert command == Navigate(1)

    def test_search_filters_and_keeps_original_index(self, providers, list_config):
        view = ListView(providers, list_config)
        view, _ = view.update(SearchQuery("google"))
        assert [item.title for item in view.visible_items()] == ["gcp"]
        _, command = view.update(KeyPress("enter"))
        assert command == Navigate(1)

    def test_search_without_matches(self, providers, list_config):
        view = ListView(providers, list_config)
        view.update(SearchQuery("zzz"))
        assert view.position() == (0, 0, "0/0")
        _, command = view.update(KeyPress("enter"))
        assert command is None
        assert "(no matches)" in view.render(60, 20, color=False)

    def test_render(self, providers, list_config):
        frame = ListView(providers, list_config, heading="Providers").render(60, 40, color=False)
        assert "Providers" in frame
        assert "3 items" in frame
        assert "│ aws" in frame
        assert "gold" in frame
        assert "us-east-1" in frame

    def test_subtitle_truncated_to_max_lines(self, list_config):
        node = [{"name": "long", "description": "word " * 40}]
        frame = ListView(node, list_config).render(40, 40, color=False)
        assert frame.count("word") < 40
        assert "..." in frame

    def test_empty(self, list_config):
        assert "(empty)" in ListView([], list_config).render(40, 10, color=False)


class TestDetailView:
    """Test sectioned rendering of one object."""

    def make(self, obj, **config):
        config.setdefault("title_field", "name")
        return DetailView(obj, DetailConfig(**config))

    def test_title(self, provider):
        assert self.make(provider).title == "aws"
        assert self.make({"x": 1}).title == "Detail"

    def test_other_fields_exclude_title_hidden_and_sections(self, provider):
        view = self.make(
            provider,
            sections=[DetailSection(fields=["description"])],
            hidden_fields=["internal"],
        )
        assert view.other_fields() == ["region", "tags", "tier"]

    def test_sections_in_order_with_other_last(self, provider):
        view = self.make(
            provider,
            sections=[
                DetailSection(fields=["description"], title="Overview", layout="paragraph"),
                DetailSection(fields=["tags"], title="Tags", layout="tags"),
            ],
            hidden_fields=["internal"],
        )
        titles = [section.title for section in view.sections(80)]
        assert titles == ["Overview", "Tags", "Other"]

    def test_inline_layout(self, provider):
        view = self.make(provider, sections=[DetailSection(fields=["region", "tier"], layout="inline")])
        lines = view.sections(80)[0].lines
        assert [line.plain for line in lines] == ["us-east-1 · gold"]

    def test_tags_layout(self, provider):
        view = self.make(provider, sections=[DetailSection(fields=["tags"], layout="tags")])
        assert view.sections(80)[0].lines[0].plain == " cloud   iaas "

    def test_table_layout(self, provider):
        view = self.make(provider, sections=[DetailSection(fields=["region", "tier"])])
        plain = [line.plain for line in view.sections(80)[0].lines]
        assert plain == ["region  us-east-1", "tier    gold"]

    def test_empty_sections_are_dropped(self, provider):
        view = self.make(
            provider,
            sections=[DetailSection(fields=["nope"], title="Missing")],
            hidden_fields=["internal", "description", "tags", "region", "tier"],
        )
        assert view.sections(80) == []

    def test_render_and_scroll(self, provider):
        view = self.make(provider, hidden_fields=["internal"])
        frame = view.render(80, 20, color=False)
        assert "Other" in frame
        assert "Amazon Web Services" in frame
        view.update(KeyPress("j"))
        assert view.scroll_top == 1
        assert not view.render(80, 20, color=False).lstrip().startswith("Other")
