"""
Table of contents tests

extract_toc renders the document, so its ids are the rendered heading ids.
"""

from bs4 import BeautifulSoup

from publishing.markdown.extensions.toc_extractor import (
    build_toc_tree,
    extract_toc,
    extract_toc_from_html,
)
from publishing.markdown.renderer import render_markdown


class TestExtractToc:
    def test_cjk_document(self):
        assert extract_toc("# 标题\n\n内容", characters={}) == [
            {"id": "标题", "text": "标题", "level": 1}
        ]

    def test_no_headings(self):
        assert extract_toc("just text", characters={}) == []

    def test_ids_equal_rendered_heading_ids(self):
        source = "# Guide\n\n## Install\n\n## Install\n\n#### Deep\n\n## 安装"
        toc = extract_toc(source, characters={})
        soup = BeautifulSoup(render_markdown(source, {"characters": {}}), "html.parser")
        headings = soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])
        assert [entry["id"] for entry in toc] == [h["id"] for h in headings]
        assert [entry["level"] for entry in toc] == [1, 2, 2, 4, 2]

    def test_headings_in_code_are_ignored(self):
        assert extract_toc("```\n# not a heading\n```", characters={}) == []


class TestExtractTocFromHtml:
    def test_existing_ids_kept(self):
        html = '<h2 id="kept">Kept</h2><h3>New One</h3>'
        assert extract_toc_from_html(html) == [
            {"id": "kept", "text": "Kept", "level": 2},
            {"id": "new-one", "text": "New One", "level": 3},
        ]

    def test_matches_renderer_for_stored_html(self):
        html = render_markdown("# A\n\n# A", {"characters": {}})
        assert [e["id"] for e in extract_toc_from_html(html)] == ["a", "a-2"]


class TestBuildTocTree:
    def test_nesting(self):
        flat = [
            {"id": "a", "text": "A", "level": 1},
            {"id": "b", "text": "B", "level": 2},
            {"id": "c", "text": "C", "level": 3},
            {"id": "d", "text": "D", "level": 2},
            {"id": "e", "text": "E", "level": 1},
        ]
        tree = build_toc_tree(flat)
        assert [n["id"] for n in tree] == ["a", "e"]
        assert [n["id"] for n in tree[0]["children"]] == ["b", "d"]
        assert [n["id"] for n in tree[0]["children"][0]["children"]] == ["c"]
        assert tree[1]["children"] == []

    def test_skipped_levels_nest_one_deep(self):
        tree = build_toc_tree(
            [{"id": "a", "text": "A", "level": 1}, {"id": "c", "text": "C", "level": 3}]
        )
        assert tree[0]["children"][0]["id"] == "c"

    def test_starts_below_top_level(self):
        tree = build_toc_tree(
            [{"id": "x", "text": "X", "level": 3}, {"id": "y", "text": "Y", "level": 2}]
        )
        assert [n["id"] for n in tree] == ["x", "y"]

    def test_invalid_entries_skipped(self):
        tree = build_toc_tree(
            [
                {"id": "", "text": "No id", "level": 1},
                "not a mapping",
                {"id": "t", "title": "Legacy", "level": "2"},
                {"id": "z", "text": "Z", "level": 42},
            ]
        )
        assert [(n["id"], n["text"], n["level"]) for n in tree] == [("t", "Legacy", 2)]
        assert tree[0]["children"][0]["level"] == 6
