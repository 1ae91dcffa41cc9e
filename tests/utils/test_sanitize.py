"""Tests for HTML cleanup of titles and descriptions."""

from __future__ import annotations

from chromatask_cli.utils.sanitize import sanitize_description, strip_html


class TestStripHtml:
    def test_removes_tags_and_trims(self):
        assert strip_html("  <b>Buy</b> <i>milk</i>  ") == "Buy milk"

    def test_line_breaks_become_newlines(self):
        assert strip_html("one<br>two<br/>three") == "one\ntwo\nthree"
        assert strip_html("<p>first</p><p>second</p>") == "first\nsecond"

    def test_tabs_collapse_to_one_space(self):
        assert strip_html("a\t\tb") == "a b"

    def test_entities_are_decoded(self):
        assert strip_html("Tom &amp; Jerry") == "Tom & Jerry"

    def test_empty_values(self):
        assert strip_html(None) == ""
        assert strip_html("") == ""
        assert strip_html("<br>") == ""


class TestSanitizeDescription:
    def test_keeps_formatting_subset(self):
        html = '<p><b>bold</b> <span style="color: red">red</span></p>'
        assert sanitize_description(html) == html

    def test_drops_scripts_with_content(self):
        result = sanitize_description("<p>hi</p><script>alert(1)</script>")
        assert "script" not in result
        assert "alert" not in result
        assert "<p>hi</p>" in result

    def test_unwraps_unknown_tags(self):
        assert sanitize_description("<section><b>x</b></section>") == "<b>x</b>"

    def test_strips_event_handlers(self):
        result = sanitize_description('<b onclick="steal()">x</b>')
        assert result == "<b>x</b>"

    def test_rejects_javascript_links(self):
        result = sanitize_description('<a href="javascript:alert(1)">x</a>')
        assert "href" not in result

    def test_safe_links_get_rel(self):
        result = sanitize_description('<a href="https://example.com">x</a>')
        assert 'href="https://example.com"' in result
        assert 'rel="noopener noreferrer"' in result

    def test_href_only_on_anchors(self):
        assert "href" not in sanitize_description('<span href="https://x.y">x</span>')

    def test_unsafe_style_removed(self):
        result = sanitize_description('<span style="background: url(http://x)">x</span>')
        assert result == "<span>x</span>"

    def test_comments_removed(self):
        assert sanitize_description("<b>a</b><!-- hidden -->") == "<b>a</b>"

    def test_empty(self):
        assert sanitize_description(None) == ""
        assert sanitize_description("") == ""
