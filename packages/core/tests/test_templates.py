"""Tests for placeholder substitution."""

from prcopy_core.templates import INLINE_PLACEHOLDERS, Template, placeholders_in, render


class TestRender:
    def test_replaces_known_keys(self):
        assert render("{{a}}-{{b}}", {"a": "1", "b": "2"}) == "1-2"

    def test_unknown_token_passes_through(self):
        assert render("{{a}} {{c}}", {"a": "1"}) == "1 {{c}}"

    def test_known_key_with_empty_value_replaced(self):
        assert render("[{{a}}]", {"a": ""}) == "[]"

    def test_none_value_renders_empty(self):
        assert render("[{{a}}]", {"a": None}) == "[]"

    def test_every_occurrence_replaced(self):
        assert render("{{a}}/{{a}}/{{a}}", {"a": "x"}) == "x/x/x"

    def test_non_string_values_stringified(self):
        assert render("line {{n}}", {"n": 42}) == "line 42"

    def test_value_is_not_rescanned(self):
        assert render("{{a}} {{b}}", {"a": "{{b}}", "b": "2"}) == "{{b}} 2"

    def test_key_order_does_not_matter(self):
        template = "{{x}}{{y}}"
        forward = render(template, {"x": "{{y}}", "y": "Y"})
        backward = render(template, {"y": "Y", "x": "{{y}}"})
        assert forward == backward == "{{y}}Y"

    def test_overlapping_keys_independent_of_order(self):
        template = "{{a}}{{b}}"
        forward = render(template, {"a": "1", "a}}{{b": "Z"})
        backward = render(template, {"a}}{{b": "Z", "a": "1"})
        assert forward == backward == "Z"

    def test_key_with_pattern_syntax_matched_literally(self):
        assert render("{{a.b}} {{aXb}}", {"a.b": "1"}) == "1 {{aXb}}"

    def test_empty_data_returns_template(self):
        assert render("{{a}}", {}) == "{{a}}"
        assert render("{{a}}", None) == "{{a}}"


class TestTemplate:
    def test_parse_collects_placeholders(self):
        template = Template.parse("File: {{filePath}} {{lineStart}}–{{lineEnd}} {{filePath}}")
        assert template.placeholders == frozenset({"filePath", "lineStart", "lineEnd"})

    def test_unknown_placeholders(self):
        template = Template.parse("{{filePath}} {{author}}")
        assert template.unknown_placeholders(INLINE_PLACEHOLDERS) == frozenset({"author"})

    def test_render_delegates(self):
        assert Template.parse("{{reviewText}}!").render({"reviewText": "done"}) == "done!"

    def test_placeholders_in_plain_text(self):
        assert placeholders_in("no tokens { here }") == frozenset()
