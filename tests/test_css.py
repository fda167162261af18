from __future__ import annotations

import unittest

from whitelisthtml.css import is_unsafe_value, parse_declarations, serialize_declarations


class TestParseDeclarations(unittest.TestCase):
    def test_empty(self) -> None:
        assert parse_declarations(None) == {}
        assert parse_declarations("") == {}

    def test_names_are_lowercased(self) -> None:
        assert parse_declarations("color: red; BORDER: 1px solid") == {"color": "red", "border": "1px solid"}

    def test_later_declaration_wins(self) -> None:
        assert parse_declarations("margin: 1px; margin: 2px") == {"margin": "2px"}

    def test_priority_is_dropped(self) -> None:
        assert parse_declarations("border: 1px !important") == {"border": "1px"}

    def test_malformed_declarations_are_skipped(self) -> None:
        assert parse_declarations("color red; margin: 0") == {"margin": "0"}

    def test_comments_are_skipped(self) -> None:
        assert parse_declarations("/* c */ padding: 3px") == {"padding": "3px"}

    def test_empty_values_are_skipped(self) -> None:
        assert parse_declarations("margin: ;padding: 1px") == {"padding": "1px"}

    def test_unterminated_string_is_skipped(self) -> None:
        assert parse_declarations("border: 'abc") == {}
        assert parse_declarations('border: "abc\\') == {}

    def test_unterminated_string_does_not_swallow_earlier_declarations(self) -> None:
        assert parse_declarations("padding: 1px; border: 'x") == {"padding": "1px"}

    def test_unterminated_url_is_skipped(self) -> None:
        assert parse_declarations("border: url(") == {}
        assert parse_declarations("margin: 0; border: url(x") == {"margin": "0"}

    def test_bad_string_and_bad_url_are_skipped(self) -> None:
        assert parse_declarations("border: 'a\nb; margin: 0") == {"margin": "0"}
        assert parse_declarations("border: url(a b); padding: 0") == {"padding": "0"}
        assert parse_declarations("border: calc(1px + url(a b))") == {}

    def test_closed_strings_and_urls_are_kept(self) -> None:
        assert parse_declarations("border: 'abc'") == {"border": '"abc"'}
        assert parse_declarations("border: url(x)") == {"border": "url(x)"}


class TestSerializeDeclarations(unittest.TestCase):
    def test_serialize(self) -> None:
        assert serialize_declarations({"border": "1px solid", "margin": "0"}) == "border: 1px solid; margin: 0;"

    def test_serialize_empty(self) -> None:
        assert serialize_declarations({}) == ""

    def test_round_trip_is_stable(self) -> None:
        text = serialize_declarations(parse_declarations("border:1px  solid red;margin:0"))
        assert serialize_declarations(parse_declarations(text)) == text


class TestUnsafeValues(unittest.TestCase):
    def test_plain_values_are_safe(self) -> None:
        assert not is_unsafe_value("1px solid red")
        assert not is_unsafe_value("calc(1px + 2px)")
        assert not is_unsafe_value("0 auto")

    def test_url_functions(self) -> None:
        assert is_unsafe_value('url("https://example.com/a.png")')
        assert is_unsafe_value("url(https://example.com/a.png)")
        assert is_unsafe_value("1px solid image-set('a.png' 1x)")

    def test_nested_functions(self) -> None:
        assert is_unsafe_value("calc(1px + url(x))")

    def test_legacy_expression(self) -> None:
        assert is_unsafe_value("expression(alert(1))")

    def test_script_urls(self) -> None:
        assert is_unsafe_value("JavaScript:alert(1)")
        assert is_unsafe_value("java script:alert(1)")
