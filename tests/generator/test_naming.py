"""Tests for literal escaping and name derivation."""

from __future__ import annotations

import pytest

from bddgen.generator.naming import (
    derive_class_name,
    escape_literal,
    extract_page_path,
    next_element_index,
    quote_literal,
    to_snake_case,
    unescape_literal,
)


class TestEscaping:
    """Test the single escaping routine and its inverse."""

    def test_special_characters(self) -> None:
        assert escape_literal('a"b\\c\nd\te\r') == 'a\\"b\\\\c\\nd\\te\\r'

    @pytest.mark.parametrize("text", ["hello", "Sign In", "user@example.com", ""])
    def test_plain_text_unchanged(self, text: str) -> None:
        assert escape_literal(text) == text
        assert escape_literal(escape_literal(text)) == text

    def test_double_escaping_is_detectable(self) -> None:
        once = escape_literal('say "hi"')

        assert escape_literal(once) != once

    @pytest.mark.parametrize(
        "text", ['say "hi"', "C:\\temp\\new", "line1\nline2", "tab\there", "\\n literal"]
    )
    def test_unescape_inverts_escape(self, text: str) -> None:
        assert unescape_literal(escape_literal(text)) == text

    def test_unknown_escape_kept(self) -> None:
        assert unescape_literal("a\\qb") == "a\\qb"

    def test_quote_literal(self) -> None:
        assert quote_literal('x"y') == '"x\\"y"'
        assert quote_literal(None) == '""'
        assert quote_literal("") == '""'


class TestNames:
    """Test class, file and index derivation."""

    def test_class_name_capitalizes_first_letter_only(self) -> None:
        assert derive_class_name("login") == "Login"
        assert derive_class_name("checkoutPage") == "CheckoutPage"

    def test_empty_class_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            derive_class_name("")

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Login", "login"),
            ("LoginPage", "login_page"),
            ("HTTPServer", "http_server"),
            ("My page", "my_page"),
        ],
    )
    def test_snake_case(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected

    def test_next_element_index(self) -> None:
        source = "class Login(BasePage):\n    ELEMENT_1 = (\n    )\n    ELEMENT_7 = (\n    )\n"

        assert next_element_index(source) == 8
        assert next_element_index(None) == 1
        assert next_element_index("class Empty:\n    pass\n") == 1


class TestPagePath:
    """Test page path extraction from navigation targets."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://shop.example.com/cart?step=1", "/cart?step=1"),
            ("https://example.com/login", "/login"),
            ("https://example.com", ""),
            ("https://example.com/", ""),
            ("https://example.com/?q=1", "/?q=1"),
            ("/login", "/login"),
            (None, ""),
            ("", ""),
        ],
    )
    def test_extract_page_path(self, url: str | None, expected: str) -> None:
        assert extract_page_path(url) == expected
