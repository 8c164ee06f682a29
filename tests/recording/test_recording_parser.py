"""
Tests for the recording parser.

These tests verify line matching precedence, sequence numbering over matched
lines only, the locator-chain syntax and the empty-recording fallback.
"""

from __future__ import annotations

import pytest

from bddgen.recording.models import ActionKind, RecordedAction
from bddgen.recording.parser import ParseResult, RecordingParser, actions_of, parse_recording


class TestPlainCalls:
    """Test the plain call form."""

    def test_sample_recording(self, sample_recording: str) -> None:
        """Navigate, fill and click are extracted in order."""
        result = parse_recording(sample_recording)

        assert result.actions == [
            RecordedAction(1, ActionKind.NAVIGATE, value="/login"),
            RecordedAction(2, ActionKind.FILL, selector_text="#user", value="alice"),
            RecordedAction(3, ActionKind.CLICK, selector_text="#submit"),
        ]
        assert result.warnings == []
        assert result.synthesized is False

    def test_all_six_kinds(self) -> None:
        """Every action shape is recognised."""
        raw = "\n".join([
            'navigate("https://example.com")',
            'click("text=Save")',
            'fill("#email", "a@b.c")',
            'selectOption("#country", "DE")',
            'check("#terms")',
            'press("#search", "Enter")',
        ])

        kinds = [a.kind for a in parse_recording(raw)]

        assert kinds == [
            ActionKind.NAVIGATE,
            ActionKind.CLICK,
            ActionKind.FILL,
            ActionKind.SELECT,
            ActionKind.CHECK,
            ActionKind.PRESS_KEY,
        ]

    def test_page_prefix_and_single_quotes(self) -> None:
        """``page.`` prefixes and single-quoted literals are accepted."""
        result = parse_recording("page.fill('#name', 'Bob')\npage.click('#go')")

        assert result[0] == RecordedAction(1, ActionKind.FILL, "#name", "Bob")
        assert result[1] == RecordedAction(2, ActionKind.CLICK, "#go")

    def test_trailing_options_ignored(self) -> None:
        """Keyword options after the arguments do not block a match."""
        result = parse_recording('page.click("#save", timeout=5000)')

        assert result[0].selector_text == "#save"

    def test_snake_case_select(self) -> None:
        result = parse_recording('select_option("#size", "XL")')

        assert result[0].kind is ActionKind.SELECT
        assert result[0].value == "XL"


class TestSequenceIds:
    """Test sequence id assignment."""

    def test_skipped_lines_do_not_consume_ids(self) -> None:
        """Comments and noise between actions leave ids contiguous."""
        raw = '''
# a comment
click("#a")
print("not an action")
// another comment

click("#b")
'''
        result = parse_recording(raw)

        assert [a.sequence_id for a in result] == [1, 2]
        assert result.skipped_lines == 3

    def test_ids_are_one_based(self, sample_recording: str) -> None:
        assert parse_recording(sample_recording)[0].sequence_id == 1


class TestPrecedence:
    """Test first-match-wins ordering."""

    def test_click_wins_over_fill_on_same_line(self) -> None:
        """A line holding both a click and a fill is read as a click."""
        result = parse_recording('fill("#q", "x"); click("#go")')

        assert len(result) == 1
        assert result[0].kind is ActionKind.CLICK
        assert result[0].selector_text == "#go"

    def test_navigate_wins_over_click(self) -> None:
        result = parse_recording('click("#a"); navigate("/home")')

        assert result[0].kind is ActionKind.NAVIGATE


class TestLocatorChains:
    """Test the Playwright codegen locator-chain form."""

    def test_codegen_recording(self, codegen_recording: str) -> None:
        """Chains are normalised to single selector strings."""
        result = parse_recording(codegen_recording)

        assert [(a.kind, a.selector_text, a.value) for a in result] == [
            (ActionKind.NAVIGATE, None, "https://shop.example.com/cart?step=1"),
            (ActionKind.FILL, "placeholder=Search products", "tea"),
            (ActionKind.CLICK, 'role=button[name="Add to cart"]', None),
            (ActionKind.SELECT, "#country", "DE"),
            (ActionKind.CHECK, "label=Accept terms", None),
            (ActionKind.PRESS_KEY, "#search", "Enter"),
        ]

    def test_get_by_text_and_test_id(self) -> None:
        raw = 'page.get_by_text("Sign in").click()\npage.get_by_test_id("save").click()'

        result = parse_recording(raw)

        assert result[0].selector_text == "text=Sign in"
        assert result[1].selector_text == '[data-testid="save"]'

    def test_camel_case_chain(self) -> None:
        """JavaScript-style getByRole with an options object."""
        result = parse_recording("await page.getByRole('link', { name: 'Docs' }).click();")

        assert result[0].selector_text == 'role=link[name="Docs"]'

    def test_role_without_name(self) -> None:
        result = parse_recording('page.get_by_role("checkbox").check()')

        assert result[0].selector_text == "role=checkbox"

    @pytest.mark.parametrize(
        "line",
        [
            'page.locator("#a").first.click()',
            'page.locator("#a").last.click()',
            'page.locator("#a").nth(2).click()',
            "await page.locator('#a').first().click();",
        ],
    )
    def test_narrowed_chain(self, line: str) -> None:
        """Chains narrowed with first/last/nth keep the base selector."""
        result = parse_recording(line)

        assert [(a.kind, a.selector_text) for a in result] == [(ActionKind.CLICK, "#a")]

    def test_narrowed_role_chain_with_value(self) -> None:
        result = parse_recording('page.get_by_role("textbox", name="Email").nth(0).fill("a@b.c")')

        assert result[0].kind is ActionKind.FILL
        assert result[0].selector_text == 'role=textbox[name="Email"]'
        assert result[0].value == "a@b.c"


class TestValues:
    """Test that values are mirrored without escaping."""

    def test_empty_fill_value_kept(self) -> None:
        result = parse_recording('fill("#comment", "")')

        assert result[0].value == ""

    def test_escapes_in_literals_are_decoded(self) -> None:
        """The parser output is the unescaped text, not the source literal."""
        result = parse_recording(r'fill("#q", "say \"hi\"\tnow")')

        assert result[0].value == 'say "hi"\tnow'

    def test_special_characters_in_selector(self) -> None:
        result = parse_recording("""click('button:has-text("Log in")')""")

        assert result[0].selector_text == 'button:has-text("Log in")'


class TestEmptyRecording:
    """Test the navigation-only fallback."""

    @pytest.mark.parametrize("raw", ["", "# nothing here\n", "hello world"])
    def test_synthesizes_navigate(self, raw: str) -> None:
        """No recognised actions yields one empty navigation and a warning."""
        result = RecordingParser().parse(raw)

        assert result.actions == [RecordedAction(1, ActionKind.NAVIGATE, value="")]
        assert result.synthesized is True
        assert len(result.warnings) == 1
        assert "navigation-only" in result.warnings[0]


class TestParseResult:
    """Test ParseResult helpers."""

    def test_actions_of_accepts_both_forms(self) -> None:
        action = RecordedAction(1, ActionKind.CLICK, "#a")

        assert actions_of(ParseResult(actions=[action])) == [action]
        assert actions_of([action]) == [action]
