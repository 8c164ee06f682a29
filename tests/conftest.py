"""Pytest fixtures for bddgen tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest


class FakeDriver:
    """Scripted BrowserDriver: selectors map to match counts and visibility."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}
        self.visible: set[str] = set()
        self.errors: dict[str, Exception] = {}
        self.exists_calls: list[str] = []
        self.wait_calls: list[tuple[str, int]] = []
        self.actions: list[tuple] = []

    def add(self, selector: str, count: int = 1, visible: bool = True) -> None:
        self.counts[selector] = count
        if visible:
            self.visible.add(selector)
        else:
            self.visible.discard(selector)

    def remove(self, selector: str) -> None:
        self.counts.pop(selector, None)
        self.visible.discard(selector)

    def exists(self, selector: str) -> int:
        self.exists_calls.append(selector)
        if selector in self.errors:
            raise self.errors[selector]
        return self.counts.get(selector, 0)

    def wait_visible(self, selector: str, timeout_ms: int) -> bool:
        self.wait_calls.append((selector, timeout_ms))
        return selector in self.visible

    def click(self, selector: str) -> None:
        self.actions.append(("click", selector))

    def fill(self, selector: str, value: str) -> None:
        self.actions.append(("fill", selector, value))

    def select_option(self, selector: str, value: str) -> None:
        self.actions.append(("select_option", selector, value))

    def press_key(self, selector: str, key: str) -> None:
        self.actions.append(("press_key", selector, key))

    def check(self, selector: str) -> None:
        self.actions.append(("check", selector))

    def navigate(self, url: str) -> None:
        self.actions.append(("navigate", url))

    def wait_for_load(self) -> None:
        self.actions.append(("wait_for_load",))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test artifacts."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_driver() -> FakeDriver:
    """Scripted browser driver with no elements."""
    return FakeDriver()


@pytest.fixture
def sample_recording() -> str:
    """Login recording in plain call form."""
    return '''
# recorded login flow
navigate("/login")
fill("#user", "alice")
click("#submit")
'''


@pytest.fixture
def codegen_recording() -> str:
    """Recording in Playwright codegen locator-chain form."""
    return '''
from playwright.sync_api import Page

def run(page: Page) -> None:
    page.goto("https://shop.example.com/cart?step=1")
    page.get_by_placeholder("Search products").fill("tea")
    page.get_by_role("button", name="Add to cart").click()
    page.locator("#country").select_option("DE")
    page.get_by_label("Accept terms").check()
    page.locator("#search").press("Enter")
'''
