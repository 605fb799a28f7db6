"""Shared pytest fixtures for loading HTML test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture()
def results_day01_html() -> str:
    return (FIXTURES_DIR / "results_day01.html").read_text(encoding="utf-8")


@pytest.fixture()
def results_day02_html() -> str:
    return (FIXTURES_DIR / "results_day02.html").read_text(encoding="utf-8")
