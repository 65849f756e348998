"""Shared fixtures for criteria engine tests."""

from __future__ import annotations

import pytest

from criteria_engine.operators_memory import build_default_registry


@pytest.fixture
def registry():
    """Default in-memory operator registry for building criteria."""
    return build_default_registry()


@pytest.fixture
def muppets() -> list[dict]:
    return [
        {
            "id": 1,
            "name": "Kermit",
            "species": "frog",
            "age": 42,
            "born": "1955-05-09T00:00:00.000Z",
        },
        {"id": 2, "name": "Piggy", "species": "pig", "age": "38", "born": "1974-01-01"},
        {"id": 3, "name": "Fozzie", "species": "bear", "age": None},
        {"id": 4, "name": "Gonzo", "species": None, "age": 40},
    ]
