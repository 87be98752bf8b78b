"""Shared fixtures."""

import json

import pytest


@pytest.fixture
def write_deck(tmp_path):
    """Write a deck document to a JSON file and return its path."""

    def _write(document, filename: str = "deck.json"):
        path = tmp_path / filename
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
