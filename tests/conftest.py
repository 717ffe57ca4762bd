"""Shared test fixtures for kvlens tests."""

import json

import pytest

from kvlens.completion import FunctionCatalog


@pytest.fixture
def document():
    """A small document with maps, lists, awkward keys and scalars."""
    return {
        "regions": {"asia": {"zones": 3}, "europe": {"zones": 5}},
        "tasks": {"build-windows": {"status": "ok"}, "build.linux": {"status": "failed"}},
        "items": [
            {"name": "alpha", "items": [1, 2], "active": True},
            {"name": "beta", "items": [], "active": False},
        ],
        "counts": [10, 20, 30],
        "title": "inventory",
        "ratio": 0.5,
        "missing": None,
    }


@pytest.fixture
def record():
    """The three-key object used for Tab cycling scenarios."""
    return {"name": "alpha", "items": [1, 2, 3], "active": True}


@pytest.fixture
def empty_catalog():
    return FunctionCatalog()


@pytest.fixture
def providers():
    return [
        {
            "name": "aws",
            "description": "Amazon Web Services",
            "tags": ["cloud", "iaas"],
            "region": "us-east-1",
            "tier": "gold",
        },
        {
            "name": "gcp",
            "description": "Google Cloud Platform",
            "tags": ["cloud"],
            "region": "us-central1",
            "tier": "silver",
        },
        {
            "name": "local",
            "description": "Local development stack",
            "tags": [],
            "region": "localhost",
            "tier": "bronze",
        },
    ]


@pytest.fixture
def json_file(tmp_path, document):
    """Write *document* to a temporary JSON file and return its path."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(document), encoding="utf-8")
    return path
