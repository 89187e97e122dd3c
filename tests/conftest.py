"""Shared test fixtures for emospine tests."""

from pathlib import Path

import pytest

from emospine.config import Config, RenderConfig
from emospine.data import fallback_records
from emospine.graph import build_edges
from emospine.layout import layout
from emospine.models import Record

FIXTURES = Path(__file__).parent / "fixtures"


def _make_record(
    ordinal: int,
    category: str = "dread",
    intensity: float = 0.8,
    speaker: str = "Victor",
    secondary: tuple[str, ...] = (),
) -> Record:
    return Record(
        ordinal=ordinal,
        category=category,
        intensity=intensity,
        secondary=secondary,
        context=f"Context for scene {ordinal}",
        quote=f"Quote {ordinal}",
        speaker=speaker,
    )


@pytest.fixture()
def make_record():
    """Factory for a single Record with sensible defaults."""
    return _make_record


@pytest.fixture()
def config():
    """Default config with a small canvas and sparse background for fast renders."""
    return Config(render=RenderConfig(width=300, height=400, background_particles=120))


@pytest.fixture()
def records():
    """The 33 bundled scenes."""
    return fallback_records()


@pytest.fixture()
def entities(records):
    return layout(records)


@pytest.fixture()
def edges(entities):
    return build_edges(entities)


@pytest.fixture()
def ten_records():
    """10 scenes. Scene 5 shares a speaker with 2 and a category with 8 and 9."""
    specs = [
        (1, "hope", "Walton"),
        (2, "awe", "Elizabeth"),
        (3, "hope", "Walton"),
        (4, "wonder", "Walton"),
        (5, "grief", "Elizabeth"),
        (6, "relief", "Walton"),
        (7, "hope", "Walton"),
        (8, "grief", "Walton"),
        (9, "grief", "Walton"),
        (10, "awe", "Walton"),
    ]
    return [_make_record(o, category=c, speaker=s) for o, c, s in specs]


@pytest.fixture()
def scenes_csv():
    return FIXTURES / "scenes.csv"
