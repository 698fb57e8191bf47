"""Pytest fixtures for tests."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from rdmpatcher.models import AddressSpace, create_device
from rdmpatcher.registry import InMemoryRegistry
from rdmpatcher.services import PatchService


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def address_space():
    """Default 512-slot bus, 8 slots per row."""
    return AddressSpace()


@pytest.fixture
def dimmer():
    """Device A: addresses 1-10."""
    return create_device("a", "Dimmer", start_address=1, footprint=10)


@pytest.fixture
def spot():
    """Device B: addresses 5-7, overlapping A."""
    return create_device("b", "Spot", start_address=5, footprint=3)


@pytest.fixture
def par():
    """Device C: addresses 20-23, clear of A and B."""
    return create_device("c", "Par", start_address=20, footprint=4, personality=1, personality_count=3)


@pytest.fixture
def registry(dimmer, spot, par):
    """In-memory registry holding A, B and C."""
    return InMemoryRegistry.from_devices([dimmer, spot, par])


@pytest.fixture
def service(registry, dimmer, spot, par):
    """Patch service loaded with A, B and C."""
    service = PatchService(registry)
    service.set_devices([dimmer, spot, par])
    return service


@pytest.fixture
def patch_file(temp_dir):
    """Patch file on disk with three devices, one overflowing."""
    path = temp_dir / "patch.json"
    path.write_text(json.dumps({
        "universe": 3,
        "devices": [
            {"uid": "a", "label": "Dimmer", "start_address": 1, "footprint": 10},
            {"uid": "b", "label": "Spot", "start_address": 5, "footprint": 3},
            {"uid": "z", "label": "Strobe", "start_address": 510, "footprint": 6},
        ],
    }))
    return path
