import numpy as np
import pytest


class FakeRng:
    """Returns queued samples from random(); fails loudly when exhausted."""
    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.values.pop(0)


@pytest.fixture
def params():
    return {
        "seed": 7,
        "carrier_count": 200,
        "carrier_speed": 20.0,
        "drain_rate": 5.0,
        "ion_drain_rate": 5.0,
        "spawn_probability": 0.3,
        "chemistry_speed": 60.0,
        "despawn_epsilon": 5.0,
        "field_marker_spacing": 60.0,
    }


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fake_rng():
    return FakeRng
