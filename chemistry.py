# chemistry.py
"""
Transient carriers released by the battery chemistry.

While the circuit is energized, each frame has a fixed chance of releasing
one carrier somewhere inside the zinc (negative) band of the battery. Every
carrier in flight travels in a straight line, at constant speed, to the
junction where the battery meets the top rail, and is removed once it gets
within a small distance of it. Carriers already in flight keep moving after
the circuit is opened.
"""
import logging
import numpy as np
from typing import Dict, Any, List, Optional, Tuple

from constants import (
    BATTERY_RIGHT, BATTERY_BAND_WIDTH, BATTERY_TOP, BATTERY_HEIGHT, RAIL_OFFSET
)
from particle import TransientCarrier
from utils import require_positive, require_probability

# --- Data Contracts ---
#
# class ChemistryParticleSystem:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "spawn_probability": float in (0, 1], chance per frame.
#         - "chemistry_speed": float, units per second.
#         - "despawn_epsilon": float, removal distance from the target.
#     - Raises: ValueError on invalid values.
#
#   - maybe_spawn(self, energized: bool, rng) -> Optional[TransientCarrier]
#     - Side Effects: Appends at most one carrier. Draws exactly one sample
#       for the decision (plus two for the position on success) when
#       energized, none otherwise.
#
#   - advance(self, elapsed: float) -> int
#     - Outputs: number of carriers removed this call.
#     - Invariants: No carrier closer than epsilon to the target survives
#       a call. Ids are strictly increasing in spawn order.

# Negative terminal: the zinc band, the rightmost third of the battery body.
SPAWN_REGION = (
    (BATTERY_RIGHT - BATTERY_BAND_WIDTH, BATTERY_RIGHT),
    (BATTERY_TOP, BATTERY_TOP + BATTERY_HEIGHT),
)
# Junction of the battery's right edge and the top rail.
TARGET = (BATTERY_RIGHT, RAIL_OFFSET)


class ChemistryParticleSystem:
    def __init__(self, params: Dict[str, Any],
                 spawn_region: Tuple[Tuple[float, float], Tuple[float, float]] = SPAWN_REGION,
                 target: Tuple[float, float] = TARGET):
        self.spawn_probability = require_probability(
            'spawn_probability', params.get('spawn_probability', 0.3)
        )
        self.speed = require_positive('chemistry_speed', params.get('chemistry_speed', 60.0))
        self.epsilon = require_positive('despawn_epsilon', params.get('despawn_epsilon', 5.0))
        self.spawn_region = spawn_region
        self.target = np.array(target, dtype=np.float64)

        self.ids = np.empty(0, dtype=np.int64)
        self.positions = np.empty((0, 2), dtype=np.float64)
        self._next_id = 0

        logging.info(
            f"ChemistryParticleSystem initialized: p={self.spawn_probability}/frame, "
            f"speed {self.speed} units/s, epsilon {self.epsilon}."
        )

    def __len__(self) -> int:
        return self.ids.shape[0]

    @property
    def carriers(self) -> List[TransientCarrier]:
        return [
            TransientCarrier(int(i), float(x), float(y))
            for i, (x, y) in zip(self.ids, self.positions)
        ]

    def maybe_spawn(self, energized: bool, rng) -> Optional[TransientCarrier]:
        if not energized:
            return None
        if rng.random() >= self.spawn_probability:
            return None

        (x_min, x_max), (y_min, y_max) = self.spawn_region
        x = x_min + rng.random() * (x_max - x_min)
        y = y_min + rng.random() * (y_max - y_min)
        carrier = TransientCarrier(self._next_id, x, y)
        self._next_id += 1

        self.ids = np.append(self.ids, carrier.id)
        self.positions = np.vstack((self.positions, (x, y)))
        return carrier

    def advance(self, elapsed: float) -> int:
        if self.ids.shape[0] == 0:
            return 0

        step = self.speed * max(0.0, elapsed)
        delta = self.target - self.positions
        distance = np.linalg.norm(delta, axis=1)

        # Carriers that would reach or pass the target land on it exactly.
        arriving = distance <= step
        moving = ~arriving
        self.positions[arriving] = self.target
        self.positions[moving] += (
            delta[moving] / distance[moving, np.newaxis]
        ) * step

        remaining = np.linalg.norm(self.target - self.positions, axis=1)
        keep = remaining >= self.epsilon
        removed = int(np.count_nonzero(~keep))
        if removed:
            self.ids = self.ids[keep]
            self.positions = self.positions[keep]
            logging.debug(f"{removed} chemistry carrier(s) reached the conductor.")
        return removed
