# particle.py
"""
Manages the state of the free charge carriers in the conductor.

This module defines the CarrierSystem class, which is responsible for
initializing and storing carrier data (track position, perpendicular
offset, idle vibration) in efficient NumPy arrays, along with the small
record types handed out to callers.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Tuple

from constants import TRANSVERSE_SPREAD

# --- Data Contracts ---
#
# class CarrierSystem:
#   - __init__(self, count: int, perimeter: float, rng: np.random.Generator):
#     - Inputs:
#       - count: int, number of carriers (fixed for the system's lifetime).
#       - perimeter: float, length of the closed track.
#       - rng: seeded NumPy generator; the only source of randomness.
#     - Side Effects: Initializes internal NumPy arrays for carrier state.
#     - Invariants:
#       - self.track_positions has shape (N,), dtype float64, values in
#         [0, perimeter). It is the only mutable array.
#       - self.transverse_offsets (N,), self.vibrations (N, 2) and
#         self.vibration_periods (N,) are read-only after construction.


@dataclass(frozen=True)
class StationaryCarrier:
    track_position: float
    transverse_offset: float
    vibration: Tuple[float, float]
    vibration_period: float


@dataclass(frozen=True)
class TransientCarrier:
    id: int
    x: float
    y: float


class CarrierSystem:
    """
    A container for all free carriers, managing their state via NumPy arrays.
    """
    def __init__(self, count: int, perimeter: float, rng: np.random.Generator):
        self.carrier_count = count

        self.track_positions = rng.uniform(0.0, perimeter, size=count)
        # uniform() may return the high end after float rounding.
        self.track_positions[self.track_positions >= perimeter] = 0.0

        self.transverse_offsets = (rng.random(count) - 0.5) * TRANSVERSE_SPREAD

        # Idle vibration: magnitude in [1, 3) with a random sign per axis.
        magnitudes = rng.uniform(1.0, 3.0, size=(count, 2))
        signs = np.where(rng.random((count, 2)) > 0.5, 1.0, -1.0)
        self.vibrations = magnitudes * signs
        self.vibration_periods = rng.uniform(0.2, 0.5, size=count)

        # Frozen attributes are generated once and never regenerated.
        for frozen in (self.transverse_offsets, self.vibrations, self.vibration_periods):
            frozen.setflags(write=False)

        logging.info(f"CarrierSystem initialized with {self.carrier_count} carriers.")
        logging.debug(
            f"Carrier data arrays created. "
            f"Track shape: {self.track_positions.shape}, "
            f"Vibration shape: {self.vibrations.shape}"
        )

    def __len__(self) -> int:
        return self.carrier_count

    def carrier(self, index: int) -> StationaryCarrier:
        vx, vy = self.vibrations[index]
        return StationaryCarrier(
            track_position=float(self.track_positions[index]),
            transverse_offset=float(self.transverse_offsets[index]),
            vibration=(float(vx), float(vy)),
            vibration_period=float(self.vibration_periods[index]),
        )
