# circulation.py
"""
Advances the free carriers around the circuit.

When the circuit is energized every carrier drifts clockwise at the same
speed. When it is not, positions are frozen; the idle vibration seen on
screen is drawn by the renderer on top of the frozen position.
"""
import logging
import numpy as np
from typing import Dict, Any
from numba import jit

from geometry import TrackGeometry, Footprint, POWER_SOURCE_FOOTPRINT, SWITCH_GAP_FOOTPRINT
from particle import CarrierSystem, StationaryCarrier
from utils import require_count, require_positive

# --- Data Contracts ---
#
# class CirculationEngine:
#   - __init__(self, params: Dict[str, Any], geometry: TrackGeometry,
#              rng: np.random.Generator):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "carrier_count": int
#         - "carrier_speed": float, track units per second.
#     - Raises: ValueError on a non-positive count or speed.
#
#   - advance(self, elapsed: float, energized: bool) -> None:
#     - Side Effects: Moves every carrier by speed * elapsed when energized.
#     - Invariants: Carrier count is constant. Track positions stay in
#       [0, perimeter).
#
#   - visibility_mask(self, circuit_closed: bool) -> np.ndarray:
#     - Outputs: (N,) bool array, False for carriers hidden under the
#       battery, or under the switch gap while the circuit is open.


@jit(nopython=True)
def _visibility_numba(xs, ys, source_rail_y, source_tolerance, source_min, source_max,
                      gap_rail_y, gap_tolerance, gap_min, gap_max, circuit_closed):
    """
    Numba-jitted occlusion test over all carrier midline points.
    Each footprint is checked against its own rail and tolerance.
    """
    n = xs.shape[0]
    visible = np.ones(n, dtype=np.bool_)
    for i in range(n):
        x = xs[i]
        y = ys[i]
        if (abs(y - source_rail_y) < source_tolerance
                and x >= source_min and x <= source_max):
            visible[i] = False
        elif (not circuit_closed and abs(y - gap_rail_y) < gap_tolerance
                and x >= gap_min and x <= gap_max):
            visible[i] = False
    return visible


class CirculationEngine:
    def __init__(self, params: Dict[str, Any], geometry: TrackGeometry,
                 rng: np.random.Generator,
                 source_footprint: Footprint = POWER_SOURCE_FOOTPRINT,
                 gap_footprint: Footprint = SWITCH_GAP_FOOTPRINT):
        count = require_count('carrier_count', params.get('carrier_count', 1000))
        self.speed = require_positive('carrier_speed', params.get('carrier_speed', 20.0))
        self.geometry = geometry
        self.source_footprint = source_footprint
        self.gap_footprint = gap_footprint
        self.carriers = CarrierSystem(count, geometry.perimeter, rng)

        logging.info(f"CirculationEngine initialized: speed {self.speed} units/s.")

    def advance(self, elapsed: float, energized: bool) -> None:
        if not energized:
            return
        step = self.speed * max(0.0, elapsed)
        self.carriers.track_positions = self.geometry.wrap_many(
            self.carriers.track_positions + step
        )

    def carrier(self, index: int) -> StationaryCarrier:
        return self.carriers.carrier(index)

    def points(self) -> np.ndarray:
        """Carrier positions in circuit units, offsets applied."""
        return self.geometry.carrier_points(
            self.carriers.track_positions, self.carriers.transverse_offsets
        )

    def visibility_of(self, index: int, circuit_closed: bool) -> bool:
        point = self.geometry.locate(float(self.carriers.track_positions[index]))
        if self.source_footprint.contains(point.x, point.y):
            return False
        if not circuit_closed and self.gap_footprint.contains(point.x, point.y):
            return False
        return True

    def visibility_mask(self, circuit_closed: bool) -> np.ndarray:
        xs, ys, _ = self.geometry.locate_many(self.carriers.track_positions)
        source, gap = self.source_footprint, self.gap_footprint
        return _visibility_numba(
            xs, ys, source.rail_y, source.tolerance, source.x_min, source.x_max,
            gap.rail_y, gap.tolerance, gap.x_min, gap.x_max,
            circuit_closed
        )
