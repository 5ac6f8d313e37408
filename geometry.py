# geometry.py
"""
Maps the one-dimensional carrier track onto the 2D conductor frame.

The track is the clockwise midline of the rectangular conductor. A track
coordinate is an arc length in [0, PERIMETER); this module converts it to a
point, a tangent angle and the axis of the segment it lies on. It also
defines the fixed rectangular footprints (battery, switch gap) used to
hide carriers, and the static field-marker layout.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import NamedTuple, Tuple
from numba import jit

from constants import (
    TRACK_WIDTH, TRACK_HEIGHT, RAIL_OFFSET, RAIL_TOLERANCE,
    BATTERY_LEFT, BATTERY_RIGHT, SWITCH_LEFT, SWITCH_WIDTH
)

# --- Data Contracts ---
#
# class TrackGeometry:
#   - locate(self, track_pos: float) -> TrackPoint:
#     - Inputs: any float; it is wrapped into [0, perimeter) first.
#     - Outputs: TrackPoint(x, y, angle, horizontal). angle is one of
#       0, 90, 180, 270.
#     - Invariants: locate(0) == locate(perimeter). The mapping is
#       continuous across the four segment boundaries.
#
#   - locate_many(self, track: np.ndarray) -> (xs, ys, horizontal):
#     - Vectorized locate over an array of wrapped coordinates.
#
# class Footprint:
#   - contains(self, x: float, y: float) -> bool:
#     - True if the point lies on the rail (within tolerance) and
#       x_min <= x <= x_max.


class TrackPoint(NamedTuple):
    x: float
    y: float
    angle: int
    horizontal: bool

    @property
    def axis(self) -> str:
        return "horizontal" if self.horizontal else "vertical"


@dataclass(frozen=True)
class Footprint:
    """A fixed stretch of the top rail, used for occlusion tests."""
    x_min: float
    x_max: float
    rail_y: float = RAIL_OFFSET
    tolerance: float = RAIL_TOLERANCE

    def contains(self, x: float, y: float) -> bool:
        return abs(y - self.rail_y) < self.tolerance and self.x_min <= x <= self.x_max


POWER_SOURCE_FOOTPRINT = Footprint(BATTERY_LEFT, BATTERY_RIGHT)
SWITCH_GAP_FOOTPRINT = Footprint(SWITCH_LEFT, SWITCH_LEFT + SWITCH_WIDTH)


@jit(nopython=True)
def _locate_many_numba(track, width, height, offset):
    """
    Numba-jitted batch version of TrackGeometry.locate.

    Expects coordinates already wrapped into [0, perimeter).
    """
    n = track.shape[0]
    xs = np.empty(n, dtype=np.float64)
    ys = np.empty(n, dtype=np.float64)
    horizontal = np.empty(n, dtype=np.bool_)
    for i in range(n):
        s = track[i]
        if s <= width:
            xs[i] = offset + s
            ys[i] = offset
            horizontal[i] = True
        elif s <= width + height:
            xs[i] = offset + width
            ys[i] = offset + (s - width)
            horizontal[i] = False
        elif s <= 2.0 * width + height:
            xs[i] = offset + width - (s - (width + height))
            ys[i] = offset + height
            horizontal[i] = True
        else:
            xs[i] = offset
            ys[i] = offset + height - (s - (2.0 * width + height))
            horizontal[i] = False
    return xs, ys, horizontal


class TrackGeometry:
    """
    The closed clockwise rectangle followed by the free carriers.
    """
    def __init__(self, width: float = TRACK_WIDTH, height: float = TRACK_HEIGHT,
                 offset: float = RAIL_OFFSET):
        self.width = float(width)
        self.height = float(height)
        self.offset = float(offset)
        self.perimeter = 2.0 * (self.width + self.height)

    def wrap(self, track_pos: float) -> float:
        """Wraps a coordinate into [0, perimeter)."""
        wrapped = track_pos % self.perimeter
        # Tiny negative inputs can round up to exactly the perimeter.
        if wrapped >= self.perimeter:
            wrapped -= self.perimeter
        return wrapped

    def wrap_many(self, track: np.ndarray) -> np.ndarray:
        wrapped = np.mod(track, self.perimeter)
        wrapped[wrapped >= self.perimeter] -= self.perimeter
        return wrapped

    def locate(self, track_pos: float) -> TrackPoint:
        s = self.wrap(track_pos)
        w, h, o = self.width, self.height, self.offset
        if s <= w:
            # Top segment (left to right)
            return TrackPoint(o + s, o, 0, True)
        if s <= w + h:
            # Right segment (top to bottom)
            return TrackPoint(o + w, o + (s - w), 90, False)
        if s <= 2 * w + h:
            # Bottom segment (right to left)
            return TrackPoint(o + w - (s - (w + h)), o + h, 180, True)
        # Left segment (bottom to top)
        return TrackPoint(o, o + h - (s - (2 * w + h)), 270, False)

    def locate_many(self, track: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        track = self.wrap_many(np.asarray(track, dtype=np.float64))
        return _locate_many_numba(track, self.width, self.height, self.offset)

    def carrier_points(self, track: np.ndarray, transverse: np.ndarray) -> np.ndarray:
        """
        Returns an (N, 2) array of carrier positions with their fixed
        perpendicular offset applied.
        """
        xs, ys, horizontal = self.locate_many(track)
        points = np.empty((xs.shape[0], 2), dtype=np.float64)
        points[:, 0] = np.where(horizontal, xs, xs + transverse)
        points[:, 1] = np.where(horizontal, ys + transverse, ys)
        return points

    def field_markers(self, spacing: float,
                      excluded: Footprint = POWER_SOURCE_FOOTPRINT) -> np.ndarray:
        """
        Lays out the static field markers every `spacing` units along the
        track, skipping the ones that fall under the battery.

        Returns:
            np.ndarray: (M, 3) array of (x, y, angle) rows.
        """
        markers = []
        for p in np.arange(0.0, self.perimeter, spacing):
            point = self.locate(float(p))
            if not excluded.contains(point.x, point.y):
                markers.append((point.x, point.y, point.angle))
        logging.debug(f"Laid out {len(markers)} field markers every {spacing} units.")
        return np.array(markers, dtype=np.float64).reshape(-1, 3)
