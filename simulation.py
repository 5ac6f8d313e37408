# simulation.py
"""
Handles the per-frame composition of the circuit simulation.

This module defines the Simulation class, the clock and circuit controller.
It owns the switch state and the three simulated components (battery,
carrier circulation, battery chemistry), advances them once per frame in a
fixed order, and hands read-only snapshots to the renderer.
"""
import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, Any, Optional

from battery import BatteryStateMachine
from chemistry import ChemistryParticleSystem
from circulation import CirculationEngine
from geometry import TrackGeometry
from scheduler import FrameScheduler
from utils import require_positive

# --- Data Contracts ---
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any], rng: Optional[np.random.Generator] = None):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int, used when no rng is given.
#         - plus the keys consumed by BatteryStateMachine,
#           CirculationEngine and ChemistryParticleSystem.
#     - Raises: ValueError on any invalid configuration constant.
#
#   - tick(self, timestamp_ms: float) -> None:
#     - Side Effects: Advances battery, carriers and chemistry, in that
#       order, by the time since the previous tick.
#     - Invariants: The first tick after start() and after any change of
#       `closed` or `dead` measures zero elapsed time.
#
#   - toggle(self) -> None:
#     - Side Effects: Full reset if the battery is dead (closed becomes
#       False), otherwise flips `closed`.
#
#   - snapshot(self) -> SimulationSnapshot:
#     - Outputs: copies of the current state; arrays are not writeable.


def _readonly(array: np.ndarray) -> np.ndarray:
    copy = np.array(array, copy=True)
    copy.setflags(write=False)
    return copy


@dataclass(frozen=True)
class SimulationSnapshot:
    carrier_points: np.ndarray      # (N, 2)
    carrier_visible: np.ndarray     # (N,) bool
    carrier_vibrations: np.ndarray  # (N, 2)
    carrier_periods: np.ndarray     # (N,)
    transient_ids: np.ndarray       # (M,)
    transient_points: np.ndarray    # (M, 2)
    field_markers: np.ndarray       # (K, 3) x, y, angle
    stored_charge: float
    ion_budget: float
    dead: bool
    closed: bool
    energized: bool
    clock: float
    frame: int


class Simulation:
    """
    Clock and circuit controller. Single writer of all simulation state.
    """
    def __init__(self, params: Dict[str, Any], rng: Optional[np.random.Generator] = None):
        self.seed = params.get('seed')
        # All randomness comes from one generator so runs are reproducible.
        self.rng = rng if rng is not None else np.random.default_rng(self.seed)

        self.geometry = TrackGeometry()
        self.battery = BatteryStateMachine(params)
        self.circulation = CirculationEngine(params, self.geometry, self.rng)
        self.chemistry = ChemistryParticleSystem(params)

        marker_spacing = require_positive(
            'field_marker_spacing', params.get('field_marker_spacing', 60.0)
        )
        self.field_markers = _readonly(self.geometry.field_markers(marker_spacing))

        self.closed = False
        self.frame_count = 0
        self.clock = 0.0
        self._last_timestamp: Optional[float] = None

        self.running = False
        self._scheduler: Optional[FrameScheduler] = None
        self._frame_handle: Optional[int] = None

        logging.info(
            f"Simulation initialized (seed={self.seed}, perimeter={self.geometry.perimeter})."
        )

    @property
    def dead(self) -> bool:
        return self.battery.dead

    @property
    def energized(self) -> bool:
        return self.closed and not self.battery.dead

    # --- Lifecycle ---

    def start(self, scheduler: FrameScheduler) -> None:
        if self.running:
            return
        self.running = True
        self._scheduler = scheduler
        self._last_timestamp = None
        self._frame_handle = scheduler.request_frame(self._on_frame)
        logging.info("Simulation started.")

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        if self._frame_handle is not None:
            self._scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        logging.info(f"Simulation stopped after {self.frame_count} frames.")

    def _on_frame(self, timestamp_ms: float) -> None:
        self._frame_handle = None
        self.tick(timestamp_ms)
        if self.running:
            self._frame_handle = self._scheduler.request_frame(self._on_frame)

    # --- Per-frame update ---

    def tick(self, timestamp_ms: float) -> None:
        """
        Executes one frame of the simulation.
        """
        # 1. Elapsed time since the previous frame; zero right after a restart.
        if self._last_timestamp is None:
            elapsed = 0.0
        else:
            elapsed = max(0.0, (timestamp_ms - self._last_timestamp) / 1000.0)

        # 2. Battery health is resolved first so a depletion in this frame
        #    stops the carriers in this same frame.
        died = self.battery.tick(elapsed * 1000.0, self.energized)
        energized = self.energized

        # 3. Carriers and chemistry.
        self.circulation.advance(elapsed, energized)
        self.chemistry.maybe_spawn(energized, self.rng)
        self.chemistry.advance(elapsed)

        self.frame_count += 1
        self.clock += elapsed
        # A change of `dead` restarts the timing baseline.
        self._last_timestamp = None if died else timestamp_ms

    def toggle(self) -> None:
        if self.battery.dead:
            self.battery.reset()
            self.closed = False
            logging.info("Toggle on a dead battery: recharged, circuit opened.")
        else:
            self.closed = not self.closed
            logging.info(f"Circuit {'closed' if self.closed else 'opened'}.")
        self._last_timestamp = None

    # --- Read-only view for the renderer ---

    def snapshot(self) -> SimulationSnapshot:
        carriers = self.circulation.carriers
        return SimulationSnapshot(
            carrier_points=_readonly(self.circulation.points()),
            carrier_visible=_readonly(self.circulation.visibility_mask(self.closed)),
            carrier_vibrations=carriers.vibrations,
            carrier_periods=carriers.vibration_periods,
            transient_ids=_readonly(self.chemistry.ids),
            transient_points=_readonly(self.chemistry.positions),
            field_markers=self.field_markers,
            stored_charge=self.battery.stored_charge,
            ion_budget=self.battery.ion_budget,
            dead=self.battery.dead,
            closed=self.closed,
            energized=self.energized,
            clock=self.clock,
            frame=self.frame_count,
        )
