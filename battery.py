# battery.py
"""
The battery: stored charge, visible ion budget and the dead flag.

Both quantities drain together in discrete steps, once per accumulated
second of energized time, while the frame loop ticks continuously.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Any

from constants import FULL_CHARGE
from utils import require_positive

# --- Data Contracts ---
#
# class BatteryStateMachine:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "drain_rate": float, charge lost per energized second.
#         - "ion_drain_rate": float, ions lost per energized second.
#     - Raises: ValueError if either rate is not positive and finite.
#
#   - tick(self, elapsed_ms: float, energized: bool) -> bool:
#     - Outputs: True if this call set the dead flag.
#     - Invariants: 0 <= stored_charge, ion_budget <= 100. dead is True
#       iff stored_charge reached 0 through draining, until reset().
#
#   - reset(self) -> None: full recharge, idempotent.

MS_PER_DRAIN = 1000.0


@dataclass(frozen=True)
class PowerSourceState:
    stored_charge: float
    ion_budget: float
    dead: bool


class BatteryStateMachine:
    def __init__(self, params: Dict[str, Any]):
        self.drain_rate = require_positive('drain_rate', params.get('drain_rate', 5.0))
        self.ion_drain_rate = require_positive(
            'ion_drain_rate', params.get('ion_drain_rate', self.drain_rate)
        )
        self.dead = False
        self._accumulated_ms = 0.0
        # Levels are derived from a whole-drain count so rounding never builds up.
        self._charge_base = FULL_CHARGE
        self._ion_base = FULL_CHARGE
        self._charge_drains = 0
        self._ion_drains = 0

        logging.info(
            f"Battery initialized: drain {self.drain_rate}/s, "
            f"ion drain {self.ion_drain_rate}/s."
        )

    @property
    def stored_charge(self) -> float:
        return max(0.0, self._charge_base - self._charge_drains * self.drain_rate)

    @stored_charge.setter
    def stored_charge(self, value: float) -> None:
        self._charge_base = float(value)
        self._charge_drains = 0

    @property
    def ion_budget(self) -> float:
        return max(0.0, self._ion_base - self._ion_drains * self.ion_drain_rate)

    @ion_budget.setter
    def ion_budget(self, value: float) -> None:
        self._ion_base = float(value)
        self._ion_drains = 0

    @property
    def state(self) -> PowerSourceState:
        return PowerSourceState(self.stored_charge, self.ion_budget, self.dead)

    def tick(self, elapsed_ms: float, energized: bool) -> bool:
        """
        Accumulates energized time and drains once per whole second.
        """
        if not energized or self.dead:
            return False

        self._accumulated_ms += max(0.0, elapsed_ms)
        while self._accumulated_ms >= MS_PER_DRAIN:
            self._accumulated_ms -= MS_PER_DRAIN
            self._charge_drains += 1
            self._ion_drains += 1
            logging.debug(
                f"Battery drained: charge {self.stored_charge:.1f}, "
                f"ions {self.ion_budget:.1f}."
            )
            if self.stored_charge == 0.0:
                self.dead = True
                self._accumulated_ms = 0.0
                logging.info("Battery depleted.")
                return True
        return False

    def reset(self) -> None:
        self.stored_charge = FULL_CHARGE
        self.ion_budget = FULL_CHARGE
        self.dead = False
        self._accumulated_ms = 0.0
        logging.info("Battery recharged.")
