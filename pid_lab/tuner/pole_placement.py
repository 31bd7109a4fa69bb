"""
Analytic PID tuning by pole placement.

The loop formed by the second-order plant K / (tau^2 s^2 + 2 zeta tau s + 1)
and an ideal PID controller has the characteristic polynomial

    tau^2 s^3 + (2 zeta tau + K Kd) s^2 + (1 + K Kp) s + K Ki

Matching it against (s^2 + 2 zeta_d wn s + wn^2)(s + p), scaled by tau^2,
yields the three gains in closed form. The extra real pole p is placed by a
heuristic that depends on the desired damping.
"""

from typing import Dict, Any, List, Tuple, Optional
from dataclasses import dataclass, field
import logging
import math

import numpy as np

from pid_lab.core.pid_params import PIDParams
from pid_lab.plants.second_order import PlantParameters
from pid_lab.utils.validators import validate_positive

logger = logging.getLogger(__name__)

# Lower bounds substituted for non-positive or tiny gains
MIN_KP = 0.1
MIN_KI = 0.01
MIN_KD = 0.01


@dataclass(frozen=True)
class TuningTargets:
    """Desired closed-loop damping ratio and natural frequency."""
    name: str
    damping_ratio: float
    natural_frequency: float

    def __post_init__(self):
        validate_positive(self.damping_ratio, "damping_ratio")
        validate_positive(self.natural_frequency, "natural_frequency")

    @staticmethod
    def analytic_set() -> List['TuningTargets']:
        """Targets for the analytic tuning study."""
        return [
            TuningTargets("Underdamped", 0.3, 0.8),
            TuningTargets("Critically damped", 1.0, 0.6),
            TuningTargets("Overdamped", 1.1, 0.4),
        ]

    @staticmethod
    def identified_model_set() -> List['TuningTargets']:
        """Targets used when tuning against an identified model."""
        return [
            TuningTargets("Fast", 0.7, 0.8),
            TuningTargets("Balanced", 1.0, 0.6),
            TuningTargets("Conservative", 1.3, 0.4),
        ]


@dataclass(frozen=True)
class DesiredPoles:
    """Dominant pole pair and the extra real pole magnitude."""
    poles: Tuple[complex, complex]
    extra_pole: float

    @property
    def all_poles(self) -> Tuple[complex, complex, complex]:
        return (self.poles[0], self.poles[1], complex(-self.extra_pole, 0.0))


@dataclass(frozen=True)
class TuningResult:
    """Gains computed for one set of targets."""
    targets: TuningTargets
    desired: DesiredPoles
    coefficients: Tuple[float, float, float]  # (a2, a1, a0)
    kp: float
    ki: float
    kd: float
    raw_gains: Dict[str, float] = field(default_factory=dict)
    floored: Tuple[str, ...] = ()
    closed_loop_coefficients: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)

    @property
    def gains(self) -> Dict[str, float]:
        return {'kp': self.kp, 'ki': self.ki, 'kd': self.kd}

    def to_params(self, **kwargs) -> PIDParams:
        """Build PID parameters with these gains."""
        return PIDParams(kp=self.kp, ki=self.ki, kd=self.kd, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.targets.name,
            'damping_ratio': self.targets.damping_ratio,
            'natural_frequency': self.targets.natural_frequency,
            'poles': [complex(p) for p in self.desired.poles],
            'extra_pole': self.desired.extra_pole,
            'coefficients': list(self.coefficients),
            **self.gains,
            'floored': list(self.floored),
        }


def _apply_floors(raw: Dict[str, float], context: str) -> Tuple[Dict[str, float], Tuple[str, ...]]:
    floors = {'kp': MIN_KP, 'ki': MIN_KI, 'kd': MIN_KD}
    gains = {}
    floored = []
    for name, value in raw.items():
        floor = floors[name]
        if value < floor:
            logger.warning(
                "%s: computed %s = %.4g is below %.4g, using the floor",
                context, name, value, floor
            )
            floored.append(name)
            value = floor
        gains[name] = value
    return gains, tuple(floored)


class PoleTuner:
    """
    Pole-placement tuner for a known second-order plant.

    Example:
        >>> tuner = PoleTuner(PlantParameters(1.0, 1.0, 0.5))
        >>> result = tuner.tune(0.3, 0.8)
        >>> result.gains
    """

    def __init__(self, plant: PlantParameters):
        self._plant = plant

    @property
    def plant(self) -> PlantParameters:
        return self._plant

    @staticmethod
    def desired_poles(damping_ratio: float, natural_frequency: float) -> Tuple[complex, complex]:
        """
        Dominant closed-loop poles for the desired damping and frequency.

        Complex-conjugate pair when underdamped, a repeated real pole when
        critically damped, two distinct real poles when overdamped.
        """
        zeta = validate_positive(damping_ratio, "damping_ratio")
        wn = validate_positive(natural_frequency, "natural_frequency")

        if math.isclose(zeta, 1.0):
            return complex(-wn, 0.0), complex(-wn, 0.0)
        if zeta < 1.0:
            real = -zeta * wn
            imag = wn * math.sqrt(1.0 - zeta * zeta)
            return complex(real, imag), complex(real, -imag)

        spread = wn * math.sqrt(zeta * zeta - 1.0)
        return complex(-zeta * wn + spread, 0.0), complex(-zeta * wn - spread, 0.0)

    @staticmethod
    def extra_pole(damping_ratio: float, poles: Tuple[complex, complex]) -> float:
        """
        Magnitude of the third real pole.

        5 x the largest |Re| of the pair when underdamped, 1 x when
        critically damped, 2 x the smallest |Re| when overdamped.
        """
        magnitudes = [abs(p.real) for p in poles]
        if math.isclose(damping_ratio, 1.0):
            return max(magnitudes)
        if damping_ratio < 1.0:
            return 5.0 * max(magnitudes)
        return 2.0 * min(magnitudes)

    def desired(self, damping_ratio: float, natural_frequency: float) -> DesiredPoles:
        poles = self.desired_poles(damping_ratio, natural_frequency)
        return DesiredPoles(poles, self.extra_pole(damping_ratio, poles))

    def target_coefficients(
        self,
        damping_ratio: float,
        natural_frequency: float
    ) -> Tuple[float, float, float]:
        """
        Coefficients (a2, a1, a0) of the monic target polynomial.

        Up to critical damping this is (s^2 + 2 zeta wn s + wn^2)(s + p).
        Overdamped targets use the magnitudes of the expanded products of the
        real poles with the extra pole magnitude.
        """
        desired = self.desired(damping_ratio, natural_frequency)
        zeta, wn, p = damping_ratio, natural_frequency, desired.extra_pole

        if zeta < 1.0 or math.isclose(zeta, 1.0):
            a2 = 2.0 * zeta * wn + p
            a1 = wn * wn + 2.0 * zeta * wn * p
            a0 = wn * wn * p
        else:
            p1 = desired.poles[0].real
            p2 = desired.poles[1].real
            a2 = abs(p1 + p2 + p)
            a1 = abs(p1 * p2 + (p1 + p2) * p)
            a0 = abs(p1 * p2 * p)
        return a2, a1, a0

    def tune(
        self,
        damping_ratio: float,
        natural_frequency: float,
        name: Optional[str] = None
    ) -> TuningResult:
        """
        Compute PID gains placing the closed-loop poles.

        Kd = (a2 tau^2 - 2 zeta tau) / K
        Kp = (a1 tau^2 - 1) / K
        Ki = a0 tau^2 / K

        Gains below the floors (Kp 0.1, Ki 0.01, Kd 0.01) are raised to them.
        """
        targets = TuningTargets(
            name or f"zeta={damping_ratio:g}, wn={natural_frequency:g}",
            damping_ratio,
            natural_frequency,
        )
        plant = self._plant
        k = plant.gain
        tau = plant.time_constant
        tau2 = tau * tau

        desired = self.desired(damping_ratio, natural_frequency)
        a2, a1, a0 = self.target_coefficients(damping_ratio, natural_frequency)

        raw = {
            'kp': (a1 * tau2 - 1.0) / k,
            'ki': a0 * tau2 / k,
            'kd': (a2 * tau2 - 2.0 * plant.damping_ratio * tau) / k,
        }
        gains, floored = _apply_floors(raw, targets.name)

        closed_loop = (
            tau2,
            2.0 * plant.damping_ratio * tau + k * gains['kd'],
            1.0 + k * gains['kp'],
            k * gains['ki'],
        )

        logger.info(
            "Tuned '%s': Kp=%.4f Ki=%.4f Kd=%.4f", targets.name,
            gains['kp'], gains['ki'], gains['kd']
        )

        return TuningResult(
            targets=targets,
            desired=desired,
            coefficients=(a2, a1, a0),
            kp=gains['kp'],
            ki=gains['ki'],
            kd=gains['kd'],
            raw_gains=raw,
            floored=floored,
            closed_loop_coefficients=closed_loop,
        )

    def tune_all(self, targets: Optional[List[TuningTargets]] = None) -> Dict[str, TuningResult]:
        """Tune for every target set (defaults to the analytic set)."""
        targets = targets if targets is not None else TuningTargets.analytic_set()
        return {
            t.name: self.tune(t.damping_ratio, t.natural_frequency, t.name)
            for t in targets
        }


def simplified_gains(
    plant: PlantParameters,
    damping_ratio: float,
    natural_frequency: float
) -> Dict[str, float]:
    """
    PI gains for an identified model, ignoring the extra pole.

    Kp = (2 zeta wn tau - 1) / K, Ki = wn^2 tau^2 / K, Kd = 0, with the
    floors Kp >= 0.1 and Ki >= 0.01.
    """
    zeta = validate_positive(damping_ratio, "damping_ratio")
    wn = validate_positive(natural_frequency, "natural_frequency")
    k = plant.gain
    tau = plant.time_constant

    raw = {
        'kp': (2.0 * zeta * wn * tau - 1.0) / k,
        'ki': wn * wn * tau * tau / k,
    }
    gains, _ = _apply_floors(raw, f"simplified zeta={zeta:g}, wn={wn:g}")
    gains['kd'] = 0.0
    return gains


def expected_closed_loop_poles(result: TuningResult) -> np.ndarray:
    """Roots of the closed-loop characteristic polynomial after flooring."""
    return np.sort_complex(np.roots(result.closed_loop_coefficients).astype(complex))
