"""
System identification from experimental data.

Fits a discrete ARX model by least squares and converts the second-order
case to continuous parameters (K, tau, zeta) with the bilinear transform:

    y[k] + a1 y[k-1] + ... + a_na y[k-na] = b1 u[k-nk] + ... + b_nb u[k-nk-nb+1]
"""

from typing import Optional, Tuple, Dict, Any, Sequence
from dataclasses import dataclass, field
import logging
import math

import numpy as np

from pid_lab.analyzer.metrics import ValidationMetrics
from pid_lab.identification.linear_solver import least_squares
from pid_lab.plants.second_order import PlantParameters
from pid_lab.tuner.pole_placement import TuningTargets, simplified_gains
from pid_lab.utils.validators import (
    InvalidParameterError,
    DegenerateModelError,
    validate_positive,
    validate_array_like,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ARXStructure:
    """Orders of the ARX model: na poles, nb input taps, nk samples of delay."""
    na: int = 2
    nb: int = 1
    nk: int = 1

    def __post_init__(self):
        for name, minimum in (('na', 1), ('nb', 1), ('nk', 0)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
                raise InvalidParameterError(f"{name} must be an integer >= {minimum}, got {value!r}")

    @property
    def start(self) -> int:
        """First sample index with a complete regressor."""
        return max(self.na, self.nb + self.nk - 1)

    @property
    def n_params(self) -> int:
        return self.na + self.nb

    def to_dict(self) -> Dict[str, int]:
        return {'na': self.na, 'nb': self.nb, 'nk': self.nk}


def _paired_signals(u, y) -> Tuple[np.ndarray, np.ndarray]:
    u = validate_array_like(u, "u")
    y = validate_array_like(y, "y")
    if len(u) != len(y):
        raise InvalidParameterError(f"u and y lengths differ: {len(u)} vs {len(y)}")
    return u, y


def build_regression(u, y, structure: ARXStructure) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the regression matrix and target vector.

    Row for sample k is [-y[k-1], ..., -y[k-na], u[k-nk], ..., u[k-nk-nb+1]]
    with target y[k], for k from ``structure.start`` to N-1.

    Raises:
        InvalidParameterError: If there are fewer rows than parameters
    """
    u, y = _paired_signals(u, y)
    start = structure.start
    n_rows = len(y) - start
    if n_rows < structure.n_params:
        raise InvalidParameterError(
            f"Need at least {start + structure.n_params} samples for {structure}, got {len(y)}"
        )

    k = np.arange(start, len(y))
    ar_columns = [-y[k - i] for i in range(1, structure.na + 1)]
    x_columns = [u[k - structure.nk - j] for j in range(structure.nb)]
    phi = np.column_stack(ar_columns + x_columns)
    return phi, y[start:].copy()


@dataclass(frozen=True)
class ContinuousModel:
    """
    Continuous second-order model recovered by the bilinear transform.

    Keeps the transformed denominator (den0, den1, den2) and numerator
    constant num0 alongside the physical parameters.
    """
    gain: float
    time_constant: float
    damping_ratio: float
    den0: float
    den1: float
    den2: float
    num0: float

    def to_plant(self) -> PlantParameters:
        """
        Plant parameters for simulation and tuning.

        Raises:
            InvalidParameterError: If the identified gain or damping is not physical
        """
        return PlantParameters(
            gain=self.gain,
            time_constant=self.time_constant,
            damping_ratio=self.damping_ratio,
        )

    def parameter_errors(self, true_plant: PlantParameters) -> Dict[str, float]:
        """
        Percent error of each identified parameter against a known plant.

        |true - identified| / true * 100 for K, tau and zeta; NaN where the
        true value is zero.
        """
        errors = {}
        for name in ('gain', 'time_constant', 'damping_ratio'):
            true_value = getattr(true_plant, name)
            identified = getattr(self, name)
            errors[name] = (
                abs(true_value - identified) / abs(true_value) * 100.0
                if true_value != 0 else float('nan')
            )
        return errors

    def to_dict(self) -> Dict[str, float]:
        return {
            'gain': self.gain,
            'time_constant': self.time_constant,
            'damping_ratio': self.damping_ratio,
            'den0': self.den0,
            'den1': self.den1,
            'den2': self.den2,
            'num0': self.num0,
        }

    def __str__(self) -> str:
        return (
            f"ContinuousModel: K={self.gain:.4f}, tau={self.time_constant:.4f}, "
            f"zeta={self.damping_ratio:.4f}"
        )


@dataclass(frozen=True)
class ARXModel:
    """Identified discrete model with coefficients a (outputs) and b (inputs)."""
    structure: ARXStructure
    a: Tuple[float, ...]
    b: Tuple[float, ...]
    sample_time: float

    def __post_init__(self):
        validate_positive(self.sample_time, "sample_time")
        if len(self.a) != self.structure.na or len(self.b) != self.structure.nb:
            raise InvalidParameterError(
                f"Expected {self.structure.na} a and {self.structure.nb} b coefficients, "
                f"got {len(self.a)} and {len(self.b)}"
            )

    @classmethod
    def from_theta(cls, structure: ARXStructure, theta: Sequence[float], sample_time: float) -> 'ARXModel':
        theta = [float(v) for v in theta]
        return cls(structure, tuple(theta[:structure.na]), tuple(theta[structure.na:]), sample_time)

    @property
    def theta(self) -> np.ndarray:
        return np.array(self.a + self.b)

    def simulate(self, u, initial) -> np.ndarray:
        """
        Free-run simulation of the model.

        The first ``structure.start`` samples are copied from ``initial``
        (usually the measured output); later samples only use the model's own
        past outputs.

        Args:
            u: Input sequence
            initial: Sequence providing at least ``structure.start`` seed samples
        """
        u = validate_array_like(u, "u")
        seed = validate_array_like(initial, "initial", min_length=min(self.structure.start, len(u)))
        start = self.structure.start
        nk = self.structure.nk

        y_hat = np.zeros(len(u))
        n_seed = min(start, len(u))
        y_hat[:n_seed] = seed[:n_seed]

        for k in range(start, len(u)):
            ar = sum(self.a[i] * y_hat[k - 1 - i] for i in range(self.structure.na))
            x = sum(self.b[j] * u[k - nk - j] for j in range(self.structure.nb))
            y_hat[k] = -ar + x
        return y_hat

    def to_continuous(self) -> ContinuousModel:
        """
        Convert a second-order model with the bilinear transform.

        den0 = 1 + a1 + a2, den1 = 2 (1 - a2) / T, den2 = 4 (1 - a1 + a2) / T^2
        K = b1 / den0, tau = sqrt(den2 / den0), zeta = den1 / (2 tau den0)

        Raises:
            InvalidParameterError: If the model is not second order
            DegenerateModelError: If den0 is zero, den2 / den0 is negative or
                tau comes out as zero
        """
        if self.structure.na != 2:
            raise InvalidParameterError(
                f"Continuous conversion needs na=2, got na={self.structure.na}"
            )
        a1, a2 = self.a
        b1 = self.b[0]
        dt = self.sample_time

        den0 = 1.0 + a1 + a2
        den1 = 2.0 * (1.0 - a2) / dt
        den2 = 4.0 * (1.0 - a1 + a2) / (dt * dt)

        if den0 == 0:
            raise DegenerateModelError("den0 = 1 + a1 + a2 is zero (pole at z = 1)")
        ratio = den2 / den0
        if ratio < 0:
            raise DegenerateModelError(f"den2 / den0 = {ratio:.4g} is negative")
        tau = math.sqrt(ratio)
        if tau == 0:
            raise DegenerateModelError("Recovered time constant is zero")

        return ContinuousModel(
            gain=b1 / den0,
            time_constant=tau,
            damping_ratio=den1 / (2.0 * tau * den0),
            den0=den0,
            den1=den1,
            den2=den2,
            num0=b1,
        )

    def __str__(self) -> str:
        a_terms = " ".join(f"{c:+.4f} z^-{i + 1}" for i, c in enumerate(self.a))
        b_terms = " ".join(
            f"{c:+.4f} z^-{self.structure.nk + j}" for j, c in enumerate(self.b)
        )
        return f"ARX: (1 {a_terms}) y = ({b_terms}) u"


@dataclass
class IdentificationResult:
    """Result of system identification."""
    model: ARXModel
    continuous: ContinuousModel
    simulated_output: np.ndarray
    metrics: ValidationMetrics
    held_out: bool = False
    recommended_gains: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def summary(self) -> str:
        """Get summary string."""
        data_label = "held-out data" if self.held_out else "training data"
        lines = [
            "=" * 70,
            "SYSTEM IDENTIFICATION RESULTS",
            "=" * 70,
            f"Structure: na={self.model.structure.na}, nb={self.model.structure.nb}, "
            f"nk={self.model.structure.nk}",
            f"Discrete model: {self.model}",
            "",
            "Continuous Parameters:",
            f"  Gain (K): {self.continuous.gain:.4f}",
            f"  Time Constant (tau): {self.continuous.time_constant:.4f} s",
            f"  Damping Ratio (zeta): {self.continuous.damping_ratio:.4f}",
            "",
            f"Validation on {data_label}:",
            f"  R^2  = {self.metrics.r_squared:.4f}",
            f"  RMSE = {self.metrics.rmse:.4f}",
            f"  Fit  = {self.metrics.fit_percent:.2f} %",
        ]

        if self.recommended_gains:
            lines.extend(["", "Recommended PI Gains:"])
            for name, gains in self.recommended_gains.items():
                lines.append(
                    f"  {name:<14} Kp = {gains['kp']:.4f}  Ki = {gains['ki']:.4f}  Kd = {gains['kd']:.4f}"
                )

        lines.append("=" * 70)
        return "\n".join(lines)


class SystemIdentifier:
    """
    Identify an ARX model from input/output data.

    Example:
        >>> identifier = SystemIdentifier(sample_time=0.01)
        >>> result = identifier.identify(u, y)
        >>> print(result.summary())
    """

    def __init__(self, sample_time: float, structure: Optional[ARXStructure] = None):
        self._sample_time = validate_positive(sample_time, "sample_time")
        self._structure = structure if structure is not None else ARXStructure()

    @property
    def sample_time(self) -> float:
        return self._sample_time

    @property
    def structure(self) -> ARXStructure:
        return self._structure

    def fit(self, u, y) -> ARXModel:
        """
        Estimate ARX coefficients by least squares.

        Raises:
            InvalidParameterError: On mismatched or too short signals
            SingularSystemError: If the input does not excite the model
        """
        phi, target = build_regression(u, y, self._structure)
        theta = least_squares(phi, target)
        model = ARXModel.from_theta(self._structure, theta, self._sample_time)
        logger.debug("Fitted %s from %d rows", model, len(target))
        return model

    def identify(
        self,
        u,
        y,
        validation: Optional[Tuple[Any, Any]] = None,
        targets: Optional[Sequence[TuningTargets]] = None
    ) -> IdentificationResult:
        """
        Fit, convert and validate a second-order model.

        Args:
            u: Training input
            y: Training (measured) output
            validation: Optional held-out (u, y) pair; metrics are computed
                on it instead of the training data
            targets: Tuning targets for the recommended gains (defaults to
                the identified-model set)

        Returns:
            IdentificationResult
        """
        model = self.fit(u, y)
        continuous = model.to_continuous()

        if validation is not None:
            u_check, y_check = _paired_signals(*validation)
        else:
            u_check, y_check = _paired_signals(u, y)

        simulated = model.simulate(u_check, y_check)
        metrics = ValidationMetrics.from_outputs(y_check, simulated)

        recommended = {}
        if continuous.gain > 0 and continuous.time_constant > 0:
            plant = PlantParameters(
                gain=continuous.gain,
                time_constant=continuous.time_constant,
                damping_ratio=max(continuous.damping_ratio, 0.0),
            )
            target_list = targets if targets is not None else TuningTargets.identified_model_set()
            recommended = {
                t.name: simplified_gains(plant, t.damping_ratio, t.natural_frequency)
                for t in target_list
            }

        logger.info(
            "Identified %s (R^2=%.4f, fit=%.2f%%)",
            continuous, metrics.r_squared, metrics.fit_percent
        )

        return IdentificationResult(
            model=model,
            continuous=continuous,
            simulated_output=simulated,
            metrics=metrics,
            held_out=validation is not None,
            recommended_gains=recommended,
        )
