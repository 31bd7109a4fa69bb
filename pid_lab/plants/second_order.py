"""
Second-order plant model.
Transfer function: G(s) = K / (tau^2*s^2 + 2*zeta*tau*s + 1)
"""

from dataclasses import dataclass, asdict
from typing import Dict, Tuple, List
import math

import numpy as np
from numpy.typing import ArrayLike

from pid_lab.plants.base_plant import BasePlant
from pid_lab.utils.validators import (
    validate_positive,
    validate_non_negative,
    validate_finite,
    validate_array_like,
)


@dataclass(frozen=True)
class PlantParameters:
    """
    Continuous second-order process parameters.

    Defines G(s) = K / (tau^2*s^2 + 2*zeta*tau*s + 1).

    Attributes:
        gain: Static gain K (> 0)
        time_constant: Time constant tau in seconds (> 0)
        damping_ratio: Damping ratio zeta (>= 0, 0 = undamped)
    """
    gain: float = 1.0
    time_constant: float = 1.0
    damping_ratio: float = 0.5

    def __post_init__(self):
        validate_positive(self.gain, "gain")
        validate_positive(self.time_constant, "time_constant")
        validate_non_negative(self.damping_ratio, "damping_ratio")

    @property
    def natural_frequency(self) -> float:
        """Natural frequency wn = 1/tau in rad/s."""
        return 1.0 / self.time_constant

    def transfer_function_coefficients(self) -> Tuple[List[float], List[float]]:
        """Numerator and denominator coefficients in descending powers of s."""
        tau = self.time_constant
        return [self.gain], [tau * tau, 2.0 * self.damping_ratio * tau, 1.0]

    def poles(self) -> Tuple[complex, complex]:
        """Open-loop poles, roots of tau^2*s^2 + 2*zeta*tau*s + 1."""
        tau = self.time_constant
        zeta = self.damping_ratio
        a = tau * tau
        b = 2.0 * zeta * tau
        discriminant = b * b - 4.0 * a

        if discriminant >= 0:
            root = math.sqrt(discriminant)
            return (
                complex((-b + root) / (2.0 * a), 0.0),
                complex((-b - root) / (2.0 * a), 0.0),
            )

        real = -b / (2.0 * a)
        imag = math.sqrt(-discriminant) / (2.0 * a)
        return complex(real, imag), complex(real, -imag)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def __str__(self) -> str:
        tau = self.time_constant
        return (
            f"G(s) = {self.gain:.3g} / ({tau * tau:.3g}s^2 + "
            f"{2 * self.damping_ratio * tau:.3g}s + 1)"
        )


@dataclass(frozen=True)
class DiscretizationCoefficients:
    """
    Recurrence coefficients of the discretized second-order plant.

    c0*y[k] + c1*y[k-1] + c2*y[k-2] = (K/tau^2)*u[k] + bias/tau^2
    """
    c0: float
    c1: float
    c2: float


def discretize_values(
    gain: float,
    time_constant: float,
    damping_ratio: float,
    sample_time: float
) -> DiscretizationCoefficients:
    """
    Discretize tau^2*y'' + 2*zeta*tau*y' + y = K*u with finite differences.

    The second derivative uses the backward difference
    (y[k] - 2y[k-1] + y[k-2])/dt^2 and the first derivative uses
    (y[k] - y[k-1])/dt; dividing through by tau^2 gives the
    coefficients below. The gain only enters the forcing term.

    Raises:
        InvalidParameterError: If time_constant or sample_time is not positive
    """
    validate_finite(gain, "gain")
    tau = validate_positive(time_constant, "time_constant")
    zeta = validate_non_negative(damping_ratio, "damping_ratio")
    dt = validate_positive(sample_time, "sample_time")

    c0 = 1.0 / (dt * dt) + (2.0 * zeta) / (tau * dt) + 1.0 / (tau * tau)
    c1 = -2.0 / (dt * dt) - (2.0 * zeta) / (tau * dt)
    c2 = 1.0 / (dt * dt)
    return DiscretizationCoefficients(c0=c0, c1=c1, c2=c2)


def discretize(params: PlantParameters, sample_time: float) -> DiscretizationCoefficients:
    """Discretize a :class:`PlantParameters` record for a fixed step size."""
    return discretize_values(
        params.gain, params.time_constant, params.damping_ratio, sample_time
    )


class SecondOrderPlant(BasePlant):
    """
    Second-order plant advanced through its finite-difference recurrence.

    y[k] = (-c1*y[k-1] - c2*y[k-2] + (K/tau^2)*u[k] + (1/tau^2)*bias) / c0

    Two seed samples are needed; both equal ``initial_output`` after reset.
    The ``bias`` term is a constant forcing such as the ambient temperature
    of a thermal process: with u = 0 the output settles at ``bias``.

    Example:
        >>> plant = SecondOrderPlant(PlantParameters(1.0, 1.0, 0.5), sample_time=0.01)
        >>> output = plant.update(7.0)
    """

    def __init__(
        self,
        params: PlantParameters = PlantParameters(),
        sample_time: float = 0.01,
        initial_output: float = 0.0,
        bias: float = 0.0
    ):
        """
        Initialize second-order plant.

        Args:
            params: Continuous plant parameters
            sample_time: Sample time in seconds
            initial_output: Value of the two seed samples
            bias: Constant forcing added to the input path (ambient level)
        """
        super().__init__(sample_time)

        self._params = params
        self._initial_output = validate_finite(initial_output, "initial_output")
        self._bias = validate_finite(bias, "bias")
        self._coefficients = discretize(params, self._dt)

        self._y1 = self._initial_output  # y[k-1]
        self._y2 = self._initial_output  # y[k-2]
        self._output = self._initial_output

    def update(self, control_input: float) -> float:
        """
        Advance the recurrence by one sample.

        Args:
            control_input: Control signal u[k]

        Returns:
            Plant output y[k]
        """
        c = self._coefficients
        tau2 = self._params.time_constant ** 2
        forcing = (self._params.gain / tau2) * control_input + self._bias / tau2

        y = (-c.c1 * self._y1 - c.c2 * self._y2 + forcing) / c.c0

        self._y2 = self._y1
        self._y1 = y
        self._output = y
        self._time += self._dt
        return y

    def reset(self) -> None:
        """Reset plant to initial state."""
        self._y1 = self._initial_output
        self._y2 = self._initial_output
        self._output = self._initial_output
        self._time = 0.0

    def set_params(self, params: PlantParameters) -> None:
        """Replace the plant parameters and recompute the coefficients."""
        self._params = params
        self._coefficients = discretize(params, self._dt)

    def _on_sample_time_changed(self) -> None:
        self._coefficients = discretize(self._params, self._dt)

    def simulate_open_loop(self, inputs: ArrayLike) -> np.ndarray:
        """
        Response to an input sequence, starting from the initial condition.

        Samples 0 and 1 are the seed values; input samples 0 and 1 are not
        applied. The plant is left reset afterwards.

        Args:
            inputs: Input sequence u[0..N-1]

        Returns:
            Output sequence y[0..N-1]
        """
        u = validate_array_like(inputs, "inputs", min_length=2)
        self.reset()

        y = np.empty(len(u))
        y[0] = y[1] = self._initial_output
        for k in range(2, len(u)):
            y[k] = self.update(u[k])

        self.reset()
        return y

    @property
    def params(self) -> PlantParameters:
        """Continuous plant parameters."""
        return self._params

    @property
    def coefficients(self) -> DiscretizationCoefficients:
        """Cached discretization coefficients for the current sample time."""
        return self._coefficients

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def initial_output(self) -> float:
        return self._initial_output
