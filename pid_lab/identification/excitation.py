"""
Synthetic identification experiments.

Generates a multi-sine excitation, drives a known plant with it and records
a noisy measurement of the response.
"""

from typing import Optional, Sequence
from dataclasses import dataclass
import logging

import numpy as np

from pid_lab.plants.second_order import PlantParameters, SecondOrderPlant
from pid_lab.utils.math_utils import sample_count
from pid_lab.utils.validators import InvalidParameterError, validate_positive, validate_non_negative

logger = logging.getLogger(__name__)

# Plant used by the reference identification experiment
REFERENCE_PLANT = PlantParameters(gain=1.2, time_constant=1.5, damping_ratio=0.6)

EXCITATION_BASE = 3.0
EXCITATION_FREQUENCIES = (0.05, 0.1, 0.2, 0.5)  # Hz
EXCITATION_AMPLITUDES = (1.0, 0.8, 0.5, 0.3)
INPUT_NOISE_STD = 0.2
INPUT_LIMITS = (0.0, 6.0)
MEASUREMENT_NOISE_RATIO = 0.05


@dataclass
class ExperimentalData:
    """Container for input/output records of one experiment."""
    time: np.ndarray
    input: np.ndarray
    output: np.ndarray
    clean_output: Optional[np.ndarray] = None
    sample_time: Optional[float] = None
    true_plant: Optional[PlantParameters] = None

    def __post_init__(self):
        if len(self.time) != len(self.input) or len(self.time) != len(self.output):
            raise InvalidParameterError("Time, input, and output arrays must have the same length")
        if self.clean_output is not None and len(self.clean_output) != len(self.time):
            raise InvalidParameterError("clean_output must match the time array length")

    def __len__(self) -> int:
        return len(self.time)

    def split(self, fraction: float = 0.7):
        """
        Split into training and validation records at ``fraction`` of the samples.

        Returns:
            (training, validation) ExperimentalData pair
        """
        if not 0.0 < fraction < 1.0:
            raise InvalidParameterError(f"fraction must be in (0, 1), got {fraction}")
        cut = int(len(self) * fraction)

        def part(sl: slice) -> 'ExperimentalData':
            return ExperimentalData(
                time=self.time[sl],
                input=self.input[sl],
                output=self.output[sl],
                clean_output=None if self.clean_output is None else self.clean_output[sl],
                sample_time=self.sample_time,
                true_plant=self.true_plant,
            )

        return part(slice(0, cut)), part(slice(cut, None))


def multisine_input(
    time: np.ndarray,
    rng: np.random.Generator,
    base: float = EXCITATION_BASE,
    frequencies: Sequence[float] = EXCITATION_FREQUENCIES,
    amplitudes: Sequence[float] = EXCITATION_AMPLITUDES,
    noise_std: float = INPUT_NOISE_STD,
    limits=INPUT_LIMITS
) -> np.ndarray:
    """Base level plus sines plus white noise, clipped to the actuator range."""
    if len(frequencies) != len(amplitudes):
        raise InvalidParameterError("frequencies and amplitudes must have the same length")
    u = np.full(len(time), float(base))
    for freq, amp in zip(frequencies, amplitudes):
        u += amp * np.sin(2.0 * np.pi * freq * time)
    u += noise_std * rng.standard_normal(len(time))
    return np.clip(u, limits[0], limits[1])


def generate_excitation_data(
    plant: PlantParameters = REFERENCE_PLANT,
    duration: float = 50.0,
    sample_time: float = 0.01,
    seed: Optional[int] = None,
    noise_ratio: float = MEASUREMENT_NOISE_RATIO,
    input_noise_std: float = INPUT_NOISE_STD
) -> ExperimentalData:
    """
    Generate an identification experiment on a known plant.

    The plant starts at rest with zero bias. Measurement noise has a standard
    deviation of ``noise_ratio`` times that of the clean output.

    Args:
        plant: True plant
        duration: Experiment length in seconds
        sample_time: Sampling period
        seed: Seed for numpy's default generator (None for fresh entropy)
        noise_ratio: Relative measurement noise level
        input_noise_std: Standard deviation of the input's white-noise part

    Returns:
        ExperimentalData with the measured and clean outputs
    """
    validate_positive(duration, "duration")
    validate_positive(sample_time, "sample_time")
    validate_non_negative(noise_ratio, "noise_ratio")
    validate_non_negative(input_noise_std, "input_noise_std")

    rng = np.random.default_rng(seed)
    n = sample_count(duration, sample_time)
    time = np.arange(n) * sample_time

    u = multisine_input(time, rng, noise_std=input_noise_std)

    system = SecondOrderPlant(plant, sample_time=sample_time, initial_output=0.0, bias=0.0)
    clean = system.simulate_open_loop(u)

    noise_std = noise_ratio * float(np.std(clean))
    measured = clean + noise_std * rng.standard_normal(n)

    logger.debug(
        "Generated %d samples on %s (measurement noise std %.4g)", n, plant, noise_std
    )

    return ExperimentalData(
        time=time,
        input=u,
        output=measured,
        clean_output=clean,
        sample_time=sample_time,
        true_plant=plant,
    )
