"""Plant models for simulation and testing."""

from pid_lab.plants.base_plant import BasePlant
from pid_lab.plants.second_order import (
    PlantParameters,
    DiscretizationCoefficients,
    SecondOrderPlant,
    discretize,
    discretize_values,
)

__all__ = [
    "BasePlant",
    "PlantParameters",
    "DiscretizationCoefficients",
    "SecondOrderPlant",
    "discretize",
    "discretize_values",
]
