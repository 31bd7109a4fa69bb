"""System identification from input/output data."""

from pid_lab.identification.linear_solver import solve, least_squares
from pid_lab.identification.system_identifier import (
    ARXStructure,
    ARXModel,
    ContinuousModel,
    IdentificationResult,
    SystemIdentifier,
    build_regression,
)
from pid_lab.identification.excitation import (
    ExperimentalData,
    generate_excitation_data,
    multisine_input,
    REFERENCE_PLANT,
)

__all__ = [
    "solve",
    "least_squares",
    "ARXStructure",
    "ARXModel",
    "ContinuousModel",
    "IdentificationResult",
    "SystemIdentifier",
    "build_regression",
    "ExperimentalData",
    "generate_excitation_data",
    "multisine_input",
    "REFERENCE_PLANT",
]
