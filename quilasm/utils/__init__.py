"""
Utility sub-package for the instruction model and Quil emission.
"""

from .instructions import (
    ConditionalBlock,
    GateKind,
    Instruction,
    Measurement,
    QuantumGate,
)
from .quilemitter import (
    EmissionState,
    EmptyAddressListError,
    QuilEmitter,
    QuilEmitterOptions,
    QuilProgram,
    UnknownConditionQubitError,
    UnrecognizedInstructionError,
    emit_quil,
)

__all__ = [
    "GateKind",
    "Instruction",
    "QuantumGate",
    "Measurement",
    "ConditionalBlock",
    "QuilEmitter",
    "QuilEmitterOptions",
    "QuilProgram",
    "EmissionState",
    "emit_quil",
    "UnknownConditionQubitError",
    "EmptyAddressListError",
    "UnrecognizedInstructionError",
]
