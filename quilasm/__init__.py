"""
quilasm: translate quantum instruction sequences into Quil assembly.
"""

from .utils import (
    ConditionalBlock,
    EmissionState,
    EmptyAddressListError,
    GateKind,
    Instruction,
    Measurement,
    QuantumGate,
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
