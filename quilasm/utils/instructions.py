from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import ClassVar, Dict, List, Tuple, Union

import numpy as np


# =============================================================
# Gate kinds
# =============================================================


class GateKind(str, Enum):
    """Closed set of instruction kinds understood by the Quil emitter."""

    IDENTITY = "i"
    X = "x"
    Y = "y"
    Z = "z"
    H = "h"
    CNOT = "cnot"
    CZ = "cz"
    RX = "rx"
    RY = "ry"
    RZ = "rz"
    CPHASE = "cphase"
    SWAP = "swap"
    MEASURE = "measure"
    CONDITIONAL = "conditional"
    COMPOSITE = "composite"


# (number of qubits, number of parameters); None means "any number of qubits"
GATE_SIGNATURES: Dict[GateKind, Tuple[int | None, int]] = {
    GateKind.IDENTITY: (1, 0),
    GateKind.X: (1, 0),
    GateKind.Y: (1, 0),
    GateKind.Z: (1, 0),
    GateKind.H: (1, 0),
    GateKind.CNOT: (2, 0),
    GateKind.CZ: (2, 0),
    GateKind.RX: (1, 1),
    GateKind.RY: (1, 1),
    GateKind.RZ: (1, 1),
    GateKind.CPHASE: (2, 1),
    GateKind.SWAP: (2, 0),
    GateKind.COMPOSITE: (None, 0),
}


# =============================================================
# Normalization helpers
# =============================================================


def _is_index(value) -> bool:
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and float(value).is_integer()
        and value >= 0
    )


def _normalize_qubits(value) -> List[int]:
    """
    Normalize a qubit index or a sequence of qubit indices to ``list[int]``.

    Accepts Python and numpy integers as well as 1-D numpy arrays.

    Raises:
        ValueError: If any index is not a non-negative integer value.
    """
    if isinstance(value, np.ndarray):
        value = value.tolist()

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        normalized = []
        for q in value:
            if not _is_index(q):
                raise ValueError(
                    f"Each target qubit must be a non-negative integer, got {q!r} in {value!r}"
                )
            normalized.append(int(q))
        return normalized

    if not _is_index(value):
        raise ValueError(f"target_qubits must be a non-negative integer, got {value!r}")
    return [int(value)]


def _normalize_parameters(param) -> List[float]:
    """Normalize ``None``, a number, or an iterable of numbers to finite floats."""
    if param is None:
        param_list: list = []
    elif isinstance(param, (int, float, np.number)):
        param_list = [param]
    else:
        try:
            param_list = list(param)
        except TypeError as exc:
            raise TypeError(
                "Gate parameters must be None, a number, or an iterable of numbers."
            ) from exc

    try:
        values = [float(v) for v in param_list]
    except (TypeError, ValueError) as exc:
        raise TypeError("Gate parameters must be convertible to float.") from exc

    if values and not np.all(np.isfinite(values)):
        raise ValueError(f"Gate parameters must be finite, got {values}")
    return values


# =============================================================
# Instruction data structures
# =============================================================


@dataclass(slots=True)
class QuantumGate:
    """
    Data container for a plain (non-measurement, non-branching) gate.

    Attributes:
        name: Gate kind, either a :class:`GateKind` or its string value
            (e.g. ``"h"``, ``"cnot"``, ``"rz"``). Normalized to ``GateKind``.
        target_qubits: Index/indices of the qubits this gate acts on. For
            ``cnot`` the first index is the control.
        parameters: Optional numeric parameter or sequence of parameters.
            Values are normalized to a list of ``float``.
    """

    name: GateKind | str
    target_qubits: int | Sequence[int]
    parameters: float | Sequence[float] | None = None

    def __post_init__(self) -> None:
        """Normalize fields and check them against the kind's signature."""
        try:
            kind = GateKind(self.name)
        except ValueError:
            raise ValueError(f"Unsupported gate: {self.name!r}") from None

        if kind not in GATE_SIGNATURES:
            raise ValueError(
                f"{kind.value!r} is not a plain gate; use Measurement or ConditionalBlock."
            )
        self.name = kind
        self.target_qubits = _normalize_qubits(self.target_qubits)
        self.parameters = _normalize_parameters(self.parameters)

        number_of_qubits, number_of_parameters = GATE_SIGNATURES[kind]
        if number_of_qubits is not None and len(self.target_qubits) != number_of_qubits:
            raise ValueError(
                f"Gate '{kind.value}' expects {number_of_qubits} qubit(s), "
                f"got {len(self.target_qubits)}."
            )
        if len(self.parameters) != number_of_parameters:
            raise ValueError(
                f"Gate '{kind.value}' expects {number_of_parameters} parameter(s), "
                f"got {len(self.parameters)}."
            )

    @property
    def kind(self) -> GateKind:
        return self.name


@dataclass(slots=True)
class Measurement:
    """
    Measure ``qubit`` into the classical memory address ``classical_bit``.
    """

    qubit: int
    classical_bit: int

    kind: ClassVar[GateKind] = GateKind.MEASURE

    def __post_init__(self) -> None:
        (self.qubit,) = _normalize_single(self.qubit, "qubit")
        (self.classical_bit,) = _normalize_single(self.classical_bit, "classical_bit")

    @property
    def target_qubits(self) -> List[int]:
        return [self.qubit]


@dataclass(slots=True)
class ConditionalBlock:
    """
    Instructions executed only when the outcome stored for
    ``conditional_qubit`` is set.

    The block is rendered as a ``JUMP-UNLESS``/``LABEL`` pair around the
    nested instructions, so ``label`` must be a valid Quil label name.

    Attributes:
        conditional_qubit: Qubit whose latest measurement decides the branch.
        label: Label name, emitted as ``@<label>``.
        instructions: Ordered nested instructions; may contain further blocks.
    """

    conditional_qubit: int
    label: str
    instructions: Sequence["Instruction"] = ()

    kind: ClassVar[GateKind] = GateKind.CONDITIONAL

    def __post_init__(self) -> None:
        (self.conditional_qubit,) = _normalize_single(
            self.conditional_qubit, "conditional_qubit"
        )

        if not isinstance(self.label, str) or not self.label:
            raise ValueError(f"label must be a non-empty string, got {self.label!r}")
        if any(ch.isspace() for ch in self.label) or self.label.startswith("@"):
            raise ValueError(
                f"label must not contain whitespace or a leading '@', got {self.label!r}"
            )

        nested = tuple(self.instructions)
        for inst in nested:
            if not isinstance(inst, INSTRUCTION_TYPES):
                raise TypeError(
                    f"ConditionalBlock '{self.label}' contains a non-instruction: "
                    f"{type(inst).__name__}"
                )
        self.instructions = nested

    @property
    def target_qubits(self) -> List[int]:
        return [self.conditional_qubit]


def _normalize_single(value, field_name: str) -> List[int]:
    if isinstance(value, (list, tuple, np.ndarray)):
        raise ValueError(f"{field_name} must be a single index, got {value!r}")
    try:
        return _normalize_qubits(value)
    except ValueError:
        raise ValueError(
            f"{field_name} must be a non-negative integer, got {value!r}"
        ) from None


Instruction = Union[QuantumGate, Measurement, ConditionalBlock]

INSTRUCTION_TYPES = (QuantumGate, Measurement, ConditionalBlock)
