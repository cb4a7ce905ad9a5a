import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import partial, reduce
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from .instructions import (
    ConditionalBlock,
    GateKind,
    Instruction,
    Measurement,
    QuantumGate,
)

logger = logging.getLogger(__name__)


# =============================================================
# Errors
# =============================================================


class UnknownConditionQubitError(LookupError):
    """A conditional block refers to a qubit with no recorded measurement address."""

    def __init__(self, qubit: int, label: str):
        self.qubit = qubit
        self.label = label
        super().__init__(
            f"Conditional block '@{label}' depends on qubit {qubit}, which has no "
            f"recorded measurement address in this traversal."
        )


class EmptyAddressListError(ValueError):
    """The classical address list was requested but no measurement was recorded."""


class UnrecognizedInstructionError(TypeError):
    """An object that is not a known instruction was passed to the emitter."""


# =============================================================
# Quil Emitter Options
# =============================================================


@dataclass(frozen=True)
class QuilEmitterOptions:
    """
    Configuration options that control how a :class:`QuilEmitter` translates
    a sequence of instructions into Quil assembly.

    Attributes:
        record_measurements: If ``True`` (default), measurements are emitted as
            ``MEASURE q [addr]`` and their addresses recorded. If ``False``,
            measurements are not emitted; the measured qubits are collected in
            :attr:`QuilProgram.measured_qubits` instead.
        float_precision: Number of decimal places for gate parameters. ``None``
            (default) renders the shortest text that round-trips the float.
        custom_template: Optional mapping of *gate kinds* (e.g. ``"cnot"``) to
            the Quil mnemonic to emit instead of the default one.
        map: (Computed) Effective gate-kind → Quil mnemonic mapping.
    """

    record_measurements: bool = True
    float_precision: Optional[int] = None
    custom_template: Optional[Dict[str, str]] = None

    # Resolved mapping (computed in __post_init__)
    map: Dict[GateKind, str] = field(init=False)

    _QUIL_NAMES: ClassVar[Dict[GateKind, str]] = {
        GateKind.IDENTITY: "I",
        GateKind.X: "X",
        GateKind.Y: "Y",
        GateKind.Z: "Z",
        GateKind.H: "H",
        GateKind.CNOT: "CNOT",
        GateKind.CZ: "CZ",
        GateKind.RX: "RX",
        GateKind.RY: "RY",
        GateKind.RZ: "RZ",
        GateKind.CPHASE: "CPHASE",
        GateKind.SWAP: "SWAP",
    }

    _RESERVED_NAMES: ClassVar[Tuple[str, ...]] = ("MEASURE", "JUMP-UNLESS", "LABEL")

    def __post_init__(self) -> None:
        """Validate inputs and resolve the effective mnemonic mapping."""
        if not isinstance(self.record_measurements, bool):
            raise TypeError(
                f"record_measurements must be a bool, got {type(self.record_measurements).__name__}"
            )

        if self.float_precision is not None:
            if isinstance(self.float_precision, bool) or not isinstance(self.float_precision, int):
                raise TypeError(
                    f"float_precision must be an int or None, got {type(self.float_precision).__name__}"
                )
            if self.float_precision < 0:
                raise ValueError("float_precision must be non-negative")

        object.__setattr__(self, "map", self._resolve_effective_map())

    def _resolve_effective_map(self) -> Dict[GateKind, str]:
        """
        Merge the default Quil mnemonics with any user-provided
        ``custom_template`` into a single mapping.

        Unknown gate kinds in ``custom_template`` are reported with a warning
        and ignored.

        Returns:
            A mapping from gate kinds to Quil mnemonics.
        """
        merged_map: Dict[GateKind, str] = dict(self._QUIL_NAMES)

        if not self.custom_template:
            return merged_map

        for name, alias in self.custom_template.items():
            try:
                kind = GateKind(name)
            except ValueError:
                kind = None

            if kind not in merged_map:
                logger.warning(
                    "Custom gate '%s' has no Quil mnemonic to override; ignoring it.",
                    name,
                )
                continue

            if not isinstance(alias, str) or not alias or any(c.isspace() for c in alias):
                raise ValueError(
                    f"custom_template[{name!r}] must be a non-empty string without whitespace, got {alias!r}"
                )
            if alias.upper() in self._RESERVED_NAMES:
                raise ValueError(
                    f"custom_template[{name!r}] must not be the reserved Quil keyword {alias!r}"
                )
            merged_map[kind] = alias

        return merged_map

    def get_quil_name(self, kind: GateKind | str) -> str:
        """Translate a gate kind to its effective Quil mnemonic."""
        return self.map[GateKind(kind)]

    def format_parameter(self, value: float) -> str:
        """Render one gate parameter as decimal text."""
        if self.float_precision is None:
            return repr(float(value))
        return f"{value:.{self.float_precision}f}"


# =============================================================
# Emission state and result
# =============================================================


@dataclass(frozen=True, repr=False)
class QuilProgram:
    """
    Read-only result of one emission traversal.

    Attributes:
        lines: Emitted Quil instructions, one per entry, without line breaks.
        classical_addresses: Addresses allocated by recorded measurements, in
            emission order (duplicates allowed).
        qubit_to_address: Latest classical address recorded for each qubit.
        number_of_addresses: Number of recorded measurements.
        measured_qubits: Qubits whose measurement was skipped because the
            emitter ran with ``record_measurements=False``.
        record_measurements: Mode the traversal ran in.
    """

    lines: Tuple[str, ...]
    classical_addresses: Tuple[int, ...]
    qubit_to_address: Mapping[int, int]
    number_of_addresses: int
    measured_qubits: Tuple[int, ...]
    record_measurements: bool = True

    @property
    def quil(self) -> str:
        """The Quil program text, every line terminated by ``\\n``."""
        return "".join(f"{line}\n" for line in self.lines)

    def classical_addresses_str(self) -> str:
        """
        Render the recorded classical addresses as ``[a0, a1, ...]``.

        Raises:
            EmptyAddressListError: If no measurement address was recorded.
        """
        if not self.classical_addresses:
            raise EmptyAddressListError(
                "No classical addresses were recorded; the program contains no "
                "recorded measurements."
            )
        return "[" + ", ".join(str(a) for a in self.classical_addresses) + "]"

    def __str__(self) -> str:
        return self.quil

    def __repr__(self) -> str:
        return (
            f"Number of instructions: {len(self.lines)}\n"
            f"Recorded measurements: {self.number_of_addresses}\n"
            f"Classical addresses: {list(self.classical_addresses)}\n"
            f"Discarded measurements: {len(self.measured_qubits)}"
        )


@dataclass
class EmissionState:
    """Mutable accumulator for a single traversal. Nested blocks get their own."""

    record_measurements: bool
    lines: List[str] = field(default_factory=list)
    classical_addresses: List[int] = field(default_factory=list)
    qubit_to_address: Dict[int, int] = field(default_factory=dict)
    number_of_addresses: int = 0
    measured_qubits: List[int] = field(default_factory=list)

    def freeze(self) -> QuilProgram:
        return QuilProgram(
            lines=tuple(self.lines),
            classical_addresses=tuple(self.classical_addresses),
            qubit_to_address=MappingProxyType(dict(self.qubit_to_address)),
            number_of_addresses=self.number_of_addresses,
            measured_qubits=tuple(self.measured_qubits),
            record_measurements=self.record_measurements,
        )


# =============================================================
# Quil Emitter
# =============================================================


class QuilEmitter:
    """
    Translates a sequence of instructions into Quil assembly.

    It handles:
      • Gate translation and parameter formatting
      • Measurements, recording their classical addresses or, in discard
        mode, collecting the measured qubits
      • Conditional blocks as ``JUMP-UNLESS``/``LABEL`` pairs

    A conditional block is emitted by an independent traversal of its nested
    instructions. Only the nested text is spliced into the enclosing program;
    measurements recorded inside the block are not visible outside of it.
    """

    def __init__(self, options: Optional[QuilEmitterOptions] = None, **kwargs: Any):
        """
        Initialize the emitter with a given configuration.

        Args:
            options (QuilEmitterOptions, optional): Options object. If None, one is
                built from ``kwargs`` (e.g. ``record_measurements=False``).
            **kwargs: Keyword arguments forwarded to QuilEmitterOptions.
        """
        if options is None:
            options = QuilEmitterOptions(**kwargs)
        elif kwargs:
            raise TypeError("Pass either an options object or keyword options, not both.")
        self.options = options

    def emit(self, instructions: Iterable[Instruction]) -> QuilProgram:
        """
        Generate the Quil program for ``instructions``.

        Args:
            instructions: Ordered instructions to translate.

        Returns:
            QuilProgram: The emitted text and measurement bookkeeping.

        Raises:
            UnknownConditionQubitError: If a conditional block depends on a
                qubit that was not measured earlier in the same traversal.
            UnrecognizedInstructionError: If an element is not an instruction.
        """
        program = self._emit_block(instructions, depth=0)
        logger.debug(
            "Emitted %d Quil lines (%d recorded, %d discarded measurements).",
            len(program.lines),
            program.number_of_addresses,
            len(program.measured_qubits),
        )
        return program

    def _emit_block(self, instructions: Iterable[Instruction], depth: int) -> QuilProgram:
        initial = EmissionState(record_measurements=self.options.record_measurements)
        state = reduce(partial(self._emit_instruction, depth=depth), instructions, initial)
        return state.freeze()

    def _emit_instruction(
        self, state: EmissionState, instruction: Instruction, depth: int
    ) -> EmissionState:
        if isinstance(instruction, QuantumGate):
            self._emit_gate(state, instruction)
        elif isinstance(instruction, Measurement):
            self._emit_measurement(state, instruction)
        elif isinstance(instruction, ConditionalBlock):
            self._emit_conditional(state, instruction, depth)
        else:
            raise UnrecognizedInstructionError(
                f"Cannot emit object of type {type(instruction).__name__}"
            )
        return state

    def _emit_gate(self, state: EmissionState, gate: QuantumGate) -> None:
        if gate.kind is GateKind.COMPOSITE:
            return

        quil_name = self.options.get_quil_name(gate.kind)
        if gate.parameters:
            params = ",".join(self.options.format_parameter(p) for p in gate.parameters)
            params_str = f"({params})"
        else:
            params_str = ""

        qubits = " ".join(str(q) for q in gate.target_qubits)
        state.lines.append(f"{quil_name}{params_str} {qubits}")

    def _emit_measurement(self, state: EmissionState, measurement: Measurement) -> None:
        qubit, address = measurement.qubit, measurement.classical_bit

        if not state.record_measurements:
            state.measured_qubits.append(qubit)
            return

        state.lines.append(f"MEASURE {qubit} [{address}]")
        state.classical_addresses.append(address)
        state.qubit_to_address[qubit] = address
        state.number_of_addresses += 1

    def _emit_conditional(
        self, state: EmissionState, block: ConditionalBlock, depth: int
    ) -> None:
        try:
            address = state.qubit_to_address[block.conditional_qubit]
        except KeyError:
            raise UnknownConditionQubitError(block.conditional_qubit, block.label) from None

        logger.debug(
            "Entering conditional block '@%s' on address [%d] (depth %d).",
            block.label,
            address,
            depth + 1,
        )
        state.lines.append(f"JUMP-UNLESS @{block.label} [{address}]")

        # nested bookkeeping stays local to the block
        nested = self._emit_block(block.instructions, depth=depth + 1)
        state.lines.extend(nested.lines)
        state.lines.append(f"LABEL @{block.label}")
        logger.debug(
            "Leaving conditional block '@%s' (%d nested lines).",
            block.label,
            len(nested.lines),
        )


def emit_quil(
    instructions: Iterable[Instruction],
    emitter_options: Optional[QuilEmitterOptions] = None,
    **kwargs: Any,
) -> QuilProgram:
    """
    Generate Quil code for ``instructions``.

    Args:
        instructions: Ordered instructions to translate.
        emitter_options (Optional[QuilEmitterOptions]): Pre-configured emitter options.
            If None, a new QuilEmitterOptions object is created from ``kwargs``.
        **kwargs: Additional keyword arguments forwarded to QuilEmitterOptions.

    Returns:
        QuilProgram: The emitted program.

    Raises:
        TypeError: If both ``emitter_options`` and keyword options are given.
    """
    return QuilEmitter(emitter_options, **kwargs).emit(instructions)
