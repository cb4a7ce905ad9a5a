"""
Unit tests for the instruction data model
"""

import numpy as np
import pytest

from quilasm import ConditionalBlock, GateKind, Measurement, QuantumGate

# --------------------------
# Plain gates
# --------------------------


def test_gate_name_is_normalized_to_kind():
    """Accepts either a GateKind or its string value and normalizes to GateKind."""
    assert QuantumGate("h", 0).kind is GateKind.H
    assert QuantumGate(GateKind.CNOT, [0, 1]).name is GateKind.CNOT


def test_target_qubits_normalization():
    """Normalizes scalar, float-integer and numpy indices into list[int]."""
    assert QuantumGate("x", 3).target_qubits == [3]
    assert QuantumGate("x", 2.0).target_qubits == [2]
    assert QuantumGate("x", np.int64(4)).target_qubits == [4]
    assert QuantumGate("cz", np.array([1, 0])).target_qubits == [1, 0]


def test_parameters_normalization():
    """Normalizes numeric parameters (scalar, numpy, or sequence) into list[float]."""
    assert QuantumGate("rx", 0, 1).parameters == [1.0]
    assert QuantumGate("ry", 0, np.float64(-0.25)).parameters == [-0.25]
    assert QuantumGate("cphase", [0, 1], [0.5]).parameters == [0.5]


def test_gate_validation_errors():
    """Rejects unknown kinds, reserved kinds, bad indices and wrong arity."""
    with pytest.raises(ValueError):
        QuantumGate("toffoli", [0, 1, 2])

    with pytest.raises(ValueError):
        QuantumGate("measure", 0)  # has its own class

    with pytest.raises(ValueError):
        QuantumGate("x", -1)

    with pytest.raises(ValueError):
        QuantumGate("x", True)

    with pytest.raises(ValueError):
        QuantumGate("x", "a")

    with pytest.raises(ValueError):
        QuantumGate("cnot", 0)  # needs two qubits

    with pytest.raises(ValueError):
        QuantumGate("rz", 0)  # needs one parameter

    with pytest.raises(ValueError):
        QuantumGate("h", 0, 0.5)  # takes none


def test_parameter_validation_errors():
    """Parameters must be numeric and finite."""
    with pytest.raises(TypeError):
        QuantumGate("rx", 0, ["oops"])

    with pytest.raises(ValueError):
        QuantumGate("rx", 0, float("nan"))

    with pytest.raises(ValueError):
        QuantumGate("rx", 0, np.inf)


def test_composite_accepts_any_number_of_qubits():
    """Composite placeholders take any qubit list but no parameters."""
    assert QuantumGate("composite", []).target_qubits == []
    assert QuantumGate("composite", [0, 1, 2]).target_qubits == [0, 1, 2]
    with pytest.raises(ValueError):
        QuantumGate("composite", [0], 1.0)


# --------------------------
# Measurements and blocks
# --------------------------


def test_measurement_fields():
    """Measurement exposes its kind and its single target qubit."""
    m = Measurement(qubit=np.int32(2), classical_bit=5)
    assert m.kind is GateKind.MEASURE
    assert m.qubit == 2 and m.classical_bit == 5
    assert m.target_qubits == [2]


def test_measurement_validation_errors():
    """Measurement indices must be single non-negative integers."""
    with pytest.raises(ValueError):
        Measurement(qubit=[0, 1], classical_bit=0)

    with pytest.raises(ValueError):
        Measurement(qubit=0, classical_bit=-3)


def test_conditional_block_fields():
    """ConditionalBlock stores nested instructions as a tuple, in order."""
    inner = [QuantumGate("x", 1), QuantumGate("h", 2)]
    block = ConditionalBlock(conditional_qubit=0, label="THEN", instructions=inner)
    assert block.kind is GateKind.CONDITIONAL
    assert block.instructions == (inner[0], inner[1])
    assert block.target_qubits == [0]


def test_conditional_block_validation_errors():
    """Rejects bad labels and non-instruction members."""
    with pytest.raises(ValueError):
        ConditionalBlock(0, "")

    with pytest.raises(ValueError):
        ConditionalBlock(0, "two words")

    with pytest.raises(ValueError):
        ConditionalBlock(0, "@L")

    with pytest.raises(TypeError):
        ConditionalBlock(0, "L", ["X 0"])
