import math
import unittest

import numpy as np
from qutip import Qobj, basis

from rydsim_deriv.evolution import RabiEvolution
from rydsim_deriv.expectation_value import evaluate_evolution, evf, observable_expectation, target_state_contrast
from rydsim_deriv.hardware_description import HardwareDescriptionFactory

HARDWARE = HardwareDescriptionFactory().get_hardware_description()
RYDBERG_NUMBER = np.diag([0, 1]).astype(complex)
NO_INTERACTION = np.zeros((2, 2), dtype=complex)


class TestReductions(unittest.TestCase):
    def test_observable_expectation(self) -> None:
        psi = np.array([1, 1j], dtype=complex) / math.sqrt(2)
        pauli_y = np.array([[0, -1j], [1j, 0]])

        self.assertAlmostEqual(observable_expectation(psi, pauli_y), 1.0, places=12)
        self.assertAlmostEqual(observable_expectation(psi, RYDBERG_NUMBER), 0.5, places=12)

    def test_target_state_contrast(self) -> None:
        psi = np.array([1, 0], dtype=complex)

        self.assertAlmostEqual(target_state_contrast(psi, np.array([1, 0])), -1.0, places=12)
        self.assertAlmostEqual(target_state_contrast(psi, np.array([0, 1])), 1.0, places=12)


class TestEvaluateEvolution(unittest.TestCase):
    def setUp(self) -> None:
        self.evolution = RabiEvolution(
            0,
            "0.2",
            detuning_rad_per_us=0,
            detuning_switch_off_us="0.1",
            tolerance=1e-10,
            hardware=HARDWARE,
        )

    def test_target_state(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        result = evaluate_evolution(
            self.evolution, 10, target_state=np.array([1, 0]), interaction=NO_INTERACTION, psi=psi
        )

        self.assertAlmostEqual(result, -math.cos(2), places=6)

    def test_qutip_arguments(self) -> None:
        result = evaluate_evolution(
            self.evolution,
            10,
            observable=Qobj(RYDBERG_NUMBER),
            interaction=Qobj(NO_INTERACTION),
            psi=basis(2, 0),
        )

        self.assertAlmostEqual(result, math.sin(1) ** 2, places=6)

    def test_evf_calls_evolution(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        result = evf(10, self.evolution, observable=RYDBERG_NUMBER, interaction=NO_INTERACTION, psi=psi)

        self.assertAlmostEqual(result, math.sin(1) ** 2, places=6)

    def test_exactly_one_reduction(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        with self.assertRaises(ValueError):
            evaluate_evolution(self.evolution, 10, interaction=NO_INTERACTION, psi=psi)
        with self.assertRaises(ValueError):
            evaluate_evolution(
                self.evolution,
                10,
                observable=RYDBERG_NUMBER,
                target_state=np.array([1, 0]),
                interaction=NO_INTERACTION,
                psi=psi,
            )

    def test_shape_mismatch_is_programmer_error(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        with self.assertRaises(AssertionError):
            evaluate_evolution(self.evolution, 10, observable=np.eye(4), interaction=NO_INTERACTION, psi=psi)

    def test_nan_is_logged(self) -> None:
        psi = np.array([np.nan, 0], dtype=complex)
        with self.assertLogs("rydsim_deriv.expectation_value", level="DEBUG"):
            result = evaluate_evolution(
                self.evolution, 10, observable=RYDBERG_NUMBER, interaction=NO_INTERACTION, psi=psi
            )

        self.assertTrue(math.isnan(result))


if __name__ == "__main__":
    unittest.main()
