import unittest

import numpy as np

from rydsim_deriv.bang_bang_pulse import DetuningBangBangPulse, RabiBangBangPulse
from rydsim_deriv.hardware_description import HardwareDescriptionFactory
from rydsim_deriv.rydberg_operators import RydbergOperators
from rydsim_deriv.schrodinger_propagator import propagate_schrodinger

HARDWARE = HardwareDescriptionFactory().get_hardware_description()
TOLERANCE = 1e-10


class TestSchrodingerPropagator(unittest.TestCase):
    def setUp(self) -> None:
        # Area 10 rad/us * 0.2 us = 2 rad
        self.rabi_pulse = RabiBangBangPulse(0, "0.2", "0.3", 10, HARDWARE)
        self.no_detuning = DetuningBangBangPulse(0, "0.1", "0.3", 0, HARDWARE)

    def _propagate(self, psi: np.ndarray, interaction: np.ndarray, end_time_us="0.3") -> None:
        propagate_schrodinger(
            psi,
            end_time_us,
            start_time_us=0,
            rabi_pulse=self.rabi_pulse,
            detuning_pulse=self.no_detuning,
            interaction=interaction,
            tolerance=TOLERANCE,
        )

    def test_single_atom_rabi_rotation(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        self._propagate(psi, np.zeros((2, 2)))

        self.assertAlmostEqual(abs(psi[1]) ** 2, np.sin(1) ** 2, places=6)

    def test_two_atoms_keep_norm(self) -> None:
        psi = np.array([1, 0, 0, 0], dtype=complex)
        interaction = RydbergOperators.van_der_waals_interaction([[0, 0], [8, 0]])
        self._propagate(psi, interaction)

        self.assertAlmostEqual(np.linalg.norm(psi), 1.0, places=6)
        self.assertAlmostEqual(abs(psi[1]) ** 2, abs(psi[2]) ** 2, places=6)

    def test_zero_duration_leaves_state(self) -> None:
        psi = np.array([1, 0], dtype=complex)
        self._propagate(psi, np.zeros((2, 2)), end_time_us=0)

        np.testing.assert_allclose(psi, [1, 0])

    def test_structural_errors_raise(self) -> None:
        with self.subTest(reason="real state"):
            with self.assertRaises(ValueError):
                self._propagate(np.array([1.0, 0.0]), np.zeros((2, 2)))
        with self.subTest(reason="interaction shape"):
            with self.assertRaises(ValueError):
                self._propagate(np.array([1, 0], dtype=complex), np.zeros((4, 4)))
        with self.subTest(reason="end before start"):
            with self.assertRaises(ValueError):
                propagate_schrodinger(
                    np.array([1, 0], dtype=complex),
                    "0.1",
                    start_time_us="0.2",
                    rabi_pulse=self.rabi_pulse,
                    detuning_pulse=self.no_detuning,
                    interaction=np.zeros((2, 2)),
                    tolerance=TOLERANCE,
                )
        with self.subTest(reason="tolerance"):
            with self.assertRaises(ValueError):
                propagate_schrodinger(
                    np.array([1, 0], dtype=complex),
                    "0.3",
                    start_time_us=0,
                    rabi_pulse=self.rabi_pulse,
                    detuning_pulse=self.no_detuning,
                    interaction=np.zeros((2, 2)),
                    tolerance=0.0,
                )

    def test_non_finite_state_becomes_nan(self) -> None:
        psi = np.array([np.nan, 0], dtype=complex)
        with self.assertLogs("rydsim_deriv.schrodinger_propagator", level="WARNING"):
            self._propagate(psi, np.zeros((2, 2)))

        self.assertTrue(np.all(np.isnan(psi)))


if __name__ == "__main__":
    unittest.main()
