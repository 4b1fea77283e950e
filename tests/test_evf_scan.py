import math
import unittest
from fractions import Fraction

import numpy as np

from rydsim_deriv.evf_scan import EvfScan, EvfScanHeaders, parameter_grid
from rydsim_deriv.evolution import DetuningEvolution
from rydsim_deriv.hardware_description import HardwareDescriptionFactory
from rydsim_deriv.hardware_limits import derive_hardware_limits
from rydsim_deriv.parameter_type import ParameterType

HARDWARE = HardwareDescriptionFactory().get_hardware_description()
LIMITS = derive_hardware_limits(HARDWARE)
PAULI_X = np.array([[0, 1], [1, 0]], dtype=complex)
PLUS_STATE = np.array([1, 1], dtype=complex) / math.sqrt(2)


class TestParameterGrid(unittest.TestCase):
    def test_parameter_grid(self) -> None:
        grid = parameter_grid(LIMITS, ParameterType.RABI, step_multiple=3950)

        with self.subTest():
            self.assertEqual(len(grid), 21)
        with self.subTest():
            self.assertEqual(grid[0], Fraction("-15.8"))
        with self.subTest():
            self.assertEqual(grid[10], Fraction(0))
        with self.subTest():
            self.assertEqual(grid[-1], Fraction("15.8"))

    def test_step_multiple_must_be_positive(self) -> None:
        with self.assertRaises(ValueError):
            parameter_grid(LIMITS, ParameterType.DETUNING, step_multiple=0)


class TestEvfScan(unittest.TestCase):
    def setUp(self) -> None:
        self.evolution = DetuningEvolution(
            0,
            "0.1",
            rabi_rad_per_us=0,
            rabi_switch_off_us="0.1",
            tolerance=1e-10,
            hardware=HARDWARE,
        )

    def test_scan_values(self) -> None:
        with self.assertLogs("rydsim_deriv.evf_scan", level="INFO"):
            scan = EvfScan(self.evolution, [-5, 0, 5], observable=PAULI_X, interaction=np.zeros((2, 2)), psi=PLUS_STATE)

        np.testing.assert_allclose(scan.evf_values, [math.cos(0.5), 1.0, math.cos(0.5)], atol=1e-6)
        self.assertEqual(scan.parameter_values, [Fraction(-5), Fraction(0), Fraction(5)])
        self.assertEqual(scan.finite_fraction, 1.0)

    def test_dataframe(self) -> None:
        scan = EvfScan(self.evolution, [0, 5], observable=PAULI_X, interaction=np.zeros((2, 2)), psi=PLUS_STATE)
        df = scan.dataframe

        with self.subTest():
            self.assertEqual(len(df), 2)
        with self.subTest():
            self.assertEqual(list(df[EvfScanHeaders.varied_parameter_value(ParameterType.DETUNING)]), [0.0, 5.0])
        with self.subTest():
            self.assertAlmostEqual(df[EvfScanHeaders.evf_value][0], 1.0, places=6)
        with self.subTest():
            self.assertAlmostEqual(df["HW Detuning Max (rad/us)"][1], 125.0)
        with self.subTest():
            self.assertAlmostEqual(df["Effective Duration (us)"][0], 0.1)

    def test_fourier_spectrum(self) -> None:
        grid = parameter_grid(LIMITS, ParameterType.DETUNING, step_multiple=125_000_000)
        scan = EvfScan(self.evolution, grid, observable=PAULI_X, interaction=np.zeros((2, 2)), psi=PLUS_STATE)
        wavenumbers, spectrum = scan.fourier_spectrum()

        self.assertEqual(len(grid), 11)
        self.assertEqual(len(wavenumbers), 6)
        self.assertEqual(len(spectrum), 6)
        self.assertAlmostEqual(wavenumbers[0], 0.0)
        self.assertAlmostEqual(wavenumbers[1], math.pi / 125)
        self.assertTrue(np.all(spectrum >= 0))

    def test_non_finite_scan(self) -> None:
        psi = np.array([np.nan, 0], dtype=complex)
        scan = EvfScan(self.evolution, [0, 5], observable=PAULI_X, interaction=np.zeros((2, 2)), psi=psi)

        self.assertEqual(scan.finite_fraction, 0.0)
        with self.assertRaises(ValueError):
            scan.fourier_spectrum()


if __name__ == "__main__":
    unittest.main()
