import logging
from copy import deepcopy
from fractions import Fraction
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from pandas import DataFrame

from rydsim_deriv.abstract_classes.abstract_evolution import Evolution
from rydsim_deriv.expectation_value import evf
from rydsim_deriv.hardware_limits import HardwareLimits
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import RationalLike, to_fraction

logger = logging.getLogger(__name__)


class EvfScanHeaders:
    evf_value = "Expectation Value"

    @staticmethod
    def varied_parameter_value(parameter_type: ParameterType) -> str:
        return f"{parameter_type.label} (rad/us)"


def parameter_grid(
    hardware_limits: HardwareLimits, parameter_type: ParameterType, step_multiple: int = 1
) -> List[Fraction]:
    """
    Symmetric grid of parameter values on the hardware resolution, covering [-max, max].

    Args:
        hardware_limits: Limits giving the parameter's maximum and resolution
        parameter_type: Parameter to scan
        step_multiple: Grid spacing in units of the parameter resolution
    """
    if step_multiple < 1:
        raise ValueError(f"Need step_multiple >= 1, got {step_multiple}")
    max_rad_per_us, resolution_rad_per_us = hardware_limits.parameter_bounds(parameter_type)
    step_rad_per_us = step_multiple * resolution_rad_per_us
    steps = int(max_rad_per_us // step_rad_per_us)
    return [k * step_rad_per_us for k in range(-steps, steps + 1)]


class EvfScan:
    """
    Expectation-value function of an evolution sampled on a list of parameter values, evaluated on construction.
    Samples whose numerics failed are NaN.
    """

    def __init__(
        self,
        evolution: Evolution,
        parameter_values: Sequence[RationalLike],
        *,
        observable: Optional[ArrayLike] = None,
        target_state: Optional[ArrayLike] = None,
        interaction: ArrayLike,
        psi: ArrayLike,
    ):
        self._evolution = evolution
        self._parameter_values = [to_fraction(value) for value in parameter_values]
        self._observable = observable
        self._target_state = target_state
        self._interaction = interaction
        self._psi = deepcopy(psi)
        self._evf_values: Optional[NDArray] = None

        self._scan_on_construction()

    @property
    def evolution(self) -> Evolution:
        return self._evolution

    @property
    def parameter_values(self) -> List[Fraction]:
        return list(self._parameter_values)

    @property
    def evf_values(self) -> NDArray:
        assert self._evf_values is not None
        return deepcopy(self._evf_values)

    @property
    def finite_fraction(self) -> float:
        assert self._evf_values is not None
        if len(self._evf_values) == 0:
            return 0.0
        return float(np.mean(np.isfinite(self._evf_values)))

    @property
    def dataframe(self) -> DataFrame:
        df_dict: Dict[str, NDArray] = {
            EvfScanHeaders.varied_parameter_value(self._evolution.varied_parameter): np.array(
                [float(value) for value in self._parameter_values]
            ),
            EvfScanHeaders.evf_value: self.evf_values,
        }
        df = DataFrame(df_dict)

        df = self._append_metadata_columns(df)
        return df

    def fourier_spectrum(self) -> Tuple[NDArray, NDArray]:
        """
        Magnitudes of the discrete Fourier transform of the samples, normalized by the number of samples,
        at wavenumbers pi * k / max for k = 0 ... N // 2. Meaningful for an equally spaced grid over [-max, max].

        Returns:
            (wavenumbers in us, |FFT| / N)
        """
        values = self.evf_values
        if not np.all(np.isfinite(values)):
            raise ValueError("Fourier spectrum needs all samples to be finite")
        number_of_samples = len(values)
        spectrum = np.abs(np.fft.fft(values)) / number_of_samples
        max_rad_per_us = float(self._evolution.hardware.channel(self._evolution.varied_parameter).max_rad_per_us)
        harmonics = np.arange(number_of_samples // 2 + 1)
        wavenumbers_us = 2 * np.pi * harmonics / (2 * max_rad_per_us)
        return wavenumbers_us, spectrum[: number_of_samples // 2 + 1]

    def _scan_on_construction(self):
        evf_values = []
        for value in self._parameter_values:
            evf_values.append(
                evf(
                    value,
                    self._evolution,
                    observable=self._observable,
                    target_state=self._target_state,
                    interaction=self._interaction,
                    psi=self._psi,
                )
            )
        self._evf_values = np.array(evf_values, dtype=float)
        logger.info(
            "Scanned %d values of %s, %.1f%% finite",
            len(self._parameter_values),
            self._evolution.varied_parameter.label,
            100 * self.finite_fraction,
        )

    def _append_metadata_columns(self, df: DataFrame) -> DataFrame:
        metadata = self._evolution.hardware.get_metadata_dict()
        metadata.update(self._evolution.get_metadata_dict())

        for key, datum in metadata.items():
            df[key] = datum
        return df
