import logging
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Dict

import rydsim_deriv.constants as constants
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import RationalLike, to_fraction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelParameters:
    """
    Hardware bounds of a single control channel (Rabi frequency or detuning).
    """

    parameter_type: ParameterType
    max_rad_per_us: Fraction
    resolution_rad_per_us: Fraction
    max_up_slew_rad_per_us_per_us: Fraction
    max_down_slew_rad_per_us_per_us: Fraction

    @property
    def up_ramp_time_us(self) -> Fraction:
        return self.max_rad_per_us / self.max_up_slew_rad_per_us_per_us

    @property
    def down_ramp_time_us(self) -> Fraction:
        return self.max_rad_per_us / self.max_down_slew_rad_per_us_per_us

    def down_ramp_time_at_us(self, amplitude_rad_per_us: Fraction) -> Fraction:
        return abs(amplitude_rad_per_us) / self.max_down_slew_rad_per_us_per_us


@dataclass(frozen=True)
class HardwareDescription:
    """
    Raw description of the pulse hardware. All values are exact rationals, times in μs and angular frequencies in
    rad/μs, so that alignment checks against the hardware grids are exact.
    """

    rabi_max_rad_per_us: Fraction
    rabi_resolution_rad_per_us: Fraction
    rabi_max_up_slew_rad_per_us_per_us: Fraction
    rabi_max_down_slew_rad_per_us_per_us: Fraction
    detuning_max_rad_per_us: Fraction
    detuning_resolution_rad_per_us: Fraction
    detuning_max_up_slew_rad_per_us_per_us: Fraction
    detuning_max_down_slew_rad_per_us_per_us: Fraction
    phase_resolution_rad: Fraction
    time_max_us: Fraction
    time_resolution_us: Fraction
    time_delta_min_us: Fraction

    def channel(self, parameter_type: ParameterType) -> ChannelParameters:
        if parameter_type is ParameterType.RABI:
            return ChannelParameters(
                parameter_type,
                self.rabi_max_rad_per_us,
                self.rabi_resolution_rad_per_us,
                self.rabi_max_up_slew_rad_per_us_per_us,
                self.rabi_max_down_slew_rad_per_us_per_us,
            )
        return ChannelParameters(
            parameter_type,
            self.detuning_max_rad_per_us,
            self.detuning_resolution_rad_per_us,
            self.detuning_max_up_slew_rad_per_us_per_us,
            self.detuning_max_down_slew_rad_per_us_per_us,
        )

    def get_metadata_dict(self) -> Dict[str, float]:
        return {
            "HW Rabi Max (rad/us)": float(self.rabi_max_rad_per_us),
            "HW Rabi Resolution (rad/us)": float(self.rabi_resolution_rad_per_us),
            "HW Rabi Up Slew (rad/us^2)": float(self.rabi_max_up_slew_rad_per_us_per_us),
            "HW Rabi Down Slew (rad/us^2)": float(self.rabi_max_down_slew_rad_per_us_per_us),
            "HW Detuning Max (rad/us)": float(self.detuning_max_rad_per_us),
            "HW Detuning Resolution (rad/us)": float(self.detuning_resolution_rad_per_us),
            "HW Detuning Up Slew (rad/us^2)": float(self.detuning_max_up_slew_rad_per_us_per_us),
            "HW Detuning Down Slew (rad/us^2)": float(self.detuning_max_down_slew_rad_per_us_per_us),
            "HW Phase Resolution (rad)": float(self.phase_resolution_rad),
            "HW Time Max (us)": float(self.time_max_us),
            "HW Time Resolution (us)": float(self.time_resolution_us),
            "HW Time Delta Min (us)": float(self.time_delta_min_us),
        }


class HardwareDescriptionFactory:
    def __init__(self):
        self._hardware_description = HardwareDescription(
            constants.RABI_MAX_RAD_PER_US,
            constants.RABI_RESOLUTION_RAD_PER_US,
            constants.RABI_MAX_UP_SLEW_RAD_PER_US_PER_US,
            constants.RABI_MAX_DOWN_SLEW_RAD_PER_US_PER_US,
            constants.DETUNING_MAX_RAD_PER_US,
            constants.DETUNING_RESOLUTION_RAD_PER_US,
            constants.DETUNING_MAX_UP_SLEW_RAD_PER_US_PER_US,
            constants.DETUNING_MAX_DOWN_SLEW_RAD_PER_US_PER_US,
            constants.PHASE_RESOLUTION_RAD,
            constants.TIME_MAX_US,
            constants.TIME_RESOLUTION_US,
            constants.TIME_DELTA_MIN_US,
        )

    @staticmethod
    def _positive(value: RationalLike, name: str) -> Fraction:
        exact_value = to_fraction(value)
        if exact_value <= 0:
            raise ValueError(f"{name} must be positive, got {exact_value}")
        return exact_value

    def _update(self, **changes: RationalLike) -> None:
        self._hardware_description = replace(
            self._hardware_description, **{name: self._positive(value, name) for name, value in changes.items()}
        )

    def set_rabi_limits(
        self,
        max_rad_per_us: RationalLike,
        resolution_rad_per_us: RationalLike,
        max_up_slew_rad_per_us_per_us: RationalLike,
        max_down_slew_rad_per_us_per_us: RationalLike,
    ) -> None:
        self._update(
            rabi_max_rad_per_us=max_rad_per_us,
            rabi_resolution_rad_per_us=resolution_rad_per_us,
            rabi_max_up_slew_rad_per_us_per_us=max_up_slew_rad_per_us_per_us,
            rabi_max_down_slew_rad_per_us_per_us=max_down_slew_rad_per_us_per_us,
        )

    def set_detuning_limits(
        self,
        max_rad_per_us: RationalLike,
        resolution_rad_per_us: RationalLike,
        max_up_slew_rad_per_us_per_us: RationalLike,
        max_down_slew_rad_per_us_per_us: RationalLike,
    ) -> None:
        self._update(
            detuning_max_rad_per_us=max_rad_per_us,
            detuning_resolution_rad_per_us=resolution_rad_per_us,
            detuning_max_up_slew_rad_per_us_per_us=max_up_slew_rad_per_us_per_us,
            detuning_max_down_slew_rad_per_us_per_us=max_down_slew_rad_per_us_per_us,
        )

    def set_time_limits(
        self, time_max_us: RationalLike, time_resolution_us: RationalLike, time_delta_min_us: RationalLike
    ) -> None:
        self._update(
            time_max_us=time_max_us, time_resolution_us=time_resolution_us, time_delta_min_us=time_delta_min_us
        )

    def set_phase_resolution(self, phase_resolution_rad: RationalLike) -> None:
        self._update(phase_resolution_rad=phase_resolution_rad)

    def set_down_slew_factors(self, rabi_factor: RationalLike = 1, detuning_factor: RationalLike = 1) -> None:
        """
        Scales the maximal down-slew rates, e.g. to model hardware that has to switch off more gently than it
        switches on.

        Args:
            rabi_factor: Multiplier for the Rabi-frequency down slew
            detuning_factor: Multiplier for the detuning down slew
        """
        rabi_factor = self._positive(rabi_factor, "rabi_factor")
        detuning_factor = self._positive(detuning_factor, "detuning_factor")
        hardware = self._hardware_description
        if rabi_factor != 1 or detuning_factor != 1:
            logger.warning(
                "Asymmetric slew rates may produce switch-off times off the %s us time grid",
                hardware.time_resolution_us,
            )
        self._update(
            rabi_max_down_slew_rad_per_us_per_us=hardware.rabi_max_down_slew_rad_per_us_per_us * rabi_factor,
            detuning_max_down_slew_rad_per_us_per_us=hardware.detuning_max_down_slew_rad_per_us_per_us
            * detuning_factor,
        )

    def get_hardware_description(self) -> HardwareDescription:
        return replace(self._hardware_description)
