from dataclasses import dataclass
from fractions import Fraction
from functools import lru_cache
from typing import Tuple

from rydsim_deriv.exceptions import WeirdHardwareError
from rydsim_deriv.hardware_description import ChannelParameters, HardwareDescription
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import round_up


@dataclass(frozen=True)
class HardwareLimits:
    """
    Bounds derived from a HardwareDescription that are needed for parameter arithmetic.

    Attributes:
        time_down_us: Time needed between switch-off and end of evolution to allow the full range of Ω and Δ
        time_off_max_us: Largest switch-off time which allows the full range of Ω and Δ
        effective_duration_min_*_us: Smallest effective duration allowing the full parameter range
        effective_duration_max_*_us: Largest effective duration allowing the full parameter range
        time_delta_min_us: Smallest positive time
    """

    rabi_max_rad_per_us: Fraction
    rabi_resolution_rad_per_us: Fraction
    detuning_max_rad_per_us: Fraction
    detuning_resolution_rad_per_us: Fraction
    time_down_us: Fraction
    time_off_max_us: Fraction

    effective_duration_min_rabi_us: Fraction
    effective_duration_max_rabi_us: Fraction
    effective_duration_min_detuning_us: Fraction
    effective_duration_max_detuning_us: Fraction

    time_resolution_us: Fraction
    time_delta_min_us: Fraction
    time_max_us: Fraction

    def parameter_bounds(self, parameter_type: ParameterType) -> Tuple[Fraction, Fraction]:
        """
        Returns (max, resolution) of the given parameter.
        """
        if parameter_type is ParameterType.RABI:
            return self.rabi_max_rad_per_us, self.rabi_resolution_rad_per_us
        return self.detuning_max_rad_per_us, self.detuning_resolution_rad_per_us

    def effective_duration_bounds(self, parameter_type: ParameterType) -> Tuple[Fraction, Fraction]:
        if parameter_type is ParameterType.RABI:
            return self.effective_duration_min_rabi_us, self.effective_duration_max_rabi_us
        return self.effective_duration_min_detuning_us, self.effective_duration_max_detuning_us


def _minimum_effective_duration(channel: ChannelParameters, time_resolution_us: Fraction) -> Fraction:
    average_ramp_time_us = (channel.up_ramp_time_us + channel.down_ramp_time_us) / 2
    return round_up(average_ramp_time_us, time_resolution_us)


@lru_cache(maxsize=None)
def derive_hardware_limits(hardware: HardwareDescription) -> HardwareLimits:
    rabi = hardware.channel(ParameterType.RABI)
    detuning = hardware.channel(ParameterType.DETUNING)
    time_resolution_us = hardware.time_resolution_us

    time_down_us = round_up(max(rabi.down_ramp_time_us, detuning.down_ramp_time_us), time_resolution_us)
    time_off_max_us = hardware.time_max_us - time_down_us
    if time_off_max_us < 0:
        raise WeirdHardwareError(
            f"WEIRD HARDWARE: ramp-down time ({time_down_us} us) exceeds maximal evolution time "
            f"({hardware.time_max_us} us)"
        )

    effective_duration_min_rabi_us = _minimum_effective_duration(rabi, time_resolution_us)
    effective_duration_min_detuning_us = _minimum_effective_duration(detuning, time_resolution_us)

    return HardwareLimits(
        rabi_max_rad_per_us=hardware.rabi_max_rad_per_us,
        rabi_resolution_rad_per_us=hardware.rabi_resolution_rad_per_us,
        detuning_max_rad_per_us=hardware.detuning_max_rad_per_us,
        detuning_resolution_rad_per_us=hardware.detuning_resolution_rad_per_us,
        time_down_us=time_down_us,
        time_off_max_us=time_off_max_us,
        effective_duration_min_rabi_us=effective_duration_min_rabi_us,
        effective_duration_max_rabi_us=hardware.time_max_us - effective_duration_min_rabi_us,
        effective_duration_min_detuning_us=effective_duration_min_detuning_us,
        effective_duration_max_detuning_us=hardware.time_max_us - effective_duration_min_detuning_us,
        time_resolution_us=time_resolution_us,
        time_delta_min_us=hardware.time_delta_min_us,
        time_max_us=hardware.time_max_us,
    )
