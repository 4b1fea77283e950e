from fractions import Fraction

from rydsim_deriv.hardware_description import HardwareDescription
from rydsim_deriv.hardware_limits import derive_hardware_limits
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import round_up


def cross_term_offset(hardware: HardwareDescription, rabi_rad_per_us: Fraction, detuning_rad_per_us: Fraction) -> Fraction:
    """
    Returns the extra time by which an Ω pulse must outlast a Δ pulse, so that the detuning has fully ramped down
    before the Rabi frequency has: the rotating-wave approximation is not valid for detuning with vanishing Ω.
    """
    rabi = abs(rabi_rad_per_us)
    detuning = abs(detuning_rad_per_us)
    assert rabi > 0, "Cross-term offset is undefined for vanishing Rabi frequency"

    rabi_down_ramp_us = hardware.channel(ParameterType.RABI).down_ramp_time_at_us(rabi)
    detuning_down_ramp_us = hardware.channel(ParameterType.DETUNING).down_ramp_time_at_us(detuning)
    return round_up(max(Fraction(0), detuning_down_ramp_us - rabi_down_ramp_us), hardware.time_resolution_us)


def latest_fixed_switch_off(
    hardware: HardwareDescription, rabi_rad_per_us: Fraction, detuning_rad_per_us: Fraction
) -> Fraction:
    """
    Latest Ω switch-off time that still leaves room for the cross-term offset before the hardware switch-off limit.
    """
    time_off_max_us = derive_hardware_limits(hardware).time_off_max_us
    return time_off_max_us - cross_term_offset(hardware, rabi_rad_per_us, detuning_rad_per_us)
