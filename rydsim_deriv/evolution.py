import logging
from fractions import Fraction
from typing import Optional, Tuple

from rydsim_deriv.abstract_classes.abstract_evolution import Evolution
from rydsim_deriv.bang_bang_pulse import BangBangPulse, make_bang_bang_pulse
from rydsim_deriv.exceptions import InvalidEvolutionParametersError, WeirdHardwareError
from rydsim_deriv.hardware_description import HardwareDescription
from rydsim_deriv.hardware_limits import derive_hardware_limits
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.pulse_durations import get_pulse_durations
from rydsim_deriv.rational_rounding import RationalLike, is_aligned, to_fraction

logger = logging.getLogger(__name__)


def validate_evolution_timing(
    varied_parameter: ParameterType,
    switch_on_us: Fraction,
    effective_duration_us: Fraction,
    *,
    fixed_rad_per_us: Fraction,
    fixed_switch_off_us: Fraction,
    hardware: HardwareDescription,
    end_time_us: Optional[Fraction] = None,
) -> Fraction:
    """
    Checks that an evolution with the given timing can be realized for every value of the varied parameter.

    Args:
        varied_parameter: Channel whose pulse area is the evolution's argument
        switch_on_us: Switch-on time of both pulses
        effective_duration_us: Pulse area divided by value of the varied pulse
        fixed_rad_per_us: Amplitude of the fixed pulse
        fixed_switch_off_us: Switch-off time of the fixed pulse
        hardware: Hardware description
        end_time_us: End of the evolution, defaults to the earliest time at which all pulses have ramped down

    Returns:
        The end time of the evolution

    Raises:
        InvalidEvolutionParametersError: If any timing constraint is violated
    """
    limits = derive_hardware_limits(hardware)
    varied = hardware.channel(varied_parameter)
    fixed = hardware.channel(varied_parameter.other)
    time_resolution_us = limits.time_resolution_us
    effective_duration_min_us, effective_duration_max_us = limits.effective_duration_bounds(varied_parameter)

    if effective_duration_us < effective_duration_min_us:
        raise InvalidEvolutionParametersError(
            f"Need effective duration ({effective_duration_us} us) >= {effective_duration_min_us} us"
        )
    if effective_duration_us > effective_duration_max_us:
        raise InvalidEvolutionParametersError(
            f"Need effective duration ({effective_duration_us} us) <= {effective_duration_max_us} us"
        )
    if not is_aligned(effective_duration_us, time_resolution_us):
        raise InvalidEvolutionParametersError(
            f"Effective duration ({effective_duration_us} us) not a multiple of time resolution ({time_resolution_us} us)"
        )

    smallest = get_pulse_durations(
        varied.resolution_rad_per_us,
        effective_duration_us,
        varied.max_up_slew_rad_per_us_per_us,
        varied.max_down_slew_rad_per_us_per_us,
    )
    if not is_aligned(smallest.ramp_up_us + smallest.flat_us, time_resolution_us):
        raise WeirdHardwareError(
            f"WEIRD HARDWARE: half the difference of inverse {varied_parameter.label} slew rates "
            f"not a multiple of time resolution ({time_resolution_us} us)"
        )

    largest = get_pulse_durations(
        varied.max_rad_per_us,
        effective_duration_us,
        varied.max_up_slew_rad_per_us_per_us,
        varied.max_down_slew_rad_per_us_per_us,
    )
    if largest.flat_us < 0:
        raise InvalidEvolutionParametersError(
            f"Effective duration ({effective_duration_us} us) too small for maximum parameter value "
            f"({varied.max_rad_per_us} rad/us)"
        )
    end_time_min_us = max(
        switch_on_us + largest.ramp_up_us + largest.flat_us + largest.ramp_down_us,
        fixed_switch_off_us + fixed.down_ramp_time_at_us(fixed_rad_per_us),
    )
    if end_time_us is None:
        end_time_us = end_time_min_us
        if end_time_us > limits.time_max_us:
            raise InvalidEvolutionParametersError("Pulse doesn't fit in t_max")
    if end_time_us < end_time_min_us:
        raise InvalidEvolutionParametersError("T too small to fit all pulses")

    if end_time_us > limits.time_max_us:
        raise InvalidEvolutionParametersError(f"Need end time ({end_time_us} us) <= {limits.time_max_us} us")
    if not is_aligned(switch_on_us, time_resolution_us):
        raise InvalidEvolutionParametersError(
            f"Switch-on time ({switch_on_us} us) must be a multiple of time resolution ({time_resolution_us} us)"
        )
    if not is_aligned(fixed_switch_off_us, time_resolution_us):
        raise InvalidEvolutionParametersError(
            f"Fixed {fixed.parameter_type.label} switch-off time ({fixed_switch_off_us} us) must be a multiple of "
            f"time resolution ({time_resolution_us} us)"
        )
    if switch_on_us < 0:
        raise InvalidEvolutionParametersError(f"Need switch-on time ({switch_on_us} us) >= 0")
    if switch_on_us >= fixed_switch_off_us:
        raise InvalidEvolutionParametersError(
            f"Need switch-on time ({switch_on_us} us) < fixed switch-off time ({fixed_switch_off_us} us)"
        )
    if fixed_switch_off_us > limits.time_off_max_us:
        raise InvalidEvolutionParametersError(
            f"Need fixed switch-off time ({fixed_switch_off_us} us) <= {limits.time_off_max_us} us"
        )
    return end_time_us


def _make_fixed_pulse(
    varied_parameter: ParameterType,
    switch_on_us: RationalLike,
    effective_duration_us: RationalLike,
    fixed_rad_per_us: RationalLike,
    fixed_switch_off_us: RationalLike,
    hardware: HardwareDescription,
    end_time_us: Optional[RationalLike],
) -> Tuple[BangBangPulse, Fraction]:
    switch_on_us = to_fraction(switch_on_us)
    fixed_rad_per_us = to_fraction(fixed_rad_per_us)
    fixed_switch_off_us = to_fraction(fixed_switch_off_us)
    end_time_us = validate_evolution_timing(
        varied_parameter,
        switch_on_us,
        to_fraction(effective_duration_us),
        fixed_rad_per_us=fixed_rad_per_us,
        fixed_switch_off_us=fixed_switch_off_us,
        hardware=hardware,
        end_time_us=None if end_time_us is None else to_fraction(end_time_us),
    )
    fixed_pulse = make_bang_bang_pulse(
        varied_parameter.other, switch_on_us, fixed_switch_off_us, end_time_us, fixed_rad_per_us, hardware
    )
    fixed_pulse.check()
    logger.debug(
        "%s evolution: switch on %s us, effective duration %s us, fixed %s %s rad/us until %s us, end %s us",
        varied_parameter.label,
        switch_on_us,
        effective_duration_us,
        varied_parameter.other.label,
        fixed_rad_per_us,
        fixed_switch_off_us,
        end_time_us,
    )
    return fixed_pulse, end_time_us


class RabiEvolution(Evolution):
    """
    Evolution with varied Rabi frequency and fixed detuning.
    """

    VARIED = ParameterType.RABI
    FIXED = ParameterType.DETUNING

    def __init__(
        self,
        switch_on_us: RationalLike,
        effective_duration_us: RationalLike,
        *,
        detuning_rad_per_us: RationalLike,
        detuning_switch_off_us: RationalLike,
        tolerance: float,
        hardware: HardwareDescription,
        end_time_us: Optional[RationalLike] = None,
    ) -> None:
        fixed_pulse, resolved_end_time_us = _make_fixed_pulse(
            self.VARIED,
            switch_on_us,
            effective_duration_us,
            detuning_rad_per_us,
            detuning_switch_off_us,
            hardware,
            end_time_us,
        )
        super().__init__(
            to_fraction(switch_on_us),
            to_fraction(effective_duration_us),
            resolved_end_time_us,
            fixed_pulse,
            tolerance,
            hardware,
        )

    def rabi_and_detuning_pulses(self, value_rad_per_us: RationalLike) -> Tuple[BangBangPulse, BangBangPulse]:
        return self.varied_pulse(value_rad_per_us), self.fixed_pulse


class DetuningEvolution(Evolution):
    """
    Evolution with varied detuning and fixed Rabi frequency.
    """

    VARIED = ParameterType.DETUNING
    FIXED = ParameterType.RABI

    def __init__(
        self,
        switch_on_us: RationalLike,
        effective_duration_us: RationalLike,
        *,
        rabi_rad_per_us: RationalLike,
        rabi_switch_off_us: RationalLike,
        tolerance: float,
        hardware: HardwareDescription,
        end_time_us: Optional[RationalLike] = None,
    ) -> None:
        fixed_pulse, resolved_end_time_us = _make_fixed_pulse(
            self.VARIED,
            switch_on_us,
            effective_duration_us,
            rabi_rad_per_us,
            rabi_switch_off_us,
            hardware,
            end_time_us,
        )
        super().__init__(
            to_fraction(switch_on_us),
            to_fraction(effective_duration_us),
            resolved_end_time_us,
            fixed_pulse,
            tolerance,
            hardware,
        )

    def rabi_and_detuning_pulses(self, value_rad_per_us: RationalLike) -> Tuple[BangBangPulse, BangBangPulse]:
        return self.fixed_pulse, self.varied_pulse(value_rad_per_us)
