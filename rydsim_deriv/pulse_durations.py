from dataclasses import dataclass
from fractions import Fraction

from rydsim_deriv.exceptions import InvalidEvolutionParametersError


@dataclass(frozen=True)
class PulseDurations:
    """
    Decomposition of a trapezoidal pulse with a given effective duration into its three segments.
    The flat part is chosen so that the pulse area equals amplitude * effective duration.
    """

    ramp_up_us: Fraction
    flat_us: Fraction
    ramp_down_us: Fraction


def _flat_duration_us(
    amplitude_rad_per_us: Fraction,
    effective_duration_us: Fraction,
    up_slew_rad_per_us_per_us: Fraction,
    down_slew_rad_per_us_per_us: Fraction,
) -> Fraction:
    average_inverse_slew = (1 / up_slew_rad_per_us_per_us + 1 / down_slew_rad_per_us_per_us) / 2
    return effective_duration_us - average_inverse_slew * amplitude_rad_per_us


def get_pulse_durations(
    amplitude_rad_per_us: Fraction,
    effective_duration_us: Fraction,
    up_slew_rad_per_us_per_us: Fraction,
    down_slew_rad_per_us_per_us: Fraction,
) -> PulseDurations:
    assert amplitude_rad_per_us > 0, "Pulse durations need a positive amplitude"

    return PulseDurations(
        ramp_up_us=amplitude_rad_per_us / up_slew_rad_per_us_per_us,
        flat_us=_flat_duration_us(
            amplitude_rad_per_us, effective_duration_us, up_slew_rad_per_us_per_us, down_slew_rad_per_us_per_us
        ),
        ramp_down_us=amplitude_rad_per_us / down_slew_rad_per_us_per_us,
    )


def get_switch_off_delay(
    value_rad_per_us: Fraction,
    effective_duration_us: Fraction,
    up_slew_rad_per_us_per_us: Fraction,
    down_slew_rad_per_us_per_us: Fraction,
) -> Fraction:
    """
    Time between switch-on and switch-off of a pulse of the given (signed) value so that its area is
    value * effective duration.

    Raises:
        InvalidEvolutionParametersError: If the effective duration is too short for the ramps of this value
    """
    amplitude_rad_per_us = abs(value_rad_per_us)
    flat_us = _flat_duration_us(
        amplitude_rad_per_us, effective_duration_us, up_slew_rad_per_us_per_us, down_slew_rad_per_us_per_us
    )
    if flat_us < 0:
        raise InvalidEvolutionParametersError(
            f"Effective duration ({effective_duration_us} us) too small for pulse ({value_rad_per_us} rad/us)"
        )
    return amplitude_rad_per_us / up_slew_rad_per_us_per_us + flat_us
