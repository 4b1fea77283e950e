import math
from fractions import Fraction
from typing import Dict, List, Type

from rydsim_deriv.abstract_classes.abstract_pulse import Pulse
from rydsim_deriv.exceptions import InvalidPulseError
from rydsim_deriv.hardware_description import ChannelParameters, HardwareDescription
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import RationalLike, is_aligned, round_nearest, to_fraction


class BangBangPulse(Pulse):
    """
    Trapezoidal pulse: ramps up at the maximal up-slew from the switch-on time, holds the amplitude,
    ramps down at the maximal down-slew from the switch-off time and stays zero until the end time.
    """

    def __init__(
        self,
        switch_on_us: RationalLike,
        switch_off_us: RationalLike,
        end_time_us: RationalLike,
        amplitude_rad_per_us: RationalLike,
        hardware: HardwareDescription,
    ) -> None:
        self._switch_on_us = to_fraction(switch_on_us)
        self._switch_off_us = to_fraction(switch_off_us)
        self._end_time_us = to_fraction(end_time_us)
        self._amplitude_rad_per_us = to_fraction(amplitude_rad_per_us)
        self._hardware = hardware

        channel = self.channel
        self._ramp_up_us = abs(self._amplitude_rad_per_us) / channel.max_up_slew_rad_per_us_per_us
        self._ramp_down_us = abs(self._amplitude_rad_per_us) / channel.max_down_slew_rad_per_us_per_us

        # Float copies for the integrator's hot path
        self._on = float(self._switch_on_us)
        self._on_flat = float(self._switch_on_us + self._ramp_up_us)
        self._off = float(self._switch_off_us)
        self._off_zero = float(self._switch_off_us + self._ramp_down_us)
        self._amplitude = float(self._amplitude_rad_per_us)
        self._sign = math.copysign(1.0, self._amplitude)
        self._up_slew = float(channel.max_up_slew_rad_per_us_per_us)
        self._down_slew = float(channel.max_down_slew_rad_per_us_per_us)

    @property
    def channel(self) -> ChannelParameters:
        return self._hardware.channel(self.PARAMETER_TYPE)

    @property
    def switch_on_us(self) -> Fraction:
        return self._switch_on_us

    @property
    def switch_off_us(self) -> Fraction:
        return self._switch_off_us

    @property
    def end_time_us(self) -> Fraction:
        return self._end_time_us

    @property
    def amplitude_rad_per_us(self) -> Fraction:
        return self._amplitude_rad_per_us

    def value(self, time_us: float) -> float:
        if time_us < self._on or time_us >= self._off_zero:
            return 0.0
        if time_us < self._off:
            if time_us < self._on_flat:
                return self._sign * self._up_slew * (time_us - self._on)
            return self._amplitude
        # Ramp down starts from wherever the ramp up got to
        start_rad_per_us = self._sign * min(abs(self._amplitude), self._up_slew * (self._off - self._on))
        return start_rad_per_us - self._sign * self._down_slew * (time_us - self._off)

    def breakpoints_us(self) -> List[Fraction]:
        corners = {
            self._switch_on_us,
            self._switch_on_us + self._ramp_up_us,
            self._switch_off_us,
            self._switch_off_us + self._ramp_down_us,
        }
        return sorted(time_us for time_us in corners if 0 <= time_us <= self._end_time_us)

    def area(self) -> Fraction:
        """
        Exact integral of the pulse over time, for a pulse that passes check().
        """
        on_duration_us = self._switch_off_us - self._switch_on_us
        return self._amplitude_rad_per_us * (on_duration_us - self._ramp_up_us / 2 + self._ramp_down_us / 2)

    def check(self) -> None:
        channel = self.channel
        hardware = self._hardware
        time_resolution_us = hardware.time_resolution_us
        name = self.PARAMETER_TYPE.label

        if abs(self._amplitude_rad_per_us) > channel.max_rad_per_us:
            raise InvalidPulseError(
                f"{name} pulse amplitude {self._amplitude_rad_per_us} exceeds maximum {channel.max_rad_per_us}"
            )
        if not is_aligned(self._amplitude_rad_per_us, channel.resolution_rad_per_us):
            raise InvalidPulseError(
                f"{name} pulse amplitude {self._amplitude_rad_per_us} not a multiple of resolution "
                f"{channel.resolution_rad_per_us}"
            )
        if self._switch_on_us < 0:
            raise InvalidPulseError(f"{name} pulse switch-on time must be non-negative")
        if self._switch_off_us < self._switch_on_us:
            raise InvalidPulseError(f"{name} pulse switches off before it switches on")
        if not (
            is_aligned(self._switch_on_us, time_resolution_us) and is_aligned(self._switch_off_us, time_resolution_us)
        ):
            raise InvalidPulseError(f"{name} pulse switch times not multiples of time resolution {time_resolution_us}")

        on_duration_us = self._switch_off_us - self._switch_on_us
        if on_duration_us < self._ramp_up_us:
            raise InvalidPulseError(f"{name} pulse switched off before reaching its amplitude")
        if 0 < on_duration_us < hardware.time_delta_min_us:
            raise InvalidPulseError(
                f"{name} pulse on-duration {on_duration_us} us below minimum {hardware.time_delta_min_us} us"
            )
        if self._switch_off_us + self._ramp_down_us > self._end_time_us:
            raise InvalidPulseError(f"{name} pulse ramp-down not finished by end time {self._end_time_us} us")
        if self._end_time_us > hardware.time_max_us:
            raise InvalidPulseError(f"{name} pulse end time exceeds maximum {hardware.time_max_us} us")

    def get_metadata_dict(self) -> Dict[str, float]:
        prefix = f"Fixed {self.PARAMETER_TYPE.label}"
        return {
            f"{prefix} (rad/us)": float(self._amplitude_rad_per_us),
            f"{prefix} Switch On (us)": float(self._switch_on_us),
            f"{prefix} Switch Off (us)": float(self._switch_off_us),
        }


class RabiBangBangPulse(BangBangPulse):
    PARAMETER_TYPE = ParameterType.RABI

    @property
    def phase_rad(self) -> Fraction:
        """
        Drive phase realizing the sign of the Rabi frequency, on the hardware phase grid.
        """
        phase_rad = to_fraction(math.pi) if self._amplitude_rad_per_us < 0 else Fraction(0)
        return round_nearest(phase_rad, self._hardware.phase_resolution_rad)


class DetuningBangBangPulse(BangBangPulse):
    PARAMETER_TYPE = ParameterType.DETUNING


_PULSE_CLASSES: Dict[ParameterType, Type[BangBangPulse]] = {
    ParameterType.RABI: RabiBangBangPulse,
    ParameterType.DETUNING: DetuningBangBangPulse,
}


def make_bang_bang_pulse(
    parameter_type: ParameterType,
    switch_on_us: RationalLike,
    switch_off_us: RationalLike,
    end_time_us: RationalLike,
    amplitude_rad_per_us: RationalLike,
    hardware: HardwareDescription,
) -> BangBangPulse:
    return _PULSE_CLASSES[parameter_type](switch_on_us, switch_off_us, end_time_us, amplitude_rad_per_us, hardware)
