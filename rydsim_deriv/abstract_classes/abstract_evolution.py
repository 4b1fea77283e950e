import math
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Dict, Optional, Tuple

from numpy.typing import ArrayLike

from rydsim_deriv.bang_bang_pulse import BangBangPulse, make_bang_bang_pulse
from rydsim_deriv.expectation_value import evaluate_evolution
from rydsim_deriv.hardware_description import HardwareDescription
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.pulse_durations import get_switch_off_delay
from rydsim_deriv.rational_rounding import RationalLike, to_fraction


class Evolution(ABC):
    """
    A quantum evolution in which one control parameter (VARIED) is the argument of the expectation-value
    function, and the other (FIXED) is a bang-bang pulse determined at construction.

    The evolution starts at time zero. The varied pulse is switched on at switch_on_us and kept on long enough
    that its area is value * effective_duration_us, whatever the value.
    """

    VARIED: ParameterType
    FIXED: ParameterType

    def __init__(
        self,
        switch_on_us: Fraction,
        effective_duration_us: Fraction,
        end_time_us: Fraction,
        fixed_pulse: BangBangPulse,
        tolerance: float,
        hardware: HardwareDescription,
    ) -> None:
        self._switch_on_us = switch_on_us
        self._effective_duration_us = effective_duration_us
        self._end_time_us = end_time_us
        self._fixed_pulse = fixed_pulse
        self._tolerance = tolerance
        self._hardware = hardware

    @property
    def fixed_pulse(self) -> BangBangPulse:
        return self._fixed_pulse

    @property
    def start_time_us(self) -> Fraction:
        return Fraction(0)

    @property
    def switch_on_us(self) -> Fraction:
        return self._switch_on_us

    @property
    def effective_duration_us(self) -> Fraction:
        return self._effective_duration_us

    @property
    def end_time_us(self) -> Fraction:
        return self._end_time_us

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def hardware(self) -> HardwareDescription:
        return self._hardware

    @property
    def varied_parameter(self) -> ParameterType:
        return self.VARIED

    def effective_pulse_duration(self) -> Fraction:
        return self._effective_duration_us

    def fourier_wavelength_bound(self) -> float:
        """
        The expectation-value function is a trigonometric polynomial in the varied parameter with frequencies
        at most the effective duration, so no feature is narrower than 2 pi / effective duration.
        """
        return 2 * math.pi / float(self._effective_duration_us)

    def varied_pulse(self, value_rad_per_us: RationalLike) -> BangBangPulse:
        value_rad_per_us = to_fraction(value_rad_per_us)
        channel = self._hardware.channel(self.VARIED)
        switch_off_us = self._switch_on_us + get_switch_off_delay(
            value_rad_per_us,
            self._effective_duration_us,
            channel.max_up_slew_rad_per_us_per_us,
            channel.max_down_slew_rad_per_us_per_us,
        )
        pulse = make_bang_bang_pulse(
            self.VARIED, self._switch_on_us, switch_off_us, self._end_time_us, value_rad_per_us, self._hardware
        )
        pulse.check()
        return pulse

    @abstractmethod
    def rabi_and_detuning_pulses(self, value_rad_per_us: RationalLike) -> Tuple[BangBangPulse, BangBangPulse]:
        pass

    def get_metadata_dict(self) -> Dict[str, float]:
        metadata = {
            f"Varied {self.VARIED.label} Switch On (us)": float(self._switch_on_us),
            "Effective Duration (us)": float(self._effective_duration_us),
            "End Time (us)": float(self._end_time_us),
            "Tolerance": self._tolerance,
        }
        metadata.update(self._fixed_pulse.get_metadata_dict())
        return metadata

    def __call__(
        self,
        value_rad_per_us: RationalLike,
        *,
        observable: Optional[ArrayLike] = None,
        target_state: Optional[ArrayLike] = None,
        interaction: ArrayLike,
        psi: ArrayLike,
        in_place: bool = False,
    ) -> float:
        return evaluate_evolution(
            self,
            value_rad_per_us,
            observable=observable,
            target_state=target_state,
            interaction=interaction,
            psi=psi,
            in_place=in_place,
        )
