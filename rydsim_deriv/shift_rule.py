from copy import deepcopy
from fractions import Fraction
from typing import TYPE_CHECKING, Sequence, Tuple

from rydsim_deriv.exceptions import InvalidShiftRuleError
from rydsim_deriv.expectation_value import evf
from rydsim_deriv.hardware_limits import HardwareLimits
from rydsim_deriv.parameter_type import ParameterType
from rydsim_deriv.rational_rounding import RationalLike, is_aligned, to_fraction

if TYPE_CHECKING:
    from rydsim_deriv.abstract_classes.abstract_evolution import Evolution


class ShiftRule:
    """
    Linear combination sum_j a_j * f(x - s_j) of expectation-value function evaluations around an anchor x.

    Use ShiftRule.create(), which checks the rule against the hardware.
    """

    def __init__(
        self,
        parameter_type: ParameterType,
        anchor_rad_per_us: Fraction,
        shifts_rad_per_us: Sequence[Fraction],
        coefficients: Sequence[float],
        *,
        _checking: bool = False,
    ) -> None:
        assert _checking, "Construct shift rules with ShiftRule.create()"
        self._parameter_type = parameter_type
        self._anchor_rad_per_us = anchor_rad_per_us
        self._shifts_rad_per_us = tuple(shifts_rad_per_us)
        self._coefficients = tuple(coefficients)

    @classmethod
    def create(
        cls,
        parameter_type: ParameterType,
        *,
        anchor: RationalLike,
        shifts: Sequence[RationalLike],
        coefficients: Sequence[float],
        hardware_limits: HardwareLimits,
    ) -> "ShiftRule":
        rule = cls(
            parameter_type,
            to_fraction(anchor),
            [to_fraction(shift) for shift in shifts],
            [float(coefficient) for coefficient in coefficients],
            _checking=True,
        )
        check_shift_rule(rule, hardware_limits)
        return rule

    @property
    def parameter_type(self) -> ParameterType:
        return self._parameter_type

    @property
    def anchor_rad_per_us(self) -> Fraction:
        return self._anchor_rad_per_us

    @property
    def shifts_rad_per_us(self) -> Tuple[Fraction, ...]:
        return self._shifts_rad_per_us

    @property
    def coefficients(self) -> Tuple[float, ...]:
        return self._coefficients

    def __call__(self, evolution: "Evolution", **evf_kwargs) -> float:
        """
        Evaluates the shift rule on an evolution. The caller's psi is never modified: every term starts
        from its own copy.
        """
        if evolution.varied_parameter is not self._parameter_type:
            raise TypeError(
                f"Shift rule for {self._parameter_type.label} cannot be applied to an evolution varying "
                f"{evolution.varied_parameter.label}"
            )
        psi = evf_kwargs.pop("psi")
        total = 0.0
        for coefficient, shift_rad_per_us in zip(self._coefficients, self._shifts_rad_per_us):
            total += coefficient * evf(
                self._anchor_rad_per_us - shift_rad_per_us, evolution, psi=deepcopy(psi), **evf_kwargs
            )
        return total


def check_shift_rule(rule: ShiftRule, hardware_limits: HardwareLimits) -> None:
    """
    Raises:
        InvalidShiftRuleError: If the rule does not fit the hardware resolution or range
    """
    shifts = rule.shifts_rad_per_us
    if len(shifts) != len(rule.coefficients):
        raise InvalidShiftRuleError(
            f"Lengths of shifts ({len(shifts)}) and coefficients ({len(rule.coefficients)}) differ"
        )

    max_rad_per_us, resolution_rad_per_us = hardware_limits.parameter_bounds(rule.parameter_type)
    anchor = rule.anchor_rad_per_us
    if not is_aligned(anchor, resolution_rad_per_us):
        raise InvalidShiftRuleError(f"Anchor {anchor} is not aligned to resolution {resolution_rad_per_us}")
    if not all(is_aligned(shift, resolution_rad_per_us) for shift in shifts):
        raise InvalidShiftRuleError(f"Not all shifts are aligned to resolution {resolution_rad_per_us}")
    if not all(-max_rad_per_us <= anchor + sign * shift <= max_rad_per_us for shift in shifts for sign in (-1, 1)):
        raise InvalidShiftRuleError(f"Not all shifts land in the parameter range +-{max_rad_per_us}")
    if not -max_rad_per_us <= anchor <= max_rad_per_us:
        raise InvalidShiftRuleError(f"Anchor {anchor} outside the parameter range +-{max_rad_per_us}")


def get_max_anchor_symmetric_difference_quotient(
    parameter_type: ParameterType, *, n: int, hardware_limits: HardwareLimits
) -> Fraction:
    max_rad_per_us, resolution_rad_per_us = hardware_limits.parameter_bounds(parameter_type)
    return max_rad_per_us - n * resolution_rad_per_us


def symmetric_difference_quotient(
    parameter_type: ParameterType, *, value: RationalLike, n: int, hardware_limits: HardwareLimits
) -> ShiftRule:
    """
    Shift rule (f(x + eps) - f(x - eps)) / (2 eps) with eps = n * parameter resolution.

    Raises:
        InvalidShiftRuleError: If x or x +- eps is outside the parameter range or off the resolution grid
    """
    if n < 1:
        raise InvalidShiftRuleError(f"Need n >= 1, got {n}")

    value = to_fraction(value)
    max_rad_per_us, resolution_rad_per_us = hardware_limits.parameter_bounds(parameter_type)
    epsilon = n * resolution_rad_per_us
    max_anchor = get_max_anchor_symmetric_difference_quotient(parameter_type, n=n, hardware_limits=hardware_limits)

    if abs(value) > max_anchor:
        raise InvalidShiftRuleError(f"{parameter_type.label} {value} outside the range +-{max_anchor}")
    if abs(value) > max_rad_per_us:
        raise InvalidShiftRuleError(f"{parameter_type.label} {value} outside the hardware range")
    if not (-max_rad_per_us <= value - epsilon and value + epsilon <= max_rad_per_us):
        raise InvalidShiftRuleError(f"{parameter_type.label} {value} +- {epsilon} outside the hardware range")
    for point in (value, value - epsilon, value + epsilon):
        if not is_aligned(point, resolution_rad_per_us):
            raise InvalidShiftRuleError(
                f"{parameter_type.label} {point} not aligned to resolution {resolution_rad_per_us}"
            )

    coefficient = 1 / float(2 * epsilon)
    return ShiftRule.create(
        parameter_type,
        anchor=value,
        shifts=[-epsilon, epsilon],
        coefficients=[coefficient, -coefficient],
        hardware_limits=hardware_limits,
    )
