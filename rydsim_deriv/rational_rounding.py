from fractions import Fraction
from numbers import Rational
from typing import Union

RationalLike = Union[int, str, float, Rational]


def to_fraction(value: RationalLike) -> Fraction:
    """
    Converts a value to an exact Fraction. Floats are converted through their shortest decimal representation,
    so 0.001 becomes 1/1000 rather than the binary approximation.
    """
    if isinstance(value, bool):
        raise TypeError("Booleans are not numeric hardware values")
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)


def _check_step(step: Fraction) -> None:
    if step <= 0:
        raise ValueError(f"Resolution step must be positive, got {step}")


def is_aligned(value: Fraction, step: Fraction) -> bool:
    _check_step(step)
    return (value / step).denominator == 1


def round_down(value: Fraction, step: Fraction) -> Fraction:
    _check_step(step)
    return (value // step) * step


def round_up(value: Fraction, step: Fraction) -> Fraction:
    _check_step(step)
    return -((-value) // step) * step


def round_nearest(value: Fraction, step: Fraction) -> Fraction:
    _check_step(step)
    return round(value / step) * step
