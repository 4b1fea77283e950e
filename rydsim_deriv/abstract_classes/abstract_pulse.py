from abc import ABC, abstractmethod
from fractions import Fraction
from typing import List

from rydsim_deriv.parameter_type import ParameterType


class Pulse(ABC):
    """
    Base class for a time-dependent control amplitude on a single channel.
    """

    PARAMETER_TYPE: ParameterType

    @abstractmethod
    def value(self, time_us: float) -> float:
        pass

    @abstractmethod
    def breakpoints_us(self) -> List[Fraction]:
        """
        Times at which the pulse shape is not smooth, in increasing order.
        """

    @abstractmethod
    def check(self) -> None:
        pass
