from enum import Enum


class ParameterType(Enum):
    """
    The physical control channel an evolution varies (or holds fixed).
    """

    RABI = "Ω"
    DETUNING = "Δ"

    @property
    def other(self) -> "ParameterType":
        return ParameterType.DETUNING if self is ParameterType.RABI else ParameterType.RABI

    @property
    def label(self) -> str:
        return "Rabi Frequency" if self is ParameterType.RABI else "Detuning"
