class InvalidEvolutionParametersError(ValueError):
    """
    Raised when a timing/amplitude combination cannot be realized as an evolution on the given hardware.
    """


class WeirdHardwareError(InvalidEvolutionParametersError):
    """
    Raised when the slew rates of a hardware description do not fit the time grid.
    """


class InvalidPulseError(InvalidEvolutionParametersError):
    """
    Raised when a pulse cannot be played by the hardware.
    """


class InvalidShiftRuleError(ValueError):
    pass
