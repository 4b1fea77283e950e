from fractions import Fraction

############################
# Default hardware (AWS QuEra Aquila capabilities, converted to μs and rad/μs)
############################
RABI_MAX_RAD_PER_US = Fraction("15.8")
RABI_RESOLUTION_RAD_PER_US = Fraction("0.0004")
RABI_MAX_UP_SLEW_RAD_PER_US_PER_US = Fraction(250)
RABI_MAX_DOWN_SLEW_RAD_PER_US_PER_US = Fraction(250)

DETUNING_MAX_RAD_PER_US = Fraction(125)
DETUNING_RESOLUTION_RAD_PER_US = Fraction("0.0000002")
DETUNING_MAX_UP_SLEW_RAD_PER_US_PER_US = Fraction(2500)
DETUNING_MAX_DOWN_SLEW_RAD_PER_US_PER_US = Fraction(2500)

PHASE_RESOLUTION_RAD = Fraction("0.0000005")

TIME_MAX_US = Fraction(4)
TIME_RESOLUTION_US = Fraction("0.001")
TIME_DELTA_MIN_US = Fraction("0.05")

# Rb-87 70S_1/2 van der Waals coefficient in rad μm^6 / μs
C6_RB70S_RAD_UM6_PER_US = 5.42e6
