import logging
from typing import List

import numpy as np
from numpy.typing import NDArray
from qutip import Qobj, QobjEvo, sesolve
from qutip.solver.integrator import IntegratorException

from rydsim_deriv.abstract_classes.abstract_pulse import Pulse
from rydsim_deriv.rational_rounding import RationalLike, to_fraction
from rydsim_deriv.rydberg_operators import RydbergOperators

logger = logging.getLogger(__name__)

MAX_INTEGRATOR_STEPS = 100000


def _segment_times_us(start_time_us: float, end_time_us: float, pulses: List[Pulse]) -> List[float]:
    times = {start_time_us, end_time_us}
    for pulse in pulses:
        times.update(float(time_us) for time_us in pulse.breakpoints_us() if start_time_us < time_us < end_time_us)
    return sorted(times)


def _rydberg_hamiltonian(
    number_of_atoms: int, rabi_pulse: Pulse, detuning_pulse: Pulse, interaction: NDArray
) -> QobjEvo:
    half_x_sum = Qobj(RydbergOperators.pauli_x_sum(number_of_atoms) / 2)
    number_sum = Qobj(RydbergOperators.rydberg_number_sum(number_of_atoms))
    rydberg_term = Qobj(np.asarray(interaction, dtype=complex))

    def rabi_coefficient(time_us: float) -> float:
        return rabi_pulse.value(time_us)

    def detuning_coefficient(time_us: float) -> float:
        return -detuning_pulse.value(time_us)

    return QobjEvo([rydberg_term, [half_x_sum, rabi_coefficient], [number_sum, detuning_coefficient]])


def propagate_schrodinger(
    psi: NDArray,
    end_time_us: RationalLike,
    *,
    start_time_us: RationalLike,
    rabi_pulse: Pulse,
    detuning_pulse: Pulse,
    interaction: NDArray,
    tolerance: float,
) -> None:
    """
    Integrates i d(psi)/dt = H(t) psi with H(t) = Omega(t)/2 sum_j X_j - Delta(t) sum_j n_j + R
    and writes the final state into psi.

    A failed integration is not raised: psi is filled with NaN instead.

    Args:
        psi: Initial state, complex vector of length 2^N; overwritten with the final state
        end_time_us: Time at which the integration stops
        start_time_us: Time of the initial state
        rabi_pulse: Rabi frequency Omega(t) in rad/us
        detuning_pulse: Detuning Delta(t) in rad/us
        interaction: Time-independent Rydberg term R in rad/us
        tolerance: Relative and absolute integrator tolerance

    Raises:
        ValueError: If the arguments are structurally inconsistent
    """
    if not isinstance(psi, np.ndarray) or psi.ndim != 1 or not np.iscomplexobj(psi):
        raise ValueError("psi must be a one-dimensional complex numpy array")
    dimension = psi.shape[0]
    if np.shape(interaction) != (dimension, dimension):
        raise ValueError(f"Interaction shape {np.shape(interaction)} does not match state dimension {dimension}")
    if not tolerance > 0:
        raise ValueError(f"Tolerance must be positive, got {tolerance}")
    start = to_fraction(start_time_us)
    end = to_fraction(end_time_us)
    if end < start:
        raise ValueError(f"End time {end} us precedes start time {start} us")

    if not np.all(np.isfinite(psi)):
        logger.warning("Initial state is not finite, skipping integration")
        psi[:] = np.nan
        return

    hamiltonian = _rydberg_hamiltonian(
        RydbergOperators.number_of_atoms(dimension), rabi_pulse, detuning_pulse, interaction
    )
    options = {"atol": tolerance, "rtol": tolerance, "nsteps": MAX_INTEGRATOR_STEPS}

    state = Qobj(np.array(psi, dtype=complex).reshape(dimension, 1))
    times_us = _segment_times_us(float(start), float(end), [rabi_pulse, detuning_pulse])
    # Segments end at pulse corners so the integrator never steps across a kink
    for segment_start_us, segment_end_us in zip(times_us[:-1], times_us[1:]):
        try:
            solution = sesolve(hamiltonian, state, [segment_start_us, segment_end_us], options=options)
        except IntegratorException as error:
            logger.warning("Integration failed on [%s, %s] us: %s", segment_start_us, segment_end_us, error)
            psi[:] = np.nan
            return
        state = solution.states[-1]

    final_state = state.full().ravel()
    if not np.all(np.isfinite(final_state)):
        logger.warning("Integration produced a non-finite state")
        psi[:] = np.nan
        return
    psi[:] = final_state
