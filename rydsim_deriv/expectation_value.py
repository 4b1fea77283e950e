import logging
import math
from typing import TYPE_CHECKING, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray
from qutip import Qobj

from rydsim_deriv.rational_rounding import RationalLike
from rydsim_deriv.schrodinger_propagator import propagate_schrodinger

if TYPE_CHECKING:
    from rydsim_deriv.abstract_classes.abstract_evolution import Evolution

logger = logging.getLogger(__name__)


def _as_array(operator: ArrayLike) -> NDArray:
    if isinstance(operator, Qobj):
        return operator.full()
    return np.asarray(operator)


def observable_expectation(psi: NDArray, observable: NDArray) -> float:
    """
    Re <psi| observable |psi>
    """
    return float(np.real(np.vdot(psi, observable @ psi)))


def target_state_contrast(psi: NDArray, target_state: NDArray) -> float:
    """
    1 - 2 |<target|psi>|^2, i.e. the expectation value of the reflection 1 - 2 |target><target|.
    """
    return float(1 - 2 * np.abs(np.vdot(target_state, psi)) ** 2)


def evaluate_evolution(
    evolution: "Evolution",
    value_rad_per_us: RationalLike,
    *,
    observable: Optional[ArrayLike] = None,
    target_state: Optional[ArrayLike] = None,
    interaction: ArrayLike,
    psi: ArrayLike,
    in_place: bool = False,
) -> float:
    """
    Evaluates the expectation-value function of an evolution at one value of its varied parameter.

    Args:
        evolution: Evolution to run
        value_rad_per_us: Value of the varied parameter
        observable: Hermitian operator measured on the final state
        target_state: State phi whose reflection 1 - 2|phi><phi| is measured instead of an observable
        interaction: Rydberg term R of the Hamiltonian
        psi: Initial state
        in_place: If True, psi must be a complex numpy vector and receives the final state

    Returns:
        The expectation value, or NaN if the numerics failed

    Raises:
        ValueError: If not exactly one of observable and target_state is given
        InvalidPulseError: If the varied pulse for this value cannot be realized
    """
    if (observable is None) == (target_state is None):
        raise ValueError("Exactly one of observable and target_state must be given")

    if in_place:
        state = psi
    else:
        state = np.array(_as_array(psi), dtype=complex).ravel()
    dimension = np.shape(state)[0]
    interaction = _as_array(interaction)
    assert np.shape(interaction) == (dimension, dimension), "Interaction does not match state dimension"
    if observable is not None:
        observable = _as_array(observable)
        assert np.shape(observable) == (dimension, dimension), "Observable does not match state dimension"
    else:
        target_state = _as_array(target_state).ravel()
        assert np.shape(target_state) == (dimension,), "Target state does not match state dimension"

    rabi_pulse, detuning_pulse = evolution.rabi_and_detuning_pulses(value_rad_per_us)
    propagate_schrodinger(
        state,
        evolution.end_time_us,
        start_time_us=evolution.start_time_us,
        rabi_pulse=rabi_pulse,
        detuning_pulse=detuning_pulse,
        interaction=interaction,
        tolerance=evolution.tolerance,
    )

    if observable is not None:
        result = observable_expectation(state, observable)
    else:
        result = target_state_contrast(state, target_state)

    if not math.isfinite(result):
        logger.debug("Non-finite expectation value at %s = %s", evolution.varied_parameter.value, value_rad_per_us)
        return math.nan
    return result


def evf(value_rad_per_us: RationalLike, evolution: "Evolution", **kwargs) -> float:
    """
    Expectation-value function: the evolution's value at one parameter value.
    """
    return evolution(value_rad_per_us, **kwargs)
