from typing import List

import numpy as np
from numpy.typing import ArrayLike, NDArray
from qutip import Qobj, basis, qeye, sigmax, tensor
from scipy.spatial.distance import pdist, squareform

from rydsim_deriv.constants import C6_RB70S_RAD_UM6_PER_US


class RydbergOperators:
    """
    Operators on N two-level atoms, with |1> the Rydberg state. Atom j is the j-th tensor factor.
    All operators are returned as dense complex arrays.
    """

    @staticmethod
    def _single_atom_operator(operator: Qobj, atom: int, number_of_atoms: int) -> Qobj:
        factors: List[Qobj] = [qeye(2)] * number_of_atoms
        factors[atom] = operator
        return tensor(factors)

    @staticmethod
    def _sum_over_atoms(operator: Qobj, number_of_atoms: int) -> NDArray:
        assert number_of_atoms >= 1
        total = RydbergOperators._single_atom_operator(operator, 0, number_of_atoms)
        for atom in range(1, number_of_atoms):
            total += RydbergOperators._single_atom_operator(operator, atom, number_of_atoms)
        return total.full()

    @staticmethod
    def _rydberg_projector() -> Qobj:
        return basis(2, 1).proj()

    @staticmethod
    def pauli_x_sum(number_of_atoms: int) -> NDArray:
        return RydbergOperators._sum_over_atoms(sigmax(), number_of_atoms)

    @staticmethod
    def rydberg_number_sum(number_of_atoms: int) -> NDArray:
        return RydbergOperators._sum_over_atoms(RydbergOperators._rydberg_projector(), number_of_atoms)

    @staticmethod
    def van_der_waals_interaction(
        positions_um: ArrayLike, c6_rad_um6_per_us: float = C6_RB70S_RAD_UM6_PER_US
    ) -> NDArray:
        """
        Rydberg interaction sum_{i<j} C6 / |r_i - r_j|^6 n_i n_j in rad/us.

        Args:
            positions_um: Atom positions, one row per atom
            c6_rad_um6_per_us: van der Waals coefficient
        """
        positions = np.atleast_2d(np.asarray(positions_um, dtype=float))
        number_of_atoms = positions.shape[0]
        dimension = 2**number_of_atoms
        interaction = np.zeros((dimension, dimension), dtype=complex)
        projector = RydbergOperators._rydberg_projector()
        distances_um = squareform(pdist(positions))

        for i in range(number_of_atoms):
            n_i = RydbergOperators._single_atom_operator(projector, i, number_of_atoms)
            for j in range(i + 1, number_of_atoms):
                distance_um = distances_um[i, j]
                if distance_um == 0:
                    raise ValueError(f"Atoms {i} and {j} are at the same position")
                n_j = RydbergOperators._single_atom_operator(projector, j, number_of_atoms)
                interaction += c6_rad_um6_per_us / distance_um**6 * (n_i * n_j).full()
        return interaction

    @staticmethod
    def number_of_atoms(dimension: int) -> int:
        number_of_atoms = dimension.bit_length() - 1
        assert dimension >= 2 and 2**number_of_atoms == dimension, f"Dimension {dimension} is not a power of two"
        return number_of_atoms
