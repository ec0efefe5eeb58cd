"""
State Vector
============

Dense amplitude array for an n-qubit register.

Index convention: basis state |b_{n-1} ... b_1 b_0> lives at index
sum(b_i << i), i.e. bit i of the index is qubit i.

Gate application pairs every index whose target bit is 0 with the
partner index that differs only in that bit, then applies the 2x2
matrix to each pair at once (vectorised over all pairs).
"""

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from ..exceptions import FrozenStateError, QubitIndexError, ShapeError
from .complex_utils import Complex, Number

logger = logging.getLogger(__name__)

# Below this squared norm a two-level pair is treated as degenerate
DEGENERATE_NORM2 = 1e-12


class StateVector:
    """
    Amplitudes of an n-qubit register.

    The norm is 1 after every unitary application. ``initialize_qubit``
    and ``collapse`` renormalise explicitly.

    A frozen vector (see ``freeze``) is a read-only snapshot: any mutating
    call raises ``FrozenStateError``. ``copy`` always returns a writable
    vector.
    """

    def __init__(self, n_qubits: int, amplitudes: Optional[np.ndarray] = None):
        if n_qubits < 1:
            raise ShapeError(f"A state vector needs at least one qubit, got {n_qubits}")
        self.n_qubits = int(n_qubits)
        dim = 1 << self.n_qubits

        if amplitudes is None:
            self.amplitudes = np.zeros(dim, dtype=np.complex128)
            self.amplitudes[0] = 1.0
        else:
            amplitudes = np.asarray(amplitudes, dtype=np.complex128)
            if amplitudes.shape != (dim,):
                raise ShapeError(
                    f"Expected {dim} amplitudes for {self.n_qubits} qubits, "
                    f"got shape {amplitudes.shape}")
            self.amplitudes = amplitudes.copy()

        # Index pairs (bit clear, bit set) per qubit
        indices = np.arange(dim)
        self._pairs = []
        for q in range(self.n_qubits):
            bit = 1 << q
            low = indices[(indices & bit) == 0]
            self._pairs.append((low, low | bit))

    @classmethod
    def zero(cls, n_qubits: int) -> 'StateVector':
        """All-zero basis state |0...0>"""
        return cls(n_qubits)

    @property
    def dimension(self) -> int:
        return self.amplitudes.shape[0]

    @property
    def is_frozen(self) -> bool:
        return not self.amplitudes.flags.writeable

    def freeze(self) -> 'StateVector':
        """Make this vector read-only in place and return it"""
        self.amplitudes.setflags(write=False)
        return self

    def copy(self) -> 'StateVector':
        new = StateVector.__new__(StateVector)
        new.n_qubits = self.n_qubits
        new.amplitudes = self.amplitudes.copy()
        new._pairs = self._pairs  # index tables are never mutated
        return new

    # =========================================================================
    # Queries
    # =========================================================================

    def _check_qubit(self, qubit: int) -> int:
        if not 0 <= qubit < self.n_qubits:
            raise QubitIndexError(
                f"Qubit index {qubit} out of range for {self.n_qubits} qubits")
        return int(qubit)

    def _require_writable(self):
        if self.is_frozen:
            raise FrozenStateError("State snapshot is read-only; copy() it first")

    def probabilities(self) -> np.ndarray:
        return np.abs(self.amplitudes) ** 2

    def norm(self) -> float:
        return float(np.sqrt(np.sum(self.probabilities())))

    def is_normalized(self, tol: float = 1e-9) -> bool:
        return abs(float(np.sum(self.probabilities())) - 1.0) <= tol

    def amplitude(self, index: int) -> Complex:
        """Amplitude of a single basis state"""
        if not 0 <= index < self.dimension:
            raise ShapeError(f"Basis index {index} out of range for dimension {self.dimension}")
        return Complex.from_builtin(self.amplitudes[index])

    def probability_one(self, qubit: int) -> float:
        """
        Marginal probability of ``qubit`` reading 1.

        Non-collapsing: the vector is left untouched.
        """
        _, high = self._pairs[self._check_qubit(qubit)]
        p1 = float(np.sum(np.abs(self.amplitudes[high]) ** 2))
        return min(max(p1, 0.0), 1.0)

    def reduced_state(self, qubit: int) -> Tuple[complex, complex]:
        """
        Normalised (|0>, |1>) coefficients of one qubit.

        Coefficients are the summed amplitudes of each half of the index
        space. If those cancel to zero, the marginal magnitudes
        (sqrt(p0), sqrt(p1)) are returned instead.
        """
        low, high = self._pairs[self._check_qubit(qubit)]
        a0 = complex(np.sum(self.amplitudes[low]))
        a1 = complex(np.sum(self.amplitudes[high]))
        norm2 = abs(a0) ** 2 + abs(a1) ** 2
        if norm2 < DEGENERATE_NORM2:
            p1 = self.probability_one(qubit)
            return complex(np.sqrt(1.0 - p1)), complex(np.sqrt(p1))
        norm = np.sqrt(norm2)
        return a0 / norm, a1 / norm

    def qubit_amplitude(self, qubit: int) -> Complex:
        """|0> coefficient of the qubit's reduced state"""
        return Complex.from_builtin(self.reduced_state(qubit)[0])

    # =========================================================================
    # Mutations
    # =========================================================================

    def apply_single_qubit(self, matrix: np.ndarray, target: int):
        """Apply a 2x2 unitary to ``target``"""
        self._require_writable()
        low, high = self._pairs[self._check_qubit(target)]
        a = self.amplitudes[low]
        b = self.amplitudes[high]
        self.amplitudes[low] = matrix[0, 0] * a + matrix[0, 1] * b
        self.amplitudes[high] = matrix[1, 0] * a + matrix[1, 1] * b

    def apply_cnot(self, control: int, target: int):
        """Swap target |0>/|1> amplitudes wherever the control bit is 1"""
        self._require_writable()
        control = self._check_qubit(control)
        target = self._check_qubit(target)
        if control == target:
            raise QubitIndexError(f"CNOT control and target must differ, both are {control}")

        low, high = self._pairs[target]
        mask = (low >> control) & 1 == 1
        low, high = low[mask], high[mask]
        swapped = self.amplitudes[low].copy()
        self.amplitudes[low] = self.amplitudes[high]
        self.amplitudes[high] = swapped

    def initialize_qubit(self, qubit: int, a0: Number, a1: Number):
        """
        Force ``qubit`` into the state (a0, a1) and renormalise.

        The rest of the register keeps, for every partner pair, the joint
        magnitude sqrt(|x_lo|^2 + |x_hi|^2) with the phase of the dominant
        member. For a qubit that is in a product state with the rest this
        is exactly rest (x) (a0, a1).

        A degenerate pair (|a0|^2 + |a1|^2 ~ 0) resets the qubit to |0>.
        """
        self._require_writable()
        low, high = self._pairs[self._check_qubit(qubit)]
        a0, a1 = complex(a0), complex(a1)

        pair_norm2 = abs(a0) ** 2 + abs(a1) ** 2
        if not np.isfinite(pair_norm2):
            raise ValueError(f"Non-finite amplitudes ({a0}, {a1}) for qubit {qubit}")
        if pair_norm2 < DEGENERATE_NORM2:
            logger.debug(f"Degenerate initialisation of qubit {qubit}; resetting to |0>")
            a0, a1 = 1.0 + 0j, 0j

        lo_amp = self.amplitudes[low]
        hi_amp = self.amplitudes[high]
        magnitude = np.sqrt(np.abs(lo_amp) ** 2 + np.abs(hi_amp) ** 2)
        dominant = np.where(np.abs(lo_amp) >= np.abs(hi_amp), lo_amp, hi_amp)
        phase = np.ones_like(dominant)
        nonzero = np.abs(dominant) > 0
        phase[nonzero] = dominant[nonzero] / np.abs(dominant[nonzero])
        rest = magnitude * phase

        self.amplitudes[low] = a0 * rest
        self.amplitudes[high] = a1 * rest
        self._renormalize()

    def collapse(self, qubit: int, outcome: int):
        """Project ``qubit`` onto ``outcome`` and renormalise"""
        self._require_writable()
        if outcome not in (0, 1):
            raise ValueError(f"Measurement outcome must be 0 or 1, got {outcome}")
        low, high = self._pairs[self._check_qubit(qubit)]
        keep, discard = (high, low) if outcome == 1 else (low, high)
        p = float(np.sum(np.abs(self.amplitudes[keep]) ** 2))
        if p <= 0.0:
            raise ValueError(f"Outcome {outcome} has zero probability on qubit {qubit}")

        # Divide by the kept weight itself; it may sit far below DEGENERATE_NORM2
        self.amplitudes[discard] = 0.0
        self.amplitudes[keep] /= np.sqrt(p)

    def measure(self, qubit: int, rng: Optional[np.random.Generator] = None) -> int:
        """
        Sample ``qubit`` and collapse the vector onto the result.

        Args:
            qubit: Qubit to measure
            rng: Random generator (process-wide default if None)

        Returns:
            1 if a uniform draw in [0, 1) falls below P(1), else 0
        """
        self._require_writable()
        rng = rng if rng is not None else default_rng()
        p1 = self.probability_one(qubit)
        outcome = 1 if rng.random() < p1 else 0
        self.collapse(qubit, outcome)
        return outcome

    def _renormalize(self):
        norm = np.sqrt(np.sum(np.abs(self.amplitudes) ** 2))
        if norm < np.sqrt(DEGENERATE_NORM2):
            raise ValueError("Cannot renormalise a zero state vector")
        self.amplitudes /= norm

    def __repr__(self) -> str:
        flag = ", frozen" if self.is_frozen else ""
        return f"StateVector(n_qubits={self.n_qubits}, norm={self.norm():.6f}{flag})"


_default_rng: Optional[np.random.Generator] = None


def default_rng() -> np.random.Generator:
    """Process-wide generator used when callers pass none"""
    global _default_rng
    if _default_rng is None:
        _default_rng = np.random.default_rng()
    return _default_rng


def basis_state(n_qubits: int, bits: Sequence[int]) -> StateVector:
    """Computational basis state with qubit i set to bits[i]"""
    if len(bits) != n_qubits:
        raise ShapeError(f"Expected {n_qubits} bits, got {len(bits)}")
    index = sum((int(b) & 1) << i for i, b in enumerate(bits))
    amplitudes = np.zeros(1 << n_qubits, dtype=np.complex128)
    amplitudes[index] = 1.0
    return StateVector(n_qubits, amplitudes)


__all__ = ['StateVector', 'basis_state', 'default_rng', 'DEGENERATE_NORM2']
