"""
Sparse Multivariate Polynomials over a Prime Field.

This is the polynomial engine behind the Sumcheck protocol. A polynomial
is stored sparsely as a map from exponent tuples to coefficients:

    f(x1, x2, x3) = 2·x1³ + x1·x3 + x2·x3

is stored as

    {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1}

Key Operations:
    - partial_eval: Fix some variables to field values, keeping the rest free
    - boolean_sum: Sum out the LAST variable over {0, 1}
    - reduce_to: Repeat boolean_sum until only k variables remain
    - add: Term-wise modular sum of two polynomials

How Sumcheck uses these:
    The prover's round-j message is

        g_j(X_j) = Σ f(r_1, ..., r_{j-1}, X_j, x_{j+1}, ..., x_n)

    over all boolean x_{j+1}, ..., x_n. That is exactly
    ``f.partial_eval(fixed).reduce_to(1)``.

Zero coefficients:
    Terms whose coefficient reduces to 0 are dropped on every operation.
    The representation is therefore canonical, and two polynomials that are
    mathematically equal always compare equal with ``==``.
"""

from __future__ import annotations
from itertools import product
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import (
    ArityMismatch,
    DuplicateAssignment,
    IncompatibleOperands,
    IndexOutOfRange,
    InvalidFieldElement,
)
from .field import modular_pow, validate_modulus


Exponents = Tuple[int, ...]
Assignment = Union[Mapping[int, int], Iterable[Tuple[int, int]]]

# Largest exponent that fits a native int64 matrix cell
_INT64_MAX = int(np.iinfo(np.int64).max)


class Polynomial:
    """
    A sparse multivariate polynomial over Z_p.

    Attributes:
        num_vars: Number of variables (length of every exponent tuple)
        modulus: Prime modulus of the coefficient field
        terms: Read-only view of the exponent-tuple → coefficient map

    Example:
        >>> f = Polynomial(3, 97, {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1})
        >>> f.degree_in_var(0)
        3
        >>> f.hypercube_sum()
        12
    """

    def __init__(self, num_vars: int, modulus: int,
                 terms: Optional[Mapping[Sequence[int], int]] = None):
        """
        Create a polynomial.

        Args:
            num_vars: Number of variables (>= 0)
            modulus: Prime modulus
            terms: Optional initial terms, fed through ``add_term``

        Raises:
            InvalidModulus: If modulus is not a prime > 1
            ArityMismatch: If num_vars is negative or a term has wrong length
        """
        validate_modulus(modulus)
        if isinstance(num_vars, bool) or not isinstance(num_vars, int) or num_vars < 0:
            raise ArityMismatch("num_vars must be a non-negative integer",
                                {"num_vars": num_vars})

        self._num_vars = num_vars
        self._modulus = modulus
        self._terms: Dict[Exponents, int] = {}

        if terms:
            for exponents, coefficient in terms.items():
                self.add_term(exponents, coefficient)

    @classmethod
    def _from_canonical(cls, num_vars: int, modulus: int,
                        terms: Dict[Exponents, int]) -> Polynomial:
        """Wrap an already-validated term map, dropping zero entries."""
        poly = cls.__new__(cls)
        poly._num_vars = num_vars
        poly._modulus = modulus
        poly._terms = {exps: c for exps, c in terms.items() if c != 0}
        return poly

    @classmethod
    def constant_poly(cls, value: int, modulus: int, num_vars: int = 0) -> Polynomial:
        """The constant polynomial ``value`` in ``num_vars`` variables."""
        return cls(num_vars, modulus, {(0,) * num_vars: value})

    # -------------------------------------------------------------------------
    # Basic properties
    # -------------------------------------------------------------------------

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def modulus(self) -> int:
        return self._modulus

    @property
    def terms(self) -> Mapping[Exponents, int]:
        """Read-only view of the stored terms."""
        return MappingProxyType(self._terms)

    @property
    def num_terms(self) -> int:
        return len(self._terms)

    def is_zero(self) -> bool:
        return not self._terms

    def copy(self) -> Polynomial:
        return Polynomial._from_canonical(self._num_vars, self._modulus, dict(self._terms))

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_term(self, exponents: Sequence[int], coefficient: int) -> None:
        """
        Add coefficient · x^exponents to this polynomial in place.

        This is the builder used while assembling a polynomial from input;
        every other operation returns a new instance.

        Args:
            exponents: One non-negative exponent per variable
            coefficient: Any integer, reduced modulo ``modulus``

        Raises:
            ArityMismatch: If len(exponents) != num_vars or an exponent
                           is negative
        """
        key = tuple(exponents)
        if len(key) != self._num_vars:
            raise ArityMismatch(
                "Number of exponents must match the number of variables",
                {"expected": self._num_vars, "got": len(key)},
            )
        for exp in key:
            if isinstance(exp, bool) or not isinstance(exp, int) or exp < 0:
                raise ArityMismatch("Exponents must be non-negative integers",
                                    {"exponents": key})

        value = (self._terms.get(key, 0) + coefficient) % self._modulus
        if value:
            self._terms[key] = value
        else:
            self._terms.pop(key, None)

    # -------------------------------------------------------------------------
    # Degree queries
    # -------------------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) \
                or not 0 <= index < self._num_vars:
            raise IndexOutOfRange("Variable index out of bounds",
                                  {"index": index, "num_vars": self._num_vars})

    def exponent_matrix(self) -> np.ndarray:
        """
        Exponents as a (num_terms, num_vars) integer matrix.

        Row i is the exponent tuple of the i-th stored term. Exponents too
        large for int64 switch the matrix to ``dtype=object`` so they are
        kept as exact Python integers.
        """
        if not self._terms:
            return np.zeros((0, self._num_vars), dtype=np.int64)
        rows = list(self._terms)
        largest = max((max(row) for row in rows if row), default=0)
        dtype = np.int64 if largest <= _INT64_MAX else object
        return np.array(rows, dtype=dtype).reshape(len(rows), self._num_vars)

    def degree_in_var(self, index: int) -> int:
        """
        Maximum exponent of variable ``index`` over all stored terms.

        Returns 0 for the zero polynomial.

        Raises:
            IndexOutOfRange: If index is not in [0, num_vars)
        """
        self._check_index(index)
        if not self._terms:
            return 0
        return int(self.exponent_matrix()[:, index].max())

    def degrees(self) -> List[int]:
        """Per-variable degrees, in variable order."""
        if not self._terms:
            return [0] * self._num_vars
        return [int(d) for d in self.exponent_matrix().max(axis=0)]

    # -------------------------------------------------------------------------
    # Algebra
    # -------------------------------------------------------------------------

    def _check_compatible(self, other: Polynomial) -> None:
        if not isinstance(other, Polynomial):
            raise IncompatibleOperands("Can only combine with another Polynomial",
                                       {"other": type(other).__name__})
        if self._num_vars != other._num_vars:
            raise IncompatibleOperands(
                "Polynomials must have the same number of variables",
                {"left": self._num_vars, "right": other._num_vars},
            )
        if self._modulus != other._modulus:
            raise IncompatibleOperands(
                "Polynomials must be over the same finite field",
                {"left": self._modulus, "right": other._modulus},
            )

    def add(self, other: Polynomial) -> Polynomial:
        """
        Term-wise sum of two polynomials.

        Raises:
            IncompatibleOperands: If num_vars or modulus differ
        """
        self._check_compatible(other)
        result = dict(self._terms)
        for exps, coeff in other._terms.items():
            result[exps] = (result.get(exps, 0) + coeff) % self._modulus
        return Polynomial._from_canonical(self._num_vars, self._modulus, result)

    def __add__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.add(other)

    def partial_eval(self, assignment: Assignment) -> Polynomial:
        """
        Fix some variables to field values.

        For every term, each assigned variable contributes value^exp to the
        coefficient and is removed from the exponent tuple. The remaining
        (free) variables keep their relative order, so fixing x1 = 3 in
        f(x1, x2, x3) yields a polynomial in (x2, x3) renumbered as (x1, x2).

        Example:
            >>> f = Polynomial(2, 23, {(1, 0): 1, (0, 1): 1})  # x1 + x2
            >>> dict(f.partial_eval([(0, 3)]).terms)  # 3 + x2
            {(0,): 3, (1,): 1}

        Args:
            assignment: Mapping or iterable of (variable_index, value) pairs.
                        Values must be field elements in [0, modulus).

        Returns:
            New polynomial in num_vars - len(assignment) variables

        Raises:
            IndexOutOfRange: If a variable index is not in [0, num_vars)
            DuplicateAssignment: If a variable index appears twice
            InvalidFieldElement: If a value is not in [0, modulus)
        """
        pairs = assignment.items() if isinstance(assignment, Mapping) else assignment

        fixed: Dict[int, int] = {}
        for index, value in pairs:
            self._check_index(index)
            if index in fixed:
                raise DuplicateAssignment("Variable assigned more than once",
                                          {"index": index})
            if isinstance(value, bool) or not isinstance(value, int) \
                    or not 0 <= value < self._modulus:
                raise InvalidFieldElement("Assigned value must be a field element",
                                          {"index": index, "value": value,
                                           "modulus": self._modulus})
            fixed[index] = value

        if not fixed:
            return self.copy()

        free = [i for i in range(self._num_vars) if i not in fixed]
        new_terms: Dict[Exponents, int] = {}

        for exponents, coeff in self._terms.items():
            new_coeff = coeff
            for index, value in fixed.items():
                new_coeff = (new_coeff * modular_pow(value, exponents[index],
                                                     self._modulus)) % self._modulus
            reduced = tuple(exponents[i] for i in free)
            new_terms[reduced] = (new_terms.get(reduced, 0) + new_coeff) % self._modulus

        return Polynomial._from_canonical(len(free), self._modulus, new_terms)

    def boolean_sum(self) -> Polynomial:
        """
        Sum out the last variable over {0, 1}.

        f(x1, ..., x_{n-1}, 0) + f(x1, ..., x_{n-1}, 1)

        Raises:
            IndexOutOfRange: If there is no variable left to sum out
        """
        last = self._num_vars - 1
        return self.partial_eval({last: 0}).add(self.partial_eval({last: 1}))

    def reduce_to(self, num_free: int) -> Polynomial:
        """
        Apply ``boolean_sum`` until exactly ``num_free`` variables remain.

        ``f.reduce_to(0)`` is the sum of f over the whole hypercube.
        """
        if not 0 <= num_free <= self._num_vars:
            raise IndexOutOfRange("Cannot reduce to that many free variables",
                                  {"num_free": num_free, "num_vars": self._num_vars})
        current = self
        while current.num_vars > num_free:
            current = current.boolean_sum()
        return current

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def constant(self) -> int:
        """
        Value of a zero-variable polynomial.

        Raises:
            ArityMismatch: If any variable is still free
        """
        if self._num_vars != 0:
            raise ArityMismatch("Polynomial still has free variables",
                                {"num_vars": self._num_vars})
        return self._terms.get((), 0)

    def evaluate(self, point: Sequence[int]) -> int:
        """Evaluate at a full point (one value per variable)."""
        if len(point) != self._num_vars:
            raise ArityMismatch("Point must assign every variable",
                                {"expected": self._num_vars, "got": len(point)})
        return self.partial_eval(list(enumerate(point))).constant()

    def __call__(self, *point: int) -> int:
        return self.evaluate(point)

    def hypercube_sum(self) -> int:
        """
        Brute-force Σ f(x) over x ∈ {0,1}^n.

        Exponential in num_vars; useful as an independent check of the
        claimed sum on small inputs.
        """
        total = 0
        for point in product((0, 1), repeat=self._num_vars):
            total = (total + self.evaluate(point)) % self._modulus
        return total

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return (self._num_vars == other._num_vars
                and self._modulus == other._modulus
                and self._terms == other._terms)

    __hash__ = None  # mutable through add_term

    def __repr__(self) -> str:
        terms = {k: self._terms[k] for k in sorted(self._terms, reverse=True)}
        return f"Polynomial(num_vars={self._num_vars}, modulus={self._modulus}, terms={terms})"

    def __str__(self) -> str:
        if not self._terms:
            return "0"

        parts = []
        for exponents in sorted(self._terms, reverse=True):
            coeff = self._terms[exponents]
            factors = []
            for i, exp in enumerate(exponents):
                if exp == 1:
                    factors.append(f"x{i + 1}")
                elif exp > 1:
                    factors.append(f"x{i + 1}^{exp}")
            if not factors:
                parts.append(str(coeff))
            elif coeff == 1:
                parts.append("*".join(factors))
            else:
                parts.append(f"{coeff}*" + "*".join(factors))
        return " + ".join(parts)
