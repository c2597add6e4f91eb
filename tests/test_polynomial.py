"""Tests for sparse multivariate polynomials."""

import random
from itertools import product

import numpy as np
import pytest

from sumcheck.common.errors import (
    ArityMismatch,
    DuplicateAssignment,
    IncompatibleOperands,
    IndexOutOfRange,
    InvalidFieldElement,
    InvalidModulus,
)
from sumcheck.common.polynomial import Polynomial


def brute_force_eval(poly, point):
    """Σ c · Π x_i^e_i computed straight from the term map."""
    total = 0
    for exponents, coeff in poly.terms.items():
        term = coeff
        for x, e in zip(point, exponents):
            term *= x ** e
        total += term
    return total % poly.modulus


def random_poly(rng, num_vars, modulus, num_terms=5, max_exp=3):
    poly = Polynomial(num_vars, modulus)
    for _ in range(num_terms):
        exps = tuple(rng.randrange(max_exp + 1) for _ in range(num_vars))
        poly.add_term(exps, rng.randrange(-modulus, modulus))
    return poly


# --- Construction ---------------------------------------------------------

def test_construct_from_terms(cubic_poly):
    assert cubic_poly.num_vars == 3
    assert cubic_poly.modulus == 97
    assert dict(cubic_poly.terms) == {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1}
    assert cubic_poly.num_terms == 3


@pytest.mark.parametrize("modulus", [0, 1, 4, 17617])
def test_construct_rejects_bad_modulus(modulus):
    with pytest.raises(InvalidModulus):
        Polynomial(2, modulus)


def test_construct_rejects_negative_num_vars():
    with pytest.raises(ArityMismatch):
        Polynomial(-1, 97)


def test_add_term_reduces_coefficient():
    poly = Polynomial(1, 5)
    poly.add_term((1,), -1)
    poly.add_term((0,), 12)
    assert dict(poly.terms) == {(1,): 4, (0,): 2}


def test_add_term_accumulates():
    poly = Polynomial(2, 11)
    poly.add_term([1, 1], 7)
    poly.add_term([1, 1], 6)
    assert dict(poly.terms) == {(1, 1): 2}


def test_add_term_arity_mismatch():
    poly = Polynomial(2, 11)
    with pytest.raises(ArityMismatch):
        poly.add_term((1,), 1)
    with pytest.raises(ArityMismatch):
        poly.add_term((1, 0, 0), 1)


def test_add_term_rejects_negative_exponent():
    poly = Polynomial(2, 11)
    with pytest.raises(ArityMismatch):
        poly.add_term((1, -1), 1)


def test_terms_view_is_read_only(cubic_poly):
    with pytest.raises(TypeError):
        cubic_poly.terms[(0, 0, 0)] = 1


# --- Zero coefficients are pruned -----------------------------------------
# Terms that cancel to 0 are removed from the map, so equality is
# mathematical equality rather than "same keys were ever touched".

def test_cancelling_terms_are_pruned():
    poly = Polynomial(2, 7, {(1, 0): 3})
    poly.add_term((0, 1), 4)
    poly.add_term((0, 1), 3)  # 4 + 3 ≡ 0
    assert dict(poly.terms) == {(1, 0): 3}
    assert poly == Polynomial(2, 7, {(1, 0): 3})


def test_zero_coefficient_input_is_not_stored():
    poly = Polynomial(1, 7, {(2,): 0, (1,): 14})
    assert poly.is_zero()
    assert poly == Polynomial(1, 7)


def test_add_prunes_cancelling_terms():
    a = Polynomial(1, 7, {(1,): 3, (0,): 1})
    b = Polynomial(1, 7, {(1,): 4})
    assert dict(a.add(b).terms) == {(0,): 1}


def test_partial_eval_prunes_zero_results():
    # x1·x2 at x2 = 0 vanishes entirely
    poly = Polynomial(2, 7, {(1, 1): 5})
    result = poly.partial_eval({1: 0})
    assert result.is_zero()
    assert result == Polynomial(1, 7)


# --- Degree ---------------------------------------------------------------

def test_degree_in_var(cubic_poly):
    assert cubic_poly.degree_in_var(0) == 3
    assert cubic_poly.degree_in_var(1) == 1
    assert cubic_poly.degree_in_var(2) == 1
    assert cubic_poly.degrees() == [3, 1, 1]


def test_degree_of_empty_polynomial():
    poly = Polynomial(3, 97)
    assert poly.degree_in_var(1) == 0
    assert poly.degrees() == [0, 0, 0]


@pytest.mark.parametrize("index", [3, 10, -1])
def test_degree_index_out_of_range(cubic_poly, index):
    with pytest.raises(IndexOutOfRange):
        cubic_poly.degree_in_var(index)


def test_degree_ignores_cancelled_terms():
    poly = Polynomial(1, 5, {(4,): 2, (1,): 1})
    poly.add_term((4,), 3)
    assert poly.degree_in_var(0) == 1


def test_exponent_matrix(cubic_poly):
    matrix = cubic_poly.exponent_matrix()
    assert matrix.shape == (3, 3)
    assert sorted(map(tuple, matrix.tolist())) == [(0, 1, 1), (1, 0, 1), (3, 0, 0)]
    assert Polynomial(2, 5).exponent_matrix().shape == (0, 2)
    assert isinstance(matrix, np.ndarray)


def test_degree_beyond_int64():
    poly = Polynomial(1, 97, {(2**63,): 1})
    assert poly.degree_in_var(0) == 2**63
    assert poly.exponent_matrix().dtype == object


def test_degrees_with_huge_exponents():
    poly = Polynomial(2, 97, {(2**64 - 1, 1): 3, (0, 1): 1, (5, 0): 2})
    assert poly.degrees() == [2**64 - 1, 1]
    assert poly.evaluate([3, 1]) == (3 * pow(3, 2**64 - 1, 97) + 1 + 2 * 3**5) % 97


def test_small_exponents_stay_int64(cubic_poly):
    assert cubic_poly.exponent_matrix().dtype == np.int64


# --- Partial evaluation ---------------------------------------------------

def test_partial_eval_fix_first_variable():
    # x1 + x2 at x1 = 3  →  3 + x2
    poly = Polynomial(2, 23, {(1, 0): 1, (0, 1): 1})
    result = poly.partial_eval([(0, 3)])
    assert result.num_vars == 1
    assert dict(result.terms) == {(0,): 3, (1,): 1}
    assert result == Polynomial(1, 23, {(0,): 3, (1,): 1})


def test_partial_eval_keeps_free_variable_order():
    # x1·x2²·x3³ at x2 = 2  →  4·x1·x3³ in (x1, x3)
    poly = Polynomial(3, 97, {(1, 2, 3): 1})
    result = poly.partial_eval({1: 2})
    assert dict(result.terms) == {(1, 3): 4}


def test_partial_eval_merges_colliding_terms():
    # x1·x2 + x2 at x1 = 5  →  6·x2
    poly = Polynomial(2, 97, {(1, 1): 1, (0, 1): 1})
    assert dict(poly.partial_eval({0: 5}).terms) == {(1,): 6}


@pytest.mark.parametrize("value", [-1, 7, 15, 2.0, True])
def test_partial_eval_rejects_values_outside_field(value):
    poly = Polynomial(1, 7, {(1,): 1})
    with pytest.raises(InvalidFieldElement):
        poly.partial_eval({0: value})


def test_evaluate_rejects_values_outside_field(cubic_poly):
    with pytest.raises(InvalidFieldElement) as excinfo:
        cubic_poly.evaluate([1, 97, 0])
    assert excinfo.value.context["index"] == 1


def test_partial_eval_accepts_field_boundaries():
    poly = Polynomial(1, 7, {(1,): 1})
    assert poly.partial_eval({0: 0}).constant() == 0
    assert poly.partial_eval({0: 6}).constant() == 6


def test_partial_eval_empty_assignment_is_a_copy(cubic_poly):
    result = cubic_poly.partial_eval([])
    assert result == cubic_poly
    assert result is not cubic_poly


def test_partial_eval_does_not_mutate(cubic_poly):
    before = dict(cubic_poly.terms)
    cubic_poly.partial_eval({0: 2, 2: 5})
    assert dict(cubic_poly.terms) == before
    assert cubic_poly.num_vars == 3


def test_partial_eval_duplicate_assignment(cubic_poly):
    with pytest.raises(DuplicateAssignment):
        cubic_poly.partial_eval([(0, 1), (0, 2)])


@pytest.mark.parametrize("index", [3, -1])
def test_partial_eval_index_out_of_range(cubic_poly, index):
    with pytest.raises(IndexOutOfRange):
        cubic_poly.partial_eval([(index, 1)])


def test_full_assignment_matches_brute_force(cubic_poly):
    for point in [(0, 0, 0), (1, 1, 1), (2, 3, 6), (96, 50, 13)]:
        result = cubic_poly.partial_eval(list(enumerate(point)))
        assert result.num_vars == 0
        assert result.constant() == brute_force_eval(cubic_poly, point)
    # 2·8 + 2·6 + 3·6
    assert cubic_poly.evaluate((2, 3, 6)) == 46


def test_full_assignment_matches_brute_force_random():
    rng = random.Random(7)
    for _ in range(25):
        num_vars = rng.randrange(1, 5)
        poly = random_poly(rng, num_vars, 101)
        point = [rng.randrange(101) for _ in range(num_vars)]
        assert poly.evaluate(point) == brute_force_eval(poly, point)
        assert poly(*point) == brute_force_eval(poly, point)


def test_evaluate_arity_mismatch(cubic_poly):
    with pytest.raises(ArityMismatch):
        cubic_poly.evaluate([1, 2])


def test_constant_requires_no_free_variables(cubic_poly):
    with pytest.raises(ArityMismatch):
        cubic_poly.constant()
    assert Polynomial(0, 5).constant() == 0
    assert Polynomial.constant_poly(12, 5).constant() == 2


# --- Boolean sum ----------------------------------------------------------

def test_boolean_sum_example():
    # 2x1 + 3x2 (mod 5): x2=0 gives 2x1, x2=1 gives 2x1 + 3
    poly = Polynomial(2, 5, {(1, 0): 2, (0, 1): 3})
    result = poly.boolean_sum()
    assert result.num_vars == 1
    assert dict(result.terms) == {(1,): 4, (0,): 3}


def test_boolean_sum_equals_two_partial_evals(cubic_poly):
    last = cubic_poly.num_vars - 1
    expected = cubic_poly.partial_eval({last: 0}) + cubic_poly.partial_eval({last: 1})
    result = cubic_poly.boolean_sum()
    assert result == expected
    assert result.num_vars == cubic_poly.num_vars - 1


def test_boolean_sum_of_constant_fails():
    with pytest.raises(IndexOutOfRange):
        Polynomial.constant_poly(3, 5).boolean_sum()


def test_reduce_to_zero_is_hypercube_sum(cubic_poly):
    assert cubic_poly.reduce_to(0).constant() == 12
    assert cubic_poly.hypercube_sum() == 12


def test_reduce_to_random_matches_brute_force():
    rng = random.Random(11)
    for _ in range(20):
        num_vars = rng.randrange(1, 5)
        poly = random_poly(rng, num_vars, 31)
        expected = sum(brute_force_eval(poly, p) for p in product((0, 1), repeat=num_vars)) % 31
        assert poly.reduce_to(0).constant() == expected


def test_reduce_to_one_gives_first_round_message(cubic_poly):
    # g_1(X) = 8X³ + 2X + 1
    assert cubic_poly.reduce_to(1) == Polynomial(1, 97, {(3,): 8, (1,): 2, (0,): 1})


def test_reduce_to_out_of_range(cubic_poly):
    with pytest.raises(IndexOutOfRange):
        cubic_poly.reduce_to(4)
    with pytest.raises(IndexOutOfRange):
        cubic_poly.reduce_to(-1)


# --- Addition -------------------------------------------------------------

def test_add_example():
    a = Polynomial(2, 11, {(1, 1): 4, (0, 0): 3})
    b = Polynomial(2, 11, {(1, 1): 5, (0, 1): 2})
    result = a.add(b)
    assert dict(result.terms) == {(1, 1): 9, (0, 0): 3, (0, 1): 2}
    assert a + b == result


def test_add_does_not_mutate_operands():
    a = Polynomial(1, 11, {(1,): 4})
    b = Polynomial(1, 11, {(1,): 5})
    a.add(b)
    assert dict(a.terms) == {(1,): 4}
    assert dict(b.terms) == {(1,): 5}


def test_add_commutative_and_associative():
    rng = random.Random(5)
    for _ in range(20):
        a, b, c = (random_poly(rng, 3, 13) for _ in range(3))
        assert a + b == b + a
        assert (a + b) + c == a + (b + c)


def test_add_incompatible_num_vars():
    with pytest.raises(IncompatibleOperands):
        Polynomial(2, 11).add(Polynomial(3, 11))


def test_add_incompatible_modulus():
    with pytest.raises(IncompatibleOperands):
        Polynomial(2, 11).add(Polynomial(2, 13))


def test_add_non_polynomial():
    with pytest.raises(TypeError):
        Polynomial(1, 11) + 1


# --- Value semantics ------------------------------------------------------

def test_equality_considers_field_and_arity():
    assert Polynomial(1, 11, {(1,): 1}) != Polynomial(1, 13, {(1,): 1})
    assert Polynomial(1, 11) != Polynomial(2, 11)
    assert Polynomial(1, 11) != "0"


def test_str(cubic_poly):
    assert str(cubic_poly) == "2*x1^3 + x1*x3 + x2*x3"
    assert str(Polynomial(2, 5)) == "0"
    assert str(Polynomial(1, 5, {(0,): 3, (1,): 1})) == "x1 + 3"


def test_repr_round_trips_terms(cubic_poly):
    text = repr(cubic_poly)
    assert text.startswith("Polynomial(num_vars=3, modulus=97")
    assert "(3, 0, 0): 2" in text


def test_copy_is_independent(cubic_poly):
    clone = cubic_poly.copy()
    clone.add_term((0, 0, 0), 5)
    assert clone != cubic_poly
