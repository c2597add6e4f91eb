"""Shared fixtures."""

import pytest

from sumcheck.common.polynomial import Polynomial


MOD = 97


@pytest.fixture
def cubic_poly():
    """f(x1, x2, x3) = 2·x1³ + x1·x3 + x2·x3 over Z_97; Σ over {0,1}³ is 12."""
    return Polynomial(3, MOD, {(3, 0, 0): 2, (1, 0, 1): 1, (0, 1, 1): 1})
