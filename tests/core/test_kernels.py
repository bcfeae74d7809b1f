"""
Tests for the Golub-Reinsch kernel phases.

Each phase preserves the factorization it is handed:
    - householder_bidiagonalize + accumulate: A = U B V^T, B upper bidiagonal
    - cancel / qr_sweep: B_old = U B_new V^T when U, V start at I
    - diagonalize: B = U diag(s) V^T with s >= 0
"""

import numpy as np
import pytest
import scipy.linalg as sla

from pysvd.core.compute.linalg import SVDStatus, golub_reinsch
from pysvd.core.compute.linalg.bidiagonal import (
    accumulate_left,
    accumulate_right,
    householder_bidiagonalize,
    sign_of,
)
from pysvd.core.compute.linalg.diagonalize import (
    SplitOutcome,
    cancel,
    converge,
    diagonalize,
    qr_sweep,
    split_test,
)
from pysvd.core.compute.linalg.status import StatusCode


def bidiagonal(d, e):
    """Dense upper bidiagonal matrix; e[i] sits at (i-1, i)."""
    d = np.asarray(d, dtype=float)
    e = np.asarray(e, dtype=float)
    return np.diag(d) + np.diag(e[1:], 1)


def reduce(A):
    """Run the Householder phase plus both accumulations on a copy of A."""
    m, n = A.shape
    work = A.copy()
    d = np.empty(n)
    e = np.zeros(n)
    anorm = householder_bidiagonalize(work, d, e)
    v = np.empty((n, n))
    accumulate_right(work, e, v)
    accumulate_left(work, d)
    return work, d, e, v, anorm


# ═══════════════════════════════════════════════════════════════════════
# sign_of
# ═══════════════════════════════════════════════════════════════════════


class TestSignOf:

    @pytest.mark.parametrize("a, b, expected", [
        (3.0, 2.0, 3.0),
        (-3.0, 2.0, 3.0),
        (3.0, -2.0, -3.0),
        (-3.0, -2.0, -3.0),
        (3.0, 0.0, 3.0),
    ])
    def test_magnitude_of_a_sign_of_b(self, a, b, expected):
        assert sign_of(a, b) == expected


# ═══════════════════════════════════════════════════════════════════════
# Householder bidiagonalization
# ═══════════════════════════════════════════════════════════════════════


class TestBidiagonalization:

    def test_superdiagonal_starts_at_zero(self, tall_matrix):
        _, _, e, _, _ = reduce(tall_matrix)
        assert e[0] == 0.0

    def test_preserves_singular_values(self, tall_matrix):
        _, d, e, _, _ = reduce(tall_matrix)
        np.testing.assert_allclose(
            sla.svdvals(bidiagonal(d, e)),
            sla.svdvals(tall_matrix),
            rtol=1e-12,
        )

    def test_anorm_is_max_row_sum(self, tall_matrix):
        _, d, e, _, anorm = reduce(tall_matrix)
        assert anorm == pytest.approx(np.max(np.abs(d) + np.abs(e)))

    def test_factors_reproduce_matrix(self, tall_matrix):
        U, d, e, V, _ = reduce(tall_matrix)
        np.testing.assert_allclose(
            U.T @ tall_matrix @ V, bidiagonal(d, e), atol=1e-12
        )

    def test_factors_orthonormal(self, square_matrix):
        U, _, _, V, _ = reduce(square_matrix)
        n = square_matrix.shape[1]
        np.testing.assert_allclose(U.T @ U, np.eye(n), atol=1e-12)
        np.testing.assert_allclose(V.T @ V, np.eye(n), atol=1e-12)

    def test_zero_column_gives_zero_diagonal(self):
        A = np.array([[0.0, 1.0], [0.0, 2.0], [0.0, 3.0]])
        U, d, e, V, _ = reduce(A)
        assert d[0] == 0.0
        np.testing.assert_allclose(U @ bidiagonal(d, e) @ V.T, A, atol=1e-14)


# ═══════════════════════════════════════════════════════════════════════
# Split test and cancellation
# ═══════════════════════════════════════════════════════════════════════


class TestSplitTest:

    def test_negligible_coupling_converged(self):
        d = [1.0, 2.0, 3.0]
        e = [0.0, 1.0, 1e-20]
        assert split_test(d, e, 4.0, 2) == (2, SplitOutcome.CONVERGED)

    def test_negligible_coupling_higher_up(self):
        d = [1.0, 2.0, 3.0]
        e = [0.0, 1e-20, 1.0]
        assert split_test(d, e, 4.0, 2) == (1, SplitOutcome.NEEDS_SHIFT)

    def test_negligible_predecessor_needs_cancellation(self):
        d = [1.0, 0.0, 3.0]
        e = [0.0, 1.0, 1.0]
        assert split_test(d, e, 4.0, 2) == (2, SplitOutcome.NEEDS_CANCELLATION)

    def test_scan_reaches_top(self):
        d = [1.0, 2.0, 3.0]
        e = [0.0, 1.0, 1.0]
        assert split_test(d, e, 4.0, 2) == (0, SplitOutcome.NEEDS_SHIFT)

    def test_single_element_converged(self):
        assert split_test([5.0], [0.0], 5.0, 0) == (0, SplitOutcome.CONVERGED)


class TestCancel:

    def test_chases_coupling_out(self):
        d = [1.0, 0.0, 3.0]
        e = [0.0, 1.0, 1.0]
        before = bidiagonal(d, e)
        u = np.eye(3)
        outcome = cancel(d, e, 4.0, 2, 2, u)
        assert outcome is SplitOutcome.CONVERGED
        assert e[2] == 0.0
        assert d[2] == pytest.approx(np.sqrt(10.0))
        np.testing.assert_allclose(u @ bidiagonal(d, e), before, atol=1e-13)

    def test_without_u(self):
        d = [1.0, 0.0, 3.0]
        e = [0.0, 1.0, 1.0]
        cancel(d, e, 4.0, 2, 2, None)
        assert e[2] == 0.0


class TestConverge:

    def test_negative_value_flips_v_column(self):
        d = [2.0, -3.0]
        v = np.eye(2)
        converge(d, 1, v)
        assert d[1] == 3.0
        np.testing.assert_array_equal(v[:, 1], [0.0, -1.0])
        np.testing.assert_array_equal(v[:, 0], [1.0, 0.0])

    def test_non_negative_untouched(self):
        d = [2.0, 0.0]
        v = np.eye(2)
        converge(d, 1, v)
        assert d[1] == 0.0
        np.testing.assert_array_equal(v, np.eye(2))


# ═══════════════════════════════════════════════════════════════════════
# QR sweep and full diagonalization
# ═══════════════════════════════════════════════════════════════════════


class TestQRSweep:

    def test_preserves_factorization(self):
        d = [3.0, 2.0, 1.0]
        e = [0.0, 0.5, 0.25]
        before = bidiagonal(d, e)
        u = np.eye(3)
        v = np.eye(3)
        qr_sweep(d, e, 0, 2, u, v)
        assert e[0] == 0.0
        np.testing.assert_allclose(u @ bidiagonal(d, e) @ v.T, before, atol=1e-13)

    def test_preserves_singular_values(self):
        d = [3.0, 2.0, 1.0]
        e = [0.0, 0.5, 0.25]
        expected = sla.svdvals(bidiagonal(d, e))
        qr_sweep(d, e, 0, 2, None, None)
        np.testing.assert_allclose(
            np.sort(sla.svdvals(bidiagonal(d, e)))[::-1], expected, rtol=1e-13
        )


class TestDiagonalize:

    def test_bidiagonal_to_diagonal(self):
        d = np.array([3.0, 2.0, 1.0, 0.5])
        e = np.array([0.0, 0.5, 0.25, 0.1])
        before = bidiagonal(d, e)
        anorm = float(np.max(np.abs(d) + np.abs(e)))
        u = np.eye(4)
        v = np.eye(4)
        status, iterations = diagonalize(d, e, anorm, u, v)
        assert status.ok
        assert np.all(d >= 0.0)
        assert np.all(iterations <= 30)
        np.testing.assert_allclose(e, 0.0, atol=1e-12 * anorm)
        np.testing.assert_allclose((u * d) @ v.T, before, atol=1e-12)

    def test_zero_cap_reports_first_valid_index(self):
        d = np.array([3.0, 2.0, 1.0])
        e = np.array([0.0, 0.5, 0.25])
        status, iterations = diagonalize(d, e, 3.5, max_iterations=0)
        assert status.code is StatusCode.NOT_CONVERGED
        assert status.index == 3
        assert status.failed_index == 2
        assert iterations[2] == 0

    def test_already_diagonal_needs_no_sweeps(self):
        d = np.array([1.0, -2.0, 3.0])
        e = np.zeros(3)
        v = np.eye(3)
        status, iterations = diagonalize(d, e, 3.0, v=v, max_iterations=0)
        assert status.ok
        np.testing.assert_array_equal(d, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(iterations, 0)
        assert v[1, 1] == -1.0


# ═══════════════════════════════════════════════════════════════════════
# golub_reinsch()
# ═══════════════════════════════════════════════════════════════════════


class TestGolubReinsch:

    def test_input_not_modified(self, tall_matrix):
        A = tall_matrix.copy()
        golub_reinsch(A)
        np.testing.assert_array_equal(A, tall_matrix)

    def test_in_place(self, tall_matrix):
        A = tall_matrix.copy()
        result = golub_reinsch(A, u=A)
        assert result.U is A
        np.testing.assert_allclose((A * result.s) @ result.V.T, tall_matrix, atol=1e-12)

    def test_values_independent_of_vectors(self, square_matrix):
        full = golub_reinsch(square_matrix)
        bare = golub_reinsch(square_matrix, compute_u=False, compute_v=False)
        assert bare.U is None
        assert bare.V is None
        np.testing.assert_array_equal(bare.s, full.s)

    def test_status_success(self, square_matrix):
        result = golub_reinsch(square_matrix)
        assert result.status == SVDStatus.success()
        assert str(result.status) == "Ok"
