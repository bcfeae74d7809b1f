"""
Tests for decompose().

Tests the complete pipeline: Design construction, backend selection,
and the defining identities of the result.
"""

import warnings

import numpy as np
import pytest
import scipy.linalg as sla

from pysvd.decomposition import SVDDesign, SVDSolution, decompose
from pysvd.core.compute.tolerances import ORTHOGONALITY, RECONSTRUCTION
from pysvd.core.exceptions import ConvergenceError, DimensionError, ValidationError


MATRICES = ["tall_matrix", "square_matrix", "wide_matrix", "graded_matrix"]


# ═══════════════════════════════════════════════════════════════════════
# Defining identities
# ═══════════════════════════════════════════════════════════════════════


class TestIdentities:
    """A = U diag(s) V^T with orthonormal factors and s >= 0."""

    @pytest.mark.parametrize("name", MATRICES)
    def test_reconstruction(self, request, name):
        A = request.getfixturevalue(name)
        result = decompose(A)
        scale = np.linalg.norm(A)
        np.testing.assert_allclose(
            result.reconstruct(), A, atol=RECONSTRUCTION.atol * scale
        )
        assert result.reconstruction_error <= RECONSTRUCTION.rtol

    @pytest.mark.parametrize("name", MATRICES)
    def test_orthogonality(self, request, name):
        result = decompose(request.getfixturevalue(name))
        assert result.orthogonality_error <= ORTHOGONALITY.atol
        assert result.check()

    @pytest.mark.parametrize("name", MATRICES)
    def test_non_negative(self, request, name):
        result = decompose(request.getfixturevalue(name))
        assert np.all(result.singular_values >= 0.0)

    def test_shapes_tall(self, tall_matrix):
        result = decompose(tall_matrix)
        assert result.singular_values.shape == (4,)
        assert result.U.shape == (6, 4)
        assert result.V.shape == (4, 4)

    def test_shapes_wide(self, wide_matrix):
        result = decompose(wide_matrix)
        assert result.singular_values.shape == (5,)
        assert result.U.shape == (3, 5)
        assert result.V.shape == (5, 5)

    def test_wide_extra_values_are_zero(self, wide_matrix):
        s = np.sort(decompose(wide_matrix).singular_values)
        np.testing.assert_allclose(s[:2], 0.0, atol=1e-12 * s[-1])

    def test_rank_deficient(self, rank_deficient_matrix):
        result = decompose(rank_deficient_matrix)
        assert result.check()
        assert result.rank(tolerance=1e-10) == 2

    def test_zero_matrix(self):
        result = decompose(np.zeros((3, 3)))
        np.testing.assert_array_equal(result.singular_values, 0.0)
        np.testing.assert_allclose(result.U, np.eye(3))
        np.testing.assert_allclose(result.V, np.eye(3))
        assert result.rank() == 0
        assert result.condition_number == np.inf

    def test_negative_diagonal(self):
        A = np.diag([-1.0, 2.0, -3.0])
        result = decompose(A)
        np.testing.assert_allclose(np.sort(result.singular_values), [1.0, 2.0, 3.0])
        np.testing.assert_allclose(result.reconstruct(), A, atol=1e-15)

    def test_repeated_values(self):
        result = decompose(2.0 * np.eye(4))
        np.testing.assert_allclose(result.singular_values, 2.0)
        assert result.check()


# ═══════════════════════════════════════════════════════════════════════
# Agreement with LAPACK
# ═══════════════════════════════════════════════════════════════════════


class TestReference:

    @pytest.mark.parametrize("name", ["tall_matrix", "square_matrix", "rank_deficient_matrix"])
    def test_values_match_scipy(self, request, name):
        A = request.getfixturevalue(name)
        s = np.sort(decompose(A).singular_values)[::-1]
        expected = sla.svdvals(A)
        np.testing.assert_allclose(s, expected, atol=1e-12 * expected[0])

    def test_wide_values_match_scipy(self, wide_matrix):
        s = np.sort(decompose(wide_matrix).singular_values)[::-1]
        expected = np.concatenate([sla.svdvals(wide_matrix), np.zeros(2)])
        np.testing.assert_allclose(s, expected, atol=1e-12 * expected[0])

    def test_graded_values_match_scipy(self, graded_matrix):
        s = np.sort(decompose(graded_matrix).singular_values)[::-1]
        expected = sla.svdvals(graded_matrix)
        np.testing.assert_allclose(s, expected, atol=1e-12 * expected[0])

    def test_lapack_backend_agrees(self, tall_matrix):
        ours = decompose(tall_matrix, sort=True)
        lapack = decompose(tall_matrix, sort=True, backend='cpu_lapack')
        assert lapack.backend_name == 'cpu_lapack'
        np.testing.assert_allclose(
            ours.singular_values, lapack.singular_values, rtol=1e-10
        )
        # Vectors agree up to sign for distinct singular values
        signs = np.sign(np.sum(ours.V * lapack.V, axis=0))
        np.testing.assert_allclose(ours.V * signs, lapack.V, atol=1e-10)

    def test_lapack_backend_wide_contract(self, wide_matrix):
        result = decompose(wide_matrix, backend='cpu_lapack')
        assert result.singular_values.shape == (5,)
        assert result.U.shape == (3, 5)
        assert result.V.shape == (5, 5)
        assert result.check()


# ═══════════════════════════════════════════════════════════════════════
# Options
# ═══════════════════════════════════════════════════════════════════════


class TestOptions:

    def test_values_only(self, square_matrix):
        full = decompose(square_matrix)
        bare = decompose(square_matrix, compute_u=False, compute_v=False)
        assert bare.U is None
        assert bare.V is None
        assert not bare.has_vectors
        np.testing.assert_array_equal(bare.singular_values, full.singular_values)

    def test_v_only(self, square_matrix):
        result = decompose(square_matrix, compute_u=False)
        assert result.U is None
        np.testing.assert_allclose(result.V.T @ result.V, np.eye(5), atol=1e-12)

    def test_sort(self, tall_matrix):
        result = decompose(tall_matrix, sort=True)
        s = result.singular_values
        assert np.all(np.diff(s) <= 0.0)
        assert result.info['sorted'] == 'descending'
        assert result.check()

    def test_unsorted_by_default(self, tall_matrix):
        assert 'sorted' not in decompose(tall_matrix).info

    def test_input_not_modified(self, tall_matrix):
        A = tall_matrix.copy()
        decompose(A)
        np.testing.assert_array_equal(A, tall_matrix)

    def test_from_list(self):
        result = decompose([[3, 0], [4, 5]], sort=True)
        np.testing.assert_allclose(
            result.singular_values, [np.sqrt(45.0), np.sqrt(5.0)], rtol=1e-14
        )

    def test_from_design(self, tall_matrix):
        design = SVDDesign.from_array(tall_matrix)
        result = decompose(design)
        assert result.design is design


# ═══════════════════════════════════════════════════════════════════════
# Input validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    @pytest.mark.parametrize("shape", [(1, 4), (4, 1), (1, 1)])
    def test_too_small(self, shape):
        with pytest.raises(DimensionError):
            decompose(np.ones(shape))

    def test_not_2d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            decompose(np.ones(4))

    def test_non_finite(self):
        A = np.eye(3)
        A[1, 2] = np.nan
        with pytest.raises(ValidationError, match="non-finite"):
            decompose(A)

    def test_non_numeric(self):
        with pytest.raises(ValidationError):
            decompose([["a", "b"], ["c", "d"]])

    def test_negative_iterations(self, square_matrix):
        with pytest.raises(ValidationError, match="max_iterations"):
            decompose(square_matrix, max_iterations=-1)

    def test_unknown_backend(self, square_matrix):
        with pytest.raises(ValidationError, match="Unknown backend"):
            decompose(square_matrix, backend='gpu')


# ═══════════════════════════════════════════════════════════════════════
# Non-convergence
# ═══════════════════════════════════════════════════════════════════════


class TestNonConvergence:
    """
    Failure paths forced with max_iterations=0.

    No small well-formed matrix is known to exhaust the default cap of 30
    sweeps, so the cap is lowered to reach the same code path. The block
    matrix converges immediately at index 3 and needs a sweep below it.
    """

    def test_strict_raises_with_partial(self, split_block_matrix):
        with pytest.raises(ConvergenceError) as exc_info:
            decompose(split_block_matrix, max_iterations=0)
        err = exc_info.value
        assert err.index == 3
        assert err.failed_index == 2
        assert err.iterations == 0
        assert isinstance(err.partial, SVDSolution)
        assert err.partial.singular_values[3] == pytest.approx(5.0)

    def test_lenient_warns_and_returns(self, split_block_matrix):
        with pytest.warns(RuntimeWarning, match="did not converge"):
            result = decompose(split_block_matrix, max_iterations=0, strict=False)
        assert not result.converged
        assert result.first_valid_index == 3
        assert result.info['status'] == 'NotConverged(3)'
        assert result.has_vectors
        assert any("did not converge" in w for w in result.warnings)
        np.testing.assert_allclose(np.abs(result.V[:, 3]), [0.0, 0.0, 0.0, 1.0], atol=1e-15)

    def test_lenient_result_is_not_sorted(self, split_block_matrix):
        with pytest.warns(RuntimeWarning):
            result = decompose(
                split_block_matrix, max_iterations=0, strict=False, sort=True
            )
        assert 'sorted' not in result.info

    def test_converges_with_default_cap(self, split_block_matrix):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            result = decompose(split_block_matrix)
        assert result.converged
        assert result.first_valid_index == 0
        assert result.info['status'] == 'Ok'
        assert np.all(result.iterations <= result.info['max_iterations'])
