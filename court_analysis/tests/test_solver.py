"""Tests for the Gaussian elimination solver."""

import pytest
import numpy as np

from court_analysis.core.calibration import LinearSolver, normal_equations


class TestLinearSolver:
    """Test linear solver."""

    def setup_method(self):
        """Set up test fixtures."""
        self.solver = LinearSolver()

    def test_solve_square_system(self):
        """Test a well-conditioned square system matches numpy."""
        A = np.array([[4.0, -2.0, 1.0],
                      [3.0, 6.0, -4.0],
                      [2.0, 1.0, 8.0]])
        b = np.array([12.0, -25.0, 32.0])

        result = self.solver.solve(A, b)

        assert not result.is_rank_deficient
        np.testing.assert_allclose(result.x, np.linalg.solve(A, b), atol=1e-10)

    def test_zero_on_diagonal_needs_pivoting(self):
        """Test that a zero leading entry is handled by row swapping."""
        A = np.array([[0.0, 1.0],
                      [1.0, 1.0]])
        b = np.array([1.0, 2.0])

        result = self.solver.solve(A, b)

        assert result.deficient_columns == ()
        np.testing.assert_allclose(result.x, [1.0, 1.0], atol=1e-12)

    def test_rank_deficient_leaves_variable_at_zero(self):
        """Test that an underdetermined variable is reported and left at 0."""
        A = np.array([[1.0, 2.0],
                      [2.0, 4.0]])
        b = np.array([3.0, 6.0])

        result = self.solver.solve(A, b)

        assert result.is_rank_deficient
        assert result.deficient_columns == (1,)
        assert result.x[1] == 0.0
        assert result.x[0] == pytest.approx(3.0)

    def test_all_zero_matrix(self):
        """Test that every column is deficient for a zero matrix."""
        result = self.solver.solve(np.zeros((3, 3)), np.zeros(3))

        assert result.deficient_columns == (0, 1, 2)
        assert np.all(result.x == 0.0)

    def test_inputs_not_modified(self):
        """Test that the caller's arrays are left untouched."""
        A = np.array([[0.0, 1.0], [1.0, 1.0]])
        b = np.array([1.0, 2.0])
        A_before, b_before = A.copy(), b.copy()

        self.solver.solve(A, b)

        np.testing.assert_array_equal(A, A_before)
        np.testing.assert_array_equal(b, b_before)

    def test_tall_system_is_solved_on_leading_rows(self):
        """Test that a consistent tall system returns the exact solution."""
        A = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]])
        b = np.array([2.0, 3.0, 5.0])

        result = self.solver.solve(A, b)

        np.testing.assert_allclose(result.x, [2.0, 3.0], atol=1e-12)

    def test_underdetermined_raises(self):
        """Test that fewer rows than unknowns is rejected."""
        with pytest.raises(ValueError):
            self.solver.solve(np.ones((2, 3)), np.ones(2))

    def test_mismatched_rhs_raises(self):
        """Test that a right-hand side of the wrong length is rejected."""
        with pytest.raises(ValueError):
            self.solver.solve(np.eye(3), np.ones(2))

    def test_non_matrix_raises(self):
        """Test that a 1-D coefficient array is rejected."""
        with pytest.raises(ValueError):
            self.solver.solve(np.ones(3), np.ones(3))


class TestNormalEquations:
    """Test least-squares reduction."""

    def test_line_fit(self):
        """Test fitting y = 2x + 1 through exact samples."""
        xs = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
        A = np.column_stack([xs, np.ones_like(xs)])
        b = 2.0 * xs + 1.0

        AtA, Atb = normal_equations(A, b)
        result = LinearSolver().solve(AtA, Atb)

        assert AtA.shape == (2, 2)
        np.testing.assert_allclose(result.x, [2.0, 1.0], atol=1e-10)

    def test_least_squares_matches_numpy(self):
        """Test that an inconsistent system gives the least-squares answer."""
        A = np.array([[1.0, 1.0], [1.0, 2.0], [1.0, 3.0], [1.0, 4.0]])
        b = np.array([6.0, 5.0, 7.0, 10.0])

        AtA, Atb = normal_equations(A, b)
        result = LinearSolver().solve(AtA, Atb)
        expected, *_ = np.linalg.lstsq(A, b, rcond=None)

        np.testing.assert_allclose(result.x, expected, atol=1e-10)
