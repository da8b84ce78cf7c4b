import logging
import numpy as np
from scipy import linalg as spl
from gdcls.exceptions import NumericError

logger = logging.getLogger(__name__)


class RLS:

    @staticmethod
    def normal_matrix(W: np.ndarray, regularization: float):
        """
        The k x k matrix W^T W + lambda I of the regularized normal equations.
        """
        k = W.shape[1]
        return np.matmul(W.T, W) + regularization * np.identity(k)

    @staticmethod
    def factor(A: np.ndarray):
        """
        Cholesky factorization of the symmetric positive definite normal matrix, computed once per iteration and
        reused for every column of V.

        Raises
        ------
        NumericError
           When A is singular or not positive definite.
        """
        try:
            return spl.cho_factor(A, lower=False, check_finite=True)
        except (spl.LinAlgError, ValueError) as ex:
            logger.error(f"Unable to factor the {A.shape[0]}x{A.shape[1]} regularized normal matrix. Error: {ex}")
            raise NumericError(f"The regularized normal matrix is singular or not positive definite: {ex}") from ex

    @staticmethod
    def solve(factorization, B: np.ndarray):
        """
        Solve A X = B for every column of B using a factorization from RLS.factor.
        """
        X = spl.cho_solve(factorization, B, check_finite=False)
        if not np.all(np.isfinite(X)):
            logger.error("The regularized least-squares solve produced non-finite values.")
            raise NumericError("The regularized least-squares solve produced non-finite values.")
        return X

    @staticmethod
    def update(
            V: np.ndarray,
            W: np.ndarray,
            regularization: float = 0.01,
            non_negative: bool = True
    ):
        """
        The constrained least squares step of GDCLS.

        Each column h_i of H minimizes ||v_i - W h_i||^2 + lambda ||h_i||^2, found by solving
        (W^T W + lambda I) h_i = W^T v_i. All columns share the same k x k matrix so it is factored once. When
        non_negative is set the negative entries of H are clamped to zero.

        Parameters
        ----------
        V : np.ndarray
           The input dataset, shape (m, n).
        W : np.ndarray
           The basis matrix, shape (m, k).
        regularization : float
           The Tikhonov weight lambda.
        non_negative : bool
           Clamp the entries of H to be non-negative.

        Returns
        -------
        np.ndarray
           The coefficient matrix H, shape (k, n).

        """
        A = RLS.normal_matrix(W, regularization)
        B = np.matmul(W.T, V)
        H = RLS.solve(RLS.factor(A), B)
        if non_negative:
            H = np.maximum(H, 0.0)
        return H
