import numpy as np


class MU:

    @staticmethod
    def update(
            V: np.ndarray,
            W: np.ndarray,
            H: np.ndarray,
            epsilon: float = 1e-9
    ):
        """
        The multiplicative gradient descent update of the basis matrix W.

        W <- W * (V H^T) / (W (H H^T) + epsilon), elementwise. The update does not increase ||V - WH||^2 as epsilon
        goes to zero and keeps W non-negative when W, V and H are non-negative. The multiplicative update rules are
        described in 'Algorithms for Non-negative Matrix Factorization' (Lee and Seung, NIPS 2000).

        Parameters
        ----------
        V : np.ndarray
           The input dataset, shape (m, n).
        W : np.ndarray
           The current basis matrix, shape (m, k).
        H : np.ndarray
           The coefficient matrix from the least squares step, shape (k, n).
        epsilon : float
           Added to the denominator.

        Returns
        -------
        np.ndarray
           A new basis matrix, W is not modified.
        """
        W_num = np.matmul(V, H.T)
        W_den = np.matmul(W, np.matmul(H, H.T)) + epsilon
        return np.multiply(W, np.divide(W_num, W_den))
