"""
Exception types raised by the GDCLS factorization routines.
"""


class GDCLSError(Exception):
    """Base class for all factorization errors."""


class ShapeError(GDCLSError, ValueError):
    """
    The input matrix is not a well-formed rectangular matrix, or the requested rank is not a positive integer.
    """


class ShapeMismatch(ShapeError):
    """
    The supplied W and H matrices are not conformant with each other or with the data matrix V.
    """


class NumericError(GDCLSError, ArithmeticError):
    """
    The regularized k x k system could not be solved, or the inputs contain non-finite values.
    """
