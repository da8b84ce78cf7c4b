from gdcls.model.least_squares import RLS
from gdcls.model.multiplicative import MU
from gdcls.configs import GDCLSOptions
from gdcls.metrics import frobenius_norm, relative_error as residual_ratio
from gdcls.observers import StepObserver, LoggingObserver, ProgressObserver, report_step
from gdcls.utils import validate_matrix, validate_factors, validate_pair
from datetime import datetime
import numpy as np
import logging
import time

logging.basicConfig(format='%(asctime)s - %(message)s', datefmt='%d-%b-%y %H:%M:%S', level=logging.INFO)
logger = logging.getLogger(__name__)


class FactorizationState:
    """
    The explicit, caller-held state of a factorization: the current W and H matrices and how they were reached.

    States are never modified, each call to resume returns a new state.

    Parameters
    ----------
    W : np.ndarray
        The basis matrix, shape (m, k).
    H : np.ndarray
        The coefficient matrix, shape (k, n).
    steps : int
        The total number of iterations used to produce W and H.
    relative_error : float
        The relative residual ||V - WH|| / ||V|| after the last iteration, None when it was not tracked.
    converged : bool
        True when the last run stopped because the precision goal was reached.
    """
    __slots__ = ("W", "H", "steps", "relative_error", "converged")

    def __init__(self, W: np.ndarray, H: np.ndarray, steps: int = 0, relative_error: float = None,
                 converged: bool = False):
        object.__setattr__(self, "W", W)
        object.__setattr__(self, "H", H)
        object.__setattr__(self, "steps", int(steps))
        object.__setattr__(self, "relative_error", relative_error)
        object.__setattr__(self, "converged", bool(converged))

    def __setattr__(self, key, value):
        raise AttributeError("FactorizationState is immutable.")

    def __reduce__(self):
        return FactorizationState, (self.W, self.H, self.steps, self.relative_error, self.converged)

    def __iter__(self):
        return iter((self.W, self.H))

    def __repr__(self):
        return (f"FactorizationState(shape={self.W.shape[0]}x{self.W.shape[1]}x{self.H.shape[1]}, "
                f"steps={self.steps}, relative_error={self.relative_error}, converged={self.converged})")

    @property
    def factors(self):
        return self.H.shape[0]


def _select_observer(options: GDCLSOptions, observer: StepObserver = None, verbose: bool = False):
    if observer is not None:
        return observer
    if verbose:
        return ProgressObserver(total=options.max_steps)
    if options.print_profiling_info:
        return LoggingObserver()
    return StepObserver()


def _notify(observer: StepObserver, step: int, elapsed: float, relative_error: float):
    try:
        observer.on_step(step, elapsed, relative_error)
    except Exception as ex:
        logger.debug(f"Diagnostic observer failed on step {step}, ignoring. Error: {ex}")


def _iterate(V: np.ndarray, W: np.ndarray, H: np.ndarray, options: GDCLSOptions, observer: StepObserver):
    """
    The GDCLS alternating loop, starting from W. H is returned unchanged when no iteration runs.
    """
    norm_v = frobenius_norm(V)
    diff_norm = 10.0 * norm_v
    tolerance = options.tolerance
    relative_error = None
    steps = 0

    while steps < options.max_steps and (tolerance is None or (norm_v > 0 and diff_norm / norm_v > tolerance)):
        steps += 1
        t0 = time.perf_counter()
        H = RLS.update(V=V, W=W, regularization=options.regularization, non_negative=options.non_negative)
        W = MU.update(V=V, W=W, H=H, epsilon=options.epsilon)
        elapsed = time.perf_counter() - t0
        if tolerance is not None:
            diff_norm = frobenius_norm(V - np.matmul(W, H))
            relative_error = diff_norm / norm_v
        if report_step(steps):
            _notify(observer, steps, elapsed, relative_error)

    converged = tolerance is not None and norm_v > 0 and diff_norm / norm_v <= tolerance
    return W, H, steps, relative_error, converged


def resume(V, state: FactorizationState, options=None, observer: StepObserver = None):
    """
    Continue the GDCLS iterations from an existing factorization state.

    Parameters
    ----------
    V : np.ndarray
        The input data matrix, shape (m, n).
    state : FactorizationState
        The state to continue from, typically the result of a previous call.
    options : GDCLSOptions or dict
        The factorization options, max_steps is the budget of this call.
    observer : StepObserver
        Receives the diagnostic record of the reported steps.

    Returns
    -------
    FactorizationState
        A new state, the steps of the provided state are accumulated.
    """
    options = GDCLSOptions.coerce(options)
    V = validate_matrix(V, name="V")
    W, H = validate_pair(V, state.W, state.H)
    observer = _select_observer(options, observer)
    W, H, steps, relative_error, converged = _iterate(V, W, H, options, observer)
    if steps == 0:
        relative_error = state.relative_error
        converged = state.converged
    return FactorizationState(W=W, H=H, steps=state.steps + steps, relative_error=relative_error,
                              converged=converged)


def continue_factorization(V, W, H, options=None, observer: StepObserver = None):
    """
    Continue the GDCLS iterations over the provided W and H matrices.

    The number of factors is taken from the rows of H and the iterations start from W. H is only used to check the
    shapes, and is returned as a copy when the iteration budget is zero. Neither W nor H is modified.

    Returns
    -------
    np.ndarray, np.ndarray
       The new W and H matrices.
    """
    state = resume(V, FactorizationState(W=W, H=H), options=options, observer=observer)
    return state.W, state.H


def factorize(V, k: int, options=None, seed: int = None, observer: StepObserver = None):
    """
    Factor V into W (m x k) and H (k x n) using Gradient Descent with Constrained Least Squares.

    W is initialized uniformly at random on [0, 1), then each iteration solves the regularized least squares problem
    for H and applies the multiplicative update to W.

    Parameters
    ----------
    V : np.ndarray
        The input data matrix, shape (m, n).
    k : int
        The number of factors.
    options : GDCLSOptions or dict
        The factorization options.
    seed : int
        The random seed for the initial W.
    observer : StepObserver
        Receives the diagnostic record of the reported steps.

    Returns
    -------
    np.ndarray, np.ndarray
       The W and H matrices.
    """
    model = GDCLS(V=V, factors=k, options=options, seed=seed, observer=observer)
    model.initialize()
    state = model.train()
    return state.W, state.H


class GDCLS:
    """
    A caller-owned GDCLS factorization session, holding the data, options and the current factorization state.

    Each call to train continues from the state left by the previous call, sessions do not share any state with each
    other.

    Parameters
    ----------
    V : np.ndarray
        The input data matrix containing M rows by N columns.
    factors : int
        The number of factors, k, in the W and H matrices.
    options : GDCLSOptions or dict
        The factorization options. Default: GDCLSOptions()
    seed : int
        The random seed used for initializing W. Default is None, fresh entropy.
    observer : StepObserver
        Receives the diagnostic record of the reported steps.
    verbose : bool
        Show a tqdm progress bar of the iterations when no observer is provided. Default: False
    """

    def __init__(self,
                 V: np.ndarray,
                 factors: int,
                 options=None,
                 seed: int = None,
                 observer: StepObserver = None,
                 verbose: bool = False
                 ):
        self.V = validate_matrix(V, name="V")
        self.m, self.n = self.V.shape
        self.factors = validate_factors(factors)
        self.options = GDCLSOptions.coerce(options)
        self.seed = seed
        self.rng = np.random.default_rng(self.seed)
        self.observer = observer
        self.verbose = verbose
        self.state = None
        self.metadata = {
            "creation_date": datetime.now().strftime("%m/%d/%Y, %H:%M:%S %Z"),
            "seed": self.seed,
            "samples": int(self.m),
            "features": int(self.n),
            "factors": self.factors
        }

    def initialize(self, W: np.ndarray = None, H: np.ndarray = None):
        """
        Initialize the W and H matrices.

        When W is not provided it is sampled uniformly from [0, 1) with shape (M, factors). When H is not provided it
        is set to zeros of shape (factors, N), its values are never read by the iterations.
        """
        if W is None:
            W = self.rng.uniform(low=0.0, high=1.0, size=(self.m, self.factors))
        if H is None:
            H = np.zeros(shape=(self.factors, self.n))
        W, H = validate_pair(self.V, W, H)
        if W.shape[1] != self.factors:
            logger.warning(f"Provided matrices have {W.shape[1]} factors, replacing the configured {self.factors}.")
            self.factors = W.shape[1]
            self.metadata["factors"] = self.factors
        self.state = FactorizationState(W=W, H=H)
        return self.state

    def train(self, max_steps: int = None):
        """
        Run the GDCLS iterations from the current state until the precision goal is reached or the iteration budget
        is used.

        Parameters
        ----------
        max_steps : int
           The iteration budget of this call, defaults to options.max_steps.

        Returns
        -------
        FactorizationState
           The new state, which is also kept by the session.
        """
        if self.state is None:
            logger.warning("Model is not initialized, initializing with default parameters")
            self.initialize()
        options = self.options if max_steps is None else self.options.replace(max_steps=max_steps)
        observer = _select_observer(options, self.observer, verbose=self.verbose)
        try:
            W, H, steps, relative_error, converged = _iterate(self.V, self.state.W, self.state.H, options, observer)
        finally:
            if observer is not self.observer:
                observer.close()
        if steps == 0:
            relative_error = self.state.relative_error
            converged = self.state.converged
        self.state = FactorizationState(W=W, H=H, steps=self.state.steps + steps, relative_error=relative_error,
                                        converged=converged)
        self.metadata["completion_date"] = datetime.now().strftime("%m/%d/%Y, %H:%M:%S %Z")
        self.metadata["steps"] = self.state.steps
        return self.state

    @property
    def W(self):
        return None if self.state is None else self.state.W

    @property
    def H(self):
        return None if self.state is None else self.state.H

    @property
    def WH(self):
        return None if self.state is None else np.matmul(self.state.W, self.state.H)

    @property
    def steps(self):
        return 0 if self.state is None else self.state.steps

    @property
    def converged(self):
        return False if self.state is None else self.state.converged

    @property
    def relative_error(self):
        if self.state is None:
            return None
        error = residual_ratio(self.V, self.state.W, self.state.H)
        return None if np.isnan(error) else error

    def summary(self):
        """
        Provides a summary of the model configuration and results if completed.
        """
        logger.info("------------\t\tModel Details\t\t-----------")
        logger.info(f"\tFactors: {self.factors}\t\tRandom Seed: {self.seed}")
        logger.info(f"\tNumber of Rows: {self.m}\t\tNumber of Columns: {self.n}")
        logger.info(f"\tMax Steps: {self.options.max_steps}\t\tRegularization: {self.options.regularization}")
        if self.state is not None and self.state.steps > 0:
            logger.info("---------------\t\tModel Results\t\t--------------")
            logger.info(f"\tRelative Error: {self.relative_error}\t\tSteps: {self.state.steps}")
            logger.info(f"\tConverged: {self.state.converged}")
        logger.info("------------------------------------------------------")
