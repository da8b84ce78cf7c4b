import time
import logging
import datetime
import numpy as np
import multiprocessing as mp
import configparser
from tqdm import tqdm
from gdcls.configs import GDCLSOptions
from gdcls.model.gdcls import GDCLS
from gdcls.utils import memory_estimate, validate_matrix, validate_factors

logging.basicConfig(format='%(asctime)s - %(message)s', datefmt='%d-%b-%y %H:%M:%S', level=logging.INFO)
logger = logging.getLogger(__name__)


def _train_task(model: GDCLS, model_i: int):
    model.initialize()
    model.train()
    return model_i, model


class BatchGDCLS:
    """
    The batch GDCLS class runs multiple factorizations of the same data matrix, using the same options and different
    random seeds for the initialization of W.

    Because W is initialized at random the result of a single run depends on its seed, the batch reports the best
    model and the mean relative error over all models.

    Parameters
    ----------
    V : np.ndarray
        The input data matrix containing M rows by N columns.
    factors : int
        The number of factors, k, in the W and H matrices.
    models : int
        The number of models to create. Default = 20.
    options : GDCLSOptions or dict
        The options shared by every model.
    seed : int
        The random seed used to draw the seed of each model. Default is 42.
    parallel : bool
        Run the models in parallel on a multiprocessing pool. Default = True.
    cores : int
        The number of cores to use for parallel processing. None or a value <= 0 uses 75% of the estimated maximum.
    verbose : bool
        Log the batch configuration and show a progress bar when running sequentially.
    """
    def __init__(self,
                 V: np.ndarray,
                 factors: int,
                 models: int = 20,
                 options=None,
                 seed: int = 42,
                 parallel: bool = True,
                 cores: int = None,
                 verbose: bool = True
                 ):
        """
        Constructor method.
        """
        self.V = validate_matrix(V, name="V")
        self.factors = validate_factors(factors)
        self.models = int(models)
        if self.models <= 0:
            raise ValueError(f"The number of models must be positive, got {models}.")
        self.options = GDCLSOptions.coerce(options)

        self.seed = 42 if seed is None else int(seed)
        self.rng = np.random.default_rng(self.seed)

        # cores <= 0 selects the automatic core count
        cores = None if cores is None or int(cores) <= 0 else int(cores)
        system_options = memory_estimate(self.V.shape[0], self.V.shape[1], self.factors, cores=cores)

        self.runtime = None
        self.parallel = parallel if isinstance(parallel, bool) else str(parallel).lower() == "true"
        self.cores = cores if cores is not None else max(int(system_options["max_cores"] * 0.75), 1)
        self.verbose = verbose if isinstance(verbose, bool) else str(verbose).lower() == "true"
        self.results = []
        self.best_model = None

        if self.verbose:
            self.details()
            logger.info(f"Estimated memory available: {np.round(system_options['available_memory_bytes'], 4)} Gb")
            logger.info(f"Estimated memory per model: {system_options['estimate']}")
            logger.info(f"Using {self.cores} cores for parallel processing.")
            logger.info("-------------------------------------------------")

    @classmethod
    def from_config(cls, V: np.ndarray, config: configparser.ConfigParser, section: str = "batch"):
        """
        Create a batch from a configparser configuration such as gdcls_config. The batch parameters are read from
        the batch section and the factorization options from the parameters section.

        Parameters
        ----------
        V : np.ndarray
            The input data matrix.
        config : configparser.ConfigParser
            The configuration.
        section : str
            The name of the batch section.

        Returns
        -------
        BatchGDCLS
        """
        batch = config[section]
        return cls(
            V=V,
            factors=batch.getint("factors"),
            models=batch.getint("models", fallback=20),
            options=GDCLSOptions.from_config(config),
            seed=batch.getint("seed", fallback=42),
            parallel=batch.getboolean("parallel", fallback=True),
            cores=batch.getint("cores", fallback=-1),
            verbose=batch.getboolean("verbose", fallback=True)
        )

    def details(self):
        logger.info("Batch GDCLS Instance Configuration")
        logger.info("-------------------------------------------------")
        logger.info(f"Factors: {self.factors}, Models: {self.models}, Max Steps: {self.options.max_steps}")
        logger.info(f"Regularization: {self.options.regularization}, Precision Goal: {self.options.precision_goal}")
        logger.info(f"Random Seed: {self.seed}, Parallel: {self.parallel}, Verbose: {self.verbose}")
        if len(self.results) > 0:
            logger.info("------------------------ Batch Results ------------------------")
            for i, result in enumerate(self.results):
                logger.info(f"Model: {i + 1}, Relative Error: {result.relative_error}, Seed: {result.seed}, "
                            f"Converged: {result.state.converged}, Steps: {result.state.steps}/"
                            f"{self.options.max_steps}")
            logger.info(f"Results - Best Model: {self.best_model + 1}, "
                        f"Relative Error: {self.results[self.best_model].relative_error}, "
                        f"Mean Relative Error: {self.mean_relative_error}")

    def _create_models(self):
        _models = []
        for _ in range(self.models):
            _seed = int(self.rng.integers(low=0, high=100000))
            _models.append(GDCLS(V=self.V, factors=self.factors, options=self.options, seed=_seed))
        return _models

    def train(self):
        """
        Execute the factorization of every model in the batch.

        Returns
        -------
        GDCLS
           The model with the lowest relative error.
        """
        t0 = time.time()
        _models = self._create_models()
        if self.parallel:
            logger.info(f"Running {self.models} GDCLS models in parallel using {self.cores} cores.")
            with mp.Pool(processes=self.cores) as pool:
                results = pool.starmap(_train_task, [(_model, i) for i, _model in enumerate(_models)])
            results = [model for _, model in sorted(results, key=lambda result: result[0])]
        else:
            logger.info("Running models sequentially.")
            results = []
            for model_i, _model in enumerate(tqdm(_models, desc="GDCLS models", disable=not self.verbose)):
                _, _model = _train_task(_model, model_i)
                results.append(_model)

        self.results = results
        errors = [_model.relative_error for _model in self.results]
        errors = [np.inf if e is None else e for e in errors]
        self.best_model = int(np.argmin(errors))
        t1 = time.time()
        self.runtime = round(t1 - t0, 2)
        logger.info(f"Batch training completed, runtime: {datetime.timedelta(seconds=self.runtime)}")
        if self.verbose:
            self.details()
        return self.results[self.best_model]

    @property
    def relative_errors(self):
        return [_model.relative_error for _model in self.results]

    @property
    def mean_relative_error(self):
        errors = [e for e in self.relative_errors if e is not None]
        if len(errors) == 0:
            return None
        return float(np.mean(errors))
