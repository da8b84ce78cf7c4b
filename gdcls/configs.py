import configparser
import logging
import math

logger = logging.getLogger(__name__)


# ------- FACTORIZATION Configuration -------- #
gdcls_config = configparser.ConfigParser()
gdcls_config['parameters'] = {
    'max_steps': 200,                   # Maximum number of alternating iterations
    'non_negative': True,               # Clamp negative entries of H to zero after each least-squares solve
    'epsilon': 1e-9,                    # Added to the denominator of the multiplicative W update
    'regularization': 0.01,             # Tikhonov weight (lambda) on H in the least-squares solve
    'precision_goal': 'automatic',      # Stop once ||V - WH|| / ||V|| <= 10^-precision_goal, 'automatic' runs max_steps
    'print_profiling_info': False       # Log the step number, step time and relative error
}
gdcls_config['batch'] = {
    'factors': 2,
    'models': 20,
    'seed': 42,
    'parallel': True,
    'cores': -1,
    'verbose': True
}

_AUTOMATIC = ("", "automatic", "auto", "none")

# Recognized option names, both the camelCase names and the attribute names map to the attribute.
_OPTION_KEYS = {
    "maxSteps": "max_steps",
    "max_steps": "max_steps",
    "nonNegative": "non_negative",
    "non_negative": "non_negative",
    "epsilon": "epsilon",
    "regularizationParameter": "regularization",
    "regularization": "regularization",
    "precisionGoal": "precision_goal",
    "precision_goal": "precision_goal",
    "printProfilingInfo": "print_profiling_info",
    "print_profiling_info": "print_profiling_info",
}


def _to_bool(value, name):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value.strip().lower() in ("true", "yes", "on", "1"):
            return True
        if value.strip().lower() in ("false", "no", "off", "0"):
            return False
    elif isinstance(value, int):
        return bool(value)
    raise ValueError(f"Option {name} must be a boolean, got {value!r}.")


class GDCLSOptions:
    """
    The immutable set of options for a GDCLS factorization.

    Options are validated once, when the object is created, and cannot be modified afterwards. Use replace to derive
    a modified copy.

    Parameters
    ----------
    max_steps : int
        The maximum number of alternating iterations. Default: 200
    non_negative : bool
        Clamp the negative entries of H to zero after each least-squares solve. Default: True
    epsilon : float
        Positive value added to the denominator of the multiplicative W update. Default: 1e-9
    regularization : float
        The non-negative Tikhonov weight, lambda, applied to H in the least-squares solve. Default: 0.01
    precision_goal : float
        The convergence exponent p, the iterations stop once the relative residual is at most 10^-p. None runs the
        full max_steps without tracking the residual. Default: None
    print_profiling_info : bool
        Log the diagnostic record of the reported steps when no observer is provided. Default: False
    """
    __slots__ = ("max_steps", "non_negative", "epsilon", "regularization", "precision_goal",
                 "print_profiling_info")

    def __init__(self,
                 max_steps: int = 200,
                 non_negative: bool = True,
                 epsilon: float = 1e-9,
                 regularization: float = 0.01,
                 precision_goal: float = None,
                 print_profiling_info: bool = False
                 ):
        if isinstance(max_steps, bool):
            raise ValueError(f"Option max_steps must be an integer, got {max_steps!r}.")
        try:
            _max_steps = int(max_steps)
        except (TypeError, ValueError) as ex:
            raise ValueError(f"Option max_steps must be an integer, got {max_steps!r}.") from ex
        if _max_steps != float(max_steps) or _max_steps < 0:
            raise ValueError(f"Option max_steps must be a non-negative integer, got {max_steps!r}.")

        _epsilon = float(epsilon)
        if not math.isfinite(_epsilon) or _epsilon <= 0.0:
            raise ValueError(f"Option epsilon must be a positive number, got {epsilon!r}.")

        _regularization = float(regularization)
        if not math.isfinite(_regularization) or _regularization < 0.0:
            raise ValueError(f"Option regularization must be a non-negative number, got {regularization!r}.")

        _precision_goal = None
        if precision_goal is not None and not (isinstance(precision_goal, str) and
                                               precision_goal.strip().lower() in _AUTOMATIC):
            _precision_goal = float(precision_goal)
            if not math.isfinite(_precision_goal) or _precision_goal < 0.0:
                raise ValueError(f"Option precision_goal must be a non-negative number, got {precision_goal!r}.")

        object.__setattr__(self, "max_steps", _max_steps)
        object.__setattr__(self, "non_negative", _to_bool(non_negative, "non_negative"))
        object.__setattr__(self, "epsilon", _epsilon)
        object.__setattr__(self, "regularization", _regularization)
        object.__setattr__(self, "precision_goal", _precision_goal)
        object.__setattr__(self, "print_profiling_info", _to_bool(print_profiling_info, "print_profiling_info"))

    def __setattr__(self, key, value):
        raise AttributeError(f"GDCLSOptions is immutable, use replace({key}=...) instead.")

    def __delattr__(self, key):
        raise AttributeError("GDCLSOptions is immutable.")

    def __reduce__(self):
        return GDCLSOptions, tuple(getattr(self, key) for key in self.__slots__)

    def __eq__(self, other):
        if not isinstance(other, GDCLSOptions):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self):
        return hash(tuple(self.to_dict().items()))

    def __repr__(self):
        values = ", ".join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"GDCLSOptions({values})"

    @property
    def tolerance(self):
        """
        The relative residual threshold 10^-precision_goal, None when the precision goal is automatic.
        """
        if self.precision_goal is None:
            return None
        return 10.0 ** (-self.precision_goal)

    def to_dict(self):
        return {key: getattr(self, key) for key in self.__slots__}

    def replace(self, **changes):
        """
        Create a new validated options object with the provided fields changed.
        """
        values = self.to_dict()
        values.update(changes)
        return GDCLSOptions(**values)

    @classmethod
    def from_dict(cls, options: dict = None):
        """
        Create options from a mapping. Both the camelCase names (maxSteps, nonNegative, epsilon,
        regularizationParameter, precisionGoal, printProfilingInfo) and the attribute names are recognized,
        unrecognized keys are ignored and missing keys take their defaults.
        """
        values = {}
        if options is not None:
            for key, value in options.items():
                attribute = _OPTION_KEYS.get(key)
                if attribute is None:
                    logger.debug(f"Ignoring unrecognized GDCLS option: {key}")
                    continue
                values[attribute] = value
        return cls(**values)

    @classmethod
    def from_config(cls, config: configparser.ConfigParser, section: str = "parameters"):
        """
        Create options from a section of a configparser configuration, such as gdcls_config.
        """
        if not config.has_section(section):
            logger.warning(f"Configuration section '{section}' not found, using the default GDCLS options.")
            return cls()
        return cls.from_dict(dict(config[section]))

    @classmethod
    def coerce(cls, options=None):
        """
        Accept None, a mapping or an existing GDCLSOptions object and return a GDCLSOptions object.
        """
        if options is None:
            return cls()
        if isinstance(options, GDCLSOptions):
            return options
        if isinstance(options, configparser.ConfigParser):
            return cls.from_config(options)
        return cls.from_dict(options)
