import sys
import os
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "..")
sys.path.append(src_path)
import copy
import pickle
import configparser
import pytest
from gdcls.configs import GDCLSOptions, gdcls_config


def test_defaults():
    options = GDCLSOptions()
    assert options.max_steps == 200
    assert options.non_negative is True
    assert options.epsilon == 1e-9
    assert options.regularization == 0.01
    assert options.precision_goal is None
    assert options.tolerance is None
    assert options.print_profiling_info is False


def test_from_dict():
    options = GDCLSOptions.from_dict({
        "maxSteps": 50,
        "nonNegative": False,
        "regularizationParameter": 0.1,
        "precisionGoal": 3,
        "printProfilingInfo": True,
        "unknownOption": "ignored",
    })
    assert options.max_steps == 50
    assert options.non_negative is False
    assert options.regularization == 0.1
    assert options.precision_goal == 3.0
    assert options.tolerance == pytest.approx(1e-3)
    assert options.print_profiling_info is True
    assert options.epsilon == 1e-9
    assert GDCLSOptions.from_dict({"max_steps": 50}).max_steps == 50


def test_automatic_precision_goal():
    assert GDCLSOptions(precision_goal="automatic").precision_goal is None
    assert GDCLSOptions.from_dict({"precisionGoal": None}).precision_goal is None


def test_from_config():
    options = GDCLSOptions.from_config(gdcls_config)
    assert options == GDCLSOptions()

    config = configparser.ConfigParser()
    config.read_dict(gdcls_config)
    config["parameters"]["max_steps"] = "75"
    config["parameters"]["precision_goal"] = "4"
    config["parameters"]["non_negative"] = "False"
    options = GDCLSOptions.from_config(config)
    assert options.max_steps == 75
    assert options.precision_goal == 4.0
    assert options.non_negative is False

    assert GDCLSOptions.from_config(configparser.ConfigParser()) == GDCLSOptions()


def test_immutable():
    options = GDCLSOptions()
    with pytest.raises(AttributeError):
        options.max_steps = 10
    changed = options.replace(max_steps=10)
    assert changed.max_steps == 10
    assert options.max_steps == 200


def test_coerce():
    options = GDCLSOptions(max_steps=3)
    assert GDCLSOptions.coerce(options) is options
    assert GDCLSOptions.coerce(None) == GDCLSOptions()
    assert GDCLSOptions.coerce({"maxSteps": 3}) == options


def test_pickle():
    options = GDCLSOptions(max_steps=7, precision_goal=2)
    assert pickle.loads(pickle.dumps(options)) == options
    assert copy.deepcopy(options) == options


@pytest.mark.parametrize("field, value", [
    ("max_steps", -1),
    ("max_steps", 2.5),
    ("max_steps", "many"),
    ("max_steps", True),
    ("epsilon", 0.0),
    ("regularization", -0.1),
    ("precision_goal", -1),
    ("non_negative", "maybe"),
])
def test_invalid(field, value):
    with pytest.raises(ValueError):
        GDCLSOptions(**{field: value})
