import numpy as np
from typing import Callable, Annotated, get_origin, get_args
from geneticsolver.function_generators import objectives


def tunable_parameters(minimizer: Callable) -> dict:
    """Map parameter name -> (base type, Interval) for every Interval-annotated parameter."""
    import inspect
    sig = inspect.signature(minimizer)

    tunable = {}
    for param_name, param in sig.parameters.items():
        anno = param.annotation
        if get_origin(anno) is Annotated:
            args = get_args(anno)
            if len(args) >= 2 and isinstance(args[1], Interval):
                tunable[param_name] = (args[0], args[1])
    return tunable


def check_optimizer_annotations(minimizer: Callable):
    if not tunable_parameters(minimizer):
        raise ValueError(f"No Annotated parameters with Interval")


def check_optimizer_function(minimizer: Callable, objective_name: str, seed: int = 0):
    _, bounds = objectives.get_objective(objective_name)
    n_dims = len(bounds)
    result_x = minimizer(seed=seed)
    assert result_x is not None, f"Returned None"
    assert isinstance(result_x, np.ndarray), f"Didn't return numpy array"
    assert result_x.shape == (n_dims,), f"Returned wrong shape"

    # Check for inf values in result
    assert not np.any(np.isinf(result_x)), f"Returned inf values in x estimate"
    assert not np.any(np.isnan(result_x)), f"Returned NaN values in x estimate"

    lower, upper = np.array(bounds, dtype=float).T
    assert np.all(result_x >= lower) and np.all(result_x <= upper), f"Returned x outside of its bounds"


class Interval:
    """
    Optuna metadata class for use with parameter annotations using typing.Annotated
    Low and high are required, and must be numeric.
    Step is optional, and should be None if log=True.
    """
    def __init__(self, low: int | float, high: int | float, step: int | float | None=None, log: bool=False):
        self.low = low
        self.high = high
        self.step = step
        self.log = log

    def __repr__(self):
        return f"Interval(low={self.low}, high={self.high}, step={self.step}, log={self.log})"
