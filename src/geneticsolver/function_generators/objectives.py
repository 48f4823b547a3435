"""
Objective functions minimised by the genetic algorithm.

f(x) = x                                  0 <= x <= 1
g(x, y) = 1 + y^2 - x - 0.1 sin(3 pi x)   0 <= x <= 1, -2 <= y <= 2
"""
from typing import Callable

import numpy as np
import matplotlib.pyplot as plt
from scipy.optimize import minimize_scalar


def f(x: float) -> float:
    return x


def g(x: float, y: float) -> float:
    return 1 + y ** 2 - x - 0.1 * np.sin(3 * np.pi * x)


OBJECTIVES = {
    "f": (f, ((0.0, 1.0),)),
    "g": (g, ((0.0, 1.0), (-2.0, 2.0))),
}


def get_objective(name: str) -> tuple[Callable, tuple]:
    try:
        return OBJECTIVES[name]
    except KeyError:
        raise KeyError(f"Unknown objective {name!r}; available: {sorted(OBJECTIVES)}") from None


def reference_minimum(name: str, n_grid: int = 1001) -> tuple[np.ndarray, float]:
    """
    Reference optimum of a registered objective.

    The first variable is searched on a grid and polished with scipy's bounded
    scalar minimiser; every other variable is held at the point in its range
    closest to zero, where the quadratic terms vanish.

    Returns
    -------
    (np.ndarray, float)
        Minimiser and minimum value.
    """
    fun, bounds = get_objective(name)
    rest = [float(np.clip(0.0, low, high)) for low, high in bounds[1:]]
    low, high = bounds[0]

    def along_x(x):
        return fun(x, *rest)

    grid = np.linspace(low, high, n_grid)
    values = np.array([along_x(x) for x in grid])
    i = int(np.argmin(values))
    bracket = (grid[max(i - 1, 0)], grid[min(i + 1, n_grid - 1)])
    res = minimize_scalar(along_x, bounds=bracket, method="bounded", options={"xatol": 1e-10})

    # The polish can only help; a grid endpoint may still be the better point
    if res.fun < values[i]:
        x_opt, f_opt = float(res.x), float(res.fun)
    else:
        x_opt, f_opt = float(grid[i]), float(values[i])
    return np.array([x_opt] + rest), f_opt


def visualize_function(name: str, save_path: str | None = None, show: bool = True):
    fun, bounds = get_objective(name)
    fig = plt.figure(figsize=(10, 8))
    x_range = np.linspace(*bounds[0], 200)

    if len(bounds) == 1:
        plt.plot(x_range, [fun(x) for x in x_range])
        plt.xlabel("x")
        plt.ylabel(f"{name}(x)")
    else:
        y_range = np.linspace(*bounds[1], 200)
        X, Y = np.meshgrid(x_range, y_range)
        Z = fun(X, Y)
        plt.contour(X, Y, Z, levels=50)
        plt.colorbar()
        plt.xlabel("x")
        plt.ylabel("y")

    optimum, _ = reference_minimum(name)
    if len(bounds) == 1:
        plt.scatter(optimum[0], fun(optimum[0]), color="red")
    else:
        plt.scatter(optimum[0], optimum[1], color="red")

    plt.title(f"{name} Function")
    plt.tight_layout()
    if save_path is not None:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    return fig
