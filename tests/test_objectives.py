import numpy as np
import pytest

from geneticsolver.function_generators import objectives


def test_f():
    assert objectives.f(0.0) == 0.0
    assert objectives.f(0.75) == 0.75


def test_g():
    assert objectives.g(0.0, 0.0) == pytest.approx(1.0)
    assert objectives.g(1.0, 0.0) == pytest.approx(0.0)
    assert objectives.g(0.5, 2.0) == pytest.approx(1 + 4 - 0.5 + 0.1)


def test_g_is_vectorised():
    X, Y = np.meshgrid(np.linspace(0, 1, 5), np.linspace(-2, 2, 5))
    assert objectives.g(X, Y).shape == (5, 5)


def test_reference_minimum_f():
    x_opt, f_opt = objectives.reference_minimum("f")
    assert x_opt.shape == (1,)
    assert f_opt == pytest.approx(0.0, abs=1e-8)


def test_reference_minimum_g():
    x_opt, f_opt = objectives.reference_minimum("g")
    assert x_opt.shape == (2,)
    assert x_opt[1] == 0.0
    assert x_opt[0] == pytest.approx(1.0, abs=1e-6)
    assert f_opt == pytest.approx(0.0, abs=1e-8)
    # No grid point does better
    grid = np.linspace(0, 1, 2001)
    assert f_opt <= objectives.g(grid, 0.0).min() + 1e-12


def test_unknown_objective():
    with pytest.raises(KeyError):
        objectives.get_objective("h")


@pytest.mark.parametrize("name", ["f", "g"])
def test_visualize_function_saves(tmp_path, name):
    path = tmp_path / f"{name}.png"
    fig = objectives.visualize_function(name, save_path=str(path), show=False)
    assert path.exists()
    fig.clf()
