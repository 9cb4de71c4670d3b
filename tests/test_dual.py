"""Tests for the dual number engine."""
import numpy as np
from saftpack import dual
from saftpack.dual import Dual, Dual2, HyperDual
from saftpack.exceptions import UnsupportedDualOperation
from pytest import approx
import pytest
from tools import central_difference


def power_law(x):
    return 3 * x**2.5 - 2 / x + x**2


def logarithm(x):
    return dual.log(1 + x**2) * dual.sqrt(x) + dual.expm1(-x)


def weighted_sum(x):
    weights = np.array([0.5, -1.2, 2.0])
    return sum(w * dual.exp(- k * x) for k, w in enumerate(weights))


@pytest.mark.parametrize('inpt', [{"f": power_law, "x": 1.3},
                                  {"f": logarithm, "x": 0.7},
                                  {"f": weighted_sum, "x": 2.1}])
def test_first_derivative(inpt):
    """Dual numbers against central differences"""
    f, x = inpt["f"], inpt["x"]
    val, deriv = dual.first_derivative(f, x)
    assert(val == approx(f(x), rel=1e-14))
    assert(deriv == approx(central_difference(f, x), rel=1e-8))


@pytest.mark.parametrize('inpt', [{"f": power_law, "x": 1.3},
                                  {"f": logarithm, "x": 0.7},
                                  {"f": weighted_sum, "x": 2.1}])
def test_second_derivative(inpt):
    """Dual2 numbers against central differences of the first derivative"""
    f, x = inpt["f"], inpt["x"]
    val, deriv, deriv2 = dual.second_derivative(f, x)
    num = central_difference(lambda y: dual.first_derivative(f, y)[1], x)
    assert(val == approx(f(x), rel=1e-14))
    assert(deriv == approx(dual.first_derivative(f, x)[1], rel=1e-12))
    assert(deriv2 == approx(num, rel=1e-7))


def test_mixed_partial_derivative():
    """HyperDual numbers against central differences"""
    f = lambda x, y: x**3 * dual.log(y) + dual.exp(x * y) / y
    x, y = 0.8, 1.7
    val, fx, fy, fxy = dual.second_partial_derivative(f, x, y)
    assert(val == approx(f(x, y), rel=1e-14))
    assert(fx == approx(central_difference(lambda t: f(t, y), x), rel=1e-8))
    assert(fy == approx(central_difference(lambda t: f(x, t), y), rel=1e-8))
    num = central_difference(lambda t: dual.first_derivative(lambda s: f(s, t), x)[1], y)
    assert(fxy == approx(num, rel=1e-7))


def test_gradient_and_hessian():
    f = lambda r: r[0]**2 * r[1] + dual.log(r[0] + r[1])
    x = [0.3, 1.4]
    val, grad = dual.gradient(f, x)
    val_h, grad_h, hess = dual.hessian(f, x)
    s = x[0] + x[1]
    assert(val == approx(x[0]**2 * x[1] + np.log(s)))
    assert(grad == approx([2 * x[0] * x[1] + 1 / s, x[0]**2 + 1 / s]))
    assert(val_h == approx(val))
    assert(grad_h == approx(grad))
    assert(hess == approx(np.array([[2 * x[1] - 1 / s**2, 2 * x[0] - 1 / s**2],
                                    [2 * x[0] - 1 / s**2, - 1 / s**2]])))
    assert(hess[0, 1] == hess[1, 0])


def test_array_parts():
    """One dual number carrying derivatives on a whole grid"""
    x = np.linspace(0.5, 2.0, 7)
    res = power_law(Dual(x, np.ones_like(x)))
    for xi, ri, di in zip(x, res.re, res.eps):
        assert(ri == approx(power_law(xi), rel=1e-14))
        assert(di == approx(central_difference(power_law, xi), rel=1e-8))


def test_numpy_defers_to_dual():
    x = Dual(np.array([1.0, 2.0]), np.array([1.0, 1.0]))
    res = np.array([2.0, 3.0]) * x
    assert(isinstance(res, Dual))
    assert(res.eps == approx([2.0, 3.0]))
    res = np.float64(2.0) - x
    assert(isinstance(res, Dual))
    assert(res.eps == approx([-1.0, -1.0]))


def test_where_and_stack():
    x = Dual(np.array([0.0, 2.0]), np.array([1.0, 1.0]))
    res = dual.where(dual.re(x) > 0, x**2, 5.0)
    assert(res.re == approx([5.0, 4.0]))
    assert(res.eps == approx([0.0, 4.0]))
    s = dual.stack([Dual(1.0, 2.0), 3.0])
    assert(s.re == approx([1.0, 3.0]))
    assert(s.eps == approx([2.0, 0.0]))
    assert(dual.stack([1.0, 2.0]) == approx([1.0, 2.0]))


def test_max_abs():
    assert(dual.max_abs(Dual(np.array([0.1, -0.2]), np.array([0.0, -3.0]))) == 3.0)
    assert(dual.max_abs(np.array([-1.5, 1.0])) == 1.5)


@pytest.mark.parametrize('inpt', [{"op": lambda x: x < 1.0},
                                  {"op": lambda x: x == 1.0},
                                  {"op": lambda x: float(x)},
                                  {"op": lambda x: int(x)},
                                  {"op": lambda x: round(x)},
                                  {"op": lambda x: x % 2},
                                  {"op": lambda x: x.clip(0, 1)},
                                  {"op": lambda x: abs(x - 2.0)}])
def test_unsupported_operations(inpt):
    """Operations that would drop derivative information"""
    with pytest.raises(UnsupportedDualOperation):
        inpt["op"](Dual(2.0, 1.0))


def test_mixing_dual_types():
    with pytest.raises(UnsupportedDualOperation):
        Dual(1.0, 1.0) * Dual2(1.0, 1.0, 0.0)
    with pytest.raises(UnsupportedDualOperation):
        Dual(1.0, 1.0) + HyperDual(1.0, 1.0, 0.0, 0.0)


def test_dual_exponent():
    f = lambda x: x**x
    _, deriv = dual.first_derivative(f, 1.5)
    assert(deriv == approx(1.5**1.5 * (np.log(1.5) + 1)))
