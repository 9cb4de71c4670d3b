"""
Forward mode automatic differentiation with dual numbers.

Three number types are provided, all of which can carry numpy arrays in each of their parts, so that a single
dual number holds the derivatives on a whole grid or for a whole component vector:

    Dual      : value and first derivative,           x = re + eps * E,           E^2 = 0
    Dual2     : value, first and second derivative,   x = re + v1 * E + v2 * E^2 / 2,  E^3 = 0
    HyperDual : value, two first derivatives and the mixed second derivative,
                x = re + eps1 * E1 + eps2 * E2 + eps1eps2 * E1 * E2,  E1^2 = E2^2 = 0

Plain floats and numpy arrays are the zero order numbers, so every function written against the arithmetic
operators and the module level functions (exp, log, sqrt, expm1, where) is generic over all four.
Operations that would silently discard derivative information (comparisons, truncation, clamping) raise
UnsupportedDualOperation.
"""
import numpy as np
from .exceptions import UnsupportedDualOperation

REAL_TYPES = (int, float, np.number, np.ndarray)


def _is_real(x):
    return isinstance(x, REAL_TYPES)


def _unsupported(name):
    def method(self, *args, **kwargs):
        raise UnsupportedDualOperation(f'Operation {name} is not defined for {type(self).__name__}, '
                                       f'as it would drop derivative information.')
    method.__name__ = name
    return method


class DualNumber:
    """Internal
    Common arithmetic for the dual number types. Subclasses define the number of parts, the product rule
    (_mul) and the chain rule (_chain).
    """
    __array_ufunc__ = None # Keep numpy from treating dual numbers as object scalars
    nparts = 2
    order = 1

    @property
    def parts(self):
        raise NotImplementedError

    @classmethod
    def from_parts(cls, parts):
        return cls(*parts)

    @classmethod
    def constant(cls, value):
        """Utility
        Promote a real number or array to a dual number with vanishing derivative parts.
        """
        zero = np.zeros_like(value, dtype=float) if np.ndim(value) > 0 else 0.0
        return cls(value, *([zero] * (cls.nparts - 1)))

    def _check(self, other):
        if type(other) is not type(self):
            raise UnsupportedDualOperation(f'Cannot combine {type(self).__name__} and {type(other).__name__}.')
        return other

    def _mul(self, other):
        raise NotImplementedError

    def _chain(self, f0, f1, f2):
        raise NotImplementedError

    @property
    def re(self):
        return self.parts[0]

    @property
    def shape(self):
        return np.shape(self.re)

    @property
    def ndim(self):
        return np.ndim(self.re)

    def __len__(self):
        return len(self.re)

    def __getitem__(self, item):
        return self.from_parts(tuple(p[item] for p in np.broadcast_arrays(*self.parts)))

    def sum(self, axis=None):
        return self.from_parts(tuple(np.sum(p, axis=axis) for p in np.broadcast_arrays(*self.parts)))

    def __neg__(self):
        return self.from_parts(tuple(-p for p in self.parts))

    def __pos__(self):
        return self

    def __add__(self, other):
        if isinstance(other, DualNumber):
            self._check(other)
            return self.from_parts(tuple(a + b for a, b in zip(self.parts, other.parts)))
        if _is_real(other):
            return self.from_parts((self.parts[0] + other,) + tuple(self.parts[1:]))
        return NotImplemented

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        if isinstance(other, DualNumber) or _is_real(other):
            return self.__add__(-other)
        return NotImplemented

    def __rsub__(self, other):
        return (-self).__add__(other)

    def __mul__(self, other):
        if isinstance(other, DualNumber):
            return self._mul(self._check(other))
        if _is_real(other):
            return self.from_parts(tuple(p * other for p in self.parts))
        return NotImplemented

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        if isinstance(other, DualNumber):
            return self._mul(self._check(other).recip())
        if _is_real(other):
            return self.from_parts(tuple(p / other for p in self.parts))
        return NotImplemented

    def __rtruediv__(self, other):
        if _is_real(other):
            return self.recip() * other
        return NotImplemented

    def __pow__(self, n):
        if isinstance(n, DualNumber):
            return (n * self.log()).exp()
        if not _is_real(n):
            return NotImplemented
        if np.ndim(n) == 0:
            if n == 0:
                return self.constant(np.ones_like(self.re, dtype=float) if self.ndim > 0 else 1.0)
            if n == 1:
                return self
            if n == 2:
                return self._mul(self)
        x = self.re * 1.0
        return self._chain(x ** n, n * x ** (n - 1), n * (n - 1) * x ** (n - 2))

    def __rpow__(self, base):
        if _is_real(base):
            return (self * np.log(base)).exp()
        return NotImplemented

    def recip(self):
        x = self.re * 1.0
        return self._chain(1 / x, - 1 / x**2, 2 / x**3)

    def exp(self):
        f = np.exp(self.re)
        return self._chain(f, f, f)

    def expm1(self):
        f = np.exp(self.re)
        return self._chain(np.expm1(self.re), f, f)

    def log(self):
        x = self.re * 1.0
        return self._chain(np.log(x), 1 / x, - 1 / x**2)

    def sqrt(self):
        f = np.sqrt(self.re)
        return self._chain(f, 0.5 / f, - 0.25 / f**3)

    def __abs__(self):
        if np.any(np.asarray(self.re) == 0):
            raise UnsupportedDualOperation('abs() is not differentiable at zero.')
        return self * np.sign(self.re)

    __lt__ = _unsupported('__lt__')
    __le__ = _unsupported('__le__')
    __gt__ = _unsupported('__gt__')
    __ge__ = _unsupported('__ge__')
    __eq__ = _unsupported('__eq__')
    __ne__ = _unsupported('__ne__')
    __hash__ = None
    __float__ = _unsupported('__float__')
    __int__ = _unsupported('__int__')
    __round__ = _unsupported('__round__')
    __floor__ = _unsupported('__floor__')
    __ceil__ = _unsupported('__ceil__')
    __trunc__ = _unsupported('__trunc__')
    __mod__ = _unsupported('__mod__')
    __rmod__ = _unsupported('__rmod__')
    __floordiv__ = _unsupported('__floordiv__')
    __rfloordiv__ = _unsupported('__rfloordiv__')
    __divmod__ = _unsupported('__divmod__')
    clip = _unsupported('clip')
    maximum = _unsupported('maximum')
    minimum = _unsupported('minimum')

    def __repr__(self):
        return f'{type(self).__name__}({", ".join(repr(p) for p in self.parts)})'


class Dual(DualNumber):
    """
    First order dual number re + eps * E.
    """
    nparts = 2
    order = 1

    def __init__(self, re, eps=0.0):
        self._re = re
        self.eps = eps

    @property
    def parts(self):
        return (self._re, self.eps)

    def _mul(self, other):
        return Dual(self._re * other._re, self._re * other.eps + self.eps * other._re)

    def _chain(self, f0, f1, f2):
        return Dual(f0, f1 * self.eps)


class Dual2(DualNumber):
    """
    Second order dual number in a single direction, re + v1 * E + v2 * E^2 / 2. The part v2 holds the
    second derivative.
    """
    nparts = 3
    order = 2

    def __init__(self, re, v1=0.0, v2=0.0):
        self._re = re
        self.v1 = v1
        self.v2 = v2

    @property
    def parts(self):
        return (self._re, self.v1, self.v2)

    def _mul(self, other):
        return Dual2(self._re * other._re,
                     self._re * other.v1 + self.v1 * other._re,
                     self._re * other.v2 + 2 * self.v1 * other.v1 + self.v2 * other._re)

    def _chain(self, f0, f1, f2):
        return Dual2(f0, f1 * self.v1, f2 * self.v1 * self.v1 + f1 * self.v2)


class HyperDual(DualNumber):
    """
    Hyper-dual number, carrying two independent first derivatives (eps1, eps2) and the mixed second
    derivative (eps1eps2).
    """
    nparts = 4
    order = 2

    def __init__(self, re, eps1=0.0, eps2=0.0, eps1eps2=0.0):
        self._re = re
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps1eps2 = eps1eps2

    @property
    def parts(self):
        return (self._re, self.eps1, self.eps2, self.eps1eps2)

    def _mul(self, other):
        return HyperDual(self._re * other._re,
                         self._re * other.eps1 + self.eps1 * other._re,
                         self._re * other.eps2 + self.eps2 * other._re,
                         self._re * other.eps1eps2 + self.eps1 * other.eps2
                         + self.eps2 * other.eps1 + self.eps1eps2 * other._re)

    def _chain(self, f0, f1, f2):
        return HyperDual(f0, f1 * self.eps1, f1 * self.eps2, f2 * self.eps1 * self.eps2 + f1 * self.eps1eps2)


def isdual(x):
    return isinstance(x, DualNumber)


def re(x):
    """Utility
    Real part of a (possibly) dual number. Plain numbers are returned as is.
    """
    return x.re if isdual(x) else x


def exp(x):
    return x.exp() if isdual(x) else np.exp(x)


def expm1(x):
    return x.expm1() if isdual(x) else np.expm1(x)


def log(x):
    return x.log() if isdual(x) else np.log(x)


def sqrt(x):
    return x.sqrt() if isdual(x) else np.sqrt(x)


def where(cond, x, y):
    """Utility
    Element-wise selection between two (possibly) dual valued expressions. The condition must be real valued,
    typically computed from the real parts using `re`. Both branches are evaluated by the caller, so guards
    against invalid values in the unselected branch must be handled by the caller (e.g. with np.errstate).

    Args:
        cond (bool or ndarray[bool]) : Selection mask
        x, y (float, ndarray or DualNumber) : Values to select from where cond is True and False, respectively.
    Returns:
        float, ndarray or DualNumber : The element-wise selection.
    """
    if np.ndim(cond) == 0:
        return x if cond else y
    duals = [v for v in (x, y) if isdual(v)]
    if len(duals) == 0:
        return np.where(cond, x, y)
    cls = type(duals[0])
    x = x if isdual(x) else cls.constant(x)
    y = y if isdual(y) else cls.constant(y)
    x._check(y)
    return cls.from_parts(tuple(np.where(cond, a, b) for a, b in zip(x.parts, y.parts)))


def stack(values):
    """Utility
    Collect a sequence of (possibly) dual scalars into a single number with array valued parts.
    """
    duals = [v for v in values if isdual(v)]
    if len(duals) == 0:
        return np.array(values, dtype=float)
    cls = type(duals[0])
    values = [duals[0]._check(v) if isdual(v) else cls.constant(v) for v in values]
    return cls.from_parts(tuple(np.array([v.parts[k] for v in values], dtype=float) for k in range(cls.nparts)))


def max_abs(x):
    """Utility
    Largest absolute value over all parts of x, used as convergence norm in fixed point iterations.
    """
    if isdual(x):
        return max(float(np.max(np.abs(p))) for p in x.parts)
    return float(np.max(np.abs(x)))


def _split(result, cls):
    if isinstance(result, cls):
        return result.parts
    if isdual(result):
        raise UnsupportedDualOperation(f'Expected a {cls.__name__} result, got {type(result).__name__}.')
    return (result,) + (0.0,) * (cls.nparts - 1)


def first_derivative(f, x):
    """Utility
    Value and first derivative of a scalar function.

    Args:
        f (callable) : Function of a single argument, written generically over the numeric type.
        x (float) : Point of evaluation
    Returns:
        tuple(float, float) : f(x), f'(x)
    """
    return _split(f(Dual(x, 1.0)), Dual)


def second_derivative(f, x):
    """Utility
    Value, first and second derivative of a scalar function.

    Returns:
        tuple(float, float, float) : f(x), f'(x), f''(x)
    """
    return _split(f(Dual2(x, 1.0, 0.0)), Dual2)


def second_partial_derivative(f, x, y):
    """Utility
    Value, partial derivatives and mixed second partial derivative of a function of two variables.

    Returns:
        tuple(float, float, float, float) : f, df/dx, df/dy, d2f/dxdy
    """
    return _split(f(HyperDual(x, 1.0, 0.0, 0.0), HyperDual(y, 0.0, 1.0, 0.0)), HyperDual)


def gradient(f, x):
    """Utility
    Value and gradient of a function taking a sequence of numbers, using one Dual evaluation per element.

    Args:
        f (callable) : Function of a single (sequence) argument.
        x (1D array_like) : Point of evaluation
    Returns:
        tuple(float, 1D array) : f(x), grad f(x)
    """
    x = np.asarray(x, dtype=float)
    grad = np.zeros(len(x))
    value = None
    for i in range(len(x)):
        args = [Dual(xj, 1.0 if j == i else 0.0) for j, xj in enumerate(x)]
        value, grad[i] = _split(f(args), Dual)
    if value is None:
        value = f([])
    return value, grad


def hessian(f, x):
    """Utility
    Value, gradient and Hessian of a function taking a sequence of numbers, using hyper-dual numbers.

    Returns:
        tuple(float, 1D array, 2D array) : f(x), grad f(x), Hessian of f at x
    """
    x = np.asarray(x, dtype=float)
    n = len(x)
    grad = np.zeros(n)
    hess = np.zeros((n, n))
    value = None
    for i in range(n):
        for j in range(i, n):
            args = [HyperDual(xk, 1.0 if k == i else 0.0, 1.0 if k == j else 0.0, 0.0) for k, xk in enumerate(x)]
            value, grad[i], grad[j], hess[i, j] = _split(f(args), HyperDual)
            hess[j, i] = hess[i, j]
    return value, grad, hess
