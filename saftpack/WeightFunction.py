"""
Weight functions, held as their 3D Fourier transforms. A weight can be scaled by a number (float or dual number),

    m * Delta(R) / (4 pi R^2)

returns a new weight, so that the weights of a contribution can be written down as in the literature.

Weights are always organised as w[<weighted density idx>][<species idx>], where a `None` entry means that the species
does not contribute to that weighted density.

Transforms take the wavenumber k (inverse length, not angular), and depend on x = 2 pi k R.
"""
import numpy as np
from scipy.special import spherical_jn


def _ball(x):
    """Internal
    Transform of a normalised ball, 3 j1(x) / x = j0(x) + j2(x)
    """
    return spherical_jn(0, x) + spherical_jn(2, x)


class Analytical:
    """
    A weight function, with transform `transform(k)` and integral over all space `integral`. The integral is kept
    apart from the transform, so that bulk weighted densities never evaluate transforms, also when the prefactor of
    the weight is a dual number.

    Vector valued weights are odd and all others even, which selects the sine/cosine transforms of a convolution.
    """
    __array_ufunc__ = None # numpy scalars defer to __rmul__

    def __init__(self, transform, integral, is_vector_valued=False):
        self.transform = transform
        self.integral = integral
        self.is_vector_valued = is_vector_valued

    def __call__(self, k):
        return self.transform(k)

    def __mul__(self, factor):
        return Analytical(lambda k: factor * self(k), factor * self.integral, self.is_vector_valued)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        return self * (1 / divisor)

    def is_odd(self):
        return self.is_vector_valued

    def is_even(self):
        return not self.is_vector_valued

    def is_local(self):
        return False

    def real_integral(self):
        return self.integral


class LocalDensity(Analytical):
    """
    The (scaled) local density itself, i.e. a delta function weight. Convolutions reduce to a multiplication.
    """
    def __init__(self, mult_factor=1):
        self.mult_factor = mult_factor
        super().__init__(None, mult_factor)

    def __mul__(self, factor):
        return LocalDensity(self.mult_factor * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        return LocalDensity(self.mult_factor / divisor)

    def __call__(self, k):
        raise TypeError('LocalDensity has no transform, convolutions with it are multiplications.')

    def is_local(self):
        return True


class Heaviside(Analytical):
    r"""$\theta(R - r)$"""
    def __init__(self, R):
        self.R = R
        volume = 4 * np.pi * R**3 / 3
        super().__init__(lambda k: volume * _ball(2 * np.pi * k * R), volume)


class NormTheta(Analytical):
    r"""$\theta(R - r)$ normalised to unit integral"""
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: _ball(2 * np.pi * k * R), 1)


class Delta(Analytical):
    r"""$\delta(r - R)$"""
    def __init__(self, R):
        self.R = R
        area = 4 * np.pi * R**2
        super().__init__(lambda k: area * spherical_jn(0, 2 * np.pi * k * R), area)


class DeltaVec(Analytical):
    r"""
    $\hat{r} \delta(r - R)$, the outward unit vector on the sphere of radius R. Only the component along the direction
    of inhomogeneity is kept.
    """
    def __init__(self, R):
        self.R = R
        volume = 4 * np.pi * R**3 / 3
        super().__init__(lambda k: - 2 * np.pi * k * volume * _ball(2 * np.pi * k * R), 0., is_vector_valued=True)


class KierlikRosinberg0(Analytical):
    """Scalar w0 of the Kierlik-Rosinberg functional"""
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: np.cos(2 * np.pi * k * R) + np.pi * k * R * np.sin(2 * np.pi * k * R), 1.)


class KierlikRosinberg1(Analytical):
    """Scalar w1 of the Kierlik-Rosinberg functional"""
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: R * (np.sinc(2 * k * R) + np.cos(2 * np.pi * k * R)) / 2, R)


def get_FMT_weights(R, ms=None):
    r"""Weights
    Weights of the White Bear versions of FMT: w[0:4] are the scalar weights (w0, w1, w2, w3), w[4:6] the vector weights
    $\vec{w}_1$ and $\vec{w}_2$.

    Args:
        R (Sequence) : Hard sphere radius of each species (float or dual numbers)
        ms (Sequence, optional) : Segment number of each species, defaults to one.
    Returns:
        list[list[Analytical]] : The weights
    """
    ms = np.ones(len(R)) if ms is None else ms
    w = [[None] * len(R) for _ in range(6)]
    for i, (Ri, mi) in enumerate(zip(R, ms)):
        w2 = mi * Delta(Ri)
        w2v = mi * DeltaVec(Ri)
        w[0][i] = w2 / (4 * np.pi * Ri**2)
        w[1][i] = w2 / (4 * np.pi * Ri)
        w[2][i] = w2
        w[3][i] = mi * Heaviside(Ri)
        w[4][i] = w2v / (4 * np.pi * Ri)
        w[5][i] = w2v
    return w


def get_KR_weights(R, ms=None):
    """Weights
    Weights of the Kierlik-Rosinberg version of FMT, scalar only: (w0, w1, w2, w3).

    Args:
        R (Sequence) : Hard sphere radius of each species
        ms (Sequence, optional) : Segment number of each species, defaults to one.
    Returns:
        list[list[Analytical]] : The weights
    """
    ms = np.ones(len(R)) if ms is None else ms
    w = [[None] * len(R) for _ in range(4)]
    for i, (Ri, mi) in enumerate(zip(R, ms)):
        w[0][i] = mi * KierlikRosinberg0(Ri)
        w[1][i] = mi * KierlikRosinberg1(Ri)
        w[2][i] = mi * Delta(Ri)
        w[3][i] = mi * Heaviside(Ri)
    return w
