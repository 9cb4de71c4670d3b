"""
This is the module that handles all the special treatment of convolutions depending on geometry and symmetry.

The basis is the 'convolve_ad' function, which takes an Analytical object (WeightFunction.py) and a Profile (profile.py).

By looking at the Profile's grid (specifically the grid.geometry attribute), as well as the is_even() and is_odd()
methods of the Profile and the Analytical, this module determines what series of transforms to use to compute the
convolution. All transforms are the type 2 discrete sine and cosine transforms, so that a profile is implicitly
reflected about the domain start and the gridpoints sit at cell centres.
"""
from scipy.fft import dst, idst, dct, idct
import numpy as np
from saftpack.grid import Geometry


def convolve_ad(analytical, discrete):
    """
    Convolution w * f of a weight with a profile. Local weights reduce to a multiplication.

    Args:
        analytical (Analytical) : The weight, see WeightFunction.py
        discrete (Profile) : The profile f, its grid selects the geometry.
    Returns:
        ndarray : The convolution at the gridpoints, as a plain array.
    """
    if analytical.is_local():
        return np.asarray(discrete) * analytical.mult_factor
    if discrete.grid.geometry == Geometry.PLANAR:
        return convolve_ad_planar(analytical, discrete)
    return convolve_ad_spherical(analytical, discrete)


def convolve_ad_planar(analytical, discrete):
    """
    Planar convolution, with the profile reflected about the domain start.

    Args:
        analytical (Analytical) : The weight
        discrete (Profile) : The profile
    Returns:
        ndarray : The convolution at the gridpoints
    """
    grid = discrete.grid
    values = np.asarray(discrete)

    # The forward transform follows the parity of the discrete function, the inverse transform the parity of the
    # product. When the two differ, the transformed coefficients are shifted by one wavenumber.
    if discrete.is_even():
        transformed = dct(values, type=2)
        if analytical.is_even():
            return idct(transformed * analytical(grid.k_cos), type=2)
        transformed = np.roll(transformed, -1)
        transformed[-1] = 0
        return idst(transformed * analytical(grid.k_sin), type=2)

    transformed = dst(values, type=2)
    if analytical.is_odd():
        transformed = np.roll(transformed, +1)
        transformed[0] = 0
        return - idct(transformed * analytical(grid.k_cos), type=2)
    return idst(transformed * analytical(grid.k_sin), type=2)


def convolve_ad_spherical(analytical, discrete):
    """
    Convolutions for spherical geometry. The profile is split in its value at the domain end, which is convolved
    analytically, and the deviation from that value, which is transformed.

    Args:
        analytical (Analytical) : The weight
        discrete (Profile) : The radial profile
    Returns:
        ndarray : The convolution at the gridpoints
    Raises:
        NotImplementedError : For an even weight acting on an odd profile.
    """
    grid = discrete.grid
    r = grid.z
    k_sin = grid.k_sin
    k_cos = grid.k_cos

    values = np.asarray(discrete)
    value_inf = values[-1]
    delta = values - value_inf

    # The argument to the transforms is f(r) * r, which is odd if f(r) is even
    if discrete.is_even():
        w_sin = analytical(k_sin)
        if analytical.is_even():
            delta_term = (1 / r) * idst(dst(delta * r, type=2) * w_sin, type=2)
            return delta_term + analytical(0) * value_inf

        transformed = dst(delta * r, type=2) / k_sin
        odd_term = transformed * w_sin
        even_term = np.roll(transformed, +1) * analytical(k_cos) * k_cos
        even_term[0] = 0
        # The idst is halved because of the transform prefactor. The constant part vanishes for vector weights.
        return (1 / (np.pi * r**2)) * idst(odd_term, type=2) / 2 - (1 / r) * idct(even_term, type=2)

    if analytical.is_even():
        raise NotImplementedError('Convolution of an even weight with an odd profile is not implemented '
                                  'for spherical geometry.')
    # An odd weight w is the gradient of the even weight w_s with transform -w(k) / (2 pi k), and w . g = w_s * div(g).
    # With S and C the sine and cosine transforms, S[r div(g)] = S[g] - 2 pi k C[r g]. The vector field vanishes in
    # bulk, so it is transformed as is.
    cos_term = np.roll(dct(values * r, type=2), -1)
    cos_term[-1] = 0
    sin_term = dst(values, type=2) / (2 * np.pi * k_sin)
    return (1 / r) * idst((cos_term - sin_term) * analytical(k_sin), type=2)
