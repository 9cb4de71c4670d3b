"""
Spatial discretisation of an inhomogeneous system: the geometry (symmetry) of the domain, the cell centred gridpoints,
and the wavenumbers of the type 2 sine and cosine transforms used in Convolver.py.
"""
from enum import IntEnum
import numpy as np


class Geometry(IntEnum):
    PLANAR = 1
    SPHERICAL = 3


class Grid:
    """
    N cells of width dz covering [domain_start, domain_start + L], with gridpoints z at the cell centres. Spherical
    grids start at the origin, and z is the radial coordinate.
    """

    def __init__(self, n_grid, geometry, domain_size, domain_start=0):
        """Constructor
        Args:
            n_grid (int) : Number of gridpoints
            geometry (Geometry) : PLANAR or SPHERICAL
            domain_size (float) : Width of the domain [Å]
            domain_start (float, optional) : Start of the domain [Å], must be zero for spherical grids.
        Raises:
            ValueError : For fewer than two gridpoints, a non-positive domain size, or a spherical grid off the origin.
            NotImplementedError : For other geometries.
        """
        if n_grid < 2:
            raise ValueError(f'A grid needs at least two points, got {n_grid}.')
        if domain_size <= 0:
            raise ValueError(f'Domain size must be positive, got {domain_size}.')
        if geometry not in (Geometry.PLANAR, Geometry.SPHERICAL):
            raise NotImplementedError(f'No grid for geometry {geometry}.')
        if geometry == Geometry.SPHERICAL and domain_start != 0:
            raise ValueError('Spherical grids must start at the origin.')

        self.geometry = Geometry(geometry)
        self.N = n_grid
        self.L = domain_size
        self.domain_start = domain_start
        self.dz = domain_size / n_grid
        self.z = domain_start + self.dz * (np.arange(n_grid) + 0.5)

        # Wavenumbers (not angular) of the type 2 cosine and sine transforms
        self.k_cos = np.arange(n_grid) / (2 * domain_size)
        self.k_sin = np.arange(1, n_grid + 1) / (2 * domain_size)

    def integration_weights(self):
        """Utility
        The measure used when integrating over the grid, i.e. 1 for planar grids and 4 pi r^2 for spherical grids.

        Returns:
            ndarray : Measure evaluated at the gridpoints.
        """
        if self.geometry == Geometry.PLANAR:
            return np.ones(self.N)
        return 4 * np.pi * self.z**2

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return False
        return (self.N, self.L, self.domain_start, self.geometry) == (other.N, other.L, other.domain_start, other.geometry)

    def __hash__(self):
        return hash((self.N, self.L, self.domain_start, self.geometry))

    def __repr__(self):
        return f'{self.geometry.name.capitalize()} grid with N : {self.N}, L : {self.L}, domain_start : {self.domain_start}'


class PlanarGrid(Grid):

    def __init__(self, n_grid, domain_size, domain_start=0):
        super().__init__(n_grid, Geometry.PLANAR, domain_size, domain_start=domain_start)


class SphericalGrid(Grid):

    def __init__(self, n_grid, domain_size):
        super().__init__(n_grid, Geometry.SPHERICAL, domain_size)
