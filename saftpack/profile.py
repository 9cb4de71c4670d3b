import numpy as np
from scipy.integrate import trapezoid
from saftpack.grid import Grid, Geometry


class Profile(np.ndarray):
    """
    Values on a Grid: density profiles, weighted densities, Helmholtz energy densities and functional derivatives.
    The Grid travels with the values, so that convolutions and integrals know the geometry and spacing.

    Vector fields (vector weighted densities, and derivatives with respect to them) are odd under reflection about
    the domain start, which selects the transforms used in convolutions.

    Note: numpy reductions and some ufuncs return plain ndarrays. Re-wrap with Profile(arr, grid) where the grid is
        needed.
    """
    def __new__(cls, values, grid=None, geometry=Geometry.PLANAR, domain_size=10, is_vector_field=False):
        """Constructor
        Args:
            values (Sized) : Value at each gridpoint
            grid (Grid, optional) : The grid. If omitted, a grid with len(values) points, the given geometry and
                                    domain_size is created.
            geometry (Geometry, optional) : Geometry of the created grid
            domain_size (float, optional) : Width of the created grid [Å]
            is_vector_field (bool, optional) : Whether the values are the radial component of a vector field.
        Raises:
            ValueError : If the number of values does not match the grid.
        """
        obj = np.asarray(values, dtype=float).view(cls)
        if grid is None:
            grid = Grid(len(obj), geometry, domain_size)
        elif len(obj) != grid.N:
            raise ValueError(f'Profile has {len(obj)} points, but the grid has {grid.N}.')
        obj.grid = grid
        obj.is_vector_field = is_vector_field
        return obj

    def __array_finalize__(self, obj):
        if obj is None: return
        self.grid = getattr(obj, 'grid', None)
        self.is_vector_field = getattr(obj, 'is_vector_field', False)

    def is_even(self):
        return not self.is_vector_field

    def is_odd(self):
        return self.is_vector_field

    def integrate(self):
        """Profile Property
        Trapezoid integral over the gridpoints. Planar profiles are integrated per unit area, spherical profiles over
        the ball, including the 4 pi r^2 measure.

        Returns:
            float : The integral
        """
        f = np.asarray(self) * self.grid.integration_weights()
        return float(trapezoid(f, dx=self.grid.dz))

    @staticmethod
    def constant(grid, values):
        """Utility
        One constant Profile per value, e.g. a homogeneous bulk phase on a grid.

        Args:
            grid (Grid) : The grid
            values (list[float]) : Value of each profile
        Returns:
            list[Profile] : The profiles
        """
        return [Profile(np.full(grid.N, float(v)), grid) for v in values]
