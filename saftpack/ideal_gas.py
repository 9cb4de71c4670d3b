"""
Ideal gas contribution to the Helmholtz energy, from the Joback group contribution heat capacity.
"""
import numpy as np
from scipy.constants import Boltzmann, gas_constant
from saftpack import dual
from saftpack.parameters import JobackRecord

T0 = 298.15 # Reference temperature [K]
P0 = 1e5 # Reference pressure [Pa]


class Joback:
    """
    Ideal gas Helmholtz energy density

        phi_ig = sum_i rho_i (ln(rho_i Lambda_i^3) - 1)

    where the thermal wavelength Lambda_i follows from the ideal gas heat capacity cp_i(T) = a + b T + c T^2 + d T^3 + e T^4,
    with the enthalpy and entropy integrated from the reference state (T0, p0). Components without a record get
    zero heat capacity, leaving only the density dependent part.
    """

    def __init__(self, records):
        """Constructor
        Args:
            records (Sequence[JobackRecord or None]) : Heat capacity coefficients for each component.
        """
        records = [JobackRecord(0, 0, 0, 0, 0) if r is None else r for r in records]
        self.records = tuple(records)
        self.ncomps = len(records)
        self._coeffs = np.array([[r.a, r.b, r.c, r.d, r.e] for r in records])

    @staticmethod
    def default(ncomps):
        """Constructor
        Ideal gas term without heat capacity data.
        """
        return Joback([None for _ in range(ncomps)])

    def ln_lambda3(self, T):
        """Internal
        Logarithm of the cubed thermal wavelength of each component, ln(Lambda^3 / Å^3). T may be a dual number.

        Returns:
            list : One value per component.
        """
        lnT = dual.log(T / T0)
        out = []
        for a, b, c, d, e in self._coeffs:
            # Integrals of cp and cp / T from T0 to T
            h = a * (T - T0) + b / 2 * (T**2 - T0**2) + c / 3 * (T**3 - T0**3) + d / 4 * (T**4 - T0**4) \
                + e / 5 * (T**5 - T0**5)
            s = a * lnT + b * (T - T0) + c / 2 * (T**2 - T0**2) + d / 3 * (T**3 - T0**3) + e / 4 * (T**4 - T0**4)
            out.append((h - T * s) / (gas_constant * T) + dual.log(1e30 * Boltzmann * T / P0))
        return out

    def helmholtz_energy_density(self, T, rho):
        """Helmholtz contribution
        Reduced ideal gas Helmholtz energy density [1 / Å^3]

        Args:
            T (float or DualNumber) : Temperature [K]
            rho (list) : Density of each component [1 / Å^3], floats, arrays or dual numbers.
        Returns:
            float, ndarray or DualNumber : phi_ig
        """
        phi = 0
        with np.errstate(divide='ignore', invalid='ignore'):
            for rho_i, lnl3 in zip(rho, self.ln_lambda3(T)):
                term = rho_i * (dual.log(rho_i) + lnl3 - 1)
                phi = phi + dual.where(dual.re(rho_i) > 0, term, 0.0)
        return phi

    def __repr__(self):
        return f'Joback({list(self.records)})'
