import abc
import warnings
import numpy as np
from scipy.constants import Boltzmann
from saftpack import dual
from saftpack.dual import Dual
from saftpack.Convolver import convolve_ad
from saftpack.profile import Profile
from saftpack.ideal_gas import Joback
from saftpack.exceptions import UnsupportedCapabilityError, UnsupportedDualOperation

TINY = np.finfo(float).tiny


class MoleculeShape:
    """
    Description of the molecular model, used by solvers to set up the density representation:

        Spherical(n) : n spherical components
        NonSpherical(m) : chains with segment numbers m
        Heterosegmented(component_index) : chains of distinct segments, component_index[alpha] is the component of
                                           segment alpha.
    """
    def __init__(self, kind, value):
        self.kind = kind
        self.value = value

    @staticmethod
    def Spherical(ncomps):
        return MoleculeShape('Spherical', ncomps)

    @staticmethod
    def NonSpherical(m):
        return MoleculeShape('NonSpherical', np.array(m, dtype=float))

    @staticmethod
    def Heterosegmented(component_index):
        return MoleculeShape('Heterosegmented', np.array(component_index, dtype=int))

    def __eq__(self, other):
        if not isinstance(other, MoleculeShape) or other.kind != self.kind:
            return False
        return bool(np.all(np.asarray(self.value) == np.asarray(other.value)))

    def __repr__(self):
        return f'MoleculeShape.{self.kind}({self.value!r})'


class FunctionalContribution(metaclass=abc.ABCMeta):
    """
    A single term of the residual Helmholtz energy functional. A contribution is a pair of
        * weight functions, get_weights(T), indexed as w[<weighted density idx>][<species idx>], and
        * a local Helmholtz energy density, helmholtz_energy_density(T, n), of the weighted densities.
    The Functional computes the weighted densities (by convolution for profiles, by integrating the weights for bulk
    phases) and sums the contributions.

    helmholtz_energy_density must be written generically: T and the weighted densities may be floats, numpy
    arrays or dual numbers (see dual.py), so only arithmetic and the functions in dual.py may be used on them.
    """
    def __init__(self, parameters):
        self.parameters = parameters

    @property
    def name(self):
        return type(self).__name__

    @abc.abstractmethod
    def get_weights(self, T):
        """Weights
        Weight functions, indexed as w[<weighted density idx>][<species idx>], None where a species does not
        contribute to a weighted density.

        Args:
            T (float or DualNumber) : Temperature [K]
        Returns:
            list[list[Analytical or None]] : The weights
        """
        pass

    @abc.abstractmethod
    def helmholtz_energy_density(self, T, n):
        """Helmholtz contribution
        Reduced Helmholtz energy density [1 / Å^3] as a function of the weighted densities.

        Args:
            T (float or DualNumber) : Temperature [K]
            n (list) : Weighted densities, ordered as the weights.
        Returns:
            float, ndarray or DualNumber : The reduced Helmholtz energy density.
        """
        pass

    def __repr__(self):
        return self.name


class PairPotential(metaclass=abc.ABCMeta):
    """
    Optional capability: Functionals with a well defined pair potential (used for external potentials and
    pair correlation calculations).
    """

    @abc.abstractmethod
    def pair_potential(self, i, r, T):
        """Utility
        Pair potential between component i and all components, at the distances r.

        Args:
            i (int) : Component index
            r (1d array) : Distances [Å]
            T (float) : Temperature [K] (used by temperature dependent potentials)
        Returns:
            2d array : Potential divided by Boltzmanns constant [K], indexed as u[<comp idx>][<r idx>]
        """
        pass


class FluidParameters(metaclass=abc.ABCMeta):
    """
    Optional capability: Functionals exposing the fluid-fluid interaction parameters of each species, used for
    solid-fluid combining rules.
    """

    @abc.abstractmethod
    def epsilon_k_ff(self):
        pass

    @abc.abstractmethod
    def sigma_ff(self):
        pass


def as_pair_potential(functional):
    """Utility
    Args:
        functional (HelmholtzEnergyFunctional) : The functional
    Returns:
        PairPotential : The functional, if it provides a pair potential
    Raises:
        UnsupportedCapabilityError : Otherwise
    """
    if not isinstance(functional, PairPotential):
        raise UnsupportedCapabilityError(f'{type(functional).__name__} does not provide a pair potential.')
    return functional


def as_fluid_parameters(functional):
    """Utility
    Args:
        functional (HelmholtzEnergyFunctional) : The functional
    Returns:
        FluidParameters : The functional, if it exposes fluid-fluid parameters
    Raises:
        UnsupportedCapabilityError : Otherwise
    """
    if not isinstance(functional, FluidParameters):
        raise UnsupportedCapabilityError(f'{type(functional).__name__} does not expose fluid parameters.')
    return functional


class HelmholtzEnergyFunctional(metaclass=abc.ABCMeta):

    def __init__(self, parameters, options, fmt_version=None):
        """Internal
        Handles initialisation that is common for all functionals: stores the (immutable) parameters and options,
        assembles the contributions, and sets up the ideal gas term.

        Args:
            parameters (Parameters) : The model parameters
            options (Options) : The model options
            fmt_version (FMTVersion) : Version of fundamental measure theory
        """
        self.parameters = parameters
        self.options = options
        self.fmt_version = fmt_version
        self.ncomps = parameters.ncomps
        self._contributions = tuple(self._assemble())
        records = parameters.joback_records
        if all(r is None for r in records):
            self._ideal_gas = Joback.default(self.ncomps)
        else:
            self._ideal_gas = Joback(records)

    @abc.abstractmethod
    def _assemble(self):
        """Internal
        Select the contributions of this functional from the parameters and options.

        Returns:
            list[FunctionalContribution] : The contributions, in evaluation order.
        """
        pass

    def __repr__(self):
        return f'{type(self).__name__}(contributions : {[c.name for c in self._contributions]}, ' \
               f'fmt_version : {getattr(self.fmt_version, "name", None)},\n' \
               f'parameters : {self.parameters!r},\noptions : {self.options!r})'

    def contributions(self):
        """Utility
        Returns:
            tuple[FunctionalContribution] : The contributions, in evaluation order.
        """
        return self._contributions

    def ideal_gas(self):
        """Utility
        Returns:
            Joback : The ideal gas term
        """
        return self._ideal_gas

    def molecule_shape(self):
        """Utility
        Returns:
            MoleculeShape : Spherical if all segment numbers are unity, NonSpherical otherwise.
        """
        m = self.parameters.m
        if np.all(m == 1):
            return MoleculeShape.Spherical(self.ncomps)
        return MoleculeShape.NonSpherical(m)

    def molar_weight(self):
        """Utility
        Returns:
            1d array : Molar weight of each component [g / mol]
        """
        return self.parameters.molar_weight()

    def subset(self, component_indices):
        """Utility
        A new functional of the same variant, for a subset of the components. The contributions are assembled
        anew, so that e.g. a mixture reduced to a single component uses the single component contributions.

        Args:
            component_indices (Sequence[int]) : The components to keep, in order.
        Returns:
            HelmholtzEnergyFunctional : The new functional
        """
        return type(self)(self.parameters.subset(component_indices), fmt_version=self.fmt_version,
                          options=self.options)

    def validate_moles(self, moles):
        """Internal
        Check that `moles` has one non-negative entry per component, and is not all zero.

        Raises:
            IndexError : If number of mole numbers does not match number of components.
            ValueError : If any mole number is negative, or all are zero.
        """
        if len(moles) != self.ncomps:
            raise IndexError(f'Number of mole numbers ({len(moles)}) did not match number of components ({self.ncomps}).')
        moles = np.asarray(moles, dtype=float)
        if np.any(moles < 0) or not np.all(np.isfinite(moles)):
            raise ValueError(f'Mole numbers must be finite and non-negative, got {moles}.')
        if np.sum(moles) == 0:
            raise ValueError('At least one mole number must be positive.')
        return moles

    def compute_max_density(self, moles):
        """Utility
        Upper bound for the total number density at the given composition, corresponding to the maximum packing
        fraction from the options,

            rho_max = max_packing_fraction * sum_i n_i / sum_alpha (pi / 6) m_alpha sigma_alpha^3 n_alpha

        where alpha runs over the species (segments).

        Args:
            moles (Sequence[float]) : Mole numbers (or fractions) of each component
        Returns:
            float : Maximum density [1 / Å^3]
        """
        moles = self.validate_moles(moles)
        p = self.parameters
        species_moles = moles[p.component_index]
        return self.options.max_packing_fraction * np.sum(moles) \
            / np.sum((np.pi / 6) * p.m * p.sigma**3 * species_moles)

    def species_densities(self, rho):
        """Internal
        Map component densities to the densities of the species the weights act on. For most models the species
        are the components.
        """
        return [rho[c] for c in self.parameters.component_index]

    def _check_state(self, rho, T):
        if len(rho) != self.ncomps:
            raise IndexError(f'Got {len(rho)} densities for {self.ncomps} components.')
        bulk = not isinstance(rho[0], Profile)
        if (not bulk) and dual.isdual(T):
            raise UnsupportedDualOperation('Temperature derivatives are only available for bulk phases.')
        return bulk

    def get_weighted_densities(self, contribution, rho_s, T, bulk):
        """Weighted density
        Compute the weighted densities of a contribution.

        Args:
            contribution (FunctionalContribution) : The contribution
            rho_s (list) : Species densities, floats/duals for bulk or list[Profile].
            T (float or DualNumber) : Temperature [K]
            bulk (bool) : Integrate the weights instead of convolving.
        Returns:
            list : Weighted densities, ordered as the weights of the contribution.
        """
        weights = contribution.get_weights(T)
        n = []
        for wa in weights:
            present = [(wai, rho_i) for wai, rho_i in zip(wa, rho_s) if wai is not None]
            if bulk:
                na = np.float64(0.0) # numpy semantics for divisions by a vanishing density
                for wai, rho_i in present:
                    na = na + rho_i * wai.real_integral()
                n.append(na)
                continue
            grid = rho_s[0].grid
            na = np.zeros(grid.N)
            for wai, rho_i in present:
                na = na + convolve_ad(wai, rho_i)
            is_vector = len(present) > 0 and present[0][0].is_odd()
            if not is_vector:
                na = np.maximum(na, TINY)
            n.append(Profile(na, grid, is_vector_field=is_vector))
        return n

    def _contribution_densities(self, rho, T, bulk):
        rho_s = self.species_densities(rho)
        return [(c.name, c.helmholtz_energy_density(T, self.get_weighted_densities(c, rho_s, T, bulk)))
                for c in self._contributions]

    @staticmethod
    def _infeasible_to_inf(phi):
        """Internal
        Replace non-finite values (infeasible states, e.g. packing fractions above unity) by +inf, with a warning.
        """
        phi_re = np.asarray(dual.re(phi))
        mask = ~np.isfinite(phi_re)
        if not np.any(mask):
            return phi
        warnings.warn('Helmholtz energy density is not finite at (some) state points, which are likely infeasible. '
                      'Returning inf.', RuntimeWarning, stacklevel=3)
        if np.ndim(mask) == 0:
            if dual.isdual(phi):
                return type(phi).from_parts(tuple(np.inf for _ in phi.parts))
            return np.inf
        if dual.isdual(phi):
            return type(phi).from_parts(tuple(np.where(mask, np.inf, p) for p in phi.parts))
        return np.where(mask, np.inf, phi_re)

    def reduced_helmholtz_energy_density(self, rho, T, property_flag='R'):
        r"""Profile Property
        Reduced Helmholtz energy density, $\phi = a / (k_B T)$ [1 / Å^3], for a bulk phase or a density profile.

        Args:
            rho (list[float] or list[Profile]) : Density of each component [1 / Å^3]. Floats may be dual numbers.
            T (float or DualNumber) : Temperature [K]. Dual numbers only for bulk phases.
            property_flag (str, optional) : 'R' for residual (default), 'I' for ideal, 'IR' for total.
        Returns:
            float, DualNumber or Profile : The reduced Helmholtz energy density. Infeasible states give inf.
        Raises:
            KeyError : For an invalid property flag.
        """
        if property_flag not in ('I', 'R', 'IR'):
            raise KeyError("Invalid property flag! Valid flags are 'I' (Ideal), 'R' (Residual), 'IR' (total)")
        bulk = self._check_state(rho, T)
        phi = 0.0
        with np.errstate(all='ignore'):
            if 'R' in property_flag:
                for _, phi_c in self._contribution_densities(rho, T, bulk):
                    phi = phi + phi_c
            if 'I' in property_flag:
                phi = phi + self._ideal_gas.helmholtz_energy_density(T, rho)
        phi = self._infeasible_to_inf(phi)
        if not bulk:
            return Profile(np.zeros(rho[0].grid.N) + phi, rho[0].grid)
        return phi

    def helmholtz_energy_contributions(self, rho, T):
        """Profile Property
        The reduced residual Helmholtz energy density of each contribution, in evaluation order.

        Args:
            rho (list[float] or list[Profile]) : Density of each component [1 / Å^3]
            T (float) : Temperature [K]
        Returns:
            list[tuple(str, float or Profile)] : (name, phi) for each contribution
        """
        bulk = self._check_state(rho, T)
        with np.errstate(all='ignore'):
            contribs = self._contribution_densities(rho, T, bulk)
        if bulk:
            return contribs
        return [(name, Profile(np.zeros(rho[0].grid.N) + phi, rho[0].grid)) for name, phi in contribs]

    def residual_helmholtz_energy_density(self, rho, T):
        """Profile Property
        Residual Helmholtz energy density [J / Å^3]

        Args:
            rho (list[float] or list[Profile]) : Density of each component [1 / Å^3]
            T (float) : Temperature [K]
        Returns:
            float or Profile : The residual Helmholtz energy density [J / Å^3]
        """
        return Boltzmann * T * self.reduced_helmholtz_energy_density(rho, T)

    def reduced_chemical_potential(self, rho, T, property_flag='IR'):
        r"""Bulk Property
        Reduced chemical potential, $\beta \mu_i = \partial \phi / \partial \rho_i$ [-]

        Args:
            rho (list[float]) : Density of each component [1 / Å^3]
            T (float) : Temperature [K]
            property_flag (str, optional) : 'I' for ideal, 'R' for residual, 'IR' for total.
        Returns:
            1d array : The reduced chemical potentials
        """
        _, beta_mu = dual.gradient(lambda r: self.reduced_helmholtz_energy_density(r, T, property_flag=property_flag), rho)
        return beta_mu

    def reduced_residual_chemical_potential(self, rho, T):
        """Bulk Property
        Reduced residual chemical potential [-]
        """
        return self.reduced_chemical_potential(rho, T, property_flag='R')

    def chemical_potential(self, rho, T, property_flag='IR'):
        """Bulk Property
        Compute the chemical potential [J]

        Args:
            rho (list[float]) : Density [particles / Å^3]
            T (float) : Temperature [K]
            property_flag (str, optional) : 'I' for ideal, 'R' for residual, 'IR' for total.

        Returns:
            1d array (float) : The chemical potentials [J / particle]
        """
        return Boltzmann * T * self.reduced_chemical_potential(rho, T, property_flag=property_flag)

    def residual_chemical_potential(self, rho, T):
        """Bulk Property
        Compute the residual chemical potential [J]

        Args:
            rho (list[float]) : Density [particles / Å^3]
            T (float) : Temperature [K]

        Returns:
            1d array (float) : The residual chemical potentials [J / particle]
        """
        return self.chemical_potential(rho, T, property_flag='R')

    def reduced_pressure(self, rho, T, property_flag='IR'):
        r"""Bulk Property
        Reduced pressure $\beta p = \sum_i \rho_i \beta \mu_i - \phi$ [1 / Å^3]

        Args:
            rho (list[float]) : Density of each component [1 / Å^3]
            T (float) : Temperature [K]
            property_flag (str, optional) : 'I' for ideal, 'R' for residual, 'IR' for total.
        Returns:
            float : The reduced pressure
        """
        phi, beta_mu = dual.gradient(lambda r: self.reduced_helmholtz_energy_density(r, T, property_flag=property_flag), rho)
        return float(np.dot(np.asarray(rho, dtype=float), beta_mu) - phi)

    def pressure(self, rho, T, property_flag='IR'):
        """Bulk Property
        Pressure [Pa]

        Args:
            rho (list[float]) : Density of each component [1 / Å^3]
            T (float) : Temperature [K]
            property_flag (str, optional) : 'I' for ideal, 'R' for residual, 'IR' for total.
        Returns:
            float : The pressure [Pa]
        """
        return Boltzmann * T * self.reduced_pressure(rho, T, property_flag=property_flag) * 1e30

    def compressibility(self, rho, T):
        """Bulk Property
        Compressibility factor, Z = p / (rho k_B T) [-]
        """
        return self.reduced_pressure(rho, T) / float(np.sum(rho))

    def residual_entropy_density(self, rho, T):
        """Bulk Property
        Compute the residual entropy density [J / Å^3 K]

        Args:
            rho (list[float]) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]
        Returns:
            float : The residual entropy density [J / Å^3 K]
        """
        phi, dphidT = dual.first_derivative(lambda t: self.reduced_helmholtz_energy_density(rho, t), T)
        return - Boltzmann * (phi + T * dphidT)

    def residual_isochoric_heat_capacity_density(self, rho, T):
        """Bulk Property
        Residual isochoric heat capacity density, c_v = - T (d^2 a / d T^2) at constant density [J / Å^3 K]
        """
        _, dphidT, d2phidT2 = dual.second_derivative(lambda t: self.reduced_helmholtz_energy_density(rho, t), T)
        return - Boltzmann * T * (2 * dphidT + T * d2phidT2)

    def reduced_helmholtz_energy_hessian(self, rho, T, property_flag='R'):
        """Bulk Property
        Second derivatives of the reduced Helmholtz energy density with respect to the densities [Å^3]

        Returns:
            2d array : d^2 phi / d rho_i d rho_j
        """
        _, _, hess = dual.hessian(lambda r: self.reduced_helmholtz_energy_density(r, T, property_flag=property_flag), rho)
        return hess

    def functional_derivative(self, rho, T):
        r"""Profile Property
        Functional derivative of the reduced residual Helmholtz energy, $\delta \beta F^{res} / \delta \rho_i(r)$.
        The partial derivatives of each contribution with respect to its weighted densities are computed with dual
        numbers, and convolved back with the weights. Odd (vector) weights change sign.

        Args:
            rho (list[Profile]) : Density profile of each component [1 / Å^3]
            T (float) : Temperature [K]
        Returns:
            list[Profile] : The functional derivative for each component [-]
        """
        if self._check_state(rho, T):
            raise TypeError('The functional derivative requires density profiles, use '
                            'reduced_residual_chemical_potential for bulk phases.')
        grid = rho[0].grid
        rho_s = self.species_densities(rho)
        dFdrho_s = [np.zeros(grid.N) for _ in rho_s]
        with np.errstate(all='ignore'):
            for contribution in self._contributions:
                weights = contribution.get_weights(T)
                n = self.get_weighted_densities(contribution, rho_s, T, bulk=False)
                for a, wa in enumerate(weights):
                    if all(wai is None for wai in wa):
                        continue
                    seeded = list(n)
                    seeded[a] = Dual(n[a], np.ones(grid.N))
                    phi = contribution.helmholtz_energy_density(T, seeded)
                    if not dual.isdual(phi):
                        continue
                    dphidn = Profile(np.zeros(grid.N) + phi.eps, grid, is_vector_field=n[a].is_vector_field)
                    for i, wai in enumerate(wa):
                        if wai is None:
                            continue
                        dFdrho_s[i] = dFdrho_s[i] + convolve_ad(wai, dphidn) * (-1 if wai.is_odd() else 1)

        dFdrho = [np.zeros(grid.N) for _ in range(self.ncomps)]
        for alpha, c in enumerate(self.parameters.component_index):
            dFdrho[c] = dFdrho[c] + dFdrho_s[alpha]
        return [Profile(self._infeasible_to_inf(d), grid) for d in dFdrho]

    def residual_helmholtz_energy(self, rho, T):
        """Profile Property
        Residual Helmholtz energy of a density profile [J], per unit area [J / Å^2] for planar geometry.

        Args:
            rho (list[Profile]) : Density profile of each component [1 / Å^3]
            T (float) : Temperature [K]
        Returns:
            float : The residual Helmholtz energy
        """
        return self.residual_helmholtz_energy_density(rho, T).integrate()
