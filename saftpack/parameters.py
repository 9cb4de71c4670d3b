"""
Parameter sets for the SAFT models. All per-species quantities are stored as read-only numpy arrays, copied upon
construction, and the pair quantities used by the Helmholtz energy contributions are derived once. Parameter sets are
never modified after construction: `subset` returns a new, independent parameter set.

Units: Lengths (sigma) in Å, energies (epsilon_k) in K, molar weights in g / mol, dipole moments in Debye and
quadrupole moments in Debye Å.
"""
import numpy as np
from scipy.constants import epsilon_0, Boltzmann, speed_of_light, Avogadro
from saftpack import dual
from saftpack.exceptions import ParameterError

# mu^2 / (4 pi eps_0 k_B) for mu = 1 Debye, in [K Å^3]. The same factor converts Q^2 for Q = 1 Debye Å to [K Å^5].
DEBYE = 1e-21 / speed_of_light
MULTIPOLE_UNIT = DEBYE**2 / (4 * np.pi * epsilon_0 * Boltzmann) * 1e30


def _frozen(values, name, ncomps=None, positive=False, nonnegative=False):
    """Internal
    Copy values into a read-only float array and validate its length and sign.
    """
    arr = np.array(values, dtype=float, ndmin=1)
    if arr.ndim != 1:
        raise ParameterError(f'{name} must be one dimensional, got shape {arr.shape}.')
    if (ncomps is not None) and (len(arr) != ncomps):
        raise ParameterError(f'Expected {ncomps} values for {name}, got {len(arr)}.')
    if not np.all(np.isfinite(arr)):
        raise ParameterError(f'{name} must be finite, got {arr}.')
    if positive and np.any(arr <= 0):
        raise ParameterError(f'{name} must be positive, got {arr}.')
    if nonnegative and np.any(arr < 0):
        raise ParameterError(f'{name} must be non-negative, got {arr}.')
    arr.flags.writeable = False
    return arr


def _frozen_matrix(values, name, n):
    """Internal
    Copy a binary interaction matrix, defaulting to zeros, and check that it is square and symmetric.
    """
    if values is None:
        arr = np.zeros((n, n))
    else:
        arr = np.array(values, dtype=float)
    if arr.shape != (n, n):
        raise ParameterError(f'{name} must have shape ({n}, {n}), got {arr.shape}.')
    if not np.allclose(arr, arr.T):
        raise ParameterError(f'{name} must be symmetric.')
    arr.flags.writeable = False
    return arr


def _frozen_records(records, name, n):
    if records is None:
        return tuple(None for _ in range(n))
    records = tuple(records)
    if len(records) != n:
        raise ParameterError(f'Expected {n} entries for {name}, got {len(records)}.')
    return records


def _validate_indices(indices, n):
    """Internal
    Check that indices is a non-empty sequence of distinct, in-range integer indices.

    Returns:
        list[int] : The indices
    """
    indices = list(indices)
    if len(indices) == 0:
        raise ParameterError('Cannot create an empty subset.')
    for i in indices:
        if isinstance(i, (bool, np.bool_)) or not isinstance(i, (int, np.integer)):
            raise ParameterError(f'Subset indices must be integers, got {i!r}.')
        if not (0 <= i < n):
            raise ParameterError(f'Subset index {i} is out of range for {n} components.')
    if len(set(indices)) != len(indices):
        raise ParameterError(f'Subset indices must be unique, got {indices}.')
    return [int(i) for i in indices]


class AssociationRecord:
    """
    Pure component association parameters.

    Args:
        kappa_ab (float) : Association volume [-]
        epsilon_k_ab (float) : Association energy, divided by Boltzmanns constant [K]
        na (int) : Number of association sites of type A
        nb (int) : Number of association sites of type B
    """
    def __init__(self, kappa_ab, epsilon_k_ab, na=1, nb=1):
        if kappa_ab < 0 or epsilon_k_ab < 0:
            raise ParameterError(f'Association parameters must be non-negative, got kappa_ab : {kappa_ab}, '
                                 f'epsilon_k_ab : {epsilon_k_ab}.')
        if na < 0 or nb < 0 or na + nb == 0:
            raise ParameterError(f'Invalid number of association sites (na : {na}, nb : {nb}).')
        self.kappa_ab = float(kappa_ab)
        self.epsilon_k_ab = float(epsilon_k_ab)
        self.na = na
        self.nb = nb

    def __repr__(self):
        return f'AssociationRecord(kappa_ab={self.kappa_ab}, epsilon_k_ab={self.epsilon_k_ab}, na={self.na}, nb={self.nb})'


class JobackRecord:
    """
    Coefficients of the Joback ideal gas heat capacity, cp(T) = a + b T + c T^2 + d T^3 + e T^4 in [J / mol K].
    """
    def __init__(self, a, b, c, d, e):
        self.a, self.b, self.c, self.d, self.e = (float(v) for v in (a, b, c, d, e))

    def __repr__(self):
        return f'JobackRecord(a={self.a}, b={self.b}, c={self.c}, d={self.d}, e={self.e})'


class AssociationParameters:
    """Internal
    Association parameters of the associating species, with cross parameters from the combining rules

        epsilon_k_ab_ij = (epsilon_k_ab_i + epsilon_k_ab_j) / 2
        kappa_ab_ij = sqrt(kappa_ab_i kappa_ab_j) (sqrt(sigma_i sigma_j) / sigma_ij)^3

    Species without an association record are left out, `assoc_index` maps back to the species index.
    """
    def __init__(self, records, sigma):
        self.assoc_index = np.array([i for i, r in enumerate(records) if r is not None], dtype=int)
        assoc = [records[i] for i in self.assoc_index]
        self.na = np.array([r.na for r in assoc], dtype=float)
        self.nb = np.array([r.nb for r in assoc], dtype=float)
        kappa = np.array([r.kappa_ab for r in assoc])
        eps = np.array([r.epsilon_k_ab for r in assoc])
        s = np.asarray(sigma)[self.assoc_index]
        self.sigma_ij = 0.5 * (s[:, None] + s[None, :])
        self.epsilon_k_ab_ij = 0.5 * (eps[:, None] + eps[None, :])
        self.kappa_ab_ij = np.sqrt(np.outer(kappa, kappa)) * (np.sqrt(np.outer(s, s)) / self.sigma_ij)**3

    def __len__(self):
        return len(self.assoc_index)


class Parameters:
    """Internal
    Functionality common for all parameter sets. Inheriting classes must define `m`, `sigma` and `hs_diameter(T)`,
    and implement `subset`. Parameter sets where the species are not the components (group contribution models)
    override `component_index`.
    """
    def __init__(self, ncomps):
        if ncomps < 1:
            raise ParameterError('A parameter set needs at least one component.')
        self.ncomps = ncomps

    @property
    def component_index(self):
        """Component that each species (segment) belongs to."""
        return np.arange(self.ncomps)

    def _check_molarweight(self, molarweight):
        if molarweight is None:
            return None
        return _frozen(molarweight, 'molarweight', self.ncomps, positive=True)

    def molar_weight(self):
        """Utility
        Molar weight of each component [g / mol]

        Raises:
            ParameterError : If no molar weights were given.
        """
        if self.molarweight is None:
            raise ParameterError('No molar weights were supplied for this parameter set.')
        return self.molarweight

    def subset(self, indices):
        raise NotImplementedError

    def _subset_records(self, records, indices):
        return None if all(r is None for r in records) else [records[i] for i in indices]


class PcSaftParameters(Parameters):

    def __init__(self, m, sigma, epsilon_k, molarweight=None, mu=None, q=None, association=None, k_ij=None,
                 joback_records=None):
        """Constructor
        Parameters for the PC-SAFT equation of state and functional.

        Args:
            m (Sequence[float]) : Segment number [-]
            sigma (Sequence[float]) : Segment diameter [Å]
            epsilon_k (Sequence[float]) : Dispersion energy [K]
            molarweight (Sequence[float], optional) : Molar weight [g / mol]
            mu (Sequence[float], optional) : Dipole moment [D]
            q (Sequence[float], optional) : Quadrupole moment [D Å]
            association (Sequence[AssociationRecord or None], optional) : Association parameters
            k_ij (2d array, optional) : Binary interaction parameters for the dispersion energy
            joback_records (Sequence[JobackRecord or None], optional) : Ideal gas heat capacity coefficients
        Raises:
            ParameterError : If the parameters are inconsistent.
        """
        self.m = _frozen(m, 'm', positive=True)
        super().__init__(len(self.m))
        n = self.ncomps
        if np.any(self.m < 1):
            raise ParameterError(f'Segment numbers must be at least one, got {self.m}.')
        self.sigma = _frozen(sigma, 'sigma', n, positive=True)
        self.epsilon_k = _frozen(epsilon_k, 'epsilon_k', n, positive=True)
        self.molarweight = self._check_molarweight(molarweight)
        self.mu = _frozen(np.zeros(n) if mu is None else mu, 'mu', n, nonnegative=True)
        self.q = _frozen(np.zeros(n) if q is None else q, 'q', n, nonnegative=True)
        self.association_records = _frozen_records(association, 'association', n)
        self.k_ij = _frozen_matrix(k_ij, 'k_ij', n)
        self.joback_records = _frozen_records(joback_records, 'joback_records', n)

        self.sigma_ij = 0.5 * (self.sigma[:, None] + self.sigma[None, :])
        self.epsilon_k_ij = np.sqrt(np.outer(self.epsilon_k, self.epsilon_k)) * (1 - self.k_ij)
        self.mu2 = self.mu**2 * MULTIPOLE_UNIT # [K Å^3]
        self.q2 = self.q**2 * MULTIPOLE_UNIT # [K Å^5]
        self.association = AssociationParameters(self.association_records, self.sigma)

    def hs_diameter(self, T):
        """Utility
        Temperature dependent hard sphere diameter [Å]. T may be a dual number.
        """
        return self.sigma * (1 - 0.12 * dual.exp(-3 * self.epsilon_k / T))

    @property
    def has_dipoles(self):
        return bool(np.any(self.mu > 0))

    @property
    def has_quadrupoles(self):
        return bool(np.any(self.q > 0))

    def subset(self, indices):
        """Utility
        Parameters for a subset of the components, in the order given.

        Args:
            indices (Sequence[int]) : Component indices
        Returns:
            PcSaftParameters : New, independent parameter set
        """
        idx = _validate_indices(indices, self.ncomps)
        return PcSaftParameters(self.m[idx], self.sigma[idx], self.epsilon_k[idx],
                                molarweight=None if self.molarweight is None else self.molarweight[idx],
                                mu=self.mu[idx], q=self.q[idx],
                                association=self._subset_records(self.association_records, idx),
                                k_ij=self.k_ij[np.ix_(idx, idx)],
                                joback_records=self._subset_records(self.joback_records, idx))

    def __repr__(self):
        return f'PcSaftParameters(m={list(self.m)}, sigma={list(self.sigma)}, epsilon_k={list(self.epsilon_k)}, ' \
               f'mu={list(self.mu)}, q={list(self.q)}, association={list(self.association_records)})'


class PetsParameters(Parameters):

    def __init__(self, sigma, epsilon_k, molarweight=None, k_ij=None, joback_records=None):
        """Constructor
        Parameters for the perturbed truncated and shifted (PeTS) Lennard-Jones equation of state and functional.

        Args:
            sigma (Sequence[float]) : Segment diameter [Å]
            epsilon_k (Sequence[float]) : Dispersion energy [K]
            molarweight (Sequence[float], optional) : Molar weight [g / mol]
            k_ij (2d array, optional) : Binary interaction parameters for the dispersion energy
            joback_records (Sequence[JobackRecord or None], optional) : Ideal gas heat capacity coefficients
        """
        self.sigma = _frozen(sigma, 'sigma', positive=True)
        super().__init__(len(self.sigma))
        n = self.ncomps
        self.epsilon_k = _frozen(epsilon_k, 'epsilon_k', n, positive=True)
        self.m = _frozen(np.ones(n), 'm', n)
        self.molarweight = self._check_molarweight(molarweight)
        self.k_ij = _frozen_matrix(k_ij, 'k_ij', n)
        self.joback_records = _frozen_records(joback_records, 'joback_records', n)

        self.sigma_ij = 0.5 * (self.sigma[:, None] + self.sigma[None, :])
        self.epsilon_k_ij = np.sqrt(np.outer(self.epsilon_k, self.epsilon_k)) * (1 - self.k_ij)

    def hs_diameter(self, T):
        """Utility
        Temperature dependent hard sphere diameter [Å], fitted to the Barker-Henderson diameter of the truncated and
        shifted Lennard-Jones potential.
        """
        return self.sigma * (1 - 0.127112544 * dual.exp(-3.052785558 * self.epsilon_k / T))

    def subset(self, indices):
        """Utility
        Parameters for a subset of the components, in the order given.
        """
        idx = _validate_indices(indices, self.ncomps)
        return PetsParameters(self.sigma[idx], self.epsilon_k[idx],
                              molarweight=None if self.molarweight is None else self.molarweight[idx],
                              k_ij=self.k_ij[np.ix_(idx, idx)],
                              joback_records=self._subset_records(self.joback_records, idx))

    def __repr__(self):
        return f'PetsParameters(sigma={list(self.sigma)}, epsilon_k={list(self.epsilon_k)})'


class SaftVRQMieParameters(Parameters):

    def __init__(self, m, sigma, epsilon_k, lr, la, molarweight, k_ij=None, l_ij=None, joback_records=None):
        """Constructor
        Parameters for the SAFT-VRQ Mie equation of state and functional. Only spherical molecules (m = 1) are
        supported.

        Args:
            m (Sequence[float]) : Segment number, must be unity [-]
            sigma (Sequence[float]) : Segment diameter [Å]
            epsilon_k (Sequence[float]) : Potential well depth [K]
            lr (Sequence[float]) : Repulsive exponent [-]
            la (Sequence[float]) : Attractive exponent [-]
            molarweight (Sequence[float]) : Molar weight [g / mol], used for the quantum corrections.
            k_ij (2d array, optional) : Binary interaction parameters for the well depth
            l_ij (2d array, optional) : Binary interaction parameters for the segment diameter
            joback_records (Sequence[JobackRecord or None], optional) : Ideal gas heat capacity coefficients
        Raises:
            ParameterError : If any segment number differs from unity, or the exponents are invalid.
        """
        self.m = _frozen(m, 'm', positive=True)
        super().__init__(len(self.m))
        n = self.ncomps
        if np.any(self.m != 1):
            raise ParameterError(f'SAFT-VRQ Mie is only implemented for spherical molecules (m = 1), got m = {self.m}.')
        self.sigma = _frozen(sigma, 'sigma', n, positive=True)
        self.epsilon_k = _frozen(epsilon_k, 'epsilon_k', n, positive=True)
        self.lr = _frozen(lr, 'lr', n)
        self.la = _frozen(la, 'la', n)
        if np.any(self.la <= 3) or np.any(self.lr <= self.la):
            raise ParameterError(f'Mie exponents must satisfy 3 < la < lr, got la : {self.la}, lr : {self.lr}.')
        if molarweight is None:
            raise ParameterError('SAFT-VRQ Mie requires molar weights.')
        self.molarweight = self._check_molarweight(molarweight)
        self.k_ij = _frozen_matrix(k_ij, 'k_ij', n)
        self.l_ij = _frozen_matrix(l_ij, 'l_ij', n)
        self.joback_records = _frozen_records(joback_records, 'joback_records', n)

        self.sigma_ij = 0.5 * (self.sigma[:, None] + self.sigma[None, :]) * (1 - self.l_ij)
        self.epsilon_k_ij = np.sqrt(np.outer(self.sigma**3, self.sigma**3)) / self.sigma_ij**3 \
                            * np.sqrt(np.outer(self.epsilon_k, self.epsilon_k)) * (1 - self.k_ij)
        self.lr_ij = 3 + np.sqrt(np.outer(self.lr - 3, self.lr - 3))
        self.la_ij = 3 + np.sqrt(np.outer(self.la - 3, self.la - 3))
        mw = self.molarweight / (1000 * Avogadro) # [kg / particle]
        self.reduced_mass_ij = np.outer(mw, mw) / (mw[:, None] + mw[None, :]) # [kg]

    def subset(self, indices):
        """Utility
        Parameters for a subset of the components, in the order given.
        """
        idx = _validate_indices(indices, self.ncomps)
        return SaftVRQMieParameters(self.m[idx], self.sigma[idx], self.epsilon_k[idx], self.lr[idx], self.la[idx],
                                    self.molarweight[idx], k_ij=self.k_ij[np.ix_(idx, idx)],
                                    l_ij=self.l_ij[np.ix_(idx, idx)],
                                    joback_records=self._subset_records(self.joback_records, idx))

    def __repr__(self):
        return f'SaftVRQMieParameters(sigma={list(self.sigma)}, epsilon_k={list(self.epsilon_k)}, ' \
               f'lr={list(self.lr)}, la={list(self.la)}, molarweight={list(self.molarweight)})'


class GcPcSaftFunctionalParameters(Parameters):

    def __init__(self, m, sigma, epsilon_k, component_index, bonds, molarweight=None, association=None,
                 k_ij=None, joback_records=None):
        """Constructor
        Segment based parameters for the heterosegmented group contribution PC-SAFT functional. Segments are the
        species of the functional, each belonging to one component.

        Args:
            m (Sequence[float]) : Segment number of each segment (group) [-]
            sigma (Sequence[float]) : Segment diameter [Å]
            epsilon_k (Sequence[float]) : Dispersion energy [K]
            component_index (Sequence[int]) : Component of each segment, components numbered from zero in order.
            bonds (Sequence[tuple[int, int]]) : Bonded segment pairs (segment indices).
            molarweight (Sequence[float], optional) : Molar weight of each component [g / mol]
            association (Sequence[AssociationRecord or None], optional) : Association parameters of each segment.
            k_ij (2d array, optional) : Binary interaction parameters between segments
            joback_records (Sequence[JobackRecord or None], optional) : Ideal gas heat capacity of each component.
        Raises:
            ParameterError : If the segments, components and bonds are inconsistent.
        """
        self.m = _frozen(m, 'm', positive=True)
        nseg = len(self.m)
        self.sigma = _frozen(sigma, 'sigma', nseg, positive=True)
        self.epsilon_k = _frozen(epsilon_k, 'epsilon_k', nseg, positive=True)
        comp_idx = np.array(component_index, dtype=int, ndmin=1)
        if len(comp_idx) != nseg:
            raise ParameterError(f'Expected {nseg} component indices, got {len(comp_idx)}.')
        if comp_idx[0] != 0 or np.any(np.diff(comp_idx) < 0) or np.any(np.diff(comp_idx) > 1):
            raise ParameterError(f'Component indices must be sorted and contiguous from zero, got {comp_idx}.')
        comp_idx.flags.writeable = False
        self._component_index = comp_idx
        super().__init__(int(comp_idx[-1]) + 1)
        self.nsegments = nseg

        self.bonds = tuple((int(a), int(b)) for a, b in bonds)
        for a, b in self.bonds:
            if not (0 <= a < nseg and 0 <= b < nseg) or a == b:
                raise ParameterError(f'Invalid bond ({a}, {b}) for {nseg} segments.')
            if comp_idx[a] != comp_idx[b]:
                raise ParameterError(f'Bond ({a}, {b}) connects segments of different components.')

        self.molarweight = self._check_molarweight(molarweight)
        self.association_records = _frozen_records(association, 'association', nseg)
        self.k_ij = _frozen_matrix(k_ij, 'k_ij', nseg)
        self.joback_records = _frozen_records(joback_records, 'joback_records', self.ncomps)

        self.sigma_ij = 0.5 * (self.sigma[:, None] + self.sigma[None, :])
        self.epsilon_k_ij = np.sqrt(np.outer(self.epsilon_k, self.epsilon_k)) * (1 - self.k_ij)
        self.association = AssociationParameters(self.association_records, self.sigma)

    @property
    def component_index(self):
        return self._component_index

    def hs_diameter(self, T):
        """Utility
        Temperature dependent hard sphere diameter of each segment [Å].
        """
        return self.sigma * (1 - 0.12 * dual.exp(-3 * self.epsilon_k / T))

    def subset(self, indices):
        """Utility
        Parameters for a subset of the components, in the order given. Segments and bonds are renumbered.
        """
        idx = _validate_indices(indices, self.ncomps)
        segments = [s for c in idx for s in np.flatnonzero(self._component_index == c)]
        new_seg = {s: k for k, s in enumerate(segments)}
        new_comp = {c: k for k, c in enumerate(idx)}
        bonds = [(new_seg[a], new_seg[b]) for a, b in self.bonds if a in new_seg]
        return GcPcSaftFunctionalParameters(self.m[segments], self.sigma[segments], self.epsilon_k[segments],
                                            [new_comp[self._component_index[s]] for s in segments], bonds,
                                            molarweight=None if self.molarweight is None else self.molarweight[idx],
                                            association=self._subset_records(self.association_records, segments),
                                            k_ij=self.k_ij[np.ix_(segments, segments)],
                                            joback_records=self._subset_records(self.joback_records, idx))

    def __repr__(self):
        return f'GcPcSaftFunctionalParameters(m={list(self.m)}, sigma={list(self.sigma)}, ' \
               f'epsilon_k={list(self.epsilon_k)}, component_index={list(self._component_index)}, ' \
               f'bonds={list(self.bonds)})'


class HardSphereParameters(Parameters):

    def __init__(self, sigma, molarweight=None, joback_records=None):
        """Constructor
        Parameters for a mixture of additive hard spheres.

        Args:
            sigma (Sequence[float]) : Hard sphere diameter [Å]
            molarweight (Sequence[float], optional) : Molar weight [g / mol]
            joback_records (Sequence[JobackRecord or None], optional) : Ideal gas heat capacity coefficients
        """
        self.sigma = _frozen(sigma, 'sigma', positive=True)
        super().__init__(len(self.sigma))
        self.m = _frozen(np.ones(self.ncomps), 'm', self.ncomps)
        self.molarweight = self._check_molarweight(molarweight)
        self.joback_records = _frozen_records(joback_records, 'joback_records', self.ncomps)

    def hs_diameter(self, T):
        return self.sigma * 1.0

    def subset(self, indices):
        idx = _validate_indices(indices, self.ncomps)
        return HardSphereParameters(self.sigma[idx],
                                    molarweight=None if self.molarweight is None else self.molarweight[idx],
                                    joback_records=self._subset_records(self.joback_records, idx))

    def __repr__(self):
        return f'HardSphereParameters(sigma={list(self.sigma)})'
