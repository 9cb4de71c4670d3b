"""
Model options. Each model variant has one immutable options record, validated upon construction. Use `replace` to
get a modified copy.
"""
from enum import IntEnum
from saftpack.exceptions import OptionsError


class DQVariants(IntEnum):
    """Combination rule for the cross dipole-quadrupole term in PC-SAFT."""
    DQ35 = 1
    DQ44 = 2


class FeynmanHibbsOrder(IntEnum):
    """Order of the Feynman-Hibbs quantum correction to the Mie potential."""
    FH0 = 0
    FH1 = 1
    FH2 = 2


def _as_enum(enum, value, name):
    try:
        return enum(value)
    except ValueError:
        raise OptionsError(f'Invalid value for {name} : {value!r}. Valid values are {[e.name for e in enum]}.')


class Options:
    """Internal
    Base class for the options records. Inheriting classes list their fields and defaults in `_fields`, and
    validate in `_validate`.
    """
    _fields = {}

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(self._fields)
        if unknown:
            raise OptionsError(f'Unknown option(s) for {type(self).__name__} : {sorted(unknown)}.')
        for name, default in self._fields.items():
            object.__setattr__(self, name, kwargs.get(name, default))
        self._validate()

    def _validate(self):
        mpf = self.max_packing_fraction
        if isinstance(mpf, bool) or not isinstance(mpf, (int, float)) or not (0 < mpf <= 1):
            raise OptionsError(f'max_packing_fraction must be in (0, 1], got {mpf!r}.')
        object.__setattr__(self, 'max_packing_fraction', float(mpf))

    def __setattr__(self, key, value):
        raise AttributeError(f'{type(self).__name__} is immutable, use replace() to get a modified copy.')

    def replace(self, **changes):
        """Utility
        Copy of these options with some fields changed. The new record is validated.
        """
        fields = {name: getattr(self, name) for name in self._fields}
        fields.update(changes)
        return type(self)(**fields)

    def __eq__(self, other):
        return type(other) is type(self) and all(getattr(self, f) == getattr(other, f) for f in self._fields)

    def __hash__(self):
        return hash((type(self).__name__,) + tuple(getattr(self, f) for f in self._fields))

    def __repr__(self):
        return f'{type(self).__name__}({", ".join(f"{f}={getattr(self, f)!r}" for f in self._fields)})'


class _AssociationOptions(Options):

    def _validate(self):
        super()._validate()
        n = self.max_cross_association_iterations
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise OptionsError(f'max_cross_association_iterations must be a positive integer, got {n!r}.')
        tol = self.cross_association_tolerance
        if isinstance(tol, bool) or not isinstance(tol, (int, float)) or not (tol > 0):
            raise OptionsError(f'cross_association_tolerance must be positive, got {tol!r}.')


class PcSaftOptions(_AssociationOptions):
    """
    Options for PC-SAFT.

    Args:
        max_packing_fraction (float) : Packing fraction used by compute_max_density, in (0, 1].
        max_cross_association_iterations (int) : Iteration cap for the cross association fixed point.
        cross_association_tolerance (float) : Convergence tolerance for the cross association fixed point.
        combination_rule (DQVariants) : Combination rule for the dipole-quadrupole cross term.
    """
    _fields = {'max_packing_fraction': 0.5,
               'max_cross_association_iterations': 50,
               'cross_association_tolerance': 1e-10,
               'combination_rule': DQVariants.DQ35}

    def _validate(self):
        super()._validate()
        object.__setattr__(self, 'combination_rule', _as_enum(DQVariants, self.combination_rule, 'combination_rule'))


class GcPcSaftOptions(_AssociationOptions):
    """
    Options for the heterosegmented group contribution PC-SAFT functional.
    """
    _fields = {'max_packing_fraction': 0.5,
               'max_cross_association_iterations': 50,
               'cross_association_tolerance': 1e-10}


class PetsOptions(Options):
    """
    Options for PeTS.
    """
    _fields = {'max_packing_fraction': 0.5}


class FMTOptions(Options):
    """
    Options for the pure hard sphere functional.
    """
    _fields = {'max_packing_fraction': 0.5}


class SaftVRQMieOptions(Options):
    """
    Options for SAFT-VRQ Mie.

    Args:
        max_packing_fraction (float) : Packing fraction used by compute_max_density, in (0, 1].
        fh_order (FeynmanHibbsOrder) : Order of the quantum correction.
        include_non_additive_term (bool) : Include the non-additive hard sphere correction for mixtures.
    """
    _fields = {'max_packing_fraction': 0.5,
               'fh_order': FeynmanHibbsOrder.FH1,
               'include_non_additive_term': True}

    def _validate(self):
        super()._validate()
        object.__setattr__(self, 'fh_order', _as_enum(FeynmanHibbsOrder, self.fh_order, 'fh_order'))
        if not isinstance(self.include_non_additive_term, bool):
            raise OptionsError(f'include_non_additive_term must be a bool, got {self.include_non_additive_term!r}.')
