"""Exception types raised by saftpack."""


class SaftPackError(Exception):
    """Base class for all errors raised by saftpack."""


class ParameterError(SaftPackError, ValueError):
    """Raised when a parameter set is malformed or inconsistent."""


class OptionsError(SaftPackError, ValueError):
    """Raised when an options record holds an out-of-range or unknown value."""


class ConvergenceError(SaftPackError, RuntimeError):
    """Raised when an inner iteration fails to converge within its iteration cap."""


class AssociationConvergenceError(ConvergenceError):
    """Raised when the fraction of non-bonded association sites does not converge."""

    def __init__(self, iterations, residual):
        self.iterations = iterations
        self.residual = residual
        super().__init__(f'Cross association did not converge in {iterations} iterations '
                         f'(residual : {residual:.3e}).')


class UnsupportedCapabilityError(SaftPackError, NotImplementedError):
    """Raised when an optional capability is queried on an object that does not provide it."""


class UnsupportedDualOperation(SaftPackError, TypeError):
    """Raised when an operation would silently drop derivative information of a dual number."""
