"""
Registry of the available functionals, such that a functional can be built from its name.
"""

FUNCTIONALS = {} # name -> Functional class


def register_functional(name):
    """Utility
    Class decorator, registering a HelmholtzEnergyFunctional under `name`.
    """
    def deco(cls):
        if name in FUNCTIONALS:
            raise KeyError(f"Functional '{name}' is already registered")
        FUNCTIONALS[name] = cls
        return cls
    return deco


def build_functional(name, parameters, **kwargs):
    """Utility
    Build a registered functional.

    Args:
        name (str) : Registered name, see available_functionals()
        parameters (Parameters) : Parameter set accepted by the functional
        **kwargs : Passed on to the functional constructor (fmt_version, options)
    Returns:
        HelmholtzEnergyFunctional : The functional
    Raises:
        KeyError : If no functional is registered under `name`.
    """
    if name not in FUNCTIONALS:
        raise KeyError(f"Functional '{name}' not registered. Available functionals are {available_functionals()}")
    return FUNCTIONALS[name](parameters, **kwargs)


def available_functionals():
    return sorted(FUNCTIONALS)
