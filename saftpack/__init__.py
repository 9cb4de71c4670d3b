from . import dual
from . import grid
from . import profile
from . import WeightFunction
from . import Functional
from . import parameters
from . import options
from . import registry
from . import hardsphere
from . import pcsaft
from . import pets
from . import saftvrqmie
from . import gc_pcsaft
from .exceptions import SaftPackError, ParameterError, OptionsError, ConvergenceError, AssociationConvergenceError, \
    UnsupportedCapabilityError, UnsupportedDualOperation

Grid = grid.Grid
PlanarGrid = grid.PlanarGrid
SphericalGrid = grid.SphericalGrid
Geometry = grid.Geometry
Profile = profile.Profile

MoleculeShape = Functional.MoleculeShape
as_pair_potential = Functional.as_pair_potential
as_fluid_parameters = Functional.as_fluid_parameters

AssociationRecord = parameters.AssociationRecord
JobackRecord = parameters.JobackRecord
PcSaftParameters = parameters.PcSaftParameters
PetsParameters = parameters.PetsParameters
SaftVRQMieParameters = parameters.SaftVRQMieParameters
GcPcSaftFunctionalParameters = parameters.GcPcSaftFunctionalParameters
HardSphereParameters = parameters.HardSphereParameters

PcSaftOptions = options.PcSaftOptions
GcPcSaftOptions = options.GcPcSaftOptions
PetsOptions = options.PetsOptions
SaftVRQMieOptions = options.SaftVRQMieOptions
FMTOptions = options.FMTOptions
DQVariants = options.DQVariants
FeynmanHibbsOrder = options.FeynmanHibbsOrder

FMTVersion = hardsphere.FMTVersion
FMTFunctional = hardsphere.FMTFunctional
PcSaftFunctional = pcsaft.PcSaftFunctional
PetsFunctional = pets.PetsFunctional
SaftVRQMieFunctional = saftvrqmie.SaftVRQMieFunctional
GcPcSaftFunctional = gc_pcsaft.GcPcSaftFunctional

build_functional = registry.build_functional
available_functionals = registry.available_functionals
