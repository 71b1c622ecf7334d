from .errors import MassDeconvError, InvalidInputError, ChargeZeroError, ToleranceFormatError, DeconvolutionCancelled

from .mass.constants import Polarity, parse_polarity, PROTON_MASS
from .mass.conversion import to_mz, to_mass
from .mass.Tolerance import MassTolerance, DaTolerance, AbsoluteTolerance, PpmTolerance, parse_tolerance

from .chem.Formula import Formula
from .chem.Averagine import IsotopeSpacingModel, FixedSpacing, AveragineSpacing

from .spectrum.Peak import Peak
from .spectrum.MzSpectrum import MzSpectrum
from .spectrum.MsDataScan import MsDataScan

from .deconvolution.IsotopicEnvelope import IsotopicEnvelope
from .deconvolution.DeconvolutionParameters import DeconvolutionParameters
from .deconvolution.EnvelopeCandidateBuilder import EnvelopeCandidateBuilder
from .deconvolution.DeconvolutionEngine import DeconvolutionEngine, CancellationToken, deconvolve

__version__ = "0.1.0"

__all__ = [
    "MassDeconvError",
    "InvalidInputError",
    "ChargeZeroError",
    "ToleranceFormatError",
    "DeconvolutionCancelled",
    "Polarity",
    "parse_polarity",
    "PROTON_MASS",
    "to_mz",
    "to_mass",
    "MassTolerance",
    "DaTolerance",
    "AbsoluteTolerance",
    "PpmTolerance",
    "parse_tolerance",
    "Formula",
    "IsotopeSpacingModel",
    "FixedSpacing",
    "AveragineSpacing",
    "Peak",
    "MzSpectrum",
    "MsDataScan",
    "IsotopicEnvelope",
    "DeconvolutionParameters",
    "EnvelopeCandidateBuilder",
    "DeconvolutionEngine",
    "CancellationToken",
    "deconvolve",
]
