from .IsotopicEnvelope import IsotopicEnvelope
from .DeconvolutionParameters import DeconvolutionParameters
from .EnvelopeCandidateBuilder import EnvelopeCandidateBuilder
from .DeconvolutionEngine import DeconvolutionEngine, CancellationToken, deconvolve

__all__ = [
    "IsotopicEnvelope",
    "DeconvolutionParameters",
    "EnvelopeCandidateBuilder",
    "DeconvolutionEngine",
    "CancellationToken",
    "deconvolve",
]
