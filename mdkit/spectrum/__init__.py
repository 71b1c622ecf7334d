from .Peak import Peak
from .MzSpectrum import MzSpectrum
from .MsDataScan import MsDataScan

__all__ = [
    "Peak",
    "MzSpectrum",
    "MsDataScan",
]
