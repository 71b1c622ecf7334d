from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple, Union

from .MzSpectrum import MzSpectrum
from ..mass.constants import Polarity

if TYPE_CHECKING:
    from ..deconvolution.DeconvolutionEngine import DeconvolutionEngine
    from ..deconvolution.DeconvolutionParameters import DeconvolutionParameters
    from ..deconvolution.IsotopicEnvelope import IsotopicEnvelope


@dataclass(frozen=True)
class MsDataScan:
    """
    One scan as handed over by a file reader.

    Only the fields deconvolution relies on are modelled: the peaks, the
    precursor isolation window and the reader's guess of the selected ion.
    """
    mass_spectrum: MzSpectrum
    one_based_scan_number: int = 1
    ms_level: int = 1
    retention_time: float = 0.0
    polarity: Polarity = Polarity.POSITIVE
    isolation_mz: Optional[float] = None
    isolation_width: Optional[float] = None
    selected_ion_mz: Optional[float] = None
    selected_ion_charge_state_guess: Optional[int] = None
    selected_ion_intensity: Optional[float] = None
    precursor_scan_number: Optional[int] = None

    @property
    def isolation_range(self) -> Optional[Tuple[float, float]]:
        """[isolation_mz - width/2, isolation_mz + width/2], or None without isolation info."""
        if self.isolation_mz is None or self.isolation_width is None:
            return None
        half = self.isolation_width / 2
        return self.isolation_mz - half, self.isolation_mz + half

    def get_isolated_envelopes(
            self,
            precursor: Union["MsDataScan", MzSpectrum],
            deconvoluter: Union["DeconvolutionEngine", "DeconvolutionParameters", None] = None,
            ) -> List["IsotopicEnvelope"]:
        """
        Deconvolve the precursor around this scan's isolation window.

        The window is padded by the engine's isolation_padding so envelopes
        straddling its edges are seen whole; only envelopes with at least one
        peak inside the unpadded window are returned. Charges are searched
        with the precursor scan's polarity, or this scan's when precursor is
        a bare spectrum.
        """
        from ..deconvolution.DeconvolutionEngine import DeconvolutionEngine

        isolation = self.isolation_range
        if isolation is None:
            return []

        if isinstance(precursor, MsDataScan):
            spectrum, polarity = precursor.mass_spectrum, precursor.polarity
        else:
            spectrum, polarity = precursor, self.polarity

        if isinstance(deconvoluter, DeconvolutionEngine):
            engine = deconvoluter
            if engine.parameters.polarity != polarity:
                engine = DeconvolutionEngine(engine.parameters, polarity=polarity)
        else:
            engine = DeconvolutionEngine(deconvoluter, polarity=polarity)

        low, high = isolation
        padding = engine.parameters.isolation_padding
        envelopes = engine.deconvolve(spectrum, (low - padding, high + padding))
        return [e for e in envelopes if any(low <= p.mz <= high for p in e.peaks)]
