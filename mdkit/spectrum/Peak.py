from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Peak:
    """A centroided spectral peak."""
    mz: float
    intensity: float

    def __iter__(self):
        yield self.mz
        yield self.intensity

    def __repr__(self):
        return f"Peak(mz={self.mz:.5f}, intensity={self.intensity:g})"
