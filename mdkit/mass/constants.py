from enum import Enum

from ..errors import InvalidInputError

# Disable RDKit logging
from rdkit import RDLogger
lg = RDLogger.logger()
lg.setLevel(RDLogger.CRITICAL)  # Only show critical errors, suppress warnings and other messages


class Polarity(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @property
    def sign(self) -> int:
        return 1 if self is Polarity.POSITIVE else -1

def parse_polarity(mode_str: str) -> Polarity:
    mode_str = mode_str.strip().lower()
    if mode_str in ["positive", "pos", "+", "p"]:
        return Polarity.POSITIVE
    elif mode_str in ["negative", "neg", "-", "n"]:
        return Polarity.NEGATIVE
    else:
        raise InvalidInputError(f"Unknown polarity string: {mode_str}")

PPM = 1/1000000
PROTON_MASS = 1.007276466879

# Mean spacing between neighbouring isotopologue peaks of an averagine peptide.
DEFAULT_ISOTOPE_SPACING = 1.00235

DEFAULT_PPM_TOLERANCE = 10.0

# Padding applied around a precursor isolation window so envelopes are not cut in half.
ISOLATION_PADDING_MZ = 8.5

# Averagine elemental composition per 111.1254 Da (Senko et al. 1995)
AVERAGINE_MASS = 111.1254
AVERAGINE_COMPOSITION = {
    "C": 4.9384,
    "H": 7.7583,
    "N": 1.3577,
    "O": 1.4773,
    "S": 0.0417,
}
