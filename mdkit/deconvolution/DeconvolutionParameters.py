import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml

from ..chem.Averagine import IsotopeSpacingModel, FixedSpacing
from ..errors import InvalidInputError
from ..mass.constants import Polarity, parse_polarity, DEFAULT_PPM_TOLERANCE, ISOLATION_PADDING_MZ
from ..mass.Tolerance import PpmTolerance, parse_tolerance


@dataclass
class DeconvolutionParameters:
    """
    Settings for one deconvolution run.

    Attributes:
        min_charge (int): Lowest absolute charge state to test (>= 1).
        max_charge (int): Highest absolute charge state to test (>= min_charge).
        tolerance_ppm (float): m/z matching and mass deduplication tolerance in ppm.
        min_intensity_ratio (float): A ladder peak is accepted as monoisotopic only if its
            intensity is at least this fraction of the most intense ladder peak.
        max_ladder_length (int): Maximum number of peaks collected for one ladder.
        polarity (Polarity): Sign applied to every tested charge state.
        charge_dominance_ratio (float): When one species is seen at several charge states,
            a higher charge replaces the lowest one only if its total intensity is larger by
            more than this factor.
        n_workers (int): Worker threads used to generate candidates; 1 runs serially.
        isolation_padding (float): m/z padding around a precursor isolation window.
        isotope_spacing (IsotopeSpacingModel): Neutral-mass spacing between isotopologues.
    """
    min_charge: int = 1
    max_charge: int = 10
    tolerance_ppm: float = DEFAULT_PPM_TOLERANCE
    min_intensity_ratio: float = 0.05
    max_ladder_length: int = 30
    polarity: Polarity = Polarity.POSITIVE
    charge_dominance_ratio: float = 2.0
    n_workers: int = 1
    isolation_padding: float = ISOLATION_PADDING_MZ
    isotope_spacing: IsotopeSpacingModel = field(default_factory=FixedSpacing)

    def __post_init__(self):
        if isinstance(self.polarity, str):
            self.polarity = parse_polarity(self.polarity)
        validate_charge_range(self.min_charge, self.max_charge)
        if self.tolerance_ppm < 0:
            raise InvalidInputError(f"tolerance_ppm must be non-negative, got {self.tolerance_ppm}")
        if not 0.0 <= self.min_intensity_ratio <= 1.0:
            raise InvalidInputError(f"min_intensity_ratio must be in [0, 1], got {self.min_intensity_ratio}")
        if self.max_ladder_length < 2:
            raise InvalidInputError(f"max_ladder_length must be at least 2, got {self.max_ladder_length}")
        if self.charge_dominance_ratio < 1.0:
            raise InvalidInputError(f"charge_dominance_ratio must be >= 1, got {self.charge_dominance_ratio}")
        if self.n_workers < 1:
            raise InvalidInputError(f"n_workers must be at least 1, got {self.n_workers}")
        if self.isolation_padding < 0:
            raise InvalidInputError(f"isolation_padding must be non-negative, got {self.isolation_padding}")

    @property
    def tolerance(self) -> PpmTolerance:
        return PpmTolerance(self.tolerance_ppm)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert these parameters into a serializable dictionary.
        """
        return {
            "min_charge": self.min_charge,
            "max_charge": self.max_charge,
            "tolerance": str(self.tolerance),
            "min_intensity_ratio": self.min_intensity_ratio,
            "max_ladder_length": self.max_ladder_length,
            "polarity": self.polarity.value,
            "charge_dominance_ratio": self.charge_dominance_ratio,
            "n_workers": self.n_workers,
            "isolation_padding": self.isolation_padding,
            "isotope_spacing": self.isotope_spacing.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DeconvolutionParameters":
        """
        Reconstruct parameters from a dictionary. Unknown keys are ignored and
        missing keys fall back to the defaults.
        """
        data = dict(data or {})
        valid_fields = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in valid_fields}

        if "tolerance" in data:
            tolerance = parse_tolerance(str(data["tolerance"]))
            if not isinstance(tolerance, PpmTolerance):
                raise InvalidInputError(f"Deconvolution tolerance must be given in ppm, got {data['tolerance']!r}")
            kwargs["tolerance_ppm"] = tolerance.tolerance
        if "isotope_spacing" in kwargs and not isinstance(kwargs["isotope_spacing"], IsotopeSpacingModel):
            kwargs["isotope_spacing"] = IsotopeSpacingModel.from_dict(kwargs["isotope_spacing"])
        return cls(**kwargs)

    def save_yaml(self, path: str):
        """Save the parameters to a YAML file."""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                self.to_dict(),
                f,
                allow_unicode=True,
                sort_keys=False,
                indent=2
            )

    @classmethod
    def load_yaml(cls, path: str) -> "DeconvolutionParameters":
        """Load parameters from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)


def validate_charge_range(min_charge: int, max_charge: int):
    if min_charge < 1:
        raise InvalidInputError(f"min_charge must be at least 1, got {min_charge}")
    if max_charge < min_charge:
        raise InvalidInputError(f"max_charge ({max_charge}) must not be below min_charge ({min_charge})")
