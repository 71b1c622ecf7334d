from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Dict, Optional

from rdkit import Chem

from .Formula import Formula
from ..errors import InvalidInputError
from ..mass.constants import AVERAGINE_COMPOSITION, AVERAGINE_MASS, DEFAULT_ISOTOPE_SPACING


class IsotopeSpacingModel(ABC):
    """
    Expected neutral-mass distance between neighbouring isotopologue peaks.

    Implementations are called with the neutral mass of the species under
    investigation and return a spacing in Da.
    """

    @abstractmethod
    def spacing(self, neutral_mass: float) -> float:
        pass

    def __call__(self, neutral_mass: float) -> float:
        return self.spacing(neutral_mass)

    @abstractmethod
    def to_dict(self) -> Dict:
        pass

    @staticmethod
    def from_dict(data: Optional[Dict]) -> "IsotopeSpacingModel":
        if not data:
            return FixedSpacing()
        if isinstance(data, str):
            data = {"type": data}
        if not isinstance(data, dict):
            raise InvalidInputError(f"Isotope spacing must be a mapping or a model name, got {data!r}")

        kind = str(data.get("type", "fixed")).lower()
        if kind == "fixed":
            value = data.get("value", DEFAULT_ISOTOPE_SPACING)
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise InvalidInputError(f"Isotope spacing value is not numeric: {value!r}") from e
            return FixedSpacing(value)
        elif kind == "averagine":
            return AveragineSpacing()
        raise InvalidInputError(f"Unknown isotope spacing model: {kind}")


class FixedSpacing(IsotopeSpacingModel):
    """Constant spacing regardless of mass."""

    def __init__(self, value: float = DEFAULT_ISOTOPE_SPACING):
        if not value > 0:
            raise InvalidInputError(f"Isotope spacing must be positive, got {value}")
        self.value = value

    def spacing(self, neutral_mass: float) -> float:
        return self.value

    def to_dict(self) -> Dict:
        return {"type": "fixed", "value": self.value}

    def __eq__(self, other):
        return isinstance(other, FixedSpacing) and self.value == other.value

    def __repr__(self):
        return f"FixedSpacing({self.value})"


class AveragineSpacing(IsotopeSpacingModel):
    """
    Spacing derived from an averagine composition scaled to the query mass.

    Every heavy isotope of every element contributes its per-neutron mass shift,
    weighted by how often it replaces the light isotope in the scaled formula.
    Isotope masses and abundances come from RDKit's periodic table.
    """

    def __init__(self, composition: Dict[str, float] = AVERAGINE_COMPOSITION, unit_mass: float = AVERAGINE_MASS):
        self.composition = dict(composition)
        self.unit_mass = unit_mass

    def formula_for_mass(self, neutral_mass: float) -> Formula:
        """
        Return the averagine formula closest to neutral_mass, with the
        remaining mass difference absorbed by hydrogens.
        """
        return _averagine_formula(tuple(self.composition.items()), self.unit_mass, neutral_mass)

    def spacing(self, neutral_mass: float) -> float:
        if neutral_mass <= 0:
            return DEFAULT_ISOTOPE_SPACING
        # Spacing varies slowly with mass; one formula per nominal Da is plenty.
        return _spacing_at_nominal_mass(tuple(self.composition.items()), self.unit_mass, int(round(neutral_mass)))

    def to_dict(self) -> Dict:
        return {"type": "averagine"}

    def __eq__(self, other):
        return isinstance(other, AveragineSpacing) and self.composition == other.composition

    def __repr__(self):
        return "AveragineSpacing()"


def _averagine_formula(composition: tuple, unit_mass: float, neutral_mass: float) -> Formula:
    units = neutral_mass / unit_mass
    formula = Formula.from_composition({e: c * units for e, c in composition})

    hydrogen = Chem.GetPeriodicTable().GetMostCommonIsotopeMass(1)
    delta_h = int(round((neutral_mass - formula.exact_mass) / hydrogen))
    return formula.with_count("H", max(0, formula["H"] + delta_h))


@lru_cache(maxsize=65536)
def _spacing_at_nominal_mass(composition: tuple, unit_mass: float, nominal_mass: int) -> float:
    formula = _averagine_formula(composition, unit_mass, nominal_mass)
    return _weighted_spacing(tuple(formula.elements.items()))


@lru_cache(maxsize=4096)
def _weighted_spacing(elements: tuple) -> float:
    table = Chem.GetPeriodicTable()
    weight_sum = 0.0
    weighted_shift = 0.0
    for elem, count in elements:
        if count <= 0:
            continue
        z = table.GetAtomicNumber(elem)
        light = table.GetMostCommonIsotope(z)
        light_mass = table.GetMostCommonIsotopeMass(z)
        light_abundance = table.GetAbundanceForIsotope(z, light)
        if light_abundance <= 0:
            continue
        for extra_neutrons in (1, 2):
            abundance = table.GetAbundanceForIsotope(z, light + extra_neutrons)
            if abundance <= 0:
                continue
            shift = table.GetMassForIsotope(z, light + extra_neutrons) - light_mass
            weight = count * abundance / light_abundance
            weight_sum += weight
            weighted_shift += weight * shift / extra_neutrons
    if weight_sum == 0:
        return DEFAULT_ISOTOPE_SPACING
    return weighted_shift / weight_sum
