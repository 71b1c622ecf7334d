from collections import OrderedDict
from typing import Dict, Union
from rdkit import Chem

class Formula:
    """
    Neutral elemental composition in Hill order (C, H, then alphabetical).

    Used to turn a fractional averagine composition into whole atom counts
    whose exact mass can be compared with a query mass.
    """

    def __init__(self, elements: Dict[str, int]):
        counts = {k: v for k, v in elements.items() if v != 0}
        self._elements = OrderedDict((k, counts[k]) for k in sorted(counts, key=_hill_key))

    @property
    def elements(self) -> Dict[str, int]:
        """
        Return a dictionary of elements and their counts.
        """
        return OrderedDict(self._elements)

    @property
    def exact_mass(self) -> float:
        """
        Monoisotopic mass: every atom taken as its most abundant isotope.
        """
        table = Chem.GetPeriodicTable()
        return sum(
            table.GetMostCommonIsotopeMass(table.GetAtomicNumber(elem)) * count
            for elem, count in self._elements.items()
        )

    def __getitem__(self, elem: str) -> int:
        return self._elements.get(elem, 0)

    def __eq__(self, other: 'Formula') -> bool:
        if not isinstance(other, Formula):
            return False
        return dict(self._elements) == dict(other._elements)

    def __hash__(self) -> int:
        return hash(frozenset(self._elements.items()))

    def __repr__(self):
        return "Formula({})".format("".join(f"{e}{c if c != 1 else ''}" for e, c in self._elements.items()))

    def with_count(self, elem: str, count: int) -> 'Formula':
        """Return a copy with the count of elem replaced."""
        elements = dict(self._elements)
        elements[elem] = count
        return Formula(elements)

    @classmethod
    def from_composition(cls, composition: Dict[str, Union[int, float]]) -> 'Formula':
        """
        Build a formula from possibly fractional element counts by rounding each count.
        """
        return cls({elem: int(round(count)) for elem, count in composition.items()})


def _hill_key(elem: str):
    # Carbon first, hydrogen second, the rest alphabetically.
    return ({"C": 0, "H": 1}.get(elem, 2), elem)
