from .constants import PROTON_MASS
from ..errors import ChargeZeroError


def to_mz(mass: float, charge: int, charge_carrier: float = PROTON_MASS) -> float:
    """
    Convert a neutral mass to the m/z observed at a signed charge.

    Args:
        mass (float): Neutral (monoisotopic or isotopologue) mass in Da.
        charge (int): Signed charge state, non-zero.
        charge_carrier (float): Mass of the charge carrier, a proton by default.

    Returns:
        float: mass / |z| + sign(z) * carrier
    """
    if charge == 0:
        raise ChargeZeroError()
    sign = 1 if charge > 0 else -1
    return mass / abs(charge) + sign * charge_carrier


def to_mass(mz: float, charge: int, charge_carrier: float = PROTON_MASS) -> float:
    """
    Convert an observed m/z at a signed charge back to neutral mass.

    Inverse of to_mz: (mz - sign(z) * carrier) * |z|
    """
    if charge == 0:
        raise ChargeZeroError()
    sign = 1 if charge > 0 else -1
    return (mz - sign * charge_carrier) * abs(charge)
