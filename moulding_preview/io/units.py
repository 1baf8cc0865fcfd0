"""
Unit normalisation.

``$INSUNITS`` codes from a drawing header map to a factor converting the
drawing's linear unit into inches. Unknown or missing codes are treated
as inches (factor 1).
"""

from typing import Dict, Optional

INSUNITS_TO_INCHES: Dict[int, float] = {
    0: 1.0,                     # unitless, assumed inches
    1: 1.0,                     # inches
    2: 12.0,                    # feet
    3: 63360.0,                 # miles
    4: 1 / 25.4,                # millimetres
    5: 1 / 2.54,                # centimetres
    6: 39.37007874015748,       # metres
    7: 39370.07874015748,       # kilometres
    8: 1e-6,                    # microinches
    9: 1e-3,                    # mils
    10: 36.0,                   # yards
    11: 3.937007874015748e-9,   # angstroms
    12: 3.937007874015748e-8,   # nanometres
    13: 3.937007874015748e-5,   # microns
    14: 3.937007874015748,      # decimetres
    15: 3.937007874015748e1,    # decametres
    16: 3.937007874015748e2,    # hectometres
    17: 3.937007874015748e8,    # gigametres
    18: 1.5588457e13,           # astronomical units
    19: 5.8786254e17,           # light years
    20: 1.213e19,               # parsecs
    21: 12.0000024,             # US survey feet
}

# Profile record units -> millimetres, for display conversion
LINEAR_UNIT_TO_MM: Dict[str, float] = {
    'mm': 1.0,
    'cm': 10.0,
    'm': 1000.0,
    'in': 25.4,
    'ft': 304.8,
}

PROFILE_UNITS = tuple(LINEAR_UNIT_TO_MM)


def inches_scale(units_code: Optional[int]) -> float:
    """Scale factor from a drawing's ``$INSUNITS`` code to inches."""
    if units_code is None:
        return 1.0
    return INSUNITS_TO_INCHES.get(units_code, 1.0)


def convert_length(value: float, from_units: str, to_units: str) -> float:
    """Convert a length between profile record units.

    Raises:
        KeyError: for a unit outside mm/cm/m/in/ft.
    """
    return value * LINEAR_UNIT_TO_MM[from_units] / LINEAR_UNIT_TO_MM[to_units]
