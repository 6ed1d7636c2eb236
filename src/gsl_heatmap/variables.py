"""
Variable metadata for density, salinity and lake temperature.

Holds display labels, units, precision, default color ranges and the sane
bounds the range calculator clamps to.
"""

from dataclasses import dataclass

DENSITY = 'density'
SALINITY = 'salinity'
TEMPERATURE = 'temperature'

VARIABLES = (DENSITY, SALINITY, TEMPERATURE)
# Variables with a per-station value; temperature is one lake-wide value
STATION_VARIABLES = (DENSITY, SALINITY)


@dataclass(frozen=True)
class VariableConfig:
    """Display and range settings for one variable."""

    key: str
    label: str
    unit: str
    precision: int
    default_range: tuple[float, float]
    bounds: tuple[float, float]


VARIABLE_CONFIG = {
    DENSITY: VariableConfig(
        key=DENSITY,
        label='LAB-DEN',
        unit='g/cm³',
        precision=3,
        default_range=(1.0, 1.25),
        bounds=(1.0, 1.35),
    ),
    SALINITY: VariableConfig(
        key=SALINITY,
        label='Salinity EOS',
        unit='g/L',
        precision=1,
        default_range=(50.0, 250.0),
        bounds=(0.0, 400.0),
    ),
    TEMPERATURE: VariableConfig(
        key=TEMPERATURE,
        label='Avg Temp',
        unit='°F',
        precision=1,
        default_range=(0.0, 100.0),
        bounds=(-40.0, 140.0),
    ),
}


def get_variable_config(variable: str) -> VariableConfig:
    """
    Return the configuration of a variable.

    Raises:
        ValueError: If the variable is unknown
    """
    try:
        return VARIABLE_CONFIG[variable]
    except KeyError:
        raise ValueError(
            f"Unknown variable '{variable}', expected one of {VARIABLES}"
        ) from None
