"""
Extract monthly chemistry readings from raw brine site records.

The upstream feed has changed field names over its lifetime, including
laboratory fields whose names contain an embedded newline. Extraction tries
each known spelling in priority order and treats absent or non-numeric
fields as not present, never as zero.

Density priority:
    1. laboratory density under one of its known spellings
    2. any field whose name contains the laboratory density marker
    3. generic 'density'
    4. derived from generic 'salinity' (density ~ 1 + 0.0008 * salinity)

Salinity priority:
    1. laboratory salinity under one of its known spellings, or any field
       whose name contains the laboratory salinity marker
    2. generic 'salinity', used unchanged and tagged 'generic' because its
       unit is not verified against the laboratory field
"""

import math
from dataclasses import dataclass
from logging import Logger
from typing import Any, Optional

import pandas as pd

from gsl_heatmap.data_loading.time_points import format_time_point

LAB_DENSITY_FIELDS = (
    'LABminusDENg/cm3',
    'LABminusDEN\ng/cm3',
    'LABminusDEN\\ng/cm3',
)
LAB_DENSITY_MARKER = 'LABminusDEN'

LAB_SALINITY_FIELDS = (
    'SALINITYminusEOSg/L',
    'SALINITYminusEOS\ng/L',
    'SALINITYminusEOS\\ng/L',
)
LAB_SALINITY_MARKER = 'SALINITYminusEOS'

# Linear brine approximation used when only salinity is reported
DENSITY_PER_SALINITY = 0.0008

SALINITY_LABELED = 'labeled'
SALINITY_GENERIC = 'generic'


@dataclass(frozen=True)
class MonthlyReading:
    """One reading bucketed to its calendar month."""

    station_id: str
    time_point: str
    temperature: Optional[float] = None
    density: Optional[float] = None
    salinity: Optional[float] = None
    salinity_source: Optional[str] = None


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a numeric field value.

    >>> parse_number('1.18')
    1.18
    >>> parse_number('n/a') is None
    True

    Returns:
        The finite float value, or None when absent or not numeric
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _first_number(reading: dict, names: tuple[str, ...]) -> Optional[float]:
    for name in names:
        number = parse_number(reading.get(name))
        if number is not None:
            return number
    return None


def _marker_number(reading: dict, marker: str) -> Optional[float]:
    for key, value in reading.items():
        if isinstance(key, str) and marker in key:
            number = parse_number(value)
            if number is not None:
                return number
    return None


def extract_density(reading: dict) -> Optional[float]:
    """Density in g/cm3 from a reading, following the priority above."""
    density = _first_number(reading, LAB_DENSITY_FIELDS)
    if density is None:
        density = _marker_number(reading, LAB_DENSITY_MARKER)
    if density is None:
        density = parse_number(reading.get('density'))
    if density is None:
        salinity = parse_number(reading.get('salinity'))
        if salinity is not None:
            density = 1 + salinity * DENSITY_PER_SALINITY
    return density


def extract_salinity(reading: dict) -> tuple[Optional[float], Optional[str]]:
    """
    Salinity from a reading.

    Returns:
        (value, source) where source is 'labeled', 'generic' or None
    """
    salinity = _first_number(reading, LAB_SALINITY_FIELDS)
    if salinity is None:
        salinity = _marker_number(reading, LAB_SALINITY_MARKER)
    if salinity is not None:
        return salinity, SALINITY_LABELED

    salinity = parse_number(reading.get('salinity'))
    if salinity is not None:
        return salinity, SALINITY_GENERIC
    return None, None


def extract_temperature(reading: dict) -> Optional[float]:
    """Water temperature from a reading."""
    return parse_number(reading.get('temperature'))


def reading_time_point(date_value: Any, min_year: int) -> Optional[str]:
    """
    Month key of a reading date.

    Returns None for a missing or unparseable date, or one before January 1
    of min_year.
    """
    if date_value is None or date_value == '':
        return None
    timestamp = pd.to_datetime(date_value, errors='coerce')
    if timestamp is None or pd.isna(timestamp):
        return None
    if timestamp.year < min_year:
        return None
    return format_time_point(timestamp.year, timestamp.month)


def extract_station_readings(
    station_id: str,
    readings: Any,
    min_year: int,
    logger: Logger
) -> list[MonthlyReading]:
    """
    Extract monthly readings for one station.

    Args:
        station_id: Station the readings belong to
        readings: The site's raw 'readings' list
        min_year: Earliest calendar year kept
        logger: Logger instance

    Returns:
        MonthlyReading per valid, in-epoch reading, in feed order
    """
    if not isinstance(readings, list):
        return []

    extracted = []
    skipped = 0
    for reading in readings:
        if not isinstance(reading, dict):
            skipped += 1
            continue
        try:
            time_point = reading_time_point(reading.get('date'), min_year)
        except (TypeError, ValueError, OverflowError):
            time_point = None
        if time_point is None:
            skipped += 1
            continue

        salinity, salinity_source = extract_salinity(reading)
        extracted.append(
            MonthlyReading(
                station_id=station_id,
                time_point=time_point,
                temperature=extract_temperature(reading),
                density=extract_density(reading),
                salinity=salinity,
                salinity_source=salinity_source,
            )
        )

    if skipped:
        logger.debug(
            'Skipped %s readings without a valid date for station %s',
            skipped, station_id,
        )
    return extracted
