"""
Synthetic stand-in values for months without real measurements.

The formulas reproduce the seasonal and secular shape of lake density,
salinity and air temperature. They are a plausibility fill for the
visualization, not a physical model. The uniform residual is drawn from a
numpy Generator so a seed makes every run reproducible.
"""

import math
from typing import Optional

import numpy as np

from gsl_heatmap.data_loading.data_context import COORDS_SYNTHETIC, Station
from gsl_heatmap.data_loading.site_coordinates import (
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
)
from gsl_heatmap.data_loading.time_points import parse_time_point

SYNTHETIC_BASE_YEAR = 2000

DENSITY_CLAMP = (1.02, 1.28)
SALINITY_CLAMP = (30.0, 280.0)

# Radius (degrees) of the circle synthetic stations are spread on
STATION_CIRCLE_RADIUS = 0.2

# Named lake locations used when no site identifiers are configured
LAST_RESORT_STATIONS = (
    Station('station-1', 'North Arm', -112.9, 41.4, COORDS_SYNTHETIC),
    Station('station-2', 'Promontory Point', -112.4, 41.2, COORDS_SYNTHETIC),
    Station('station-3', 'Fremont Island', -112.3, 41.1, COORDS_SYNTHETIC),
    Station('station-4', 'Antelope Island', -112.2, 41.0, COORDS_SYNTHETIC),
    Station('station-5', 'Saltair', -112.1, 40.8, COORDS_SYNTHETIC),
    Station('station-6', 'Farmington Bay', -112.0, 41.0, COORDS_SYNTHETIC),
    Station('station-7', 'Ogden Bay', -112.2, 41.2, COORDS_SYNTHETIC),
    Station('station-8', 'Bear River Bay', -112.3, 41.3, COORDS_SYNTHETIC),
    Station('station-9', 'Carrington Island', -112.6, 41.0, COORDS_SYNTHETIC),
    Station('station-10', 'Stansbury Island', -112.5, 40.8, COORDS_SYNTHETIC),
)


def _seasonal(month: int) -> float:
    return math.sin(2 * math.pi * (month - 1) / 12)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    return max(bounds[0], min(bounds[1], value))


class SyntheticGenerator:
    """
    Generates synthetic density, salinity and temperature values.

    Args:
        seed: Seed for the residual draws; None gives a fresh random stream
        rng: Existing numpy Generator, overrides seed when given
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def uniform(self, low: float, high: float) -> float:
        return float(self.rng.uniform(low, high))

    def density(
        self,
        year: int,
        month: int,
        index: int,
        count: int,
        temperature: Optional[float] = None
    ) -> float:
        """Density (g/cm3) for station index of count, clamped to [1.02, 1.28]."""
        temp_factor = 0.0
        if temperature is not None:
            temp_factor = (temperature - 30) / 50 * 0.03
        value = (
            1.10
            + temp_factor
            + (year - SYNTHETIC_BASE_YEAR) * 0.0005
            + _seasonal(month) * 0.01
            + (index / count) * 0.05
            + self.uniform(-0.0075, 0.0075)
        )
        return _clamp(value, DENSITY_CLAMP)

    def salinity(
        self,
        year: int,
        month: int,
        index: int,
        count: int,
        temperature: Optional[float] = None
    ) -> float:
        """Salinity (g/L) for station index of count, clamped to [30, 280]."""
        temp_factor = 0.0
        if temperature is not None:
            temp_factor = (temperature - 50) / 50 * -10
        value = (
            150
            + temp_factor
            + (year - SYNTHETIC_BASE_YEAR) * 0.1
            - _seasonal(month) * 15
            + (index / count) * 30
            + self.uniform(-10, 10)
        )
        return _clamp(value, SALINITY_CLAMP)

    def temperature(self, year: int, month: int) -> float:
        """Lake-wide air temperature (°F) with seasonal cycle and warming trend."""
        return (
            50
            + _seasonal(month) * 25
            + (year - SYNTHETIC_BASE_YEAR) * 0.2
            + self.uniform(-2.5, 2.5)
        )

    def fill_station_series(
        self,
        variable: str,
        station_ids: list[str],
        time_points: list[str],
        temperatures: dict[str, float],
        existing: Optional[dict[str, dict[str, float]]] = None
    ) -> tuple[dict[str, dict[str, float]], int]:
        """
        Fill every missing (time point, station) pair of a station variable.

        Args:
            variable: 'density' or 'salinity'
            station_ids: Stations in display order; the index drives the
                spatial term
            time_points: Sorted time points
            temperatures: Lake-wide temperature per time point
            existing: Real values, never overwritten

        Returns:
            (complete series, number of synthesized values)
        """
        if variable == 'density':
            make_value = self.density
        elif variable == 'salinity':
            make_value = self.salinity
        else:
            raise ValueError(f'No synthetic model for {variable}')

        existing = existing or {}
        count = len(station_ids)
        series = {}
        synthesized = 0
        for time_point in time_points:
            year, month = parse_time_point(time_point)
            real_values = existing.get(time_point, {})
            values = {}
            for index, station_id in enumerate(station_ids):
                if station_id in real_values:
                    values[station_id] = real_values[station_id]
                else:
                    values[station_id] = make_value(
                        year, month, index, count, temperatures.get(time_point)
                    )
                    synthesized += 1
            series[time_point] = values
        return series, synthesized

    def fill_temperatures(
        self,
        time_points: list[str],
        temperatures: dict[str, float]
    ) -> tuple[dict[str, float], int]:
        """Copy of temperatures with a synthetic value for each missing month."""
        filled = dict(temperatures)
        synthesized = 0
        for time_point in time_points:
            if time_point not in filled:
                filled[time_point] = self.temperature(*parse_time_point(time_point))
                synthesized += 1
        return filled, synthesized


def synthetic_stations(
    site_ids: list[str],
    known: Optional[dict[str, Station]] = None
) -> list[Station]:
    """
    Stations for the given identifiers.

    Identifiers with a known resolved location keep it. The rest are spread
    evenly on a small circle around the lake center.

    Args:
        site_ids: Station identifiers in display order
        known: Already resolved stations by id

    Returns:
        List of Station, tagged 'synthetic' where placed on the circle
    """
    known = known or {}
    stations = []
    count = len(site_ids)
    for index, site_id in enumerate(site_ids):
        if site_id in known:
            stations.append(known[site_id])
            continue
        angle = index / count * 2 * math.pi
        stations.append(
            Station(
                id=site_id,
                name=f'Site {site_id}',
                longitude=DEFAULT_LONGITUDE + STATION_CIRCLE_RADIUS * math.cos(angle),
                latitude=DEFAULT_LATITUDE + STATION_CIRCLE_RADIUS * math.sin(angle),
                coords_source=COORDS_SYNTHETIC,
            )
        )
    return stations
