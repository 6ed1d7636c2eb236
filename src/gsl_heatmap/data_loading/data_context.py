"""
Station and data context models.

The DataContext is built once per load and passed explicitly to every
consumer. Its mappings are wrapped read-only so rendering code cannot alter
the reconciled series.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

COORDS_GEOMETRY = 'geometry'
COORDS_PROJECTED = 'projected'
COORDS_DEFAULT = 'default'
COORDS_SYNTHETIC = 'synthetic'


@dataclass(frozen=True)
class Station:
    """A monitoring station with resolved geographic coordinates."""

    id: str
    name: str
    longitude: float
    latitude: float
    coords_source: str  # geometry, projected, default or synthetic


@dataclass(frozen=True)
class DataContext:
    """
    Reconciled lake data, read-only after construction.

    Attributes:
        stations: Ordered stations with resolved coordinates
        time_points: Strictly increasing 'YYYY-MM' keys
        series: {'density': {tp: {station_id: value}},
                 'salinity': {tp: {station_id: value}},
                 'temperature': {tp: value}}
        ranges: Color-scale (min, max) per variable
        lake_boundary: LakeBoundary with region polygons
        using_synthetic_data: True when the whole dataset was regenerated
        strategy: Name of the reconciliation strategy that produced the data
        has_real: Per-variable flag, True when any real value was found
        generic_salinity_readings: Count of salinity values taken from the
            generic field (unit not verified)
        warnings: Non-fatal problems met while loading
    """

    stations: tuple[Station, ...]
    time_points: tuple[str, ...]
    series: Mapping[str, Mapping[str, Any]]
    ranges: Mapping[str, tuple[float, float]]
    lake_boundary: Optional[Any] = None
    using_synthetic_data: bool = False
    strategy: str = ''
    has_real: Mapping[str, bool] = field(default_factory=dict)
    generic_salinity_readings: int = 0
    warnings: tuple[str, ...] = ()

    def station_ids(self) -> list[str]:
        """Station ids in display order."""
        return [station.id for station in self.stations]

    def values_at(self, variable: str, time_point: str) -> Mapping[str, float]:
        """Per-station values of a variable at one time point."""
        return self.series[variable].get(time_point, MappingProxyType({}))

    def temperature_at(self, time_point: str) -> Optional[float]:
        """Lake-wide temperature at one time point, or None."""
        return self.series['temperature'].get(time_point)


def freeze_series(
    series: dict[str, dict[str, Any]]
) -> Mapping[str, Mapping[str, Any]]:
    """
    Wrap nested series dictionaries in read-only mapping proxies.

    Args:
        series: {variable: {time_point: value or {station_id: value}}}

    Returns:
        The same structure with every level read-only
    """
    frozen = {}
    for variable, by_time in series.items():
        frozen[variable] = MappingProxyType({
            time_point: (
                MappingProxyType(dict(values))
                if isinstance(values, dict) else values
            )
            for time_point, values in by_time.items()
        })
    return MappingProxyType(frozen)
