"""
Reconcile sparse real readings into complete monthly series.

Every station gets a density and salinity value at every time point. Real
values always win; gaps are filled by the synthetic generator. When too
little real data survives extraction, the whole dataset is regenerated.

The fallbacks form an ordered chain of named strategies:

    real_readings            -> real readings, gaps filled synthetically
    synthetic_allowed_sites  -> full synthetic data for the configured sites
    hardcoded_last_resort    -> full synthetic data for fixed lake locations

The first strategy that produces a dataset wins, and every outcome is logged.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from logging import Logger
from typing import Callable, Optional

import pandas as pd

from gsl_heatmap.data_loading.data_context import Station
from gsl_heatmap.data_loading.extract_readings import (
    SALINITY_GENERIC,
    MonthlyReading,
)
from gsl_heatmap.data_loading.heatmap_properties import HeatmapProperties
from gsl_heatmap.data_loading.synthetic_data import (
    LAST_RESORT_STATIONS,
    SyntheticGenerator,
    synthetic_stations,
)
from gsl_heatmap.data_loading.temperature_data import (
    get_hardcoded_temperature_data,
)
from gsl_heatmap.data_loading.time_points import month_range
from gsl_heatmap.exceptions import GSLHeatmapError
from gsl_heatmap.variables import DENSITY, SALINITY, STATION_VARIABLES, TEMPERATURE

READING_COLUMNS = [
    'station_id', 'time_point', 'temperature', 'density', 'salinity',
    'salinity_source',
]

STRATEGY_REAL = 'real_readings'
STRATEGY_SYNTHETIC_SITES = 'synthetic_allowed_sites'
STRATEGY_LAST_RESORT = 'hardcoded_last_resort'


@dataclass
class ReconciledSeries:
    """Complete monthly series for a set of stations."""

    stations: list[Station]
    time_points: list[str]
    series: dict
    has_real: dict[str, bool] = field(default_factory=dict)
    using_synthetic_data: bool = False
    generic_salinity_readings: int = 0
    synthesized: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Strategy:
    """A named way of producing a ReconciledSeries; build returns None when
    the strategy does not apply."""

    name: str
    build: Callable[[], Optional[ReconciledSeries]]


@dataclass(frozen=True)
class StrategyOutcome:
    name: str
    succeeded: bool
    message: str = ''


def readings_to_frame(readings: list[MonthlyReading]) -> pd.DataFrame:
    """
    Monthly readings as a DataFrame, one row per reading in feed order.

    Missing values are NaN in the numeric columns.
    """
    frame = pd.DataFrame.from_records(
        [asdict(reading) for reading in readings], columns=READING_COLUMNS
    )
    for column in (TEMPERATURE, DENSITY, SALINITY):
        frame[column] = pd.to_numeric(frame[column], errors='coerce')
    return frame


def _real_station_values(
    frame: pd.DataFrame,
    variable: str
) -> tuple[dict[str, dict[str, float]], pd.DataFrame]:
    """
    Real values of a station variable keyed [time_point][station_id].

    The last reading in feed order wins for a repeated (time point, station).
    """
    kept = (
        frame.dropna(subset=[variable])
        .drop_duplicates(subset=['time_point', 'station_id'], keep='last')
    )
    values = {}
    for row in kept.itertuples(index=False):
        values.setdefault(row.time_point, {})[row.station_id] = float(
            getattr(row, variable)
        )
    return values, kept


def reconcile_readings(
    stations: list[Station],
    readings: list[MonthlyReading],
    generator: SyntheticGenerator,
    logger: Logger,
    min_year: int = 2000,
    temperature_table: Optional[dict[str, float]] = None
) -> ReconciledSeries:
    """
    Merge real readings with synthetic fill.

    Args:
        stations: Stations in display order; readings of other stations are
            ignored
        readings: Extracted monthly readings
        generator: Source of synthetic values
        logger: Logger instance
        min_year: Earliest calendar year kept
        temperature_table: Historical temperature per time point (default
            the built-in table)

    Returns:
        ReconciledSeries with full density/salinity coverage
    """
    if temperature_table is None:
        temperature_table = get_hardcoded_temperature_data()
    station_ids = [station.id for station in stations]

    frame = readings_to_frame(readings)
    frame = frame[frame['station_id'].isin(station_ids)]
    frame = frame[frame['time_point'].str[:4].astype(int) >= min_year]

    time_points = sorted(
        time_point
        for time_point in set(frame['time_point']) | set(temperature_table)
        if int(time_point[:4]) >= min_year
    )

    # Mean of real readings, then the historical table takes over
    temperatures = (
        frame.dropna(subset=[TEMPERATURE])
        .groupby('time_point')[TEMPERATURE]
        .mean()
        .to_dict()
    )
    has_real = {TEMPERATURE: bool(temperatures)}
    for time_point in time_points:
        if time_point in temperature_table:
            temperatures[time_point] = temperature_table[time_point]

    series = {
        TEMPERATURE: {
            time_point: float(temperatures[time_point])
            for time_point in time_points
            if time_point in temperatures
        }
    }
    synthesized = {}
    generic_salinity = 0
    for variable in STATION_VARIABLES:
        real_values, kept = _real_station_values(frame, variable)
        has_real[variable] = bool(real_values)
        if variable == SALINITY:
            generic_salinity = int(
                (kept['salinity_source'] == SALINITY_GENERIC).sum()
            )

        if not real_values:
            logger.info('No real %s data found, generating synthetic data', variable)
        series[variable], synthesized[variable] = generator.fill_station_series(
            variable, station_ids, time_points, series[TEMPERATURE], real_values
        )
        logger.info(
            '%s: %s real values, %s synthesized',
            variable, len(kept), synthesized[variable],
        )

    return ReconciledSeries(
        stations=list(stations),
        time_points=time_points,
        series=series,
        has_real=has_real,
        using_synthetic_data=False,
        generic_salinity_readings=generic_salinity,
        synthesized=synthesized,
    )


def synthesize_full_dataset(
    stations: list[Station],
    generator: SyntheticGenerator,
    logger: Logger,
    min_year: int = 2000,
    today: Optional[date] = None,
    temperature_table: Optional[dict[str, float]] = None
) -> ReconciledSeries:
    """
    Complete synthetic dataset from January of min_year through this month.

    Historical temperatures are used where the table has them and
    synthesized elsewhere; density and salinity are fully synthetic.
    """
    if temperature_table is None:
        temperature_table = get_hardcoded_temperature_data()
    station_ids = [station.id for station in stations]
    time_points = month_range(min_year, today)

    known = {
        time_point: temperature_table[time_point]
        for time_point in time_points
        if time_point in temperature_table
    }
    temperatures, synthetic_temps = generator.fill_temperatures(time_points, known)

    series = {TEMPERATURE: temperatures}
    synthesized = {TEMPERATURE: synthetic_temps}
    for variable in STATION_VARIABLES:
        series[variable], synthesized[variable] = generator.fill_station_series(
            variable, station_ids, time_points, temperatures
        )

    logger.warning(
        'Generated synthetic dataset for %s stations over %s time points',
        len(stations), len(time_points),
    )
    return ReconciledSeries(
        stations=list(stations),
        time_points=time_points,
        series=series,
        has_real={DENSITY: False, SALINITY: False, TEMPERATURE: False},
        using_synthetic_data=True,
        synthesized=synthesized,
    )


def run_strategies(
    strategies: list[Strategy],
    logger: Logger
) -> tuple[Optional[ReconciledSeries], str, list[StrategyOutcome]]:
    """
    Run strategies in order until one produces a dataset.

    Returns:
        (result, name of the winning strategy, outcome per strategy tried);
        result is None and the name empty when every strategy failed
    """
    outcomes = []
    for strategy in strategies:
        try:
            result = strategy.build()
        except (GSLHeatmapError, ValueError) as ex:
            logger.warning('Strategy %s failed: %s', strategy.name, ex)
            outcomes.append(StrategyOutcome(strategy.name, False, str(ex)))
            continue

        if result is None:
            logger.warning('Strategy %s not applicable', strategy.name)
            outcomes.append(StrategyOutcome(strategy.name, False, 'not applicable'))
            continue

        logger.info('Strategy %s produced the dataset', strategy.name)
        outcomes.append(StrategyOutcome(strategy.name, True))
        return result, strategy.name, outcomes

    logger.error('No reconciliation strategy produced a dataset')
    return None, '', outcomes


def build_reconciled_series(
    stations: list[Station],
    readings: list[MonthlyReading],
    props: HeatmapProperties,
    generator: SyntheticGenerator,
    logger: Logger,
    today: Optional[date] = None,
    temperature_table: Optional[dict[str, float]] = None
) -> tuple[ReconciledSeries, str, list[StrategyOutcome]]:
    """
    Reconcile through the ordered fallback chain.

    Args:
        stations: Resolved stations from the feed (allowed sites only)
        readings: Their extracted monthly readings
        props: HeatmapProperties with the thresholds and allowed sites
        generator: Source of synthetic values
        logger: Logger instance
        today: Last month of a regenerated dataset (default today)
        temperature_table: Historical temperatures (default built-in table)

    Returns:
        (dataset, winning strategy name, outcomes)
    """
    def real_readings():
        if len(stations) < props.min_stations:
            logger.warning(
                'Only %s stations with data, need %s',
                len(stations), props.min_stations,
            )
            return None
        result = reconcile_readings(
            stations, readings, generator, logger,
            min_year=props.min_year, temperature_table=temperature_table,
        )
        if len(result.time_points) < props.min_time_points:
            logger.warning(
                'Only %s time points, need %s',
                len(result.time_points), props.min_time_points,
            )
            return None
        return result

    def synthetic_allowed_sites():
        if not props.allowed_sites:
            return None
        known = {station.id: station for station in stations}
        return synthesize_full_dataset(
            synthetic_stations(list(props.allowed_sites), known),
            generator, logger,
            min_year=props.min_year, today=today,
            temperature_table=temperature_table,
        )

    def hardcoded_last_resort():
        return synthesize_full_dataset(
            list(LAST_RESORT_STATIONS), generator, logger,
            min_year=props.min_year, today=today,
            temperature_table=temperature_table,
        )

    result, name, outcomes = run_strategies(
        [
            Strategy(STRATEGY_REAL, real_readings),
            Strategy(STRATEGY_SYNTHETIC_SITES, synthetic_allowed_sites),
            Strategy(STRATEGY_LAST_RESORT, hardcoded_last_resort),
        ],
        logger,
    )
    if result is None:
        raise GSLHeatmapError('Unable to build any dataset')
    return result, name, outcomes
