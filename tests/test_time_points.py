"""
Test suite for time point keys, the historical temperature table and
series queries.
"""

from datetime import date

import pandas as pd
import pytest

from gsl_heatmap.data_loading.series_queries import (
    average_value,
    station_time_series,
)
from gsl_heatmap.data_loading.temperature_data import (
    get_hardcoded_temperature_data,
)
from gsl_heatmap.data_loading.time_points import (
    format_time_point,
    month_range,
    parse_time_point,
    time_point_label,
    year_start_index,
)


class TestTimePointKeys:

    def test_format_and_parse(self):
        assert format_time_point(2003, 7) == '2003-07'
        assert parse_time_point('2003-07') == (2003, 7)

    @pytest.mark.parametrize('value', ['2003-13', '2003', 'July'])
    def test_invalid_key(self, value):
        with pytest.raises(ValueError):
            parse_time_point(value)

    def test_month_range_through_end_month(self):
        assert month_range(2000, date(2000, 3, 5)) == ['2000-01', '2000-02', '2000-03']
        assert len(month_range(2000, date(2001, 1, 1))) == 13

    def test_label(self):
        assert time_point_label('2012-03') == 'March - 2012'
        assert time_point_label('') == ''

    def test_year_start_index(self):
        points = ['2000-11', '2000-12', '2001-01', '2001-02']
        assert year_start_index(points, 2001) == 2
        assert year_start_index(points, 1990) == 0
        assert year_start_index(points, 2030) == 3
        assert year_start_index([], 2001) == 0


class TestHistoricalTemperatures:

    def test_table_coverage(self):
        temperatures = get_hardcoded_temperature_data()
        assert len(temperatures) == 25 * 12 + 3
        assert temperatures['2000-01'] == 35.1
        assert temperatures['2022-07'] == 87.8
        assert temperatures['2025-03'] == 45.6
        assert '2025-04' not in temperatures


class TestSeriesQueries:
    """Charts and info panel queries."""

    def test_station_time_series(
        self, arm_stations, simplified_boundary, make_context
    ):
        context = make_context(
            arm_stations,
            {
                '2010-06': {'RD2': 1.20, 'AC3': 1.05, 'FB2': 1.10},
                '2010-07': {'RD2': 1.22, 'AC3': 1.06, 'FB2': 1.12},
            },
            simplified_boundary,
        )
        series = station_time_series(context, 'density', 'RD2')

        assert isinstance(series.index, pd.DatetimeIndex)
        assert series.index[0] == pd.Timestamp('2010-06-01')
        assert series.tolist() == [1.20, 1.22]
        assert series.name == 'density'

    def test_temperature_series_ignores_station(
        self, arm_stations, simplified_boundary, make_context
    ):
        context = make_context(
            arm_stations,
            {'2010-06': {'RD2': 1.2, 'AC3': 1.1, 'FB2': 1.1}},
            simplified_boundary,
            temperature={'2010-06': 74.6},
        )
        assert station_time_series(context, 'temperature').tolist() == [74.6]

    def test_unknown_station_is_empty(self, arm_context):
        assert station_time_series(arm_context, 'density', 'nope').empty

    def test_average_value(self, arm_context):
        assert average_value(arm_context, 'density', '2010-07') == pytest.approx(
            (1.25 + 1.05 + 1.10) / 3
        )
        assert average_value(arm_context, 'temperature', '2010-07') == 50.0
        assert average_value(arm_context, 'density', '1990-01') is None
