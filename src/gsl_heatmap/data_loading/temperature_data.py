"""
Historical monthly average temperatures (°F) for the Great Salt Lake area.

Values run January 2000 through March 2025; each row lists January onward.
"""

from gsl_heatmap.data_loading.time_points import format_time_point

TEMPERATURE_TABLE = {
    2000: [35.1, 39.8, 42.0, 54.5, 61.7, 72.1, 80.8, 78.9, 64.6, 52.3, 31.4, 30.7],
    2001: [27.3, 34.4, 45.4, 50.1, 63.6, 70.9, 79.4, 79.0, 70.2, 55.0, 42.6, 26.3],
    2002: [26.0, 27.9, 38.9, 51.6, 59.9, 71.8, 81.9, 75.5, 66.0, 49.7, 37.6, 35.5],
    2003: [38.3, 34.6, 44.5, 50.4, 61.3, 71.2, 83.5, 80.0, 65.8, 57.9, 37.3, 33.5],
    2004: [22.4, 26.9, 47.7, 52.4, 60.3, 70.2, 79.0, 74.2, 65.3, 53.9, 39.0, 32.7],
    2005: [34.4, 34.9, 42.7, 50.5, 59.3, 66.7, 80.8, 77.0, 65.5, 54.4, 41.4, 31.5],
    2006: [34.4, 33.5, 41.6, 53.3, 63.1, 73.2, 83.0, 76.5, 63.4, 50.5, 41.0, 30.7],
    2007: [21.1, 36.8, 46.3, 52.5, 63.0, 73.2, 84.0, 80.6, 66.7, 51.9, 41.9, 27.0],
    2008: [23.9, 33.2, 40.4, 46.2, 57.4, 69.9, 81.4, 77.8, 66.5, 53.1, 42.9, 30.0],
    2009: [30.6, 36.2, 42.0, 48.8, 61.5, 66.4, 79.0, 75.5, 70.6, 49.4, 41.0, 23.6],
    2010: [28.0, 36.6, 42.7, 48.9, 53.2, 68.5, 78.0, 76.1, 68.8, 56.7, 39.3, 33.5],
    2011: [27.6, 34.1, 43.4, 45.4, 53.1, 66.2, 78.5, 79.0, 69.6, 54.8, 39.3, 29.4],
    2012: [33.2, 37.3, 49.0, 54.1, 61.5, 73.6, 82.2, 81.7, 70.0, 55.3, 45.5, 34.8],
    2013: [21.4, 28.6, 43.6, 49.4, 62.5, 75.3, 84.1, 80.7, 70.4, 52.4, 44.4, 24.6],
    2014: [30.4, 42.1, 49.0, 51.9, 61.7, 69.5, 81.3, 74.3, 70.0, 57.3, 41.3, 37.3],
    2015: [34.3, 43.9, 49.7, 52.3, 59.9, 77.5, 77.4, 77.6, 70.8, 60.5, 39.8, 31.3],
    2016: [30.4, 37.1, 47.1, 55.2, 61.7, 77.5, 83.1, 80.2, 67.3, 58.3, 47.0, 29.5],
    2017: [32.1, 40.0, 50.1, 50.3, 62.5, 76.0, 85.3, 81.8, 66.9, 52.6, 47.8, 33.0],
    2018: [39.0, 38.6, 46.5, 54.8, 64.5, 74.6, 83.1, 77.7, 70.8, 53.2, 39.1, 31.7],
    2019: [30.9, 34.7, 42.8, 52.5, 58.0, 70.4, 82.0, 80.3, 67.9, 46.5, 41.8, 33.9],
    2020: [35.7, 35.0, 46.5, 53.3, 64.7, 70.1, 81.1, 80.4, 69.4, 56.0, 42.5, 30.0],
    2021: [33.0, 36.4, 44.7, 51.3, 62.7, 80.2, 85.7, 76.8, 70.3, 53.2, 45.0, 34.8],
    2022: [31.9, 33.2, 46.3, 50.8, 59.4, 74.7, 87.8, 82.1, 75.1, 58.0, 37.2, 33.0],
    2023: [33.5, 32.5, 39.4, 50.3, 67.2, 71.4, 85.3, 78.9, 70.8, 55.8, 42.8, 36.5],
    2024: [34.8, 40.9, 44.9, 54.1, 58.8, 77.6, 83.3, 80.0, 73.0, 62.4, 40.9, 37.4],
    2025: [32.4, 39.7, 45.6],
}


def get_hardcoded_temperature_data() -> dict[str, float]:
    """Historical temperatures keyed by 'YYYY-MM'."""
    temperatures = {}
    for year, values in TEMPERATURE_TABLE.items():
        for month_index, value in enumerate(values):
            if value is None:
                continue
            temperatures[format_time_point(year, month_index + 1)] = value
    return temperatures
