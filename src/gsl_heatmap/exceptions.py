"""
Exceptions for lake heatmap operations.
"""


class GSLHeatmapError(Exception):
    """Base exception for gsl_heatmap errors."""

    pass


class FeedError(GSLHeatmapError):
    """Error fetching or decoding a remote feed."""

    pass


class ProjectionError(GSLHeatmapError):
    """The lake boundary cannot support a map projection."""

    pass
