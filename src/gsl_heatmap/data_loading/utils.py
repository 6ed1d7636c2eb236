"""
Data Loading Utilities

Utility class for configuration management and logger setup.
"""

import configparser
import logging
import logging.config
from pathlib import Path
from typing import Optional, Union


class Utils:
    """
    Utility class for configuration file management.

    Provides methods to read and parse the configuration file that defines
    feed URLs, the station lists and the interpolation parameters.

    Attributes
    ----------
    config_file : Path
        Path to the main configuration file (conf/gsl_heatmap.conf)

    Examples
    --------
    >>> import logging
    >>> logger = logging.getLogger(__name__)
    >>> params = Utils().read_config_section('parameters', logger)
    >>> print(params['cell_size'])
    5

    Notes
    -----
    The configuration file is expected to be in INI format with sections:

    [urls]
    sites_api = https://...
    ...

    [stations]
    allowed_sites = AC3, AIS, ...

    [parameters]
    request_timeout = 5
    ...
    """

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize Utils with path to configuration file.

        The default config file is located relative to the project root:
        <project_root>/conf/gsl_heatmap.conf
        """
        if config_file is None:
            # Navigate from src/gsl_heatmap/data_loading/ up to project root
            config_file = (
                Path(__file__).parent.parent.parent.parent
                / 'conf/gsl_heatmap.conf'
            )
        self.config_file = Path(config_file).resolve()

    def get_config_file(self) -> Path:
        """Get the path to the configuration file."""
        return self.config_file

    def get_log_config_file(self) -> Path:
        """Get the path to the logging configuration file."""
        return self.config_file.parent / 'logging.conf'

    def read_config_section(
        self,
        section: str,
        logger: logging.Logger
    ) -> dict[str, str]:
        """
        Read a configuration file section and return as dictionary.

        Parameters
        ----------
        section : str
            Name of the section to read (e.g., 'urls', 'parameters')
        logger : logging.Logger
            Logger instance for error reporting

        Returns
        -------
        Dict[str, str]
            Dictionary with configuration parameters from the section.
            Returns empty dict if the file or section is missing, so
            callers keep their built-in defaults.
        """
        params = {}
        if not self.config_file.is_file():
            logger.warning(
                'Config file not found: %s. Using built-in defaults.',
                self.config_file,
            )
            return params

        config = configparser.ConfigParser()
        try:
            config.read(self.config_file, encoding='utf-8')
            for option in config.options(section):
                params[option] = config.get(section, option)
        except configparser.NoSectionError:
            logger.warning(
                "No section '%s' found reading %s. Using built-in defaults.",
                section,
                self.config_file,
            )
        except configparser.Error as ex:
            logger.error(
                'Error reading config file %s: %s',
                self.config_file,
                ex,
                exc_info=True,
            )

        return params


def parse_list_option(value: str) -> list[str]:
    """
    Parse a comma separated config option into a list of strings.

    >>> parse_list_option('[AC3, AIS , RD1]')
    ['AC3', 'AIS', 'RD1']
    """
    value = value.replace('[', '').replace(']', '')
    return [item.strip() for item in value.split(',') if item.strip()]


def get_logger(name: str = 'gsl_heatmap') -> logging.Logger:
    """
    Return a configured logger.

    Uses conf/logging.conf when it exists, otherwise the named package logger
    is returned as-is and the application keeps control of handlers.
    """
    log_config_file = Utils().get_log_config_file()
    if log_config_file.is_file():
        logging.config.fileConfig(
            log_config_file, disable_existing_loggers=False
        )
    logger = logging.getLogger(name)
    logger.debug('Using log config %s', log_config_file)
    return logger
