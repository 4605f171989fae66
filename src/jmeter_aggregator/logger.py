"""
Logger configuration for jmeter_aggregator.

The package logs through loguru. Progress and warnings emitted while parsing go
to the console at the configured level and, optionally, to a JSON-serialized
log file.

Environment variables (prefix JMETER_AGGREGATOR__LOGGING__) control the setup:
- DISABLED: disable all package logging
- CLEAR_LOGGERS: remove existing loguru handlers before configuring
- CONSOLE_LOG_LEVEL: console level, e.g. INFO
- LOG_FILE: path of the log file
- LOG_FILE_LEVEL: file level, e.g. DEBUG

Example:
::
    from jmeter_aggregator import configure_logger, LoggingSettings

    configure_logger(LoggingSettings(console_log_level="INFO"))
"""

from __future__ import annotations

import sys

from loguru import logger

from jmeter_aggregator.settings import LoggingSettings, Settings

__all__ = ["configure_logger", "logger"]


def configure_logger(config: LoggingSettings | None = None):
    """
    Configure the package logger from logging settings.

    :param config: Logging settings; read from the environment if None
    """
    config = config if config is not None else Settings().logging

    if config.disabled:
        logger.disable("jmeter_aggregator")
        return

    logger.enable("jmeter_aggregator")

    if config.clear_loggers:
        logger.remove()

    if config.console_log_level:
        logger.add(sys.stderr, level=config.console_log_level.upper())

    if config.log_file or config.log_file_level:
        log_file = config.log_file or "jmeter_aggregator.log"
        log_file_level = config.log_file_level or "INFO"
        logger.add(log_file, level=log_file_level.upper(), serialize=True)


configure_logger()
