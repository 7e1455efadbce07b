"""
Logging Configuration

One stderr handler on the package logger; stdout is reserved for run
summaries and scrape reports. HTTP and S3 client libraries stay at
WARNING even in verbose mode, otherwise every upload logs its signing
steps.
"""

import logging
import sys

PACKAGE_LOGGER = "lure_catalog"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

NOISY_LOGGERS = ("urllib3", "botocore", "boto3", "s3transfer")


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Route package logs to stderr.

    Args:
        verbose: DEBUG for package modules
        quiet: Only warnings and errors
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolve_level(verbose, quiet))
    # Repeated calls replace the handler
    package_logger.handlers.clear()
    package_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
