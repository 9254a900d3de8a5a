import logging
import os
from typing import Union

from kbcstorage._version import __version__
from kbcstorage.client import KbcClient
from kbcstorage.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    HTTPException,
    JobFailedError,
    KbcError,
    PollingCancelledError,
    PollingTimeoutError,
    TransportError,
)
from kbcstorage.models import StorageJob, StorageTable, TableSpec
from kbcstorage.polling import PollingPolicy
from kbcstorage.provider import Provider, ProviderConfig
from kbcstorage.resources import ResourceData, TableResource

LOG_ENV_VAR = 'KBC_LOG'

logger = logging.getLogger('kbcstorage')


def set_log_level(level: Union[str, int]) -> None:
    r"""Sets the logging level, which defines the amount of output that
    create, read and delete produce. Unparseable levels fall back to INFO
    with a warning.

    Example:
        >>> import kbcstorage
        >>> kbcstorage.set_log_level("debug")  # doctest: +SKIP

    Args:
        level: the logging level, case-insensitive. Can be one of (in order
            of lowest to highest log output) :obj:`DEBUG`, :obj:`INFO`,
            :obj:`WARNING`, :obj:`ERROR`, :obj:`CRITICAL`.
    """
    if isinstance(level, str):
        level = level.strip().upper()
    try:
        logger.setLevel(level)
    except (TypeError, ValueError):
        logger.setLevel(logging.INFO)
        logger.warning(
            "Logging level %s could not be properly parsed. "
            "Defaulting to INFO log level.", level)


def _initialize_logging() -> None:
    logging.basicConfig(
        format=(
            "[%(asctime)s - %(name)s:%(lineno)d - %(levelname)s] %(message)s"),
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    set_log_level(os.getenv(LOG_ENV_VAR, "INFO"))

    # A failed connect is retried by the session adapter; urllib3 would log
    # each attempt:
    logging.getLogger("urllib3").setLevel(logging.ERROR)


_initialize_logging()


__all__ = [
    'KbcClient',
    'Provider',
    'ProviderConfig',
    'PollingPolicy',
    'ResourceData',
    'TableResource',
    'TableSpec',
    'StorageJob',
    'StorageTable',
    'KbcError',
    'AuthenticationError',
    'ConfigurationError',
    'DecodeError',
    'HTTPException',
    'JobFailedError',
    'PollingCancelledError',
    'PollingTimeoutError',
    'TransportError',
    'set_log_level',
    '__version__',
]
