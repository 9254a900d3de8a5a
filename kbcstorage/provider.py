import logging
import os
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from kbcstorage.client import KbcClient
from kbcstorage.client.client import (
    DEFAULT_FILE_IMPORT_URL,
    DEFAULT_STORAGE_URL,
)
from kbcstorage.exceptions import ConfigurationError
from kbcstorage.polling import DEFAULT_POLL_INTERVAL_S, PollingPolicy
from kbcstorage.resources.table import RESOURCE_TYPE as TABLE_RESOURCE_TYPE
from kbcstorage.resources.table import TableResource

logger = logging.getLogger(__name__)

_ENV_TOKEN = 'KBC_STORAGE_TOKEN'
_ENV_STORAGE_URL = 'KBC_STORAGE_API_URL'
_ENV_FILE_IMPORT_URL = 'KBC_FILE_IMPORT_URL'
_ENV_POLL_INTERVAL = 'KBC_POLL_INTERVAL'
_ENV_POLL_TIMEOUT = 'KBC_POLL_TIMEOUT'
_ENV_POLL_MAX_ATTEMPTS = 'KBC_POLL_MAX_ATTEMPTS'


@dataclass(frozen=True)
class ProviderConfig:
    r"""Everything needed to talk to one Keboola Storage project."""
    token: str
    storage_url: str = DEFAULT_STORAGE_URL
    file_import_url: str = DEFAULT_FILE_IMPORT_URL
    verify_ssl: bool = True
    polling: PollingPolicy = PollingPolicy()

    @classmethod
    def from_env(
        cls,
        token: Optional[str] = None,
        storage_url: Optional[str] = None,
        file_import_url: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'ProviderConfig':
        r"""Builds a configuration from explicit arguments, falling back to
        the ``KBC_*`` environment variables.

        Raises:
            ConfigurationError: if no token is available, or a polling
                setting cannot be parsed.
        """
        env = os.environ if environ is None else environ

        token = token or env.get(_ENV_TOKEN)
        if not token:
            raise ConfigurationError(
                "Client creation failed: Storage API token not provided. "
                f"Please either set the '{_ENV_TOKEN}' environment variable "
                "or pass it explicitly.")

        polling = PollingPolicy(
            interval_s=_parse_env(env, _ENV_POLL_INTERVAL, float,
                                  DEFAULT_POLL_INTERVAL_S),
            timeout_s=_parse_env(env, _ENV_POLL_TIMEOUT, float, None),
            max_attempts=_parse_env(env, _ENV_POLL_MAX_ATTEMPTS, int, None),
        )
        return cls(
            token=token,
            storage_url=(storage_url or env.get(_ENV_STORAGE_URL)
                         or DEFAULT_STORAGE_URL),
            file_import_url=(file_import_url or env.get(_ENV_FILE_IMPORT_URL)
                             or DEFAULT_FILE_IMPORT_URL),
            polling=polling,
        )


def _parse_env(env: Mapping[str, str], key: str, cast: Callable,
               default: Optional[float]) -> Optional[float]:
    value = env.get(key)
    if value is None or value == '':
        return default
    try:
        parsed = cast(value)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable '{key}' must be a number, got "
            f"'{value}'") from None
    if parsed < 0:
        raise ConfigurationError(
            f"Environment variable '{key}' must be non-negative, got "
            f"'{value}'")
    return parsed


class Provider:
    r"""Owns the client of one Storage project and hands it to the
    resources it serves.

    Example:
        >>> provider = Provider(ProviderConfig.from_env())  # doctest: +SKIP
        >>> tables = provider.resource('keboola_storage_table')  # doctest: +SKIP
    """  # noqa
    def __init__(
        self,
        config: ProviderConfig,
        client: Optional[KbcClient] = None,
    ) -> None:
        self.config = config
        self.client = client or KbcClient(
            storage_url=config.storage_url,
            token=config.token,
            file_import_url=config.file_import_url,
            verify_ssl=config.verify_ssl,
        )
        self._resources: Dict[str, Callable[[], TableResource]] = {
            TABLE_RESOURCE_TYPE:
            lambda: TableResource(self.client, polling=config.polling),
        }
        logger.debug("Configured provider against %s", config.storage_url)

    @property
    def resource_types(self) -> List[str]:
        return sorted(self._resources)

    def resource(self, resource_type: str) -> TableResource:
        r"""Returns the handler for ``resource_type``.

        Raises:
            ConfigurationError: if the resource type is not served.
        """
        try:
            factory = self._resources[resource_type]
        except KeyError:
            raise ConfigurationError(
                f"Unknown resource type '{resource_type}'; expected one of "
                f"{self.resource_types}") from None
        return factory()
