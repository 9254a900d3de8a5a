import logging
from typing import TYPE_CHECKING, Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util import Retry

from kbcstorage.client.endpoints import (
    Endpoint,
    HTTPMethod,
    Service,
    TokenEndpoints,
)
from kbcstorage.exceptions import AuthenticationError, TransportError

if TYPE_CHECKING:
    from kbcstorage.client.files import FileImportAPI
    from kbcstorage.client.jobs import JobAPI
    from kbcstorage.client.tables import TableAPI

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_URL = 'https://connection.keboola.com/v2/'
DEFAULT_FILE_IMPORT_URL = 'https://import.keboola.com/'
TOKEN_HEADER = 'X-StorageApi-Token'


class KbcClient:
    def __init__(
        self,
        storage_url: str,
        token: str,
        file_import_url: str = DEFAULT_FILE_IMPORT_URL,
        verify_ssl: bool = True,
        max_retries: int = 3,
        timeout_s: Optional[float] = 60.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        r"""Creates a client against the Keboola Storage API, provided the
        service URLs and a Storage API token.

        Args:
            storage_url: the Storage API URL, including the API version
                (*e.g.* ``https://connection.keboola.com/v2/``).
            token: the Storage API token, sent on every request.
            file_import_url: the file-import service URL.
            verify_ssl: whether to verify SSL certificates.
            max_retries: how many times a request is retried when the
                connection could not be established. Requests that reached
                the server are never retried, whatever the response status.
            timeout_s: per-request timeout in seconds.
            session: an existing session to send requests with; its adapters
                are left untouched.
        """
        self._storage_url = storage_url.rstrip('/')
        self._file_import_url = file_import_url.rstrip('/')
        self._token = token
        self._verify_ssl = verify_ssl
        self._timeout_s = timeout_s

        if session is None:
            # Only failed connects are retried: no request is ever sent twice.
            retry_strategy = Retry(
                total=max_retries,
                connect=max_retries,
                read=0,
                status=0,
                other=0,
                status_forcelist=(),
                respect_retry_after_header=False,
                raise_on_status=False,
                backoff_factor=0.5,
            )
            http_adapter = HTTPAdapter(max_retries=retry_strategy)
            session = requests.Session()
            session.mount('http://', http_adapter)
            session.mount('https://', http_adapter)
        self._session = session
        self._session.headers.update({TOKEN_HEADER: self._token})

    @property
    def storage_url(self) -> str:
        return self._storage_url

    @property
    def file_import_url(self) -> str:
        return self._file_import_url

    def authenticate(self) -> None:
        """Raises an exception if authentication fails."""
        try:
            resp = self._request(TokenEndpoints.verify)
        except TransportError as e:
            raise AuthenticationError(
                f"Could not reach the Storage API at {self._storage_url} to "
                f"verify the token: {e}") from e
        if not resp.ok:
            raise AuthenticationError(
                "Client authentication failed. Please check that you have a "
                f"valid Storage API token (status {resp.status_code}).")

    @property
    def files_api(self) -> 'FileImportAPI':
        r"""Returns the typed file-import API."""
        from kbcstorage.client.files import FileImportAPI
        return FileImportAPI(self)

    @property
    def tables_api(self) -> 'TableAPI':
        r"""Returns the typed Storage table API."""
        from kbcstorage.client.tables import TableAPI
        return TableAPI(self)

    @property
    def jobs_api(self) -> 'JobAPI':
        r"""Returns the typed Storage job API."""
        from kbcstorage.client.jobs import JobAPI
        return JobAPI(self)

    def _request(self, endpoint: Endpoint, **kwargs: Any) -> requests.Response:
        r"""Send a HTTP request to the specified endpoint.

        Raises:
            TransportError: if no response was received.
        """
        endpoint.validate()
        url = self._format_endpoint_url(endpoint)
        if endpoint.method not in (HTTPMethod.GET, HTTPMethod.POST,
                                   HTTPMethod.DELETE):
            raise ValueError(f"Unsupported HTTP method: {endpoint.method}")

        kwargs.setdefault('timeout', self._timeout_s)
        logger.debug("%s %s", endpoint.method.value, url)
        try:
            return self._session.request(endpoint.method.value, url,
                                         verify=self._verify_ssl, **kwargs)
        except requests.RequestException as e:
            raise TransportError(
                f"{endpoint.method.value} {url} failed: {e}") from e

    def _format_endpoint_url(self, endpoint: Endpoint) -> str:
        path = endpoint.get_path()
        if path[0] == "/":
            path = path[1:]
        if endpoint.service == Service.FILE_IMPORT:
            return f"{self._file_import_url}/{path}"
        return f"{self._storage_url}/{path}"
