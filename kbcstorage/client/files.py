import logging

from kbcstorage.client import KbcClient
from kbcstorage.client.endpoints import FileImportEndpoints
from kbcstorage.client.utils import parse_response, raise_on_error
from kbcstorage.models import UploadFileResult

logger = logging.getLogger(__name__)


class FileImportAPI:
    r"""Typed API definition for the Keboola file-import service."""
    def __init__(self, client: KbcClient) -> None:
        self._client = client

    def upload_text(self, name: str, data: str) -> UploadFileResult:
        r"""Uploads ``data`` as a file called ``name`` and returns the
        created file. Both are sent as plain multipart form fields.
        """
        resp = self._client._request(
            FileImportEndpoints.upload_file,
            files={
                'name': (None, name),
                'data': (None, data),
            },
        )
        raise_on_error(resp)
        result = parse_response(UploadFileResult, resp)
        logger.debug("Uploaded %s as file %d", name, result.id)
        return result
