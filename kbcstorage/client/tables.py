from http import HTTPStatus
from typing import List, Optional, Tuple

from kbcstorage.client import KbcClient
from kbcstorage.client.endpoints import TableEndpoints
from kbcstorage.client.utils import parse_response, raise_on_error
from kbcstorage.models import JobReference, StorageTable, TableID


class TableAPI:
    r"""Typed API definition for Storage tables."""
    def __init__(self, client: KbcClient) -> None:
        self._client = client

    def create_async(
        self,
        bucket_id: str,
        form: List[Tuple[str, str]],
    ) -> JobReference:
        r"""Requests asynchronous creation of a table in ``bucket_id``; the
        returned job must be polled to learn the outcome.
        """
        resp = self._client._request(
            TableEndpoints.create_async.with_id(bucket_id),
            data=form,
        )
        raise_on_error(resp)
        return parse_response(JobReference, resp)

    def get(self, table_id: TableID) -> StorageTable:
        resp = self._client._request(TableEndpoints.get.with_id(table_id))
        raise_on_error(resp)
        return parse_response(StorageTable, resp)

    def get_if_exists(self, table_id: TableID) -> Optional[StorageTable]:
        r"""Fetches a table given its ID, or :obj:`None` if it does not
        exist.
        """
        resp = self._client._request(TableEndpoints.get.with_id(table_id))
        if resp.status_code == HTTPStatus.NOT_FOUND:
            return None

        raise_on_error(resp)
        return parse_response(StorageTable, resp)

    def delete(self, table_id: TableID) -> None:
        resp = self._client._request(TableEndpoints.delete.with_id(table_id))
        raise_on_error(resp)
