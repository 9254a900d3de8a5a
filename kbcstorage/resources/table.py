import logging
import threading
from http import HTTPStatus
from typing import Any, Dict, List, Mapping, Optional

from kbcstorage.client import KbcClient
from kbcstorage.exceptions import DecodeError, HTTPException
from kbcstorage.models import StorageTable, TableSpec
from kbcstorage.polling import PollingPolicy
from kbcstorage.resources.schema import (
    FieldType,
    ResourceData,
    SchemaField,
    requires_replacement,
)

logger = logging.getLogger(__name__)

RESOURCE_TYPE = 'keboola_storage_table'

# The header-only CSV a table is created from is uploaded under this name:
UPLOAD_FILE_NAME = 'from-text-input.csv'

TABLE_SCHEMA: Dict[str, SchemaField] = {
    'bucket_id': SchemaField(FieldType.STRING, required=True, force_new=True),
    'name': SchemaField(FieldType.STRING, required=True, force_new=True),
    'delimiter': SchemaField(FieldType.STRING, force_new=True),
    'enclosure': SchemaField(FieldType.STRING, force_new=True),
    'transactional': SchemaField(FieldType.BOOL, force_new=True),
    'primaryKey': SchemaField(FieldType.LIST, force_new=True),
    'columns': SchemaField(FieldType.LIST, force_new=True),
    'indexedColumns': SchemaField(FieldType.LIST, force_new=True),
}


class TableResource:
    r"""Manages the lifecycle of a Keboola Storage table.

    A table is never updated in place: every field of :obj:`TABLE_SCHEMA` is
    force-new, so there is no ``update`` operation.

    Args:
        client: the client all requests are sent with.
        polling: how the asynchronous create job is polled.
    """
    schema = TABLE_SCHEMA

    def __init__(
        self,
        client: KbcClient,
        polling: PollingPolicy = PollingPolicy(),
    ) -> None:
        self._client = client
        self._polling = polling

    def new_data(
        self,
        values: Optional[Mapping[str, Any]] = None,
        id: str = '',
    ) -> ResourceData:
        r"""Returns an empty or pre-populated state object for a table."""
        return ResourceData(self.schema, values, id=id)

    def create(
        self,
        data: ResourceData,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        r"""Creates the table described by ``data`` and populates ``data``
        with its canonical remote state.

        The table is created asynchronously from an uploaded header-only CSV.
        The ID is assigned only once the create job has succeeded. It is
        cleared again if the created table cannot be found afterwards.

        Raises:
            ConfigurationError: if a required field is missing.
            JobFailedError: if the create job finished with status
                ``error``.
            PollingTimeoutError: if the polling policy bounds were exceeded.
            PollingCancelledError: if ``cancel_event`` was set.
            HTTPException: on API errors, including a created table that
                cannot be read back (404).
        """
        data.validate()
        spec = self.to_spec(data)
        logger.info("Creating Storage Table %s in Keboola.", spec.table_id)

        upload = self._client.files_api.upload_text(UPLOAD_FILE_NAME,
                                                    spec.header)

        job_ref = self._client.tables_api.create_async(
            spec.bucket_id, spec.create_form(upload.id))
        logger.debug("Table %s is being created by job %s", spec.table_id,
                     job_ref.id)

        job = self._client.jobs_api.wait(job_ref.id, self._polling,
                                         cancel_event)
        table_id = job.results.id if job.results is not None else None
        if not table_id:
            raise DecodeError(f"Storage job {job_ref.id} succeeded without "
                              f"reporting the created table ID")

        data.set_id(table_id)
        logger.info("Created Storage Table %s.", table_id)
        self.read(data)
        if not data.id:
            raise HTTPException(
                HTTPStatus.NOT_FOUND,
                f"Storage job {job_ref.id} reported table {table_id} as "
                f"created, but the table could not be read back")

    def read(self, data: ResourceData) -> None:
        r"""Refreshes ``data`` from the remote table.

        Nothing happens if ``data`` has no ID. If the table no longer exists
        the ID is cleared. If the remote table reports a different ID than
        the stored one, ``data`` is left unchanged.
        """
        if not data.id:
            return

        table_id = f"{data.get('bucket_id')}.{data.get('name')}"
        logger.info("Reading Storage Table %s from Keboola.", table_id)

        table = self._client.tables_api.get_if_exists(table_id)
        if table is None:
            logger.warning(
                "Storage Table %s no longer exists; removing it from state.",
                table_id)
            data.set_id('')
            return

        if table.id != data.id:
            logger.warning(
                "Storage Table %s reports ID %s, expected %s; keeping the "
                "stored state.", table_id, table.id, data.id)
            return

        self._apply(data, table)

    def delete(self, data: ResourceData) -> None:
        r"""Deletes the table and clears the ID of ``data``. On error the ID
        is left as it was. Nothing happens if ``data`` has no ID.
        """
        if not data.id:
            return

        logger.info("Deleting Storage Table in Keboola: %s", data.id)
        self._client.tables_api.delete(data.id)
        data.set_id('')

    def requires_replacement(
        self,
        old: Mapping[str, Any],
        new: Mapping[str, Any],
    ) -> List[str]:
        r"""Returns the fields whose change forces the table to be destroyed
        and re-created.
        """
        return requires_replacement(self.schema, old, new)

    @staticmethod
    def to_spec(data: ResourceData) -> TableSpec:
        return TableSpec(
            bucket_id=data.get('bucket_id'),
            name=data.get('name'),
            delimiter=data.get('delimiter') or None,
            enclosure=data.get('enclosure') or None,
            transactional=data.get('transactional'),
            columns=data.get('columns'),
            primary_key=data.get('primaryKey'),
            indexed_columns=data.get('indexedColumns'),
        )

    @staticmethod
    def _apply(data: ResourceData, table: StorageTable) -> None:
        data.set('name', table.name)
        data.set('delimiter', table.delimiter)
        data.set('enclosure', table.enclosure)
        data.set('transactional', table.transactional)
        data.set('primaryKey', table.primary_key)
        data.set('indexedColumns', table.indexed_columns)
        data.set('columns', table.columns)
