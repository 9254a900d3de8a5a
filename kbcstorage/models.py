from dataclasses import field
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import AliasChoices, Field
from pydantic.dataclasses import dataclass

DEFAULT_DELIMITER = ','
DEFAULT_ENCLOSURE = '"'

JobID = Union[int, str]
TableID = str


class StrEnum(str, Enum):
    def __repr__(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class StorageJobStatus(StrEnum):
    # Job is queued on the Storage side:
    WAITING = 'waiting'

    # Job has been picked up by a worker:
    PROCESSING = 'processing'

    # Terminal status:
    SUCCESS = 'success'
    ERROR = 'error'

    @property
    def is_terminal(self) -> bool:
        return self in (StorageJobStatus.SUCCESS, StorageJobStatus.ERROR)


# Configuration ===============================================================


@dataclass
class TableSpec:
    r"""The declarative configuration of a Storage table. All fields are
    immutable once the table exists; changing any of them requires the table
    to be destroyed and re-created.
    """
    bucket_id: str
    name: str

    # Sent as ',' and '"' respectively when unset or empty:
    delimiter: Optional[str] = None
    enclosure: Optional[str] = None

    transactional: bool = False
    columns: List[str] = field(default_factory=list)
    primary_key: List[str] = field(default_factory=list)
    indexed_columns: List[str] = field(default_factory=list)

    @property
    def table_id(self) -> TableID:
        r"""The identifier Storage assigns to this table once created."""
        return f"{self.bucket_id}.{self.name}"

    @property
    def header(self) -> str:
        r"""The CSV header line the table is created from."""
        return ','.join(self.columns)

    def create_form(self, data_file_id: int) -> List[Tuple[str, str]]:
        r"""Returns the ordered form fields of an asynchronous create
        request loading from the uploaded file ``data_file_id``.
        """
        return [
            ('name', self.name),
            ('primaryKey', ','.join(self.primary_key)),
            ('indexedColumns', ','.join(self.indexed_columns)),
            ('dataFileId', str(data_file_id)),
            ('delimiter', self.delimiter or DEFAULT_DELIMITER),
            ('enclosure', self.enclosure or DEFAULT_ENCLOSURE),
        ]


# Wire types ==================================================================


@dataclass
class UploadFileResult:
    r"""The file created by the file-import service from an upload."""
    id: int


@dataclass
class JobReference:
    r"""A handle on an asynchronous Storage job."""
    id: JobID


@dataclass
class StorageJobResults:
    # Set to the canonical table ID by a successful table-create job:
    id: Optional[str] = None


@dataclass
class StorageJobError:
    message: Optional[str] = None
    code: Optional[str] = None
    exception_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('exceptionId', 'exception_id'),
    )


@dataclass
class StorageJob:
    r"""The status report of an asynchronous Storage job."""
    id: JobID

    # Kept as the raw string so that statuses unknown to this client are
    # treated as still running rather than failing validation:
    status: str

    results: Optional[StorageJobResults] = None
    error: Optional[StorageJobError] = None

    @property
    def job_status(self) -> Optional[StorageJobStatus]:
        try:
            return StorageJobStatus(self.status)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        status = self.job_status
        return status is not None and status.is_terminal

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return self.error.message


@dataclass
class StorageTable:
    r"""A Storage table as reported by ``GET storage/tables/{id}``."""
    id: TableID
    name: str
    delimiter: str = ''
    enclosure: str = ''
    transactional: bool = False
    columns: List[str] = field(default_factory=list)
    primary_key: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices('primaryKey', 'primary_key'),
    )
    indexed_columns: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices('indexedColumns', 'indexed_columns'),
    )
