from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Optional


class HTTPMethod(Enum):
    r"""HTTP methods supported by the API."""
    GET = "GET"
    POST = "POST"
    DELETE = "DELETE"


class Service(Enum):
    r"""The base URL an endpoint is resolved against."""
    STORAGE = "storage"
    FILE_IMPORT = "file_import"


@dataclass(frozen=True)
class Endpoint:
    r"""Represents an API endpoint with its path and HTTP method."""
    path: Optional[str] = field(default=None)
    method: HTTPMethod = HTTPMethod.GET
    service: Service = Service.STORAGE

    def validate(self) -> None:
        pass

    def get_path(self) -> str:
        if self.path is None:
            # This should be in validate but is here for type checker
            raise ValueError("Endpoint requires a path")
        return self.path


@dataclass(frozen=True)
class IDEndpoint(Endpoint):
    r"""Represents an API endpoint with an additional id/name in its path."""
    template_path: Optional[str] = field(default=None)

    def __post_init__(self) -> None:
        if self.template_path is None:
            raise ValueError("template_path must be set explicitly")
        if "{id}" not in self.template_path:
            raise ValueError("IDEndpoint path must contain '{{id}}': "
                             f"got '{self.template_path}'")

    def with_id(self, resource_id: object) -> 'IDEndpoint':
        assert self.template_path is not None
        return IDEndpoint(template_path=self.template_path,
                          path=self.template_path.format(id=resource_id),
                          method=self.method, service=self.service)

    def validate(self) -> None:
        if self.path is None:
            raise ValueError(
                "IDEndpoint requires with_id() to be called with a resource id"
            )

    @classmethod
    def from_base(cls, base: str, method: HTTPMethod) -> 'IDEndpoint':
        r"""Alternate constructor to build a template_path by appending /{id}
        to base.
        """
        template = f"{base}/{{id}}"
        return cls(template_path=template, method=method)


class FileImportEndpoints:
    upload_file = Endpoint("upload-file", HTTPMethod.POST,
                           Service.FILE_IMPORT)


class TableEndpoints:
    BASE: Final[str] = "storage/tables"

    create_async = IDEndpoint(
        template_path="storage/buckets/{id}/tables-async",
        method=HTTPMethod.POST,
    )
    get = IDEndpoint.from_base(BASE, HTTPMethod.GET)
    delete = IDEndpoint.from_base(BASE, HTTPMethod.DELETE)


class JobEndpoints:
    BASE: Final[str] = "storage/jobs"

    get = IDEndpoint.from_base(BASE, HTTPMethod.GET)


class TokenEndpoints:
    verify = Endpoint("storage/tokens/verify", HTTPMethod.GET)
