import json
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest
import requests

from kbcstorage.client import KbcClient
from kbcstorage.polling import PollingPolicy
from kbcstorage.resources import TableResource

STORAGE_URL = 'https://connection.test/v2/'
FILE_IMPORT_URL = 'https://import.test/'
TOKEN = 'test-token'


def make_response(
    status_code: int = 200,
    body: Any = None,
    text: Optional[str] = None,
) -> requests.Response:
    r"""Builds a real response object, so status and JSON handling go through
    requests itself.
    """
    resp = requests.Response()
    resp.status_code = status_code
    if body is not None:
        text = json.dumps(body)
        resp.headers['Content-Type'] = 'application/json'
    resp._content = (text or '').encode('utf-8')
    resp.encoding = 'utf-8'
    return resp


Reply = Union[requests.Response, Exception]


class FakeSession:
    r"""Stands in for :class:`requests.Session`. Replies are queued per
    ``(method, url)``; the last queued reply repeats once the queue is
    drained.
    """
    def __init__(self) -> None:
        self.headers: Dict[str, str] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._routes: Dict[Tuple[str, str], List[Reply]] = {}

    def add(self, method: str, url: str, *replies: Reply) -> None:
        self._routes.setdefault((method, url), []).extend(replies)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        self.calls.append((method, url, kwargs))
        queue = self._routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        reply = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def calls_to(self, method: str, url: str) -> List[Dict[str, Any]]:
        return [kw for m, u, kw in self.calls if (m, u) == (method, url)]


def storage(path: str) -> str:
    return STORAGE_URL + path


def file_import(path: str) -> str:
    return FILE_IMPORT_URL + path


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> KbcClient:
    return KbcClient(STORAGE_URL, TOKEN, file_import_url=FILE_IMPORT_URL,
                     session=session)  # type: ignore[arg-type]


@pytest.fixture
def resource(client: KbcClient) -> TableResource:
    return TableResource(client, polling=PollingPolicy(interval_s=0))
