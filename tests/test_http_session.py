import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Tuple

import pytest

from kbcstorage.client import KbcClient
from kbcstorage.exceptions import HTTPException
from kbcstorage.polling import PollingPolicy
from kbcstorage.resources import TableResource

TABLE_ID = 'in.c-bucket.mytable'


class StorageStub(ThreadingHTTPServer):
    r"""A local Storage API answering from per-``(method, path)`` reply
    queues; the last queued reply repeats.
    """
    def __init__(self) -> None:
        super().__init__(('127.0.0.1', 0), _Handler)
        self.calls: List[Tuple[str, str]] = []
        self.replies: Dict[Tuple[str, str], List[Tuple[int, dict]]] = {}

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f'http://{host}:{port}/v2/'

    def add(self, method: str, path: str, *replies: Tuple[int, dict]) -> None:
        self.replies.setdefault((method, path), []).extend(replies)


class _Handler(BaseHTTPRequestHandler):
    server: StorageStub

    def _reply(self) -> None:
        key = (self.command, self.path)
        self.server.calls.append(key)
        queue = self.server.replies.get(key) or [(404, {'error': 'no route'})]
        status, body = queue.pop(0) if len(queue) > 1 else queue[0]
        payload = json.dumps(body).encode('utf-8') if body else b''
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        self.send_header('Content-Length', str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = do_DELETE = _reply

    def log_message(self, *args) -> None:
        pass


@pytest.fixture
def stub():
    server = StorageStub()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def resource(stub):
    client = KbcClient(stub.url, 'test-token', file_import_url=stub.url)
    # Proxy settings from the environment must not reroute loopback calls:
    client._session.trust_env = False
    return TableResource(client, polling=PollingPolicy(interval_s=0))


def test_delete_is_sent_once_on_server_error(stub, resource):
    path = f'/v2/storage/tables/{TABLE_ID}'
    stub.add('DELETE', path, (503, {'error': 'Maintenance'}), (204, {}))
    data = resource.new_data({'bucket_id': 'in.c-bucket', 'name': 'mytable'},
                             id=TABLE_ID)

    with pytest.raises(HTTPException) as e:
        resource.delete(data)

    assert e.value.status_code == 503
    assert stub.calls == [('DELETE', path)]
    assert data.id == TABLE_ID


def test_read_is_sent_once_on_server_error(stub, resource):
    path = f'/v2/storage/tables/{TABLE_ID}'
    stub.add('GET', path, (500, {'error': 'Backend failure'}),
             (200, {'id': TABLE_ID, 'name': 'mytable'}))
    data = resource.new_data({'bucket_id': 'in.c-bucket', 'name': 'mytable'},
                             id=TABLE_ID)

    with pytest.raises(HTTPException, match='Backend failure'):
        resource.read(data)

    assert stub.calls == [('GET', path)]


def test_job_poll_is_sent_once_on_throttling(stub, resource):
    path = '/v2/storage/jobs/7'
    stub.add('GET', path, (429, {'error': 'Too many requests'}),
             (200, {'id': 7, 'status': 'success'}))

    with pytest.raises(HTTPException) as e:
        resource._client.jobs_api.get(7)

    assert e.value.status_code == 429
    assert stub.calls == [('GET', path)]
