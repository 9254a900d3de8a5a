import json
from unittest.mock import patch

import pytest

from kbcstorage.__main__ import main

TABLE_ID = 'in.c-bucket.mytable'


@pytest.fixture(autouse=True)
def env(monkeypatch):
    monkeypatch.setenv('KBC_STORAGE_TOKEN', 'secret')
    monkeypatch.setenv('KBC_POLL_INTERVAL', '0')


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'table.json'
    path.write_text(json.dumps({
        'bucket_id': 'in.c-bucket',
        'name': 'mytable',
        'columns': ['a', 'b'],
    }))
    return path


def test_create_prints_state(config_file, capsys):
    def create(self, data, cancel_event=None):
        data.set_id(TABLE_ID)

    with patch('kbcstorage.resources.table.TableResource.create', create):
        assert main(['create', str(config_file)]) == 0

    state = json.loads(capsys.readouterr().out)
    assert state['id'] == TABLE_ID
    assert state['columns'] == ['a', 'b']


def test_delete_uses_id_flag(config_file, capsys):
    with patch('kbcstorage.resources.table.TableResource.delete') as delete:
        assert main(['delete', str(config_file), '--id', TABLE_ID]) == 0

    data, = delete.call_args.args
    assert data.id == TABLE_ID


def test_read_without_id_fails(config_file, capsys):
    assert main(['read', str(config_file)]) == 1
    assert 'requires a table ID' in capsys.readouterr().err


def test_unreadable_config(tmp_path, capsys):
    assert main(['create', str(tmp_path / 'missing.json')]) == 1
    assert 'Could not read' in capsys.readouterr().err
