import logging

import pytest

import kbcstorage


@pytest.fixture(autouse=True)
def restore_level():
    level = kbcstorage.logger.level
    yield
    kbcstorage.logger.setLevel(level)


@pytest.mark.parametrize('level', ['debug', ' DEBUG', logging.DEBUG])
def test_set_log_level_accepts_any_case(level):
    kbcstorage.set_log_level(level)
    assert kbcstorage.logger.level == logging.DEBUG


def test_unparseable_env_level_falls_back_to_info(monkeypatch, caplog):
    monkeypatch.setenv(kbcstorage.LOG_ENV_VAR, 'chatty')

    with caplog.at_level(logging.WARNING, logger='kbcstorage'):
        kbcstorage._initialize_logging()
        level = kbcstorage.logger.level

    assert level == logging.INFO
    assert 'chatty' in caplog.text
    assert logging.getLogger('urllib3').level == logging.ERROR


def test_env_level_is_applied(monkeypatch):
    monkeypatch.setenv(kbcstorage.LOG_ENV_VAR, 'warning')
    kbcstorage._initialize_logging()
    assert kbcstorage.logger.level == logging.WARNING
