import pytest

from kbcstorage.client.client import DEFAULT_FILE_IMPORT_URL
from kbcstorage.exceptions import ConfigurationError
from kbcstorage.polling import PollingPolicy
from kbcstorage.provider import Provider, ProviderConfig
from kbcstorage.resources import TableResource


def test_from_env():
    config = ProviderConfig.from_env(environ={
        'KBC_STORAGE_TOKEN': 'secret',
        'KBC_STORAGE_API_URL': 'https://connection.eu-central-1.keboola.com/v2/',
        'KBC_POLL_INTERVAL': '1.5',
        'KBC_POLL_MAX_ATTEMPTS': '40',
    })
    assert config.token == 'secret'
    assert config.storage_url.startswith('https://connection.eu-central-1')
    assert config.file_import_url == DEFAULT_FILE_IMPORT_URL
    assert config.polling == PollingPolicy(interval_s=1.5, max_attempts=40)


def test_explicit_arguments_win():
    config = ProviderConfig.from_env(token='explicit',
                                     storage_url='https://local/v2',
                                     environ={'KBC_STORAGE_TOKEN': 'env'})
    assert config.token == 'explicit'
    assert config.storage_url == 'https://local/v2'
    assert config.polling == PollingPolicy()


def test_missing_token():
    with pytest.raises(ConfigurationError, match='KBC_STORAGE_TOKEN'):
        ProviderConfig.from_env(environ={})


@pytest.mark.parametrize('key,value', [
    ('KBC_POLL_INTERVAL', 'fast'),
    ('KBC_POLL_TIMEOUT', '-1'),
    ('KBC_POLL_MAX_ATTEMPTS', '2.5'),
])
def test_bad_polling_settings(key, value):
    with pytest.raises(ConfigurationError, match=key):
        ProviderConfig.from_env(environ={'KBC_STORAGE_TOKEN': 't', key: value})


def test_provider_hands_out_table_resource():
    provider = Provider(ProviderConfig(token='t'))
    resource = provider.resource('keboola_storage_table')
    assert isinstance(resource, TableResource)
    assert resource._client is provider.client
    assert provider.resource_types == ['keboola_storage_table']

    with pytest.raises(ConfigurationError, match='keboola_storage_bucket'):
        provider.resource('keboola_storage_bucket')
