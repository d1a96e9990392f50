from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from pymongo.errors import ConnectionFailure, PyMongoError

from visitrack.api import dependencies
from visitrack.config.database import DatabaseConnection, DatabaseUnavailableError
from visitrack.config.setting import get_settings, missing_settings, validate_settings
from visitrack.config.settings.environment import Environment
from visitrack.config.settings.testing import BackendTestSettings


def connection_config(**overrides):
    values = dict(
        MONGODB_URI='mongodb://db.internal:27017',
        DATABASE_NAME='visitrack',
        MONGODB_SERVER_SELECTION_TIMEOUT_MS=1000,
        MONGODB_CONNECT_TIMEOUT_MS=1000,
        MONGODB_SOCKET_TIMEOUT_MS=1000,
        MONGODB_MAX_POOL_SIZE=5,
        MONGODB_MIN_POOL_SIZE=1,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def test_test_environment_is_selected():
    current = get_settings('TEST')

    assert isinstance(current, BackendTestSettings)
    assert current.ENVIRONMENT == Environment.TESTING
    assert current.DEBUG is False


def test_missing_settings_are_reported():
    current = BackendTestSettings(JWT_SECRET_KEY='', MONGODB_URI='')

    assert missing_settings(current) == ['MONGODB_URI', 'JWT_SECRET_KEY']
    with pytest.raises(ValueError, match='JWT_SECRET_KEY must be set'):
        validate_settings(current)


def test_complete_settings_validate():
    assert validate_settings(BackendTestSettings(JWT_SECRET_KEY='x', MONGODB_URI='mongodb://h', DATABASE_NAME='d'))


def test_get_db_reports_missing_configuration(monkeypatch):
    monkeypatch.setattr(dependencies, 'missing_settings', lambda: ['JWT_SECRET_KEY'])

    with pytest.raises(HTTPException) as exc_info:
        dependencies.get_db()

    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == 'Server configuration error: JWT_SECRET_KEY not configured'


def test_get_db_reports_unavailable_database(monkeypatch):
    def unavailable():
        raise DatabaseUnavailableError('down')

    monkeypatch.setattr(dependencies, 'missing_settings', lambda: [])
    monkeypatch.setattr(dependencies, 'get_database', unavailable)

    with pytest.raises(HTTPException) as exc_info:
        dependencies.get_db()

    assert exc_info.value.detail == 'Database connection failed'


def test_connect_opens_one_client():
    factory = MagicMock()
    connection = DatabaseConnection(connection_config(), client_factory=factory)

    assert connection.connect() is True

    factory.assert_called_once()
    assert factory.call_args.args == ('mongodb://db.internal:27017',)
    assert factory.call_args.kwargs['maxPoolSize'] == 5
    factory.return_value.admin.command.assert_called_with('ping')


def test_connect_failure_returns_false():
    factory = MagicMock()
    factory.return_value.admin.command.side_effect = ConnectionFailure('refused')
    connection = DatabaseConnection(connection_config(), client_factory=factory)

    assert connection.connect() is False
    assert connection.health_check() is False


def test_unconfigured_connection_never_builds_a_client():
    factory = MagicMock()
    connection = DatabaseConnection(connection_config(MONGODB_URI=''), client_factory=factory)

    with pytest.raises(DatabaseUnavailableError):
        connection.get_database()
    factory.assert_not_called()


def test_checkout_reuses_healthy_client():
    factory = MagicMock()
    connection = DatabaseConnection(connection_config(), client_factory=factory)

    connection.get_database()
    connection.get_database()

    factory.assert_called_once()


def test_checkout_reconnects_after_failed_ping():
    stale, fresh = MagicMock(), MagicMock()
    factory = MagicMock(side_effect=[stale, fresh])
    connection = DatabaseConnection(connection_config(), client_factory=factory)
    connection.connect()

    stale.admin.command.side_effect = PyMongoError('connection reset')
    database = connection.get_database()

    assert factory.call_count == 2
    stale.close.assert_called_once()
    assert database is fresh['visitrack']
    assert connection.get_client() is fresh


def test_disconnect_closes_client():
    factory = MagicMock()
    connection = DatabaseConnection(connection_config(), client_factory=factory)
    connection.connect()

    connection.disconnect()

    factory.return_value.close.assert_called_once()
    assert connection.health_check() is False
