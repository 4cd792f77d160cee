"""
======================================================
Comprehensive pytest suite for utils/database_utils.py
======================================================

Sections:
---------
1. Unit tests - engine creation, availability checks

Available markers:
------------------
unit

How to Execute:
---------------
All tests:          python -m pytest tests/tests_utils/test_database_utils.py -v
With coverage:      python -m pytest tests/tests_utils/test_database_utils.py --cov=utils.database_utils

Note: Use 'python -m pytest' (not just 'pytest') to ensure correct Python path resolution.
"""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from core.config import config
from utils.database_utils import check_database_available, create_sqlalchemy_engine, verify_connection


@pytest.mark.unit
def test_create_sqlalchemy_engine_uses_config_url():
    """Test the engine targets the configured oracle+oracledb URL."""
    with patch('utils.database_utils.create_engine') as mock_create:
        create_sqlalchemy_engine()

    url = mock_create.call_args[0][0]
    assert url.drivername == 'oracle+oracledb'
    assert url.host == config.db_host
    assert url.query['service_name'] == config.db.service_name
    assert mock_create.call_args[1]['pool_pre_ping'] is True


@pytest.mark.unit
def test_check_database_available_true():
    """Test a working connection reports available."""
    engine = MagicMock()
    assert check_database_available(engine) is True
    engine.dispose.assert_not_called()


@pytest.mark.unit
def test_check_database_available_false():
    """Test connection errors report unavailable."""
    engine = MagicMock()
    engine.connect.side_effect = OperationalError('SELECT 1', {}, Exception('ORA-12541'))
    assert check_database_available(engine) is False


@pytest.mark.unit
def test_check_database_available_disposes_own_engine():
    """Test a temporary engine is disposed after the check."""
    with patch('utils.database_utils.create_sqlalchemy_engine') as mock_create:
        assert check_database_available() is True
    mock_create.return_value.dispose.assert_called_once()


@pytest.mark.unit
def test_verify_connection_messages():
    """Test status messages name the target."""
    success, message = verify_connection(MagicMock())
    assert success
    assert message.startswith('Connected to Oracle at ')

    failing = MagicMock()
    failing.connect.side_effect = OperationalError('SELECT 1', {}, Exception('down'))
    success, message = verify_connection(failing)
    assert not success
    assert 'not available' in message
