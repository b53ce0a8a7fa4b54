"""Tests for the admin API-key session."""
import json
from unittest.mock import Mock, patch

import pytest

from src.intake_app.services.api_service import APIError, AuthorizationError
from src.intake_app.services.auth_service import AdminSession, FileKeyStore, MemoryKeyStore


@pytest.fixture
def api_service():
    service = Mock()
    service.get_submissions.return_value = ['submission']
    return service


class TestKeyStores:

    def test_memory_store(self):
        store = MemoryKeyStore()
        assert store.load() is None
        store.save('k')
        assert store.load() == 'k'
        store.clear()
        assert store.load() is None

    def test_file_store_round_trip(self, tmp_path):
        path = tmp_path / 'nested' / 'key.json'
        store = FileKeyStore(path)
        store.save('secret')
        assert json.loads(path.read_text()) == {'api_key': 'secret'}
        assert FileKeyStore(path).load() == 'secret'
        store.clear()
        assert not path.exists()
        assert store.load() is None

    def test_file_store_ignores_corrupt_file(self, tmp_path):
        path = tmp_path / 'key.json'
        path.write_text('{not json')
        assert FileKeyStore(path).load() is None

    @patch('src.intake_app.services.auth_service.user_data_dir')
    def test_file_store_default_location(self, mock_user_data_dir, tmp_path):
        mock_user_data_dir.return_value = str(tmp_path)
        store = FileKeyStore()
        assert store.path == tmp_path / 'admin_key.json'


class TestAdminSession:

    def test_starts_from_stored_key(self, api_service):
        session = AdminSession(api_service, MemoryKeyStore('stored'))
        assert session.is_authenticated()
        assert session.require_key() == 'stored'

    def test_require_key_without_login(self, api_service):
        session = AdminSession(api_service)
        with pytest.raises(AuthorizationError, match='Authentication required'):
            session.require_key()

    def test_login_success_stores_key(self, api_service):
        store = MemoryKeyStore()
        session = AdminSession(api_service, store)

        ok, error, submissions = session.login('  secret ')

        assert ok and error is None
        assert submissions == ['submission']
        api_service.get_submissions.assert_called_once_with('secret')
        assert store.load() == 'secret'

    def test_login_blank_key(self, api_service):
        ok, error, _ = AdminSession(api_service).login('   ')
        assert not ok
        assert error == "Please enter an API key"
        api_service.get_submissions.assert_not_called()

    def test_login_rejected_key(self, api_service):
        api_service.get_submissions.side_effect = AuthorizationError("Unauthorized", 401)
        session = AdminSession(api_service)
        ok, error, _ = session.login('wrong')
        assert not ok
        assert error == "Invalid API key"
        assert not session.is_authenticated()

    def test_login_network_error(self, api_service):
        api_service.get_submissions.side_effect = APIError("Unable to reach the server")
        ok, error, _ = AdminSession(api_service).login('secret')
        assert not ok
        assert error == "Unable to reach the server"

    def test_logout_clears_store(self, api_service):
        store = MemoryKeyStore('secret')
        session = AdminSession(api_service, store)
        session.logout()
        assert not session.is_authenticated()
        assert store.load() is None

    def test_call_passes_key(self, api_service):
        session = AdminSession(api_service, MemoryKeyStore('secret'))
        func = Mock(return_value=['x'])
        assert session.call(func, 'arg') == ['x']
        func.assert_called_once_with('arg', api_key='secret')

    def test_call_rejected_key_ends_session(self, api_service):
        session = AdminSession(api_service, MemoryKeyStore('expired'))
        func = Mock(side_effect=AuthorizationError("Invalid API key", 401))
        with pytest.raises(AuthorizationError):
            session.call(func)
        assert not session.is_authenticated()

    def test_call_other_errors_keep_session(self, api_service):
        session = AdminSession(api_service, MemoryKeyStore('secret'))
        with pytest.raises(APIError):
            session.call(Mock(side_effect=APIError("down")))
        assert session.is_authenticated()
