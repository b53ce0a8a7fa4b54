"""Admin API-key session and its storage."""
import json
import logging
import os
from pathlib import Path

from appdirs import user_data_dir

from .api_service import APIError, AuthorizationError


class MemoryKeyStore:
    """Keeps the API key for the lifetime of the process only."""

    def __init__(self, api_key=None):
        self._api_key = api_key

    def load(self):
        return self._api_key

    def save(self, api_key):
        self._api_key = api_key

    def clear(self):
        self._api_key = None


class FileKeyStore:
    """Persists the API key as JSON in the user data directory."""

    def __init__(self, path=None):
        if path is None:
            data_dir = Path(user_data_dir("field_intake", "field_intake"))
            path = data_dir / "admin_key.json"
        self.path = Path(path)
        self.logger = logging.getLogger(self.__class__.__name__)

    def load(self):
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r') as f:
                return json.load(f).get('api_key')
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable key file {self.path}: {e}")
            return None

    def save(self, api_key):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump({'api_key': api_key}, f)

    def clear(self):
        if self.path.exists():
            os.remove(self.path)


class AdminSession:
    """Explicit admin session passed to the admin views.

    Holds the API key gating the admin endpoints. The key store is injected so
    tests and the CLI can choose where (or whether) the key is kept.
    """

    def __init__(self, api_service, key_store=None):
        self.api_service = api_service
        self.key_store = key_store if key_store is not None else MemoryKeyStore()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.api_key = self.key_store.load()

    def is_authenticated(self):
        return bool(self.api_key)

    def require_key(self):
        """Return the API key or raise AuthorizationError when there is none."""
        if not self.api_key:
            raise AuthorizationError("Authentication required")
        return self.api_key

    def login(self, api_key):
        """Verify an API key by listing submissions, and keep it on success.

        Returns:
            tuple: (success, error message or None, submissions list)
        """
        api_key = (api_key or '').strip()
        if not api_key:
            return False, "Please enter an API key", []

        try:
            submissions = self.api_service.get_submissions(api_key)
        except AuthorizationError:
            self.logger.info("API key rejected")
            return False, "Invalid API key", []
        except APIError as e:
            self.logger.error(f"Error verifying API key: {e}")
            return False, e.message, []

        self.api_key = api_key
        self.key_store.save(api_key)
        self.logger.info("API key verified")
        return True, None, submissions

    def logout(self):
        self.api_key = None
        self.key_store.clear()

    def call(self, func, *args, **kwargs):
        """Call an admin API function with the session key as api_key.

        An AuthorizationError ends the session before propagating, so the
        caller only has to send the user back to the key prompt.
        """
        api_key = self.require_key()
        try:
            return func(*args, api_key=api_key, **kwargs)
        except AuthorizationError:
            self.logger.warning("Admin API key rejected, ending session")
            self.logout()
            raise
