"""API service for the intake backend."""
import logging
import time

import requests
from pydantic import ValidationError

from shared.schemas import FormSubmission, ManagedListResponse, SubmissionResponse, parse_string_list

NETWORK_ERROR_MESSAGE = "Unable to reach the server. Please check your connection and try again."
INVALID_KEY_MESSAGE = "Invalid API key"


class APIError(Exception):
    """Raised when a backend call fails (transport error or non-2xx reply)."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class AuthorizationError(APIError):
    """Raised when the backend rejects or misses the admin API key."""
    pass


class APIService:
    """HTTP client for backend API calls with error handling and retry logic."""

    def __init__(self, base_url='http://localhost:3000/api', max_retries=3, retry_delay=1.0, timeout=10.0,
                 upload_timeout=60.0, session=None):
        self.base_url = base_url.rstrip('/')
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self.session = session
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def from_config(cls, config):
        return cls(
            config.api_base_url,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.api_timeout,
            upload_timeout=config.upload_timeout,
        )

    def _send(self, method, url, **kwargs):
        if self.session is not None:
            return self.session.request(method, url, **kwargs)
        return requests.request(method, url, **kwargs)

    def _make_request(self, method, url, retries=None, **kwargs):
        """Make HTTP request with retry logic.

        Retries server errors, timeouts (408) and rate limiting (429) with
        exponential backoff; other client errors are returned at once.
        Transport failures surface as APIError after the last attempt.
        """
        kwargs.setdefault('timeout', self.timeout)
        attempts = max(1, retries if retries is not None else self.max_retries)
        last_exception = None
        response = None

        for attempt in range(attempts):
            try:
                response = self._send(method, url, **kwargs)
                if 400 <= response.status_code < 500:
                    if response.status_code not in [408, 429]:
                        return response
                elif response.status_code < 500:
                    return response

                if attempt < attempts - 1:
                    self.logger.warning(f"Request failed (attempt {attempt + 1}/{attempts}): {response.status_code} {response.reason}")
                    time.sleep(self.retry_delay * (2 ** attempt))

            except requests.exceptions.RequestException as e:
                last_exception = e
                response = None
                if attempt < attempts - 1:
                    self.logger.warning(f"Request exception (attempt {attempt + 1}/{attempts}): {e}")
                    time.sleep(self.retry_delay * (2 ** attempt))
                else:
                    self.logger.error(f"Request failed after {attempts} attempts: {e}")

        if response is not None:
            return response
        raise APIError(NETWORK_ERROR_MESSAGE) from last_exception

    def _url(self, endpoint):
        return f"{self.base_url}{endpoint}"

    @staticmethod
    def _admin_headers(api_key):
        return {'X-API-Key': api_key}

    def _parse_json(self, response):
        try:
            return response.json()
        except ValueError:
            return None

    def _check_response(self, response, default_message="Request failed"):
        """Return the decoded body of a 2xx response, raise APIError otherwise."""
        body = self._parse_json(response)
        if 200 <= response.status_code < 300:
            return body

        message = None
        if isinstance(body, dict):
            message = body.get('message') or body.get('error')
        if response.status_code in (401, 403):
            raise AuthorizationError(message or INVALID_KEY_MESSAGE, response.status_code, body)
        raise APIError(message or f"{default_message} ({response.status_code})", response.status_code, body)

    def _parse_model(self, model, body, response):
        """Validate a JSON body into a response schema."""
        try:
            return model.model_validate(body)
        except ValidationError as e:
            self.logger.error(f"Unexpected {model.__name__} payload: {e}")
            raise APIError("Unexpected response from server", response.status_code, body) from e

    def get(self, endpoint, **kwargs):
        """GET request with error handling and retry."""
        return self._make_request('GET', self._url(endpoint), **kwargs)

    def post(self, endpoint, **kwargs):
        """POST request with error handling and retry."""
        return self._make_request('POST', self._url(endpoint), **kwargs)

    def check_health(self):
        response = self.get('/health')
        return self._check_response(response, "Health check failed")

    def _parse_list(self, response, default_message):
        body = self._check_response(response, default_message)
        try:
            return parse_string_list(body)
        except ValueError as e:
            raise APIError("Unexpected response from server", response.status_code, body) from e

    def get_salesmen(self):
        """Full salesman list."""
        response = self.get('/salesman')
        return self._parse_list(response, "Failed to fetch salesmen")

    def search_salesmen(self, query):
        response = self.get('/salesman/search', params={'query': query})
        return self._parse_list(response, "Failed to search salesmen")

    def search_villages(self, query):
        response = self.get('/villages/search', params={'query': query})
        return self._parse_list(response, "Failed to search villages")

    def get_building_types(self):
        response = self.get('/building-types')
        return self._parse_list(response, "Failed to fetch building types")

    def submit_form(self, payload):
        """Send a multipart submission.

        Sent once: a retried POST could store the same submission twice.

        Args:
            payload: MultipartPayload built by encode_submission

        Returns:
            SubmissionResponse
        """
        response = self.post('/submit-form', files=payload.to_files(), timeout=self.upload_timeout, retries=1)
        body = self._check_response(response, "Failed to submit form")
        return self._parse_model(SubmissionResponse, body, response)

    def get_submissions(self, api_key):
        """All submissions (requires API key)."""
        response = self.get('/submissions', headers=self._admin_headers(api_key))
        body = self._check_response(response, "Failed to fetch submissions")
        if body is not None and not isinstance(body, list):
            raise APIError("Unexpected response from server", response.status_code, body)
        return [self._parse_model(FormSubmission, item, response) for item in body or []]

    def get_submission(self, submission_id, api_key):
        """A single submission (requires API key)."""
        response = self.get(f'/submissions/{submission_id}', headers=self._admin_headers(api_key))
        body = self._check_response(response, "Failed to fetch submission")
        return self._parse_model(FormSubmission, body, response)

    def add_salesman(self, name, api_key):
        """Append a salesman to the managed list, returning the updated list."""
        return self._append_to_list('/salesman', 'name', name, api_key, "Failed to add salesman")

    def add_building_type(self, name, api_key):
        """Append a building type to the managed list, returning the updated list."""
        return self._append_to_list('/building-types', 'type', name, api_key, "Failed to add building type")

    def _append_to_list(self, endpoint, key, name, api_key, failure_message):
        # /salesman takes {"name": ...}, /building-types takes {"type": ...}
        response = self.post(endpoint, json={key: name}, headers=self._admin_headers(api_key), retries=1)
        body = self._check_response(response, failure_message)
        result = self._parse_model(ManagedListResponse, body or {}, response)
        if not result.success:
            raise APIError(result.error or failure_message, response.status_code, body)
        return result.items
