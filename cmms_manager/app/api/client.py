import logging
import re
import time

import requests
from pydantic import TypeAdapter, ValidationError

from .errors import (ApiError, AuthenticationRequired, DecodingError,
                     TransportError, message_from_body)

logger = logging.getLogger(__name__)

IDEMPOTENT_METHODS = ('GET',)
_FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class ApiClient:
    """Thin JSON client for the maintenance REST API.

    Non-2xx answers raise ApiError with the message taken from the
    response body. GETs are retried with exponential backoff on
    transport errors and 5xx answers; writes are sent exactly once.
    """

    def __init__(self, base_url, timeout=10, max_retries=2, backoff=0.5,
                 session=None, cookies=None, adapter=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max(0, int(max_retries))
        self.backoff = backoff
        self.session = session or requests.Session()
        self.session.headers.setdefault('Accept', 'application/json')
        if adapter is not None:
            self.session.mount(self.base_url, adapter)
        if cookies:
            self.session.cookies.update(cookies)

    def url_for(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def cookies_dict(self):
        return requests.utils.dict_from_cookiejar(self.session.cookies)

    def _send(self, method, path, **kwargs):
        method = method.upper()
        attempts = 1 + (self.max_retries if method in IDEMPOTENT_METHODS else 0)
        url = self.url_for(path)

        for attempt in range(1, attempts + 1):
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.RequestException as e:
                logger.warning("%s %s failed on attempt %d: %s", method, path, attempt, e)
                if attempt == attempts:
                    raise TransportError() from e
            else:
                if response.status_code < 500 or attempt == attempts:
                    break
                logger.warning("%s %s returned %d on attempt %d",
                               method, path, response.status_code, attempt)

            delay = self.backoff * (2 ** (attempt - 1))
            logger.info("Retrying %s %s in %.2fs", method, path, delay)
            if delay:
                time.sleep(delay)

        if not response.ok:
            message = message_from_body(response)
            logger.warning("%s %s -> %d: %s", method, path, response.status_code, message)
            payload = None
            try:
                payload = response.json()
            except ValueError:
                pass
            if response.status_code == 401:
                raise AuthenticationRequired(message, status_code=401, payload=payload)
            raise ApiError(message, status_code=response.status_code, payload=payload)
        return response

    def request(self, method, path, json=None, params=None, files=None, data=None):
        response = self._send(method, path, json=json, params=params, files=files, data=data)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            raise ApiError('The server returned an unreadable response',
                           status_code=response.status_code)

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)

    def upload(self, path, file_storage, field_name='file', data=None):
        """Forward a werkzeug FileStorage (or any named stream) as multipart."""
        files = {field_name: (file_storage.filename, file_storage.stream,
                              file_storage.mimetype or 'application/octet-stream')}
        return self.request('POST', path, files=files, data=data)

    def download(self, path):
        """Return (content, filename, content_type) for a binary endpoint."""
        response = self._send('GET', path)
        filename = None
        disposition = response.headers.get('Content-Disposition', '')
        match = _FILENAME_RE.search(disposition)
        if match:
            filename = match.group(1)
        content_type = response.headers.get('Content-Type', 'application/octet-stream')
        return response.content, filename, content_type


def decode(model, payload):
    """Validate a JSON payload into a record (or list of records)."""
    try:
        return TypeAdapter(model).validate_python(payload)
    except ValidationError as e:
        name = getattr(model, '__name__', None) or str(model)
        logger.error("Could not decode %s: %s", name, e)
        raise DecodingError(name, e.errors()) from e
