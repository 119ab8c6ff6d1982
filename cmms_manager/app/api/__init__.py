from flask import current_app, g, session

from .client import ApiClient, decode
from .errors import (ApiError, AuthenticationRequired, DecodingError,
                     TransportError)

__all__ = ['ApiClient', 'ApiError', 'AuthenticationRequired', 'DecodingError',
           'TransportError', 'decode', 'get_api', 'save_api_cookies']

SESSION_COOKIES_KEY = 'api_cookies'


def get_api():
    """The API client for this request, carrying the user's backend session."""
    if 'api_client' not in g:
        config = current_app.config
        g.api_client = ApiClient(
            config['API_BASE_URL'],
            timeout=config['API_TIMEOUT'],
            max_retries=config['API_MAX_RETRIES'],
            backoff=config['API_RETRY_BACKOFF'],
            cookies=session.get(SESSION_COOKIES_KEY),
            adapter=config.get('API_TRANSPORT_ADAPTER'),
        )
    return g.api_client


def save_api_cookies(response):
    client = g.pop('api_client', None)
    if client is not None:
        cookies = client.cookies_dict()
        if cookies != session.get(SESSION_COOKIES_KEY, {}):
            session[SESSION_COOKIES_KEY] = cookies
        client.session.close()
    return response
