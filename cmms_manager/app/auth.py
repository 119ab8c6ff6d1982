import logging
from enum import Enum

from flask import flash, g, redirect, request, session, url_for
from flask_login import login_user, logout_user

from .api import ApiError, AuthenticationRequired, decode, get_api
from .api import SESSION_COOKIES_KEY
from .cache import drop_cache
from .models import User

logger = logging.getLogger(__name__)

AUTH_STATE_KEY = 'auth_state'
AUTH_USER_KEY = 'auth_user'


class AuthState(str, Enum):
    CHECKING = 'checking'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


class AuthGate:
    """Decides whether the portal may show the application or the login form.

    Starts in CHECKING; probe() asks the API who we are. Any failure,
    transport or HTTP, lands in UNAUTHENTICATED. A successful login goes
    straight to AUTHENTICATED without probing again. A 401 seen later on
    any request expires the gate.
    """

    def __init__(self, client, state=AuthState.CHECKING, user=None):
        self.client = client
        self.state = AuthState(state)
        self.user = user

    @property
    def is_authenticated(self):
        return self.state is AuthState.AUTHENTICATED

    def probe(self):
        try:
            self.user = decode(User, self.client.get('/api/auth/me'))
        except ApiError as e:
            logger.info("Auth probe failed: %s", e.message)
            self._drop()
        else:
            self.state = AuthState.AUTHENTICATED
        return self.state

    def login(self, username, password):
        """Raises ApiError (e.g. 401 'Invalid username or password') on failure."""
        try:
            payload = self.client.post('/api/auth/login',
                                       json={'username': username, 'password': password})
            self.user = decode(User, payload)
        except ApiError:
            self._drop()
            raise
        self.state = AuthState.AUTHENTICATED
        return self.user

    def logout(self):
        try:
            self.client.post('/api/auth/logout')
        except ApiError as e:
            logger.warning("Logout request failed: %s", e.message)
        self._drop()

    def expire(self):
        self._drop()

    def _drop(self):
        self.state = AuthState.UNAUTHENTICATED
        self.user = None


def current_gate():
    """The auth gate for this portal session, restored from the Flask session."""
    if 'auth_gate' not in g:
        user = session.get(AUTH_USER_KEY)
        g.auth_gate = AuthGate(
            get_api(),
            state=session.get(AUTH_STATE_KEY, AuthState.CHECKING.value),
            user=User.model_validate(user) if user else None,
        )
    return g.auth_gate


def remember_gate(gate):
    session[AUTH_STATE_KEY] = gate.state.value
    if gate.user is not None:
        session[AUTH_USER_KEY] = gate.user.model_dump(mode='json')
    else:
        session.pop(AUTH_USER_KEY, None)


def forget_session():
    """Drop everything tied to the backend session."""
    drop_cache()
    session.pop(SESSION_COOKIES_KEY, None)
    session.pop(AUTH_USER_KEY, None)
    client = g.pop('api_client', None)
    if client is not None:
        client.session.close()


def load_user(user_id):
    gate = current_gate()
    if gate.is_authenticated and gate.user is not None and gate.user.get_id() == user_id:
        return gate.user
    return None


def gate_request():
    """First request of a browser session probes the API once."""
    if request.endpoint == 'static':
        return
    gate = current_gate()
    if gate.state is AuthState.CHECKING:
        gate.probe()
        remember_gate(gate)
        if gate.is_authenticated:
            login_user(gate.user)


def handle_session_expired(error):
    """A 401 anywhere means the backend session is gone: back to the login form."""
    logger.info("Backend session expired on %s %s", request.method, request.path)
    current_gate().expire()
    logout_user()
    forget_session()
    session[AUTH_STATE_KEY] = AuthState.UNAUTHENTICATED.value
    flash('Your session has expired. Please log in again.', 'warning')
    if request.method == 'GET' and not request.headers.get('HX-Request'):
        login_url = url_for('users.login', next=request.full_path)
    else:
        login_url = url_for('users.login')
    response = redirect(login_url)
    if request.headers.get('HX-Request'):
        response.headers['HX-Redirect'] = login_url
    return response


def init_auth(app, login_manager):
    login_manager.user_loader(load_user)
    app.before_request(gate_request)
    app.register_error_handler(AuthenticationRequired, handle_session_expired)
