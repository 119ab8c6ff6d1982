import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-this'
    API_BASE_URL = (os.environ.get('API_BASE_URL') or 'http://localhost:5000').rstrip('/')
    API_TIMEOUT = float(os.environ.get('API_TIMEOUT') or 10)
    API_MAX_RETRIES = int(os.environ.get('API_MAX_RETRIES') or 2)
    API_RETRY_BACKOFF = float(os.environ.get('API_RETRY_BACKOFF') or 0.5)
    # Optional requests transport adapter mounted on every API session (tests)
    API_TRANSPORT_ADAPTER = None
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_UPLOAD_MB') or 25) * 1024 * 1024
    PORTAL_HOST = os.environ.get('PORTAL_HOST') or '0.0.0.0'
    PORTAL_PORT = int(os.environ.get('PORTAL_PORT') or 8080)


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-key'
    WTF_CSRF_ENABLED = False
    API_BASE_URL = 'http://cmms.test'
    API_MAX_RETRIES = 2
    API_RETRY_BACKOFF = 0
    LOG_LEVEL = 'DEBUG'
