import logging

from waitress import serve

from cmms_manager.app import create_app

app = create_app()

logging.getLogger(__name__).info("Serving portal for API %s", app.config['API_BASE_URL'])
serve(app, host=app.config['PORTAL_HOST'], port=app.config['PORTAL_PORT'])
