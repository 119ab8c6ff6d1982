import logging

from flask import Flask, redirect, render_template, url_for
from flask_login import LoginManager
from flask_wtf import CSRFProtect

from cmms_manager.config import Config
from .api import ApiError, save_api_cookies
from .api.errors import GENERIC_ERROR_MESSAGE
from .cache import CacheRegistry
from .formatting import register_filters

login_manager = LoginManager()
csrf = CSRFProtect()
login_manager.login_view = 'users.login'
login_manager.login_message_category = 'info'


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    login_manager.init_app(app)
    csrf.init_app(app)
    app.extensions['query_cache'] = CacheRegistry()
    register_filters(app)

    from .auth import init_auth
    init_auth(app, login_manager)
    app.after_request(save_api_cookies)

    @app.context_processor
    def inject_unread_count():
        from flask_login import current_user
        from .services.notifications import NotificationService

        if not current_user.is_authenticated:
            return {'unread_count': 0}
        try:
            return {'unread_count': NotificationService.current().unread_count()}
        except ApiError:
            return {'unread_count': 0}

    @app.errorhandler(ApiError)
    def api_error(error):
        status = error.status_code if error.status_code and error.status_code >= 400 else 502
        app.logger.warning("Unhandled API error: %r", error)
        return render_template('error.html', title='Error', message=error.message), status

    @app.errorhandler(500)
    def internal_error(error):
        return render_template('error.html', title='Error',
                               message=GENERIC_ERROR_MESSAGE), 500

    @app.route('/')
    def index():
        return redirect(url_for('dashboard.dashboard'))

    # Import blueprints inside the factory
    from .routes import (assets_bp, work_orders_bp, resources_bp, inventory_bp,
                         documents_bp, work_requests_bp, notifications_bp,
                         maintenance_bp, reports_bp)
    from .routes.users import users_bp
    from .routes.dashboard import dashboard_bp
    from .routes.scanner import scanner_bp

    # Register blueprints
    app.register_blueprint(users_bp)
    app.register_blueprint(dashboard_bp, url_prefix='/dashboard')
    app.register_blueprint(assets_bp)
    app.register_blueprint(work_orders_bp)
    app.register_blueprint(resources_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(documents_bp)
    app.register_blueprint(work_requests_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(maintenance_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(scanner_bp, url_prefix='/scanner')

    return app
