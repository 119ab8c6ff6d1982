# app/routes/__init__.py
from flask import Blueprint

# Create blueprints
assets_bp = Blueprint('assets', __name__, url_prefix='/assets')
work_orders_bp = Blueprint('work_orders', __name__, url_prefix='/work-orders')
resources_bp = Blueprint('resources', __name__, url_prefix='/resources')
inventory_bp = Blueprint('inventory', __name__, url_prefix='/inventory')
documents_bp = Blueprint('documents', __name__, url_prefix='/documents')
work_requests_bp = Blueprint('work_requests', __name__, url_prefix='/work-requests')
notifications_bp = Blueprint('notifications', __name__, url_prefix='/notifications')
maintenance_bp = Blueprint('maintenance', __name__, url_prefix='/maintenance')
reports_bp = Blueprint('reports', __name__, url_prefix='/reports')

# Import views after blueprints are created
from . import (assets, work_orders, resources, inventory, documents, work_requests,
               notifications, maintenance, reports)
