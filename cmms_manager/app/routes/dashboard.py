import csv
import io

from flask import Blueprint, make_response, render_template
from flask_login import login_required

from ..formatting import format_date, status_label
from ..models.work_order import OPEN_STATUSES
from ..services.assets import AssetService
from ..services.inventory import InventoryService
from ..services.work_orders import WorkOrderService

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/')
@login_required
def dashboard():
    asset_service = AssetService.current()
    assets = asset_service.list_assets()
    assets_by_status = asset_service.status_counts(assets)

    work_orders = WorkOrderService.current().list_with_details()
    open_work_orders = [wo for wo in work_orders if wo.status in OPEN_STATUSES]
    recent_work_orders = sorted(work_orders, key=lambda wo: wo.id, reverse=True)[:5]

    low_stock = InventoryService.current().low_stock()

    return render_template('dashboard.html',
                           title='Dashboard',
                           total_assets=len(assets),
                           assets_by_status=assets_by_status,
                           open_work_orders=len(open_work_orders),
                           low_stock=low_stock,
                           recent_work_orders=recent_work_orders)


@dashboard_bp.route('/download_report')
@login_required
def download_report():
    assets = AssetService.current().list_with_details()

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(['Asset Number', 'Description', 'Type', 'Status', 'Location',
                     'Open Work Orders', 'Last Service'])

    for asset in assets:
        open_count = sum(1 for wo in asset.work_orders if wo.status in OPEN_STATUSES)
        writer.writerow([asset.asset_number, asset.description,
                         asset.type.name if asset.type else '',
                         status_label(asset.status), asset.location or '',
                         open_count, format_date(asset.last_service_date, default='')])

    output.seek(0)

    response = make_response(output.getvalue())
    response.headers["Content-Disposition"] = "attachment; filename=asset_report.csv"
    response.headers["Content-type"] = "text/csv"

    return response
