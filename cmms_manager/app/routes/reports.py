import csv
import io

from flask import make_response, render_template, request
from flask_login import login_required

from ..services.reports import REPORT_TABS, ReportService
from . import reports_bp as bp


def selected_tab():
    tab = request.args.get('tab', 'work_orders')
    return tab if tab in REPORT_TABS else 'work_orders'


@bp.route('/')
@login_required
def reports():
    tab = selected_tab()
    summary = ReportService.current().summary(tab)
    return render_template('reports/index.html', title='Reports',
                           tab=tab, tabs=REPORT_TABS, summary=summary)


@bp.route('/download')
@login_required
def download():
    tab = selected_tab()

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(['Metric', 'Value'])
    for name, value in ReportService.current().rows(tab):
        writer.writerow([name, value])

    response = make_response(output.getvalue())
    response.headers["Content-Disposition"] = f"attachment; filename={tab}_report.csv"
    response.headers["Content-type"] = "text/csv"
    return response
