from flask import Blueprint, flash, render_template
from flask_login import login_required

from ..api import ApiError
from ..forms import ScanForm
from ..services.scanner import ScannerService

scanner_bp = Blueprint('scanner', __name__)


@scanner_bp.route('/', methods=['GET', 'POST'])
@login_required
def scan():
    form = ScanForm()
    result = None
    if form.validate_on_submit():
        try:
            result = ScannerService.current().lookup(form.barcode.data)
        except ApiError as e:
            flash(e.message, 'danger')
    return render_template('scanner.html', title='Scanner', form=form, result=result)
