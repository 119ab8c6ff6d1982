import base64
from io import BytesIO

import qrcode
from flask import flash, redirect, render_template, request, url_for
from flask_login import login_required

from ..api import ApiError
from ..formatting import status_label
from ..forms import AssetForm, StatusForm, flash_errors
from ..models import ASSET_TABS, AssetStatus, EntityType, match_enum
from ..mutations import OptimisticField
from ..services.assets import AssetService, filter_assets
from ..services.documents import DocumentService
from . import assets_bp as bp


@bp.route('/')
@login_required
def list_assets():
    tab = request.args.get('tab', 'all')
    if tab not in ASSET_TABS:
        tab = 'all'
    query = request.args.get('q', '')

    service = AssetService.current()
    all_assets = service.list_with_details()
    assets = filter_assets(all_assets, tab, query)

    if request.headers.get('HX-Request'):
        return render_template('partials/asset_table.html', assets=assets)

    return render_template('assets/list.html', title='Assets', assets=assets, tab=tab,
                           tabs=ASSET_TABS, query=query,
                           counts=service.status_counts(all_assets))


@bp.route('/add', methods=['GET', 'POST'])
@login_required
def add_asset():
    service = AssetService.current()
    form = AssetForm()
    form.set_choices(service.list_types(), service.list_assets())
    if form.validate_on_submit():
        try:
            asset = service.create(form.payload())
        except ApiError as e:
            flash(f'Error creating asset: {e.message}', 'danger')
        else:
            flash(f'Asset {asset.asset_number} created.', 'success')
            return redirect(url_for('assets.view_asset', asset_id=asset.id))
    return render_template('assets/form.html', title='New Asset', form=form)


@bp.route('/<int:asset_id>')
@login_required
def view_asset(asset_id):
    service = AssetService.current()
    asset = service.get_details(asset_id)
    status_form = StatusForm.for_enum(AssetStatus, asset.status)
    documents = DocumentService.current().list_documents(EntityType.ASSET, asset_id)
    return render_template('assets/detail.html', title=asset.description, asset=asset,
                           documents=documents,
                           status_form=status_form,
                           field=OptimisticField('status', asset.status))


@bp.route('/<int:asset_id>/edit', methods=['GET', 'POST'])
@login_required
def edit_asset(asset_id):
    service = AssetService.current()
    asset = service.get_details(asset_id)
    form = AssetForm(obj=asset)
    form.set_choices(service.list_types(), service.list_assets(), exclude_id=asset.id)
    if not form.is_submitted():
        form.status.data = asset.status.value
    if form.validate_on_submit():
        try:
            service.update(asset_id, form.payload())
        except ApiError as e:
            flash(f'Error updating asset: {e.message}', 'danger')
        else:
            flash('Asset updated.', 'success')
            return redirect(url_for('assets.view_asset', asset_id=asset_id))
    return render_template('assets/form.html', title=f'Edit {asset.asset_number}',
                           form=form, asset=asset)


@bp.route('/<int:asset_id>/status', methods=['POST'])
@login_required
def update_status(asset_id):
    """Status select on the detail page.

    The new value is shown straight away; if the API refuses it the
    select falls back to the confirmed value and the error is flashed.
    """
    service = AssetService.current()
    asset = service.get_details(asset_id)
    field = OptimisticField('status', asset.status)
    form = StatusForm.for_enum(AssetStatus)

    if form.validate_on_submit():
        proposed = match_enum(AssetStatus, form.status.data)
        try:
            field.apply(proposed, service.status_mutation(asset_id, proposed))
        except ApiError as e:
            flash(f'Error updating status: {e.message}', 'danger')
        else:
            flash(f'Status changed to {status_label(proposed)}.', 'success')
    else:
        flash_errors(form)

    if request.headers.get('HX-Request'):
        asset = service.get_details(asset_id)
        status_form = StatusForm.for_enum(AssetStatus, field.value)
        return render_template('partials/status_select.html', form=status_form, field=field,
                               action=url_for('assets.update_status', asset_id=asset_id),
                               status=asset.status)
    return redirect(url_for('assets.view_asset', asset_id=asset_id))


@bp.route('/<int:asset_id>/qr')
@login_required
def get_asset_qr(asset_id):
    asset = AssetService.current().get_details(asset_id)

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(asset.barcode or asset.asset_number)
    qr.make(fit=True)

    img_buffer = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(img_buffer, format='PNG')
    img_str = base64.b64encode(img_buffer.getvalue()).decode()

    return render_template('partials/qr_code.html', asset=asset, qr_code=img_str)
