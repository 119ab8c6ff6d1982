from io import BytesIO

from flask import abort, flash, redirect, render_template, request, send_file, url_for
from flask_login import login_required

from ..api import ApiError
from ..forms import ConfirmDeleteForm, DocumentUploadForm, flash_errors
from ..models import EntityType, match_enum
from ..services.documents import DocumentService
from . import documents_bp as bp


def owner_type(entity_type):
    try:
        return match_enum(EntityType, entity_type)
    except ValueError:
        abort(404)


def owner_url(entity_type, entity_id):
    if entity_type is EntityType.ASSET:
        return url_for('assets.view_asset', asset_id=entity_id)
    return url_for('work_orders.view_work_order', work_order_id=entity_id)


@bp.route('/<entity_type>/<int:entity_id>')
@login_required
def list_documents(entity_type, entity_id):
    entity_type = owner_type(entity_type)
    documents = DocumentService.current().list_documents(entity_type, entity_id)
    if request.headers.get('HX-Request'):
        return render_template('partials/document_list.html', documents=documents,
                               entity_type=entity_type.value, entity_id=entity_id)
    return render_template('documents/list.html', title='Documents', documents=documents,
                           entity_type=entity_type.value, entity_id=entity_id,
                           back_url=owner_url(entity_type, entity_id))


@bp.route('/<entity_type>/<int:entity_id>/upload', methods=['GET', 'POST'])
@login_required
def upload(entity_type, entity_id):
    entity_type = owner_type(entity_type)
    form = DocumentUploadForm()
    if form.validate_on_submit():
        try:
            document = DocumentService.current().upload(
                entity_type, entity_id, form.file.data,
                title=form.title.data.strip(), description=form.description.data)
        except ApiError as e:
            flash(f'Error uploading document: {e.message}', 'danger')
        else:
            flash(f'{document.filename} uploaded.', 'success')
            return redirect(owner_url(entity_type, entity_id))
    elif form.is_submitted():
        flash_errors(form)
    return render_template('documents/upload.html', title='Upload Document', form=form,
                           entity_type=entity_type.value, entity_id=entity_id,
                           back_url=owner_url(entity_type, entity_id))


@bp.route('/<int:document_id>/download')
@login_required
def download(document_id):
    content, filename, content_type = DocumentService.current().download(document_id)
    return send_file(BytesIO(content), mimetype=content_type or 'application/octet-stream',
                     as_attachment=True, download_name=filename or f'document-{document_id}')


@bp.route('/<entity_type>/<int:entity_id>/<int:document_id>/delete', methods=['GET', 'POST'])
@login_required
def delete(entity_type, entity_id, document_id):
    """Deleting needs an explicit confirmation tick; a bare POST is refused."""
    entity_type = owner_type(entity_type)
    service = DocumentService.current()
    document = service.find(document_id, entity_type, entity_id)
    if document is None:
        abort(404)

    form = ConfirmDeleteForm()
    if form.validate_on_submit():
        try:
            service.delete(document, confirmed=form.confirm.data)
        except ApiError as e:
            flash(f'Error deleting document: {e.message}', 'danger')
        else:
            flash(f'{document.filename} deleted.', 'success')
            return redirect(owner_url(entity_type, entity_id))
    elif form.is_submitted():
        flash_errors(form)
    return render_template('documents/delete.html', title='Delete Document', form=form,
                           document=document, back_url=owner_url(entity_type, entity_id))
