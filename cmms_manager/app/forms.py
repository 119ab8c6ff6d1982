from flask import flash
from flask_wtf import FlaskForm
from flask_wtf.file import FileField, FileRequired
from wtforms import (BooleanField, DateField, DecimalField, HiddenField, IntegerField,
                     PasswordField, SelectField, StringField, SubmitField, TextAreaField)
from wtforms.validators import (DataRequired, InputRequired, Length, NumberRange, Optional,
                                ValidationError)

from .models import AssetStatus, WorkOrderPriority, WorkOrderStatus
from .models.maintenance import MAINTENANCE_TYPES, pm_title
from .formatting import status_label


def enum_choices(enum_cls):
    return [(member.value, status_label(member.value)) for member in enum_cls]


def coerce_optional_int(value):
    if value in (None, '', 'None'):
        return None
    return int(value)


def flash_errors(form):
    """Report every field error as a danger flash."""
    for field in form:
        for error in field.errors:
            flash(f'{field.label.text}: {error}', 'danger')


class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
    submit = SubmitField('Login')


class AssetForm(FlaskForm):
    asset_number = StringField('Asset Number', validators=[DataRequired(), Length(max=50)])
    description = StringField('Description', validators=[DataRequired(), Length(min=2, max=200)])
    type_id = SelectField('Asset Type', coerce=coerce_optional_int, validators=[Optional()])
    status = SelectField('Status', choices=enum_choices(AssetStatus),
                         default=AssetStatus.OPERATIONAL.value)
    parent_id = SelectField('Parent Asset', coerce=coerce_optional_int, validators=[Optional()])
    location = StringField('Location', validators=[Optional(), Length(max=100)])
    manufacturer = StringField('Manufacturer', validators=[Optional(), Length(max=100)])
    model = StringField('Model', validators=[Optional(), Length(max=100)])
    serial_number = StringField('Serial Number', validators=[Optional(), Length(max=100)])
    install_date = DateField('Install Date', validators=[Optional()])
    warranty_expiration = DateField('Warranty Expiration', validators=[Optional()])
    replacement_cost = DecimalField('Replacement Cost', places=2,
                                    validators=[Optional(), NumberRange(min=0)])
    criticality_rating = IntegerField('Criticality (1-5)',
                                      validators=[Optional(), NumberRange(min=1, max=5)])
    barcode = StringField('Barcode', validators=[Optional(), Length(max=100)])
    submit = SubmitField('Save Asset')

    def set_choices(self, asset_types, assets, exclude_id=None):
        self.type_id.choices = [(None, 'None')] + [(t.id, t.name) for t in asset_types]
        self.parent_id.choices = [(None, 'None')] + [
            (a.id, f'{a.asset_number} - {a.description}') for a in assets if a.id != exclude_id]

    def payload(self):
        data = {
            'assetNumber': self.asset_number.data.strip(),
            'description': self.description.data.strip(),
            'typeId': self.type_id.data,
            'status': self.status.data,
            'parentId': self.parent_id.data,
            'location': self.location.data or None,
            'manufacturer': self.manufacturer.data or None,
            'model': self.model.data or None,
            'serialNumber': self.serial_number.data or None,
            'installDate': self.install_date.data.isoformat() if self.install_date.data else None,
            'warrantyExpiration': (self.warranty_expiration.data.isoformat()
                                   if self.warranty_expiration.data else None),
            'replacementCost': (str(self.replacement_cost.data)
                                if self.replacement_cost.data is not None else None),
            'criticalityRating': self.criticality_rating.data,
            'barcode': self.barcode.data or None,
        }
        return data


class StatusForm(FlaskForm):
    status = SelectField('Status', validators=[DataRequired()])

    @classmethod
    def for_enum(cls, enum_cls, current=None, **kwargs):
        form = cls(**kwargs)
        form.status.choices = enum_choices(enum_cls)
        if current is not None:
            form.status.data = getattr(current, 'value', current)
        return form


class WorkOrderForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(), Length(min=3, max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    type_id = SelectField('Type', coerce=coerce_optional_int, validators=[Optional()])
    asset_id = SelectField('Asset', coerce=coerce_optional_int, validators=[Optional()])
    priority = SelectField('Priority', choices=enum_choices(WorkOrderPriority),
                           default=WorkOrderPriority.MEDIUM.value)
    status = SelectField('Status', choices=enum_choices(WorkOrderStatus),
                         default=WorkOrderStatus.REQUESTED.value)
    assigned_to_id = SelectField('Assigned To', coerce=coerce_optional_int, validators=[Optional()])
    date_needed = DateField('Date Needed', validators=[Optional()])
    date_scheduled = DateField('Scheduled Date', validators=[Optional()])
    estimated_hours = DecimalField('Estimated Hours', places=2,
                                   validators=[Optional(), NumberRange(min=0)])
    estimated_cost = DecimalField('Estimated Cost', places=2,
                                  validators=[Optional(), NumberRange(min=0)])
    submit = SubmitField('Create Work Order')

    def set_choices(self, types, assets, users):
        self.type_id.choices = [(None, 'None')] + [(t.id, t.name) for t in types]
        self.asset_id.choices = [(None, 'None')] + [
            (a.id, f'{a.asset_number} - {a.description}') for a in assets]
        self.assigned_to_id.choices = [(None, 'Unassigned')] + [
            (u.id, u.full_name) for u in users if u.is_active]

    def payload(self, requested_by_id=None):
        return {
            'title': self.title.data.strip(),
            'description': self.description.data or None,
            'typeId': self.type_id.data,
            'assetId': self.asset_id.data,
            'priority': self.priority.data,
            'status': self.status.data,
            'assignedToId': self.assigned_to_id.data,
            'requestedById': requested_by_id,
            'dateNeeded': self.date_needed.data.isoformat() if self.date_needed.data else None,
            'dateScheduled': (self.date_scheduled.data.isoformat()
                              if self.date_scheduled.data else None),
            'estimatedHours': (str(self.estimated_hours.data)
                               if self.estimated_hours.data is not None else None),
            'estimatedCost': (str(self.estimated_cost.data)
                              if self.estimated_cost.data is not None else None),
        }


class LaborForm(FlaskForm):
    user_id = SelectField('Technician', coerce=coerce_optional_int, validators=[InputRequired()])
    hours = DecimalField('Hours', places=2, validators=[InputRequired(), NumberRange(min=0.1, max=24)])
    labor_cost = DecimalField('Labor Cost', places=2, validators=[Optional(), NumberRange(min=0)])
    date_performed = DateField('Date Performed', validators=[InputRequired()])
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Log Labor')


class PartForm(FlaskForm):
    inventory_item_id = SelectField('Part', coerce=coerce_optional_int, validators=[InputRequired()])
    quantity = IntegerField('Quantity', validators=[InputRequired(), NumberRange(min=1)])
    submit = SubmitField('Issue Part')


class AssignWorkOrderForm(FlaskForm):
    work_order_id = SelectField('Work Order', coerce=coerce_optional_int,
                                validators=[DataRequired(message='Please select a work order to assign')])
    submit = SubmitField('Assign Work Order')


class InventoryItemForm(FlaskForm):
    part_number = StringField('Part Number', validators=[DataRequired(), Length(max=50)])
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=100)])
    description = TextAreaField('Description', validators=[Optional()])
    category_id = SelectField('Category', coerce=coerce_optional_int, validators=[Optional()])
    unit_cost = DecimalField('Unit Cost', places=2, validators=[Optional(), NumberRange(min=0)])
    quantity_in_stock = IntegerField('Quantity In Stock', default=0,
                                     validators=[InputRequired(), NumberRange(min=0)])
    reorder_point = IntegerField('Reorder Point', validators=[Optional(), NumberRange(min=0)])
    location = StringField('Location', validators=[Optional(), Length(max=100)])
    barcode = StringField('Barcode', validators=[Optional(), Length(max=100)])
    is_active = BooleanField('Active', default=True)
    submit = SubmitField('Save Item')

    def set_choices(self, categories):
        self.category_id.choices = [(None, 'None')] + [(c.id, c.name) for c in categories]

    def payload(self):
        return {
            'partNumber': self.part_number.data.strip(),
            'name': self.name.data.strip(),
            'description': self.description.data or None,
            'categoryId': self.category_id.data,
            'unitCost': str(self.unit_cost.data) if self.unit_cost.data is not None else None,
            'quantityInStock': self.quantity_in_stock.data,
            'reorderPoint': self.reorder_point.data,
            'location': self.location.data or None,
            'barcode': self.barcode.data or None,
            'isActive': bool(self.is_active.data),
        }


class StockAdjustmentForm(FlaskForm):
    amount = IntegerField('Quantity', validators=[InputRequired(message='Please enter a positive number'),
                                                  NumberRange(min=1, message='Please enter a positive number')])
    direction = HiddenField(validators=[DataRequired()])


class DocumentUploadForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(), Length(min=2, message='Title must be at least 2 characters')])
    description = TextAreaField('Description', validators=[Optional()])
    file = FileField('File', validators=[FileRequired(message='A file is required')])
    submit = SubmitField('Upload')


class ConfirmDeleteForm(FlaskForm):
    confirm = BooleanField('Yes, delete this document permanently',
                           validators=[DataRequired(message='Please confirm the deletion')])
    submit = SubmitField('Delete')


class WorkRequestForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(), Length(min=3, max=200)])
    description = TextAreaField('Description', validators=[Optional()])
    asset_id = SelectField('Asset', coerce=coerce_optional_int, validators=[Optional()])
    priority = SelectField('Priority', choices=enum_choices(WorkOrderPriority),
                           default=WorkOrderPriority.MEDIUM.value)
    submit = SubmitField('Submit Request')

    def set_choices(self, assets):
        self.asset_id.choices = [(None, 'None')] + [
            (a.id, f'{a.asset_number} - {a.description}') for a in assets]


class ScanForm(FlaskForm):
    barcode = StringField('Barcode', validators=[DataRequired(message='Barcode is required')])
    submit = SubmitField('Look Up')


RECURRING_CHOICES = [('daily', 'Daily'), ('weekly', 'Weekly'), ('biweekly', 'Bi-Weekly'),
                     ('monthly', 'Monthly'), ('quarterly', 'Quarterly'),
                     ('semiannual', 'Semi-Annual'), ('annual', 'Annual')]


class PreventiveMaintenanceForm(FlaskForm):
    asset_id = SelectField('Asset', coerce=coerce_optional_int,
                           validators=[DataRequired(message='Please select an asset')])
    maintenance_type = SelectField('Maintenance Type', choices=[(t, t) for t in MAINTENANCE_TYPES],
                                   default=MAINTENANCE_TYPES[0])
    description = TextAreaField('Description', validators=[
        DataRequired(), Length(min=5, message='Description must be at least 5 characters')])
    start_date = DateField('Start Date', validators=[InputRequired()])
    recurring = BooleanField('Recurring', default=True)
    recurring_period = SelectField('Repeats', choices=RECURRING_CHOICES, default='monthly')
    occurrences = IntegerField('Occurrences', default=12,
                               validators=[Optional(), NumberRange(min=1, max=365)])
    technician_id = SelectField('Technician', coerce=coerce_optional_int, validators=[Optional()])
    priority = SelectField('Priority', choices=enum_choices(WorkOrderPriority),
                           default=WorkOrderPriority.MEDIUM.value)
    duration = DecimalField('Estimated Hours', places=2, default=1,
                            validators=[InputRequired(), NumberRange(min=0.1, max=999)])
    notes = TextAreaField('Notes', validators=[Optional()])
    submit = SubmitField('Schedule Maintenance')

    def set_choices(self, assets, users):
        self.asset_id.choices = [(None, 'Select an asset')] + [
            (a.id, f'{a.asset_number} - {a.description}') for a in assets]
        self.technician_id.choices = [(None, 'Unassigned')] + [
            (u.id, u.full_name) for u in users if u.is_active]

    def validate_recurring_period(self, field):
        if self.recurring.data and not self.occurrences.data:
            raise ValidationError('Recurring maintenance needs a number of occurrences')

    def payload(self, type_id=None, requested_by_id=None):
        """The first occurrence, as a scheduled work order."""
        description = self.description.data.strip()
        if self.recurring.data:
            period = dict(RECURRING_CHOICES)[self.recurring_period.data]
            description += f'\n\nRepeats {period.lower()} for {self.occurrences.data} occurrences.'
        if self.notes.data:
            description += f'\n\n{self.notes.data.strip()}'
        start = self.start_date.data.isoformat()
        return {
            'title': pm_title(self.maintenance_type.data),
            'description': description,
            'typeId': type_id,
            'assetId': self.asset_id.data,
            'priority': self.priority.data,
            'status': WorkOrderStatus.SCHEDULED.value,
            'assignedToId': self.technician_id.data,
            'requestedById': requested_by_id,
            'dateNeeded': start,
            'dateScheduled': start,
            'estimatedHours': str(self.duration.data),
        }
