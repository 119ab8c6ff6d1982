from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum


def status_label(status):
    """'maintenance_required' -> 'Maintenance Required'"""
    if status is None:
        return ''
    if isinstance(status, Enum):
        status = status.value
    return ' '.join(word.capitalize() for word in str(status).split('_') if word)


def format_file_size(num_bytes):
    """
    Human readable size of an uploaded document.
    500 -> '500 bytes', 2048 -> '2.0 KB', 5242880 -> '5.0 MB'
    """
    if num_bytes is None:
        return ''
    num_bytes = int(num_bytes)
    if num_bytes < 1024:
        return f"{num_bytes} bytes"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def format_money(value, symbol='$'):
    """Two decimal places; missing values show as zero."""
    if value is None or value == '':
        value = Decimal('0')
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    return f"{symbol}{amount:,.2f}"


def format_date(value, default='N/A'):
    """Locale style display date, e.g. 'Mar 4, 2024'."""
    if not value:
        return default
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            return value
    if not isinstance(value, (date, datetime)):
        return str(value)
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def status_css(status):
    """Badge class for a status value."""
    if isinstance(status, Enum):
        status = status.value
    return f"badge status-{str(status).replace('_', '-')}" if status else 'badge'


def register_filters(app):
    app.jinja_env.filters['status_label'] = status_label
    app.jinja_env.filters['file_size'] = format_file_size
    app.jinja_env.filters['money'] = format_money
    app.jinja_env.filters['display_date'] = format_date
    app.jinja_env.filters['status_css'] = status_css
