from datetime import date, datetime
from decimal import Decimal

from cmms_manager.app.formatting import (format_date, format_file_size, format_money,
                                         status_css, status_label)
from cmms_manager.app.models import AssetStatus


def test_file_sizes():
    assert format_file_size(500) == '500 bytes'
    assert format_file_size(2048) == '2.0 KB'
    assert format_file_size(5242880) == '5.0 MB'
    assert format_file_size(None) == ''


def test_status_labels():
    assert status_label('maintenance_required') == 'Maintenance Required'
    assert status_label('in_progress') == 'In Progress'
    assert status_label(AssetStatus.NON_OPERATIONAL) == 'Non Operational'
    assert status_label(None) == ''


def test_money_has_two_decimals_and_symbol():
    assert format_money(Decimal('12500')) == '$12,500.00'
    assert format_money('45.5') == '$45.50'
    assert format_money(None) == '$0.00'


def test_display_dates():
    assert format_date(date(2024, 3, 4)) == 'Mar 4, 2024'
    assert format_date(datetime(2024, 12, 25, 8, 0)) == 'Dec 25, 2024'
    assert format_date('2024-01-15T00:00:00Z') == 'Jan 15, 2024'
    assert format_date(None) == 'N/A'
    assert format_date('not a date') == 'not a date'


def test_status_css_class():
    assert status_css('maintenance_required') == 'badge status-maintenance-required'
    assert status_css(None) == 'badge'
