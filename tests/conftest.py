import pytest

from app import app as flask_app
from inventory import BarcodeIndex, Inventory
from sheets import SheetsError

SPREADSHEET_ID = 'test-sheet'


class FakeSheets:
    """In-memory stand-in for GoogleSheetsClient."""

    def __init__(self, ranges=None):
        self.ranges = dict(ranges or {})
        self.reads = []
        self.updates = []
        self.fail_reads = False
        self.fail_updates = False

    def read_range(self, spreadsheet_id, range_name):
        self.reads.append(range_name)
        if self.fail_reads:
            raise SheetsError(f"read failed: {range_name}")
        return self.ranges.get(range_name, [])

    def update_range(self, spreadsheet_id, range_name, values):
        if self.fail_updates:
            raise SheetsError(f"update failed: {range_name}")
        self.updates.append((range_name, values))
        return {'updatedRange': range_name}


@pytest.fixture
def fake_sheets():
    return FakeSheets({'C5': [['Available']]})


@pytest.fixture
def inventory(fake_sheets):
    return Inventory(fake_sheets, SPREADSHEET_ID, BarcodeIndex({'BC100': '5'}))


@pytest.fixture
def client(inventory):
    flask_app.config['TESTING'] = True
    flask_app.config['INVENTORY'] = inventory
    with flask_app.test_client() as client:
        yield client
    flask_app.config.pop('INVENTORY', None)
