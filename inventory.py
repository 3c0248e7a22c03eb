"""Barcode lookup and the check-in / check-out cycle against the inventory sheet.

Each item has a row in the sheet: column C holds "Available" or
"Unavailable", D the name of whoever last scanned it and E their team.
Rows are found through a BarcodeIndex built once from the barcode column.
"""
import logging
from types import MappingProxyType
from typing import NamedTuple, Optional

from sheets import SheetsError

logger = logging.getLogger(__name__)

# Category dividers in the barcode column, not real barcodes
HEADER_LABELS = frozenset([
    "Barcodes:",
    "Expansion Hubs:",
    "Control Hubs:",
    "Robot Batteries:",
    "Chargers:",
    "Controllers:",
    "Phones:",
    "Drills:",
    "Motors:",
    "Servos:",
])

CHECK_IN = 'checkIn'
CHECK_OUT = 'checkOut'

AVAILABLE = 'Available'
UNAVAILABLE = 'Unavailable'

STATUS_COLUMN = 'C'
LAST_COLUMN = 'E'

WRITE_FAILED = 'unable to save scan: please try again'


class InvalidScan(ValueError):
    field = None


class InvalidBarcode(InvalidScan):
    field = 'barcode'

    def __init__(self, message='invalid barcode: please scan again'):
        super().__init__(message)


class InvalidName(InvalidScan):
    field = 'user'

    def __init__(self, message='invalid name: please re-enter name'):
        super().__init__(message)


class BarcodeIndex:
    """Read-only mapping of barcode to its 1-based sheet row."""

    def __init__(self, rows=None):
        self._rows = MappingProxyType(dict(rows or {}))

    @classmethod
    def from_column(cls, cells):
        """Builds the index from the cells of one column, top to bottom.

        Header labels and blank cells are skipped. A barcode listed twice
        maps to its last row.
        """
        rows = {}
        for index, cell in enumerate(cells):
            # The values API returns every row as a list, empty for a blank row
            if isinstance(cell, list):
                cell = cell[0] if cell else ''
            barcode = str(cell)
            if not barcode or barcode in HEADER_LABELS:
                continue
            rows[barcode] = str(index + 1)
        return cls(rows)

    def __len__(self):
        return len(self._rows)

    def __contains__(self, barcode):
        return barcode in self._rows

    def row_id(self, barcode):
        return self._rows.get(barcode, '')

    def row_for(self, barcode) -> Optional[int]:
        """Returns the row number for barcode, or None if it has no usable row."""
        try:
            row = int(self.row_id(barcode))
        except ValueError:
            return None
        return row if row > 0 else None

    def as_dict(self):
        return dict(self._rows)


def load_index(client, spreadsheet_id, range_name='H:H'):
    """Reads the barcode column and builds the index.

    A failed read leaves the index empty; every scan is then rejected as an
    invalid barcode until the process is restarted.
    """
    try:
        values = client.read_range(spreadsheet_id, range_name)
    except SheetsError as exc:
        logger.error("Unable to build barcode index: %s", exc)
        logger.error("Token most likely expired; delete the token file and restart")
        return BarcodeIndex()
    index = BarcodeIndex.from_column(values)
    logger.info("Loaded %d barcodes from %s", len(index), range_name)
    logger.debug("Barcode index: %s", index.as_dict())
    return index


def validate(index, barcode, name):
    if index.row_for(barcode) is None:
        raise InvalidBarcode()
    if not name:
        raise InvalidName()


def status_label(raw):
    if raw == AVAILABLE:
        return 'Checked In'
    return 'Checked Out'


def row_payload(status, name, team):
    availability = AVAILABLE if status == CHECK_IN else UNAVAILABLE
    return [availability, name, team]


class ScanRequest(NamedTuple):
    barcode: str = ''
    user: str = ''
    team: str = ''
    status: str = ''


class ScanResult(NamedTuple):
    error: Optional[str] = None
    barcode: str = ''
    user: str = ''
    team: str = ''
    status: str = ''
    status_line: Optional[str] = None

    @classmethod
    def cleared(cls):
        return cls()


class Inventory:
    """Runs form submissions against the sheet.

    The index is handed in already built and is never modified here, so one
    instance can serve concurrent requests.
    """

    def __init__(self, client, spreadsheet_id, index, report_write_errors=False):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.index = index
        self.report_write_errors = report_write_errors

    def resolve_status(self, barcode):
        """Reads the availability cell live and returns "Checked In" or "Checked Out".

        Returns None for a barcode with no row. SheetsError from the read
        propagates to the caller.
        """
        row = self.index.row_for(barcode)
        if row is None:
            return None
        values = self.client.read_range(self.spreadsheet_id, f"{STATUS_COLUMN}{row}")
        raw = values[0][0] if values and values[0] else ''
        return status_label(str(raw))

    def write_back(self, barcode, name, team, status):
        row = self.index.row_for(barcode)
        range_name = f"{STATUS_COLUMN}{row}:{LAST_COLUMN}{row}"
        try:
            self.client.update_range(self.spreadsheet_id, range_name,
                                     [row_payload(status, name, team)])
        except SheetsError:
            logger.exception("Unable to update data to sheet for %s", barcode)
            return False
        return True

    def process(self, scan):
        try:
            validate(self.index, scan.barcode, scan.user)
        except InvalidScan as exc:
            barcode = '' if exc.field == 'barcode' else scan.barcode
            user = '' if exc.field == 'user' else scan.user
            return ScanResult(
                error=str(exc),
                barcode=barcode,
                user=user,
                team=scan.team,
                status=scan.status,
                status_line=self.resolve_status(barcode),
            )

        saved = self.write_back(scan.barcode, scan.user, scan.team, scan.status)
        if not saved and self.report_write_errors:
            return ScanResult(
                error=WRITE_FAILED,
                barcode=scan.barcode,
                user=scan.user,
                team=scan.team,
                status=scan.status,
            )
        return ScanResult.cleared()
