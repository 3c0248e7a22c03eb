# config.py
import os

from dotenv import load_dotenv

load_dotenv()

# Google Spreadsheet ID
# https://docs.google.com/spreadsheets/d/1yXblmmqKpCuhtVYQ93O2lyJVEHuItLgr0dG8FqPll7g/edit
SPREADSHEET_ID = os.getenv('SPREADSHEET_ID', '1yXblmmqKpCuhtVYQ93O2lyJVEHuItLgr0dG8FqPll7g')

# Column holding one barcode per row, with category headers in between
BARCODE_RANGE = os.getenv('BARCODE_RANGE', 'H:H')

# Path to your client_secret.json file
CLIENT_SECRET_FILE = os.getenv('CLIENT_SECRET_FILE', 'client_secret.json')

# Cached OAuth token. If modifying the scopes, delete this file.
TOKEN_FILE = os.getenv('TOKEN_FILE', 'token.json')

# OAuth Scopes
SCOPES_EDIT = ['https://www.googleapis.com/auth/spreadsheets']

HOST = os.getenv('HOST', '0.0.0.0')
PORT = int(os.getenv('PORT', '8080'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Show the user an error when the sheet update fails instead of a cleared form
REPORT_WRITE_ERRORS = os.getenv('REPORT_WRITE_ERRORS', '').lower() in ('1', 'true', 'yes')

# (form value, label)
TEAMS = [
    ('Crimson', 'Crimson 12864'),
    ('Black', 'Black 9686'),
]
