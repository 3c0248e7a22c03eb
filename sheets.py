"""Google Sheets access: OAuth credentials and range read/update."""
import http.client
import logging
import os

import google.auth.transport.requests
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

TRANSPORT_ERRORS = (
    HttpError,
    GoogleAuthError,
    httplib2.HttpLib2Error,
    http.client.HTTPException,
    OSError,
)


class ConfigurationError(Exception):
    """Credentials could not be loaded or obtained."""


class SheetsError(Exception):
    """A read or update against the spreadsheet failed."""


def get_creds(client_secret_file, token_file, scopes):
    """Loads the cached token, refreshing it or running the consent flow as needed."""
    creds = None
    if os.path.exists(token_file):
        try:
            creds = Credentials.from_authorized_user_file(token_file, scopes)
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Unable to read token file {token_file}: {exc}") from exc
    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            try:
                creds.refresh(google.auth.transport.requests.Request())
            except GoogleAuthError as exc:
                raise ConfigurationError(
                    f"Unable to refresh token, delete {token_file} and rerun: {exc}") from exc
        else:
            if not os.path.exists(client_secret_file):
                raise ConfigurationError(f"Client secret file not found: {client_secret_file}")
            try:
                flow = InstalledAppFlow.from_client_secrets_file(client_secret_file, scopes)
            except ValueError as exc:
                raise ConfigurationError(
                    f"Unable to parse client secret file {client_secret_file}: {exc}") from exc
            creds = flow.run_local_server(port=0)
        logger.info("Saving credential file to: %s", token_file)
        fd = os.open(token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w') as token:
            token.write(creds.to_json())
    return creds


class GoogleSheetsClient:
    """Reads and updates value ranges through the Sheets v4 API.

    One instance is shared by every request. A service object is built per
    call since the httplib2 transport behind it is not thread safe.
    """

    def __init__(self, creds):
        self.creds = creds

    def _values(self):
        service = build('sheets', 'v4', credentials=self.creds, cache_discovery=False)
        return service.spreadsheets().values()

    def read_range(self, spreadsheet_id, range_name):
        try:
            result = self._values().get(
                spreadsheetId=spreadsheet_id,
                range=range_name
            ).execute()
        except TRANSPORT_ERRORS as exc:
            raise SheetsError(f"Unable to read {range_name}: {exc}") from exc
        return result.get('values', [])

    def update_range(self, spreadsheet_id, range_name, values):
        body = {'values': values}
        try:
            return self._values().update(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption='RAW',
                body=body
            ).execute()
        except TRANSPORT_ERRORS as exc:
            raise SheetsError(f"Unable to update {range_name}: {exc}") from exc
