# backend/consult_bridge/services/sheets_service.py

import threading
from typing import Any, Dict, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from consult_bridge.core.logging import get_logger
from consult_bridge.models.consultation import ConsultationRecord
from consult_bridge.services.collaborators import Result
from consult_bridge.services.row_serializer import SHEET_HEADERS, record_to_row

logger = get_logger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _column_letter(index: int) -> str:
    """1-based column index to A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


class GoogleSheetsStore:
    """Appends one row per consultation to a Google Sheet.

    The Sheets client sits on a single httplib2 transport, which is not
    thread-safe. Webhooks are dispatched from a thread pool, so building the
    client and every request execution go through one lock.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        credentials_info: Optional[Dict[str, Any]] = None,
        sheet_name: str = "Sheet1",
        service: Any = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self._service = service
        self._credentials = None
        self._lock = threading.Lock()
        if service is None:
            # Bad credentials should stop startup, not the first webhook.
            self._credentials = service_account.Credentials.from_service_account_info(
                credentials_info or {}, scopes=SHEETS_SCOPES
            )

    @property
    def service(self):
        with self._lock:
            if self._service is None:
                self._service = build("sheets", "v4", credentials=self._credentials, cache_discovery=False)
        return self._service

    def _execute(self, request):
        with self._lock:
            return request.execute()

    @property
    def header_range(self) -> str:
        return f"{self.sheet_name}!A1:{_column_letter(len(SHEET_HEADERS))}1"

    @property
    def data_range(self) -> str:
        return f"{self.sheet_name}!A2:{_column_letter(len(SHEET_HEADERS))}2"

    def initialize_headers(self) -> Result:
        try:
            request = self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=self.header_range,
                valueInputOption="RAW",
                body={"values": [SHEET_HEADERS]},
            )
            self._execute(request)
        except HttpError as e:
            logger.error(f"SHEETS: Failed to initialize headers: {e}")
            return Result(ok=False, detail=str(e))
        logger.info(f"SHEETS: Header row written to '{self.header_range}'.")
        return Result(ok=True)

    def store(self, record: ConsultationRecord) -> Result:
        row = record_to_row(record)
        try:
            request = self.service.spreadsheets().values().append(
                spreadsheetId=self.spreadsheet_id,
                range=self.data_range,
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            )
            response = self._execute(request)
        except HttpError as e:
            logger.error(f"SHEETS: Failed to append record for call '{record.call_id}': {e}")
            return Result(ok=False, detail=str(e))

        updated = (response or {}).get("updates", {}).get("updatedRange", "")
        logger.info(f"SHEETS: Record for call '{record.call_id}' appended {updated}".rstrip())
        return Result(ok=True, detail=updated)
