"""
Overwrite a named tab of a Google Sheet with a header row and data rows.
"""
from typing import Any, Callable

import gspread
from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import GSpreadException
from requests.exceptions import RequestException

from errors import CollaboratorAPIError

CLEAR_RANGE = "A:Z"
NEW_SHEET_ROWS = 1000
NEW_SHEET_COLS = 26
WRITE_BATCH_SIZE = 5000

# APIError, SpreadsheetNotFound and friends all derive from GSpreadException
SHEETS_ERRORS = (GSpreadException, GoogleAuthError, RequestException)


def _call(fn: Callable[[], Any], stage: str) -> Any:
    """Run one Sheets API call; failures are reported with the stage that failed."""
    try:
        return fn()
    except SHEETS_ERRORS as e:
        raise CollaboratorAPIError(f"sheets_{stage}", f"{type(e).__name__}: {e}") from e


def open_spreadsheet(client: gspread.Client, spreadsheet_id: str) -> gspread.Spreadsheet:
    return _call(lambda: client.open_by_key(spreadsheet_id), "open_by_key")


def ensure_worksheet(
    spreadsheet: gspread.Spreadsheet, name: str, min_rows: int, min_cols: int
) -> gspread.Worksheet:
    """Return the tab called `name`, adding it when missing and growing it to hold min_rows x min_cols."""
    worksheets = _call(spreadsheet.worksheets, "list_worksheets")
    for ws in worksheets:
        if ws.title == name:
            if ws.row_count < min_rows:
                _call(lambda: ws.add_rows(min_rows - ws.row_count), "add_rows")
            if ws.col_count < min_cols:
                _call(lambda: ws.add_cols(min_cols - ws.col_count), "add_cols")
            return ws
    print(f"Sheet '{name}' not found, creating it...")
    return _call(
        lambda: spreadsheet.add_worksheet(
            title=name, rows=max(NEW_SHEET_ROWS, min_rows), cols=max(NEW_SHEET_COLS, min_cols)
        ),
        "add_worksheet",
    )


def write_sheet(
    spreadsheet: gspread.Spreadsheet,
    name: str,
    header: list[str],
    rows: list[list[Any]],
) -> None:
    """
    Replace the contents of tab `name` (columns A-Z) with header + rows.
    Destructive: the range is cleared first, then written from A1 in batches.
    """
    all_cells = [header] + rows
    width = max((len(r) for r in all_cells), default=0)
    worksheet = ensure_worksheet(spreadsheet, name, len(all_cells), width)

    _call(lambda: worksheet.batch_clear([CLEAR_RANGE]), "clear")
    for i in range(0, len(all_cells), WRITE_BATCH_SIZE):
        chunk = all_cells[i : i + WRITE_BATCH_SIZE]
        start_cell = f"A{i + 1}"
        _call(lambda: worksheet.update(chunk, start_cell, raw=True), f"update_{start_cell}")
    print(f"[OK] Wrote {len(rows)} rows to sheet '{name}'")
