import unittest
from unittest import mock

from google.auth.exceptions import RefreshError
from gspread.exceptions import APIError, SpreadsheetNotFound
from requests.exceptions import ConnectionError as RequestsConnectionError

from errors import CollaboratorAPIError
from sheets_writer import open_spreadsheet, write_sheet


def _worksheet(title, row_count=1000, col_count=26):
    ws = mock.Mock()
    ws.title = title
    ws.row_count = row_count
    ws.col_count = col_count
    return ws


def _spreadsheet(*worksheets):
    spreadsheet = mock.Mock()
    spreadsheet.worksheets.return_value = list(worksheets)
    return spreadsheet


class WriteSheetTests(unittest.TestCase):
    def test_creates_missing_sheet_before_writing(self):
        created = _worksheet("blogs")
        spreadsheet = _spreadsheet(_worksheet("Sheet1"))
        spreadsheet.add_worksheet.return_value = created

        write_sheet(spreadsheet, "blogs", ["slug", "views"], [["a", 1]])

        spreadsheet.add_worksheet.assert_called_once_with(title="blogs", rows=1000, cols=26)
        created.batch_clear.assert_called_once_with(["A:Z"])
        created.update.assert_called_once_with([["slug", "views"], ["a", 1]], "A1", raw=True)

    def test_existing_sheet_is_not_duplicated(self):
        existing = _worksheet("authors")
        spreadsheet = _spreadsheet(_worksheet("blogs"), existing)

        write_sheet(spreadsheet, "authors", ["author"], [["Alice"]])

        spreadsheet.add_worksheet.assert_not_called()
        existing.batch_clear.assert_called_once_with(["A:Z"])
        existing.update.assert_called_once_with([["author"], ["Alice"]], "A1", raw=True)

    def test_clear_happens_before_write(self):
        existing = _worksheet("blogs")
        spreadsheet = _spreadsheet(existing)
        write_sheet(spreadsheet, "blogs", ["h"], [])
        names = [c[0] for c in existing.method_calls]
        self.assertEqual(names, ["batch_clear", "update"])

    def test_grows_small_sheet(self):
        existing = _worksheet("blogs", row_count=2)
        spreadsheet = _spreadsheet(existing)
        write_sheet(spreadsheet, "blogs", ["h"], [[1], [2], [3]])
        existing.add_rows.assert_called_once_with(2)
        existing.add_cols.assert_not_called()

    def test_grows_narrow_sheet_before_clearing(self):
        existing = _worksheet("blogs", col_count=2)
        spreadsheet = _spreadsheet(existing)
        header = ["slug", "title", "author", "month", "views"]

        write_sheet(spreadsheet, "blogs", header, [["a", "A", "Alice", "2025-01", 10]])

        existing.add_cols.assert_called_once_with(3)
        names = [c[0] for c in existing.method_calls]
        self.assertEqual(names, ["add_cols", "batch_clear", "update"])

    def test_large_tables_are_written_in_batches(self):
        existing = _worksheet("blogs", row_count=20000)
        spreadsheet = _spreadsheet(existing)
        rows = [[i] for i in range(5000)]
        write_sheet(spreadsheet, "blogs", ["n"], rows)
        starts = [c.args[1] for c in existing.update.call_args_list]
        self.assertEqual(starts, ["A1", "A5001"])

    def test_api_error_is_wrapped(self):
        response = mock.Mock()
        response.json.return_value = {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}
        existing = _worksheet("blogs")
        existing.batch_clear.side_effect = APIError(response)
        spreadsheet = _spreadsheet(existing)

        with self.assertRaises(CollaboratorAPIError) as ctx:
            write_sheet(spreadsheet, "blogs", ["h"], [])
        self.assertEqual(ctx.exception.stage, "sheets_clear")
        existing.update.assert_not_called()

    def test_auth_failure_is_wrapped(self):
        spreadsheet = mock.Mock()
        spreadsheet.worksheets.side_effect = RefreshError("invalid_grant")
        with self.assertRaises(CollaboratorAPIError) as ctx:
            write_sheet(spreadsheet, "blogs", ["h"], [])
        self.assertEqual(ctx.exception.stage, "sheets_list_worksheets")

    def test_network_failure_is_wrapped(self):
        existing = _worksheet("blogs")
        existing.update.side_effect = RequestsConnectionError("reset")
        spreadsheet = _spreadsheet(existing)
        with self.assertRaises(CollaboratorAPIError) as ctx:
            write_sheet(spreadsheet, "blogs", ["h"], [])
        self.assertEqual(ctx.exception.stage, "sheets_update_A1")


class OpenSpreadsheetTests(unittest.TestCase):
    def test_missing_spreadsheet_is_wrapped(self):
        client = mock.Mock()
        client.open_by_key.side_effect = SpreadsheetNotFound("nope")
        with self.assertRaises(CollaboratorAPIError) as ctx:
            open_spreadsheet(client, "sheet-id")
        self.assertEqual(ctx.exception.stage, "sheets_open_by_key")
        self.assertIn("SpreadsheetNotFound", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
