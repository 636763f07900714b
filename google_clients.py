"""
Build the Google API clients from one service account: gspread for Sheets, the discovery client for GA4.
"""
from typing import Any

import gspread
from google.oauth2 import service_account
from googleapiclient.discovery import build

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/analytics.readonly",
]


def get_credentials(info: dict[str, Any]) -> service_account.Credentials:
    """Service account credentials carrying both scopes."""
    return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)


def get_sheets_client(creds: service_account.Credentials) -> gspread.Client:
    return gspread.authorize(creds)


def get_ga4_service(creds: service_account.Credentials) -> Any:
    """Build GA4 Data API service."""
    return build("analyticsdata", "v1beta", credentials=creds, cache_discovery=False)
