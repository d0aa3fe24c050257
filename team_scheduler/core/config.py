"""
Configuration constants for the Team Scheduler.
All configurable settings are defined here.
"""

import os
import json
from pathlib import Path
from dotenv import load_dotenv
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials as UserCredentials

# Load environment variables from .env file
load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Google Sheets Configuration
# Empty means "use the id stored in settings, or create a new spreadsheet"
SPREADSHEET_ID = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "")
SPREADSHEET_TITLE = os.getenv("GOOGLE_SHEETS_SPREADSHEET_TITLE", "Marvel Rivals Team Schedule")
SPREADSHEET_SETTING_KEY = "google_spreadsheet_id"
SPREADSHEET_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"

# Credentials configuration
# Priority: GOOGLE_SHEETS_CREDENTIALS_JSON > GOOGLE_SHEETS_CREDENTIALS_FILE > GOOGLE_OAUTH_TOKEN_FILE
CREDENTIALS_JSON = os.getenv("GOOGLE_SHEETS_CREDENTIALS_JSON")  # JSON string from environment
CREDENTIALS_FILE = os.getenv("GOOGLE_SHEETS_CREDENTIALS_FILE")
OAUTH_CLIENT_SECRETS_FILE = os.getenv(
    "GOOGLE_OAUTH_CLIENT_SECRETS_FILE", str(PROJECT_ROOT / "credentials.json")
)
OAUTH_TOKEN_FILE = os.getenv("GOOGLE_OAUTH_TOKEN_FILE", str(PROJECT_ROOT / "token.json"))

GOOGLE_SCOPES = [
    'https://www.googleapis.com/auth/spreadsheets',
    'https://www.googleapis.com/auth/drive'
]


def get_google_credentials():
    """
    Get Google Sheets API credentials from environment variables or file.

    Priority:
    1. GOOGLE_SHEETS_CREDENTIALS_JSON (service account JSON string)
    2. GOOGLE_SHEETS_CREDENTIALS_FILE (service account file path)
    3. GOOGLE_OAUTH_TOKEN_FILE (authorized user token written by scripts/google_auth.py)

    Returns:
        google-auth credentials able to refresh their own access token

    Raises:
        ValueError: If no valid credentials are found
    """
    if CREDENTIALS_JSON:
        try:
            creds_dict = json.loads(CREDENTIALS_JSON)
            return service_account.Credentials.from_service_account_info(creds_dict, scopes=GOOGLE_SCOPES)
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(f"Invalid JSON in GOOGLE_SHEETS_CREDENTIALS_JSON: {e}")

    if CREDENTIALS_FILE and os.path.exists(CREDENTIALS_FILE):
        return service_account.Credentials.from_service_account_file(CREDENTIALS_FILE, scopes=GOOGLE_SCOPES)

    if OAUTH_TOKEN_FILE and os.path.exists(OAUTH_TOKEN_FILE):
        return UserCredentials.from_authorized_user_file(OAUTH_TOKEN_FILE, GOOGLE_SCOPES)

    raise ValueError(
        "Google Sheets credentials not found. Please set either:\n"
        "  - GOOGLE_SHEETS_CREDENTIALS_JSON (recommended): service account JSON string\n"
        "  - GOOGLE_SHEETS_CREDENTIALS_FILE: path to a service account JSON file\n"
        "  - Or run scripts/google_auth.py to create token.json"
    )


# Persistence Configuration
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "supabase")  # "supabase" or "memory"
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

# Object storage for scoreboard images
OBJECT_STORAGE_BUCKET = os.getenv("OBJECT_STORAGE_BUCKET", "scoreboards")
OBJECT_UPLOAD_PREFIX = os.getenv("OBJECT_UPLOAD_PREFIX", "uploads")

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Weekly grid
DAYS_OF_WEEK = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday"
]

UNKNOWN = "unknown"
CANNOT = "cannot"
ALL_BLOCKS = "All blocks"
TIME_BLOCKS = ["18:00-20:00 CEST", "20:00-22:00 CEST"]

# The running app keeps a single schedule under this week key
PERMANENT_SCHEDULE_KEY = "permanent-schedule"

# Sheet layout
SHEET_NAME_PREFIX = "Week_"
SHEET_READ_RANGE = "A1:I50"
SHEET_CLEAR_RANGE = "A1:Z100"
SHEET_HEADER_ROWS = 3  # title, blank, column header

# Analytics
TOP_TIME_SLOTS = 5

# Roles
ROLE_SET_VERSION = 1
FALLBACK_ROLE = "Tank"
