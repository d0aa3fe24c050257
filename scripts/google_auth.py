"""
Google OAuth bootstrap for the schedule spreadsheet.

Runs the installed-app consent flow once and stores an authorized-user
token, which the API falls back to when no service account is configured.

    python scripts/google_auth.py
    python scripts/google_auth.py --client-secrets path/to/client.json --token token.json
    python scripts/google_auth.py --check
"""

import argparse
import os
import sys

import gspread
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from team_scheduler.core.config import (
    GOOGLE_SCOPES, OAUTH_CLIENT_SECRETS_FILE, OAUTH_TOKEN_FILE, SPREADSHEET_ID, get_google_credentials
)


def load_token(token_path: str):
    """Stored user credentials, refreshed if expired; None when there is nothing usable."""
    if not os.path.exists(token_path):
        return None

    creds = Credentials.from_authorized_user_file(token_path, GOOGLE_SCOPES)
    if creds.valid:
        return creds
    if creds.expired and creds.refresh_token:
        print("Refreshing expired token...")
        creds.refresh(Request())
        return creds
    return None


def run_consent_flow(client_secrets_path: str):
    if not os.path.exists(client_secrets_path):
        raise FileNotFoundError(
            f"OAuth client file not found at {client_secrets_path}. Create a Desktop OAuth "
            "client with the Sheets and Drive APIs enabled and save its JSON there, "
            "or pass --client-secrets."
        )
    print("Starting OAuth flow, a browser window will open...")
    flow = InstalledAppFlow.from_client_secrets_file(client_secrets_path, GOOGLE_SCOPES)
    return flow.run_local_server(port=0)


def authenticate(client_secrets_path: str = OAUTH_CLIENT_SECRETS_FILE, token_path: str = OAUTH_TOKEN_FILE):
    creds = load_token(token_path)
    if creds is None:
        creds = run_consent_flow(client_secrets_path)

    with open(token_path, 'w') as token:
        token.write(creds.to_json())
    print(f"Token saved to: {token_path}")
    return creds


def check_access(spreadsheet_id: str = SPREADSHEET_ID) -> None:
    """Verify the credentials the API would use can reach Google Sheets."""
    client = gspread.authorize(get_google_credentials())
    if not spreadsheet_id:
        print("Credentials load. No GOOGLE_SHEETS_SPREADSHEET_ID set; the API will create or reuse one.")
        return
    spreadsheet = client.open_by_key(spreadsheet_id)
    tabs = [worksheet.title for worksheet in spreadsheet.worksheets()]
    print(f"Opened '{spreadsheet.title}' with tabs: {', '.join(tabs) or '(none)'}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Authorize the Team Scheduler for Google Sheets")
    parser.add_argument("--client-secrets", default=OAUTH_CLIENT_SECRETS_FILE, help="OAuth client JSON file")
    parser.add_argument("--token", default=OAUTH_TOKEN_FILE, help="Where to store the user token")
    parser.add_argument("--check", action="store_true", help="Only test the configured credentials")
    args = parser.parse_args(argv)

    print("=" * 60)
    print("Team Scheduler - Google Sheets Authentication")
    print("=" * 60)

    try:
        if args.check:
            check_access()
        else:
            authenticate(args.client_secrets, args.token)
    except Exception as e:
        print(f"\nFailed: {e}")
        sys.exit(1)

    print("\nDone.")


if __name__ == '__main__':
    main()
