#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Staff Account CLI Tool
Creates a dashboard login in the API user database.

    python scripts/create_user.py staff@classicwines.com "Jane Doe"
"""
import argparse
import getpass
import sys
from pathlib import Path

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))


def create_user(email, full_name, password, db_path=None):
    """Create the account; returns the user dict or None if the email is taken."""
    import config
    from api.auth.user_db import UserDB

    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters long")
    db = UserDB(db_path=db_path or config.API_USER_DB_PATH)
    return db.create_user(email=email, password=password, full_name=full_name)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create a Classic Wines dashboard login")
    parser.add_argument("email", help="Login email")
    parser.add_argument("full_name", help="Name shown in the dashboard header")
    parser.add_argument("--password", help="Password (prompted when omitted)")
    parser.add_argument("--db", dest="db_path", help="User database path (default: API_USER_DB_PATH)")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")

    try:
        user = create_user(args.email, args.full_name, password, db_path=args.db_path)
    except ValueError as e:
        print(f"[FAIL] {e}")
        return 1

    if not user:
        print(f"[FAIL] A user with email {args.email} already exists")
        return 1

    print(f"[OK] Created {user['email']} ({user['full_name']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
