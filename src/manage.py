"""ClearWindow management CLI.

Creates, drops and resets the database schema, and bootstraps admin accounts.

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py reset-db
    python src/manage.py create-admin --username alice --email alice@example.com --password "change me now"
"""

import argparse
import secrets
import sys


def _run_schema_command(label, operation_name):
    from reviews.domain import reviews
    from reviews.utils import db

    reviews.init()
    print(f"{label} database schema...")
    providers = getattr(db, operation_name)(reviews)
    if providers:
        print(f"Done: {', '.join(providers)}")
    else:
        print("No SQL providers configured, nothing to do.")


def create_admin(username, email, password=None):
    """Create (or promote) a verified admin account and print an access token for it.

    A new account without ``--password`` gets a generated one, printed once.
    """
    from reviews.account.user import Role, User
    from reviews.api.auth import create_access_token
    from reviews.domain import reviews

    reviews.init()
    with reviews.domain_context():
        repo = reviews.repository_for(User)
        existing = repo._dao.query.filter(email=email.strip().lower()).all().items
        if existing:
            admin = repo.get(existing[0].id)
            # Bypasses the master-admin guard in change_role
            admin.role = Role.ADMIN.value
            if not admin.is_email_verified:
                admin.mark_email_verified()
            if password:
                admin.set_password(password)
            action = "promoted"
        else:
            if not password:
                password = secrets.token_urlsafe(12)
                print(f"Generated password: {password}")
            admin = User.register(
                username=username,
                email=email,
                role=Role.ADMIN.value,
                email_verified=True,
                password=password,
            )
            action = "created"
        repo.add(admin)

    print(f"Admin {admin.username} {action} with id {admin.id}")
    print(f"Access token: {create_access_token(str(admin.id))}")
    return admin


def main():
    parser = argparse.ArgumentParser(description="ClearWindow management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("reset-db", help="Drop and recreate all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create a verified admin account")
    admin_parser.add_argument("--username", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", help="Login password; generated for new accounts when omitted")

    args = parser.parse_args()

    if args.command == "setup-db":
        _run_schema_command("Creating", "setup_db")
    elif args.command == "drop-db":
        _run_schema_command("Dropping", "drop_db")
    elif args.command == "reset-db":
        _run_schema_command("Recreating", "reset_db")
    elif args.command == "create-admin":
        create_admin(args.username, args.email, args.password)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
