"""Seed a verified administrator account."""

import os

from app import create_app
from models.account import Account

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "AdminPass123!")


def main() -> None:
    app = create_app()
    with app.app_context():
        store = app.extensions["account_store"]
        admin = store.get_by_email(ADMIN_EMAIL, include_hidden=True)
        if admin is None:
            admin = Account(
                email=ADMIN_EMAIL,
                first_name="Admin",
                last_name="User",
                role="admin",
                is_email_verified=True,
            )
            admin.set_password(ADMIN_PASSWORD)
            store.create(admin)
            action = "created"
        else:
            admin.role = "admin"
            admin.mark_email_verified()
            admin.set_password(ADMIN_PASSWORD)
            store.save(admin)
            action = "updated"
        print(f"Admin account {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
