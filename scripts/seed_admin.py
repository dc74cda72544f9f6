"""Create or update a site administrator from environment credentials."""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.admin import Admin  # noqa: E402
from models.principal import normalize_email  # noqa: E402


def main() -> None:
    email = normalize_email(os.environ.get("ADMIN_EMAIL"))
    password = os.environ.get("ADMIN_PASSWORD") or ""
    name = os.environ.get("ADMIN_NAME", "Site Admin")
    if not email or len(password) < 6:
        sys.exit("ADMIN_EMAIL and ADMIN_PASSWORD (6+ characters) must be set.")

    app = create_app()
    with app.app_context():
        admin = Admin.find_by_email(email)
        if admin is None:
            admin = Admin(email=email, name=name, verified=True)
            db.session.add(admin)
            action = "created"
        else:
            admin.name = name
            admin.verified = True
            action = "updated"
        admin.set_password(password)
        db.session.commit()
        print(f"Admin user {action}: {email}")


if __name__ == "__main__":
    main()
