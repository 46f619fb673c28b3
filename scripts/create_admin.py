import sys
from pathlib import Path
import os

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from certverify.database import SessionLocal, engine, Base
from certverify.models.users import User
from certverify.core.auth import get_password_hash, get_user_by_email


def create_admin_user():
    print("🚀 Initializing Admin User...")

    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        # Use os.getenv directly as these are not in the main Settings model
        admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").strip().lower()
        admin_name = os.getenv("ADMIN_NAME", "Administrator")

        admin_password = os.getenv("ADMIN_PASSWORD")
        if not admin_password:
            print("❌ Error: ADMIN_PASSWORD not set.")
            sys.exit(1)

        hashed_pwd = get_password_hash(admin_password)
        existing_user = get_user_by_email(db, admin_email)

        if existing_user:
            print(f"🔄 Admin user '{admin_email}' exists. Updating password...")
            existing_user.hashed_password = hashed_pwd
            existing_user.is_active = True
            existing_user.is_superuser = True
            db.commit()
            print(f"✅ Password updated for user: {admin_email}")
            return

        print(f"👤 Creating admin user: {admin_email}")
        new_user = User(
            email=admin_email,
            name=admin_name,
            hashed_password=hashed_pwd,
            is_active=True,
            is_superuser=True,
        )

        db.add(new_user)
        db.commit()
        db.refresh(new_user)
        print(f"✅ Successfully created admin user: {new_user.email}")

    except Exception as e:
        print(f"❌ Error creating admin user: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_admin_user()
