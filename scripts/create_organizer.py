"""
Create an organizer account from the command line
Run with: python3 -m scripts.create_organizer
"""
import getpass

from pydantic import ValidationError

from db import SessionLocal
from api.crud.user import create_organizer
from schemas.auth import OrganizerRegister
from core.exceptions import PescaException


def main():
    print("=" * 60)
    print("🎣 Create organizer")
    print("=" * 60)

    name = input("Name: ").strip()
    email = input("Email: ").strip()
    mobile_no = input("Mobile number: ").strip()
    password = getpass.getpass("Password: ")

    try:
        organizer = OrganizerRegister(name=name, email=email, mobile_no=mobile_no, password=password)
    except ValidationError as e:
        print(f"❌ Invalid input: {e}")
        return

    db = SessionLocal()
    try:
        user = create_organizer(db, organizer)
        print("✅ Organizer created!")
        print(f"   User ID: {user.id}")
        print(f"   Email: {user.email}")
    except PescaException as e:
        print(f"❌ {e.detail}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
