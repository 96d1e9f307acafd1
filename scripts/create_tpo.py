#!/usr/bin/env python3
"""
Create a TPO account directly in MongoDB.

Usage: python scripts/create_tpo.py "Placement Office" tpo@college.edu <password>
"""
import sys
sys.path.insert(0, '.')

from app.core.auth import hash_password
from app.core.errors import Conflict
from app.db.mongodb import init_mongo_indexes
from app.services.mongo_service import TpoService


def main():
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    name, email, password = sys.argv[1:]

    init_mongo_indexes()
    try:
        tpo = TpoService().create(name, email, hash_password(password))
    except Conflict as e:
        print(f"❌ {e.message}: {email}")
        sys.exit(1)
    print(f"✅ TPO created: {tpo['id']} ({tpo['email']})")


if __name__ == "__main__":
    main()
