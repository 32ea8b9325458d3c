"""Initialize the database - creates missing tables and additive columns."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from beacon.database import engine
from beacon.services.schema_service import init_db


def main():
    print("Checking/creating database tables...")
    added = init_db(engine)
    for name in added:
        print(f"- added {name}")
    print("Database initialized successfully.")


if __name__ == "__main__":
    main()
