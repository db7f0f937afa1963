import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from app.database.init_db import init_db

if __name__ == "__main__":
    print("Upgrading database schema...")
    backup = init_db()
    if backup is not None:
        print(f"Existing SQLite file did not match the migrations; moved to {backup}.")
    print("Schema is up to date.")
