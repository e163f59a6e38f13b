"""
Initialize database schema.

Run ONCE when:
- first local setup
- new environment deployment

    python -m papercatcher.scripts.init_db
"""

import asyncio

from papercatcher.database.db.session import init_models


def main():
    print("🔧 Initializing database schema...")
    asyncio.run(init_models())
    print("✅ Database schema initialized.")


if __name__ == "__main__":
    main()
