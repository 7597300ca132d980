"""
Initialize database: create all tables. Run once manually before first app launch.

Usage (from backend directory):
  python -m scripts.init_db

Do not run this on application startup. The application does not create or migrate the database.

Tables Created:
  - teachers: Teacher records, including the relative path of their photo
"""

from teacher_admin.core.database import init_db
from teacher_admin.core.logging import get_logger

logger = get_logger()


def main():
    logger.info("Initializing database (create tables)...")
    init_db()
    logger.info(
        "Database initialization complete. Run the application with: python -m uvicorn main:app --host 0.0.0.0 --port 8090"
    )


if __name__ == "__main__":
    main()
