import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wheelapi.database.connection import engine
from wheelapi.config import settings
from wheelapi.models.base import Base
from wheelapi.models import account, points, spin  # noqa: F401  (테이블 등록)


def init_db():
    """데이터베이스 초기화"""
    try:
        Base.metadata.create_all(bind=engine)
        print(f"Database initialized successfully: {engine.url.render_as_string(hide_password=True)}")
        print(f"Tables: {', '.join(sorted(Base.metadata.tables))}")
        print(f"Environment: {settings.ENVIRONMENT}")

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()
