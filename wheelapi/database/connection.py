from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from wheelapi.config import settings


def build_engine(database_url: str, echo: bool = False):
    """Create an engine for Postgres in production or SQLite in dev/tests."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    return create_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,  # 연결 유효성 검사
        pool_recycle=3600,  # 1시간마다 연결 재생성
        echo=echo,
    )


engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# expire_on_commit=False keeps attributes readable after commit within a request.
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)
