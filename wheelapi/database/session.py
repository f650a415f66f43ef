import logging
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wheelapi.database.connection import SessionLocal

logger = logging.getLogger(__name__)


def get_db() -> Iterator[Session]:
    """요청(또는 작업 실행) 단위 세션

    커밋은 리포지토리가 각 원자적 변경마다 직접 한다. 여기서는 처리 중 예외가 나면
    열린 트랜잭션만 정리한다.
    """
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Database error, rolling back session: {str(e)}")
        db.rollback()
        raise
    except Exception:
        if db.in_transaction():
            db.rollback()
        raise
    finally:
        db.close()
