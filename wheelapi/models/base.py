from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()


class CreatedAtMixin:
    """추가만 하는 테이블용 생성 시각"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TimestampMixin(CreatedAtMixin):
    """수정 가능한 테이블용 생성/수정 시각"""

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
        )


class AppendOnlyModel(Base, CreatedAtMixin):
    """원장처럼 한 번 쓰고 수정하지 않는 모델"""

    __abstract__ = True


class BaseModel(Base, TimestampMixin):
    """모든 모델의 베이스 클래스"""

    __abstract__ = True
