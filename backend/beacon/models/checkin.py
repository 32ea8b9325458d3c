"""웹훅 메시지 단위 근무 위치 체크인 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from beacon.database import Base


class Checkin(Base):
    __tablename__ = "checkins"

    # DB 컬럼명은 기존 배포본(Postgres 소문자 식별자)과 동일하게 유지한다.
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column("userid", Text, key="user_id")
    user_name = Column("username", Text, key="user_name")
    user_email = Column("useremail", Text, key="user_email", nullable=True)
    status = Column(String(20), nullable=False)  # WFH/Office
    timestamp = Column(DateTime, server_default=func.now(), index=True)
    message_id = Column("messageid", Text, key="message_id", unique=True)
