"""대시보드 집계용 사용자 프로필 모델 정의입니다."""

from sqlalchemy import Column, Integer, Text

from beacon.database import Base


class UserProfile(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text)
    email = Column(Text, unique=True, nullable=False)
    city = Column(Text)
    job_title = Column("jobtitle", Text, key="job_title")
    company_name = Column("companyname", Text, key="company_name")
