# db/models.py

from sqlalchemy import Column, Integer, String, Text, Date, DateTime
from sqlalchemy.sql import func
from db.database import Base

class DiseaseData(Base):
    __tablename__ = "disease_data"

    id = Column(Integer, primary_key=True, index=True)
    pincode = Column(String(6), nullable=False, index=True)
    disease_name = Column(String, nullable=False)
    cases = Column(Integer, nullable=False, default=0)
    date = Column(Date, nullable=False)
    advice = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)  # "admin" or "user"

class AuthSession(Base):
    __tablename__ = "auth_sessions"

    token = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
