from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from placement_portal.database import Base


class StudentProfile(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    department = Column(String(255), nullable=False)
    # Kept as text so "3.8" and "8.6/10" style grades both round-trip unchanged.
    cgpa = Column(String(20), nullable=False)
    graduation_year = Column(Integer, nullable=False)
    resume_url = Column(String(1000), nullable=True)

    user = relationship("User", backref="student_profile")
