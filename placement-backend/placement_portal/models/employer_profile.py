from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from placement_portal.database import Base


class EmployerProfile(Base):
    __tablename__ = "employers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    company_name = Column(String(255), nullable=False)
    industry = Column(String(255), nullable=False)
    website = Column(String(1000), nullable=True)
    is_approved = Column(Boolean, nullable=False, default=True)

    user = relationship("User", backref="employer_profile")
