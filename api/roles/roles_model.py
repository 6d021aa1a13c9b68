from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey
from sqlalchemy.orm import relationship
from config.database import Base
from config.roles_config import Role
from utils.time_utils import utcnow


class UserRole(Base):
    """
    Role record of an identity.

    Invariants:
    - At most one row per user (user_id is the primary key)
    - Role never changes once written
    """
    __tablename__ = "user_roles"

    user_id    = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role       = Column(Enum(Role, name="user_role_enum", native_enum=False, length=20), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="role_record")

    def __repr__(self):
        return f"<UserRole(user_id={self.user_id}, role='{self.role.value}')>"
