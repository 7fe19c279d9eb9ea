"""
User model for authentication and job applications.

Each User is identified by a username; is_admin grants access to the
company/job management endpoints.
"""

from sqlalchemy import Column, String, Text, Boolean, CheckConstraint, false
from app.core.database import Base


class User(Base):
    """
    User account.

    password holds a bcrypt hash, never the plain text.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("email LIKE '_%@%'", name="ck_users_email"),
    )

    username = Column(String(25), primary_key=True)
    password = Column(Text, nullable=False)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self):
        return f"<User(username='{self.username}', is_admin={self.is_admin})>"
