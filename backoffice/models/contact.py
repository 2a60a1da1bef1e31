"""Contact form submission model."""

from sqlalchemy import Column, Integer, String, Text, DateTime, func
from backoffice.db.base import Base


class Contact(Base):
    """Inquiry submitted through the public contact form."""
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False, index=True)
