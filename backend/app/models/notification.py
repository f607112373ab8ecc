from sqlalchemy import Column, String, Text, Boolean, JSON, ForeignKey
from app.database import Base
from app.models.mixins import TimestampMixin
import uuid


class Notification(TimestampMixin, Base):
    """Per-user event record. Append-only apart from the read flag."""

    __tablename__ = "notifications"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    read = Column(Boolean, nullable=False, default=False, index=True)
