# lazada_erp/models/activity_log.py
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from lazada_erp.database import Base

class ActivityLog(Base):
    """
    Records significant activities in the system for auditing.

    This includes:
    - Lazada sync batches
    - Product creation on Lazada
    - OAuth grants
    """
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True)
    action = Column(String(50), nullable=False, index=True)  # 'sync', 'create', 'auth'
    entity_type = Column(String(50), nullable=False, index=True)  # 'inventory_item', 'platform', 'credential'
    entity_id = Column(String(100), nullable=False, index=True)
    platform = Column(String(50), nullable=True, index=True)

    details = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog {self.action} {self.entity_type} {self.entity_id}>"
