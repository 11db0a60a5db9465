# lazada_erp/models/app_setting.py
from sqlalchemy import Column, String, Text, DateTime, text

from lazada_erp.core.utils import utc_now
from lazada_erp.database import Base


class AppSetting(Base):
    """
    Durable key/value application state.

    Holds the Lazada credential as three keys (see CredentialStore).
    """
    __tablename__ = "app_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=True)
    description = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=text("CURRENT_TIMESTAMP"), nullable=False)

    def __repr__(self):
        return f"<AppSetting {self.key}>"
