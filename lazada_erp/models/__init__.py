from .activity_log import ActivityLog
from .app_setting import AppSetting
from .inventory import InventoryItem

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'ActivityLog',
    'AppSetting',
    'InventoryItem',
]
