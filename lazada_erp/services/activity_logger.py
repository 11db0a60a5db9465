# lazada_erp/services/activity_logger.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from lazada_erp.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)

class ActivityLogger:
    """
    Service for logging activities throughout the application.

    Records sync batches, listing creation and OAuth grants so there is an
    audit trail after the in-memory SyncReport is gone.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log_activity(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        platform: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Optional[ActivityLog]:
        """
        Log an activity in the system.

        Args:
            action: The action performed (sync, create, auth)
            entity_type: The type of entity affected (inventory_item, platform, credential)
            entity_id: The ID of the affected entity
            platform: Optional platform name
            details: Optional additional details as a dictionary

        Returns:
            The created ActivityLog instance, or None if it could not be written
        """
        try:
            log_entry = ActivityLog(
                action=action,
                entity_type=entity_type,
                entity_id=str(entity_id),
                platform=platform,
                details=details,
                created_at=datetime.now(timezone.utc)
            )

            self.db.add(log_entry)
            await self.db.commit()

            logger.debug(
                f"Activity logged: {action} {entity_type} {entity_id} "
                f"(platform: {platform or 'N/A'})"
            )

            return log_entry

        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error logging activity: {str(e)}")
            # Don't raise, as logging should not interrupt the main flow
            return None

    async def log_sync(
        self,
        platform: str,
        status: str,
        details: Dict[str, Any]
    ) -> Optional[ActivityLog]:
        """
        Log a platform sync batch.

        Args:
            platform: The platform that was synced
            status: The sync status (success, error, partial)
            details: Counts for the batch
        """
        return await self.log_activity(
            action="sync",
            entity_type="platform",
            entity_id=platform,
            platform=platform,
            details={
                "status": status,
                "total": details.get("total", 0),
                "successes": details.get("successes", 0),
                "errors": details.get("errors", 0),
                "failed_skus": details.get("failed_skus", []),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )
