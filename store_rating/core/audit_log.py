"""Audit trail for account and rating writes"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from store_rating.models.audit import Audit
from store_rating.core.enums import AuditAction
from store_rating.core.metrics import audit_logs_created
from store_rating.utils.hashing import payload_hash

logger = logging.getLogger(__name__)

# never hashed into the trail
SENSITIVE_FIELDS = {"password", "current_password", "new_password"}


async def log_audit(
    db: AsyncSession,
    user_id: int,
    action: AuditAction,
    payload: Optional[dict] = None
) -> None:
    """Record an audit entry and commit it.

    Failures are logged and rolled back; they never fail the request that
    triggered them.
    """
    try:
        audit_record = Audit(
            user_id=int(user_id),
            action=str(action),
            payload_hash=payload_hash(payload, exclude=SENSITIVE_FIELDS),
        )
        
        db.add(audit_record)
        await db.commit()
        audit_logs_created.labels(action=str(action)).inc()
        
    except Exception as e:
        await db.rollback()
        logger.error(f"Audit logging failed for action {action}: {e}", exc_info=True)
