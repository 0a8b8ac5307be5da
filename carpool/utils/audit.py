from sqlalchemy.orm import Session

from carpool.models.audit_log import AuditLog


def log_action(
    db: Session,
    user_id: int | None,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    description: str | None = None,
) -> AuditLog:
    """
    Stage an audit row on `db` next to the change it describes.

    The row is only added to the session. It is written by the same commit
    as the booking / trip / review change, and disappears with it on rollback.

        log_action(db, driver.id, "CONFIRM", "Booking", b.id, f"Booking #{b.id} confirmed")
        db.commit()
    """
    entry = AuditLog(
        userId=user_id,
        action=action,
        entityType=entity_type,
        entityId=entity_id,
        description=description,
    )
    db.add(entry)
    return entry
