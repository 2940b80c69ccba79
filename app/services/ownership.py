"""Ownership check for single-record routes."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import AuthorizationError, NotFoundError
from app.core.ownership import OwnershipRegistry
from app.models.user import PRIVILEGED_ROLES
from app.schemas.auth import Principal

logger = logging.getLogger(__name__)


def is_owner(owner_value: object, principal: Principal) -> bool:
    """Owner column may hold the account email or its numeric id; compare as strings."""
    if owner_value is None:
        return False
    owner = str(owner_value).strip()
    return owner == str(principal.email) or owner == str(principal.id)


def check_record_access(
    db: Session,
    registry: OwnershipRegistry,
    principal: Principal,
    entity: str,
    record_id: str,
) -> None:
    """
    Grant admin/staff/super_admin unconditionally; otherwise require ownership.

    Raises NotFoundError when no record has record_id, AuthorizationError when
    the caller is not its owner.
    """
    if principal.role in PRIVILEGED_ROLES:
        return
    rule = registry.rule(entity)
    table = registry.table(entity)
    stmt = (
        select(table.c[rule.owner_column])
        .where(table.c[rule.id_column] == record_id)
        .limit(1)
    )
    row = db.execute(stmt).first()
    if row is None:
        raise NotFoundError("Record not found")
    if not is_owner(row[0], principal):
        logger.info(
            "Ownership check denied",
            extra={"entity": entity, "record_id": record_id, "user_id": principal.id},
        )
        raise AuthorizationError("Forbidden: not owner")
