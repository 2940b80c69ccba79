"""Generic CRUD routes for the NGO record entities, guarded by require_access."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy import Column, Table, insert, select, update
from sqlalchemy import delete as sa_delete
from sqlalchemy.exc import IntegrityError as SQLAlchemyIntegrityError
from sqlalchemy.orm import Session

from app.api.v1.auth import DbDep, require_access
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.ownership import RECORD_OWNERSHIP
from app.schemas.auth import Principal

# Maintained by the server, never accepted from clients.
AUDIT_COLUMNS = frozenset(
    {"created_by_user_id", "modified_by_user_id", "created_at", "modified_date"}
)


def _coerce(column: Column, value: Any) -> Any:
    """Convert JSON values to the column's Python type; raise ValidationError when impossible."""
    if value is None:
        return None
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is bool:
        if isinstance(value, bool):
            return value
        raise ValidationError(f"Invalid value for {column.name}: expected boolean")
    # JSON arrays, objects and booleans never fit a scalar column.
    if isinstance(value, (bool, list, dict)):
        raise ValidationError(f"Invalid value for {column.name}: expected a scalar")
    if python_type is int:
        if isinstance(value, float):
            if not value.is_integer():
                raise ValidationError(f"Invalid value for {column.name}: expected an integer")
            return int(value)
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError as e:
                raise ValidationError(f"Invalid value for {column.name}") from e
        return value
    if isinstance(value, python_type):
        return value
    try:
        if python_type is date:
            return date.fromisoformat(str(value))
        if python_type is datetime:
            return datetime.fromisoformat(str(value))
        if python_type is Decimal:
            return Decimal(str(value))
        if python_type is str:
            return str(value)
    except (ValueError, ArithmeticError) as e:
        raise ValidationError(f"Invalid value for {column.name}") from e
    return value


def _writable_values(table: Table, payload: dict[str, Any], include_pk: bool) -> dict[str, Any]:
    unknown = sorted(
        key
        for key in payload
        if key not in table.c
        or key in AUDIT_COLUMNS
        or (table.c[key].primary_key and not include_pk)
    )
    if unknown:
        raise ValidationError(f"Unknown or read-only fields: {', '.join(unknown)}")
    return {key: _coerce(table.c[key], value) for key, value in payload.items()}


def _missing_required(table: Table, values: dict[str, Any]) -> list[str]:
    return sorted(
        c.name
        for c in table.c
        if not c.nullable
        and c.default is None
        and c.server_default is None
        and c.name not in AUDIT_COLUMNS
        and values.get(c.name) is None
    )


def build_record_router(entity: str) -> APIRouter:
    """Routes for one registry entity: list, create, read, update (PUT/PATCH), delete."""
    router = APIRouter()
    rule = RECORD_OWNERSHIP.rule(entity)

    any_role = Annotated[Principal, Depends(require_access())]
    owner_or_staff = Annotated[
        Principal, Depends(require_access(entity=entity, ownership="replace"))
    ]
    deleter = Annotated[
        Principal, Depends(require_access(entity=entity, ownership="additional"))
    ]

    def _table() -> Table:
        return RECORD_OWNERSHIP.table(entity)

    def _fetch(db: Session, record_id: str) -> dict[str, Any]:
        table = _table()
        row = db.execute(
            select(table).where(table.c[rule.id_column] == record_id)
        ).mappings().first()
        if row is None:
            raise NotFoundError("Record not found")
        return dict(row)

    @router.get("")
    def list_records(_principal: any_role, db: DbDep) -> dict[str, list[dict[str, Any]]]:
        table = _table()
        rows = db.execute(select(table).order_by(table.c[rule.id_column])).mappings().all()
        return {"data": [dict(r) for r in rows]}

    @router.post("", status_code=status.HTTP_201_CREATED)
    def create_record(
        principal: any_role,
        db: DbDep,
        payload: Annotated[dict[str, Any], Body()],
    ) -> dict[str, Any]:
        table = _table()
        values = _writable_values(table, payload, include_pk=True)
        missing = _missing_required(table, values)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        values["created_by_user_id"] = principal.id
        values["modified_by_user_id"] = principal.id
        try:
            db.execute(insert(table).values(**values))
            db.commit()
        except SQLAlchemyIntegrityError as e:
            db.rollback()
            raise ConflictError("Record already exists") from e
        return _fetch(db, str(values[rule.id_column]))

    @router.get("/{record_id}")
    def get_record(record_id: str, _principal: owner_or_staff, db: DbDep) -> dict[str, Any]:
        return _fetch(db, record_id)

    @router.api_route("/{record_id}", methods=["PUT", "PATCH"])
    def update_record(
        record_id: str,
        principal: owner_or_staff,
        db: DbDep,
        payload: Annotated[dict[str, Any], Body()],
    ) -> dict[str, Any]:
        table = _table()
        values = _writable_values(table, payload, include_pk=False)
        if not values:
            raise ValidationError("No fields to update")
        values["modified_by_user_id"] = principal.id
        try:
            result = db.execute(
                update(table).where(table.c[rule.id_column] == record_id).values(**values)
            )
            db.commit()
        except SQLAlchemyIntegrityError as e:
            db.rollback()
            raise ConflictError("Update violates a uniqueness or integrity constraint") from e
        if not result.rowcount:
            raise NotFoundError("Record not found")
        return _fetch(db, record_id)

    @router.delete("/{record_id}")
    def delete_record(record_id: str, _principal: deleter, db: DbDep) -> dict[str, str]:
        table = _table()
        result = db.execute(sa_delete(table).where(table.c[rule.id_column] == record_id))
        db.commit()
        if not result.rowcount:
            raise NotFoundError("Record not found")
        return {"message": "Record deleted"}

    return router
