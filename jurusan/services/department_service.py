"""
Department service — lifecycle of Jurusan (academic department) records.

Lists, creates, updates, soft-deletes and restores department records.
Routes never touch the model directly; every query and mutation goes
through this module.

Record sets used by each operation:
  - **List / find / update / delete** look at live records only
    (``deleted_at IS NULL``).
  - **Restore** looks at trashed records only.
  - **Create** rejects a name held by a live record, and points the
    caller at a trashed record holding the name instead of creating.
  - **Update** rejects a new name held by *any* record, live or trashed.

Each operation commits once, so a check and the write that depends on
it share one transaction.  The unique constraint on the name and the
primary key on the ID catch anything a concurrent request slipped in
between the check and the commit.
"""

import logging
from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from jurusan.extensions import db
from jurusan.models.department import STATUS_INACTIVE, Department
from jurusan.services.errors import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

NAME_IN_USE_MESSAGE = "Department name is already in use."
IN_TRASH_MESSAGE = (
    "A department with the same name is already in the trash. Restore it?"
)
NOT_FOUND_MESSAGE = "Department record not found."

# Columns a listing may be ordered by, keyed by their API field names.
ORDERABLE_COLUMNS = {
    "id": Department.id,
    "name": Department.department_name,
    "abbreviation": Department.abbreviation,
    "status": Department.status,
}


# =========================================================================
# Result types
# =========================================================================


@dataclass
class DepartmentPage:
    """One page of a department listing plus the counts a table widget needs."""

    records: list[Department] = field(default_factory=list)
    total: int = 0  # All live records, ignoring every filter.
    filtered: int = 0  # Live records matching the filters, before paging.


@dataclass
class CreateResult:
    """
    Outcome of ``create_department``.

    Exactly one of ``department`` (the new record) or ``trashed_id``
    (the ID of a trashed record with the same name) is set.
    """

    department: Department | None = None
    trashed_id: str | None = None

    @property
    def in_trash(self) -> bool:
        """True when nothing was created because the name is in the trash."""
        return self.trashed_id is not None


# =========================================================================
# Queries
# =========================================================================


def _live_query():
    return Department.query.filter(Department.deleted_at.is_(None))


def _trashed_query():
    return Department.query.filter(Department.deleted_at.isnot(None))


def count_live() -> int:
    """Return the number of live department records."""
    return _live_query().count()


def list_departments(
    department_id: str | None = None,
    start: int | None = None,
    length: int | None = None,
    order: str | None = None,
    search: str | None = None,
) -> DepartmentPage:
    """
    Return a page of live department records.

    Args:
        department_id: Exact ID filter.
        start:         Row offset.  Paging applies only when both
                       ``start`` and ``length`` are given.
        length:        Page size.  A negative value means "all rows".
        order:         Column to sort ascending (see ``ORDERABLE_COLUMNS``).
        search:        Substring to match against the department name.

    Returns:
        A DepartmentPage.  ``total`` ignores every argument;
        ``filtered`` honours ``department_id`` and ``search`` but not
        paging.

    Raises:
        ValidationError: If ``order`` is not an orderable column.
    """
    total = count_live()
    query = _live_query()

    if department_id:
        query = query.filter(Department.id == department_id)
    if search:
        query = query.filter(
            Department.department_name.contains(search, autoescape=True)
        )

    filtered = query.count()

    if order:
        column = ORDERABLE_COLUMNS.get(order)
        if column is None:
            raise ValidationError(
                f"Cannot order by '{order}'. "
                f"Valid columns: {', '.join(sorted(ORDERABLE_COLUMNS))}"
            )
        query = query.order_by(column.asc())

    # Filters must be in place before OFFSET/LIMIT on a legacy Query.
    if start is not None and length is not None:
        query = query.offset(max(start, 0))
        if length >= 0:
            query = query.limit(length)

    return DepartmentPage(records=query.all(), total=total, filtered=filtered)


def get_department_by_id(department_id: str, trashed: bool = False) -> Department | None:
    """Return a live (or, with ``trashed=True``, a trashed) record by ID."""
    query = _trashed_query() if trashed else _live_query()
    return query.filter(Department.id == department_id).first()


def get_department_options() -> list[Department]:
    """Return live records ordered by name, for dropdown inputs."""
    return _live_query().order_by(Department.department_name).all()


def _name_exists(name: str) -> bool:
    """Check whether any record, live or trashed, already has ``name``."""
    return (
        db.session.query(Department.id)
        .filter(Department.department_name == name)
        .first()
        is not None
    )


# =========================================================================
# Mutations
# =========================================================================


def _next_department_id() -> str:
    """
    Build the next record ID from the count of every row ever created.

    Trashed rows are counted too, so an ID is never handed out twice
    while history exists.
    """
    prefix = current_app.config.get("DEPARTMENT_ID_PREFIX", "J-")
    width = current_app.config.get("DEPARTMENT_ID_WIDTH", 3)
    row_count = db.session.query(func.count(Department.id)).scalar()
    return f"{prefix}{row_count + 1:0{width}d}"


def _commit(error_cls, message: str) -> None:
    """Commit the session, turning constraint violations into ``error_cls``."""
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Commit rejected by a database constraint: %s", exc.orig)
        raise error_cls(message) from exc


def create_department(
    name: str,
    status: str,
    abbreviation: str | None = None,
) -> CreateResult:
    """
    Create a department record.

    A record created as ``Tidak Aktif`` goes straight to the trash.

    Returns:
        A CreateResult holding either the new record or, when a trashed
        record already has this name, that record's ID.

    Raises:
        ConflictError: If a live record already has this name.
    """
    if _live_query().filter(Department.department_name == name).first():
        logger.info("Create rejected: live department named %r exists", name)
        raise ConflictError(NAME_IN_USE_MESSAGE)

    trashed = _trashed_query().filter(Department.department_name == name).first()
    if trashed is not None:
        logger.info(
            "Create skipped: department %r is in the trash as %s", name, trashed.id
        )
        return CreateResult(trashed_id=trashed.id)

    department = Department(
        id=_next_department_id(),
        department_name=name,
        abbreviation=abbreviation,
        status=status,
    )
    if status == STATUS_INACTIVE:
        department.soft_delete()

    db.session.add(department)
    _commit(ConflictError, NAME_IN_USE_MESSAGE)

    logger.info("Created department %s: %s", department.id, name)
    return CreateResult(department=department)


def update_department(
    department_id: str,
    name: str | None = None,
    abbreviation: str | None = None,
    status: str | None = None,
) -> Department:
    """
    Update a live department record.  ``None`` arguments are left alone;
    an empty ``abbreviation`` clears it.

    Setting the status to ``Tidak Aktif`` moves the record to the trash.

    Raises:
        NotFoundError:     If no live record has this ID.
        BusinessRuleError: If another record, live or trashed, already
                           has the new name.
    """
    department = get_department_by_id(department_id)
    if department is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    if name is not None and name != department.department_name and _name_exists(name):
        logger.info(
            "Update of %s rejected: name %r already in use", department_id, name
        )
        raise BusinessRuleError(NAME_IN_USE_MESSAGE)

    if name is not None:
        department.department_name = name
    if abbreviation is not None:
        department.abbreviation = abbreviation or None
    if status is not None:
        department.status = status

    # The target is live, so only the inactive direction needs reconciling.
    if department.status == STATUS_INACTIVE:
        department.soft_delete()

    _commit(BusinessRuleError, NAME_IN_USE_MESSAGE)

    logger.info("Updated department %s", department_id)
    return department


def delete_department(department_id: str) -> Department:
    """
    Soft-delete a live department record.

    Raises:
        NotFoundError: If no live record has this ID.
    """
    department = get_department_by_id(department_id)
    if department is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    department.soft_delete()
    db.session.commit()

    logger.info("Moved department %s to the trash", department_id)
    return department


def restore_department(department_id: str) -> Department:
    """
    Restore a trashed department record.

    Raises:
        NotFoundError: If no trashed record has this ID.
    """
    department = get_department_by_id(department_id, trashed=True)
    if department is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)

    department.restore()
    db.session.commit()

    logger.info("Restored department %s", department_id)
    return department
