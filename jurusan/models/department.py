"""
Department (Jurusan) record model.

Records are never hard-deleted.  A non-NULL ``deleted_at`` marks a row
as soft-deleted (in the trash), and ``status`` always mirrors it:
``Tidak Aktif`` rows are tombstoned, ``Aktif`` rows are live.  Use
``soft_delete()`` and ``restore()`` to move between the two states so
both columns change together.
"""

from datetime import datetime, timezone

from jurusan.extensions import db

STATUS_ACTIVE = "Aktif"
STATUS_INACTIVE = "Tidak Aktif"
STATUSES = (STATUS_ACTIVE, STATUS_INACTIVE)

NAME_MAX_LENGTH = 100
ABBREVIATION_MAX_LENGTH = 20


class Department(db.Model):
    """
    An academic department record identified by a ``J-NNN`` code.

    ``id`` is assigned by the department service at creation time and
    never changes.  ``department_name`` is unique across live and
    trashed rows alike, since neither create nor update lets a second
    row take a name that already exists.
    """

    __tablename__ = "jurusan"
    __table_args__ = (
        db.CheckConstraint(
            "status IN ('Aktif', 'Tidak Aktif')",
            name="ck_jurusan_status",
        ),
    )

    id = db.Column(db.String(20), primary_key=True)
    department_name = db.Column(
        db.String(NAME_MAX_LENGTH), nullable=False, unique=True
    )
    abbreviation = db.Column(db.String(ABBREVIATION_MAX_LENGTH), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=STATUS_ACTIVE)
    deleted_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(
        db.DateTime, nullable=False, server_default=db.func.now()
    )
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    @property
    def is_deleted(self) -> bool:
        """True when the record is in the trash."""
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Move the record to the trash: mark inactive and set the tombstone."""
        self.status = STATUS_INACTIVE
        self.deleted_at = datetime.now(timezone.utc).replace(tzinfo=None)

    def restore(self) -> None:
        """Bring the record back from the trash: mark active, clear the tombstone."""
        self.status = STATUS_ACTIVE
        self.deleted_at = None

    def to_dict(self) -> dict:
        """Public projection used by list and find responses (no timestamps)."""
        return {
            "id": self.id,
            "name": self.department_name,
            "abbreviation": self.abbreviation,
            "status": self.status,
        }

    def __repr__(self) -> str:
        return f"<Department {self.id}: {self.department_name}>"
