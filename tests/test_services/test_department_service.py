"""
Tests for the department service.

Cover ID generation, the different record sets each operation checks
names against, the status/tombstone coupling, and the counts reported
by listings.  Every test starts from an empty table (see the
``db_session`` fixture).
"""

import re

import pytest

from jurusan.models.department import STATUS_ACTIVE, STATUS_INACTIVE, Department
from jurusan.services import department_service
from jurusan.services.errors import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


def _create(name, status=STATUS_ACTIVE, abbreviation=None):
    """Create a record through the service and return it."""
    result = department_service.create_department(
        name=name, status=status, abbreviation=abbreviation
    )
    assert not result.in_trash
    return result.department


class TestCreateDepartment:
    """Tests for create_department()."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_session):
        self.session = db_session

    def test_first_record_gets_j001(self):
        """The first record in an empty table is J-001."""
        department = _create("Informatika", abbreviation="IF")

        assert department.id == "J-001"
        assert department.department_name == "Informatika"
        assert department.abbreviation == "IF"
        assert department.status == STATUS_ACTIVE
        assert department.deleted_at is None

    def test_ids_increase_in_creation_order(self):
        """IDs follow the J-NNN format and increase with each create."""
        ids = [_create(name).id for name in ("A", "B", "C")]

        assert ids == ["J-001", "J-002", "J-003"]
        assert all(re.fullmatch(r"J-\d{3}", value) for value in ids)

    def test_trashed_records_count_towards_next_id(self):
        """A trashed record still occupies its place in the sequence."""
        first = _create("Informatika")
        department_service.delete_department(first.id)

        second = _create("Elektro")

        assert second.id == "J-002"

    def test_inactive_record_goes_straight_to_trash(self):
        """Creating with 'Tidak Aktif' stores a tombstoned record."""
        department = _create("Arsitektur", status=STATUS_INACTIVE)

        assert department.status == STATUS_INACTIVE
        assert department.deleted_at is not None
        assert department_service.count_live() == 0
        assert department_service.get_department_by_id(department.id, trashed=True)

    def test_duplicate_live_name_raises_conflict(self):
        """A live record with the same name blocks creation."""
        _create("Informatika")

        with pytest.raises(ConflictError, match="already in use"):
            department_service.create_department(
                name="Informatika", status=STATUS_ACTIVE
            )
        assert Department.query.count() == 1

    def test_trashed_name_returns_trashed_id(self):
        """
        A trashed record with the same name is reported instead of
        creating a second row.
        """
        _create("Informatika")
        trashed = _create("Elektro")
        department_service.delete_department(trashed.id)

        result = department_service.create_department(
            name="Elektro", status=STATUS_ACTIVE
        )

        assert result.in_trash
        assert result.department is None
        assert result.trashed_id == trashed.id
        assert Department.query.count() == 2

    def test_constraint_violation_at_commit_becomes_conflict(self, monkeypatch):
        """
        If another writer takes the ID between the count and the commit,
        the primary key rejects the insert and the caller sees a conflict.
        """
        _create("Informatika")
        # Forget loaded rows so the clash surfaces in the database.
        self.session.expunge_all()
        monkeypatch.setattr(
            department_service, "_next_department_id", lambda: "J-001"
        )

        with pytest.raises(ConflictError):
            department_service.create_department(name="Elektro", status=STATUS_ACTIVE)

        # The failed insert was rolled back and the session is usable.
        assert Department.query.count() == 1


class TestListDepartments:
    """Tests for list_departments()."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_session):
        self.session = db_session
        _create("Teknik Informatika", abbreviation="TI")
        _create("Sistem Informasi", abbreviation="SI")
        _create("Teknik Elektro", abbreviation="TE")
        _create("Manajemen", abbreviation="MJ")
        trashed = _create("Teknik Sipil", abbreviation="TS")
        department_service.delete_department(trashed.id)

    def test_without_arguments_returns_all_live_records(self):
        """Trashed records never appear in a listing."""
        page = department_service.list_departments()

        assert page.total == 4
        assert page.filtered == 4
        assert {d.id for d in page.records} == {"J-001", "J-002", "J-003", "J-004"}

    def test_search_matches_substring_of_name(self):
        """search filters by name substring and narrows the filtered count."""
        page = department_service.list_departments(search="Teknik", order="id")

        assert [d.id for d in page.records] == ["J-001", "J-003"]
        assert page.total == 4
        assert page.filtered == 2

    def test_search_treats_wildcards_literally(self):
        """A '%' in the search text does not match everything."""
        page = department_service.list_departments(search="%")

        assert page.records == []
        assert page.filtered == 0

    def test_id_filter(self):
        """id narrows the listing to one record."""
        page = department_service.list_departments(department_id="J-002")

        assert [d.department_name for d in page.records] == ["Sistem Informasi"]
        assert page.filtered == 1
        assert page.total == 4

    def test_trashed_id_is_not_listed(self):
        """Filtering by a trashed record's ID finds nothing."""
        page = department_service.list_departments(department_id="J-005")

        assert page.records == []
        assert page.filtered == 0

    def test_paging_does_not_change_counts(self):
        """start/length slice the rows but not recordsTotal/recordsFiltered."""
        page = department_service.list_departments(start=1, length=2, order="id")

        assert [d.id for d in page.records] == ["J-002", "J-003"]
        assert page.total == 4
        assert page.filtered == 4

    def test_paging_needs_both_start_and_length(self):
        """A lone length is ignored."""
        page = department_service.list_departments(length=1)

        assert len(page.records) == 4

    def test_negative_length_returns_everything_after_start(self):
        """length=-1 is the table widget's 'show all'."""
        page = department_service.list_departments(start=1, length=-1, order="id")

        assert [d.id for d in page.records] == ["J-002", "J-003", "J-004"]

    def test_order_by_name_ascending(self):
        """order sorts ascending by the named column."""
        page = department_service.list_departments(order="name")

        assert [d.department_name for d in page.records] == [
            "Manajemen",
            "Sistem Informasi",
            "Teknik Elektro",
            "Teknik Informatika",
        ]

    def test_unknown_order_column_raises(self):
        """Only projected columns may be used for ordering."""
        with pytest.raises(ValidationError, match="Cannot order by"):
            department_service.list_departments(order="deleted_at")

    def test_total_is_invariant_under_every_parameter(self):
        """recordsTotal always counts every live record."""
        page = department_service.list_departments(
            department_id="J-001", start=0, length=1, order="name", search="Teknik"
        )

        assert page.total == 4
        assert page.filtered == 1


class TestUpdateDepartment:
    """Tests for update_department()."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_session):
        self.session = db_session
        self.informatika = _create("Informatika", abbreviation="IF")
        self.elektro = _create("Elektro", abbreviation="EL")

    def test_updates_supplied_fields_only(self):
        """Fields passed as None are left untouched."""
        department = department_service.update_department(
            self.informatika.id, abbreviation="INF"
        )

        assert department.department_name == "Informatika"
        assert department.abbreviation == "INF"
        assert department.status == STATUS_ACTIVE

    def test_empty_abbreviation_clears_it(self):
        """An empty string removes the abbreviation; None keeps it."""
        department_service.update_department(self.elektro.id, abbreviation=None)
        assert self.elektro.abbreviation == "EL"

        department = department_service.update_department(
            self.elektro.id, abbreviation=""
        )

        assert department.abbreviation is None
        assert department_service.get_department_by_id(self.elektro.id).abbreviation is None

    def test_renaming_to_a_free_name(self):
        """A name nobody has is accepted."""
        department = department_service.update_department(
            self.informatika.id, name="Teknik Informatika"
        )

        assert department.department_name == "Teknik Informatika"

    def test_keeping_the_same_name_is_allowed(self):
        """Re-submitting the current name is not a collision."""
        department = department_service.update_department(
            self.informatika.id, name="Informatika", abbreviation="TI"
        )

        assert department.department_name == "Informatika"
        assert department.abbreviation == "TI"

    def test_name_of_another_live_record_is_rejected(self):
        """Taking another live record's name is a business-rule error."""
        with pytest.raises(BusinessRuleError, match="already in use"):
            department_service.update_department(self.informatika.id, name="Elektro")

    def test_name_of_a_trashed_record_is_rejected(self):
        """Update checks trashed names too, unlike create's live check."""
        department_service.delete_department(self.elektro.id)

        with pytest.raises(BusinessRuleError):
            department_service.update_department(self.informatika.id, name="Elektro")

    def test_missing_record_raises_not_found(self):
        """Updating an unknown ID is a not-found error."""
        with pytest.raises(NotFoundError, match="not found"):
            department_service.update_department("J-999", name="Fisika")

    def test_trashed_record_cannot_be_updated(self):
        """Update only sees live records."""
        department_service.delete_department(self.elektro.id)

        with pytest.raises(NotFoundError):
            department_service.update_department(self.elektro.id, abbreviation="E")

    def test_setting_inactive_moves_record_to_trash(self):
        """Status 'Tidak Aktif' soft-deletes the record in the same update."""
        department = department_service.update_department(
            self.informatika.id, status=STATUS_INACTIVE
        )

        assert department.status == STATUS_INACTIVE
        assert department.deleted_at is not None
        page = department_service.list_departments()
        assert [d.id for d in page.records] == [self.elektro.id]


class TestDeleteAndRestore:
    """Tests for delete_department() and restore_department()."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_session):
        self.session = db_session
        self.department = _create("Informatika")

    def test_delete_sets_status_and_tombstone_together(self):
        """Soft delete marks the record inactive and tombstoned."""
        department = department_service.delete_department(self.department.id)

        assert department.status == STATUS_INACTIVE
        assert department.is_deleted
        assert department_service.get_department_by_id(self.department.id) is None

    def test_delete_keeps_the_row(self):
        """Soft delete never removes the row."""
        department_service.delete_department(self.department.id)

        assert Department.query.count() == 1

    def test_delete_missing_record_raises_not_found(self):
        """Deleting an unknown ID is a not-found error."""
        with pytest.raises(NotFoundError):
            department_service.delete_department("J-404")

    def test_delete_twice_raises_not_found(self):
        """A trashed record is not a valid delete target."""
        department_service.delete_department(self.department.id)

        with pytest.raises(NotFoundError):
            department_service.delete_department(self.department.id)

    def test_restore_clears_tombstone_and_activates(self):
        """Restore brings the record back as 'Aktif'."""
        department_service.delete_department(self.department.id)

        department = department_service.restore_department(self.department.id)

        assert department.status == STATUS_ACTIVE
        assert department.deleted_at is None
        page = department_service.list_departments()
        assert [d.id for d in page.records] == [self.department.id]

    def test_restore_live_record_raises_not_found(self):
        """Restore only looks in the trash."""
        with pytest.raises(NotFoundError):
            department_service.restore_department(self.department.id)

    def test_deleted_name_blocks_create_only_via_trash_notice(self):
        """
        After a delete, creating the same name points at the trash
        rather than raising a live-name conflict.
        """
        department_service.delete_department(self.department.id)

        result = department_service.create_department(
            name="Informatika", status=STATUS_ACTIVE
        )

        assert result.trashed_id == self.department.id
