"""
Routes for the departments blueprint — Jurusan record API.

Input comes from the query string, overlaid by the JSON body when one is
sent, so ``DELETE /api/departments?id=J-001`` and a JSON body with
``{"id": "J-001"}`` are equivalent.  Input shape checks live here;
business rules live in the department service.
"""

import logging
import math
import re

from flask import jsonify, request

from jurusan.blueprints.departments import bp
from jurusan.models.department import (
    ABBREVIATION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    STATUSES,
)
from jurusan.services import department_service
from jurusan.services.errors import (
    DepartmentServiceError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_MESSAGE = 'Status may only be "{}" or "{}".'.format(*STATUSES)

# Largest value a signed 64-bit OFFSET/LIMIT accepts.
MAX_SQL_INTEGER = 2**63 - 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


# =========================================================================
# Request / response helpers
# =========================================================================


def _request_data() -> dict:
    """Merge query-string arguments with the JSON body (body wins)."""
    data = request.args.to_dict()
    body = request.get_json(silent=True)
    if isinstance(body, dict):
        data.update(body)
    return data


def _check_string_types(data: dict, keys: tuple[str, ...], errors: list[str]) -> None:
    """Append an error for each present, non-null field that is not a string."""
    for key in keys:
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(f"The {key} field must be a string.")


def _optional_str(data: dict, key: str) -> str | None:
    """
    Return a stripped string field, or None when absent, null, blank, or
    not a string (``_check_string_types`` reports the last case).
    """
    value = data.get(key)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _optional_int(data: dict, key: str, errors: list[str]) -> int | None:
    """Parse an optional integer field, appending to ``errors`` if invalid."""
    value = data.get(key)
    if value is None or value == "":
        return None

    parsed = None
    if isinstance(value, bool):
        parsed = None
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if value.is_integer():
            parsed = int(value)
    elif isinstance(value, str):
        try:
            parsed = int(value)
        except ValueError:
            parsed = None

    if parsed is None:
        errors.append(f"The {key} field must be an integer.")
        return None
    if abs(parsed) > MAX_SQL_INTEGER:
        errors.append(f"The {key} field is out of range.")
        return None
    return parsed


def _required_id(data: dict) -> str:
    """Return the record ID from the request or raise a ValidationError."""
    errors: list[str] = []
    _check_string_types(data, ("id",), errors)
    if errors:
        raise ValidationError(errors)
    department_id = _optional_str(data, "id")
    if department_id is None:
        raise ValidationError("The id field is required.")
    return department_id


def _check_lengths(name: str | None, abbreviation: str | None, errors: list[str]) -> None:
    """Append an error for each field longer than its column allows."""
    if name is not None and len(name) > NAME_MAX_LENGTH:
        errors.append(f"The name field may not exceed {NAME_MAX_LENGTH} characters.")
    if abbreviation is not None and len(abbreviation) > ABBREVIATION_MAX_LENGTH:
        errors.append(
            f"The abbreviation field may not exceed {ABBREVIATION_MAX_LENGTH} characters."
        )


def _draw(value) -> int:
    """
    Echo the table widget's draw counter the way PHP ``intval`` reads it:
    the leading integer of a string, the truncated value of a number,
    and 0 for anything else.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else 0
    return 0


def _success(message: str, status_code: int = 201):
    return jsonify({"success": {"message": [message]}}), status_code


@bp.errorhandler(DepartmentServiceError)
def handle_service_error(error: DepartmentServiceError):
    """Render rejected operations in the ``errors`` envelope."""
    logger.info(
        "%s %s rejected with %d: %s",
        request.method,
        request.path,
        error.status_code,
        error,
    )
    return jsonify({"errors": {"message": error.messages}}), error.status_code


# =========================================================================
# Read
# =========================================================================


@bp.route("/departments", methods=["GET"])
def list_departments():
    """
    List live departments for a table widget.

    Query parameters: ``id``, ``start``, ``length``, ``order``,
    ``search`` and ``draw`` (echoed back).
    """
    data = _request_data()

    errors: list[str] = []
    _check_string_types(data, ("id", "order", "search"), errors)
    start = _optional_int(data, "start", errors)
    length = _optional_int(data, "length", errors)
    if errors:
        raise ValidationError(errors)

    page = department_service.list_departments(
        department_id=_optional_str(data, "id"),
        start=start,
        length=length,
        order=_optional_str(data, "order"),
        search=_optional_str(data, "search"),
    )
    return jsonify(
        {
            "draw": _draw(data.get("draw")),
            "recordsTotal": page.total,
            "recordsFiltered": page.filtered,
            "data": [department.to_dict() for department in page.records],
        }
    ), 200


@bp.route("/departments/find", methods=["GET"])
def find_department():
    """Return a single live department by ID."""
    department_id = _required_id(_request_data())
    department = department_service.get_department_by_id(department_id)
    if department is None:
        raise NotFoundError(department_service.NOT_FOUND_MESSAGE)
    return jsonify({"data": department.to_dict()}), 200


@bp.route("/departments/options", methods=["GET"])
def department_options():
    """Return live departments as ``{id, name}`` pairs for dropdowns."""
    departments = department_service.get_department_options()
    return jsonify(
        {"data": [{"id": d.id, "name": d.department_name} for d in departments]}
    ), 200


# =========================================================================
# Write
# =========================================================================


@bp.route("/departments", methods=["POST"])
def create_department():
    """
    Create a department.

    Answers 201 with a trash notice (and the trashed record's ID) instead
    of creating when the name belongs to a trashed record.
    """
    data = _request_data()

    errors: list[str] = []
    _check_string_types(data, ("name", "abbreviation", "status"), errors)
    name = _optional_str(data, "name")
    abbreviation = _optional_str(data, "abbreviation")
    status = _optional_str(data, "status")

    if name is None and not errors:
        errors.append("The name field is required.")
    if status is None and not errors:
        errors.append("The status field is required.")
    elif status is not None and status not in STATUSES:
        errors.append(STATUS_MESSAGE)
    _check_lengths(name, abbreviation, errors)
    if errors:
        raise ValidationError(errors)

    result = department_service.create_department(
        name=name, status=status, abbreviation=abbreviation
    )
    if result.in_trash:
        return jsonify(
            {
                "errors": {"message": [department_service.IN_TRASH_MESSAGE]},
                "id": result.trashed_id,
            }
        ), 201

    return _success(f"Department {result.department.department_name} created successfully.")


@bp.route("/departments", methods=["PUT"])
def update_department():
    """
    Update any of a live department's name, abbreviation or status.

    Omitted or null fields are left alone.  A blank ``abbreviation``
    clears it.
    """
    data = _request_data()
    department_id = _required_id(data)

    errors: list[str] = []
    _check_string_types(data, ("name", "abbreviation", "status"), errors)
    name = _optional_str(data, "name")
    status = _optional_str(data, "status")
    abbreviation = _optional_str(data, "abbreviation")
    if abbreviation is None and isinstance(data.get("abbreviation"), str):
        abbreviation = ""

    if isinstance(data.get("name"), str) and name is None:
        errors.append("The name field cannot be empty.")
    if status is not None and status not in STATUSES:
        errors.append(STATUS_MESSAGE)
    _check_lengths(name, abbreviation, errors)
    if errors:
        raise ValidationError(errors)

    department = department_service.update_department(
        department_id,
        name=name,
        abbreviation=abbreviation,
        status=status,
    )
    return _success(f"Department {department.department_name} updated successfully.")


@bp.route("/departments", methods=["DELETE"])
def delete_department():
    """Move a live department to the trash."""
    department_id = _required_id(_request_data())
    department = department_service.delete_department(department_id)
    return _success(f"Department {department.department_name} deleted successfully.")


@bp.route("/departments/restore", methods=["PUT"])
def restore_department():
    """Bring a trashed department back."""
    department_id = _required_id(_request_data())
    department = department_service.restore_department(department_id)
    return _success(f"Department {department.department_name} restored successfully.")
