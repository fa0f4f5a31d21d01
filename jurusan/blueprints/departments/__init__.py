"""
Departments blueprint — JSON API for Jurusan records.

List, find, create, update, soft-delete and restore.  Responses use
the ``success`` / ``errors`` message envelopes and the table-widget
list payload (``draw``, ``recordsTotal``, ``recordsFiltered``, ``data``).
"""

from flask import Blueprint

bp = Blueprint("departments", __name__)

from jurusan.blueprints.departments import routes  # noqa: E402, F401
