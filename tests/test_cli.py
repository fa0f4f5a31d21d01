"""
Tests for the custom Flask CLI commands.
"""

from jurusan.cli import SAMPLE_DEPARTMENTS
from jurusan.services import department_service


class TestSeedDepartments:
    """Tests for ``flask seed-departments``."""

    def test_seeds_every_sample_department(self, app, db_session):
        """A fresh database receives all sample records."""
        result = app.test_cli_runner().invoke(args=["seed-departments"])

        assert result.exit_code == 0
        assert f"Created {len(SAMPLE_DEPARTMENTS)} of" in result.output
        assert department_service.count_live() == len(SAMPLE_DEPARTMENTS)

    def test_second_run_skips_existing_names(self, app, db_session):
        """Running the seed twice does not duplicate records."""
        runner = app.test_cli_runner()
        runner.invoke(args=["seed-departments"])

        result = runner.invoke(args=["seed-departments"])

        assert result.exit_code == 0
        assert f"Created 0 of {len(SAMPLE_DEPARTMENTS)}" in result.output
        assert department_service.count_live() == len(SAMPLE_DEPARTMENTS)


class TestDbCheck:
    """Tests for ``flask db-check``."""

    def test_reports_ready_database(self, app, db_session):
        """With the schema in place every check passes."""
        result = app.test_cli_runner().invoke(args=["db-check"])

        assert result.exit_code == 0
        assert "All checks passed" in result.output
        assert "0 live, 0 in the trash" in result.output
