"""
Tests for scripts/import_recruiters.py
"""

import json
import logging

import pytest
from unittest.mock import MagicMock

from scripts import import_recruiters
from src.common.error_handling import MissingEmailColumnError, StorageUnavailableError
from src.common.types import ImportResult
from tests.fixtures.sample_sheets import MIXED_SHEET_CSV, NO_EMAIL_COLUMN_CSV, SHEET_URL


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "recruiters.csv"
    path.write_text(MIXED_SHEET_CSV, encoding="utf-8")
    return path


@pytest.fixture
def mock_service(mocker):
    mocker.patch.object(import_recruiters.Config, "validate", return_value=[])
    mocker.patch.object(import_recruiters, "setup_logging")
    service = MagicMock()
    service.import_from_sheet.return_value = ImportResult(total_rows=2, valid_count=2, inserted_count=2)
    service.import_csv_text.return_value = ImportResult(total_rows=2, valid_count=2, inserted_count=2)
    mocker.patch.object(import_recruiters, "RecruiterImportService", return_value=service)
    return service


class TestImportRecruitersCli:

    def test_sheet_url(self, mock_service, capsys):
        exit_code = import_recruiters.main(["--sheet-url", SHEET_URL])

        assert exit_code == 0
        mock_service.import_from_sheet.assert_called_once_with(SHEET_URL, skip_duplicates=True)
        assert "Import completed: 2 inserted, 0 skipped" in capsys.readouterr().out

    def test_csv_file_with_allow_duplicates(self, mock_service, csv_file):
        exit_code = import_recruiters.main(["--csv-file", str(csv_file), "--allow-duplicates"])

        assert exit_code == 0
        args, kwargs = mock_service.import_csv_text.call_args
        assert args[0] == MIXED_SHEET_CSV
        assert kwargs["skip_duplicates"] is False
        assert kwargs["source"] == str(csv_file)

    def test_json_output(self, mock_service, capsys):
        import_recruiters.main(["--sheet-url", SHEET_URL, "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["stats"]["inserted"] == 2

    def test_ensure_indexes(self, mock_service):
        import_recruiters.main(["--sheet-url", SHEET_URL, "--ensure-indexes"])

        mock_service.ensure_indexes.assert_called_once()

    def test_precondition_error_exit_code(self, mock_service, capsys):
        mock_service.import_from_sheet.side_effect = MissingEmailColumnError(["name"])

        exit_code = import_recruiters.main(["--sheet-url", SHEET_URL])

        assert exit_code == 1
        assert "Required column 'email' not found" in capsys.readouterr().out

    def test_storage_error_exit_code(self, mock_service):
        mock_service.import_from_sheet.side_effect = StorageUnavailableError("MongoDB unreachable")

        assert import_recruiters.main(["--sheet-url", SHEET_URL]) == 1

    def test_invalid_config(self, mocker, mock_service):
        mocker.patch.object(import_recruiters.Config, "validate", return_value=["MONGODB_URI is not set"])

        assert import_recruiters.main(["--sheet-url", SHEET_URL]) == 1
        mock_service.import_from_sheet.assert_not_called()

    def test_source_is_required(self):
        with pytest.raises(SystemExit):
            import_recruiters.main([])

    def test_dry_run_touches_no_storage(self, mock_service, csv_file, capsys):
        exit_code = import_recruiters.main(["--csv-file", str(csv_file), "--dry-run", "--json"])

        assert exit_code == 0
        mock_service.import_csv_text.assert_not_called()
        data = json.loads(capsys.readouterr().out)
        assert data["stats"] == {"total_rows": 4, "valid_recruiters": 3, "skipped_invalid": 1}
        assert data["errors"] == ["Row 3: invalid email format: bad-email"]

    def test_dry_run_requires_csv_file(self, mock_service):
        assert import_recruiters.main(["--sheet-url", SHEET_URL, "--dry-run"]) == 2

    def test_dry_run_missing_email_column(self, mock_service, tmp_path, capsys):
        path = tmp_path / "no_email.csv"
        path.write_text(NO_EMAIL_COLUMN_CSV, encoding="utf-8")

        exit_code = import_recruiters.main(["--csv-file", str(path), "--dry-run"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert "Import failed: Required column 'email' not found in header" in out
        assert "Found columns: name, company" in out

    def test_real_logging_setup(self, mocker, csv_file):
        setup = mocker.spy(import_recruiters, "setup_logging")

        assert import_recruiters.main(["--csv-file", str(csv_file), "--dry-run"]) == 0

        setup.assert_called_once()
        assert len(logging.getLogger().handlers) == 1


class TestDryRun:

    def test_missing_email_column_is_reported(self):
        response = import_recruiters.dry_run(NO_EMAIL_COLUMN_CSV)

        assert response["success"] is False
        assert response["error"].endswith("Found columns: name, company")

    def test_empty_text(self):
        assert import_recruiters.dry_run("") == {"success": False, "error": "Sheet is empty or has no data rows"}
