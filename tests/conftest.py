from datetime import date

import pytest

from jobtracker.models.database import ApplicationDatabase

CSV_HEADER = "company;title;docs;location;date"


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "jobs.json"


@pytest.fixture
def database(state_path):
    return ApplicationDatabase(state_path)


@pytest.fixture
def populated(database):
    database.add("ACME", "Backend Developer", "CV", "Zurich", date(2024, 3, 1))
    database.add("Globex", "Data Engineer", "CV, cover letter", "Bern", date(2024, 3, 5))
    database.add("Initech", "QA Engineer", "", "Remote", date(2024, 3, 9))
    return database


@pytest.fixture
def write_csv(tmp_path):
    """Write data rows (header prepended) to a CSV file and return its path."""
    def _write(rows, name="applications.csv", header=CSV_HEADER):
        path = tmp_path / name
        path.write_text("\n".join([header] + list(rows)) + "\n", encoding="utf-8")
        return path
    return _write
