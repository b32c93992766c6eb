import json
from datetime import date

import pytest

from jobtracker.engines.importer import CsvImporter, DUPLICATE, INVALID, map_row
from jobtracker.errors import SourceUnreadableError
from jobtracker.models.database import ApplicationDatabase


# ============================================================
# map_row
# ============================================================


class TestMapRow:
    def test_full_row(self):
        mapping = map_row(["ACME", "Dev", "CV", "Bern", "2024-05-01"])
        assert mapping.ok
        assert mapping.fields == {
            "company": "ACME",
            "title": "Dev",
            "docs": "CV",
            "location": "Bern",
            "date_applied": date(2024, 5, 1)
        }

    def test_date_column_absent(self):
        mapping = map_row(["ACME", "Dev", "CV", "Bern", None, None])
        assert mapping.ok
        assert mapping.fields["date_applied"] is None

    def test_blank_date(self):
        assert map_row(["ACME", "Dev", "", "Bern", "  "]).fields["date_applied"] is None

    def test_strips_cells(self):
        assert map_row([" ACME ", " Dev", "", "Bern "]).fields["company"] == "ACME"

    def test_too_few_fields(self):
        mapping = map_row(["ACME", "Dev", None, None, None])
        assert not mapping.ok
        assert "got 2" in mapping.detail

    def test_too_many_fields(self):
        assert not map_row(["ACME", "Dev", "CV", "Bern", "2024-05-01", "extra"]).ok

    def test_empty_company(self):
        assert not map_row(["", "Dev", "CV", "Bern"]).ok

    def test_empty_title(self):
        assert not map_row(["ACME", "   ", "CV", "Bern"]).ok

    def test_empty_location(self):
        assert not map_row(["ACME", "Dev", "CV", ""]).ok

    def test_bad_date(self):
        mapping = map_row(["ACME", "Dev", "CV", "Bern", "soon"])
        assert not mapping.ok
        assert "soon" in mapping.detail

    def test_float_nan_treated_as_absent(self):
        assert map_row(["ACME", "Dev", "CV", "Bern", float("nan")]).ok


# ============================================================
# CsvImporter
# ============================================================


class TestCsvImporter:
    def test_imports_rows(self, database, write_csv):
        path = write_csv([
            "ACME;Backend Developer;CV;Zurich;2024-01-15",
            "Globex;Data Engineer;CV, cover letter;Bern;20.02.2024",
        ])
        summary = CsvImporter(database).run(path)

        assert summary.as_dict() == {"imported": 2, "skipped_duplicate": 0, "skipped_invalid": 0, "total": 2}
        apps = database.list()
        assert [app.id for app in apps] == [1, 2]
        assert apps[1].date_applied == date(2024, 2, 20)
        assert apps[1].docs == "CV, cover letter"

    def test_missing_date_defaults_to_today(self, database, write_csv):
        path = write_csv(["ACME;Dev;CV;Zurich"])
        CsvImporter(database).run(path)
        assert database.list()[0].date_applied == date.today()

    def test_persists_once(self, database, write_csv, state_path, monkeypatch):
        saves = []
        original_save = database.save

        def counting_save():
            saves.append(1)
            original_save()

        monkeypatch.setattr(database, "save", counting_save)
        path = write_csv([f"Company {i};Dev;CV;Bern" for i in range(4)])
        CsvImporter(database).run(path)

        assert len(saves) == 1
        assert len(ApplicationDatabase(state_path)) == 4

    def test_mixed_batch_summary(self, database, write_csv):
        database.add("Globex", "Data Engineer", "CV", "Bern")
        database.add("Hooli", "SRE", "CV", "Remote")
        path = write_csv([
            "ACME;Dev;CV;Zurich;2024-01-01",
            "Initech;QA;;Basel;2024-01-02",
            "Globex;Data Engineer;CV;Bern;2024-01-03",
            "Umbrella;Chemist;CV;Geneva;2024-01-04",
            ";Nameless;CV;Bern;2024-01-05",
            "Stark;Engineer;CV;Lausanne;2024-01-06",
            "Hooli;SRE;CV;Remote;2024-01-07",
            "Wayne;Analyst;CV;Lugano;2024-01-08",
            "Acme Corp;Designer;Portfolio;Zug;2024-01-09",
            "Cyberdyne;Researcher;CV;Chur;2024-01-10",
        ])
        summary = CsvImporter(database).run(path)

        assert summary.imported == 7
        assert summary.skipped_duplicate == 2
        assert summary.skipped_invalid == 1
        assert summary.total == 10
        assert {(s.row_number, s.reason) for s in summary.skipped} == {
            (3, DUPLICATE), (5, INVALID), (7, DUPLICATE)
        }
        assert [app.id for app in summary.added] == [3, 4, 5, 6, 7, 8, 9]

    def test_duplicates_do_not_overwrite(self, database, write_csv):
        database.add("ACME", "Dev", "CV", "Zurich")
        database.update(1, "Interview")
        path = write_csv(["ACME;Dev;Other docs;Geneva;2020-01-01"])
        CsvImporter(database).run(path)

        app = database.get(1)
        assert (app.docs, app.location, app.answer) == ("CV", "Zurich", "Interview")
        assert len(database) == 1

    def test_duplicate_within_batch(self, database, write_csv):
        path = write_csv(["ACME;Dev;CV;Zurich", "ACME;Dev;CV;Zurich"])
        summary = CsvImporter(database).run(path)
        assert (summary.imported, summary.skipped_duplicate) == (1, 1)

    def test_duplicate_match_is_case_sensitive(self, database, write_csv):
        database.add("ACME", "Dev", "CV", "Zurich")
        path = write_csv(["acme;Dev;CV;Zurich", "ACME;dev;CV;Zurich"])
        assert CsvImporter(database).run(path).imported == 2

    def test_second_import_is_idempotent(self, database, write_csv, state_path):
        path = write_csv([
            "ACME;Dev;CV;Zurich;2024-01-01",
            "Globex;Ops;CV;Bern;2024-01-02",
            "Initech;QA;CV;Basel;2024-01-03",
        ])
        first = CsvImporter(database).run(path)
        stored = state_path.read_text(encoding="utf-8")
        second = CsvImporter(database).run(path)

        assert first.imported == 3
        assert second.imported == 0
        assert second.skipped_duplicate == 3
        assert state_path.read_text(encoding="utf-8") == stored

    def test_wrong_column_count_is_invalid(self, database, write_csv):
        path = write_csv([
            "ACME;Dev",
            "Globex;Ops;CV;Bern;2024-01-02;unexpected;more",
            "Initech;QA;CV;Basel",
        ])
        summary = CsvImporter(database).run(path)
        assert summary.as_dict() == {"imported": 1, "skipped_duplicate": 0, "skipped_invalid": 2, "total": 3}

    def test_over_long_first_row_does_not_shift_later_rows(self, database, write_csv):
        path = write_csv([
            ";".join(["x"] * 25),
            "ACME;Dev;CV;Zurich",
            "Globex;Ops;CV;Bern",
        ])
        summary = CsvImporter(database).run(path)

        assert summary.as_dict() == {"imported": 2, "skipped_duplicate": 0, "skipped_invalid": 1, "total": 3}
        assert summary.skipped[0].row_number == 1
        assert [(app.company, app.location) for app in database.list()] == [("ACME", "Zurich"), ("Globex", "Bern")]

    def test_over_long_rows_anywhere(self, database, write_csv):
        path = write_csv([
            ";".join(["first"] * 22),
            "ACME;Dev;CV;Zurich;2024-01-01",
            ";".join(["middle"] * 30),
            "Globex;Ops;CV;Bern",
            "Initech;QA;CV;Basel;2024-01-03;one too many",
        ])
        summary = CsvImporter(database).run(path)

        assert summary.total == 5
        assert summary.skipped_invalid == 3
        assert summary.imported == 2
        assert [s.row_number for s in summary.skipped] == [1, 3, 5]
        assert database.get(1).date_applied == date(2024, 1, 1)

    def test_leading_blank_line_before_header(self, database, tmp_path):
        path = tmp_path / "applications.csv"
        path.write_text(
            "\n\ncompany;title;docs;location;date\nACME;Dev;CV;Zurich\n",
            encoding="utf-8",
        )
        summary = CsvImporter(database).run(path)
        assert summary.as_dict() == {"imported": 1, "skipped_duplicate": 0, "skipped_invalid": 0, "total": 1}

    def test_blank_lines_ignored(self, database, write_csv):
        path = write_csv(["ACME;Dev;CV;Zurich", "", "Globex;Ops;CV;Bern"])
        assert CsvImporter(database).run(path).total == 2

    def test_header_only(self, database, write_csv, state_path):
        path = write_csv([])
        summary = CsvImporter(database).run(path)
        assert summary.total == 0
        assert not state_path.exists()

    def test_empty_file(self, database, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")
        assert CsvImporter(database).run(path).total == 0

    def test_missing_file(self, database, tmp_path):
        with pytest.raises(SourceUnreadableError):
            CsvImporter(database).run(tmp_path / "missing.csv")

    def test_directory(self, database, tmp_path):
        with pytest.raises(SourceUnreadableError):
            CsvImporter(database).run(tmp_path)

    def test_unreadable_source_leaves_store_untouched(self, populated, state_path, tmp_path):
        before = json.loads(state_path.read_text(encoding="utf-8"))
        with pytest.raises(SourceUnreadableError):
            CsvImporter(populated).run(tmp_path / "missing.csv")
        assert json.loads(state_path.read_text(encoding="utf-8")) == before
