from jobtracker import config
from jobtracker.engines.importer import CsvImporter
from jobtracker.engines.report import ReportGenerator
from jobtracker.errors import ValidationError
from jobtracker.utils.date_utils import parse_date


class Controller:
    def __init__(self, database):
        self.database = database

    # ---------------- CRUD ----------------
    def create_application(self, data):
        date_applied = data.get("date")
        if date_applied:
            try:
                date_applied = parse_date(date_applied)
            except ValueError as e:
                raise ValidationError(str(e)) from e
        return self.database.add(
            company=data.get("company", ""),
            title=data.get("title", ""),
            docs=data.get("docs", ""),
            location=data.get("location", ""),
            date_applied=date_applied or None
        )

    def update_answer(self, app_id, answer):
        return self.database.update(app_id, answer)

    def delete_application(self, app_id):
        return self.database.delete(app_id)

    def list_applications(self):
        return self.database.list()

    # ---------------- IMPORT / EXPORT ----------------
    def import_csv(self, path):
        return CsvImporter(self.database).run(path)

    def export_pdf(self, output_path=config.REPORT_FILE, page_size=config.PAGE_SIZE):
        generator = ReportGenerator(page_size=page_size)
        return generator.export(self.database.list(), output_path)
