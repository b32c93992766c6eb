import json
import logging
import os
import tempfile
from pathlib import Path

from jobtracker.errors import CorruptStateError, NotFoundError, WriteError
from jobtracker.models.application import ApplicationRecord, validate_fields


class ApplicationDatabase:
    """JSON-backed store of application records.

    The whole collection lives in memory; every mutation rewrites the file
    through a temporary file that is renamed over the old one, so a crash
    mid-write leaves the previous state intact.

    On disk::

        {"last_id": 7, "applications": [{...}, ...]}

    ``last_id`` is the highest id ever issued, so ids of deleted records are
    never handed out again. A bare list of records is accepted on load.
    """

    def __init__(self, path, autoload=True):
        self.path = Path(path)
        self.applications = []
        self.last_id = 0
        if autoload:
            self.load()

    def load(self):
        """Load applications from the JSON file. A missing file means an empty store."""
        if not self.path.exists():
            logging.info(f"No state file at {self.path}, starting empty.")
            self.applications = []
            self.last_id = 0
            return self.applications

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CorruptStateError(f"State file {self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise CorruptStateError(f"State file {self.path} cannot be read: {e}") from e

        if isinstance(data, list):
            items, last_id = data, 0
        elif isinstance(data, dict) and isinstance(data.get("applications"), list):
            items, last_id = data["applications"], data.get("last_id", 0)
            if not isinstance(last_id, int) or isinstance(last_id, bool) or last_id < 0:
                raise CorruptStateError(f"State file {self.path} has an invalid last_id: {last_id!r}")
        else:
            raise CorruptStateError(f"State file {self.path} does not hold a list of applications")

        applications = []
        seen_ids = set()
        for index, item in enumerate(items):
            try:
                app = ApplicationRecord.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                raise CorruptStateError(f"State file {self.path}: entry {index} is malformed ({e})") from e
            if app.id in seen_ids:
                raise CorruptStateError(f"State file {self.path}: duplicate id {app.id}")
            seen_ids.add(app.id)
            applications.append(app)

        self.applications = applications
        self.last_id = max([last_id] + list(seen_ids))
        logging.info(f"Loaded {len(applications)} application(s) from {self.path}.")
        return self.applications

    def save(self):
        """Atomically overwrite the state file with the in-memory collection."""
        payload = {
            "last_id": self.last_id,
            "applications": [app.to_dict() for app in self.applications]
        }
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=4, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise WriteError(f"Could not write state file {self.path}: {e}") from e
        logging.info(f"Saved {len(self.applications)} application(s) to {self.path}.")

    # --- CRUD Operations ---
    def next_id(self):
        return max([self.last_id] + [app.id for app in self.applications]) + 1

    def add(self, company, title, docs, location, date_applied=None, persist=True):
        company, title, location = validate_fields(company, title, location)
        app = ApplicationRecord(
            app_id=self.next_id(),
            company=company,
            title=title,
            docs=(docs or "").strip(),
            location=location,
            date_applied=date_applied
        )
        self.applications.append(app)
        self.last_id = app.id
        if persist:
            self.save()
        return app

    def get(self, app_id):
        for app in self.applications:
            if app.id == app_id:
                return app
        raise NotFoundError(app_id)

    def update(self, app_id, answer):
        app = self.get(app_id)
        app.answer = (answer or "").strip()
        self.save()
        return app

    def delete(self, app_id):
        app = self.get(app_id)
        self.applications = [a for a in self.applications if a.id != app_id]
        self.save()
        return app

    def list(self):
        return list(self.applications)

    def __len__(self):
        return len(self.applications)
