from datetime import date as _date

from jobtracker.errors import ValidationError
from jobtracker.utils.date_utils import parse_date

REQUIRED_FIELDS = ("company", "title", "location")


def validate_fields(company, title, location):
    """Return stripped (company, title, location), or raise ValidationError naming the empty ones."""
    values = {
        "company": (company or "").strip(),
        "title": (title or "").strip(),
        "location": (location or "").strip(),
    }
    missing = [name for name in REQUIRED_FIELDS if not values[name]]
    if missing:
        raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
    return values["company"], values["title"], values["location"]


class ApplicationRecord:
    def __init__(self, app_id, company, title, docs="", location="", date_applied=None, answer=""):
        self.id = app_id
        self.company = company
        self.title = title
        self.docs = docs
        self.location = location
        self.date_applied = date_applied or _date.today()
        self.answer = answer

    @property
    def id(self):
        return self._id

    @id.setter
    def id(self, value):
        if getattr(self, "_id", None) is not None:
            raise AttributeError("Application id is immutable")
        self._id = value

    def to_dict(self):
        return {
            "id": self.id,
            "company": self.company,
            "title": self.title,
            "docs": self.docs,
            "location": self.location,
            "date_applied": self.date_applied.isoformat(),
            "answer": self.answer
        }

    @classmethod
    def from_dict(cls, data):
        """Build a record from its persisted form.

        Raises KeyError, TypeError or ValueError when the data is not a
        well-formed record; the store turns those into CorruptStateError.
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an object, got {type(data).__name__}")

        app_id = data["id"]
        if not isinstance(app_id, int) or isinstance(app_id, bool) or app_id < 1:
            raise ValueError(f"Invalid id: {app_id!r}")

        text = {}
        for key in ("company", "title", "docs", "location", "answer"):
            value = data.get(key, "")
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise TypeError(f"Field '{key}' of application {app_id} must be text")
            text[key] = value

        if not text["company"] or not text["title"]:
            raise ValueError(f"Application {app_id} has an empty company or title")

        return cls(
            app_id=app_id,
            company=text["company"],
            title=text["title"],
            docs=text["docs"],
            location=text["location"],
            date_applied=parse_date(data["date_applied"]),
            answer=text["answer"]
        )

    def duplicate_key(self):
        return (self.company, self.title)

    def __eq__(self, other):
        if not isinstance(other, ApplicationRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"ApplicationRecord(id={self.id}, company={self.company!r}, title={self.title!r})"
