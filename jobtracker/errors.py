class JobTrackerError(Exception):
    """Base class for every error surfaced to the user."""


class CorruptStateError(JobTrackerError):
    """The persisted state exists but cannot be parsed."""


class NotFoundError(JobTrackerError):
    def __init__(self, app_id):
        super().__init__(f"Application with ID {app_id} not found.")
        self.app_id = app_id


class ValidationError(JobTrackerError):
    pass


class SourceUnreadableError(JobTrackerError):
    """The import file could not be opened or read."""


class WriteError(JobTrackerError):
    """An output file (state or report) could not be written."""
