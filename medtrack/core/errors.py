"""Domain error kinds raised by the access, workflow and alerting core.

None of these are transient; callers surface them instead of retrying.
"""


class MedTrackError(Exception):
    pass


class InvalidRole(MedTrackError):
    """A role value outside {admin, supplier, pharmacist}."""


class Unauthorized(MedTrackError):
    """The caller's roles do not grant the requested action."""


class InvalidTransition(MedTrackError):
    """Order status change not allowed by the state machine."""


class InvalidData(MedTrackError):
    """A store record with a malformed date or numeric field."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id
