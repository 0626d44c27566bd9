from __future__ import annotations


class DataAccessError(Exception):
    """The catalog query could not be completed against the database.

    Raised for driver-level failures only; a product that does not exist is
    reported as ``None`` by the service, never through this exception.
    """

    MESSAGE = "Data could not be retrieved from the database."

    def __init__(self, action: str, detail: str | None = None):
        self.action = action
        self.detail = detail
        msg = f"{self.MESSAGE} ({action}"
        msg += f": {detail})" if detail else ")"
        super().__init__(msg)
