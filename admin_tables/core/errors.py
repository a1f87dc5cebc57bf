"""Error types for tables and their data collaborators.

Only a failed collaborator call produces an error value; expected conditions
(missing lookups, empty filters, boundary pages) resolve to fallbacks instead.
"""


class AdminTablesError(Exception):
    """Base class for errors raised or surfaced by admin_tables."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class BackendError(AdminTablesError):
    """Raised by a data collaborator when a request fails.

    The message is the server-provided text and is shown to the user verbatim.
    """

    pass


class FetchError(AdminTablesError):
    """A collection could not be retrieved.

    Surfaced by replacing the table body with an error panel. No retry is
    initiated by the table.
    """

    pass


class MutationError(AdminTablesError):
    """A rename, update or delete request failed.

    Surfaced as an inline alert; the open dialog is closed and the current
    selection cleared.
    """

    pass


class ValidationError(AdminTablesError):
    """Local form validation failed before any request was made."""

    pass
