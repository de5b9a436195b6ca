"""Errors raised while resolving branch histories."""


class LastCommonCommitsError(Exception):
    """Base class for every failure surfaced by the finder"""


class BranchNotFound(LastCommonCommitsError):
    """The branch (or the repository holding it) does not exist"""

    def __init__(self, branch, detail=None):
        self.branch = branch
        message = f"Branch not found: {branch}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RemoteUnavailable(LastCommonCommitsError):
    """The remote could not be reached or answered with something unusable"""


class Unauthorized(LastCommonCommitsError):
    """The remote rejected the credentials"""


class MalformedPage(LastCommonCommitsError):
    """A history page is missing a field the schema requires"""

    def __init__(self, field):
        self.field = field
        super().__init__(f"Malformed history page: missing or invalid '{field}'")
