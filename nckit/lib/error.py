import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from nckit import __version__


def _default_debugmode() -> str:
    if "dev" in __version__ or __version__ == "(unknown)":
        return "DEVELOPMENT"
    return "PRODUCTION"


## PYTHON_NCKIT_DEBUGMODE is one of DEBUG_PDB, DEBUG, DEVELOPMENT and
## PRODUCTION.  It is unrelated to the NCKIT_* connection variables.
## Development versions default to DEVELOPMENT.
debugmode = os.environ.get("PYTHON_NCKIT_DEBUGMODE") or _default_debugmode()

log = logging.getLogger("nckit")
log.setLevel(logging.DEBUG if debugmode.startswith("DEBUG") else logging.WARNING)


def weirdness(*reasons) -> None:
    """
    Something the server sent doesn't look the way it should, but we
    can carry on.  Logged as a warning, and with DEBUG_PDB the debugger
    is started right there.
    """
    from nckit.lib.debug import xmlstring

    reason = " : ".join(xmlstring(x) for x in reasons)
    log.warning("Deviation from expectations found: %s", reason)
    if debugmode == "DEBUG_PDB":
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"
    status: int = 0

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        if status:
            self.status = status

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class AuthorizationError(DAVError):
    """
    The client encountered an HTTP 401 or 403 error and is passing it on
    to the user. The url property will contain the url in question,
    the reason property will contain the excuse the server sent.
    """

    pass


class NotFoundError(DAVError):
    pass


class ConflictError(DAVError):
    pass


class PreconditionError(DAVError):
    pass


class LockedError(DAVError):
    """WebDAV 423, the resource is locked by someone else"""

    pass


class QuotaError(DAVError):
    """WebDAV 507, storage quota is reached"""

    pass


class ResponseError(DAVError):
    pass


class XMLError(DAVError):
    reason = "Invalid response, error decoding XML"


class InvalidDateError(DAVError):
    reason = "Invalid date format"


class URLError(DAVError):
    reason = "Invalid server url"


class OCSError(DAVError):
    """
    The OCS envelope carried a status code other than 100/200.  The
    ``status`` attribute holds the OCS status code, not the HTTP one.
    """

    pass


class FileNameError(DAVError):
    """Raised (or returned) by the file name validator"""

    pass


exception_by_status: Dict[int, Type[DAVError]] = defaultdict(lambda: ResponseError)
for status, exception in (
    (401, AuthorizationError),
    (403, AuthorizationError),
    (404, NotFoundError),
    (409, ConflictError),
    (412, PreconditionError),
    (423, LockedError),
    (507, QuotaError),
):
    exception_by_status[status] = exception


def error_for_response(response, url: Optional[str] = None) -> DAVError:
    """
    Build the exception matching a failed DAVResponse.  The message
    found in an OCS envelope or a Sabre ``<s:message>`` is preferred over
    the HTTP reason phrase.
    """
    from nckit.protocol.json_parsers import ocs_error_message
    from nckit.protocol.xml_parsers import dav_error_message

    reason = (
        ocs_error_message(response.body)
        or dav_error_message(response.body)
        or response.reason
    )
    return exception_by_status[response.status](
        url=url, reason=reason, status=response.status
    )
