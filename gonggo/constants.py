"""Protocol keys, buffer limits and status codes shared across the server."""

from enum import IntEnum

GONGGOLOGBUFLEN = 500
TMSTRBUFLEN = 35
SHMPATHBUFLEN = 51
PROXYNAMEBUFLEN = 51
UUIDBUFLEN = 37
RID_MAX_LENGTH = UUIDBUFLEN - 1

CLIENTREPLY_HEADERS_KEY = "headers"
CLIENTREPLY_PAYLOAD_KEY = "payload"
CLIENTREPLY_TIMEOUT_KEY = "timeout"

CLIENTREPLY_REQUEST_STATUS_KEY = "requestStatus"
CLIENTREPLY_SERVICE_STATUS_KEY = "serviceStatus"
CLIENTREPLY_SERVICE_RID_KEY = "rid"
CLIENTREPLY_SERVICE_PROXY_KEY = "proxy"

# Must match the keys used by proxies.
SERVICE_HEADERS_KEY = "headers"
SERVICE_PAYLOAD_KEY = "payload"
SERVICE_PROXY_KEY = "proxy"
SERVICE_SERVICE_KEY = "service"
SERVICE_RID_KEY = "rid"

# Reserved service name used to tell a proxy that a request was dropped.
GONGGOSERVICE_REQUEST_DROP = "gonggorequestdrop"


class ServiceStatus(IntEnum):
    """Request parsing and delivery status reported to clients."""

    ACKNOWLEDGED = 1
    HEADERS_MISSING = 2
    RID_MISSING = 3
    RID_OVERLENGTH = 4
    SERVICE_MISSING = 5
    SERVICE_RESERVED = 6
    PAYLOAD_MISSING = 7
    PAYLOAD_INVALID = 8
    GONGGO_SERVICE_INVALID = 9
    TIMEOUT_MISSING = 10
    TIMEOUT_INVALID = 11

    ANSWERED = 20
    PROXY_ALIVE_NOTIFICATION = 21
    EXPIRED = 22

    PROXY_START = 30
    PROXY_TERMINATED = 31


class TestStatus(IntEnum):
    """Status of the built-in ``test`` service."""

    __test__ = False

    SUCCESS = 1


class ResponseDumpStatus(IntEnum):
    """Status of the built-in ``responseDump`` service."""

    SUCCESS = 1
    DB_ERROR = 2


class ProxyServiceStatus(IntEnum):
    """Service status values shared with proxies."""

    ALIVE_START = 1
    ALIVE_TERMINATION = 2
    MULTIRESPOND_CLEAR_SUCCESS = 3
    MULTIRESPOND_CLEAR_PAYLOAD_MISSING = 4
    MULTIRESPOND_CLEAR_PAYLOAD_RID_MISSING = 5
    MULTIRESPOND_CLEAR_PAYLOAD_RID_INVALID = 6


class ExitCode(IntEnum):
    """Exit status of the server worker."""

    OK = 0
    TERMHANDLER = 1
    START = 2
    DBINIT = 3