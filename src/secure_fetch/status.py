"""Status code policy.

Every standard status code maps to a fixed log severity and a
disposition: informational, success and 304 continue quietly, redirects
continue with a warning, client and server errors fail. Codes outside
the table fail as unhandled.
"""

import structlog

from src.secure_fetch.errors import StatusError
from src.secure_fetch.models import Disposition, Severity, StatusRule, StatusVerdict


logger = structlog.get_logger()

_CONTINUE_INFO = (Severity.INFO, Disposition.CONTINUE)
_CONTINUE_WARN = (Severity.WARNING, Disposition.CONTINUE)
_FAIL = (Severity.ERROR, Disposition.FAIL)

# code: (reason phrase, description, (severity, disposition))
_STATUS_TABLE: dict[int, tuple[str, str, tuple[Severity, Disposition]]] = {
    # Informational
    100: ("Continue", "The client should continue with its request.", _CONTINUE_INFO),
    101: ("Switching Protocols", "The server is switching protocols.", _CONTINUE_INFO),
    102: (
        "Processing",
        "The server is processing the request, but no response is available yet.",
        _CONTINUE_INFO,
    ),
    103: (
        "Early Hints",
        "The server is sending some response headers before the final response.",
        _CONTINUE_INFO,
    ),
    # Success
    200: ("OK", "The request has succeeded.", _CONTINUE_INFO),
    201: (
        "Created",
        "The request has been fulfilled and resulted in a new resource being created.",
        _CONTINUE_INFO,
    ),
    202: (
        "Accepted",
        "The request has been accepted for processing, but the processing has not been completed.",
        _CONTINUE_INFO,
    ),
    203: (
        "Non-Authoritative Information",
        "The server is returning information that is not from its origin.",
        _CONTINUE_INFO,
    ),
    204: (
        "No Content",
        "The server successfully processed the request, but is not returning any content.",
        _CONTINUE_INFO,
    ),
    205: (
        "Reset Content",
        "The server successfully processed the request, but requires the client to reset the document view.",
        _CONTINUE_INFO,
    ),
    206: (
        "Partial Content",
        "The server is delivering only part of the resource due to a range header sent by the client.",
        _CONTINUE_INFO,
    ),
    207: (
        "Multi-Status",
        "The message body contains multiple status codes for different operations.",
        _CONTINUE_INFO,
    ),
    208: (
        "Already Reported",
        "The members of a DAV binding have already been enumerated.",
        _CONTINUE_INFO,
    ),
    226: (
        "IM Used",
        "The response is a representation of the result of instance-manipulations applied to the current instance.",
        _CONTINUE_INFO,
    ),
    # Redirection
    300: (
        "Multiple Choices",
        "The request has more than one possible response.",
        _CONTINUE_WARN,
    ),
    301: (
        "Moved Permanently",
        "The URL of the requested resource has been changed permanently.",
        _CONTINUE_WARN,
    ),
    302: (
        "Found",
        "The requested resource has been temporarily moved to a different URI.",
        _CONTINUE_WARN,
    ),
    303: ("See Other", "The server is redirecting to a different URI.", _CONTINUE_WARN),
    304: (
        "Not Modified",
        "The resource has not been modified since the last request.",
        _CONTINUE_INFO,
    ),
    305: (
        "Use Proxy",
        "The requested resource is available only through a proxy.",
        _CONTINUE_WARN,
    ),
    307: (
        "Temporary Redirect",
        "The server is redirecting to a different URI without changing the request method.",
        _CONTINUE_WARN,
    ),
    308: (
        "Permanent Redirect",
        "The server is permanently redirecting without changing the request method.",
        _CONTINUE_WARN,
    ),
    # Client errors
    400: (
        "Bad Request",
        "The server could not understand the request due to invalid syntax.",
        _FAIL,
    ),
    401: (
        "Unauthorized",
        "The client must authenticate itself to get the requested response.",
        _FAIL,
    ),
    402: ("Payment Required", "Reserved for future use.", _FAIL),
    403: ("Forbidden", "The client does not have access rights to the content.", _FAIL),
    404: ("Not Found", "The server cannot find the requested resource.", _FAIL),
    405: (
        "Method Not Allowed",
        "The request method is known by the server but is not supported by the target resource.",
        _FAIL,
    ),
    406: (
        "Not Acceptable",
        "The server cannot produce a response matching the request's content negotiation headers.",
        _FAIL,
    ),
    407: (
        "Proxy Authentication Required",
        "The client must first authenticate itself with the proxy.",
        _FAIL,
    ),
    408: (
        "Request Timeout",
        "The server would like to shut down this unused connection.",
        _FAIL,
    ),
    409: (
        "Conflict",
        "The request conflicts with the current state of the server.",
        _FAIL,
    ),
    410: (
        "Gone",
        "The requested resource is no longer available and no forwarding address is known.",
        _FAIL,
    ),
    411: (
        "Length Required",
        "The server refuses to accept the request without a defined Content-Length.",
        _FAIL,
    ),
    412: (
        "Precondition Failed",
        "The server does not meet one of the preconditions in the request.",
        _FAIL,
    ),
    413: (
        "Payload Too Large",
        "The request is larger than the server is willing or able to process.",
        _FAIL,
    ),
    414: (
        "URI Too Long",
        "The URI requested by the client is longer than the server is willing to interpret.",
        _FAIL,
    ),
    415: (
        "Unsupported Media Type",
        "The media format of the requested data is not supported by the server.",
        _FAIL,
    ),
    416: (
        "Range Not Satisfiable",
        "The range specified by the Range header cannot be fulfilled.",
        _FAIL,
    ),
    417: (
        "Expectation Failed",
        "The server cannot meet the requirements of the Expect header field.",
        _FAIL,
    ),
    418: (
        "I'm a teapot",
        "The server refuses the attempt to brew coffee with a teapot.",
        _FAIL,
    ),
    421: (
        "Misdirected Request",
        "The request was directed at a server that is not able to produce a response.",
        _FAIL,
    ),
    422: (
        "Unprocessable Entity",
        "The request was well-formed but could not be followed due to semantic errors.",
        _FAIL,
    ),
    423: ("Locked", "The resource that is being accessed is locked.", _FAIL),
    424: (
        "Failed Dependency",
        "The request failed due to failure of a previous request.",
        _FAIL,
    ),
    425: (
        "Too Early",
        "The server is unwilling to risk processing a request that might be replayed.",
        _FAIL,
    ),
    426: (
        "Upgrade Required",
        "The server refuses to perform the request using the current protocol.",
        _FAIL,
    ),
    428: (
        "Precondition Required",
        "The origin server requires the request to be conditional.",
        _FAIL,
    ),
    429: (
        "Too Many Requests",
        "The user has sent too many requests in a given amount of time.",
        _FAIL,
    ),
    431: (
        "Request Header Fields Too Large",
        "The server is unwilling to process the request because its header fields are too large.",
        _FAIL,
    ),
    451: (
        "Unavailable For Legal Reasons",
        "The requested resource cannot be legally provided.",
        _FAIL,
    ),
    # Server errors
    500: (
        "Internal Server Error",
        "The server has encountered a situation it does not know how to handle.",
        _FAIL,
    ),
    501: (
        "Not Implemented",
        "The request method is not supported by the server and cannot be handled.",
        _FAIL,
    ),
    502: (
        "Bad Gateway",
        "The server, acting as a gateway, received an invalid response from upstream.",
        _FAIL,
    ),
    503: ("Service Unavailable", "The server is not ready to handle the request.", _FAIL),
    504: (
        "Gateway Timeout",
        "The server, acting as a gateway, did not get a response in time from upstream.",
        _FAIL,
    ),
    505: (
        "HTTP Version Not Supported",
        "The HTTP version used in the request is not supported by the server.",
        _FAIL,
    ),
    506: (
        "Variant Also Negotiates",
        "The server has an internal configuration error.",
        _FAIL,
    ),
    507: (
        "Insufficient Storage",
        "The server is unable to store the representation needed to complete the request.",
        _FAIL,
    ),
    508: (
        "Loop Detected",
        "The server detected an infinite loop while processing the request.",
        _FAIL,
    ),
    510: (
        "Not Extended",
        "Further extensions to the request are required for the server to fulfill it.",
        _FAIL,
    ),
    511: (
        "Network Authentication Required",
        "The client needs to authenticate to gain network access.",
        _FAIL,
    ),
}

STATUS_RULES: dict[int, StatusRule] = {
    code: StatusRule(
        code=code,
        reason=reason,
        description=description,
        severity=severity,
        disposition=disposition,
    )
    for code, (reason, description, (severity, disposition)) in _STATUS_TABLE.items()
}

_EVENTS: dict[tuple[Severity, Disposition], str] = {
    _CONTINUE_INFO: "status_informational",
    _CONTINUE_WARN: "status_redirect",
    _FAIL: "status_error",
}


def lookup(status_code: int) -> StatusRule | None:
    """Get the rule for a standard status code, or None."""
    return STATUS_RULES.get(status_code)


def is_standard(status_code: int) -> bool:
    """Check if a status code is in the standard table."""
    return status_code in STATUS_RULES


class StatusPolicy:
    """Evaluates response status codes against the static table."""

    def __init__(self) -> None:
        self._log = logger.bind(component="secure_fetch", subcomponent="status")

    def evaluate(
        self,
        status_code: int,
        resource_url: str,
        status_text: str = "",
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> StatusVerdict:
        """Log and judge a status code.

        Args:
            status_code: HTTP status code.
            resource_url: Final URL of the resource.
            status_text: Reason phrase reported by the server.
            log: Request-bound logger.

        Returns:
            Verdict with disposition, severity and message.
        """
        log = log.bind(subcomponent="status") if log is not None else self._log
        rule = lookup(status_code)

        if rule is None:
            log.warning(
                "status_unhandled",
                status_code=status_code,
                status_text=status_text,
                resource_url=resource_url,
            )
            return StatusVerdict(
                status_code=status_code,
                disposition=Disposition.FAIL,
                severity=Severity.WARNING,
                message=f"Unhandled status code: {status_code} - Resource: {resource_url}",
                standard=False,
            )

        emit = getattr(log, rule.severity.value)
        emit(
            _EVENTS[(rule.severity, rule.disposition)],
            status_code=status_code,
            reason=rule.reason,
            detail=rule.description,
            resource_url=resource_url,
        )

        if rule.disposition == Disposition.FAIL:
            message = f"{status_code} {rule.reason} - Resource: {resource_url}"
        else:
            message = f"{status_code} {rule.reason}"
        return StatusVerdict(
            status_code=status_code,
            disposition=rule.disposition,
            severity=rule.severity,
            message=message,
        )

    def enforce(
        self,
        status_code: int,
        resource_url: str,
        status_text: str = "",
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> StatusVerdict:
        """Evaluate a status code and raise if it fails.

        Raises:
            StatusError: If the disposition is FAIL.
        """
        verdict = self.evaluate(status_code, resource_url, status_text, log)
        if verdict.is_failure:
            raise StatusError(
                verdict.message,
                status_code=status_code,
                resource_url=resource_url,
                status_text=status_text,
            )
        return verdict
