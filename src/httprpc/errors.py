# httprpc/errors.py
import logging
from dataclasses import dataclass

MALFORMED_ENVELOPE_KIND = "MalformedEnvelope"
UNKNOWN_SERVICE_KIND = "UnknownService"
UNKNOWN_METHOD_KIND = "UnknownMethod"
ENCODING_FAILURE_KIND = "EncodingFailure"
NO_RESPONSE_KIND = "NoResponse"


@dataclass
class RPCError(Exception):
    kind: str
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class RemoteError(Exception):
    """Error envelope returned by a remote handler."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class RegistrationRejected(Exception):
    """A candidate method does not have the remote-call shape."""

    method: str
    reason: str
    level: int = logging.WARNING

    def __str__(self) -> str:
        return f"method {self.method} {self.reason}"


# Request-time failures (extend as needed)
MALFORMED_ENVELOPE = lambda d=None: RPCError(MALFORMED_ENVELOPE_KIND, f"rpc: malformed request: {d}")
ILL_FORMED_METHOD = lambda m=None: RPCError(UNKNOWN_SERVICE_KIND, f"rpc: service/method request ill-formed: {m}")
UNKNOWN_SERVICE = lambda m=None: RPCError(UNKNOWN_SERVICE_KIND, f"rpc: can't find service {m}")
UNKNOWN_METHOD = lambda m=None: RPCError(UNKNOWN_METHOD_KIND, f"rpc: can't find method {m}")
ENCODING_FAILURE = lambda d=None: RPCError(ENCODING_FAILURE_KIND, f"rpc: cannot encode reply: {d}")
NO_RESPONSE = lambda m=None: RPCError(NO_RESPONSE_KIND, f"rpc: no response for {m}")
