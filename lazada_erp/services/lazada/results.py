"""
Outcome of a Lazada API call.

Every call ends in exactly one of three shapes:

- RemoteSuccess: Lazada answered with code "0"
- RemoteBusinessError: Lazada answered, but with any other code (or none)
- RemoteTransportError: Lazada could not be reached, answered with a non-2xx
  status, or sent something that is not JSON

All three expose the same `succeeded / code / message / raw` projection, so
callers can either match on the type or just check `succeeded`.
`raise_for_failure()` turns the failures into the matching exception.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from lazada_erp.core.enums import LAZADA_SUCCESS_CODE
from lazada_erp.core.exceptions import BusinessError, TransportError


@dataclass(frozen=True)
class RemoteSuccess:
    raw: Dict[str, Any]
    code: str = LAZADA_SUCCESS_CODE
    message: Optional[str] = None
    succeeded: bool = field(default=True, init=False)

    @property
    def data(self) -> Any:
        return self.raw.get("data")

    def raise_for_failure(self) -> "RemoteSuccess":
        return self

    def describe(self) -> str:
        return "OK"


@dataclass(frozen=True)
class RemoteBusinessError:
    raw: Dict[str, Any]
    code: Optional[str] = None
    message: Optional[str] = None
    succeeded: bool = field(default=False, init=False)

    @property
    def request_id(self) -> Optional[str]:
        return self.raw.get("request_id")

    @property
    def error_type(self) -> Optional[str]:
        """ISV / ISP / SYSTEM, when Lazada says"""
        return self.raw.get("type")

    def raise_for_failure(self):
        raise BusinessError(self.describe(), code=self.code, payload=self.raw)

    def describe(self) -> str:
        return f"Lazada error {self.code or 'UNKNOWN'}: {self.message or 'no message'}"


@dataclass(frozen=True)
class RemoteTransportError:
    message: str
    status_code: Optional[int] = None
    body: Optional[str] = None
    succeeded: bool = field(default=False, init=False)

    @property
    def code(self) -> Optional[str]:
        return str(self.status_code) if self.status_code is not None else None

    @property
    def raw(self) -> Optional[str]:
        return self.body

    def raise_for_failure(self):
        raise TransportError(self.describe(), code=self.code, payload=self.body)

    def describe(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code} from Lazada: {self.message}"
        return f"Could not reach Lazada: {self.message}"


RemoteResult = Union[RemoteSuccess, RemoteBusinessError, RemoteTransportError]


def from_response_body(body: Dict[str, Any]) -> RemoteResult:
    """Project a decoded Lazada response onto success / business error."""
    code = body.get("code")
    message = body.get("message")
    if code == LAZADA_SUCCESS_CODE:
        return RemoteSuccess(raw=body, message=message)
    return RemoteBusinessError(raw=body, code=str(code) if code is not None else None, message=message)
