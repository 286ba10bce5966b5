import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestDescriptor:
    """A single call to the backend; built per call and discarded afterwards"""
    method: str
    path: str
    body: Any = None
    extra_headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        method = str(self.method).upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        object.__setattr__(self, "method", method)
        if self.params is not None:
            object.__setattr__(self, "params", {k: v for k, v in self.params.items() if v is not None})

    @property
    def content(self) -> Optional[bytes]:
        """Serialized JSON body, or None when there is nothing to send"""
        if self.body is None:
            return None
        return json.dumps(self.body).encode("utf-8")


def build_url(base_url: str, path: str) -> str:
    return f"{base_url}{path}"


def build_headers(token: Optional[str],
                  default_headers: Optional[Mapping[str, str]] = None,
                  extra_headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """
    Assemble the outgoing headers.

    Content-Type is always JSON; configured defaults and then caller headers
    are merged over it. Authorization is added only when there is a token.
    """
    headers = {"Content-Type": JSON_CONTENT_TYPE}
    headers.update(default_headers or {})
    headers.update(extra_headers or {})
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
