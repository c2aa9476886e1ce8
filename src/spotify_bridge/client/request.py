"""Replayable request descriptors."""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RequestDescriptor:
    """One remote call, replayed verbatim across retries.

    Only the Authorization header and the paging parameters are rewritten
    between attempts.
    """

    method: str
    path: str
    params: Dict[str, Any] = field(default_factory=dict)
    json: Any = None
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def get(cls, path: str, **params: Any) -> "RequestDescriptor":
        return cls("GET", path, params={k: v for k, v in params.items() if v is not None})

    @classmethod
    def post(cls, path: str, json: Any = None, **params: Any) -> "RequestDescriptor":
        return cls._with_body("POST", path, json, params)

    @classmethod
    def put(cls, path: str, json: Any = None, **params: Any) -> "RequestDescriptor":
        return cls._with_body("PUT", path, json, params)

    @classmethod
    def delete(cls, path: str, json: Any = None, **params: Any) -> "RequestDescriptor":
        return cls._with_body("DELETE", path, json, params)

    @classmethod
    def _with_body(
        cls, method: str, path: str, json: Any, params: Dict[str, Any]
    ) -> "RequestDescriptor":
        return cls(method, path, params={k: v for k, v in params.items() if v is not None}, json=json)

    @property
    def is_authorized(self) -> bool:
        return "Authorization" in self.headers

    def authorize(self, access_token: Optional[str]) -> None:
        self.headers["Authorization"] = f"Bearer {access_token}"

    def set_offset(self, offset: int) -> None:
        self.params["offset"] = offset

    def set_after(self, after: str) -> None:
        self.params["after"] = after

    def copy(self) -> "RequestDescriptor":
        return copy.deepcopy(self)
