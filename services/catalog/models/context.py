"""
Input context models.

Encapsulates all data required to process a catalog request.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from starlette.datastructures import Headers


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable view of an incoming request.

    Decouples the pipeline from FastAPI's Request object. Stages extend it
    with derived fields through attach(); the original fields never change.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    body: Optional[Mapping[str, Any]] = None
    path_params: Mapping[str, str] = field(default_factory=dict)
    derived: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def attach(self, **fields: Any) -> "RequestContext":
        """Return a copy of this context with extra derived fields."""
        merged: Dict[str, Any] = dict(self.derived)
        merged.update(fields)
        return replace(self, derived=MappingProxyType(merged))

    def get(self, name: str, default: Any = None) -> Any:
        """Read a derived field."""
        return self.derived.get(name, default)

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Mapping[str, Any]] = None,
        path_params: Optional[Mapping[str, str]] = None,
    ) -> "RequestContext":
        return cls(
            method=method.upper(),
            path=path,
            headers=Headers(headers=dict(headers or {})),
            body=MappingProxyType(dict(body)) if body is not None else None,
            path_params=MappingProxyType(dict(path_params or {})),
        )
