"""ServiceResult — the universal service contract.

INVARIANT: Every unit of work returns a ServiceResult.
Safe-mode callers branch on ``is_success``; strict-mode callers get the
result back only when it succeeded.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from enum import Enum
from http import HTTPStatus
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

OK = "ok"
UNPROCESSABLE = "unprocessable_entity"

# Shared read-only default; callers must only rely on its emptiness.
EMPTY_META: Mapping[str, Any] = MappingProxyType({})


def freeze_meta(meta: Mapping[str, Any] | None) -> Mapping[str, Any]:
    """Copy *meta* into a read-only mapping (``None`` becomes empty)."""
    if not meta:
        return EMPTY_META
    return MappingProxyType(dict(meta))


class ServiceResult(BaseModel):
    """Immutable outcome of one service invocation.

    Attributes:
        ok: Whether the operation succeeded.
        data: Payload on success.
        error: Error value on failure (a message, a model, anything).
        code: Symbolic status, ``"ok"`` or ``"unprocessable_entity"`` by default.
            Any hashable value is accepted (an enum member, an int, None).
        meta: Read-only metadata, never None.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    data: Any = None
    error: Any = None
    code: Hashable = OK
    meta: MappingProxyType = Field(default_factory=lambda: EMPTY_META)

    @field_validator("meta", mode="before")
    @classmethod
    def _freeze_meta(cls, value: Mapping[str, Any] | None) -> Mapping[str, Any]:
        return freeze_meta(value)

    @model_validator(mode="after")
    def _check_branch(self) -> ServiceResult:
        if self.ok and self.error is not None:
            raise ValueError("a successful result cannot carry an error")
        if not self.ok and self.data is not None:
            raise ValueError("a failed result cannot carry data")
        return self

    @field_serializer("meta")
    def _dump_meta(self, meta: Mapping[str, Any]) -> dict[str, Any]:
        return dict(meta)

    def __hash__(self) -> int:
        # Raises TypeError when data, error, or a meta value is unhashable.
        return hash((self.ok, self.data, self.error, self.code, frozenset(self.meta.items())))

    # mappingproxy cannot be pickled; ship meta as a plain dict.
    def __getstate__(self) -> dict[Any, Any]:
        state = super().__getstate__()
        state["__dict__"] = {**state["__dict__"], "meta": dict(self.meta)}
        return state

    def __setstate__(self, state: dict[Any, Any]) -> None:
        fields = dict(state.get("__dict__", {}))
        fields["meta"] = freeze_meta(fields.get("meta"))
        super().__setstate__({**state, "__dict__": fields})

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def success(
        cls,
        data: Any = None,
        *,
        code: Hashable = OK,
        meta: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, data=data, code=code, meta=meta)

    @classmethod
    def failure(
        cls,
        error: Any,
        *,
        code: Hashable = UNPROCESSABLE,
        meta: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(ok=False, error=error, code=code, meta=meta)

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def is_success(self) -> bool:
        return self.ok

    @property
    def is_failure(self) -> bool:
        return not self.ok

    @property
    def http_status(self) -> int | None:
        """HTTP status matching ``code`` (``"not_found"`` -> 404), if any.

        Enum members resolve by name, ints by value.
        """
        match self.code:
            case HTTPStatus() as status:
                return status.value
            case Enum() as member:
                name = member.name
            case str() as name:
                pass
            case int() as value if not isinstance(value, bool):
                try:
                    return HTTPStatus(value).value
                except ValueError:
                    return None
            case _:
                return None
        try:
            return HTTPStatus[name.upper()].value
        except KeyError:
            return None

    def on_success(self, fn: Callable[[Any], object]) -> ServiceResult:
        """Call ``fn(data)`` when successful. Always returns ``self``."""
        if self.ok:
            fn(self.data)
        return self

    def on_failure(self, fn: Callable[[Any, Hashable], object]) -> ServiceResult:
        """Call ``fn(error, code)`` when failed. Always returns ``self``."""
        if not self.ok:
            fn(self.error, self.code)
        return self

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="python")
