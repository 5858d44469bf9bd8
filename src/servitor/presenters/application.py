"""ApplicationPresenter — shapes one record into a JSON-ready dict.

Single contract: ``Presenter(record, actor=..., context=...).as_json()``.

- ``record`` is the model or plain object being presented.
- ``actor`` is whoever requests the data; subclasses use it for
  permission and tiering decisions.
- ``context`` carries extra flags, e.g. ``{"include": ["internal", "debug"]}``.

Presenters are stateless transforms: no I/O, no failure semantics of their own.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

EMPTY_CONTEXT: Mapping[str, Any] = MappingProxyType({})


def normalize_includes(raw: str | Iterable[str] | None) -> tuple[str, ...]:
    """Normalize include flags to a tuple of strings.

    Examples:
        >>> normalize_includes("internal")
        ('internal',)
        >>> normalize_includes(["internal", "debug"])
        ('internal', 'debug')
        >>> normalize_includes(None)
        ()
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    return tuple(str(item) for item in raw)


class ApplicationPresenter:
    """Base presenter. Subclasses implement :meth:`attributes`."""

    def __init__(
        self,
        record: Any,
        *,
        actor: Any = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.record = record
        self.actor = actor
        self.context: Mapping[str, Any] = context or EMPTY_CONTEXT
        self._includes: frozenset[str] | None = None

    def as_json(self) -> dict[str, Any]:
        return self.attributes()

    def to_dict(self) -> dict[str, Any]:
        return self.attributes()

    def attributes(self) -> dict[str, Any]:
        raise NotImplementedError(f"{type(self).__name__} must implement attributes()")

    @classmethod
    def collection(
        cls,
        records: Iterable[Any],
        *,
        actor: Any = None,
        context: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Present every record with the same actor and context.

        ``context["include"]`` is normalized once here and shared by every
        instance.
        """
        if context and context.get("include"):
            context = {**context, "include": normalize_includes(context["include"])}
        return [cls(record, actor=actor, context=context).as_json() for record in records]

    def includes(self, key: str | None) -> bool:
        """Whether the include flag *key* was requested.

        Used by subclasses to expose optional fields::

            if self.includes("internal"):
                data["internal_notes"] = self.record.internal_notes
        """
        if key is None or self.context.get("include") is None:
            return False
        if self._includes is None:
            self._includes = frozenset(normalize_includes(self.context["include"]))
        return key in self._includes
