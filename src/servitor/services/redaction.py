"""Argument redaction for error reports.

Mirrors Rails' ``ParameterFilter``: string filters match keys as
case-insensitive substrings (``"passw"`` hides ``password`` and
``Password_Confirmation``), compiled patterns match via ``search``.
Nested mappings and sequences are walked; pydantic models and dataclasses
are dumped to dicts first so explicit parameter objects are filtered too.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel

FILTERED = "[FILTERED]"


class ParameterFilter:
    """Replace values of denylisted keys with a mask.

    Parameters:
        filters: Key names (substring match) or compiled regex patterns.
        mask: Replacement value for filtered entries.
    """

    def __init__(
        self,
        filters: Iterable[str | re.Pattern[str]] = (),
        *,
        mask: str = FILTERED,
    ) -> None:
        self._mask = mask
        strings: list[str] = []
        self._patterns: list[re.Pattern[str]] = []
        for item in filters:
            if isinstance(item, re.Pattern):
                self._patterns.append(item)
            else:
                strings.append(re.escape(str(item)))
        if strings:
            self._patterns.append(re.compile("|".join(strings), re.IGNORECASE))

    @property
    def mask(self) -> str:
        return self._mask

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def matches(self, key: object) -> bool:
        text = str(key)
        return any(p.search(text) for p in self._patterns)

    def filter(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Return a redacted deep copy of *params*. The input is not modified."""
        return {key: self._filter_entry(key, value) for key, value in params.items()}

    def filter_call(self, args: tuple[Any, ...], kwargs: Mapping[str, Any]) -> dict[str, Any]:
        """Redact positional and keyword invocation arguments together."""
        return self.filter({"args": list(args), "kwargs": dict(kwargs)})

    def _filter_entry(self, key: object, value: Any) -> Any:
        if self._patterns and self.matches(key):
            return self._mask
        return self._filter_value(value)

    def _filter_value(self, value: Any) -> Any:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="python")
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)

        if isinstance(value, Mapping):
            return {k: self._filter_entry(k, v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._filter_value(v) for v in value]
        return value
