"""Shared behaviour for result dataclasses made of traced values."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Dict, Iterator

from models.traced import TracedValue


def _to_plain(value: Any) -> Any:
    if isinstance(value, (TracedValue, TracedResult)):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_plain(v) for k, v in value.items()}
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


class TracedResult:
    """
    Mixin for frozen result dataclasses.

    Walks the dataclass fields to find every TracedValue, including those
    inside nested results. Absent schedules stay as ``None`` keys in
    ``to_dict`` so consumers always see the full shape.
    """

    def traced_values(self) -> Iterator[TracedValue]:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, TracedValue):
                yield value
            elif isinstance(value, TracedResult):
                yield from value.traced_values()
            elif isinstance(value, (list, tuple)):
                for item in value:
                    if isinstance(item, TracedValue):
                        yield item
                    elif isinstance(item, TracedResult):
                        yield from item.traced_values()

    def values_by_node(self) -> Dict[str, TracedValue]:
        return {tv.node_id: tv for tv in self.traced_values()}

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _to_plain(getattr(self, f.name)) for f in fields(self)}
