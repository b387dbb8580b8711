"""Hot-reloadable table of named alert endpoints."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from types import MappingProxyType

import structlog
from pydantic import ValidationError

from src.alertpost.exceptions import ConfigTypeMismatchError, DuplicateEndpointError
from src.core.config import EndpointConfig

logger = structlog.get_logger(__name__)


def parse_endpoint_configs(items: Iterable[object]) -> list[EndpointConfig]:
    """Validate raw endpoint definitions into ``EndpointConfig`` records.

    Accepts records or plain mappings (as decoded from YAML/JSON). The
    whole batch fails if any element is neither, or does not validate.
    """
    records: list[EndpointConfig] = []
    for i, item in enumerate(items):
        if isinstance(item, EndpointConfig):
            records.append(item)
        elif isinstance(item, Mapping):
            try:
                records.append(EndpointConfig.model_validate(dict(item)))
            except ValidationError as exc:
                raise ConfigTypeMismatchError(
                    f"invalid endpoint config at index {i}: {exc}"
                ) from exc
        else:
            raise ConfigTypeMismatchError(
                f"unexpected config object type at index {i}, "
                f"got {type(item).__name__} exp EndpointConfig"
            )
    return records


class EndpointRegistry:
    """Maps endpoint names to their delivery configuration.

    The table is never mutated: :meth:`replace` builds a new one off to the
    side and swaps the reference under the write lock, so a concurrent
    :meth:`lookup` sees either the old table or the new one, never a mix.
    Lookups read the current reference without taking the lock.
    """

    def __init__(self, records: Iterable[EndpointConfig] = ()) -> None:
        self._write_lock = threading.Lock()
        self._table: Mapping[str, EndpointConfig] = MappingProxyType({})
        self.replace(records)

    def replace(self, records: Iterable[EndpointConfig]) -> None:
        """Install *records* as the complete table, discarding the old one.

        Raises:
            ConfigTypeMismatchError: An element is not an ``EndpointConfig``.
            DuplicateEndpointError: Two records share a name.
        """
        table: dict[str, EndpointConfig] = {}
        for record in records:
            if not isinstance(record, EndpointConfig):
                raise ConfigTypeMismatchError(
                    f"unexpected config object type, got {type(record).__name__} "
                    "exp EndpointConfig"
                )
            if record.name in table:
                raise DuplicateEndpointError(f"duplicate endpoint name {record.name!r}")
            table[record.name] = record

        frozen = MappingProxyType(table)
        with self._write_lock:
            self._table = frozen

        logger.info("alertpost_endpoints_replaced", count=len(table))

    def lookup(self, name: str) -> EndpointConfig | None:
        """Return the record registered under *name*, or None."""
        return self._table.get(name)

    def names(self) -> list[str]:
        return sorted(self._table)

    def snapshot(self) -> dict[str, EndpointConfig]:
        """Copy of the current table."""
        return dict(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, name: object) -> bool:
        return name in self._table
