"""
Registry of policy modules keyed by name, with their enabled flags.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from regcheck.compliance.base import PolicyModule

logger = logging.getLogger("regcheck.services.registry")


class RegistryError(Exception):
    """Base class for registry configuration errors."""


class UnknownModuleError(RegistryError, KeyError):
    """Raised when a configuration operation names a module that was never registered."""

    def __init__(self, name: str):
        super().__init__(f"Compliance module '{name}' is not registered.")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class DuplicateNameError(RegistryError):
    """Raised when registering under a taken name with overwrite disabled."""

    def __init__(self, name: str):
        super().__init__(f"Compliance module '{name}' is already registered.")
        self.name = name


@dataclass(frozen=True)
class RegistryEntry:
    """A registered module instance and whether it takes part in evaluation rounds."""

    name: str
    instance: PolicyModule
    enabled: bool = True


class ModuleRegistry:
    """Ordered, lock-protected mapping of module name to `RegistryEntry`.

    Entries are immutable; every mutation swaps in a new entry under the lock,
    so a `snapshot()` taken by an evaluation round is never affected by later
    reconfiguration.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, RegistryEntry] = {}
        self._lock = threading.RLock()

    def register(
        self,
        name: str,
        instance: PolicyModule,
        *,
        overwrite: bool = True,
        enabled: Optional[bool] = None,
    ) -> RegistryEntry:
        """Add ``instance`` under ``name`` or replace the existing entry.

        A replaced entry keeps its position and, unless ``enabled`` is given,
        its enabled flag. New entries are enabled by default.
        """
        with self._lock:
            existing = self._entries.get(name)
            if existing is not None and not overwrite:
                raise DuplicateNameError(name)
            if enabled is None:
                enabled = existing.enabled if existing is not None else True
            entry = RegistryEntry(name=name, instance=instance, enabled=enabled)
            self._entries[name] = entry
        logger.info(
            "Compliance module registered",
            extra={"policy_module": name, "replaced": existing is not None, "enabled": enabled},
        )
        return entry

    def set_enabled(self, name: str, enabled: bool) -> None:
        """Toggle a module; names that were never registered are ignored."""
        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                logger.debug("Ignoring enable toggle for unknown module", extra={"policy_module": name})
                return
            if entry.enabled != enabled:
                self._entries[name] = replace(entry, enabled=enabled)

    def reconfigure(self, name: str, config: Optional[Mapping[str, Any]]) -> RegistryEntry:
        """Rebuild the module's variant with ``config``, keeping its enabled flag."""
        with self._lock:
            entry = self._entries.get(name)
            if entry is None:
                raise UnknownModuleError(name)
            instance = type(entry.instance)(dict(config or {}))
            updated = replace(entry, instance=instance)
            self._entries[name] = updated
        logger.info(
            "Compliance module reconfigured",
            extra={"policy_module": name, "variant": type(instance).__name__},
        )
        return updated

    def get(self, name: str) -> RegistryEntry:
        with self._lock:
            entry = self._entries.get(name)
        if entry is None:
            raise UnknownModuleError(name)
        return entry

    def is_enabled(self, name: str) -> bool:
        with self._lock:
            entry = self._entries.get(name)
        return bool(entry and entry.enabled)

    def available_names(self) -> Tuple[str, ...]:
        with self._lock:
            return tuple(self._entries)

    def enabled_names(self) -> Tuple[str, ...]:
        """Currently enabled names, in registration order."""
        with self._lock:
            return tuple(name for name, entry in self._entries.items() if entry.enabled)

    def snapshot(self) -> Tuple[Tuple[str, PolicyModule], ...]:
        """Enabled ``(name, instance)`` pairs frozen at call time, in registration order."""
        with self._lock:
            return tuple((name, entry.instance) for name, entry in self._entries.items() if entry.enabled)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "DuplicateNameError",
    "ModuleRegistry",
    "RegistryEntry",
    "RegistryError",
    "UnknownModuleError",
]
