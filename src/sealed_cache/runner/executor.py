# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Maintenance executor — runs one cache maintenance operation.

Builds a CacheManager over the configured store, dispatches the
requested operation, and always closes the store it created.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sealed_cache.config import create_store
from sealed_cache.exceptions import ConfigError
from sealed_cache.manager import CacheManager

from .schema import MaintenanceInput, MaintenanceOutput

if TYPE_CHECKING:
    from sealed_cache._internal.clock import Clock
    from sealed_cache.stores.base import Store


class Executor:
    """Runs maintenance requests against a cache store.

    Example:
        executor = Executor()
        output = await executor.execute(
            MaintenanceInput(operation="sweep", store={"type": "sqlite", "path": "cache.db"})
        )
    """

    def __init__(self, store: Store | None = None, clock: Clock | None = None) -> None:
        """Initialize executor.

        Args:
            store: Optional store to use instead of creating one from config.
                Useful for testing; an injected store is never closed.
            clock: Optional clock for expiry decisions.
        """
        self._injected_store = store
        self._clock = clock

    async def execute(self, input_data: MaintenanceInput) -> MaintenanceOutput:
        """Execute a maintenance request.

        Never raises: every failure becomes a MaintenanceOutput with
        ``success=False``.
        """
        try:
            return await self._execute_internal(input_data)
        except ConfigError as e:
            return MaintenanceOutput(success=False, error=str(e), error_type="ConfigError")
        except Exception as e:
            return MaintenanceOutput(success=False, error=str(e), error_type=type(e).__name__)

    async def _execute_internal(self, input_data: MaintenanceInput) -> MaintenanceOutput:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        store = self._injected_store or create_store(input_data.store)
        owns_store = self._injected_store is None

        try:
            manager = CacheManager(store, clock=self._clock)
            op = input_data.operation

            if op == "sweep":
                removed = await manager.sweep_expired()
                return MaintenanceOutput(success=True, removed=removed)

            if op == "invalidate":
                if not input_data.key:
                    raise ConfigError("'invalidate' requires 'key'")
                await manager.invalidate(input_data.key)
                return MaintenanceOutput(success=True)

            if op == "invalidate_prefix":
                if not input_data.owner_id or not input_data.namespace:
                    raise ConfigError("'invalidate_prefix' requires 'owner_id' and 'namespace'")
                removed = await manager.invalidate_prefix(input_data.owner_id, input_data.namespace)
                return MaintenanceOutput(success=True, removed=removed)

            if not input_data.namespace:
                raise ConfigError("'clear' requires 'namespace'")
            await manager.clear(input_data.namespace)
            return MaintenanceOutput(success=True)
        finally:
            if owns_store:
                await store.close()
