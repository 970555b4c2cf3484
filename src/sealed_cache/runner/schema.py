# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for maintenance runner input/output.

The runner reads one MaintenanceInput as JSON from stdin and always
answers with one MaintenanceOutput as JSON on stdout.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from sealed_cache.config import StoreConfigSchema

Operation = Literal["sweep", "invalidate", "invalidate_prefix", "clear"]


class MaintenanceInput(BaseModel):
    """A single maintenance request.

    Attributes:
        operation: What to do ("sweep", "invalidate", "invalidate_prefix", "clear")
        store: Store the operation runs against
        key: Cache key (for "invalidate")
        owner_id: Owner whose entries are removed (for "invalidate_prefix")
        namespace: Cache namespace (for "invalidate_prefix" and "clear")
    """

    operation: Operation
    store: StoreConfigSchema = Field(default_factory=StoreConfigSchema)
    key: str | None = None
    owner_id: str | None = None
    namespace: str | None = None


class MaintenanceOutput(BaseModel):
    """Result of a maintenance request.

    Attributes:
        success: Whether the operation completed
        removed: Entries removed, when the operation counts them
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    removed: int | None = None
    error: str = ""
    error_type: str = ""
