# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for cache maintenance from the command line.

Usage:
    python -m sealed_cache.runner < input.json > output.json

Exports:
    Executor: Runs one maintenance request
    MaintenanceInput: Request schema
    MaintenanceOutput: Result schema
"""

from .executor import Executor
from .schema import MaintenanceInput, MaintenanceOutput

__all__ = [
    "Executor",
    "MaintenanceInput",
    "MaintenanceOutput",
]
