# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Entry point for the cache maintenance runner.

Usage:
    python -m sealed_cache.runner < input.json > output.json

The runner reads a JSON maintenance request from stdin, runs it, and
writes a JSON result to stdout.

Exit codes:
    0: Success
    1: Failure (error details in JSON output)
"""

from __future__ import annotations

import asyncio
import logging
import sys

from .executor import Executor
from .schema import MaintenanceInput, MaintenanceOutput


def main() -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    # Diagnostics go to stderr; stdout carries only the JSON result.
    logging.basicConfig(stream=sys.stderr, level=logging.WARNING)
    try:
        input_data = MaintenanceInput.model_validate_json(sys.stdin.read())

        output = asyncio.run(Executor().execute(input_data))

        print(output.model_dump_json())

        return 0 if output.success else 1

    except Exception as e:
        # Ensure we always output valid JSON, even on unexpected errors
        error_output = MaintenanceOutput(
            success=False,
            error=str(e),
            error_type=type(e).__name__,
        )
        print(error_output.model_dump_json())
        return 1


if __name__ == "__main__":
    sys.exit(main())
