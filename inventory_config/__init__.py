"""
inventory_config -- single public entrypoint for inventory policy.

Responsibility:
    Provides the ONLY way to obtain the inventory policy at runtime
    through ``get_active_policy()``.  No engine reads configuration files
    or environment variables; callers resolve a policy here and pass it
    to the engines.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and next to
    ``inventory_engines``.  The kernel and the engines MUST NEVER import
    from ``inventory_config``.

Resolution order:
    1. An explicit ``path`` argument.
    2. The file named by the ``INVENTORY_POLICY_FILE`` environment variable.
    3. ``DEFAULT_POLICY``.

Failure modes:
    - ``PolicyFileNotFoundError`` -- the resolved file does not exist.
    - ``InvalidPolicyError`` -- parse or validation errors.

Audit relevance:
    Every ``get_active_policy()`` call emits an ``INVENTORY_CONFIG_TRACE``
    log entry with the policy source and checksum.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from inventory_config.loader import compute_checksum, load_policy, parse_policy
from inventory_config.validator import PolicyValidationResult, validate_policy
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy

_logger = logging.getLogger("inventory_kernel.config")

POLICY_FILE_ENV = "INVENTORY_POLICY_FILE"


def get_active_policy(
    path: Path | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> InventoryPolicy:
    """
    Resolve the inventory policy in effect.

    Args:
        path: Policy YAML file; overrides the environment.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        A validated InventoryPolicy.
    """
    env = os.environ if environ is None else environ
    if path is None and env.get(POLICY_FILE_ENV):
        path = env[POLICY_FILE_ENV]

    if path is None:
        policy = DEFAULT_POLICY
        source = "default"
    else:
        policy = load_policy(path)
        source = str(path)

    validation = validate_policy(policy)
    for warning in validation.warnings:
        _logger.warning("inventory_policy_warning", extra={
            "source": source,
            "warning": warning,
        })

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "source": source,
            "checksum": compute_checksum(policy),
            "tax_rate": str(policy.tax_rate),
            "max_stock_level": policy.max_stock_level,
        },
    )
    return policy


__all__ = [
    "POLICY_FILE_ENV",
    "PolicyValidationResult",
    "compute_checksum",
    "get_active_policy",
    "load_policy",
    "parse_policy",
    "validate_policy",
]
