"""
Policy Loader (``inventory_config.loader``).

Responsibility
--------------
Loads an inventory policy YAML file and parses it into an
``InventoryPolicy``.  The runtime entry point is
``inventory_config.get_active_policy()``; this module is its tooling.

File format
-----------
Either a top-level ``policy`` mapping or the fields at top level::

    policy:
      tax_rate: "0.10"
      safety_stock_days: 3
      default_lead_time_days: 7
      reorder_multiple: 10
      overstock_threshold_days: 90
      max_stock_level: 100000
      decimal_places: 2

Omitted fields keep their defaults.  Quote ``tax_rate`` to keep it exact;
unquoted YAML floats are converted through ``str()``.

Failure modes
-------------
* Missing file  -> ``PolicyFileNotFoundError``.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys, wrong types or out-of-range values  -> ``InvalidPolicyError``
  listing every problem.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from inventory_config.validator import validate_policy
from inventory_kernel.domain.policy import DEFAULT_POLICY, InventoryPolicy
from inventory_kernel.exceptions import InvalidPolicyError, PolicyFileNotFoundError

_POLICY_FIELDS: frozenset[str] = frozenset(f.name for f in fields(InventoryPolicy))


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        PolicyFileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    path = Path(path)
    if not path.is_file():
        raise PolicyFileNotFoundError(str(path))
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _parse_rate(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ValueError("boolean")
    if isinstance(value, (int, float, str, Decimal)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError("not a number") from None
    raise ValueError(f"unsupported type {type(value).__name__}")


def parse_policy(
    data: dict[str, Any],
    base: InventoryPolicy = DEFAULT_POLICY,
    source: str | None = None,
) -> InventoryPolicy:
    """
    Parse an ``InventoryPolicy`` from a dict, starting from ``base``.

    Raises:
        InvalidPolicyError: unknown keys or values of the wrong type.
    """
    if not isinstance(data, dict):
        raise InvalidPolicyError([f"policy must be a mapping, got {type(data).__name__}"], source)

    section = data.get("policy", data)
    if not isinstance(section, dict):
        raise InvalidPolicyError(["'policy' must be a mapping"], source)

    errors: list[str] = []
    unknown = sorted(set(section) - _POLICY_FIELDS)
    for key in unknown:
        errors.append(f"unknown policy field '{key}'")

    overrides: dict[str, Any] = {}
    for key, value in section.items():
        if key not in _POLICY_FIELDS:
            continue
        if key == "tax_rate":
            try:
                overrides[key] = _parse_rate(value)
            except ValueError as e:
                errors.append(f"tax_rate: {e} ({value!r})")
        elif isinstance(value, bool) or not isinstance(value, int):
            errors.append(f"{key} must be an integer, got {value!r}")
        else:
            overrides[key] = value

    if errors:
        raise InvalidPolicyError(errors, source)

    return base.with_overrides(**overrides)


def load_policy(path: Path | str) -> InventoryPolicy:
    """
    Load, parse and validate a policy file.

    Raises:
        PolicyFileNotFoundError, InvalidPolicyError, yaml.YAMLError
    """
    path = Path(path)
    policy = parse_policy(load_yaml_file(path), source=str(path))
    validation = validate_policy(policy)
    if not validation.is_valid:
        raise InvalidPolicyError(validation.errors, str(path))
    return policy


def compute_checksum(policy: InventoryPolicy) -> str:
    """
    SHA-256 of the canonical JSON form of ``policy``.

    Identical policies always produce identical checksums.
    """
    canonical = json.dumps(policy.to_dict(), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
