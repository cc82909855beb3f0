"""
Leave type catalog.

Loads the default leave types from leave_types.yaml so a fresh
deployment has something to request against.
"""

from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import LeaveTypeCatalogError

CATALOG_FILE = Path(__file__).parent / "leave_types.yaml"

REQUIRED_FIELDS = ("name", "default_allocation_days")


def load_leave_types(catalog_file: Optional[Path] = None) -> list[dict[str, Any]]:
    """
    Load leave type definitions.

    Args:
        catalog_file: Alternate YAML file (defaults to the bundled catalog)

    Returns:
        List of leave type dictionaries with name, description,
        default_allocation_days and accrual_rules

    Raises:
        LeaveTypeCatalogError: If the file is missing, unparsable or incomplete
    """
    path = Path(catalog_file) if catalog_file else CATALOG_FILE

    if not path.exists():
        raise LeaveTypeCatalogError(f"Leave type catalog not found at {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise LeaveTypeCatalogError(f"Invalid YAML format in {path.name}: {e}") from e

    if not data or "leave_types" not in data:
        raise LeaveTypeCatalogError(f"{path.name} must contain a 'leave_types' key")

    leave_types = []
    for entry in data["leave_types"]:
        missing = [field for field in REQUIRED_FIELDS if field not in entry]
        if missing:
            raise LeaveTypeCatalogError(
                f"Leave type {entry.get('name', '<unnamed>')!r} is missing {', '.join(missing)}"
            )
        if int(entry["default_allocation_days"]) < 0:
            raise LeaveTypeCatalogError(
                f"Leave type {entry['name']!r} has a negative allocation"
            )
        leave_types.append(
            {
                "name": entry["name"],
                "description": entry.get("description"),
                "default_allocation_days": int(entry["default_allocation_days"]),
                "accrual_rules": entry.get("accrual_rules") or {},
            }
        )
    return leave_types
