"""
Unit tests for the leave type catalog loader.
"""

import pytest

from leave_engine import LeaveTypeCatalogError, load_leave_types


def test_default_catalog():
    """Test the bundled catalog holds the six default leave types."""
    leave_types = load_leave_types()
    allocations = {lt["name"]: lt["default_allocation_days"] for lt in leave_types}

    assert allocations == {
        "Annual Leave": 25,
        "Sick Leave": 10,
        "Personal Leave": 5,
        "Maternity Leave": 90,
        "Paternity Leave": 14,
        "Bereavement Leave": 5,
    }
    sick = next(lt for lt in leave_types if lt["name"] == "Sick Leave")
    assert sick["accrual_rules"]["requires_certificate"] is True


def test_missing_file(tmp_path):
    with pytest.raises(LeaveTypeCatalogError, match="not found"):
        load_leave_types(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    catalog = tmp_path / "leave_types.yaml"
    catalog.write_text("leave_types: [unclosed")

    with pytest.raises(LeaveTypeCatalogError, match="Invalid YAML"):
        load_leave_types(catalog)


def test_missing_root_key(tmp_path):
    catalog = tmp_path / "leave_types.yaml"
    catalog.write_text("types: []\n")

    with pytest.raises(LeaveTypeCatalogError, match="'leave_types' key"):
        load_leave_types(catalog)


def test_entry_missing_allocation(tmp_path):
    catalog = tmp_path / "leave_types.yaml"
    catalog.write_text("leave_types:\n  - name: Study Leave\n")

    with pytest.raises(LeaveTypeCatalogError, match="default_allocation_days"):
        load_leave_types(catalog)


def test_negative_allocation(tmp_path):
    catalog = tmp_path / "leave_types.yaml"
    catalog.write_text("leave_types:\n  - name: Study Leave\n    default_allocation_days: -1\n")

    with pytest.raises(LeaveTypeCatalogError, match="negative"):
        load_leave_types(catalog)
