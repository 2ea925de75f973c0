"""
Name: Permission Catalog Tests

Responsibilities:
  - Test catalog completeness (descriptions, categories)
  - Test parsing and validation of permission names
  - Test effective-set helpers
"""

import pytest

from worknest.identity.permissions import (
    ADMIN_ONLY_GRANTS,
    PERMISSION_CATEGORIES,
    PERMISSION_DESCRIPTIONS,
    Permission,
    UnknownPermissionError,
    all_permissions,
    has_all_permissions,
    has_any_permission,
    has_permission,
    parse_permissions,
)

pytestmark = pytest.mark.unit


class TestCatalog:
    def test_catalog_has_eighteen_capabilities(self):
        assert len(all_permissions()) == 18

    def test_every_permission_is_described(self):
        assert set(PERMISSION_DESCRIPTIONS) == set(Permission)

    def test_every_permission_belongs_to_one_category(self):
        grouped = [p for perms in PERMISSION_CATEGORIES.values() for p in perms]

        assert sorted(grouped) == sorted(Permission)
        assert len(grouped) == len(set(grouped))

    def test_only_manage_permissions_is_admin_only(self):
        assert ADMIN_ONLY_GRANTS == {Permission.MANAGE_PERMISSIONS}


class TestParsePermissions:
    def test_parses_dedupes_and_sorts_in_catalog_order(self):
        parsed = parse_permissions(["manage_tasks", "view_employees", "manage_tasks"])

        assert parsed == [Permission.VIEW_EMPLOYEES, Permission.MANAGE_TASKS]

    def test_empty_list_is_valid(self):
        assert parse_permissions([]) == []

    def test_unknown_names_are_reported(self):
        with pytest.raises(UnknownPermissionError) as exc_info:
            parse_permissions(["manage_tasks", "fly", "teleport"])

        assert exc_info.value.invalid == ["fly", "teleport"]
        assert "fly" in str(exc_info.value)


class TestEffectiveSetHelpers:
    def test_has_permission(self):
        effective = [Permission.MANAGE_TASKS]

        assert has_permission(effective, Permission.MANAGE_TASKS)
        assert not has_permission(effective, Permission.ASSIGN_TASKS)

    def test_any_and_all(self):
        effective = [Permission.MANAGE_TASKS, Permission.VIEW_PROJECTS]
        wanted = [Permission.MANAGE_TASKS, Permission.ASSIGN_TASKS]

        assert has_any_permission(effective, wanted) is True
        assert has_all_permissions(effective, wanted) is False
        assert has_all_permissions(effective, [Permission.VIEW_PROJECTS]) is True
