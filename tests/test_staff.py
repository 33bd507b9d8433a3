import pytest

from tablepos.data import build_staff
from tablepos.models import StaffRole
from tablepos.staff import StaffRoster


def roster():
    return StaffRoster(build_staff())


def test_servers_are_active_waiters():
    assert [m.name for m in roster().servers()] == ["John Doe"]


def test_search_matches_name_email_and_role():
    staff = roster()

    assert [m.staff_id for m in staff.search("jane")] == ["u2"]
    assert [m.staff_id for m in staff.search("KITCHEN")] == ["u3"]
    assert [m.staff_id for m in staff.search("sarah@")] == ["u4"]
    assert len(staff.search("  ")) == 6


def test_add_and_deactivate():
    staff = roster()

    member = staff.add(" Pat Lee ", "pat@restaurant.com", "waiter")
    assert member.role is StaffRole.WAITER
    assert member.name == "Pat Lee"
    assert len(staff.servers()) == 2

    staff.deactivate(member.staff_id)
    assert not staff.get(member.staff_id).active
    assert len(staff.servers()) == 1


def test_update_unknown_member_is_ignored():
    assert roster().update("nobody", active=False) is None


def test_update_only_touches_known_fields():
    staff = roster()

    with pytest.raises(ValueError):
        staff.update("u1", nickname="Johnny")
    with pytest.raises(ValueError):
        staff.update("u1", staff_id="u9")

    assert staff.update("u1", role="manager").role is StaffRole.MANAGER
    assert staff.get("u1").name == "John Doe"
