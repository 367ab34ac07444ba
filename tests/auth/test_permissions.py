from academy_console.auth.model import User, user_from_payload
from academy_console.auth.permissions import has_module, has_permission
from academy_console.core.enums import UserRole
from academy_console.web.navigation import visible_menu


def _user(role=UserRole.STAFF, permissions=None, modules=("core",)):
    return User(user_id=2, email="staff@academy.test", name="직원", role=role, academy_id=7, permissions=permissions, modules=modules)


def test_owner_and_admin_can_do_everything():
    assert has_permission(_user(UserRole.OWNER), "payments", "delete")
    assert has_permission(_user(UserRole.ADMIN), "staff", "edit")


def test_staff_follows_permission_grid():
    user = _user(permissions={"students": {"view": True, "edit": False}})

    assert has_permission(user, "students", "view")
    assert not has_permission(user, "students", "edit")
    assert not has_permission(user, "payments", "view")


def test_nobody_signed_in():
    assert not has_permission(None, "students")
    assert not has_module(None, "core")


def test_core_module_is_always_on():
    user = _user(modules=())

    assert has_module(user, "core")
    assert not has_module(user, "training")


def test_user_from_payload_tolerates_unknown_role():
    user = user_from_payload({"id": "5", "email": "x@y.z", "role": "janitor", "academy_id": "", "permissions": []})

    assert user.user_id == 5
    assert user.role == UserRole.STAFF
    assert user.academy_id is None
    assert user.permissions is None


def test_session_copy_round_trips():
    user = _user(permissions={"students": {"view": True}}, modules=("core", "training"))

    assert user_from_payload(user.to_session()) == user


def test_menu_hides_disabled_modules_and_denied_pages():
    user = _user(permissions={"students": {"view": True}}, modules=("core", "training"))

    menu = visible_menu(user)

    assert [s.title for s in menu] == ["학원 운영"]
    assert [i.endpoint for i in menu[0].items] == ["dashboard", "students"]


def test_menu_for_owner_with_finance():
    user = _user(UserRole.OWNER, modules=("core", "finance"))

    titles = [s.title for s in visible_menu(user)]

    assert titles == ["학원 운영", "재무"]


def test_menu_empty_when_signed_out():
    assert visible_menu(None) == []
