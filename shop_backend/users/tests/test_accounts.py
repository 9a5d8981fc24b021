# users/tests/test_accounts.py

from django.test import TestCase

from core.exceptions import (
    AlreadyInactive,
    BadCredential,
    Conflict,
    Forbidden,
    NotFound,
    RoleEscalation,
    SamePassword,
)
from core.lifecycle import Lifecycle
from permissions.roles import ROLE_ADMIN, ROLE_CLIENT, can_mutate
from users.models import User
from users.services import accounts

PASSWORD = "Str0ng-Pass!42"


def make_user(username, role=ROLE_CLIENT, password=PASSWORD):
    return User.objects.create_user(
        email=f"{username}@shop.test",
        username=username,
        password=password,
        role=role,
    )


class MutationPolicyTests(TestCase):
    """
    GUARANTEES:
    - A user may always mutate itself
    - An admin may mutate clients but never another admin
    - A client may never mutate anyone else
    """

    def setUp(self):
        self.admin = make_user("boss", role=ROLE_ADMIN)
        self.other_admin = make_user("boss2", role=ROLE_ADMIN)
        self.client_a = make_user("alice")
        self.client_b = make_user("bob")

    def test_self_mutation_is_allowed(self):
        self.assertTrue(can_mutate(self.client_a, self.client_a))
        self.assertTrue(can_mutate(self.admin, self.admin))

    def test_admin_over_client(self):
        self.assertTrue(can_mutate(self.admin, self.client_a))

    def test_admin_over_admin_is_denied(self):
        self.assertFalse(can_mutate(self.admin, self.other_admin))

    def test_client_over_anyone_else_is_denied(self):
        self.assertFalse(can_mutate(self.client_a, self.client_b))
        self.assertFalse(can_mutate(self.client_a, self.admin))


class RegistrationTests(TestCase):
    def test_register_defaults_to_client(self):
        user = accounts.register_user(email="carol@shop.test", username="carol", password=PASSWORD)

        self.assertEqual(user.role, ROLE_CLIENT)
        self.assertEqual(user.status, Lifecycle.ACTIVE)
        self.assertTrue(user.check_password(PASSWORD))

    def test_duplicate_email_conflicts(self):
        make_user("carol")

        with self.assertRaises(Conflict):
            accounts.register_user(email="carol@shop.test", username="carol-2", password=PASSWORD)

    def test_duplicate_username_conflicts(self):
        make_user("carol")

        with self.assertRaises(Conflict):
            accounts.register_user(email="other@shop.test", username="carol", password=PASSWORD)

    def test_anonymous_cannot_self_assign_admin(self):
        with self.assertRaises(RoleEscalation):
            accounts.register_user(
                email="eve@shop.test",
                username="eve",
                password=PASSWORD,
                role=ROLE_ADMIN,
            )
        self.assertFalse(User.objects.filter(username="eve").exists())

    def test_admin_can_register_admin(self):
        admin = make_user("boss", role=ROLE_ADMIN)

        user = accounts.register_user(
            email="ops@shop.test",
            username="ops",
            password=PASSWORD,
            role=ROLE_ADMIN,
            actor=admin,
        )
        self.assertEqual(user.role, ROLE_ADMIN)


class LoginTests(TestCase):
    def setUp(self):
        self.user = make_user("dave")

    def test_login_by_email_or_username(self):
        self.assertEqual(accounts.authenticate_user(identifier="dave@shop.test", password=PASSWORD), self.user)
        self.assertEqual(accounts.authenticate_user(identifier="DAVE", password=PASSWORD), self.user)

    def test_wrong_password_is_bad_credential(self):
        with self.assertRaises(BadCredential):
            accounts.authenticate_user(identifier="dave", password="nope")

    def test_inactive_user_cannot_login(self):
        self.user.deactivate()

        with self.assertRaises(BadCredential):
            accounts.authenticate_user(identifier="dave", password=PASSWORD)

    def test_issue_tokens_returns_pair(self):
        tokens = accounts.issue_tokens(self.user)

        self.assertIn("access", tokens)
        self.assertIn("refresh", tokens)


class ChangePasswordTests(TestCase):
    """
    GUARANTEES:
    - NotFound for unknown targets
    - Forbidden per the mutation policy
    - BadCredential when the old password does not verify
    - SamePassword when nothing would change
    """

    def setUp(self):
        self.admin = make_user("boss", role=ROLE_ADMIN)
        self.other_admin = make_user("boss2", role=ROLE_ADMIN)
        self.client_a = make_user("alice")
        self.client_b = make_user("bob")

    def test_self_change(self):
        accounts.change_password(
            actor=self.client_a,
            target_username="alice",
            old_password=PASSWORD,
            new_password="An0ther-Pass!77",
        )
        self.client_a.refresh_from_db()
        self.assertTrue(self.client_a.check_password("An0ther-Pass!77"))

    def test_unknown_target(self):
        with self.assertRaises(NotFound):
            accounts.change_password(
                actor=self.admin,
                target_username="ghost",
                old_password=PASSWORD,
                new_password="An0ther-Pass!77",
            )

    def test_client_cannot_change_someone_else(self):
        with self.assertRaises(Forbidden):
            accounts.change_password(
                actor=self.client_a,
                target_username="bob",
                old_password=PASSWORD,
                new_password="An0ther-Pass!77",
            )

    def test_admin_cannot_change_other_admin(self):
        with self.assertRaises(Forbidden):
            accounts.change_password(
                actor=self.admin,
                target_username="boss2",
                old_password=PASSWORD,
                new_password="An0ther-Pass!77",
            )

    def test_admin_can_change_client(self):
        accounts.change_password(
            actor=self.admin,
            target_username="bob",
            old_password=PASSWORD,
            new_password="An0ther-Pass!77",
        )
        self.client_b.refresh_from_db()
        self.assertTrue(self.client_b.check_password("An0ther-Pass!77"))

    def test_wrong_old_password(self):
        with self.assertRaises(BadCredential):
            accounts.change_password(
                actor=self.client_a,
                target_username="alice",
                old_password="wrong-one",
                new_password="An0ther-Pass!77",
            )

    def test_same_password(self):
        with self.assertRaises(SamePassword):
            accounts.change_password(
                actor=self.client_a,
                target_username="alice",
                old_password=PASSWORD,
                new_password=PASSWORD,
            )


class DeactivateUserTests(TestCase):
    def setUp(self):
        self.admin = make_user("boss", role=ROLE_ADMIN)
        self.other_admin = make_user("boss2", role=ROLE_ADMIN)
        self.client_a = make_user("alice")
        self.client_b = make_user("bob")

    def test_admin_cannot_deactivate_admin(self):
        with self.assertRaises(Forbidden):
            accounts.deactivate_user(actor=self.admin, target_username="boss2", password=PASSWORD)

        self.other_admin.refresh_from_db()
        self.assertEqual(self.other_admin.status, Lifecycle.ACTIVE)

    def test_client_cannot_deactivate_other_client(self):
        with self.assertRaises(Forbidden):
            accounts.deactivate_user(actor=self.client_a, target_username="bob", password=PASSWORD)

    def test_self_deactivation_is_soft(self):
        accounts.deactivate_user(actor=self.client_a, target_username="alice", password=PASSWORD)

        user = User.objects.get(pk=self.client_a.pk)
        self.assertEqual(user.status, Lifecycle.INACTIVE)
        self.assertFalse(user.is_active)

    def test_admin_deactivates_client(self):
        accounts.deactivate_user(actor=self.admin, target_username="bob", password=PASSWORD)

        self.client_b.refresh_from_db()
        self.assertEqual(self.client_b.status, Lifecycle.INACTIVE)

    def test_wrong_password(self):
        with self.assertRaises(BadCredential):
            accounts.deactivate_user(actor=self.client_a, target_username="alice", password="wrong")

    def test_already_inactive(self):
        accounts.deactivate_user(actor=self.admin, target_username="bob", password=PASSWORD)

        with self.assertRaises(AlreadyInactive):
            accounts.deactivate_user(actor=self.admin, target_username="bob", password=PASSWORD)


class UpdateProfileTests(TestCase):
    def setUp(self):
        self.admin = make_user("boss", role=ROLE_ADMIN)
        self.client_a = make_user("alice")
        self.client_b = make_user("bob")

    def test_client_updates_own_profile(self):
        user = accounts.update_profile(
            actor=self.client_a,
            target_username="alice",
            fields={"name": "Alice", "surname": "Liddell", "phone": "555-0101"},
        )

        self.assertEqual(user.name, "Alice")
        self.assertEqual(user.phone, "555-0101")

    def test_client_cannot_escalate_role(self):
        with self.assertRaises(RoleEscalation):
            accounts.update_profile(actor=self.client_a, target_username="alice", fields={"role": ROLE_ADMIN})

        self.client_a.refresh_from_db()
        self.assertEqual(self.client_a.role, ROLE_CLIENT)

    def test_client_cannot_update_someone_else(self):
        with self.assertRaises(Forbidden):
            accounts.update_profile(actor=self.client_a, target_username="bob", fields={"name": "X"})

    def test_admin_can_promote_client(self):
        user = accounts.update_profile(actor=self.admin, target_username="bob", fields={"role": ROLE_ADMIN})

        self.assertEqual(user.role, ROLE_ADMIN)

    def test_username_collision_conflicts(self):
        with self.assertRaises(Conflict):
            accounts.update_profile(actor=self.client_a, target_username="alice", fields={"username": "bob"})
