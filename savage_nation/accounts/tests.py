import threading

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Group
from django.contrib.sessions.middleware import SessionMiddleware
from django.http import HttpResponse
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from savage_nation.core.query_cache import query_cache

from .context import NOT_CONFIGURED, AuthContext, AuthEventStream, AuthSnapshot, live_contexts
from .guards import protected_route
from .models import UserRole
from .roles import has_admin_role


def _ok(request):
    return HttpResponse("secret")


class AuthEventStreamTests(TestCase):
    def test_subscriber_gets_current_state_then_changes(self):
        stream = AuthEventStream(AuthSnapshot(enabled=True))
        seen = []
        unsubscribe = stream.subscribe(seen.append)
        self.assertEqual(len(seen), 1)
        self.assertFalse(seen[0].is_authenticated)

        stream.publish(AuthSnapshot(enabled=True, is_admin=True))
        self.assertEqual(len(seen), 2)
        self.assertTrue(seen[1].is_admin)

        unsubscribe()
        stream.publish(AuthSnapshot(enabled=True))
        self.assertEqual(len(seen), 2)
        self.assertEqual(stream.subscriber_count, 0)


class AdminRoleTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username="member", email="member@example.com", password="pass1234")

    def test_plain_user_is_not_admin(self):
        self.assertFalse(has_admin_role(self.user))
        self.assertFalse(has_admin_role(AnonymousUser()))

    def test_user_roles_row_grants_admin(self):
        UserRole.objects.create(user=self.user, role=UserRole.ROLE_ADMIN)
        self.assertTrue(has_admin_role(self.user))

    def test_editor_role_is_not_admin(self):
        UserRole.objects.create(user=self.user, role=UserRole.ROLE_EDITOR)
        self.assertFalse(has_admin_role(self.user))

    def test_legacy_group_and_staff_flag_fall_back(self):
        Group.objects.get_or_create(name="Admins")[0].user_set.add(self.user)
        self.assertTrue(has_admin_role(self.user))

        User = get_user_model()
        staff = User.objects.create_user(username="staffer", password="pass1234", is_staff=True)
        self.assertTrue(has_admin_role(staff))


class ProtectedRouteTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        User = get_user_model()
        self.user = User.objects.create_user(username="member", email="member@example.com", password="pass1234")
        self.admin = User.objects.create_user(username="boss", email="boss@example.com", password="pass1234")
        UserRole.objects.create(user=self.admin, role=UserRole.ROLE_ADMIN)
        query_cache.clear()

    def _request(self, path="/private/", user=None):
        request = self.factory.get(path)
        SessionMiddleware(lambda r: None).process_request(request)
        request.user = user or AnonymousUser()
        return request

    def test_signed_out_user_goes_to_auth(self):
        response = protected_route(_ok)(self._request())
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, reverse("accounts:auth"))

    def test_signed_in_user_passes(self):
        response = protected_route(_ok)(self._request(user=self.user))
        self.assertEqual(response.status_code, 200)

    def test_non_admin_goes_home(self):
        response = protected_route(require_admin=True)(_ok)(self._request(user=self.user))
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, reverse("main:home"))

    def test_admin_passes(self):
        response = protected_route(require_admin=True)(_ok)(self._request(user=self.admin))
        self.assertEqual(response.status_code, 200)

    def test_session_still_loading_renders_nothing(self):
        request = self.factory.get("/private/")
        response = protected_route(_ok)(request)
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")

    @override_settings(SITE_AUTH_ENABLED=False)
    def test_auth_disabled_redirects_to_auth(self):
        response = protected_route(_ok)(self._request(user=self.admin))
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.url, reverse("accounts:auth"))

    @override_settings(AUTH_BYPASS_ENABLED=True)
    def test_bypass_grants_access_when_enabled(self):
        with self.assertLogs("savage_nation.accounts.guards", level="WARNING"):
            response = protected_route(require_admin=True)(_ok)(self._request("/private/?bypass_auth=true"))
        self.assertEqual(response.status_code, 200)

    @override_settings(AUTH_BYPASS_ENABLED=False)
    def test_bypass_ignored_when_disabled(self):
        response = protected_route(require_admin=True)(_ok)(self._request("/private/?bypass_auth=true"))
        self.assertEqual(response.status_code, 302)


class AuthContextTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username="member", email="member@example.com", password="pass1234")

    def _request(self):
        request = RequestFactory().post("/auth/")
        SessionMiddleware(lambda r: None).process_request(request)
        request.user = AnonymousUser()
        return request

    def test_sign_in_publishes_new_snapshot(self):
        request = self._request()
        ctx = AuthContext(request)
        request.auth = ctx
        seen = []
        ctx.subscribe(seen.append)

        self.assertIsNone(ctx.sign_in("member@example.com", "pass1234"))
        self.assertTrue(ctx.snapshot.is_authenticated)
        self.assertEqual(ctx.snapshot.user, self.user)
        self.assertTrue(seen[-1].is_authenticated)

        ctx.sign_out()
        self.assertFalse(ctx.snapshot.is_authenticated)
        ctx.close()

    def test_wrong_password(self):
        ctx = AuthContext(self._request())
        self.assertEqual(ctx.sign_in("member@example.com", "nope"), "Invalid login credentials")
        ctx.close()

    def test_sign_up_creates_and_signs_in(self):
        request = self._request()
        ctx = AuthContext(request)
        request.auth = ctx
        self.assertIsNone(ctx.sign_up("new.person@example.com", "a-Strong-pass-1984"))
        self.assertTrue(ctx.snapshot.is_authenticated)
        self.assertEqual(ctx.snapshot.user.email, "new.person@example.com")
        self.assertIsNotNone(ctx.sign_up("member@example.com", "a-Strong-pass-1984"))
        ctx.close()

    def test_role_change_reaches_live_context(self):
        request = self._request()
        request.user = self.user
        ctx = AuthContext(request)
        self.assertFalse(ctx.snapshot.is_admin)

        UserRole.objects.create(user=self.user, role=UserRole.ROLE_ADMIN)
        self.assertTrue(ctx.snapshot.is_admin)

        UserRole.objects.filter(user=self.user).delete()
        self.assertFalse(ctx.snapshot.is_admin)
        ctx.close()

    @override_settings(SITE_AUTH_ENABLED=False)
    def test_actions_report_not_configured(self):
        ctx = AuthContext(self._request())
        self.assertFalse(ctx.snapshot.enabled)
        self.assertEqual(ctx.sign_in("member@example.com", "pass1234"), NOT_CONFIGURED)
        self.assertEqual(ctx.sign_up("x@example.com", "pass1234"), NOT_CONFIGURED)
        ctx.close()


class AuthPageTests(TestCase):
    def setUp(self):
        User = get_user_model()
        User.objects.create_user(username="member", email="member@example.com", password="pass1234")

    def test_sign_in_redirects_home(self):
        response = self.client.post(reverse("accounts:auth"), {
            "mode": "signin",
            "email": "member@example.com",
            "password": "pass1234",
        })
        self.assertRedirects(response, reverse("main:home"))

    def test_bad_credentials_show_error(self):
        response = self.client.post(reverse("accounts:auth"), {
            "mode": "signin",
            "email": "member@example.com",
            "password": "wrong",
        }, follow=True)
        self.assertContains(response, "Invalid login credentials")

    def test_signed_in_visitor_is_sent_home(self):
        self.client.login(username="member", password="pass1234")
        response = self.client.get(reverse("accounts:auth"))
        self.assertRedirects(response, reverse("main:home"))

    @override_settings(SITE_AUTH_ENABLED=False)
    def test_disabled_mode_explains(self):
        response = self.client.get(reverse("accounts:auth"))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, NOT_CONFIGURED)
        self.assertNotContains(response, 'name="password"')

    def test_sign_out(self):
        self.client.login(username="member", password="pass1234")
        response = self.client.post(reverse("accounts:sign_out"))
        self.assertRedirects(response, reverse("main:home"))
        self.assertNotIn("_auth_user_id", self.client.session)


class GrantAdminCommandTests(TestCase):
    def test_grant_and_revoke(self):
        from io import StringIO

        from django.core.management import call_command
        from django.core.management.base import CommandError

        User = get_user_model()
        user = User.objects.create_user(username="member", email="member@example.com", password="pass1234")

        call_command("grant_admin", "MEMBER@example.com", stdout=StringIO())
        self.assertTrue(has_admin_role(user))

        call_command("grant_admin", "member", "--revoke", stdout=StringIO())
        self.assertFalse(has_admin_role(user))

        with self.assertRaises(CommandError):
            call_command("grant_admin", "nobody", stdout=StringIO())


class LiveContextRegistryTests(SimpleTestCase):
    def _context(self):
        request = RequestFactory().get("/")
        request.user = AnonymousUser()
        return AuthContext(request)

    def test_listing_while_other_threads_open_and_close_contexts(self):
        errors = []
        stop = threading.Event()

        def churn():
            try:
                for _ in range(200):
                    self._context().close()
            except Exception as exc:
                errors.append(exc)

        def read():
            try:
                while not stop.is_set():
                    live_contexts()
            except Exception as exc:
                errors.append(exc)

        reader = threading.Thread(target=read)
        workers = [threading.Thread(target=churn) for _ in range(4)]
        reader.start()
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()
        stop.set()
        reader.join()

        self.assertEqual(errors, [])

    def test_closed_context_leaves_registry(self):
        ctx = self._context()
        self.assertIn(ctx, live_contexts())
        ctx.close()
        self.assertNotIn(ctx, live_contexts())
