from django.test import TestCase

from core.tests_utils import make_camp, make_guardian, make_member, make_registration, make_user


class DashboardAuthTests(TestCase):
    def test_login_and_logout(self):
        make_user("pres_g", role="PRESIDENT", group="GARCONS")

        resp = self.client.post("/dashboard/login/", {"username": "pres_g", "password": "pass12345"})
        self.assertRedirects(resp, "/dashboard/")

        resp = self.client.post("/dashboard/logout/")
        self.assertRedirects(resp, "/dashboard/login/")
        self.assertEqual(self.client.get("/dashboard/").status_code, 302)

    def test_bad_credentials(self):
        resp = self.client.post("/dashboard/login/", {"username": "x", "password": "y"})
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Identifiants incorrects")

    def test_external_next_is_ignored(self):
        make_user("anim", role="ANIMATEUR", group="FILLES")
        resp = self.client.post(
            "/dashboard/login/?next=https://evil.example.com/",
            {"username": "anim", "password": "pass12345"},
        )
        self.assertRedirects(resp, "/dashboard/")

    def test_account_without_profile_forbidden(self):
        self.client.force_login(make_user("nobody"))
        self.assertEqual(self.client.get("/dashboard/").status_code, 403)


class DashboardIndexTests(TestCase):
    def setUp(self):
        boy = make_member("GARCONS", age=10, guardian=make_guardian("0477000001"))
        girl = make_member("FILLES", age=10, guardian=make_guardian("0477000002"))
        make_registration(boy, is_paid=True)
        make_registration(girl)
        make_camp("GARCONS", name="Camp Garçons")
        make_camp("FILLES", name="Camp Filles")

    def test_stats_scoped_to_group(self):
        self.client.force_login(make_user("pres_f", role="PRESIDENT", group="FILLES"))
        resp = self.client.get("/dashboard/")
        self.assertEqual(resp.status_code, 200)

        stats = resp.context["stats"]
        self.assertEqual(stats["registrations"], 1)
        self.assertEqual(stats["unpaid"], 1)
        self.assertEqual([g["value"] for g in stats["groups"]], ["FILLES"])
        self.assertEqual([c.name for c in stats["upcoming_camps"]], ["Camp Filles"])

    def test_admin_sees_everything(self):
        self.client.force_login(make_user("root", is_superuser=True))
        stats = self.client.get("/dashboard/").context["stats"]
        self.assertEqual(stats["registrations"], 2)
        self.assertEqual(stats["unpaid"], 1)
        self.assertEqual(stats["upcoming_camps_count"], 2)
