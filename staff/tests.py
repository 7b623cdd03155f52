from django.test import TestCase

from core.tests_utils import make_user
from staff.models import StaffMember


def make_staff(group="FILLES", **fields):
    defaults = {
        "last_name": "Lambert",
        "first_name": "Julie",
        "phone": "0478 11 22 33",
        "function": "ANIMATEUR",
    }
    defaults.update(fields)
    return StaffMember.objects.create(patro_group=group, **defaults)


class StaffRosterApiTests(TestCase):
    url = "/api/animateurs/"

    def setUp(self):
        self.admin = make_user("admin", role="ADMIN")
        self.filles_president = make_user("pres_f", role="PRESIDENT", group="FILLES")
        self.filles_animateur = make_user("anim_f", role="ANIMATEUR", group="FILLES")
        self.girls_staff = make_staff("FILLES")
        self.boys_staff = make_staff("GARCONS", first_name="Hugo", last_name="Petit", phone="0479445566")

    def payload(self, **overrides):
        data = {
            "last_name": "Renard",
            "first_name": "Chloé",
            "phone": "+32 470 12 34 56",
            "email": "chloe@example.com",
            "patro_group": "FILLES",
            "function": "VICE_PRESIDENT",
            "show_contact": True,
        }
        data.update(overrides)
        return data

    def test_phone_is_normalized(self):
        self.assertEqual(self.girls_staff.phone, "32478112233")
        self.assertEqual(self.girls_staff.phone_display, "+32 478 11 22 33")

    def test_list_scoped(self):
        self.client.force_login(self.filles_animateur)
        items = self.client.get(self.url).json()["items"]
        self.assertEqual([i["id"] for i in items], [self.girls_staff.pk])

    def test_animateur_cannot_create(self):
        self.client.force_login(self.filles_animateur)
        resp = self.client.post(self.url, self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 403)

    def test_president_creates_in_own_group(self):
        self.client.force_login(self.filles_president)
        resp = self.client.post(self.url, self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 201, resp.content)
        self.assertEqual(resp.json()["phone"], "32470123456")

        resp = self.client.post(self.url, self.payload(patro_group="GARCONS"), content_type="application/json")
        self.assertEqual(resp.status_code, 403)

    def test_president_cannot_touch_other_group(self):
        self.client.force_login(self.filles_president)
        url = f"{self.url}{self.boys_staff.pk}/"
        self.assertEqual(
            self.client.put(url, self.payload(patro_group="GARCONS"), content_type="application/json").status_code,
            403,
        )
        self.assertEqual(self.client.delete(url).status_code, 403)
        self.assertTrue(StaffMember.objects.filter(pk=self.boys_staff.pk).exists())

    def test_president_cannot_move_to_other_group(self):
        self.client.force_login(self.filles_president)
        resp = self.client.put(
            f"{self.url}{self.girls_staff.pk}/",
            self.payload(patro_group="GARCONS"),
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 403)

    def test_president_updates_and_deletes_own(self):
        self.client.force_login(self.filles_president)
        url = f"{self.url}{self.girls_staff.pk}/"

        resp = self.client.put(url, self.payload(first_name="Julia"), content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.girls_staff.refresh_from_db()
        self.assertEqual(self.girls_staff.first_name, "Julia")

        self.assertEqual(self.client.delete(url).status_code, 204)
        self.assertFalse(StaffMember.objects.filter(pk=self.girls_staff.pk).exists())

    def test_admin_manages_both_groups(self):
        self.client.force_login(self.admin)
        resp = self.client.post(self.url, self.payload(patro_group="GARCONS"), content_type="application/json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.delete(f"{self.url}{self.girls_staff.pk}/").status_code, 204)

    def test_missing(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.client.delete(f"{self.url}999999/").status_code, 404)

    def test_public_queryset(self):
        make_staff("FILLES", first_name="Anne", phone="0470000001", show_contact=True)
        self.assertEqual([s.first_name for s in StaffMember.objects.public()], ["Anne"])


class PublicContactsApiTests(TestCase):
    url = "/api/contacts/"

    def test_only_displayed_contacts(self):
        make_staff("FILLES", show_contact=True, function="PRESIDENT")
        make_staff("GARCONS", first_name="Hugo", last_name="Petit", phone="0479445566")

        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        items = resp.json()["items"]
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0]["phone_display"], "+32 478 11 22 33")
        self.assertEqual(items[0]["function_label"], "Président")
        self.assertNotIn("show_contact", items[0])

    def test_group_filter(self):
        make_staff("FILLES", show_contact=True)
        self.assertEqual(len(self.client.get(self.url, {"patro_group": "garcons"}).json()["items"]), 0)
        self.assertEqual(len(self.client.get(self.url, {"patro_group": "FILLES"}).json()["items"]), 1)
