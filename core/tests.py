import logging
from datetime import date
from decimal import Decimal

from django.test import RequestFactory, SimpleTestCase, TestCase

from core.access import AccessPolicy, can_edit_group, can_view_group, visible_groups
from core.classification import (
    calendar_age,
    classify_section,
    current_school_year,
    display_section,
    is_staff_age,
    place_member,
    school_age,
    school_year_start,
    section_age_range,
    section_group,
    sections_for_group,
)
from core.logging_filters import PublicLookupNoiseFilter
from core.models import GroupSettings
from core.phones import format_phone, normalize_phone
from core.tests_utils import make_member, make_user

ON = date(2024, 10, 1)  # année scolaire 2024-2025


def born(age: int, on_date: date = ON) -> date:
    return date(school_year_start(on_date) - age, 6, 30)


class SchoolAgeTests(SimpleTestCase):
    def test_school_year_boundary(self):
        self.assertEqual(school_year_start(date(2024, 9, 1)), 2024)
        self.assertEqual(school_year_start(date(2024, 12, 31)), 2024)
        self.assertEqual(school_year_start(date(2025, 1, 1)), 2024)
        self.assertEqual(school_year_start(date(2025, 8, 31)), 2024)

    def test_school_age_ignores_birthday(self):
        # né en décembre : même âge scolaire que né en janvier
        self.assertEqual(school_age(date(2014, 1, 1), ON), 10)
        self.assertEqual(school_age(date(2014, 12, 31), ON), 10)
        self.assertEqual(school_age(date(2014, 12, 31), date(2025, 8, 31)), 10)
        self.assertEqual(school_age(date(2014, 12, 31), date(2025, 9, 1)), 11)

    def test_future_birth_date_is_negative(self):
        self.assertEqual(school_age(date(2026, 1, 1), ON), -2)
        self.assertIsNone(classify_section(date(2026, 1, 1), "GARCONS", ON))

    def test_current_school_year(self):
        self.assertEqual(current_school_year(date(2024, 9, 1)), "2024-2025")
        self.assertEqual(current_school_year(date(2025, 8, 31)), "2024-2025")

    def test_calendar_age(self):
        self.assertEqual(calendar_age(date(2014, 10, 2), ON), 9)
        self.assertEqual(calendar_age(date(2014, 10, 1), ON), 10)


class SectionClassifierTests(SimpleTestCase):
    def test_known_values(self):
        self.assertEqual(classify_section(born(9), "GARCONS", ON), "CHEVALIERS")
        self.assertEqual(classify_section(born(17), "GARCONS", ON), "BROTHERS")
        self.assertEqual(classify_section(born(19), "GARCONS", ON), "BROTHERS")
        self.assertEqual(classify_section(born(4), "FILLES", ON), "POUSSINS_F")
        self.assertEqual(classify_section(born(13), "FILLES", ON), "ALPINES")

    def test_band_edges_go_to_higher_band(self):
        expected = {
            "GARCONS": {3: None, 4: "POUSSINS_G", 5: "POUSSINS_G", 6: "BENJAMINS", 8: "BENJAMINS",
                        9: "CHEVALIERS", 12: "CONQUERANTS", 15: "BROTHERS", 18: "BROTHERS"},
            "FILLES": {3: None, 4: "POUSSINS_F", 6: "BENJAMINES", 9: "ETINCELLES", 11: "ETINCELLES",
                       12: "ALPINES", 15: "GRANDES", 18: "GRANDES"},
        }
        for group, by_age in expected.items():
            for age, section in by_age.items():
                with self.subTest(group=group, age=age):
                    self.assertEqual(classify_section(born(age), group, ON), section)

    def test_never_returns_other_group_label(self):
        for group in ("GARCONS", "FILLES"):
            allowed = set(sections_for_group(group))
            for age in range(-2, 40):
                section = classify_section(born(age), group, ON)
                self.assertTrue(section is None or section in allowed, (group, age, section))
                if section:
                    self.assertEqual(section_group(section), group)

    def test_staff_age(self):
        self.assertFalse(is_staff_age(born(17), ON))
        self.assertTrue(is_staff_age(born(18), ON))

    def test_placement_mapping(self):
        staff = place_member(born(20), "FILLES", ON)
        self.assertEqual(staff.kind, "staff")
        self.assertTrue(staff.is_staff)
        self.assertEqual(staff.legacy_section, "GRANDES")
        self.assertEqual(staff.display_label, "Animateur")

        child = place_member(born(7), "GARCONS", ON)
        self.assertEqual((child.kind, child.section, child.display_label), ("section", "BENJAMINS", "Benjamins"))

        toddler = place_member(born(2), "GARCONS", ON)
        self.assertEqual(toddler.kind, "unassigned")
        self.assertIsNone(toddler.legacy_section)
        self.assertEqual(toddler.display_label, "Section non définie")

    def test_section_age_ranges(self):
        self.assertEqual(section_age_range("POUSSINS_G"), "4-6 ans")
        self.assertEqual(section_age_range("ALPINES"), "12-15 ans")
        self.assertEqual(section_age_range("BROTHERS"), "15-17 ans")
        self.assertEqual(section_age_range("UNKNOWN"), "")

    def test_display_section(self):
        self.assertEqual(display_section(born(19), "BROTHERS", ON), "Animateur")
        self.assertEqual(display_section(born(10), "ETINCELLES", ON), "Étincelles")
        self.assertEqual(display_section(born(10), None, ON), "Section non définie")


class VisibilityTests(SimpleTestCase):
    def test_admin_sees_both_groups_regardless_of_own(self):
        for own in (None, "GARCONS", "FILLES"):
            self.assertEqual(visible_groups("ADMIN", own), {"GARCONS", "FILLES"})

    def test_other_roles_see_own_group_or_nothing(self):
        self.assertEqual(visible_groups("PRESIDENT", "FILLES"), {"FILLES"})
        self.assertEqual(visible_groups("ANIMATEUR", "GARCONS"), {"GARCONS"})
        self.assertEqual(visible_groups("ANIMATEUR", None), set())
        self.assertEqual(visible_groups(None, None), set())

    def test_edit_mirrors_view(self):
        for role in ("ADMIN", "PRESIDENT", "ANIMATEUR"):
            for own in (None, "GARCONS", "FILLES"):
                for target in ("GARCONS", "FILLES"):
                    self.assertEqual(can_view_group(role, own, target), can_edit_group(role, own, target))

    def test_filles_president_on_tagged_resources(self):
        policy = AccessPolicy(role="PRESIDENT", group="FILLES", is_authenticated=True)
        self.assertFalse(policy.can_edit("GARCONS"))
        self.assertTrue(policy.can_edit("FILLES"))
        self.assertTrue(policy.can_manage_group("FILLES"))
        self.assertFalse(policy.can_manage_group("GARCONS"))

    def test_animateur_cannot_manage(self):
        policy = AccessPolicy(role="ANIMATEUR", group="FILLES", is_authenticated=True)
        self.assertTrue(policy.can_edit("FILLES"))
        self.assertFalse(policy.can_manage_group("FILLES"))


class AccessPolicyModelTests(TestCase):
    def test_resource_group_from_member(self):
        member = make_member("GARCONS", age=10)
        policy = AccessPolicy(role="PRESIDENT", group="FILLES", is_authenticated=True)
        self.assertFalse(policy.can_view(member))
        self.assertTrue(AccessPolicy(role="ADMIN").can_view(member))

    def test_for_user(self):
        self.assertEqual(AccessPolicy.for_user(make_user("root", is_superuser=True)).role, "ADMIN")
        self.assertIsNone(AccessPolicy.for_user(make_user("nobody")).role)

        policy = AccessPolicy.for_user(make_user("pres", role="PRESIDENT", group="GARCONS"))
        self.assertEqual((policy.role, policy.group), ("PRESIDENT", "GARCONS"))

    def test_scope(self):
        make_member("GARCONS", age=10)
        from members.models import Member

        self.assertEqual(AccessPolicy(role="ANIMATEUR", group="FILLES").scope(Member.objects.all()).count(), 0)
        self.assertEqual(AccessPolicy(role="ANIMATEUR", group=None).scope(Member.objects.all()).count(), 0)
        self.assertEqual(AccessPolicy(role="ADMIN").scope(Member.objects.all()).count(), 1)


class PhoneTests(SimpleTestCase):
    def test_format_invariance(self):
        variants = [
            "04 77 12 34 56",
            "+32477123456",
            "0032477123456",
            "0477/12.34.56",
            "477123456",
            "+32 (0)477 12 34 56",
            "0032 (0) 477 12 34 56",
        ]
        for raw in variants:
            self.assertEqual(normalize_phone(raw), "32477123456", raw)

    def test_idempotent(self):
        for raw in ("04 77 12 34 56", "+32477123456", "+32 (0)81 22 33 44", "081 22 33 44", "+33 6 12 34 56 78", "", "abc", "12"):
            once = normalize_phone(raw)
            self.assertEqual(normalize_phone(once), once, raw)

    def test_pass_through(self):
        self.assertEqual(normalize_phone("+33 6 12 34 56 78"), "33612345678")
        self.assertEqual(normalize_phone(None), "")

    def test_format(self):
        self.assertEqual(format_phone("32477123456"), "+32 477 12 34 56")
        self.assertEqual(format_phone("0477123456"), "0477 12 34 56")
        self.assertEqual(format_phone("33612345678"), "33612345678")
        self.assertEqual(format_phone(""), "")


class GroupSettingsApiTests(TestCase):
    url = "/api/settings/"

    def payload(self, **overrides):
        data = {
            "patro_group": "FILLES",
            "registration_fee": "50.00",
            "contact_email": "filles@example.com",
            "address": "Rue du Patro 1, 5000 Namur",
            "schedule": "Dimanche 14h-17h",
            "iban": "BE68539007547034",
            "bic": "GKCCBEBB",
            "beneficiary": "Patro Filles",
        }
        data.update(overrides)
        return data

    def test_public_read(self):
        GroupSettings.objects.create(patro_group="GARCONS", contact_email="g@example.com")
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["items"][0]["contact_email"], "g@example.com")

    def test_president_updates_own_group_only(self):
        self.client.force_login(make_user("pres_f", role="PRESIDENT", group="FILLES"))

        resp = self.client.put(self.url, self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(GroupSettings.fee_for("FILLES"), Decimal("50.00"))

        resp = self.client.put(self.url, self.payload(patro_group="GARCONS"), content_type="application/json")
        self.assertEqual(resp.status_code, 403)
        self.assertFalse(GroupSettings.objects.filter(patro_group="GARCONS").exists())

    def test_animateur_denied(self):
        self.client.force_login(make_user("anim", role="ANIMATEUR", group="FILLES"))
        resp = self.client.put(self.url, self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 403)

    def test_anonymous_write_denied(self):
        resp = self.client.put(self.url, self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 403)

    def test_default_fee(self):
        self.assertEqual(GroupSettings.fee_for("GARCONS"), Decimal("45"))


class PublicLookupNoiseFilterTests(SimpleTestCase):
    def record(self, name, msg):
        return logging.LogRecord(name, logging.WARNING, __file__, 1, msg, None, None)

    def test_drops_lookup_not_found(self):
        f = PublicLookupNoiseFilter()
        self.assertFalse(f.filter(self.record("django.request", "Not Found: /api/children/search/")))
        self.assertTrue(f.filter(self.record("django.request", "Not Found: /api/camps/1/")))
        self.assertTrue(f.filter(self.record("members", "Not Found: /api/children/search/")))


class AccessMiddlewareTests(TestCase):
    def test_request_access_is_lazy_and_scoped(self):
        from core.middleware import AccessPolicyMiddleware, get_access

        user = make_user("pres", role="PRESIDENT", group="GARCONS")
        request = RequestFactory().get("/")
        request.user = user
        AccessPolicyMiddleware(lambda r: None)(request)

        self.assertEqual(get_access(request).visible_groups, {"GARCONS"})


class SetupDemoCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        from io import StringIO

        from django.contrib.auth.models import User
        from django.core.management import call_command

        from camps.models import Camp
        from members.models import Registration
        from staff.models import StaffMember

        call_command("setup_demo", stdout=StringIO())
        call_command("setup_demo", stdout=StringIO())

        self.assertEqual(GroupSettings.objects.count(), 2)
        self.assertEqual(Registration.objects.count(), 6)
        self.assertEqual(Camp.objects.count(), 2)
        self.assertEqual(StaffMember.objects.public().count(), 3)
        president = User.objects.get(username="demo_president_f")
        self.assertEqual(AccessPolicy.for_user(president).visible_groups, {"FILLES"})
