from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from core.classification import current_school_year
from core.models import GroupSettings
from core.tests_utils import (
    birth_date_for_age,
    make_guardian,
    make_member,
    make_registration,
    make_user,
    medical_info,
    registration_payload,
)
from members.api_serializers import RegistrationRequestSerializer
from members.models import Guardian, Member, Registration
from members.services import AlreadyRegistered, register_member


class RegistrationFlowTests(TestCase):
    url = "/api/registrations/"

    def post(self, **overrides):
        return self.client.post(self.url, registration_payload(**overrides), content_type="application/json")

    def test_creates_guardians_member_and_unpaid_registration(self):
        resp = self.post()
        self.assertEqual(resp.status_code, 201, resp.content)

        parent1 = Guardian.objects.get(phone="32477123456")
        parent2 = Guardian.objects.get(phone="32478654321")
        # le 2e responsable reçoit l'email du 1er
        self.assertEqual(parent2.email, "marie@example.com")

        member = Member.objects.get()
        self.assertEqual(member.section, "CHEVALIERS")
        self.assertEqual(member.primary_guardian, parent1)
        self.assertEqual(member.secondary_guardian, parent2)

        registration = Registration.objects.get()
        self.assertEqual(registration.year, current_school_year())
        self.assertFalse(registration.is_paid)
        self.assertEqual(registration.amount, Decimal("45.00"))
        self.assertEqual(registration.medical_info["doctor_name"], "Dr Martin")
        self.assertFalse(registration.medical_info["allergies"]["has_allergies"])
        self.assertEqual(resp.json()["section_label"], "Chevaliers")

    def test_second_registration_same_year_is_refused(self):
        self.assertEqual(self.post().status_code, 201)

        resp = self.post(parent1_phone="+32477123456")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())
        self.assertEqual(Registration.objects.count(), 1)
        self.assertEqual(Member.objects.count(), 1)

    def test_returning_member_is_reused_and_refreshed(self):
        guardian = make_guardian(phone="0477123456", email="old@example.com")
        member = make_member(
            age=10,
            guardian=guardian,
            first_name="Lucas",
            last_name="Dupont",
            address="Ancienne rue 1",
        )
        start = int(current_school_year()[:4])
        make_registration(member, year=f"{start - 1}-{start}")

        resp = self.post(
            child_birth_date=member.birth_date.isoformat(),
            parent1_phone="0032 477 12 34 56",
            parent1_email="new@example.com",
        )
        self.assertEqual(resp.status_code, 201, resp.content)

        self.assertEqual(Member.objects.count(), 1)
        member.refresh_from_db()
        guardian.refresh_from_db()
        self.assertEqual(member.address, "Rue de la Station 12")
        self.assertEqual(guardian.email, "new@example.com")
        self.assertEqual(member.registrations.count(), 2)

    def test_existing_second_guardian_keeps_email(self):
        make_guardian(phone="0478654321", first_name="Paul", email="paul@example.com")

        self.assertEqual(self.post().status_code, 201)
        self.assertEqual(Guardian.objects.get(phone="32478654321").email, "paul@example.com")

    def test_fee_comes_from_group_settings(self):
        GroupSettings.objects.create(patro_group="FILLES", registration_fee=Decimal("50.00"))

        resp = self.post(patro_group="FILLES", child_first_name="Emma")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(Registration.objects.get().amount, Decimal("50.00"))
        self.assertEqual(Member.objects.get().section, "ETINCELLES")

    def test_future_birth_date_rejected(self):
        future = timezone.localdate() + timedelta(days=30)
        resp = self.post(child_birth_date=future.isoformat())
        self.assertEqual(resp.status_code, 400)
        self.assertIn("child_birth_date", resp.json()["details"])

    def test_too_young_rejected(self):
        resp = self.post(child_birth_date=birth_date_for_age(3).isoformat())
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(Member.objects.exists())

    def test_emergency_consent_required(self):
        resp = self.post(emergency_medical_consent=False)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("emergency_medical_consent", resp.json()["details"])

    def test_allergy_details_are_stored(self):
        resp = self.post(has_allergies=True, allergy_list="Arachides", allergy_consequences="Choc anaphylactique")
        self.assertEqual(resp.status_code, 201)
        allergies = Registration.objects.get().medical_info["allergies"]
        self.assertEqual(allergies, {
            "has_allergies": True,
            "allergy_list": "Arachides",
            "allergy_consequences": "Choc anaphylactique",
        })


class RegisterMemberServiceTests(TestCase):
    def validated(self, **overrides):
        serializer = RegistrationRequestSerializer(data=registration_payload(**overrides))
        self.assertTrue(serializer.is_valid(), serializer.errors)
        return serializer.validated_data

    def test_year_follows_reference_date(self):
        registration = register_member(self.validated(), on_date=date(2024, 10, 1))
        self.assertEqual(registration.year, "2024-2025")

        # même enfant, nouvelle année scolaire
        registration = register_member(self.validated(), on_date=date(2025, 9, 1))
        self.assertEqual(registration.year, "2025-2026")
        self.assertEqual(Member.objects.count(), 1)

    def test_already_registered_carries_status(self):
        data = self.validated()
        register_member(data, on_date=date(2024, 10, 1))
        with self.assertRaises(AlreadyRegistered) as ctx:
            register_member(data, on_date=date(2025, 3, 1))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.year, "2024-2025")


class ChildLookupTests(TestCase):
    def setUp(self):
        self.guardian = make_guardian(phone="0477123456")
        self.member = make_member(age=8, guardian=self.guardian, first_name="Tom")

    def test_search_by_phone_any_format(self):
        for raw in ("0477 12 34 56", "+32477123456", "0032477123456"):
            resp = self.client.get("/api/children/search/", {"phone": raw})
            self.assertEqual(resp.status_code, 200, raw)
            self.assertEqual([m["id"] for m in resp.json()["items"]], [self.member.pk])

    def test_search_by_secondary_guardian_phone(self):
        other = make_guardian(phone="0499887766", first_name="Paul")
        self.member.secondary_guardian = other
        self.member.save()

        resp = self.client.get("/api/children/search/", {"phone": "0499/88.77.66"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()["items"]), 1)

    def test_search_unknown_phone(self):
        self.assertEqual(self.client.get("/api/children/search/", {"phone": "0470000000"}).status_code, 404)
        self.assertEqual(self.client.get("/api/children/search/").status_code, 400)

    def test_search_by_birth_returns_identity_only(self):
        resp = self.client.get("/api/children/search-by-birth/", {"birth_date": self.member.birth_date.isoformat()})
        self.assertEqual(resp.status_code, 200)
        item = resp.json()["items"][0]
        self.assertEqual(item["first_name"], "Tom")
        self.assertNotIn("address", item)
        self.assertNotIn("primary_guardian", item)

    def test_search_by_birth_errors(self):
        self.assertEqual(self.client.get("/api/children/search-by-birth/").status_code, 400)
        self.assertEqual(
            self.client.get("/api/children/search-by-birth/", {"birth_date": "15/03/2015"}).status_code,
            400,
        )
        self.assertEqual(
            self.client.get("/api/children/search-by-birth/", {"birth_date": "1990-01-01"}).status_code,
            404,
        )


class MemberDashboardApiTests(TestCase):
    def setUp(self):
        self.boy = make_member("GARCONS", age=10, first_name="Lucas", guardian=make_guardian("0477000001"))
        self.girl = make_member("FILLES", age=7, first_name="Emma", guardian=make_guardian("0477000002"))
        self.leader = make_member("FILLES", age=19, first_name="Julie", guardian=make_guardian("0477000003"))
        self.boy_reg = make_registration(self.boy)
        self.girl_reg = make_registration(
            self.girl,
            medical_info=medical_info(
                allergies={"has_allergies": True, "allergy_list": "Pollen", "allergy_consequences": "Éternuements"},
            ),
        )
        self.leader_reg = make_registration(
            self.leader,
            medical_info=medical_info(
                medications={"takes_medication": True, "medication_details": "Ventolin", "is_autonomous": True},
            ),
        )

        self.admin = make_user("admin", role="ADMIN", group="GARCONS")
        self.filles_president = make_user("pres_f", role="PRESIDENT", group="FILLES")
        self.no_group = make_user("nogroup", role="ANIMATEUR", group=None)

    def ids(self, resp):
        return sorted(item["member"]["id"] for item in resp.json()["items"])

    def test_anonymous_denied(self):
        self.assertEqual(self.client.get("/api/members/").status_code, 403)

    def test_admin_sees_both_groups(self):
        self.client.force_login(self.admin)
        resp = self.client.get("/api/members/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.ids(resp), sorted([self.boy.pk, self.girl.pk, self.leader.pk]))

    def test_president_sees_own_group_only(self):
        self.client.force_login(self.filles_president)
        resp = self.client.get("/api/members/")
        self.assertEqual(self.ids(resp), sorted([self.girl.pk, self.leader.pk]))

    def test_user_without_group_sees_nothing(self):
        self.client.force_login(self.no_group)
        resp = self.client.get("/api/members/")
        self.assertEqual(resp.json()["count"], 0)

    def test_staff_filter(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.ids(self.client.get("/api/members/", {"staff": "true"})), [self.leader.pk])
        self.assertEqual(
            self.ids(self.client.get("/api/members/", {"staff": "false"})),
            sorted([self.boy.pk, self.girl.pk]),
        )

    def test_member_detail_scoped(self):
        self.client.force_login(self.filles_president)
        self.assertEqual(self.client.get(f"/api/members/{self.boy.pk}/").status_code, 403)

        resp = self.client.get(f"/api/members/{self.leader.pk}/")
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data["section_label"], "Animateur")
        self.assertTrue(data["is_staff"])
        self.assertEqual(data["registration"]["id"], self.leader_reg.pk)

    def test_member_detail_missing(self):
        self.client.force_login(self.admin)
        self.assertEqual(self.client.get("/api/members/999999/").status_code, 404)

    def test_payment_toggle(self):
        self.client.force_login(self.filles_president)
        url = f"/api/registrations/{self.boy_reg.pk}/payment/"
        self.assertEqual(self.client.post(url, {"is_paid": True}, content_type="application/json").status_code, 403)

        url = f"/api/registrations/{self.girl_reg.pk}/payment/"
        resp = self.client.post(url, {"is_paid": True}, content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.girl_reg.refresh_from_db()
        self.assertTrue(self.girl_reg.is_paid)

        resp = self.client.post(url, {"is_paid": "yes"}, content_type="application/json")
        self.assertEqual(resp.status_code, 400)

    def test_recaps_children_and_staff(self):
        self.client.force_login(self.admin)

        data = self.client.get("/api/recaps/").json()
        self.assertEqual([row["first_name"] for row in data["allergies"]], ["Emma"])
        self.assertEqual(data["medications"], [])
        row = data["allergies"][0]
        self.assertEqual(row["section"], "Benjamines")
        self.assertEqual(row["age"], 7)
        self.assertEqual(row["guardian_phone"], "+32 477 00 00 02")

        data = self.client.get("/api/recaps/", {"staff": "true"}).json()
        self.assertEqual(data["allergies"], [])
        self.assertEqual(data["medications"][0]["section"], "Animateur")
        self.assertTrue(data["medications"][0]["is_autonomous"])

    def test_recaps_section_filter(self):
        self.client.force_login(self.admin)
        data = self.client.get("/api/recaps/", {"section": "CHEVALIERS"}).json()
        self.assertEqual(data["allergies"], [])

    def test_recaps_section_and_staff_combined(self):
        self.client.force_login(self.admin)
        data = self.client.get("/api/recaps/", {"staff": "true", "section": "GRANDES"}).json()
        self.assertEqual([row["first_name"] for row in data["medications"]], ["Julie"])

        data = self.client.get("/api/recaps/", {"staff": "true", "section": "BENJAMINES"}).json()
        self.assertEqual(data["medications"], [])
        self.assertEqual(data["allergies"], [])

    def test_member_list_flags_staff_age(self):
        self.client.force_login(self.filles_president)
        items = self.client.get("/api/members/").json()["items"]
        flags = {item["member"]["first_name"]: item["member"]["is_staff"] for item in items}
        self.assertEqual(flags, {"Emma": False, "Julie": True})
