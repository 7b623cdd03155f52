from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from camps.models import Camp, CampRegistration
from camps.payment import epc_payload, epc_qr_png
from camps.services import (
    AlreadyInCamp,
    CampFull,
    CampNotFound,
    CampNotPublic,
    GroupMismatch,
    MemberNotFound,
    SectionNotEligible,
    register_for_camp,
)
from core.tests_utils import (
    make_camp,
    make_guardian,
    make_member,
    make_registration,
    make_user,
    medical_info,
    medical_payload,
)


class CampRegistrationServiceTests(TestCase):
    def setUp(self):
        self.camp = make_camp("GARCONS")
        self.member = make_member("GARCONS", age=10)

    def test_success_uses_camp_price(self):
        reg = register_for_camp(self.camp.pk, self.member.pk, remarks="Arrive le 2e jour")
        self.assertEqual(reg.paid_amount, Decimal("120.00"))
        self.assertFalse(reg.is_paid)
        self.assertFalse(reg.medical_info_updated)
        self.assertIsNone(reg.medical_info)

    def test_missing_camp(self):
        with self.assertRaises(CampNotFound) as ctx:
            register_for_camp(999999, self.member.pk)
        self.assertEqual(ctx.exception.status_code, 404)

    def test_missing_member(self):
        with self.assertRaises(MemberNotFound):
            register_for_camp(self.camp.pk, 999999)

    def test_not_public(self):
        camp = make_camp("GARCONS", is_public=False)
        with self.assertRaises(CampNotPublic) as ctx:
            register_for_camp(camp.pk, self.member.pk)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_group_mismatch(self):
        girl = make_member("FILLES", age=10, guardian=make_guardian("0477000009"))
        with self.assertRaises(GroupMismatch):
            register_for_camp(self.camp.pk, girl.pk)

    def test_section_not_eligible(self):
        camp = make_camp("GARCONS", sections=["POUSSINS_G"])
        with self.assertRaises(SectionNotEligible):
            register_for_camp(camp.pk, self.member.pk)

    def test_duplicate(self):
        register_for_camp(self.camp.pk, self.member.pk)
        with self.assertRaises(AlreadyInCamp) as ctx:
            register_for_camp(self.camp.pk, self.member.pk)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(CampRegistration.objects.count(), 1)

    def test_capacity_is_never_exceeded(self):
        camp = make_camp("GARCONS", max_participants=1)
        register_for_camp(camp.pk, self.member.pk)

        other = make_member("GARCONS", age=11, first_name="Noah", guardian=make_guardian("0477000010"))
        with self.assertRaises(CampFull):
            register_for_camp(camp.pk, other.pk)
        self.assertEqual(camp.registrations.count(), 1)
        self.assertEqual(camp.places_left(), 0)

    def test_staff_age_member_fits_oldest_section(self):
        leader = make_member("GARCONS", age=19, first_name="Tom", guardian=make_guardian("0477000011"))
        camp = make_camp("GARCONS", sections=["BROTHERS"])
        self.assertTrue(register_for_camp(camp.pk, leader.pk).pk)

    def test_medical_override_is_used(self):
        make_registration(self.member)
        override = medical_payload(has_diet=True, diet_details="Sans gluten")
        reg = register_for_camp(self.camp.pk, self.member.pk, medical_data=override)

        self.assertTrue(reg.medical_info_updated)
        self.assertEqual(reg.effective_medical_info()["diet"]["diet_details"], "Sans gluten")

    def test_effective_medical_info_falls_back_to_registration(self):
        make_registration(
            self.member,
            medical_info=medical_info(diet={"has_diet": True, "diet_details": "Végétarien"}),
        )
        reg = register_for_camp(self.camp.pk, self.member.pk)
        self.assertEqual(reg.effective_medical_info()["diet"]["diet_details"], "Végétarien")


class CampRegistrationApiTests(TestCase):
    url = "/api/camp-registrations/"

    def setUp(self):
        self.camp = make_camp("GARCONS")
        self.member = make_member("GARCONS", age=10)

    def post(self, **data):
        return self.client.post(self.url, data, content_type="application/json")

    def test_anonymous_registration(self):
        resp = self.post(camp_id=self.camp.pk, member_id=self.member.pk)
        self.assertEqual(resp.status_code, 201, resp.content)
        body = resp.json()
        self.assertEqual(body["amount"], "120.00")
        self.assertEqual(body["confirmation_url"], f"/camps/{self.camp.pk}/confirmation/")

    def test_errors_map_to_status(self):
        self.assertEqual(self.post(camp_id=999999, member_id=self.member.pk).status_code, 404)
        self.assertEqual(self.post(camp_id=self.camp.pk, member_id=999999).status_code, 404)

        self.post(camp_id=self.camp.pk, member_id=self.member.pk)
        resp = self.post(camp_id=self.camp.pk, member_id=self.member.pk)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("error", resp.json())

    def test_changed_medical_info_requires_sheet(self):
        resp = self.post(camp_id=self.camp.pk, member_id=self.member.pk, medical_info_changed=True)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("medical_info", resp.json()["details"])

    def test_changed_medical_info_is_stored(self):
        sheet = medical_payload(takes_medication=True, medication_details="Rilatine")
        resp = self.post(camp_id=self.camp.pk, member_id=self.member.pk, medical_info_changed=True, medical_info=sheet)
        self.assertEqual(resp.status_code, 201, resp.content)

        reg = CampRegistration.objects.get()
        self.assertTrue(reg.medical_info_updated)
        self.assertTrue(reg.medical_info["medications"]["takes_medication"])


class CampApiTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", role="ADMIN")
        self.filles_president = make_user("pres_f", role="PRESIDENT", group="FILLES")
        self.garcons_animateur = make_user("anim_g", role="ANIMATEUR", group="GARCONS")
        self.boys_camp = make_camp("GARCONS", name="Camp Garçons")
        self.girls_camp = make_camp("FILLES", name="Camp Filles")

    def payload(self, **overrides):
        start = timezone.localdate() + timedelta(days=60)
        data = {
            "name": "Camp de Pâques",
            "description": "Une semaine dans les Ardennes",
            "location": "Durbuy",
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=5)).isoformat(),
            "start_time": "10:00",
            "end_time": "17:00",
            "price": "150.00",
            "iban": "BE68539007547034",
            "bic": "GKCCBEBB",
            "beneficiary": "Patro Filles",
            "patro_group": "FILLES",
            "sections": ["ETINCELLES", "ALPINES"],
        }
        data.update(overrides)
        return data

    def test_anonymous_denied(self):
        self.assertEqual(self.client.get("/api/camps/").status_code, 403)

    def test_list_is_scoped(self):
        self.client.force_login(self.filles_president)
        names = [c["name"] for c in self.client.get("/api/camps/").json()["items"]]
        self.assertEqual(names, ["Camp Filles"])

        self.client.force_login(self.admin)
        items = self.client.get("/api/camps/", {"patro_group": "GARCONS"}).json()["items"]
        self.assertEqual([c["name"] for c in items], ["Camp Garçons"])
        self.assertEqual(items[0]["registrations_count"], 0)

    def test_list_exposes_labels_and_upcoming_flag(self):
        make_camp("FILLES", name="Camp passé", sections=["ALPINES"],
                  start_date=timezone.localdate() - timedelta(days=20),
                  end_date=timezone.localdate() - timedelta(days=13))
        self.client.force_login(self.filles_president)
        items = {c["name"]: c for c in self.client.get("/api/camps/").json()["items"]}

        self.assertTrue(items["Camp Filles"]["is_upcoming"])
        self.assertFalse(items["Camp passé"]["is_upcoming"])
        self.assertEqual(items["Camp passé"]["section_labels"], ["Alpines"])

    def test_president_creates_for_own_group_only(self):
        self.client.force_login(self.filles_president)

        resp = self.client.post("/api/camps/", self.payload(), content_type="application/json")
        self.assertEqual(resp.status_code, 201, resp.content)
        camp = Camp.objects.get(pk=resp.json()["id"])
        self.assertEqual(camp.created_by, self.filles_president)
        self.assertEqual(camp.sections, ["ETINCELLES", "ALPINES"])

        resp = self.client.post(
            "/api/camps/",
            self.payload(patro_group="GARCONS", sections=["BENJAMINS"]),
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 403)

    def test_required_fields_and_section_group(self):
        self.client.force_login(self.admin)
        resp = self.client.post("/api/camps/", self.payload(sections=[]), content_type="application/json")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/camps/", self.payload(sections=["BROTHERS"]), content_type="application/json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("sections", resp.json()["details"])

        data = self.payload()
        del data["iban"]
        self.assertEqual(self.client.post("/api/camps/", data, content_type="application/json").status_code, 400)

    def test_detail_rights(self):
        self.client.force_login(self.garcons_animateur)
        self.assertEqual(self.client.get(f"/api/camps/{self.girls_camp.pk}/").status_code, 403)
        self.assertEqual(self.client.get(f"/api/camps/{self.boys_camp.pk}/").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/camps/{self.girls_camp.pk}/").status_code, 403)
        self.assertEqual(self.client.get("/api/camps/999999/").status_code, 404)

    def test_put_replaces_animators(self):
        first = make_user("anim1", role="ANIMATEUR", group="FILLES")
        second = make_user("anim2", role="ANIMATEUR", group="FILLES")
        self.girls_camp.animators.add(first)

        self.client.force_login(self.filles_president)
        resp = self.client.put(
            f"/api/camps/{self.girls_camp.pk}/",
            self.payload(name="Camp renommé", animator_ids=[second.pk]),
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 200, resp.content)
        self.girls_camp.refresh_from_db()
        self.assertEqual(self.girls_camp.name, "Camp renommé")
        self.assertEqual(list(self.girls_camp.animators.all()), [second])

    def test_delete_cascades_registrations(self):
        member = make_member("GARCONS", age=10)
        register_for_camp(self.boys_camp.pk, member.pk)

        self.client.force_login(self.garcons_animateur)
        resp = self.client.delete(f"/api/camps/{self.boys_camp.pk}/")
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(Camp.objects.filter(pk=self.boys_camp.pk).exists())
        self.assertFalse(CampRegistration.objects.exists())

    def test_camp_recaps(self):
        member = make_member("GARCONS", age=10)
        make_registration(
            member,
            medical_info=medical_info(
                allergies={"has_allergies": True, "allergy_list": "Abeilles", "allergy_consequences": "Œdème"},
            ),
        )
        register_for_camp(self.boys_camp.pk, member.pk)

        self.client.force_login(self.garcons_animateur)
        data = self.client.get(f"/api/camps/{self.boys_camp.pk}/recaps/").json()
        self.assertEqual(data["allergies"][0]["details"], "Abeilles")
        self.assertEqual(data["allergies"][0]["section"], "Chevaliers")

        self.client.force_login(self.filles_president)
        self.assertEqual(self.client.get(f"/api/camps/{self.boys_camp.pk}/recaps/").status_code, 403)


class EpcPayloadTests(TestCase):
    def test_payload_lines(self):
        payload = epc_payload(
            iban="BE68 5390 0754 7034",
            bic="GKCCBEBB",
            beneficiary="Patro Saint-Joseph",
            amount=Decimal("120"),
            reference="Camp d'été",
        )
        self.assertEqual(
            payload.split("\n"),
            [
                "BCD",
                "002",
                "1",
                "SCT",
                "GKCCBEBB",
                "Patro Saint-Joseph",
                "BE68539007547034",
                "EUR120.00",
                "",
                "Camp d'été",
                "",
            ],
        )

    def test_amount_is_rounded_to_cents(self):
        payload = epc_payload("BE68539007547034", "", "Patro", "45.005", "Ref")
        self.assertIn("EUR45.01", payload.split("\n"))

    def test_qr_png_data_uri(self):
        uri = epc_qr_png("BE68539007547034", "GKCCBEBB", "Patro", 45, "Camp Test")
        self.assertTrue(uri.startswith("data:image/png;base64,"))
