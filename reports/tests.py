import io
import zipfile

from django.test import TestCase

from camps.services import register_for_camp
from core.classification import current_school_year
from core.tests_utils import make_camp, make_guardian, make_member, make_registration, make_user, medical_info
from reports.pdf import zip_files


class MedicalSheetsTests(TestCase):
    url = "/reports/medical-sheets/"

    def setUp(self):
        self.boy = make_member("GARCONS", age=10, first_name="Lucas", last_name="Martin", guardian=make_guardian("0477000001"))
        self.leader = make_member("GARCONS", age=20, first_name="Hugo", last_name="Bernard", guardian=make_guardian("0477000002"))
        self.girl = make_member("FILLES", age=8, first_name="Emma", last_name="Leroy", guardian=make_guardian("0477000003"))
        for m in (self.boy, self.leader, self.girl):
            make_registration(m, medical_info=medical_info(allergies={
                "has_allergies": True,
                "allergy_list": "Pollen",
                "allergy_consequences": "",
            }))

        self.garcons = make_user("anim_g", role="ANIMATEUR", group="GARCONS")
        self.client.force_login(self.garcons)

    def test_anonymous_redirected_to_login(self):
        self.client.logout()
        resp = self.client.get(self.url, {"type": "all"})
        self.assertEqual(resp.status_code, 302)
        self.assertIn("/dashboard/login/", resp["Location"])

    def test_account_without_profile_is_forbidden(self):
        self.client.force_login(make_user("nobody"))
        self.assertEqual(self.client.get(self.url, {"type": "all"}).status_code, 403)

    def test_single_sheet(self):
        resp = self.client.get(self.url, {"type": "single", "member_id": self.boy.pk})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertIn('filename="fiche-Martin-Lucas.pdf"', resp["Content-Disposition"])
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_single_sheet_other_group(self):
        resp = self.client.get(self.url, {"type": "single", "member_id": self.girl.pk})
        self.assertEqual(resp.status_code, 403)

    def test_single_sheet_missing(self):
        self.assertEqual(self.client.get(self.url, {"type": "single", "member_id": 999999}).status_code, 404)
        self.assertEqual(self.client.get(self.url, {"type": "single"}).status_code, 400)

    def test_all_combined(self):
        resp = self.client.get(self.url, {"type": "all"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn(f"fiches-toutes-{current_school_year()}.pdf", resp["Content-Disposition"])

    def test_staff_individual_zip(self):
        resp = self.client.get(self.url, {"type": "staff", "mode": "individual"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/zip")
        self.assertIn(f"fiches-animateurs-{current_school_year()}.zip", resp["Content-Disposition"])

        with zipfile.ZipFile(io.BytesIO(resp.content)) as zf:
            self.assertEqual(zf.namelist(), ["fiche-Bernard-Hugo.pdf"])

    def test_animateurs_alias(self):
        self.assertEqual(self.client.get(self.url, {"type": "animateurs"}).status_code, 200)

    def test_section_without_sheets(self):
        resp = self.client.get(self.url, {"type": "section", "section": "POUSSINS_G"})
        self.assertEqual(resp.status_code, 404)

        resp = self.client.get(self.url, {"type": "section", "section": "CHEVALIERS"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn(f"fiches-CHEVALIERS-{current_school_year()}.pdf", resp["Content-Disposition"])

    def test_invalid_parameters(self):
        self.assertEqual(self.client.get(self.url, {"type": "nope"}).status_code, 400)
        self.assertEqual(self.client.get(self.url, {"type": "all", "mode": "split"}).status_code, 400)


class RecapPdfTests(TestCase):
    url = "/reports/recaps/"

    def setUp(self):
        self.member = make_member("GARCONS", age=10, guardian=make_guardian("0477000001"))
        make_registration(self.member, medical_info=medical_info(diet={"has_diet": True, "diet_details": "Halal"}))
        self.camp = make_camp("GARCONS")
        register_for_camp(self.camp.pk, self.member.pk)

        self.client.force_login(make_user("pres_g", role="PRESIDENT", group="GARCONS"))

    def test_members_recap(self):
        resp = self.client.get(self.url, {"type": "members", "recap": "diets"})
        self.assertEqual(resp.status_code, 200)
        self.assertIn("recaps-diets.pdf", resp["Content-Disposition"])
        self.assertTrue(resp.content.startswith(b"%PDF"))

    def test_camp_recap(self):
        resp = self.client.get(self.url, {"type": "camp", "camp_id": self.camp.pk})
        self.assertEqual(resp.status_code, 200)

    def test_camp_recap_other_group(self):
        self.client.force_login(make_user("pres_f", role="PRESIDENT", group="FILLES"))
        resp = self.client.get(self.url, {"type": "camp", "camp_id": self.camp.pk})
        self.assertEqual(resp.status_code, 403)

    def test_invalid_parameters(self):
        self.assertEqual(self.client.get(self.url, {"recap": "sports"}).status_code, 400)
        self.assertEqual(self.client.get(self.url, {"type": "camp", "camp_id": "x"}).status_code, 404)
        self.assertEqual(self.client.get(self.url, {"type": "events"}).status_code, 400)


class ZipFilesTests(TestCase):
    def test_duplicate_names_get_suffix(self):
        data = zip_files([("fiche-A-B.pdf", b"1"), ("fiche-A-B.pdf", b"2")])
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            self.assertEqual(zf.namelist(), ["fiche-A-B.pdf", "fiche-A-B-2.pdf"])
