from django.test import TestCase

from core.models import GroupSettings
from core.tests_utils import make_camp
from staff.models import StaffMember


class PublicPagesTests(TestCase):
    def test_health(self):
        resp = self.client.get("/health/")
        self.assertEqual(resp.status_code, 200)

    def test_home_lists_published_contacts_and_open_camps(self):
        GroupSettings.objects.create(patro_group="FILLES", schedule="Dimanche 14h-17h")
        StaffMember.objects.create(
            last_name="Renard", first_name="Chloé", phone="0470123456", patro_group="FILLES",
            function="PRESIDENT", show_contact=True,
        )
        StaffMember.objects.create(
            last_name="Secret", first_name="Anne", phone="0470999999", patro_group="FILLES",
        )
        make_camp("FILLES", name="Camp Ardennes")
        make_camp("FILLES", name="Camp Privé", is_public=False)

        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Chloé")
        self.assertContains(resp, "+32 470 12 34 56")
        self.assertContains(resp, "Chevaliers (9-12 ans)")
        self.assertContains(resp, "Grandes (15-17 ans)")
        self.assertContains(resp, "Sections : Poussins (Filles), Benjamines, Étincelles, Alpines, Grandes")
        self.assertContains(resp, "Dimanche 14h-17h")
        self.assertContains(resp, "Camp Ardennes")
        self.assertNotContains(resp, "Secret")
        self.assertNotContains(resp, "Camp Privé")

    def test_camp_confirmation_shows_payment_qr(self):
        camp = make_camp("GARCONS", name="Camp Bouillon")
        resp = self.client.get(f"/camps/{camp.pk}/confirmation/")
        self.assertEqual(resp.status_code, 200)
        self.assertContains(resp, "Camp Camp Bouillon")
        self.assertContains(resp, "data:image/png;base64,")
        # montant localisé (fr-be)
        self.assertContains(resp, "120,00 €")

    def test_camp_confirmation_without_account(self):
        camp = make_camp("GARCONS", iban="")
        resp = self.client.get(f"/camps/{camp.pk}/confirmation/")
        self.assertEqual(resp.status_code, 200)
        self.assertNotContains(resp, "data:image/png")

    def test_camp_confirmation_missing(self):
        self.assertEqual(self.client.get("/camps/999999/confirmation/").status_code, 404)
