# camps/payment.py
"""
QR code de paiement SEPA (EPC069-12, "BCD").

Lignes du payload :
  BCD / 002 / 1 (UTF-8) / SCT / BIC / bénéficiaire / IBAN /
  EUR<montant> / code objet (vide) / référence / message
"""
from __future__ import annotations

import base64
import io
from decimal import ROUND_HALF_UP, Decimal

import qrcode
from qrcode.constants import ERROR_CORRECT_M

SERVICE_TAG = "BCD"
VERSION = "002"
CHARSET_UTF8 = "1"
IDENTIFICATION = "SCT"

MAX_BENEFICIARY = 70
MAX_REFERENCE = 140


def _amount(value) -> str:
    amount = Decimal(str(value or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"EUR{amount}"


def clean_iban(iban: str | None) -> str:
    return "".join((iban or "").split()).upper()


def epc_payload(
    iban: str,
    bic: str,
    beneficiary: str,
    amount,
    reference: str,
    message: str = "",
) -> str:
    lines = [
        SERVICE_TAG,
        VERSION,
        CHARSET_UTF8,
        IDENTIFICATION,
        (bic or "").strip().upper(),
        (beneficiary or "").strip()[:MAX_BENEFICIARY],
        clean_iban(iban),
        _amount(amount),
        "",
        (reference or "").strip()[:MAX_REFERENCE],
        (message or "").strip(),
    ]
    return "\n".join(lines)


def epc_qr_png(iban: str, bic: str, beneficiary: str, amount, reference: str, message: str = "") -> str:
    """PNG encodé en data URI (utilisable directement dans <img src>)."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=6, border=2)
    qr.add_data(epc_payload(iban, bic, beneficiary, amount, reference, message))
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def camp_payment(camp) -> dict:
    """Infos de paiement d'un camp (page de confirmation)."""
    has_account = bool(clean_iban(camp.iban))
    return {
        "amount": camp.price,
        "iban": camp.iban,
        "bic": camp.bic,
        "beneficiary": camp.beneficiary,
        "reference": camp.payment_reference,
        "qr_code": (
            epc_qr_png(camp.iban, camp.bic, camp.beneficiary, camp.price, camp.payment_reference)
            if has_account
            else None
        ),
    }
