# reports/pdf.py
from __future__ import annotations

import io
import logging
import zipfile
from typing import Iterable

from django.template.loader import render_to_string
from xhtml2pdf import pisa

logger = logging.getLogger(__name__)


class PdfRenderError(Exception):
    status_code = 500


def html_to_pdf(html: str) -> bytes:
    buf = io.BytesIO()
    result = pisa.CreatePDF(html, dest=buf, encoding="utf-8")
    if result.err:
        raise PdfRenderError(f"xhtml2pdf reported {result.err} error(s)")
    return buf.getvalue()


def render_pdf(template_name: str, context: dict, request=None) -> bytes:
    """Template Django -> HTML -> PDF (xhtml2pdf)."""
    html = render_to_string(template_name, context, request=request)
    return html_to_pdf(html)


def zip_files(files: Iterable[tuple[str, bytes]]) -> bytes:
    """Archive ZIP ; un nom déjà présent reçoit un suffixe -2, -3…"""
    buf = io.BytesIO()
    seen: dict[str, int] = {}
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
        for name, content in files:
            count = seen.get(name, 0) + 1
            seen[name] = count
            if count > 1:
                stem, dot, ext = name.rpartition(".")
                name = f"{stem}-{count}.{ext}" if dot else f"{name}-{count}"
            zf.writestr(name, content)
    return buf.getvalue()
