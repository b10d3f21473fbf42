from __future__ import annotations

import io

import qrcode


def build_check_in_url(base_url: str, category_id: str) -> str:
    """URL encoded in a category's QR code: ``<base>/check-in/<categoryId>``."""
    return f"{base_url.rstrip('/')}/check-in/{category_id}"


def render_qr_png(data: str, *, box_size: int = 10, border: int = 2) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
