from __future__ import annotations

import io

import qrcode


def qr_png(data: str, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    """Render ``data`` as a PNG QR code, returned as a rewound buffer."""
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
    buf.seek(0)
    return buf
