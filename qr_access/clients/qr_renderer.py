"""Render verification links as PNG QR codes."""

from __future__ import annotations

import asyncio
import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M


class QRCodeRenderer:
    """Encode text into a QR code and return it as a ``data:`` URL."""

    def __init__(self, *, box_size: int = 10, border: int = 4) -> None:
        self._box_size = box_size
        self._border = border

    def render_png(self, data: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_M,
            box_size=self._box_size,
            border=self._border,
        )
        qr.add_data(data)
        qr.make(fit=True)
        image = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()

    async def render_data_url(self, data: str) -> str:
        png = await asyncio.to_thread(self.render_png, data)
        encoded = base64.b64encode(png).decode("ascii")
        return f"data:image/png;base64,{encoded}"


__all__ = ["QRCodeRenderer"]
