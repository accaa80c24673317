"""
领取码二维码渲染
"""

from io import BytesIO

import qrcode


def render_qr_png(payload: str, box_size: int = 10, border: int = 4) -> bytes:
    """把领取码渲染为 PNG 图片字节"""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
