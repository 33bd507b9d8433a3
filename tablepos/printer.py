"""Thermal receipt printing over USB ESC/POS."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from tablepos.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from tablepos.models import ZERO, ItemStatus, PaymentDetails, PaymentMethod
from tablepos.pricing import format_money

logger = logging.getLogger(__name__)

_SEPARATOR_HEIGHT_PX = 14
_SEPARATOR_THICKNESS_PX = 2
_RIGHT_GUTTER_PX = 8
_LINE_EXTRA_PX = 10
FONT_PATH_ENV = "TABLEPOS_PRINTER_FONT_PATH"
SYSTEM_FONT_PATHS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
)
SEPARATOR = "__SEP__"


@dataclass(frozen=True)
class ReceiptRow:
    """One printed row: left text with an optional right-aligned amount."""

    left: str
    right: str = ""
    indent: bool = False


def receipt_rows(details: PaymentDetails, table_number: int | None = None) -> list[ReceiptRow]:
    """Build the printable rows for a settled payment."""
    rows: list[ReceiptRow] = []
    if table_number is not None:
        rows.append(ReceiptRow(f"Table {table_number}"))
    rows.append(ReceiptRow(details.paid_at.strftime("%Y-%m-%d %H:%M")))
    rows.append(ReceiptRow(SEPARATOR))

    for line in details.lines:
        if line.status is ItemStatus.CANCELLED:
            continue
        rows.append(ReceiptRow(f"{line.quantity}x {line.name}", format_money(line.line_total)))
        for label in line.modifiers:
            rows.append(ReceiptRow(label, indent=True))
        if line.notes:
            rows.append(ReceiptRow(f'"{line.notes}"', indent=True))

    rows.append(ReceiptRow(SEPARATOR))
    rows.append(ReceiptRow("Subtotal", format_money(details.subtotal)))
    rows.append(ReceiptRow("Tax", format_money(details.tax)))
    if details.tip > 0:
        rows.append(ReceiptRow("Tip", format_money(details.tip)))
    rows.append(ReceiptRow("TOTAL", format_money(details.total)))
    rows.append(ReceiptRow(SEPARATOR))

    if details.method is PaymentMethod.CASH:
        rows.append(ReceiptRow("Cash", format_money(details.amount_tendered or ZERO)))
        rows.append(ReceiptRow("Change", format_money(details.change_due or ZERO)))
    elif details.method is PaymentMethod.CARD:
        rows.append(ReceiptRow(f"{details.card_type or 'Card'} ****{details.card_last4 or ''}", format_money(details.total)))
    else:
        rows.append(ReceiptRow("Cash", format_money(details.split_cash or ZERO)))
        rows.append(ReceiptRow("Card", format_money(details.split_card or ZERO)))
    if details.notes:
        rows.append(ReceiptRow(details.notes))
    return rows


def _font_candidates() -> list[str]:
    override = os.environ.get(FONT_PATH_ENV, "").strip()
    ordered = [override, PRINTER_FONT_PATH, *SYSTEM_FONT_PATHS]
    return [path for path in dict.fromkeys(ordered) if path]


def resolve_printer_font_path() -> str:
    """First existing font from TABLEPOS_PRINTER_FONT_PATH, config, then system paths."""
    candidates = _font_candidates()
    for path in candidates:
        if Path(path).is_file():
            return path
    raise RuntimeError(f"no receipt font found (set {FONT_PATH_ENV}); looked in {', '.join(candidates)}")


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether receipts can be printed, without raising."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        logger.warning("printer unavailable: %s", exc)
        return (False, f"Printer unavailable: {exc}")
    return (True, "Printer ready")


def _text_width(draw: object, text: str, font: object) -> int:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    return right - left


def _truncate_to_width(text: str, font: object, max_width_px: int) -> str:
    """Shorten `text` with a trailing ellipsis until it fits `max_width_px`."""
    from PIL import Image, ImageDraw

    draw = ImageDraw.Draw(Image.new("1", (1, 1), color=1))
    if _text_width(draw, text, font) <= max_width_px:
        return text
    for cut in range(len(text) - 1, 0, -1):
        shortened = text[:cut].rstrip() + "..."
        if _text_width(draw, shortened, font) <= max_width_px:
            return shortened
    return "..."


def _blank(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _centered_y(draw: object, text: str, font: object, height_px: int) -> int:
    _, top, _, bottom = draw.textbbox((0, 0), text, font=font)
    return (height_px - (bottom - top)) // 2 - top


def _render_row(row: ReceiptRow, font: object) -> object:
    """Rasterise one row: left text at its indent, amount flush right."""
    from PIL import ImageDraw

    height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = _blank(height)
    draw = ImageDraw.Draw(img)

    amount_width = 0
    if row.right:
        amount_width = _text_width(draw, row.right, font)
        x_amount = PRINTER_WIDTH_PX - _RIGHT_GUTTER_PX - amount_width
        draw.text((x_amount, _centered_y(draw, row.right, font, height)), row.right, font=font, fill=0)

    x_left = PRINTER_LEFT_INDENT_PX * (3 if row.indent else 1)
    room = PRINTER_WIDTH_PX - x_left - _RIGHT_GUTTER_PX - amount_width - 12
    left = _truncate_to_width(row.left, font, max(24, room))
    draw.text((x_left, _centered_y(draw, left, font, height)), left, font=font, fill=0)
    return img


def _render_separator() -> object:
    from PIL import ImageDraw

    img = _blank(_SEPARATOR_HEIGHT_PX)
    top = (_SEPARATOR_HEIGHT_PX - _SEPARATOR_THICKNESS_PX) // 2
    ImageDraw.Draw(img).rectangle(
        (0, top, PRINTER_WIDTH_PX - 1, top + _SEPARATOR_THICKNESS_PX - 1),
        fill=0,
    )
    return img


def print_receipt(details: PaymentDetails, table_number: int | None = None) -> None:
    """Print the receipt for a settled payment and cut the paper.

    Raises RuntimeError when the printer stack or a font is missing; USB
    errors from python-escpos propagate to the caller.
    """
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except ImportError as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    images = [
        _render_separator() if row.left == SEPARATOR else _render_row(row, font)
        for row in receipt_rows(details, table_number)
    ]
    images.append(_blank(PRINTER_TAIL_SPACER_PX))

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    for image in images:
        printer.image(image)
    printer.cut()
    logger.info("receipt printed table=%s total=%s", table_number, details.total)
