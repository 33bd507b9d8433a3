"""Runtime configuration defaults for pricing, logging and printing."""

from __future__ import annotations

import os
from decimal import Decimal

TAX_RATE = Decimal("0.08")
CURRENCY_SYMBOL = "$"

# Active server used when a line is delivered without an explicit server.
DEFAULT_SERVER = "John Doe"

DEBUG_LOG_PATH = os.environ.get("TABLEPOS_DEBUG_LOG", "/tmp/tablepos-debug.log")
LOG_LEVEL = os.environ.get("TABLEPOS_LOG_LEVEL", "INFO").upper()

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 8
PRINTER_TAIL_SPACER_PX = 70
