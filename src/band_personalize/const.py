import re

# 3 or 6 hex digits, optionally preceded by "#", surrounding whitespace allowed
HEXADECIMAL_COLOR_PATTERN = re.compile(r"\s*#?([0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})\s*")
ARGB_COLOR_PATTERN = re.compile(r"\s*#?([0-9A-Fa-f]{8})\s*")

BYTE_MAX = 0xFF

# Hardware versions from this one up are Band 2 devices
HARDWARE_VERSION_BAND2 = 20

ME_TILE_WIDTH = 310
ME_TILE_HEIGHT_BAND = 102
ME_TILE_HEIGHT_BAND2 = 128

SCAN_TIMEOUT = 10.0
RESPONSE_TIMEOUT = 10.0
DEFAULT_ATTEMPTS = 3
RETRY_BACKOFF = 0.25

# Bytes per GATT write, ATT MTU minus opcode and handle
DEFAULT_CHUNK_SIZE = 244

MESSAGE_HEADER = 0xBA
RESPONSE_FLAG = 0x80

OPCODE_HARDWARE_VERSION = 0x01
OPCODE_GET_THEME = 0x02
OPCODE_SET_THEME = 0x03
OPCODE_GET_IMAGE = 0x04
OPCODE_SET_IMAGE = 0x05
OPCODE_ERROR = 0x7F
