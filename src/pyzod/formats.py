"""Predicates for the built-in string formats."""

from __future__ import annotations

import base64
import binascii
import datetime
import ipaddress
import re
from urllib.parse import urlsplit

import jwt

EMAIL = re.compile(
    r"^(?!\.)(?!.*\.\.)([A-Za-z0-9_'+\-.]*)[A-Za-z0-9_+\-]@([A-Za-z0-9][A-Za-z0-9\-]*\.)+[A-Za-z]{2,}$"
)
UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-8][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"
    r"|^00000000-0000-0000-0000-000000000000$"
    r"|^ffffffff-ffff-ffff-ffff-ffffffffffff$"
)
HEX = re.compile(r"^[0-9a-fA-F]*$")
ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATETIME = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:\d{2})?$"
)

# --- Identifiers ---

GUID = re.compile(r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$")
CUID = re.compile(r"^[cC][^\s-]{8,}$")
CUID2 = re.compile(r"^[0-9a-z]+$")
ULID = re.compile(r"^[0-9A-HJKMNP-TV-Za-hjkmnp-tv-z]{26}$")
XID = re.compile(r"^[0-9a-vA-V]{20}$")
KSUID = re.compile(r"^[A-Za-z0-9]{27}$")
NANOID = re.compile(r"^[a-zA-Z0-9_-]{21}$")


def uuid_pattern(version: int) -> re.Pattern:
    """UUIDs of one RFC 9562 version (1-8)."""
    if not 1 <= version <= 8:
        raise ValueError(f"UUID version must be 1-8, got {version}")
    return re.compile(
        rf"^[0-9a-fA-F]{{8}}-[0-9a-fA-F]{{4}}-{version}[0-9a-fA-F]{{3}}-[89abAB][0-9a-fA-F]{{3}}-[0-9a-fA-F]{{12}}$"
    )


UUID4 = uuid_pattern(4)
UUID6 = uuid_pattern(6)
UUID7 = uuid_pattern(7)

# --- Text ---

BASE64URL = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")
EMOJI = re.compile(
    "^["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F700-\U0001F77F"
    "\U0001F780-\U0001F7FF"
    "\U0001F800-\U0001F8FF"
    "\U0001F900-\U0001F9FF"
    "\U0001FA00-\U0001FA6F"
    "\U0001FA70-\U0001FAFF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "\U0001F1E6-\U0001F1FF"
    "\u3000-\u303F"
    "\u3200-\u32FF"
    "\U0001F004\U0001F0CF\U0001F18E"
    "\U0001F191-\U0001F19A"
    "\U0001F201\U0001F21A\U0001F22F"
    "\U0001F232-\U0001F236"
    "\U0001F238-\U0001F23A"
    "\U0001F250\U0001F251"
    "\U0001F3FB-\U0001F3FF"
    "\u200D\uFE0F"
    "]+$"
)


def is_email(value: str) -> bool:
    return EMAIL.match(value) is not None


def is_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme) and bool(parts.netloc)


def is_uuid(value: str) -> bool:
    return UUID.match(value) is not None


def is_ipv4(value: str) -> bool:
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_cidrv4(value: str) -> bool:
    if "/" not in value:
        return False
    try:
        ipaddress.IPv4Network(value, strict=False)
    except ValueError:
        return False
    return True


def is_cidrv6(value: str) -> bool:
    if "/" not in value:
        return False
    try:
        ipaddress.IPv6Network(value, strict=False)
    except ValueError:
        return False
    return True


def is_base64(value: str) -> bool:
    if len(value) % 4:
        return False
    try:
        base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def is_hex(value: str) -> bool:
    return HEX.match(value) is not None


def is_iso_date(value: str) -> bool:
    if ISO_DATE.match(value) is None:
        return False
    try:
        datetime.date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_iso_datetime(value: str) -> bool:
    if ISO_DATETIME.match(value) is None:
        return False
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.datetime.fromisoformat(text)
    except ValueError:
        return False
    return True


def _matcher(pattern: re.Pattern):
    def matches(value: str) -> bool:
        return pattern.match(value) is not None

    return matches


def is_base64url(value: str) -> bool:
    if BASE64URL.match(value) is None:
        return False
    body = value.rstrip("=")
    if len(body) % 4 == 1 or (len(body) != len(value) and len(value) % 4):
        return False
    try:
        base64.urlsafe_b64decode(body + "=" * (-len(body) % 4))
    except (binascii.Error, ValueError):
        return False
    return True


def is_jwt(value: str, alg: str | None = None) -> bool:
    """Structural JWT check: header and claims decode, ``alg`` is set and not
    ``none``, ``typ`` (when present) is ``JWT``. Signatures are not verified.
    """
    try:
        header = jwt.get_unverified_header(value)
        jwt.decode(value, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return False
    typ = header.get("typ")
    if isinstance(typ, str) and typ != "JWT":
        return False
    algorithm = header.get("alg")
    if not isinstance(algorithm, str) or algorithm == "none":
        return False
    return alg is None or algorithm == alg


FORMATS = {
    "email": is_email,
    "url": is_url,
    "uuid": is_uuid,
    "guid": _matcher(GUID),
    "uuidv4": _matcher(UUID4),
    "uuidv6": _matcher(UUID6),
    "uuidv7": _matcher(UUID7),
    "cuid": _matcher(CUID),
    "cuid2": _matcher(CUID2),
    "ulid": _matcher(ULID),
    "xid": _matcher(XID),
    "ksuid": _matcher(KSUID),
    "nanoid": _matcher(NANOID),
    "ipv4": is_ipv4,
    "ipv6": is_ipv6,
    "cidrv4": is_cidrv4,
    "cidrv6": is_cidrv6,
    "base64": is_base64,
    "base64url": is_base64url,
    "hex": is_hex,
    "emoji": _matcher(EMOJI),
    "jwt": is_jwt,
    "iso_date": is_iso_date,
    "iso_datetime": is_iso_datetime,
}

# Formats whose regex doubles as a JSON Schema ``pattern``.
ID_PATTERNS = {
    "guid": GUID,
    "uuidv4": UUID4,
    "uuidv6": UUID6,
    "uuidv7": UUID7,
    "cuid": CUID,
    "cuid2": CUID2,
    "ulid": ULID,
    "xid": XID,
    "ksuid": KSUID,
    "nanoid": NANOID,
    "base64url": BASE64URL,
}
