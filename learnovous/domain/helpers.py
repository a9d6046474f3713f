"""
Helpers for the account workflows.

Phone parsing and timezone lookup are delegated to `phonenumbers` and
`pytz`; OTP and token generation use the `secrets` module.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import phonenumbers
import pytz
from phonenumbers import NumberParseException, PhoneNumberFormat

# bcrypt refuses longer input
BCRYPT_MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class ParsedPhoneNumber:
    """Normalized phone number; every field is empty when parsing failed."""

    country_code: str = ""
    iso_code: str = ""
    international_number: str = ""


def parse_phone_number(raw: str) -> ParsedPhoneNumber:
    """
    Parse a raw phone number in international notation.

    A leading "+" is added when missing. Numbers that do not parse, or that
    parse but are not valid for their region, yield an empty result.
    """
    value = raw.strip()
    if not value.startswith("+"):
        value = "+" + value

    try:
        parsed = phonenumbers.parse(value, None)
    except NumberParseException:
        return ParsedPhoneNumber()

    if not phonenumbers.is_valid_number(parsed):
        return ParsedPhoneNumber()

    iso_code = phonenumbers.region_code_for_number(parsed)
    if not iso_code or iso_code == "ZZ":
        return ParsedPhoneNumber()

    return ParsedPhoneNumber(
        country_code=str(parsed.country_code),
        iso_code=iso_code,
        international_number=phonenumbers.format_number(parsed, PhoneNumberFormat.INTERNATIONAL),
    )


def get_country_timezones(iso_code: str) -> list[str]:
    """Return the timezone names for an ISO 3166 country code (empty if unknown)."""
    if not iso_code:
        return []
    return list(pytz.country_timezones.get(iso_code.upper(), []))


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric one-time code.

    Returns a string to preserve leading zeros.
    """
    return "".join(secrets.choice("0123456789") for _ in range(length))


def generate_token() -> str:
    """Generate an opaque URL-safe token for confirmation lookups."""
    return secrets.token_urlsafe(32)


def current_time() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def confirmation_expiry(minutes: int, now: datetime | None = None) -> datetime:
    return (now or current_time()) + timedelta(minutes=minutes)
