"""External IP address and what is known about its location."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

import requests

API_ENDPOINT = "https://ipapi.co/json/"
DEFAULT_INTERVAL = 300
REQUEST_TIMEOUT = 30

Value = Union[str, float, bool]

_REGIONAL_INDICATOR_A = 0x1F1E6


@dataclass(frozen=True)
class IPAddressInfo:
    """The location service's answer; absent fields keep their defaults."""

    error: bool = False
    reason: str = ""
    ip: str = ""
    version: str = ""
    city: str = ""
    region: str = ""
    region_code: str = ""
    country: str = ""
    country_name: str = ""
    country_code: str = ""
    country_code_iso3: str = ""
    country_capital: str = ""
    country_tld: str = ""
    continent_code: str = ""
    in_eu: bool = False
    postal: str | None = None
    latitude: float = 0.0
    longitude: float = 0.0
    timezone: str = ""
    utc_offset: str = ""
    country_calling_code: str = ""
    currency: str = ""
    currency_name: str = ""
    languages: str = ""
    country_area: float = 0.0
    country_population: float = 0.0
    asn: str = ""
    org: str = ""


_NUMBER_FIELDS = {"latitude", "longitude", "country_area", "country_population"}
_BOOL_FIELDS = {"error", "in_eu"}


def _convert(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
    elif name in _NUMBER_FIELDS:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif name == "postal":
        if value is None or isinstance(value, str):
            return value
    elif isinstance(value, str):
        return value
    raise ValueError("Failed to parse JSON")


def parse_info(payload: bytes | str | Mapping[str, Any]) -> IPAddressInfo:
    """Build the info from the service's JSON; an error answer raises ``RuntimeError``."""
    if isinstance(payload, Mapping):
        data: Any = payload
    else:
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise ValueError("Failed to parse JSON") from exc
    if not isinstance(data, Mapping):
        raise ValueError("Failed to parse JSON")
    values = {
        f.name: _convert(f.name, data[f.name])
        for f in dataclasses.fields(IPAddressInfo)
        if f.name in data
    }
    info = IPAddressInfo(**values)
    if info.error:
        raise RuntimeError(info.reason)
    return info


def fetch_info() -> IPAddressInfo:
    """Ask the location service about the current external address."""
    try:
        response = requests.get(API_ENDPOINT, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as exc:
        raise RuntimeError("Failed to request current location") from exc
    try:
        data = response.json()
    except ValueError as exc:
        raise ValueError("Failed to parse JSON") from exc
    return parse_info(data)


def _country_flag(code: str) -> str:
    if len(code) != 2 or not code.isascii() or not code.isalpha():
        return ""
    return "".join(chr(_REGIONAL_INDICATOR_A + ord(c) - ord("A")) for c in code.upper())


def info_values(info: IPAddressInfo) -> dict[str, Value]:
    """Placeholder values shown by the block."""
    values: dict[str, Value] = {
        "ip": info.ip,
        "version": info.version,
        "city": info.city,
        "region": info.region,
        "region_code": info.region_code,
        "country": info.country,
        "country_name": info.country_name,
        "country_flag": _country_flag(info.country_code),
        "country_code": info.country_code,
        "country_code_iso3": info.country_code_iso3,
        "country_capital": info.country_capital,
        "country_tld": info.country_tld,
        "continent_code": info.continent_code,
        "latitude": info.latitude,
        "longitude": info.longitude,
        "timezone": info.timezone,
        "utc_offset": info.utc_offset,
        "country_calling_code": info.country_calling_code,
        "currency": info.currency,
        "currency_name": info.currency_name,
        "languages": info.languages,
        "country_area": info.country_area,
        "country_population": info.country_population,
        "asn": info.asn,
        "org": info.org,
    }
    if info.postal is not None:
        values["postal"] = info.postal
    if info.in_eu:
        values["in_eu"] = True
    return values