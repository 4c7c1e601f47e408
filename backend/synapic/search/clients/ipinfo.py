"""
IP geolocation lookup (ipinfo.io). Only used to hint the caller's country in the
response; it never gates a search. Uses IPINFO_TOKEN.
"""

from typing import Any, Optional

import requests

from synapic.search.clients.base import ParseFailure, SourceAdapter

_LOOPBACK = {"::1", "127.0.0.1"}
# Loopback has no location; look up a public resolver instead so local runs still get a hint
_FALLBACK_IP = "8.8.8.8"


class IpInfoAdapter(SourceAdapter):
    name = "ipinfo"
    timeout = 1.5
    singleton = True

    def build_request(self, query: str, start: int, locale: str) -> tuple[str, dict[str, Any]]:
        ip = _FALLBACK_IP if query in _LOOPBACK else query
        return f"https://ipinfo.io/{ip}", {"token": self.settings.ipinfo_token}

    def headers(self, locale: str) -> dict[str, str]:
        return {"User-Agent": self.settings.user_agent, "Accept": "application/json"}

    def parse(self, response: requests.Response, query: str, start: int, locale: str) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise ParseFailure(f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailure("geo response is not an object")
        return data

    def country(self, ip: Optional[str]) -> Optional[str]:
        if not ip or not self.settings.ipinfo_token:
            return None
        data = self.fetch(ip.strip(), locale="geo")
        return data.get("country") if data else None
