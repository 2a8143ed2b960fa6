"""
fire_rest_client.py
===================
REST client for the fire-report service.

Retrieves fire point records and materialises them as map symbols, and
creates / updates records when a symbol is edited.

  GET  {base_url}         → {"data": [{fid, fire_lat, fire_lon, fire_alt,
                                       reportedtimemark, fire_extinguished,
                                       fire_verified}, ...]}
  POST {base_url}         ← {lat, lon, alt}
  PUT  {base_url}{fid}    ← {lat, lon, alt, verified, exttime}

No retry, batching or authentication.  A failed or timed-out request is logged
and raised as FireApiError; nothing on the caller's side is modified.

The map layer is a collaborator: any object with add_symbol(symbol).
"""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_FIRE_API_URL = "http://nasaspaceappschallenge2018.ddns.net:8081/api/fires/"

# Every retrieved record is drawn as a hostile, present fire incident.
FIRE_SYMBOL_CODE = "EHIPC-------"


class FireApiError(Exception):
    """The fire service could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FireApiConfig:
    """Configuration for the fire REST client."""
    base_url: str = DEFAULT_FIRE_API_URL
    timeout_seconds: float = 10.0

    def record_url(self, fid: Any) -> str:
        return f"{self.base_url}{fid}"


@dataclass
class FireSymbol:
    """A fire placed on the map, plus the last values known to be persisted."""
    symbol_code: str = FIRE_SYMBOL_CODE
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    altitude: Optional[float] = None
    fid: Optional[Any] = None
    time_reported: Optional[str] = None
    time_extinguished: Optional[str] = None
    verified: bool = False
    movable: bool = True
    user_created: bool = True
    # Persisted snapshot; db_lat is None until the record exists remotely
    db_lat: Optional[float] = None
    db_lon: Optional[float] = None
    db_alt: Optional[float] = None
    db_time_extinguished: Optional[str] = None
    db_verified: bool = False

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "FireSymbol":
        lat = as_float(row.get("fire_lat"))
        lon = as_float(row.get("fire_lon"))
        alt = as_float(row.get("fire_alt"))
        extinguished = row.get("fire_extinguished")
        verified = bool(row.get("fire_verified"))
        return cls(
            symbol_code=FIRE_SYMBOL_CODE,
            latitude=lat,
            longitude=lon,
            altitude=alt,
            fid=row.get("fid"),
            time_reported=row.get("reportedtimemark"),
            time_extinguished=extinguished,
            verified=verified,
            movable=False,
            user_created=False,
            db_lat=lat,
            db_lon=lon,
            db_alt=alt,
            db_time_extinguished=extinguished,
            db_verified=verified,
        )

    def mark_persisted(self) -> None:
        self.db_lat = self.latitude
        self.db_lon = self.longitude
        self.db_alt = self.altitude
        self.db_time_extinguished = self.time_extinguished
        self.db_verified = self.verified

    def has_unsaved_changes(self) -> bool:
        return (
            self.db_lat != self.latitude
            or self.db_lon != self.longitude
            or self.db_alt != self.altitude
            or self.db_time_extinguished != self.time_extinguished
            or self.db_verified != self.verified
        )


def as_float(value: Any) -> Optional[float]:
    """Coordinates may arrive as numbers or numeric strings; None stays None."""
    return None if value is None else float(value)


def try_parse_json(text: Optional[str]) -> Optional[Any]:
    """Parse a JSON string; None when the text is not valid JSON."""
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def format_exttime(exttime: Optional[str]) -> str:
    """'2018-10-20' → '20181020'; an absent time is sent as an empty string."""
    if exttime is None:
        return ""
    return exttime.replace("-", "", 2)


class FireRestClient:
    """
    Client for the fire-report REST service.

    Usage:
        client = FireRestClient()
        fires = client.retrieve_fires(layer)      # layer.add_symbol(...) per record
        client.create_fire({"lat": 34.2, "lon": -119.1, "alt": 0.0})
        client.update_fire(17, {"lat": ..., "lon": ..., "alt": ...,
                                "verified": True, "exttime": "2018-10-20"})
    """

    def __init__(self, config: Optional[FireApiConfig] = None):
        self.config = config or FireApiConfig()
        if not self.config.base_url:
            raise ValueError("FireRestClient requires a base_url")

    # ── Public API ─────────────────────────────────────────────────────────

    def retrieve_fires(self, symbol_manager: Any) -> List[FireSymbol]:
        if symbol_manager is None:
            raise ValueError("retrieve_fires requires a symbol manager")
        resp = self._send("GET", self.config.base_url, "retrieval")
        return self.handle_fires(try_parse_json(resp.text), symbol_manager)

    def create_fire(self, params: Dict[str, Any]) -> requests.Response:
        body = {"lat": params.get("lat"), "lon": params.get("lon"), "alt": params.get("alt")}
        return self._send("POST", self.config.base_url, "create", body)

    def update_fire(self, fid: Any, params: Dict[str, Any]) -> requests.Response:
        body = {
            "lat": params.get("lat"),
            "lon": params.get("lon"),
            "alt": params.get("alt"),
            "verified": params.get("verified"),
            "exttime": format_exttime(params.get("exttime")),
        }
        return self._send("PUT", self.config.record_url(fid), "update", body)

    def handle_fires(self, payload: Optional[Dict[str, Any]], symbol_manager: Any) -> List[FireSymbol]:
        """Turn a retrieval payload into FireSymbols registered with the manager."""
        if not payload or not isinstance(payload, dict):
            raise ValueError("Invalid fire payload")
        if symbol_manager is None:
            raise ValueError("Invalid symbol manager")

        fires: List[FireSymbol] = []
        for row in payload.get("data") or []:
            symbol = FireSymbol.from_record(row)
            symbol_manager.add_symbol(symbol)
            fires.append(symbol)
        logger.info("Loaded %d fires from %s", len(fires), self.config.base_url)
        return fires

    # ── Transport ──────────────────────────────────────────────────────────

    def _send(
        self,
        method: str,
        url: str,
        action: str,
        body: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        try:
            if method == "GET":
                resp = requests.get(url, timeout=self.config.timeout_seconds)
            elif method == "POST":
                resp = requests.post(url, json=body, timeout=self.config.timeout_seconds)
            else:
                resp = requests.put(url, json=body, timeout=self.config.timeout_seconds)
        except requests.Timeout as e:
            logger.warning("Fire %s timed out: %s", action, url)
            raise FireApiError(f"Fire {action} timed out: {url}") from e
        except requests.RequestException as e:
            logger.warning("Fire %s failed: %s (%s)", action, url, e)
            raise FireApiError(f"Fire {action} failed: {url}") from e

        if resp.status_code != 200:
            logger.warning("Fire %s failed (%s %s): %s",
                           action, resp.status_code, resp.reason, url)
            raise FireApiError(
                f"Fire {action} failed ({resp.status_code} {resp.reason}): {url}",
                status_code=resp.status_code,
            )
        return resp
