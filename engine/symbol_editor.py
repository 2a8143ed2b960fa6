"""
symbol_editor.py
================
Edit session for a single fire symbol: open → change fields → save / cancel.

    session = SymbolEditSession(SymbolCodec(), FireRestClient())
    session.open(symbol)                       # decodes symbol.symbol_code
    session.change("status", "P")
    session.save()                             # encodes, then creates/updates the record

Save persists through the REST client:
  • a user-created symbol with no persisted latitude is created (POST)
  • otherwise, if location, extinguish time or verified flag changed, updated (PUT)
The persisted snapshot on the symbol is refreshed only after the request
succeeds; FireApiError propagates to the caller.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from fire_rest_client import FireRestClient, FireSymbol, as_float
from symcode_engine import SymbolCodec, SymbolSelection

logger = logging.getLogger(__name__)


class SymbolEditSession:
    """
    Edits one FireSymbol at a time.  The selection lives only for the session;
    the symbol's code and persisted snapshot change on a successful save().
    """

    def __init__(self, codec: SymbolCodec, client: Optional[FireRestClient] = None) -> None:
        self.codec = codec
        self.client = client
        self.symbol: Optional[FireSymbol] = None
        self.selection: Optional[SymbolSelection] = None

    @property
    def is_open(self) -> bool:
        return self.symbol is not None

    def open(self, symbol: FireSymbol) -> SymbolSelection:
        logger.debug("Open symbol %s (%s)", symbol.fid, symbol.symbol_code)
        self.symbol = symbol
        self.selection = self.codec.decode(symbol.symbol_code)
        return self.selection

    def change(self, field_name: str, value: Any) -> SymbolSelection:
        self._require_open()
        self.selection = self.codec.apply_field_change(self.selection, field_name, value)
        return self.selection

    def cancel(self) -> None:
        self.symbol = None
        self.selection = None

    def save(self) -> str:
        self._require_open()
        symbol = self.symbol
        code = self.codec.encode(self.selection)
        symbol.symbol_code = code
        logger.info("Symbol %s saved as %s", symbol.fid, code)

        if self.client is not None:
            self._persist(symbol)

        self.symbol = None
        self.selection = None
        return code

    # ── Internals ──────────────────────────────────────────────────────────

    def _persist(self, symbol: FireSymbol) -> None:
        symbol.latitude = as_float(symbol.latitude)
        symbol.longitude = as_float(symbol.longitude)
        symbol.altitude = as_float(symbol.altitude)
        location = {"lat": symbol.latitude, "lon": symbol.longitude, "alt": symbol.altitude}

        if symbol.user_created and symbol.db_lat is None:
            self.client.create_fire(location)
            symbol.mark_persisted()
        elif symbol.has_unsaved_changes():
            self.client.update_fire(symbol.fid, dict(
                location, verified=symbol.verified, exttime=symbol.time_extinguished))
            symbol.mark_persisted()

    def _require_open(self) -> None:
        if self.symbol is None or self.selection is None:
            raise RuntimeError("No symbol is open for editing")
