"""
test_symbol_editor.py
=====================
Unit tests for the symbol edit session:
  - open() decodes the symbol's code, save() writes the re-encoded code
  - New user-created symbols are created, changed ones updated
  - Failed requests propagate and leave the persisted snapshot alone
  - cancel() discards the selection
"""

import sys
import os
import unittest
from unittest import mock

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "engine"))
from fire_rest_client import FireApiError, FireRestClient, FireSymbol
from symbol_editor import SymbolEditSession
from symcode_engine import SymbolCodec

codec = SymbolCodec()


def retrieved_symbol():
    return FireSymbol.from_record({
        "fid": 7, "fire_lat": 34.0, "fire_lon": -118.0, "fire_alt": 10.0,
        "reportedtimemark": "2018-10-20T10:00:00", "fire_extinguished": None,
        "fire_verified": False,
    })


def session():
    client = mock.create_autospec(FireRestClient, instance=True)
    return SymbolEditSession(codec, client), client


# ─────────────────────────────────────────────────────────────────────────────
# Open / save
# ─────────────────────────────────────────────────────────────────────────────

class TestOpenSave(unittest.TestCase):

    def test_open_decodes(self):
        s, _ = session()
        sel = s.open(retrieved_symbol())
        self.assertTrue(s.is_open)
        self.assertEqual(sel.function.name, "Fire Event")
        self.assertEqual(sel.affiliation, "H")

    def test_change_and_save_writes_code(self):
        s, _ = session()
        symbol = retrieved_symbol()
        s.open(symbol)
        wild_fire = next(o for o in s.selection.function_options if o.function.code == "CH----")
        s.change("function", wild_fire)
        s.change("status", "X")
        self.assertEqual(s.save(), "EHIXCH------")
        self.assertEqual(symbol.symbol_code, "EHIXCH------")
        self.assertFalse(s.is_open)

    def test_unchanged_retrieved_symbol_not_sent(self):
        s, client = session()
        s.open(retrieved_symbol())
        s.save()
        client.create_fire.assert_not_called()
        client.update_fire.assert_not_called()

    def test_string_coordinates_unchanged_not_sent(self):
        # the service may send coordinates as numeric strings
        s, client = session()
        symbol = FireSymbol.from_record({
            "fid": 7, "fire_lat": "34.1", "fire_lon": "-118.2", "fire_alt": "10",
            "reportedtimemark": "2018-10-20T10:00:00", "fire_extinguished": None,
            "fire_verified": False,
        })
        s.open(symbol)
        s.save()
        client.update_fire.assert_not_called()
        client.create_fire.assert_not_called()

    def test_changed_symbol_updated(self):
        s, client = session()
        symbol = retrieved_symbol()
        s.open(symbol)
        symbol.verified = True
        symbol.time_extinguished = "2018-10-22"
        s.save()
        client.update_fire.assert_called_once_with(7, {
            "lat": 34.0, "lon": -118.0, "alt": 10.0,
            "verified": True, "exttime": "2018-10-22",
        })
        self.assertTrue(symbol.db_verified)
        self.assertFalse(symbol.has_unsaved_changes())

    def test_new_user_symbol_created(self):
        s, client = session()
        symbol = FireSymbol(latitude="34.5", longitude="-118.25", altitude="0")
        s.open(symbol)
        s.save()
        client.create_fire.assert_called_once_with({"lat": 34.5, "lon": -118.25, "alt": 0.0})
        client.update_fire.assert_not_called()
        self.assertEqual(symbol.db_lat, 34.5)
        self.assertEqual(symbol.db_lon, -118.25)
        self.assertEqual(symbol.db_alt, 0.0)

    def test_save_without_client(self):
        s = SymbolEditSession(codec)
        symbol = FireSymbol(symbol_code="EHIPC-------", latitude=1.0, longitude=2.0, altitude=3.0)
        s.open(symbol)
        self.assertEqual(s.save(), "EHIPC-------")
        self.assertIsNone(symbol.db_lat)


# ─────────────────────────────────────────────────────────────────────────────
# Failure / cancel
# ─────────────────────────────────────────────────────────────────────────────

class TestFailureAndCancel(unittest.TestCase):

    def test_failed_update_keeps_snapshot(self):
        s, client = session()
        client.update_fire.side_effect = FireApiError("down", status_code=503)
        symbol = retrieved_symbol()
        s.open(symbol)
        symbol.latitude = 40.0
        with self.assertRaises(FireApiError):
            s.save()
        self.assertEqual(symbol.db_lat, 34.0)
        self.assertTrue(symbol.has_unsaved_changes())
        # session stays open so the save can be retried
        self.assertTrue(s.is_open)

    def test_failed_create_keeps_symbol_unpersisted(self):
        s, client = session()
        client.create_fire.side_effect = FireApiError("down")
        symbol = FireSymbol(latitude=1.0, longitude=2.0, altitude=3.0)
        s.open(symbol)
        with self.assertRaises(FireApiError):
            s.save()
        self.assertIsNone(symbol.db_lat)

    def test_cancel_discards(self):
        s, client = session()
        symbol = retrieved_symbol()
        s.open(symbol)
        s.change("affiliation", "F")
        s.cancel()
        self.assertEqual(symbol.symbol_code, "EHIPC-------")
        self.assertFalse(s.is_open)
        client.update_fire.assert_not_called()

    def test_change_requires_open_session(self):
        s, _ = session()
        with self.assertRaises(RuntimeError):
            s.change("status", "P")
        with self.assertRaises(RuntimeError):
            s.save()


if __name__ == "__main__":
    unittest.main()
