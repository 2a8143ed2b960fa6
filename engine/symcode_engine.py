"""
symcode_engine.py
=================
Tactical Symbol Code ⇄ Cascading Symbol Selection

Translates a fixed 12-character tactical symbol code (MIL-STD-2525C layout)
into:
  • a structured selection  (scheme, affiliation, status, dimension,
                             function, modifier 1, modifier 2)
  • the option lists a symbol editor shows for every dropdown,
    re-derived each time a higher-level field changes (the cascade)
and encodes the selection back into a code.

Single-file design — the symbology dictionary is the only external input
(bundled JSON definitions under ./data, milsymbol layout).
Vocabularies and special-case option tables live in ZONE A below.

──────────────────────────────────────────────────────────────────────────────
FILE STRUCTURE
──────────────────────────────────────────────────────────────────────────────
  ZONE A  — CONFIGURATION  ← tables and defaults
              A1  Symbol Code Layout
              A2  Affiliation / Status Vocabularies
              A3  Synthetic Modifier Tables
              A4  Encode Defaults
              A5  Bundled Symbology Definitions

  ZONE B  — ENGINE         ← catalog, cascade, codec
              SymbologyCatalog  (+ load_catalog / build_catalog)
              SymbolSelection   (+ apply_field_change)
              decode / encode
              SymbolCodec       (main facade)

  ZONE C  — UTILITIES
              to_dataframe()
              catalog_to_dataframe()

──────────────────────────────────────────────────────────────────────────────
SYMBOL CODE LAYOUT
──────────────────────────────────────────────────────────────────────────────
  offset  width  field                  values
  0       1      coding scheme          catalog-defined   (E = Emergency Mgmt)
  1       1      standard identity      AFFILIATION_OPTIONS
  2       1      battle dimension       catalog-defined per function
  3       1      operational status     STATUS_OPTIONS
  4       6      function code          catalog-defined, '-' padded
  10      1      modifier 1             dimension-defined or synthetic
  11      1      modifier 2             dimension-defined or modifier-1 driven

Usage
-----
    from symcode_engine import SymbolCodec

    codec = SymbolCodec()
    sel = codec.decode("EHIPC-------")
    sel.function.name                 # → "Fire Event"

    dims = {d.name: d for d in sel.dimension_options}
    sel = codec.apply_field_change(sel, "dimension", dims["Ground Equipment"])
    [m.key for m in sel.modifier1_options]   # → ["M", "N"]

    codec.encode(sel)                 # → "EHZP--------"
"""

from __future__ import annotations
import json
import logging
import os
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
#  ZONE A — CONFIGURATION
#  ─────────────────────────────────────────────────────────────────────────────
#  Vocabularies, synthetic option tables and code defaults.
#  New special cases are new table entries: a dimension name in A3 gains
#  extra modifier-1 options, a modifier-1 key in A3 swaps the modifier-2 list.
#  Widths in A4 must stay in step with the layout in A1.
# ═══════════════════════════════════════════════════════════════════════════════

# ─────────────────────────────────────────────────────────────────────────────
# A1 — SYMBOL CODE LAYOUT
# ─────────────────────────────────────────────────────────────────────────────
# (field, start, stop) — zero-based slice bounds into the 12-character code.
# ─────────────────────────────────────────────────────────────────────────────
SYMBOL_CODE_LENGTH = 12

CODE_FIELDS: List[Tuple[str, int, int]] = [
    ("scheme",            0,  1),
    ("affiliation",       1,  2),
    ("battle_dimension",  2,  3),
    ("status",            3,  4),
    ("function",          4, 10),
    ("modifier1",        10, 11),
    ("modifier2",        11, 12),
]

# ─────────────────────────────────────────────────────────────────────────────
# A2 — AFFILIATION / STATUS VOCABULARIES
# ─────────────────────────────────────────────────────────────────────────────
# Fixed vocabularies, independent of the symbology catalog.
# Entries are (key, label).  '-' is the "not set" placeholder in a code and is
# therefore NOT an option here.
# ─────────────────────────────────────────────────────────────────────────────
AFFILIATION_OPTIONS: List[Tuple[str, str]] = [
    ("U", "Unknown"),
    ("F", "Friend"),
    ("N", "Neutral"),
    ("H", "Hostile"),
    ("P", "Pending"),
    ("J", "Joker"),
    ("K", "Faker"),
    ("S", "Suspect"),
    ("A", "Assumed Friend"),
    ("G", "Exercise Pending"),
    ("W", "Exercise Unknown"),
    ("D", "Exercise Friend"),
    ("L", "Exercise Neutral"),
    ("M", "Exercise Assumed Friend"),
    ("O", "None Specified"),
]

STATUS_OPTIONS: List[Tuple[str, str]] = [
    ("P", "Present"),
    ("C", "Present/Fully Capable"),
    ("F", "Present/Full To Capacity"),
    ("D", "Present/Damaged"),
    ("X", "Extinguished"),
    ("A", "Anticipated/Planned"),
]

# ─────────────────────────────────────────────────────────────────────────────
# A3 — SYNTHETIC MODIFIER TABLES
# ─────────────────────────────────────────────────────────────────────────────
# SYNTHETIC_MODIFIER1 : dimension name → extra modifier-1 options appended
#                       after the dimension's own table.  These values do not
#                       exist in the bundled definitions.
# MODIFIER2_OVERRIDES : modifier-1 key → modifier-2 vocabulary that REPLACES
#                       the dimension's modifier-2 list while selected.
# ─────────────────────────────────────────────────────────────────────────────
SYNTHETIC_MODIFIER1: Dict[str, List[Tuple[str, str]]] = {
    "Ground Equipment": [
        ("M", "Mobility"),
        ("N", "Towed Array"),
    ],
}

MODIFIER2_OVERRIDES: Dict[str, List[Tuple[str, str]]] = {
    # Mobility
    "M": [
        ("O", "Wheeled/Limited XCountry"),
        ("P", "Wheeled Cross Country"),
        ("Q", "Tracked"),
        ("R", "Wheeled and Tracked"),
        ("S", "Towed"),
        ("T", "Rail"),
        ("U", "Over the Snow"),
        ("V", "Sled"),
        ("W", "Pack Animals"),
        ("X", "Barge"),
        ("Y", "Amphibious"),
    ],
    # Towed array
    "N": [
        ("S", "Towed Array (Short)"),
        ("L", "Towed Array (Long)"),
    ],
}

# ─────────────────────────────────────────────────────────────────────────────
# A4 — ENCODE DEFAULTS
# ─────────────────────────────────────────────────────────────────────────────
# Written into the code for every field that is unset at save time.
# Widths must match CODE_FIELDS.
# ─────────────────────────────────────────────────────────────────────────────
ENCODE_DEFAULTS: Dict[str, str] = {
    "scheme":           "S",
    "affiliation":      "U",
    "battle_dimension": "Z",
    "status":           "-",
    "function":         "------",
    "modifier1":        "-",
    "modifier2":        "-",
}

# Prefix repeated once per ancestor in a function's name hierarchy (en dash).
FUNCTION_INDENT = "– "

# ─────────────────────────────────────────────────────────────────────────────
# A5 — BUNDLED SYMBOLOGY DEFINITIONS
# ─────────────────────────────────────────────────────────────────────────────
# Keys per entry:
#   code         : 1-char coding scheme written at offset 0 of the code
#   abbreviation : short scheme name (display only)
#   file         : definition file, relative to DATA_DIR
#
# DATA_DIR sits next to this module.  The definitions are not installed as
# package data, so run from the source tree or an editable install
# (pip install -e .); otherwise pass data_dir= to load_catalog().
# ─────────────────────────────────────────────────────────────────────────────
DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

BUNDLED_SCHEMES: List[Dict[str, str]] = [
    {"code": "E", "abbreviation": "EMS", "file": "2525c-emergency-management.json"},
    # Not bundled — add the definition file under ./data to enable:
    # {"code": "S", "abbreviation": "WAR",    "file": "2525c-warfighting.json"},
    # {"code": "I", "abbreviation": "SIGINT", "file": "2525c-signals-intelligence.json"},
    # {"code": "O", "abbreviation": "STBOPS", "file": "2525c-stability-operations.json"},
]


# ═══════════════════════════════════════════════════════════════════════════════
#  ZONE B — ENGINE
#  ─────────────────────────────────────────────────────────────────────────────
#  Catalog parsing, the cascade and the codec.  Reads ZONE A tables only;
#  holds no state beyond the cached bundled catalog.
# ═══════════════════════════════════════════════════════════════════════════════

class CatalogError(Exception):
    """A symbology definition could not be loaded or failed validation."""


class SymbolCodeError(ValueError):
    """A symbol code does not have the fixed 12-character layout."""


class SelectionError(ValueError):
    """A field change names an unknown field or an option that is not available."""


@dataclass(frozen=True)
class Modifier:
    key:   str
    label: str


@dataclass(frozen=True)
class Function:
    name_hierarchy:   Tuple[str, ...]   # most general first
    battle_dimension: str
    code:             str

    @property
    def name(self) -> str:
        return self.name_hierarchy[-1] if self.name_hierarchy else ""


# Catalog entities compare by identity: a selection always points into the
# catalog it was derived from.
@dataclass(frozen=True, eq=False)
class Dimension:
    name:       str
    functions:  Tuple[Function, ...]
    modifiers1: Mapping[str, Modifier]
    modifiers2: Mapping[str, Modifier]


@dataclass(frozen=True, eq=False)
class Scheme:
    code:         str
    label:        str
    abbreviation: str
    dimensions:   Mapping[str, Dimension]   # definition key → Dimension


@dataclass(frozen=True)
class FunctionOption:
    """A function as shown in the editor: indented label + the function itself."""
    label:    str
    function: Function


def _labelled_dimensions(scheme: Optional[Scheme]) -> Tuple[Dimension, ...]:
    if scheme is None:
        return ()
    return tuple(d for d in scheme.dimensions.values() if d.name)


@dataclass(frozen=True)
class SymbologyCatalog:
    """Read-only symbology dictionary.  Build with load_catalog()/build_catalog()."""
    schemes: Tuple[Scheme, ...]

    def scheme_by_code(self, code: str) -> Optional[Scheme]:
        for scheme in self.schemes:
            if scheme.code == code:
                return scheme
        return None

    def dimensions_of(self, scheme: Optional[Scheme]) -> Tuple[Dimension, ...]:
        return _labelled_dimensions(scheme)

    def find_dimension_by_function(
        self,
        scheme: Optional[Scheme],
        battle_dimension: str,
        function_code: str,
    ) -> Optional[Dimension]:
        # First match wins when the data repeats a (battle dimension, code) pair.
        for dim in self.dimensions_of(scheme):
            for fn in dim.functions:
                if fn.battle_dimension == battle_dimension and fn.code == function_code:
                    return dim
        return None

    def duplicate_functions(self) -> List[Tuple[str, str, str]]:
        """(scheme code, battle dimension, function code) pairs defined more than once."""
        counts: Counter = Counter()
        for scheme in self.schemes:
            for dim in self.dimensions_of(scheme):
                for fn in dim.functions:
                    counts[(scheme.code, fn.battle_dimension, fn.code)] += 1
        return [key for key, n in counts.items() if n > 1]

    def malformed_functions(self) -> List[Tuple[str, str, Function]]:
        """(scheme code, dimension name, function) entries whose widths break the code layout."""
        bad: List[Tuple[str, str, Function]] = []
        for scheme in self.schemes:
            for dim in self.dimensions_of(scheme):
                for fn in dim.functions:
                    if len(fn.battle_dimension) != 1 or len(fn.code) != 6:
                        bad.append((scheme.code, dim.name, fn))
        return bad


# ── Catalog loading ───────────────────────────────────────────────────────────

def _parse_modifiers(table: Optional[Mapping[str, Any]]) -> Dict[str, Modifier]:
    out: Dict[str, Modifier] = {}
    for key, entry in (table or {}).items():
        label = entry.get("name", "") if isinstance(entry, dict) else str(entry)
        out[key] = Modifier(key, label or "")
    return out


def _parse_function(icon: Mapping[str, Any]) -> Function:
    names = icon.get("name") or ()
    if isinstance(names, str):
        names = (names,)
    return Function(
        name_hierarchy   = tuple(str(n) for n in names),
        battle_dimension = str(icon.get("battle dimension", "")),
        code             = str(icon.get("code", "")),
    )


def _parse_dimension(raw: Mapping[str, Any]) -> Dimension:
    return Dimension(
        name       = raw.get("name") or "",
        functions  = tuple(_parse_function(icon) for icon in raw.get("main icon") or []),
        modifiers1 = _parse_modifiers(raw.get("modifier 1")),
        modifiers2 = _parse_modifiers(raw.get("modifier 2")),
    )


def _parse_scheme(code: str, abbreviation: str, definition: Mapping[str, Any]) -> Scheme:
    dimensions: Dict[str, Dimension] = {}
    for key, raw in definition.items():
        # The top-level "name" (scheme label) and other scalars are not dimensions
        if not isinstance(raw, dict):
            continue
        dimensions[key] = _parse_dimension(raw)
    return Scheme(
        code         = code,
        label        = str(definition.get("name", "")),
        abbreviation = abbreviation,
        dimensions   = dimensions,
    )


def build_catalog(
    definitions: Sequence[Mapping[str, Any]],
    *,
    strict: bool = False,
) -> SymbologyCatalog:
    """
    Build a catalog from parsed definitions.

    Each entry: {"code": "E", "abbreviation": "EMS", "definition": {...}}
    where "definition" is a milsymbol-style symbology dict.

    Duplicate (battle dimension, code) pairs and functions whose widths do not
    fit the code layout are logged; with strict=True they raise CatalogError.
    """
    schemes = tuple(
        _parse_scheme(d["code"], d.get("abbreviation", ""), d["definition"])
        for d in definitions
    )
    catalog = SymbologyCatalog(schemes)

    problems: List[str] = []
    for scheme_code, battle_dim, fn_code in catalog.duplicate_functions():
        problems.append(f"duplicate function {battle_dim}/{fn_code} in scheme '{scheme_code}'")
    for scheme_code, dim_name, fn in catalog.malformed_functions():
        problems.append(
            f"function {fn.battle_dimension!r}/{fn.code!r} in '{scheme_code}/{dim_name}' "
            f"does not fit the symbol code layout")

    if problems and strict:
        raise CatalogError("; ".join(problems))
    for p in problems:
        logger.warning("Symbology catalog: %s", p)
    return catalog


def load_catalog(
    sources: Optional[Sequence[Mapping[str, str]]] = None,
    *,
    data_dir: str = DATA_DIR,
    strict: bool = False,
) -> SymbologyCatalog:
    """Read definition files (default: BUNDLED_SCHEMES) and build a catalog."""
    definitions: List[Dict[str, Any]] = []
    for src in (BUNDLED_SCHEMES if sources is None else sources):
        path = os.path.join(data_dir, src["file"])
        try:
            with open(path, "r", encoding="utf-8") as f:
                definition = json.load(f)
        except (OSError, ValueError) as e:
            raise CatalogError(f"Cannot load symbology definition {path}: {e}") from e
        if not isinstance(definition, dict):
            raise CatalogError(f"Symbology definition {path} is not a JSON object")
        definitions.append({
            "code":         src["code"],
            "abbreviation": src.get("abbreviation", ""),
            "definition":   definition,
        })
        logger.debug("Loaded symbology definition %s as scheme %s", path, src["code"])
    return build_catalog(definitions, strict=strict)


_DEFAULT_CATALOG: Optional[SymbologyCatalog] = None


def default_catalog() -> SymbologyCatalog:
    """The bundled catalog, loaded on first use and shared thereafter."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        _DEFAULT_CATALOG = load_catalog()
    return _DEFAULT_CATALOG


# ── Selection state ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SymbolSelection:
    """One edit session's selection plus the option lists derived from it."""
    scheme:      Optional[Scheme]    = None
    affiliation: Optional[str]       = None
    status:      Optional[str]       = None
    dimension:   Optional[Dimension] = None
    function:    Optional[Function]  = None
    modifier1:   Optional[Modifier]  = None
    modifier2:   Optional[Modifier]  = None
    # Derived (re-built by apply_field_change, never set directly)
    dimension_options: Tuple[Dimension, ...]      = ()
    function_options:  Tuple[FunctionOption, ...] = ()
    modifier1_options: Tuple[Modifier, ...]       = ()
    modifier2_options: Tuple[Modifier, ...]       = ()


def _modifier_list(table: Iterable[Tuple[str, str]]) -> Tuple[Modifier, ...]:
    return tuple(Modifier(key, label) for key, label in table)


def _function_label(fn: Function) -> str:
    return FUNCTION_INDENT * max(len(fn.name_hierarchy) - 1, 0) + fn.name


def _require(value: Any, options: Iterable[Any], field_name: str) -> None:
    if value is not None and value not in list(options):
        raise SelectionError(f"{value!r} is not an available {field_name} option")


def _on_scheme(sel: SymbolSelection, scheme: Optional[Scheme]) -> SymbolSelection:
    return replace(
        sel,
        scheme            = scheme,
        dimension         = None,
        function          = None,
        modifier1         = None,
        modifier2         = None,
        dimension_options = _labelled_dimensions(scheme),
        function_options  = (),
        modifier1_options = (),
        modifier2_options = (),
    )


def _on_dimension(sel: SymbolSelection, dimension: Optional[Dimension]) -> SymbolSelection:
    _require(dimension, sel.dimension_options, "dimension")
    if dimension is None:
        functions, mods1, mods2 = (), (), ()
    else:
        functions = tuple(FunctionOption(_function_label(fn), fn) for fn in dimension.functions)
        mods1 = (tuple(dimension.modifiers1.values())
                 + _modifier_list(SYNTHETIC_MODIFIER1.get(dimension.name, ())))
        mods2 = tuple(dimension.modifiers2.values())
    return replace(
        sel,
        dimension         = dimension,
        function          = None,
        modifier1         = None,
        modifier2         = None,
        function_options  = functions,
        modifier1_options = mods1,
        modifier2_options = mods2,
    )


def _on_function(sel: SymbolSelection, fn: Union[Function, FunctionOption, None]) -> SymbolSelection:
    if isinstance(fn, FunctionOption):
        fn = fn.function
    _require(fn, (o.function for o in sel.function_options), "function")
    return replace(sel, function=fn)


def _on_affiliation(sel: SymbolSelection, key: Optional[str]) -> SymbolSelection:
    _require(key, (k for k, _ in AFFILIATION_OPTIONS), "affiliation")
    return replace(sel, affiliation=key)


def _on_status(sel: SymbolSelection, key: Optional[str]) -> SymbolSelection:
    _require(key, (k for k, _ in STATUS_OPTIONS), "status")
    return replace(sel, status=key)


def _on_modifier1(sel: SymbolSelection, modifier: Optional[Modifier]) -> SymbolSelection:
    _require(modifier, sel.modifier1_options, "modifier1")
    override = MODIFIER2_OVERRIDES.get(modifier.key) if modifier is not None else None
    if override is not None:
        mods2 = _modifier_list(override)
    elif sel.dimension is not None:
        mods2 = tuple(sel.dimension.modifiers2.values())
    else:
        mods2 = ()
    return replace(
        sel,
        modifier1         = modifier,
        modifier2         = sel.modifier2 if sel.modifier2 in mods2 else None,
        modifier2_options = mods2,
    )


def _on_modifier2(sel: SymbolSelection, modifier: Optional[Modifier]) -> SymbolSelection:
    _require(modifier, sel.modifier2_options, "modifier2")
    return replace(sel, modifier2=modifier)


_TRANSITIONS: Dict[str, Callable[[SymbolSelection, Any], SymbolSelection]] = {
    "scheme":      _on_scheme,
    "affiliation": _on_affiliation,
    "status":      _on_status,
    "dimension":   _on_dimension,
    "function":    _on_function,
    "modifier1":   _on_modifier1,
    "modifier2":   _on_modifier2,
}

SELECTION_FIELDS: Tuple[str, ...] = tuple(_TRANSITIONS)


def apply_field_change(selection: SymbolSelection, field_name: str, value: Any) -> SymbolSelection:
    """
    Return a new selection with `field_name` set to `value` (None unsets it)
    and every dependent field and option list re-derived:

      scheme     → dimension options rebuilt; dimension, function, modifiers cleared
      dimension  → function / modifier options rebuilt; function, modifiers cleared
      modifier1  → modifier-2 options rebuilt (MODIFIER2_OVERRIDES)

    Raises SelectionError for an unknown field or an unavailable option.
    """
    try:
        transition = _TRANSITIONS[field_name]
    except KeyError:
        raise SelectionError(f"Unknown selection field '{field_name}'") from None
    return transition(selection, value)


# ── Codec ─────────────────────────────────────────────────────────────────────

def split_code(code: str) -> Dict[str, str]:
    """Slice a symbol code into its positional segments."""
    if not isinstance(code, str) or len(code) != SYMBOL_CODE_LENGTH:
        raise SymbolCodeError(
            f"Symbol code must be exactly {SYMBOL_CODE_LENGTH} characters, got {code!r}")
    return {name: code[start:stop] for name, start, stop in CODE_FIELDS}


def decode(catalog: SymbologyCatalog, code: str) -> SymbolSelection:
    """
    Resolve every segment of `code` against the catalog and fixed vocabularies.
    Segments that match nothing leave their field unset; nothing raises except
    a malformed code length (SymbolCodeError).
    """
    parts = split_code(code)
    sel = SymbolSelection()

    scheme = catalog.scheme_by_code(parts["scheme"])
    sel = apply_field_change(sel, "scheme", scheme)

    dimension = catalog.find_dimension_by_function(
        scheme, parts["battle_dimension"], parts["function"])
    sel = apply_field_change(sel, "dimension", dimension)

    if dimension is not None:
        option = next((o for o in sel.function_options
                       if o.function.code == parts["function"]), None)
        if option is not None:
            sel = apply_field_change(sel, "function", option.function)

    affiliation = next((k for k, _ in AFFILIATION_OPTIONS if k == parts["affiliation"]), None)
    sel = apply_field_change(sel, "affiliation", affiliation)

    status = next((k for k, _ in STATUS_OPTIONS if k == parts["status"]), None)
    sel = apply_field_change(sel, "status", status)

    # modifier 2 is matched after the modifier-1 cascade has run
    modifier1 = next((m for m in sel.modifier1_options if m.key == parts["modifier1"]), None)
    sel = apply_field_change(sel, "modifier1", modifier1)

    modifier2 = next((m for m in sel.modifier2_options if m.key == parts["modifier2"]), None)
    sel = apply_field_change(sel, "modifier2", modifier2)

    logger.debug("Decoded %s → %s", code, _unresolved(parts, sel) or "fully resolved")
    return sel


def encode(selection: SymbolSelection) -> str:
    """Concatenate the selection into a code; unset fields fall back to ENCODE_DEFAULTS."""
    fn = selection.function
    return (
        (selection.scheme.code if selection.scheme else ENCODE_DEFAULTS["scheme"])
        + (selection.affiliation or ENCODE_DEFAULTS["affiliation"])
        + (fn.battle_dimension if fn else ENCODE_DEFAULTS["battle_dimension"])
        + (selection.status or ENCODE_DEFAULTS["status"])
        + (fn.code if fn else ENCODE_DEFAULTS["function"])
        + (selection.modifier1.key if selection.modifier1 else ENCODE_DEFAULTS["modifier1"])
        + (selection.modifier2.key if selection.modifier2 else ENCODE_DEFAULTS["modifier2"])
    )


def _unresolved(parts: Dict[str, str], sel: SymbolSelection) -> List[str]:
    """Code segments that carried a value but did not resolve to a field."""
    resolved = {
        "scheme":           sel.scheme is not None,
        "affiliation":      sel.affiliation is not None,
        "battle_dimension": sel.function is not None,
        "status":           sel.status is not None,
        "function":         sel.function is not None,
        "modifier1":        sel.modifier1 is not None,
        "modifier2":        sel.modifier2 is not None,
    }
    missing: List[str] = []
    for name, _, _ in CODE_FIELDS:
        if resolved[name] or parts[name] == ENCODE_DEFAULTS[name]:
            continue
        if parts[name].strip("-") == "":
            continue
        missing.append(name)
    return missing


class SymbolCodec:
    """
    Main codec facade around an injected, read-only catalog.

    Usage:
        codec = SymbolCodec()                 # bundled catalog
        sel = codec.decode("EHIPCH------")
        sel.function.name_hierarchy           # → ("Fire Event", "Wild Fire")
        codec.encode(sel)                     # → "EHIPCH------"
    """

    def __init__(self, catalog: Optional[SymbologyCatalog] = None) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()

    # ── Option lists that do not depend on the selection ──────────────────

    @property
    def scheme_options(self) -> Tuple[Scheme, ...]:
        return self.catalog.schemes

    @property
    def affiliation_options(self) -> List[Tuple[str, str]]:
        return list(AFFILIATION_OPTIONS)

    @property
    def status_options(self) -> List[Tuple[str, str]]:
        return list(STATUS_OPTIONS)

    # ── Public API ─────────────────────────────────────────────────────────

    def empty(self) -> SymbolSelection:
        return SymbolSelection()

    def decode(self, code: str) -> SymbolSelection:
        return decode(self.catalog, code)

    def decode_many(self, codes: Iterable[str]) -> List[SymbolSelection]:
        return [decode(self.catalog, c) for c in codes]

    def encode(self, selection: SymbolSelection) -> str:
        return encode(selection)

    def apply_field_change(self, selection: SymbolSelection, field_name: str, value: Any) -> SymbolSelection:
        if field_name == "scheme" and value is not None and value not in self.catalog.schemes:
            raise SelectionError(f"{value!r} is not an available scheme option")
        return apply_field_change(selection, field_name, value)

    def describe(self, symbol: Union[str, SymbolSelection]) -> Dict[str, Any]:
        """Flat, display-friendly view of a code or selection."""
        if isinstance(symbol, str):
            parts = split_code(symbol)
            sel = self.decode(symbol)
            unresolved = _unresolved(parts, sel)
        else:
            sel = symbol
            unresolved = []
        fn = sel.function
        return {
            "code":             encode(sel) if not isinstance(symbol, str) else symbol,
            "scheme":           sel.scheme.code if sel.scheme else None,
            "scheme_label":     sel.scheme.label if sel.scheme else None,
            "affiliation":      sel.affiliation,
            "status":           sel.status,
            "dimension":        sel.dimension.name if sel.dimension else None,
            "battle_dimension": fn.battle_dimension if fn else None,
            "function":         fn.code if fn else None,
            "function_name":    fn.name if fn else None,
            "function_path":    " / ".join(fn.name_hierarchy) if fn else None,
            "modifier1":        sel.modifier1.key if sel.modifier1 else None,
            "modifier1_label":  sel.modifier1.label if sel.modifier1 else None,
            "modifier2":        sel.modifier2.key if sel.modifier2 else None,
            "modifier2_label":  sel.modifier2.label if sel.modifier2 else None,
            "unresolved":       unresolved,
        }


# ═══════════════════════════════════════════════════════════════════════════════
#  ZONE C — UTILITIES
# ═══════════════════════════════════════════════════════════════════════════════

def to_dataframe(symbols: Sequence[Union[str, SymbolSelection]], codec: Optional[SymbolCodec] = None):
    """Convert codes and/or selections to a pandas DataFrame, one row each."""
    import pandas as pd
    codec = codec or SymbolCodec()
    rows = []
    for s in symbols:
        row = codec.describe(s)
        row["unresolved"] = ",".join(row["unresolved"])
        rows.append(row)
    return pd.DataFrame(rows)


def catalog_to_dataframe(catalog: Optional[SymbologyCatalog] = None):
    """One row per catalog function, in definition order."""
    import pandas as pd
    catalog = catalog or default_catalog()
    rows = []
    for scheme in catalog.schemes:
        for dim in catalog.dimensions_of(scheme):
            for fn in dim.functions:
                rows.append({
                    "scheme":           scheme.code,
                    "scheme_label":     scheme.label,
                    "dimension":        dim.name,
                    "battle_dimension": fn.battle_dimension,
                    "function":         fn.code,
                    "function_name":    fn.name,
                    "function_path":    " / ".join(fn.name_hierarchy),
                    "depth":            len(fn.name_hierarchy),
                    "label":            _function_label(fn),
                })
    return pd.DataFrame(rows)


# ─────────────────────────────────────────────────────────────────────────────
# Quick smoke-test (run: python symcode_engine.py)
# ─────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    TEST_CODES = [
        "EHIPC-------",
        "EHIPCH------",
        "EFOPAB----AC",
        "EUOPEBA---MQ",
        "EUOPEBA---NL",
        "ENNPBB------",
        "EHIPZZZZZZ--",
        "SUZ---------",
    ]

    codec = SymbolCodec()
    print(f"{'code':<14} {'dimension':<18} {'function':<34} {'m1':>3} {'m2':>3} {'re-encoded':<14}")
    print("-" * 92)
    for c in TEST_CODES:
        d = codec.describe(c)
        print(f"{c:<14} {str(d['dimension']):<18} {str(d['function_path']):<34} "
              f"{str(d['modifier1'] or '-'):>3} {str(d['modifier2'] or '-'):>3} "
              f"{codec.encode(codec.decode(c)):<14}")
        if d["unresolved"]:
            print(f"  ⚠  unresolved: {', '.join(d['unresolved'])}")
