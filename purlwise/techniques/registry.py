"""
Technique registry: loads the Stitch-Consumption Table from YAML at startup
and exposes a read-only query API.

The registry is a module-level singleton; call get_registry() to obtain it.
The table is loaded and validated once at import time and never written to
afterwards.

Unknown techniques are not an error. A shaping rule may name a technique the
table does not carry (a designer's own abbreviation, a typo); it is treated
as a plain stitch that consumes one and produces one, so that downstream
stand-off arithmetic still lands on a sensible count.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, cast

import yaml

from .types import TechniqueEntry

_DATA_DIR = Path(__file__).parent / "data"

DEFAULT_CONSUMPTION = 1
COMPOUND_SEPARATOR = "_"


class TechniqueRegistry:
    """
    Read-only registry of stitch techniques.

    ``entries`` is wrapped in MappingProxyType after loading and is immutable
    for the lifetime of the registry instance.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        self.entries: MappingProxyType[str, TechniqueEntry]
        self._folded: MappingProxyType[str, TechniqueEntry]

        self._load_entries()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Technique data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse technique data file {path}: {exc}") from exc

    def _load_entries(self) -> None:
        data = self._load_yaml("stitch_values.yaml")
        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise ValueError("stitch_values.yaml must contain an 'entries' list")

        result: dict[str, TechniqueEntry] = {}
        folded: dict[str, TechniqueEntry] = {}
        errors: list[str] = []
        for raw in data["entries"]:
            try:
                entry = TechniqueEntry(
                    id=str(raw["id"]),
                    consumes=int(raw["consumes"]),
                    produces=int(raw["produces"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                errors.append(f"{raw!r}: {exc}")
                continue
            if entry.id in result:
                errors.append(f"duplicate technique id {entry.id!r}")
                continue
            result[entry.id] = entry
            folded.setdefault(entry.id.casefold(), entry)

        if errors:
            raise ValueError(
                "Technique registry validation failed:\n" + "\n".join(f"  • {e}" for e in errors)
            )
        self.entries = MappingProxyType(result)
        self._folded = MappingProxyType(folded)

    # ── Query API ──────────────────────────────────────────────────────────────

    def lookup(self, technique: str) -> Optional[TechniqueEntry]:
        """Return the entry for ``technique`` (exact, then case-insensitive), or None."""
        name = technique.strip()
        entry = self.entries.get(name)
        if entry is None:
            entry = self._folded.get(name.casefold())
        return entry

    def consumption(self, technique: str) -> int:
        """Stitches consumed by ``technique``; unknown techniques consume one."""
        entry = self.lookup(technique)
        return entry.consumes if entry else DEFAULT_CONSUMPTION

    def production(self, technique: str) -> int:
        """Stitches produced by ``technique``; unknown techniques produce one."""
        entry = self.lookup(technique)
        return entry.produces if entry else DEFAULT_CONSUMPTION

    def stitch_change(self, technique: str) -> int:
        """Net change (produces - consumes); unknown techniques are neutral."""
        entry = self.lookup(technique)
        return entry.stitch_change if entry else 0


def split_compound(technique: str) -> tuple[str, str]:
    """
    Split a paired technique such as ``"SSK_K2tog"`` into its two halves.

    The first half is worked at the start of a span (beginning of row, or
    before a marker); the second at its end. A plain technique name is
    returned as both halves.
    """
    first, sep, second = technique.partition(COMPOUND_SEPARATOR)
    if not sep:
        return technique, technique
    return first, second or first


# ── Module-level singleton ─────────────────────────────────────────────────────

_registry: TechniqueRegistry = TechniqueRegistry()


def get_registry() -> TechniqueRegistry:
    """Return the module-level registry singleton."""
    return _registry


def get_stitch_consumption(technique: str) -> int:
    """Stitches consumed by ``technique`` according to the module registry."""
    return _registry.consumption(technique)


def get_stitch_change(technique: str) -> int:
    """Net stitch change of ``technique`` according to the module registry."""
    return _registry.stitch_change(technique)
