"""
Pattern registry: loads every StitchPatternDefinition from YAML at startup,
checks that each PatternKind has exactly one definition, and resolves
authored pattern names (case-insensitive, with aliases) to definitions.

The registry is a module-level singleton; call get_registry() to obtain it.
"""

from __future__ import annotations

import re
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, cast

import yaml

from .types import PatternKind, RowFamily, RowSpec, StitchPatternDefinition, StitchToken

_DATA_DIR = Path(__file__).parent / "data"

_PLAIN_TOKEN = re.compile(r"^(K|P)(\d+)(tbl)?$")
_SLIP_TOKEN = re.compile(r"^sl(\d+) (wyif|wyib)$")


def parse_token(raw: Any) -> tuple[StitchToken, ...]:
    """
    Expand one row-table token into individual stitches.

    ``"K2"`` → two knit stitches; ``"sl1 wyif"`` → one slipped stitch;
    ``{"text": "P3tog", "consumes": 3}`` → one literal stitch of width 3.
    """
    if isinstance(raw, dict):
        return (StitchToken(base=str(raw["text"]), width=int(raw["consumes"]), literal=True),)
    text = str(raw).strip()
    plain = _PLAIN_TOKEN.match(text)
    if plain:
        stitch = StitchToken(base=plain.group(1), suffix=plain.group(3) or "")
        return (stitch,) * int(plain.group(2))
    slip = _SLIP_TOKEN.match(text)
    if slip:
        return (StitchToken(base="sl", suffix=slip.group(2)),) * int(slip.group(1))
    raise ValueError(f"Unrecognised row token {raw!r}")


class PatternRegistry:
    """
    Read-only registry of stitch pattern definitions.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        self.definitions: MappingProxyType[PatternKind, StitchPatternDefinition]
        self._names: MappingProxyType[str, PatternKind]

        self._load_definitions()
        self._validate()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Pattern data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse pattern data file {path}: {exc}") from exc

    def _load_definitions(self) -> None:
        data = self._load_yaml("patterns.yaml")
        result: dict[PatternKind, StitchPatternDefinition] = {}
        names: dict[str, PatternKind] = {}
        for entry in data["entries"]:
            kind = PatternKind(entry["id"])
            if kind in result:
                raise ValueError(f"Duplicate pattern definition for {kind.value}")
            rows = tuple(
                RowSpec(unit=tuple(s for token in row for s in parse_token(token)))
                for row in entry["rows"]
            )
            definition = StitchPatternDefinition(
                kind=kind,
                name=entry["name"],
                family=RowFamily(entry["family"]),
                stitch_multiple=int(entry["stitch_multiple"]),
                rows=rows,
                description=entry.get("description", "").strip(),
                aliases=tuple(entry.get("aliases", [])),
                help_topic=entry.get("help_topic"),
            )
            result[kind] = definition
            for name in (definition.name, *definition.aliases):
                key = name.casefold()
                if key in names and names[key] != kind:
                    raise ValueError(
                        f"Pattern name {name!r} is claimed by both "
                        f"{names[key].value} and {kind.value}"
                    )
                names[key] = kind
        self.definitions = MappingProxyType(result)
        self._names = MappingProxyType(names)

    # ── Validation ─────────────────────────────────────────────────────────────

    def _validate(self) -> None:
        """Raises ValueError listing every structural problem in the table."""
        errors: list[str] = []
        for kind in PatternKind:
            if kind not in self.definitions:
                errors.append(f"PatternKind.{kind.value} has no definition")
        for kind, definition in self.definitions.items():
            for index, row in enumerate(definition.rows, start=1):
                prefix = f"{kind.value} row {index}"
                if definition.stitch_multiple % row.width:
                    errors.append(
                        f"{prefix}: unit width {row.width} does not divide "
                        f"stitch_multiple {definition.stitch_multiple}"
                    )
                if row.has_literals and definition.family is not RowFamily.CLUSTER:
                    errors.append(f"{prefix}: literal stitches are only allowed in cluster rows")
        if errors:
            raise ValueError(
                "Pattern registry validation failed:\n" + "\n".join(f"  • {e}" for e in errors)
            )

    # ── Query API ──────────────────────────────────────────────────────────────

    def resolve(self, name: str) -> Optional[StitchPatternDefinition]:
        """Return the definition for an authored pattern name, or None if unknown."""
        if not isinstance(name, str):
            return None
        kind = self._names.get(name.strip().casefold())
        return self.definitions[kind] if kind is not None else None

    def get(self, kind: PatternKind) -> StitchPatternDefinition:
        try:
            return self.definitions[kind]
        except KeyError:
            raise KeyError(f"No pattern definition for {kind!r}") from None

    def list_names(self) -> list[str]:
        """Canonical names of every pattern, in table order."""
        return [d.name for d in self.definitions.values()]


# ── Module-level singleton ─────────────────────────────────────────────────────

_registry: PatternRegistry = PatternRegistry()


def get_registry() -> PatternRegistry:
    """Return the module-level registry singleton."""
    return _registry
