"""
Step registry and construction-only steps.

Construction steps (cast on, bind off, pick up and knit, holders, custom
set-up and endings) are single actions: the same instruction on every row.
Their method names and help topics, the pattern and colorwork help topics,
and the default two-colour brioche rows are loaded from ``data/steps.yaml``.

The registry is a module-level singleton; call get_registry() to obtain it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Optional, Union, cast

import yaml

from purlwise.schemas.step import BriocheConfig, BriocheRow, ConstructionParams

_DATA_DIR = Path(__file__).parent / "data"


class ConstructionKind(str, Enum):
    CAST_ON = "CAST_ON"
    BIND_OFF = "BIND_OFF"
    PICK_UP_AND_KNIT = "PICK_UP_AND_KNIT"
    CONTINUE_FROM_STITCHES = "CONTINUE_FROM_STITCHES"
    CUSTOM_INITIALIZATION = "CUSTOM_INITIALIZATION"
    PUT_ON_HOLDER = "PUT_ON_HOLDER"
    ATTACH_TO_PIECE = "ATTACH_TO_PIECE"
    OTHER_ENDING = "OTHER_ENDING"


@dataclass(frozen=True)
class MethodEntry:
    key: str
    name: str
    help_topic: Optional[str] = None


@dataclass(frozen=True)
class ConstructionEntry:
    kind: ConstructionKind
    name: str
    methods: MappingProxyType[str, MethodEntry]
    help_topic: Optional[str] = None


@dataclass(frozen=True)
class ConstructionResult:
    text: str
    stitch_change: int = 0
    help_topic: Optional[str] = None


class StepRegistry:
    """
    Read-only registry of step-level lookup tables.

    Instantiate directly to use a custom data directory (e.g. in tests);
    otherwise use get_registry() for the module singleton.
    """

    def __init__(self, data_dir: Path = _DATA_DIR) -> None:
        self._data_dir = data_dir

        self.construction: MappingProxyType[ConstructionKind, ConstructionEntry]
        self.pattern_help: MappingProxyType[str, str]
        self.colorwork_help: MappingProxyType[str, str]
        self.finishing_help: MappingProxyType[str, str]
        self.brioche_reference: BriocheConfig
        self._construction_names: MappingProxyType[str, ConstructionKind]

        self._load_all()

    # ── Loading ────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        path = self._data_dir / filename
        try:
            with open(path) as f:
                return cast(dict[str, Any], yaml.safe_load(f))
        except FileNotFoundError:
            raise FileNotFoundError(f"Step data file not found: {path}") from None
        except yaml.YAMLError as exc:
            raise ValueError(f"Failed to parse step data file {path}: {exc}") from exc

    def _load_all(self) -> None:
        data = self._load_yaml("steps.yaml")

        construction: dict[ConstructionKind, ConstructionEntry] = {}
        names: dict[str, ConstructionKind] = {}
        for entry in data["construction"]:
            kind = ConstructionKind(entry["id"])
            methods = {
                key: MethodEntry(key=key, name=raw["name"], help_topic=raw.get("help_topic"))
                for key, raw in (entry.get("methods") or {}).items()
            }
            construction[kind] = ConstructionEntry(
                kind=kind,
                name=entry["name"],
                methods=MappingProxyType(methods),
                help_topic=entry.get("help_topic"),
            )
            names[entry["name"].casefold()] = kind
        missing = [k.value for k in ConstructionKind if k not in construction]
        if missing:
            raise ValueError(f"steps.yaml has no construction entry for: {', '.join(missing)}")

        self.construction = MappingProxyType(construction)
        self._construction_names = MappingProxyType(names)
        self.pattern_help = MappingProxyType(
            {str(k).casefold(): v for k, v in (data.get("pattern_help") or {}).items()}
        )
        self.colorwork_help = MappingProxyType(dict(data.get("colorwork_help") or {}))
        self.finishing_help = MappingProxyType(dict(data.get("finishing_help") or {}))
        self.brioche_reference = BriocheConfig(
            rows={
                str(key): BriocheRow(
                    instruction=row["instruction"], stitch_change=int(row.get("stitch_change", 0))
                )
                for key, row in (data.get("brioche_reference") or {}).items()
            }
        )

    # ── Query API ──────────────────────────────────────────────────────────────

    def construction_kind(self, pattern_name: str) -> Optional[ConstructionKind]:
        """The construction kind named by ``pattern_name``, or None for worked patterns."""
        return self._construction_names.get(pattern_name.strip().casefold())

    def help_for_pattern(self, pattern_name: str) -> Optional[str]:
        return self.pattern_help.get(pattern_name.strip().casefold())

    def help_for_colorwork(self, kind: Optional[str]) -> Optional[str]:
        if not kind:
            return None
        return self.colorwork_help.get(kind.strip().lower(), "colorwork_help")

    def help_for_finishing(self, text: Optional[str]) -> Optional[str]:
        if not text:
            return None
        lowered = text.lower()
        for keyword, topic in self.finishing_help.items():
            if keyword in lowered:
                return topic
        return None


# ── Rendering ──────────────────────────────────────────────────────────────────


def _count_text(count: Union[int, str, None], default: str) -> str:
    if count is None or count == "all":
        return default
    return "1 stitch" if count == 1 else f"{count} stitches"


def _count_value(count: Union[int, str, None], current_stitch_count: int) -> int:
    if count is None or count == "all":
        return current_stitch_count
    return int(count)


def render_construction(
    kind: ConstructionKind,
    params: Optional[ConstructionParams],
    current_stitch_count: int,
    registry: StepRegistry,
) -> ConstructionResult:
    """Single-action instruction for a construction step."""
    params = params or ConstructionParams()
    entry = registry.construction[kind]
    method = entry.methods.get(params.method or "")
    help_topic = method.help_topic if method and method.help_topic else entry.help_topic
    count = params.stitch_count

    match kind:
        case ConstructionKind.CAST_ON:
            stitches = _count_text(count, "stitches")
            change = int(count) if isinstance(count, int) else 0
            if params.method == "other" and params.custom_text:
                text = f"Cast on {stitches} using {params.custom_text}"
            elif method:
                text = f"Using {method.name}, cast on {stitches}"
            else:
                text = f"Cast on {stitches}"
            return ConstructionResult(text, change, help_topic)
        case ConstructionKind.BIND_OFF:
            stitches = _count_text(count, "all stitches")
            change = -_count_value(count, current_stitch_count)
            if params.method == "other" and params.custom_method:
                text = f"Bind off {stitches} using {params.custom_method}"
            elif method:
                text = f"Using {method.name}, bind off {stitches}"
            else:
                text = f"Bind off {stitches}"
            return ConstructionResult(text, change, help_topic)
        case ConstructionKind.PICK_UP_AND_KNIT:
            stitches = _count_text(count, "stitches")
            change = int(count) if isinstance(count, int) else 0
            location = f" from {params.custom_text}" if params.custom_text else ""
            return ConstructionResult(f"Pick up and knit {stitches}{location}", change, help_topic)
        case ConstructionKind.CONTINUE_FROM_STITCHES:
            stitches = _count_text(count if count is not None else current_stitch_count, "stitches")
            return ConstructionResult(f"Continue knitting with {stitches}", 0, help_topic)
        case ConstructionKind.CUSTOM_INITIALIZATION:
            return ConstructionResult(params.custom_text or "Complete custom setup", 0, help_topic)
        case ConstructionKind.PUT_ON_HOLDER:
            stitches = _count_text(count, "all stitches")
            change = -_count_value(count, current_stitch_count)
            return ConstructionResult(f"Put {stitches} on stitch holder", change, help_topic)
        case ConstructionKind.ATTACH_TO_PIECE:
            target = params.custom_text or "piece"
            return ConstructionResult(f"Attach to {target}", 0, help_topic)
        case ConstructionKind.OTHER_ENDING:
            text = params.custom_text or "Complete custom ending method"
            topic = registry.help_for_finishing(params.custom_text) or help_topic
            return ConstructionResult(text, 0, topic)
        case _:
            return ConstructionResult(f"Complete step: {entry.name}", 0, help_topic)


# ── Module-level singleton ─────────────────────────────────────────────────────

_registry: StepRegistry = StepRegistry()


def get_registry() -> StepRegistry:
    """Return the module-level registry singleton."""
    return _registry
