"""
Tests for the pattern registry and row-table tokens.

Covers:
  - Every PatternKind has exactly one definition
  - Name resolution: canonical names, aliases, case, unknown names
  - Token parsing and stitch flipping
  - Structural validation of custom tables
"""

from types import MappingProxyType

import pytest

from purlwise.patterns import (
    PatternKind,
    PatternRegistry,
    RowFamily,
    RowSpec,
    StitchToken,
    get_registry,
)
from purlwise.patterns.registry import parse_token


@pytest.fixture(scope="module")
def registry():
    return get_registry()


class TestRegistryLoad:
    def test_every_kind_defined(self, registry):
        assert set(registry.definitions) == set(PatternKind)

    def test_definitions_read_only(self, registry):
        assert isinstance(registry.definitions, MappingProxyType)

    def test_row_heights(self, registry):
        assert registry.get(PatternKind.STOCKINETTE).row_height == 2
        assert registry.get(PatternKind.MOSS).row_height == 4
        assert registry.get(PatternKind.BASKETWEAVE).row_height == 6

    def test_families(self, registry):
        assert registry.get(PatternKind.RIB_2X2).family is RowFamily.RIB
        assert registry.get(PatternKind.SEED).family is RowFamily.TEXTURE
        assert registry.get(PatternKind.TRINITY).family is RowFamily.CLUSTER

    def test_unit_widths_divide_stitch_multiple(self, registry):
        for definition in registry.definitions.values():
            for row in definition.rows:
                assert definition.stitch_multiple % row.width == 0, definition.name

    def test_list_names_in_table_order(self, registry):
        names = registry.list_names()
        assert len(names) == len(PatternKind)
        assert names[0] == "Stockinette"
        assert "2x2 Rib" in names


class TestResolve:
    @pytest.mark.parametrize(
        "name,kind",
        [
            ("Stockinette", PatternKind.STOCKINETTE),
            ("st st", PatternKind.STOCKINETTE),
            ("Seed", PatternKind.SEED),
            ("SEED STITCH", PatternKind.SEED),
            ("moss", PatternKind.MOSS),
            ("  2x2 Rib  ", PatternKind.RIB_2X2),
            ("k2p2 rib", PatternKind.RIB_2X2),
            ("Blackberry Stitch", PatternKind.TRINITY),
        ],
    )
    def test_known_names(self, registry, name, kind):
        assert registry.resolve(name).kind is kind

    def test_unknown_name(self, registry):
        assert registry.resolve("Aran Cable XYZ") is None

    def test_non_string(self, registry):
        assert registry.resolve(None) is None  # type: ignore[arg-type]


class TestParseToken:
    def test_run_expands(self):
        assert parse_token("K2") == (StitchToken("K"), StitchToken("K"))

    def test_twisted(self):
        assert parse_token("K1tbl") == (StitchToken("K", "tbl"),)

    def test_slip(self):
        assert parse_token("sl1 wyif") == (StitchToken("sl", "wyif"),)

    def test_literal(self):
        (token,) = parse_token({"text": "P3tog", "consumes": 3})
        assert token.literal
        assert token.width == 3
        assert token.render() == "P3tog"

    def test_unrecognised(self):
        with pytest.raises(ValueError, match="Unrecognised row token"):
            parse_token("Q7")


class TestStitchToken:
    def test_flip_knit_purl(self):
        assert StitchToken("K").flipped() == StitchToken("P")
        assert StitchToken("P", "tbl").flipped() == StitchToken("K", "tbl")

    def test_flip_slip_yarn_position(self):
        assert StitchToken("sl", "wyif").flipped() == StitchToken("sl", "wyib")

    def test_literal_not_flipped(self):
        token = StitchToken("P3tog", width=3, literal=True)
        assert token.flipped() is token

    def test_render(self):
        assert StitchToken("K").render(3) == "K3"
        assert StitchToken("K", "tbl").render(1) == "K1tbl"
        assert StitchToken("sl", "wyib").render(2) == "sl2 wyib"

    def test_empty_row_rejected(self):
        with pytest.raises(ValueError):
            RowSpec(unit=())


def _write_table(path, body):
    (path / "patterns.yaml").write_text("entries:\n" + body)


class TestCustomTables:
    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PatternRegistry(data_dir=tmp_path)

    def test_missing_kinds_reported(self, tmp_path):
        _write_table(
            tmp_path,
            "  - {id: STOCKINETTE, name: Stockinette, family: texture,"
            " stitch_multiple: 1, rows: [[K1], [K1]]}\n",
        )
        with pytest.raises(ValueError) as exc_info:
            PatternRegistry(data_dir=tmp_path)
        assert "PatternKind.SEED has no definition" in str(exc_info.value)

    def test_duplicate_name_claim(self, tmp_path):
        _write_table(
            tmp_path,
            "  - {id: STOCKINETTE, name: Plain, family: texture,"
            " stitch_multiple: 1, rows: [[K1]]}\n"
            "  - {id: GARTER, name: plain, family: texture,"
            " stitch_multiple: 1, rows: [[K1], [P1]]}\n",
        )
        with pytest.raises(ValueError, match="claimed by both"):
            PatternRegistry(data_dir=tmp_path)

    def test_unparseable_yaml(self, tmp_path):
        (tmp_path / "patterns.yaml").write_text("entries: [\n")
        with pytest.raises(ValueError, match="Failed to parse"):
            PatternRegistry(data_dir=tmp_path)
