"""End-to-end runs of the ``brogue-scanner`` command over temporary catalogs.

Run with: pytest tests/integration/test_cli_search.py -v
"""

from pathlib import Path

import orjson
import pytest

from brogue_scanner import cli


pytestmark = pytest.mark.integration


@pytest.fixture
def catalogs(write_catalog, catalog_line, tmp_path):
    write_catalog(
        "seeds-1-3.csv",
        [
            catalog_line(1, 2, "armor", "scale mail", enchantment=3, runic="mutuality", vault=1),
            catalog_line(1, 4, "gold", "gold pieces (3 piles)", quantity=150),
            catalog_line(2, 1, "weapon", "dagger", enchantment=0),
            catalog_line(2, 3, "ally", "goblin mystic", status="shackled", mutation="toxic"),
            catalog_line(3, 5, "armor", "scale mail", enchantment=1, carried_by="goblin"),
            catalog_line(3, 6, "potion", "incineration", quantity=2),
        ],
    )
    write_catalog("seeds-4.csv", [catalog_line(4, 2, "armor", "splint mail", enchantment=5, vault=2)])
    return tmp_path / "catalogs"


def test_text_report(catalogs, capsys):
    exit_code = cli.main(["-F", str(catalogs), "-a", "+1", "scale"])

    out = capsys.readouterr().out
    assert exit_code == cli.EXIT_OK
    assert "=====  BROGUE SEED SCANNER  =====" in out
    assert "Seed 1\n    Depth 2\n        A +3 scale mail of mutuality (vault 1)" in out
    assert "        A +1 scale mail (goblin)" in out
    assert "...2 matches found." in out


def test_verbosity_and_match_limit(catalogs, capsys):
    exit_code = cli.main(["-F", str(catalogs), "-e", "+1", "-m", "2", "-v", "1"])

    out = capsys.readouterr().out
    assert exit_code == cli.EXIT_OK
    assert "Seed 1\nSeed 3\n" in out
    assert "Seed 4" not in out
    assert "Depth" not in out.split("Matches:")[1]


def test_json_report(catalogs, capsys):
    exit_code = cli.main(["-F", str(catalogs), "--json", "-g", "100", "-S", "<1"])

    payload = orjson.loads(capsys.readouterr().out)
    assert exit_code == cli.EXIT_OK
    assert payload["seeds"] == [1]
    assert payload["matches"][0]["object"]["name"] == "150 gold pieces (3 piles)"
    assert payload["satisfied"] is False


def test_ally_and_depth_limit(catalogs, capsys):
    assert cli.main(["-F", str(catalogs), "-v", "3", "-A", "shackled", "mutation", "-d", "3"]) == cli.EXIT_OK

    out = capsys.readouterr().out
    assert "A shackled goblin mystic <toxic>" in out
    assert "depth: 1 to 3" in out


def test_compile_errors_are_reported_together(catalogs, capsys):
    exit_code = cli.main(["-F", str(catalogs), "-f", "runic", "-g", "d3"])

    err = capsys.readouterr().err
    assert exit_code == cli.EXIT_INVALID
    assert "'runic' is not a valid food search term" in err
    assert "COUNT is required for the 'gold' category" in err


def test_duplicate_criteria_are_rejected(catalogs, capsys):
    assert cli.main(["-F", str(catalogs), "-a", "scale", "scale"]) == cli.EXIT_INVALID
    assert "duplicate search criterion" in capsys.readouterr().err


def test_inverted_bounds(catalogs, capsys):
    assert cli.main(["-F", str(catalogs), "--minseed", "9", "--maxseed", "3", "-g", "1"]) == cli.EXIT_INVALID
    assert "seed range is inverted" in capsys.readouterr().err


def test_requires_search_terms(catalogs, capsys):
    assert cli.main(["-F", str(catalogs)]) == cli.EXIT_INVALID
    assert "no search terms" in capsys.readouterr().err


def test_no_catalog_files(tmp_path, capsys):
    (tmp_path / "empty").mkdir()

    assert cli.main(["-F", str(tmp_path / "empty"), "-g", "1"]) == cli.EXIT_NO_FILES


def test_unreadable_catalog_sets_exit_code(catalogs, write_catalog, capsys):
    write_catalog("seeds-0.csv", ["not,a,row"])

    exit_code = cli.main(["-F", str(catalogs), "-a", "scale"])

    captured = capsys.readouterr()
    assert exit_code == cli.EXIT_FILE_ERRORS
    assert "seeds-0.csv:2" in captured.err
    assert "...2 matches found." in captured.out


def test_stop_on_error(catalogs, write_catalog, capsys):
    write_catalog("seeds-0.csv", ["not,a,row"])

    assert cli.main(["-F", str(catalogs), "-a", "scale", "--stop-on-error"]) == cli.EXIT_FILE_ERRORS
    assert "...2 matches found." not in capsys.readouterr().out


def test_unreadable_nested_directory_is_skipped(catalogs, write_catalog, catalog_line, monkeypatch, capsys):
    locked = catalogs / "locked"
    write_catalog("seeds-9.csv", [catalog_line(9, 1, "gold", "gold pieces", quantity=5)], directory=locked)
    original_iterdir = Path.iterdir

    def iterdir(self):
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return original_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", iterdir)

    exit_code = cli.main(["-F", str(catalogs), "--nesting", "1", "-g", "1"])

    out = capsys.readouterr().out
    assert exit_code == cli.EXIT_OK
    assert "Seed 1\n" in out
    assert "Seed 9" not in out


def test_settings_supply_defaults(catalogs, monkeypatch, capsys):
    monkeypatch.setenv("BROGUE_SCANNER_DATA_DIR", str(catalogs))
    monkeypatch.setenv("BROGUE_SCANNER_MATCHES_MAX", "1")

    assert cli.main(["-a", "scale"]) == cli.EXIT_OK
    assert "...1 matches found." in capsys.readouterr().out


def test_utf8_catalogs_found_by_fallback(write_catalog, catalog_line, tmp_path, capsys):
    write_catalog("seeds.csv", [catalog_line(8, 1, "charm", "health", enchantment=2)], encoding="utf-8")

    assert cli.main(["-F", str(tmp_path / "catalogs"), "-c", "health"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "format: UTF-8" in out
    assert "A +2 health charm" in out
