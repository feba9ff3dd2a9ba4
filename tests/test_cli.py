"""Tests for CLI entry point."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from tests.conftest import write_rules
from verimport.cli import main


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.delenv("VERIMPORT_RULE_FILE", raising=False)
    monkeypatch.delenv("VERIMPORT_MAX_DISPLAY", raising=False)
    return workdir


class TestVerifyCommand:
    def test_clean_packages_print_ok(self, shop_tree: Path, capsys: pytest.CaptureFixture[str]):
        with patch("sys.argv", ["verimport", "--base", "shop", "--dir", str(shop_tree), "shop.util"]):
            main()
        captured = capsys.readouterr()
        assert captured.out.endswith("\n✓ ok\n")

    def test_violations_exit_one(self, shop_tree: Path, capsys: pytest.CaptureFixture[str]):
        argv = ["verimport", "--base", "shop", "--dir", str(shop_tree), "shop", "shop.*"]
        with patch("sys.argv", argv):
            with pytest.raises(SystemExit) as exc_info:
                main()
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert 'Package "shop.api.v1"' in captured.out
        assert 'Package "shop.db"' in captured.out
        assert 'import "shop.api.handlers" has forbidden prefix shop.api' in captured.out
        assert captured.out.index("shop.api.v1") < captured.out.index('Package "shop.db"')
        assert "✓ ok" not in captured.out
        assert "some packages violate import rules" in captured.err

    def test_output_is_stable_across_runs(
        self, shop_tree: Path, capsys: pytest.CaptureFixture[str]
    ):
        argv = ["--base", "shop", "--dir", str(shop_tree), "shop.*"]
        outputs = []
        for _ in range(2):
            with pytest.raises(SystemExit):
                main(argv)
            outputs.append(capsys.readouterr().out)
        assert outputs[0] == outputs[1]

    def test_output_capped(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        root = tmp_path / "src"
        pkg = root / "big"
        pkg.mkdir(parents=True)
        (pkg / "mod.py").write_text("".join(f"import ext{i}\n" for i in range(15)))
        write_rules(pkg, [{"SelectorRegexp": "^ext"}])
        with pytest.raises(SystemExit):
            main(["--base", "big", "--dir", str(root), "big"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == 'Package "big"'
        assert len([ln for ln in lines if ln.startswith("\timport")]) == 10
        assert "\t... total 15 imports violated" in lines

    def test_pattern_outside_base(self, shop_tree: Path, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["--base", "shop", "--dir", str(shop_tree), "other.*"])
        assert exc_info.value.code == 1
        assert "load packages:" in capsys.readouterr().err

    def test_load_error(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["--base", "shop", "--dir", str(tmp_path / "nowhere"), "shop"])
        assert exc_info.value.code == 1
        assert "load packages:" in capsys.readouterr().err

    def test_verbose_logs_rule_files(
        self, shop_tree: Path, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level("INFO"):
            with pytest.raises(SystemExit):
                main(["-v", "--base", "shop", "--dir", str(shop_tree), "shop.*"])
        assert "Loaded rules from" in caplog.text


class TestUsage:
    def test_missing_base_prints_usage(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["shop.*"])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_missing_patterns_prints_usage(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["--base", "shop"])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "verimport" in capsys.readouterr().out


class TestConfigFile:
    def test_base_and_patterns_from_config(
        self, shop_tree: Path, _isolated_cwd: Path, capsys: pytest.CaptureFixture[str]
    ):
        (_isolated_cwd / ".verimport.json").write_text(
            json.dumps({"verify": {"base": "shop", "dir": str(shop_tree), "patterns": ["shop.util"]}})
        )
        main([])
        assert "✓ ok" in capsys.readouterr().out

    def test_cli_overrides_config(
        self, shop_tree: Path, _isolated_cwd: Path, capsys: pytest.CaptureFixture[str]
    ):
        (_isolated_cwd / ".verimport.json").write_text(
            json.dumps({"verify": {"base": "shop", "dir": str(shop_tree), "patterns": ["shop.*"]}})
        )
        main(["shop.util"])
        assert "✓ ok" in capsys.readouterr().out

    def test_max_display_from_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        root = tmp_path / "src"
        pkg = root / "big"
        pkg.mkdir(parents=True)
        (pkg / "mod.py").write_text("import ext1\nimport ext2\nimport ext3\n")
        write_rules(pkg, [{"SelectorRegexp": "^ext"}])
        config = tmp_path / "cfg.json"
        config.write_text(json.dumps({"verify": {"max_display": 1}}))
        with pytest.raises(SystemExit):
            main(["--config", str(config), "--base", "big", "--dir", str(root), "big"])
        out = capsys.readouterr().out
        assert "\t... total 3 imports violated" in out
