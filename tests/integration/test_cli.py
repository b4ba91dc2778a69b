"""
Integration tests for the command line entry point.

Scans run from a pairs file so no network is needed.
"""

from collections.abc import Iterator
from pathlib import Path

import orjson
import pytest

from cyclearb.__main__ import build_parser, load_pairs_file, main
from cyclearb.config.settings import get_settings
from cyclearb.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Fresh settings built from a clean working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def pairs_file(tmp_path: Path) -> Path:
    path = tmp_path / "pairs.json"
    path.write_bytes(
        orjson.dumps(
            [
                {"base": "USDT", "target": "ETH", "rate": "0.0005"},
                {"base": "ETH", "target": "BTC", "rate": 0.05},
                {"base": "BTC", "target": "USDT", "rate": 42000},
            ]
        )
    )
    return path


class TestLoadPairsFile:
    """Tests for load_pairs_file."""

    def test_load(self, pairs_file: Path) -> None:
        pairs = load_pairs_file(pairs_file)

        assert [(p.base, p.target) for p in pairs] == [
            ("USDT", "ETH"),
            ("ETH", "BTC"),
            ("BTC", "USDT"),
        ]
        assert str(pairs[1].rate) == "0.05"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_pairs_file(tmp_path / "missing.json")

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            (b"{not json", "Invalid JSON"),
            (b'{"base": "usdt"}', "JSON array"),
            (b'[{"base": "usdt", "target": "eth"}]', "needs base, target and rate"),
            (b'[{"base": "usdt", "target": "eth", "rate": "cheap"}]', "non-numeric rate"),
        ],
    )
    def test_malformed_file(self, tmp_path: Path, content: bytes, message: str) -> None:
        path = tmp_path / "bad.json"
        path.write_bytes(content)

        with pytest.raises(ConfigurationError, match=message):
            load_pairs_file(path)


class TestMain:
    """Tests for the CLI main()."""

    def test_scan_pairs_file(self, pairs_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["scan", "usdt", "--pairs-file", str(pairs_file)])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "USDT → ETH → BTC → USDT" in out
        assert "+5.0000%" in out
        assert "Total opportunities: 1" in out

    def test_scan_default_base(self, pairs_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = main(["scan", "--max-path-length", "3", "--pairs-file", str(pairs_file)])

        assert exit_code == 0
        assert "Base: USDT" in capsys.readouterr().out

    def test_scan_extreme_rates(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Out of range quotes are reported as nothing found, not a traceback."""
        path = tmp_path / "extreme.json"
        path.write_text(
            '[{"base": "usdt", "target": "eth", "rate": "1e-1000000"},'
            ' {"base": "usdt", "target": "a", "rate": "1e600000"},'
            ' {"base": "a", "target": "b", "rate": "1e600000"},'
            ' {"base": "b", "target": "usdt", "rate": "1"}]'
        )

        exit_code = main(["scan", "usdt", "--pairs-file", str(path)])

        assert exit_code == 0
        assert "Total opportunities: 0" in capsys.readouterr().out

    def test_scan_huge_profit_reported(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "huge.json"
        path.write_text(
            '[{"base": "usdt", "target": "a", "rate": "1e600000"},'
            ' {"base": "a", "target": "b", "rate": "1"},'
            ' {"base": "b", "target": "usdt", "rate": "1"}]'
        )

        exit_code = main(["scan", "usdt", "--pairs-file", str(path)])

        assert exit_code == 0
        assert "e+600002%" in capsys.readouterr().out

    def test_scan_bad_pairs_file(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.json"
        path.write_text("[1, 2, 3]")

        exit_code = main(["scan", "--pairs-file", str(path)])

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_configuration(
        self,
        monkeypatch: pytest.MonkeyPatch,
        pairs_file: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setenv("MAX_PATH_LENGTH", "99")

        exit_code = main(["scan", "--pairs-file", str(pairs_file)])

        assert exit_code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_max_path_length_out_of_range(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["scan", "--max-path-length", "12"])

        assert exc_info.value.code == 2
