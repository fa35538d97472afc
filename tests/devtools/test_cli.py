"""`python -m plotweave` の list / run サブコマンドをテスト。"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from plotweave.__main__ import main
from plotweave.core.logging_setup import CLI_HANDLER_NAME
from plotweave.core.runtime_config import set_config_path


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    set_config_path(None)
    try:
        yield
    finally:
        set_config_path(None)
        logger = logging.getLogger("plotweave")
        for h in list(logger.handlers):
            if h.get_name() == CLI_HANDLER_NAME:
                logger.removeHandler(h)


def test_list_generators(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list", "generators"]) == 0
    names = capsys.readouterr().out.split()
    assert "concentric_circles" in names
    assert "lissajous" in names
    assert "dash" not in names


def test_list_all_has_both_sections(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list"]) == 0
    out = capsys.readouterr().out
    gen, mod = out.split("\n\n", 1)
    assert gen.startswith("generators:")
    assert mod.startswith("modifiers:")
    assert "dash" in mod.split()
    assert "attractor" in mod.split()


def test_run_prints_layer_stats(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "pipe.yaml"
    p.write_text(
        "\n".join(
            [
                "canvas: {width: 100, height: 100}",
                "steps:",
                "  - unit: concentric_circles",
                "    params: {count: 4, segments: 32}",
                "  - unit: dash",
                "    params: {dash_length: 4, gap_length: 2}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    assert main(["run", str(p), "--seed", "3", "--strict"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("canvas: 100 x 100 mm")
    assert "seed: 3" in lines[0]
    assert lines[1].startswith("concentric: paths=")
    assert lines[-1].startswith("total: paths=")


def test_run_with_explicit_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "config.yaml"
    cfg.write_text("pipeline: {seed: 99}\n", encoding="utf-8")
    p = tmp_path / "pipe.yaml"
    p.write_text("steps:\n  - unit: spiral\n", encoding="utf-8")
    assert main(["run", str(p), "--config", str(cfg)]) == 0
    first = capsys.readouterr().out.splitlines()[0]
    assert first.startswith("canvas: 210 x 297 mm")
    assert "seed: 99" in first


def test_list_verbose_shows_inputs_and_defaults(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list", "modifiers", "--verbose"]) == 0
    lines = capsys.readouterr().out.splitlines()
    head = next(line for line in lines if line.startswith("duplicate"))
    assert "input:guide_path?" in head
    i = lines.index(head)
    assert "    copies = 3" in lines[i + 1 :]
    assert any(line.startswith("extend_endpoints  [falloff") for line in lines)


def test_run_optimize_prints_before_and_after(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    p = tmp_path / "pipe.yaml"
    p.write_text(
        "\n".join(
            [
                "canvas: {width: 100, height: 100}",
                "steps:",
                "  - unit: grid",
                "",
            ]
        ),
        encoding="utf-8",
    )
    assert main(["run", str(p), "--seed", "1", "--optimize"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[-2].startswith("before: paths=")
    assert lines[-1].startswith("after: paths=")
    assert not any(line.startswith("total:") for line in lines)
