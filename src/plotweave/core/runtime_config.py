# どこで: `src/plotweave/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: キャンバス寸法や乱数シードなどの既定値を、コードを触らずに切り替えられるようにするため。

"""実行時設定（`config.yaml`）の探索・ロード・キャッシュを担当する。

- `config.yaml` を「同梱デフォルト → ユーザー設定（任意）」の順に適用して `RuntimeConfig` を構築
- 探索パス（CWD / HOME）と、明示指定（`set_config_path()`）の両方に対応
- 1 回ロードした結果をプロセス内でキャッシュ（設定を切り替える場合は `set_config_path()` で破棄）

実装メモ
--------
- ユーザー設定の適用は `dict.update()`（トップレベルの浅い上書き）で行う。
  ネストした mapping は「部分的にマージ」されず「丸ごと置換」される。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

_LOGGING_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """plotweave の実行時設定。

    Attributes
    ----------
    config_path:
        実際に採用されたユーザー設定ファイルのパス。無ければ None（同梱デフォルトのみ）。
    canvas_width, canvas_height:
        既定キャンバス寸法。
    canvas_units:
        キャンバスの単位（表示用）。
    seed:
        パイプラインの既定シード。
    strict:
        True なら step の例外をそのまま送出する。
    isolate_rng:
        True なら step ごとに乱数源を分ける。
    plot_speed_mm_s:
        プロット時間見積もりに使う速度 [mm/s]。
    plot_simplify_tolerance, plot_join_tolerance:
        `run --optimize` の間引き許容誤差と端点結合距離 [mm]。
    logging_level:
        CLI が設定するログレベル名。
    """

    config_path: Path | None
    canvas_width: float
    canvas_height: float
    canvas_units: str
    seed: int
    strict: bool
    isolate_rng: bool
    plot_speed_mm_s: float
    plot_simplify_tolerance: float
    plot_join_tolerance: float
    logging_level: str


# `set_config_path()` で指定される「明示 config」のパス。
_EXPLICIT_CONFIG_PATH: Path | None = None
# `runtime_config()` のプロセス内キャッシュ。
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Parameters
    ----------
    path:
        `config.yaml` のパス。None の場合は明示指定を解除する。

    Notes
    -----
    設定が変わるため、`runtime_config()` のキャッシュを破棄する。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    _EXPLICIT_CONFIG_PATH = None if path is None else Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    """既定の `config.yaml` 探索候補を返す。

    探索順（先勝ち）:
    - `./.plotweave/config.yaml`
    - `~/.config/plotweave/config.yaml`
    """

    return (
        Path.cwd() / ".plotweave" / "config.yaml",
        Path.home() / ".config" / "plotweave" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    """任意値を mapping として解釈し、dict に正規化して返す。"""

    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_bool(value: Any, *, key: str) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return bool(value)
    if isinstance(value, int) and int(value) in (0, 1):
        return bool(int(value))
    raise RuntimeError(f"{key} は bool である必要があります: got={value!r}")


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    """YAML テキストを読み、トップレベル mapping を dict として返す。

    Returns
    -------
    dict[str, Any]
        YAML のトップレベル mapping。空（`null`）なら `{}`。
    """

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")
    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """UTF-8 の YAML ファイルを読み、dict を返す。"""

    return _load_yaml_text(path.read_text(encoding="utf-8"), source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config（`plotweave/resource/default_config.yaml`）をロードする。"""

    try:
        blob = (
            resources.files("plotweave")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc
    return _load_yaml_text(blob, source="plotweave/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    読み込み元の優先順位（後勝ち）:
    1) 同梱 `plotweave/resource/default_config.yaml`
    2) 探索で見つかった `config.yaml`（任意）
    3) `set_config_path()` で明示指定された `config.yaml`（任意）

    Raises
    ------
    FileNotFoundError
        明示指定した config が存在しない場合。
    RuntimeError
        YAML の解析失敗、version 不一致、型の不正な値。
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload.update(_load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload.update(_load_yaml_config(explicit_path))

    version = _as_int(_require(payload.get("version"), key="version"), key="version")
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    canvas = _as_mapping(payload.get("canvas"), key="canvas")
    width = _require(_as_float(canvas.get("width"), key="canvas.width"), key="canvas.width")
    height = _require(_as_float(canvas.get("height"), key="canvas.height"), key="canvas.height")
    if width <= 0.0 or height <= 0.0:
        raise RuntimeError(f"canvas の寸法は正の値である必要があります: got={(width, height)}")
    units = str(canvas.get("units") or "mm")

    pipeline = _as_mapping(payload.get("pipeline"), key="pipeline")
    seed = _as_int(pipeline.get("seed"), key="pipeline.seed")
    strict = _as_bool(pipeline.get("strict"), key="pipeline.strict")
    isolate = _as_bool(pipeline.get("isolate_rng"), key="pipeline.isolate_rng")

    plot = _as_mapping(payload.get("plot"), key="plot")
    speed = _as_float(plot.get("speed_mm_s"), key="plot.speed_mm_s")
    if speed is not None and speed <= 0.0:
        raise RuntimeError(f"plot.speed_mm_s は正の値である必要があります: got={speed}")
    simplify_tol = _as_float(plot.get("simplify_tolerance"), key="plot.simplify_tolerance")
    join_tol = _as_float(plot.get("join_tolerance"), key="plot.join_tolerance")
    for key, tol in (("plot.simplify_tolerance", simplify_tol), ("plot.join_tolerance", join_tol)):
        if tol is not None and tol < 0.0:
            raise RuntimeError(f"{key} は 0 以上である必要があります: got={tol}")

    log_cfg = _as_mapping(payload.get("logging"), key="logging")
    level = str(log_cfg.get("level") or "WARNING").upper()
    if level not in _LOGGING_LEVELS:
        raise RuntimeError(f"logging.level が不正です: got={level!r}")

    cfg = RuntimeConfig(
        config_path=explicit_path if explicit_path is not None else discovered_path,
        canvas_width=float(width),
        canvas_height=float(height),
        canvas_units=units,
        seed=0 if seed is None else int(seed),
        strict=bool(strict),
        isolate_rng=bool(isolate),
        plot_speed_mm_s=50.0 if speed is None else float(speed),
        plot_simplify_tolerance=0.1 if simplify_tol is None else float(simplify_tol),
        plot_join_tolerance=0.5 if join_tol is None else float(join_tol),
        logging_level=level,
    )
    logging.getLogger(__name__).debug("runtime config loaded: %s", cfg)
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
