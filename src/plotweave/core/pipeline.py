"""
どこで: `src/plotweave/core/pipeline.py`。
何を: PipelineStep 列を順に実行し、generator の出力を積み上げ modifier で置き換えて最終 Layer 列を返す。
なぜ: CLI とテストで同じ実行規則（乱数の受け渡し・補助入力の配線・失敗時の扱い）を共有するため。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path as FilePath
from types import MappingProxyType
from typing import Any

import yaml  # type: ignore[import-untyped]

from plotweave.core.builtins import ensure_builtin_units_registered
from plotweave.core.context import ExecutionContext
from plotweave.core.model import CANVAS_PRESETS, CanvasSettings, Layer
from plotweave.core.rng import SeededRandom, derive_seed
from plotweave.core.unit_registry import UnitRegistry, unit_registry

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineStep:
    """パイプライン上の 1 step。

    Attributes
    ----------
    unit : str
        登録済み unit 名。
    params : Mapping[str, Any]
        既定値を上書きする引数。
    enabled : bool
        False なら実行せず、乱数も消費しない。
    instance_id : str | None
        step の識別子。補助入力の配線と step 固有シードの導出に使う。
        None なら `"{unit}-{index}"` を使う。
    inputs : Mapping[str, str]
        補助入力スロット名 → 出力を渡す step の instance_id。
    accumulate : bool
        False なら出力を配線用に記録するだけで、描画結果には反映しない。
    """

    unit: str
    params: Mapping[str, Any] = field(default_factory=dict)
    enabled: bool = True
    instance_id: str | None = None
    inputs: Mapping[str, str] = field(default_factory=dict)
    accumulate: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))
        object.__setattr__(
            self, "inputs", MappingProxyType({str(k): str(v) for k, v in dict(self.inputs).items()})
        )

    def resolved_id(self, index: int) -> str:
        return self.instance_id if self.instance_id else f"{self.unit}-{index}"


def _layer_summary(layers: Sequence[Layer]) -> str:
    return ", ".join(f"{layer.id}:{len(layer.paths)}" for layer in layers) or "-"


def run_pipeline(
    steps: Sequence[PipelineStep],
    canvas: CanvasSettings,
    seed: int,
    *,
    strict: bool = False,
    isolate_rng: bool = False,
    registry: UnitRegistry | None = None,
) -> list[Layer]:
    """step 列を実行して最終 Layer 列を返す。

    Parameters
    ----------
    steps : Sequence[PipelineStep]
        実行順の step 列。
    canvas : CanvasSettings
        パーセント指定の解決に使うキャンバス。
    seed : int
        ベースシード。
    strict : bool, default False
        True なら unit の例外をそのまま送出する。False なら記録してその step を飛ばす。
    isolate_rng : bool, default False
        True なら step ごとに `derive_seed(seed, instance_id)` の乱数源を使う。
        False なら全 step で 1 本の乱数列を共有する。
    registry : UnitRegistry | None
        unit の引き先。None なら組み込み unit を登録したグローバルレジストリ。

    Returns
    -------
    list[Layer]
        generator の出力を積み上げ、modifier の出力で置き換えた Layer 列。

    Raises
    ------
    ValueError
        instance_id の重複、必須補助入力の未配線、未知のスロットや未実行 step への配線。
    KeyError
        strict=True で未登録 unit を指定した場合。
    """
    if registry is None:
        ensure_builtin_units_registered()
        registry = unit_registry

    ids = [step.resolved_id(i) for i, step in enumerate(steps)]
    dupes = sorted({i for i in ids if ids.count(i) > 1})
    if dupes:
        raise ValueError(f"instance_id が重複している: {dupes}")

    shared_rng = SeededRandom(int(seed))
    layers: list[Layer] = []
    outputs: dict[str, tuple[Layer, ...]] = {}

    for index, step in enumerate(steps):
        step_id = ids[index]
        if not step.enabled:
            _logger.debug("step %s (%s) is disabled", step_id, step.unit)
            continue
        if step.unit not in registry:
            if strict:
                raise KeyError(f"未登録の unit: {step.unit!r}")
            _logger.warning("step %s skipped: unknown unit %r", step_id, step.unit)
            continue
        spec = registry.get(step.unit)

        declared = {slot.name for slot in spec.inputs}
        stray = sorted(set(step.inputs) - declared)
        if stray:
            raise ValueError(f"step {step_id!r}: unit '{spec.name}' に無いスロットへの配線: {stray}")
        wired: dict[str, tuple[Layer, ...]] = {}
        for slot in spec.inputs:
            source = step.inputs.get(slot.name)
            if source is None:
                if not slot.optional:
                    raise ValueError(f"step {step_id!r}: 必須入力 {slot.name!r} が未配線")
                continue
            if source not in outputs:
                raise ValueError(
                    f"step {step_id!r}: 入力 {slot.name!r} の配線先 {source!r} に出力が無い"
                )
            wired[slot.name] = outputs[source]

        rng = SeededRandom(derive_seed(seed, step_id)) if isolate_rng else shared_rng
        ctx = ExecutionContext(canvas=canvas, rng=rng, seed=int(seed), inputs=wired)

        try:
            out = spec.execute(step.params, layers, ctx)
        except Exception:
            if strict:
                raise
            _logger.exception("step %s (%s) failed; skipped", step_id, spec.name)
            continue

        outputs[step_id] = tuple(out)
        _logger.debug(
            "step %s (%s %s) -> %s", step_id, spec.kind, spec.name, _layer_summary(out)
        )
        if not step.accumulate:
            continue
        if spec.is_generator:
            layers.extend(out)
        else:
            layers = list(out)

    return layers


@dataclass(frozen=True, slots=True)
class PipelineDocument:
    """YAML / dict から読み込んだパイプライン定義。

    canvas / seed が None の場合は実行時設定の値を使う。
    """

    steps: tuple[PipelineStep, ...]
    canvas: CanvasSettings | None = None
    seed: int | None = None


def _canvas_from_value(value: Any) -> CanvasSettings | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = {"preset": value}
    if not isinstance(value, Mapping):
        raise ValueError(f"canvas は mapping か preset 名である必要がある: got={value!r}")
    preset = value.get("preset")
    if preset is not None:
        if str(preset) not in CANVAS_PRESETS:
            raise ValueError(f"未知の canvas preset: {preset!r} (choices={sorted(CANVAS_PRESETS)})")
        return CANVAS_PRESETS[str(preset)]
    try:
        width = float(value["width"])
        height = float(value["height"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"canvas には数値の width / height が必要: got={dict(value)!r}") from exc
    if width <= 0.0 or height <= 0.0:
        raise ValueError(f"canvas の寸法は正の値である必要がある: got={(width, height)}")
    return CanvasSettings(width, height, str(value.get("units", "mm")))


def _step_from_value(value: Any, index: int) -> PipelineStep:
    if not isinstance(value, Mapping):
        raise ValueError(f"steps[{index}] は mapping である必要がある: got={value!r}")
    unit = value.get("unit")
    if not isinstance(unit, str) or not unit:
        raise ValueError(f"steps[{index}] に unit 名が無い")
    params = value.get("params") or {}
    inputs = value.get("inputs") or {}
    if not isinstance(params, Mapping) or not isinstance(inputs, Mapping):
        raise ValueError(f"steps[{index}] の params / inputs は mapping である必要がある")
    instance_id = value.get("id")
    return PipelineStep(
        unit=unit,
        params=params,
        enabled=bool(value.get("enabled", True)),
        instance_id=None if instance_id is None else str(instance_id),
        inputs=inputs,
        accumulate=bool(value.get("accumulate", True)),
    )


def pipeline_from_dict(data: Mapping[str, Any]) -> PipelineDocument:
    """`{seed, canvas, steps: [...]}` 形式の mapping を PipelineDocument に変換する。

    Raises
    ------
    ValueError
        形式が不正な場合。
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"パイプライン定義は mapping である必要がある: got={type(data)!r}")
    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list):
        raise ValueError("steps は list である必要がある")
    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"seed は整数である必要がある: got={seed!r}")
    return PipelineDocument(
        steps=tuple(_step_from_value(v, i) for i, v in enumerate(raw_steps)),
        canvas=_canvas_from_value(data.get("canvas")),
        seed=seed,
    )


def load_pipeline(path: str | FilePath) -> PipelineDocument:
    """YAML ファイルからパイプライン定義を読み込む。"""
    p = FilePath(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"パイプライン定義の YAML を解析できない: {p}") from exc
    return pipeline_from_dict(data)


__all__ = [
    "PipelineDocument",
    "PipelineStep",
    "load_pipeline",
    "pipeline_from_dict",
    "run_pipeline",
]
