# src/plotweave/core/context.py
# unit 実行時に渡す ExecutionContext。

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from plotweave.core.model import CanvasSettings, Layer
from plotweave.core.rng import SeededRandom


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """unit 1 回分の実行環境。

    Attributes
    ----------
    canvas : CanvasSettings
        パーセント指定の解決に使うキャンバス。
    rng : SeededRandom
        パイプライン共有（または step 固有）の乱数源。`ctx.rng()` で 1 回消費する。
    seed : int
        パイプラインのベースシード。ノイズのシードなどに使う。
    inputs : Mapping[str, tuple[Layer, ...]]
        補助入力スロット名 → Layer 列（例: "stamp"）。読み取り専用。
    """

    canvas: CanvasSettings
    rng: SeededRandom
    seed: int = 0
    inputs: Mapping[str, tuple[Layer, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {str(k): tuple(v) for k, v in dict(self.inputs).items()}
        object.__setattr__(self, "inputs", MappingProxyType(frozen))
        object.__setattr__(self, "seed", int(self.seed))

    def input_layers(self, name: str) -> tuple[Layer, ...]:
        """補助入力を返す。未配線なら空タプル。"""
        return self.inputs.get(name, ())

    def with_inputs(self, inputs: Mapping[str, tuple[Layer, ...]]) -> ExecutionContext:
        return ExecutionContext(canvas=self.canvas, rng=self.rng, seed=self.seed, inputs=inputs)

    def with_rng(self, rng: SeededRandom) -> ExecutionContext:
        return ExecutionContext(canvas=self.canvas, rng=rng, seed=self.seed, inputs=self.inputs)


def make_context(
    canvas: CanvasSettings,
    seed: int,
    *,
    inputs: Mapping[str, tuple[Layer, ...]] | None = None,
) -> ExecutionContext:
    """seed から新しい乱数源を持つ ExecutionContext を作る。"""
    return ExecutionContext(
        canvas=canvas,
        rng=SeededRandom(seed),
        seed=int(seed),
        inputs={} if inputs is None else inputs,
    )


__all__ = ["ExecutionContext", "make_context"]
