"""Chaikin の角切りでパスを平滑化する modifier。"""

from __future__ import annotations

from collections.abc import Sequence

from plotweave.core.algorithms.chaikin import smooth_path
from plotweave.core.context import ExecutionContext
from plotweave.core.falloff import DISABLED_FALLOFF, FalloffParams
from plotweave.core.model import Layer, map_paths
from plotweave.core.unit_registry import modifier


@modifier(falloff=True)
def smooth(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    iterations: int = 2,
    preserve_end_segments: bool = False,
    falloff: FalloffParams = DISABLED_FALLOFF,
) -> list[Layer]:
    """Chaikin 平滑化を iterations 回適用する。

    Parameters
    ----------
    iterations : int, default 2
        反復回数。0 以下は no-op。
    preserve_end_segments : bool, default False
        開パスの先頭 2 点・末尾 2 点を平滑化しない。
    falloff : FalloffParams
        有効時は平滑化後の各点を、インデックス比で対応づけた元の点と補間する。

    Returns
    -------
    list[Layer]
        平滑化後の Layer 列。2 点未満のパスはそのまま。
    """
    if int(iterations) <= 0:
        return list(layers)
    return map_paths(
        layers,
        lambda p: smooth_path(p, int(iterations), bool(preserve_end_segments), falloff, ctx.canvas),
    )
