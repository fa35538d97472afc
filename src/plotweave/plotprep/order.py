"""
どこで: `src/plotweave/plotprep/order.py`。
何を: 最近傍法でパスの描画順と向きを決め、全 Layer を 1 枚にまとめる。
なぜ: ペンを上げて移動する距離を減らすため。
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from plotweave.core.model import Layer, Path, iter_paths

OPTIMIZED_LAYER_ID = "optimized"


def order_paths(paths: Sequence[Path]) -> list[Path]:
    """原点 (0, 0) から始め、現在位置に最も近い端点を持つパスを順に選ぶ。

    終点の方が近ければそのパスを反転して使い、ペンは選んだパスの終点へ進む。
    同距離なら入力順で先のパスの始点、同じパスの終点、の順に優先する。
    0 点のパスは捨てる。
    """
    remaining = [p for p in paths if len(p) > 0]
    if len(remaining) <= 1:
        return list(remaining)

    # 行 2i が i 本目の始点、2i+1 が終点。argmin は最初の最小値を返すので走査順の優先と一致する。
    ends = np.empty((2 * len(remaining), 2), dtype=np.float64)
    for i, p in enumerate(remaining):
        ends[2 * i] = p.coords[0]
        ends[2 * i + 1] = p.coords[-1]

    ordered: list[Path] = []
    pen = np.zeros(2, dtype=np.float64)
    while remaining:
        d = np.hypot(ends[:, 0] - pen[0], ends[:, 1] - pen[1])
        k = int(np.argmin(d))
        idx = k // 2
        path = remaining.pop(idx)
        ends = np.delete(ends, [2 * idx, 2 * idx + 1], axis=0)
        if k % 2 == 1:
            path = path.with_coords(path.coords[::-1])
        ordered.append(path)
        pen = path.coords[-1]
    return ordered


def order_layers(layers: Sequence[Layer]) -> list[Layer]:
    """全 Layer のパスをまとめて並べ替え、id "optimized" の Layer 1 枚で返す。

    パスが 1 本も無ければ空リスト。
    """
    paths = list(iter_paths(layers))
    if not paths:
        return []
    return [Layer(OPTIMIZED_LAYER_ID, tuple(order_paths(paths)))]


__all__ = ["OPTIMIZED_LAYER_ID", "order_layers", "order_paths"]
