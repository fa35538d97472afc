"""各辺に内点を挿入して頂点密度を上げる modifier。"""

from __future__ import annotations

from collections.abc import Sequence

from plotweave.core.algorithms.subdivision import subdivide_coords
from plotweave.core.context import ExecutionContext
from plotweave.core.model import Layer, Path, map_paths
from plotweave.core.unit_registry import modifier


@modifier
def subdivide(
    layers: Sequence[Layer],
    ctx: ExecutionContext,
    *,
    divisions: int = 5,
    mode: str = "uniform",
    min_segment_length: float = 1.0,
    max_divisions: int = 20,
) -> list[Layer]:
    """パスを細分化する。

    Parameters
    ----------
    divisions : int, default 5
        uniform のときの 1 辺あたり分割数（1 未満は 1）。
    mode : {"uniform", "adaptive"}, default "uniform"
        adaptive は辺の長さ / min_segment_length を [1, max_divisions] にクランプして使う。
    """
    d = max(1, int(divisions))

    def _apply(path: Path) -> Path:
        if len(path) < 2:
            return path
        return path.with_coords(
            subdivide_coords(
                path.coords,
                path.closed,
                mode=str(mode),
                divisions=d,
                min_segment_length=float(min_segment_length),
                max_divisions=int(max_divisions),
            )
        )

    return map_paths(layers, _apply)
