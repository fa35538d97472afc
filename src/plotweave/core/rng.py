"""
どこで: `src/plotweave/core/rng.py`。
何を: シード付き決定論的乱数源（Mulberry32）と、文字列からのシード導出を提供する。
なぜ: 同一パラメータ・同一シードで生成結果を完全に再現できるようにするため。
"""

from __future__ import annotations

import numpy as np

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5
_INV_2_32 = 1.0 / 4294967296.0


def _imul(a: int, b: int) -> int:
    """32bit 符号なし整数としての乗算（下位 32bit）。"""
    return (a * b) & _MASK32


class SeededRandom:
    """Mulberry32 による [0, 1) の一様乱数列。

    Parameters
    ----------
    seed : int
        初期シード。32bit に丸めて保持する（負数も 2 の補数として扱う）。

    Notes
    -----
    状態はインスタンスに閉じ、モジュールグローバルを持たない。
    `__call__` は `next()` と同じで、`ctx.rng()` の形で呼べるようにしている。
    """

    __slots__ = ("_seed", "_state")

    def __init__(self, seed: int) -> None:
        self._seed = int(seed) & _MASK32
        self._state = self._seed

    @property
    def seed(self) -> int:
        """初期シード（32bit 正規化済み）。"""
        return self._seed

    @property
    def state(self) -> int:
        """現在の内部状態。"""
        return self._state

    def next(self) -> float:
        """状態を 1 つ進め、[0, 1) の値を返す。"""
        self._state = (self._state + _GOLDEN) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t = t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)
        return ((t ^ (t >> 14)) & _MASK32) * _INV_2_32

    def __call__(self) -> float:
        return self.next()

    def random(self, n: int) -> np.ndarray:
        """n 回分の値を float64 配列で返す（逐次呼び出しと同じ列）。"""
        n_i = max(0, int(n))
        out = np.empty((n_i,), dtype=np.float64)
        for i in range(n_i):
            out[i] = self.next()
        return out

    def uniform(self, lo: float, hi: float) -> float:
        """[lo, hi) の値を 1 回の消費で返す。"""
        return float(lo) + self.next() * (float(hi) - float(lo))

    def skip(self, n: int) -> None:
        """値を捨てて n 回分だけ状態を進める。"""
        for _ in range(max(0, int(n))):
            self.next()

    def reset(self, seed: int | None = None) -> None:
        """初期状態へ戻す。seed を渡した場合はそのシードで再初期化する。"""
        if seed is not None:
            self._seed = int(seed) & _MASK32
        self._state = self._seed

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self._seed}, state={self._state})"


def hash_string(text: str) -> int:
    """文字列から非負の 32bit 整数ハッシュを作る。

    UTF-16 のコードユニットごとに `h = h * 31 + code` を符号付き 32bit で回し、
    最後に絶対値を取る。BMP 外の文字はサロゲートペアの 2 ユニットとして数える。
    """
    data = str(text).encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + code) & _MASK32
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def derive_seed(seed: int, key: str) -> int:
    """ベースシードと識別子から派生シードを作る。"""
    return (int(seed) + hash_string(key)) & _MASK32


def random_seed() -> int:
    """非決定的な新規シードを 1 つ返す。"""
    return int(np.random.default_rng().integers(0, 1_000_000))


__all__ = ["SeededRandom", "derive_seed", "hash_string", "random_seed"]
