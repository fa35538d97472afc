"""
どこで: `plotweave.core` サブパッケージ。
何を: データモデル・乱数・フォールオフ・幾何演算と、unit の登録/実行基盤を提供する。
"""
