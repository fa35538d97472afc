"""組み込み generator。登録は `plotweave.core.builtins` から行う。"""
