"""組み込み modifier。登録は `plotweave.core.builtins` から行う。"""
