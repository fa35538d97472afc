"""開発者向けの補助コマンド。"""
