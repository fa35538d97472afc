"""generator / modifier が共有する幾何アルゴリズム群。"""
