"""Domain exceptions."""


class EmptyResultError(Exception):
    """モデルが空の結果を返した場合に発生する例外

    最終生成でのみ致命的エラーとして扱う。
    """

    def __init__(self, message: str = "model returned empty result") -> None:
        super().__init__(message)


class InvalidStageTransitionError(Exception):
    """実行ステージの不正な遷移"""

    def __init__(self, current: str, target: str) -> None:
        """初期化

        Args:
            current: 現在のステージ
            target: 遷移先のステージ
        """
        self.current = current
        self.target = target
        super().__init__(f"Invalid stage transition: {current} -> {target}")
