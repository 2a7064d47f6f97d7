from __future__ import annotations


class DeclarationSourceError(ValueError):
    def __init__(self, code: str, message: str, *, source: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
        self.source = source


class ManifestError(ValueError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message
