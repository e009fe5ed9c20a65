"""致命錯誤的例外類別。"""

from __future__ import annotations


class SwapError(Exception):
    """swap-out / swap-in 無法繼續時丟出。"""


class PackageNotFoundError(SwapError, FileNotFoundError):
    pass


class PackageFormatError(SwapError, ValueError):
    pass


class ManifestNotFoundError(SwapError, FileNotFoundError):
    pass


class ManifestFormatError(SwapError, ValueError):
    pass
