"""swap-in：依 manifest 把外部保存的原始媒體寫回套件。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import ConfigManager
from ..models import MediaRecord, SwapInResult, SwapManifest
from ..utils import file_ops, hash_calc
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from .errors import PackageNotFoundError, SwapError
from .manifest import load_manifest
from .matcher import MediaMatcher
from .package import MediaPackage


def _normalize_stored_path(value: str) -> str:
    return value.replace("\\", "/")


class SwapInRunner:
    def __init__(self, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.error_handler = ErrorHandler()

    def run(self, input_path: Path, manifest_dir: Optional[Path] = None) -> SwapInResult:
        input_path = Path(input_path)
        if not input_path.is_file():
            raise PackageNotFoundError(f"找不到輸入檔案: {input_path}")

        manifest_dir = Path(manifest_dir) if manifest_dir is not None else input_path.parent
        manifest = load_manifest(self.config.manifest_path(manifest_dir))

        output_path = file_ops.derive_output_path(
            input_path,
            input_path.parent,
            str(self.config.get("swap.restored_suffix", "_restored")),
        )
        if output_path.resolve() == input_path.resolve():
            raise SwapError(f"輸出檔案會覆蓋輸入檔案: {output_path}")
        file_ops.copy_file(input_path, output_path)

        self.error_handler = ErrorHandler()
        try:
            with MediaPackage.open(output_path, logger=self.logger) as package:
                restored_count = self.swap_in(package, manifest, manifest_dir)
        except Exception:
            file_ops.remove_quietly(output_path, logger=self.logger)
            raise

        if self.error_handler.has_warnings():
            self.logger.warning(f"略過 {len(self.error_handler.errors)} 筆記錄，已還原 {restored_count}/{len(manifest)}")

        return SwapInResult(
            output_path=output_path,
            restored_count=restored_count,
            record_count=len(manifest),
            slim_size_bytes=file_ops.file_size(input_path) or 0,
            restored_size_bytes=file_ops.file_size(output_path) or 0,
            skipped=list(self.error_handler.errors),
        )

    def swap_in(self, package: MediaPackage, manifest: SwapManifest, storage_root: Path) -> int:
        """依 manifest 順序還原，回傳實際寫回的數量。"""
        matcher = MediaMatcher(package, self.config, logger=self.logger)
        restored_count = 0
        root = Path(storage_root).resolve()
        for record in manifest:
            stored_file = (root / _normalize_stored_path(record.stored_path)).resolve()
            if not stored_file.is_relative_to(root):
                self._skip("W-STORED-OUTSIDE", f"媒體路徑不在 manifest 資料夾內: {record.stored_path}", record)
                continue

            if not stored_file.is_file():
                self._skip("W-STORED-MISSING", f"找不到媒體檔案: {stored_file}", record)
                continue

            if not self._verify_stored_file(stored_file, record):
                continue

            result = matcher.match(record)
            if result is None:
                self._skip("W-NO-MATCH", f"找不到對應的位置: {record.location_reference}", record)
                continue

            package.write_part(result.location.part_uri, stored_file.read_bytes())
            matcher.claim(result.location)
            restored_count += 1
            self.logger.debug(
                f"已還原 ({result.strategy.value}): {record.stored_path} -> {result.location.part_uri}"
            )
        return restored_count

    def _verify_stored_file(self, stored_file: Path, record: MediaRecord) -> bool:
        if not record.content_fingerprint or not self.config.get("matching.verify_fingerprint", True):
            return True
        actual = hash_calc.compute_file_fingerprint(
            stored_file,
            chunk_size_kb=int(self.config.get("hash.chunk_size_kb", 1024)),
            logger=self.logger,
        )
        if hash_calc.fingerprints_match(record.content_fingerprint, actual):
            return True
        self._skip("W-FINGERPRINT", f"媒體檔案內容與 manifest 不一致: {stored_file}", record)
        return False

    def _skip(self, code: str, message: str, record: MediaRecord) -> None:
        self.logger.warning(message)
        self.error_handler.add_warning(
            code, message, record_id=record.id, location_reference=record.location_reference
        )
