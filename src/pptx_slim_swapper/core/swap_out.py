"""swap-out：把套件中的媒體移到外部，換成佔位圖。"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import List, Optional, Set

from ..config import ConfigManager
from ..models import ImageDimensions, MediaKind, MediaRecord, SwapManifest, SwapOutResult
from ..utils import file_ops, hash_calc, image_utils
from ..utils.logger import get_logger
from .errors import PackageNotFoundError, SwapError
from .manifest import load_manifest, new_manifest, write_manifest
from .package import MediaLocation, MediaPackage
from .placeholder import PlaceholderGenerator


class SwapOutRunner:
    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        logger=None,
        placeholder_generator: Optional[PlaceholderGenerator] = None,
    ) -> None:
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.placeholder_generator = placeholder_generator or PlaceholderGenerator(
            self.config, logger=self.logger
        )

    def run(self, input_path: Path, output_dir: Optional[Path] = None) -> SwapOutResult:
        input_path = Path(input_path)
        if not input_path.is_file():
            raise PackageNotFoundError(f"找不到輸入檔案: {input_path}")

        if output_dir is None:
            output_dir = Path.cwd() / str(self.config.get("swap.default_output_folder", "output"))
        output_dir = Path(output_dir)
        media_dir = self.config.media_dir(output_dir)
        output_path = file_ops.derive_output_path(
            input_path,
            output_dir,
            str(self.config.get("swap.slim_suffix", "_slim")),
        )
        if output_path.resolve() == input_path.resolve():
            raise SwapError(f"輸出檔案會覆蓋輸入檔案: {output_path}")

        previous_files = self._previous_stored_files(output_dir, media_dir)
        media_dir.mkdir(parents=True, exist_ok=True)
        file_ops.copy_file(input_path, output_path)

        manifest = new_manifest(input_path)
        try:
            with MediaPackage.open(output_path, logger=self.logger) as package:
                media_count = self.swap_out(package, manifest, media_dir)
        except Exception:
            self._discard(manifest, output_dir, output_path)
            raise

        manifest_path = write_manifest(self.config.manifest_path(output_dir), manifest)
        self._clean_previous_run(previous_files, manifest, output_dir, media_dir)
        return SwapOutResult(
            output_path=output_path,
            manifest_path=manifest_path,
            media_count=media_count,
            original_size_bytes=file_ops.file_size(input_path) or 0,
            slim_size_bytes=file_ops.file_size(output_path) or 0,
            manifest=manifest,
        )

    def swap_out(self, package: MediaPackage, manifest: SwapManifest, media_dir: Path) -> int:
        """處理所有不重複的媒體位置，回傳處理數量。"""
        locations = package.media_locations()
        images = [location for location in locations if location.kind is MediaKind.IMAGE]
        videos = [location for location in locations if location.kind is MediaKind.VIDEO]

        self.logger.info(f"處理圖片數: {len(images)}")
        self.logger.info(f"處理影片數: {len(videos)}")

        count = 0
        for location in images + videos:
            record = self._process_location(package, location, media_dir)
            if record is None:
                continue
            manifest.append(record)
            count += 1
        return count

    def _process_location(
        self,
        package: MediaPackage,
        location: MediaLocation,
        media_dir: Path,
    ) -> Optional[MediaRecord]:
        original_data = package.read_part(location.part_uri)
        fingerprint = hash_calc.compute_fingerprint(original_data)

        dimensions = None
        if location.kind is MediaKind.IMAGE:
            size = image_utils.get_image_dimensions(original_data, logger=self.logger)
            if size is not None:
                dimensions = ImageDimensions(width=size[0], height=size[1])

        record_id = str(uuid.uuid4())
        placeholder = self.placeholder_generator.generate(
            location.kind,
            record_id,
            location.file_name,
            location.content_type,
            fingerprint,
            original=original_data,
        )
        if placeholder is None:
            return None

        stored_name = f"{record_id}{self.config.extension_for(location.content_type)}"
        stored_file = media_dir / stored_name
        record = MediaRecord(
            id=record_id,
            original_file_name=location.file_name,
            media_kind=location.kind,
            content_type=location.content_type,
            original_size_bytes=len(original_data),
            location_reference=location.part_uri,
            stored_path=f"{media_dir.name}/{stored_name}",
            content_fingerprint=fingerprint,
            dimensions=dimensions,
        )

        file_ops.write_bytes_atomic(stored_file, original_data)
        try:
            package.write_part(location.part_uri, placeholder)
        except Exception:
            file_ops.remove_quietly(stored_file, logger=self.logger)
            raise

        self.logger.debug(f"已替換: {location.part_uri} -> {record.stored_path}")
        return record

    def _discard(self, manifest: SwapManifest, output_dir: Path, output_path: Path) -> None:
        removed: List[str] = []
        for record in manifest:
            if file_ops.remove_quietly(output_dir / record.stored_path, logger=self.logger):
                removed.append(record.stored_path)
        file_ops.remove_quietly(output_path, logger=self.logger)
        self.logger.error(f"swap-out 中止，已移除 {len(removed)} 個已儲存的媒體檔與輸出套件")

    def _previous_stored_files(self, output_dir: Path, media_dir: Path) -> Set[Path]:
        """前一次輸出到同資料夾時 manifest 記錄的媒體檔。"""
        manifest_path = self.config.manifest_path(output_dir)
        if not manifest_path.is_file():
            return set()
        try:
            previous = load_manifest(manifest_path)
        except SwapError as exc:
            self.logger.warning(f"無法讀取前一次的 manifest，不清理舊媒體檔: {exc}")
            return set()
        root = media_dir.resolve()
        files = {(output_dir / record.stored_path).resolve() for record in previous}
        return {path for path in files if path.is_relative_to(root)}

    def _clean_previous_run(
        self,
        previous_files: Set[Path],
        manifest: SwapManifest,
        output_dir: Path,
        media_dir: Path,
    ) -> None:
        current = {(output_dir / record.stored_path).resolve() for record in manifest}
        removed = 0
        for path in previous_files - current:
            if file_ops.remove_quietly(path, logger=self.logger):
                removed += 1
        if removed:
            self.logger.info(f"已移除前一次輸出的媒體檔: {removed}")

        leftovers = [
            path for path in media_dir.iterdir() if path.is_file() and path.resolve() not in current
        ]
        if leftovers:
            self.logger.warning(f"{media_dir} 內有 {len(leftovers)} 個檔案不屬於本次 manifest")
