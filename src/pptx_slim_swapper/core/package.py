"""PPTX (Open Packaging Conventions) 套件存取。

只提供 swap 流程需要的能力：列出帶有媒體的位置、讀寫 part 內容、
取得 content type。part 參照使用以 ``/`` 開頭的 part name
（例如 ``/ppt/media/image1.png``），在同一次開啟期間可作為唯一識別。
"""

from __future__ import annotations

import os
import posixpath
import tempfile
import xml.etree.ElementTree as ET
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from ..models import MediaKind
from ..utils.logger import get_logger
from .errors import PackageFormatError, PackageNotFoundError

CONTENT_TYPES_PART = "[Content_Types].xml"
ROOT_RELS_PART = "_rels/.rels"
DEFAULT_CONTENT_TYPE = "application/octet-stream"

NS_CONTENT_TYPES = "http://schemas.openxmlformats.org/package/2006/content-types"
NS_RELATIONSHIPS = "http://schemas.openxmlformats.org/package/2006/relationships"

_REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
REL_OFFICE_DOCUMENT = _REL_BASE + "officeDocument"
REL_SLIDE = _REL_BASE + "slide"
REL_SLIDE_MASTER = _REL_BASE + "slideMaster"
REL_SLIDE_LAYOUT = _REL_BASE + "slideLayout"
REL_NOTES_MASTER = _REL_BASE + "notesMaster"
REL_HANDOUT_MASTER = _REL_BASE + "handoutMaster"
REL_IMAGE = _REL_BASE + "image"
REL_VIDEO = _REL_BASE + "video"
REL_MEDIA = "http://schemas.microsoft.com/office/2007/relationships/media"

# 依此順序展開：投影片、母片（含其版面配置）、備忘稿母片、講義母片
SCOPE_RELATIONSHIP_ORDER = (
    REL_SLIDE,
    REL_SLIDE_MASTER,
    REL_NOTES_MASTER,
    REL_HANDOUT_MASTER,
)
NESTED_SCOPE_RELATIONSHIPS = {
    REL_SLIDE_MASTER: (REL_SLIDE_LAYOUT,),
}
VIDEO_RELATIONSHIPS = frozenset({REL_VIDEO, REL_MEDIA})


@dataclass(frozen=True)
class Relationship:
    rel_id: str
    rel_type: str
    target: str
    external: bool = False


@dataclass(frozen=True)
class MediaLocation:
    """一個參照到媒體 part 的位置。"""

    part_uri: str
    content_type: str
    kind: MediaKind
    source_part: str

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.part_uri)


def unique_locations(locations: Iterable[MediaLocation]) -> List[MediaLocation]:
    """依 part 參照去重，保留第一次出現的順序。"""
    seen: set[str] = set()
    result: List[MediaLocation] = []
    for location in locations:
        if location.part_uri in seen:
            continue
        seen.add(location.part_uri)
        result.append(location)
    return result


def _to_entry_name(part_uri: str) -> str:
    return part_uri.lstrip("/")


def rels_part_for(part_uri: str) -> str:
    directory, name = posixpath.split(part_uri)
    return posixpath.join(directory, "_rels", f"{name}.rels")


def resolve_target(source_part_uri: str, target: str) -> str:
    if target.startswith("/"):
        return posixpath.normpath(target)
    base_dir = posixpath.dirname(source_part_uri)
    return posixpath.normpath(posixpath.join(base_dir, target))


class MediaPackage:
    """以記憶體保存整個 zip 內容，``save()`` 時一次寫回。"""

    def __init__(self, path: Path, logger=None) -> None:
        self.path = Path(path)
        self.logger = logger or get_logger(self.__class__.__name__)
        self._infos: List[zipfile.ZipInfo] = []
        self._parts: Dict[str, bytes] = {}
        self._lookup: Dict[str, str] = {}
        self._defaults: Dict[str, str] = {}
        self._overrides: Dict[str, str] = {}
        self._dirty = False
        self._load()
        self.presentation_part = self._find_main_part()

    @classmethod
    def open(cls, path: Path, logger=None) -> "MediaPackage":
        return cls(path, logger=logger)

    def __enter__(self) -> "MediaPackage":
        return self

    def __exit__(self, exc_type, exc, traceback) -> None:
        if exc_type is None:
            self.save()

    # -- 讀取 -------------------------------------------------------------

    def _load(self) -> None:
        if not self.path.is_file():
            raise PackageNotFoundError(f"找不到套件檔案: {self.path}")
        try:
            with zipfile.ZipFile(self.path, "r") as archive:
                for info in archive.infolist():
                    if info.is_dir():
                        continue
                    self._infos.append(info)
                    self._parts[info.filename] = archive.read(info)
                    self._lookup[info.filename.lower()] = info.filename
        except zipfile.BadZipFile as exc:
            raise PackageFormatError(f"不是有效的 zip 套件: {self.path} ({exc})") from exc

        content_types = self._read_xml(CONTENT_TYPES_PART)
        if content_types is None:
            raise PackageFormatError(f"缺少 {CONTENT_TYPES_PART}: {self.path}")
        for element in content_types:
            tag = element.tag.rsplit("}", 1)[-1]
            if tag == "Default":
                extension = element.get("Extension", "").lower()
                self._defaults[extension] = element.get("ContentType", "")
            elif tag == "Override":
                part_name = element.get("PartName", "").lower()
                self._overrides[part_name] = element.get("ContentType", "")

    def _read_xml(self, entry_name: str) -> Optional[ET.Element]:
        actual = self._lookup.get(entry_name.lower())
        if actual is None:
            return None
        try:
            return ET.fromstring(self._parts[actual])
        except ET.ParseError as exc:
            raise PackageFormatError(f"XML 解析失敗: {entry_name} ({exc})") from exc

    def _find_main_part(self) -> str:
        for rel in self._root_relationships():
            if rel.rel_type == REL_OFFICE_DOCUMENT and not rel.external:
                return resolve_target("/", rel.target)
        raise PackageFormatError(f"找不到主文件關聯: {self.path}")

    def _root_relationships(self) -> List[Relationship]:
        return self._parse_relationships(ROOT_RELS_PART)

    def _parse_relationships(self, rels_entry: str) -> List[Relationship]:
        root = self._read_xml(rels_entry)
        if root is None:
            return []
        relationships: List[Relationship] = []
        for element in root.iter(f"{{{NS_RELATIONSHIPS}}}Relationship"):
            relationships.append(
                Relationship(
                    rel_id=element.get("Id", ""),
                    rel_type=element.get("Type", ""),
                    target=element.get("Target", ""),
                    external=element.get("TargetMode", "Internal") == "External",
                )
            )
        return relationships

    def relationships(self, part_uri: str) -> List[Relationship]:
        return self._parse_relationships(_to_entry_name(rels_part_for(part_uri)))

    def has_part(self, part_uri: str) -> bool:
        return _to_entry_name(part_uri).lower() in self._lookup

    def content_type(self, part_uri: str) -> str:
        override = self._overrides.get(part_uri.lower())
        if override:
            return override
        extension = posixpath.splitext(part_uri)[1].lstrip(".").lower()
        return self._defaults.get(extension, DEFAULT_CONTENT_TYPE)

    def read_part(self, part_uri: str) -> bytes:
        actual = self._lookup.get(_to_entry_name(part_uri).lower())
        if actual is None:
            raise KeyError(part_uri)
        return self._parts[actual]

    def write_part(self, part_uri: str, data: bytes) -> None:
        actual = self._lookup.get(_to_entry_name(part_uri).lower())
        if actual is None:
            raise KeyError(part_uri)
        self._parts[actual] = bytes(data)
        self._dirty = True

    # -- 媒體位置 -----------------------------------------------------------

    def iter_scope_parts(self) -> Iterator[str]:
        """展開所有可能帶有媒體參照的 part。"""
        visited: set[str] = set()
        top_level = self.relationships(self.presentation_part)
        for rel_type in SCOPE_RELATIONSHIP_ORDER:
            for rel in top_level:
                if rel.rel_type != rel_type or rel.external:
                    continue
                part_uri = resolve_target(self.presentation_part, rel.target)
                yield from self._walk_scope(part_uri, rel_type, visited)

    def _walk_scope(self, part_uri: str, rel_type: str, visited: set[str]) -> Iterator[str]:
        key = part_uri.lower()
        if key in visited or not self.has_part(part_uri):
            return
        visited.add(key)
        yield part_uri
        nested_types = NESTED_SCOPE_RELATIONSHIPS.get(rel_type, ())
        if not nested_types:
            return
        for rel in self.relationships(part_uri):
            if rel.rel_type in nested_types and not rel.external:
                nested = resolve_target(part_uri, rel.target)
                yield from self._walk_scope(nested, rel.rel_type, visited)

    def iter_media_locations(self) -> Iterator[MediaLocation]:
        """列出所有媒體參照（未去重）。"""
        for scope_part in self.iter_scope_parts():
            for rel in self.relationships(scope_part):
                if rel.external:
                    continue
                if rel.rel_type == REL_IMAGE:
                    kind = MediaKind.IMAGE
                elif rel.rel_type in VIDEO_RELATIONSHIPS:
                    kind = MediaKind.VIDEO
                else:
                    continue
                part_uri = resolve_target(scope_part, rel.target)
                if not self.has_part(part_uri):
                    self.logger.warning(f"關聯目標不存在: {scope_part} -> {rel.target}")
                    continue
                content_type = self.content_type(part_uri)
                if kind is MediaKind.VIDEO and not content_type.lower().startswith("video/"):
                    continue
                yield MediaLocation(
                    part_uri=part_uri,
                    content_type=content_type,
                    kind=kind,
                    source_part=scope_part,
                )

    def media_locations(self, kind: Optional[MediaKind] = None) -> List[MediaLocation]:
        locations = unique_locations(self.iter_media_locations())
        if kind is None:
            return locations
        return [location for location in locations if location.kind is kind]

    # -- 寫回 -------------------------------------------------------------

    def save(self, path: Optional[Path] = None) -> Path:
        target = Path(path) if path is not None else self.path
        if path is None and not self._dirty:
            return target

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        os.close(fd)
        temp_path = Path(temp_name)
        try:
            with zipfile.ZipFile(temp_path, "w") as archive:
                for info in self._infos:
                    archive.writestr(info, self._parts[info.filename], compress_type=info.compress_type)
            temp_path.replace(target)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        self._dirty = False
        return target
