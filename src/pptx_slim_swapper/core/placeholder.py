"""佔位圖產生與解析。

佔位圖是一張小 PNG，在 IEND 前插入一個 ``tEXt`` chunk，
keyword 固定為 ``METADATA_KEYWORD``，內容為 JSON 格式的
:class:`PlaceholderMetadata`。即使套件內的 part 被改名或重新編號，
仍可從佔位圖本身找回對應的 manifest 記錄。
"""

from __future__ import annotations

import io
import json
import zlib
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from ..config import ConfigManager
from ..models import MediaKind, PlaceholderMetadata
from ..utils import png_chunks
from ..utils.logger import get_logger

METADATA_KEYWORD = "PptxSlimSwapper"

_IMAGE_BACKGROUND = (211, 211, 211)
_IMAGE_BORDER = (169, 169, 169)
_VIDEO_BACKGROUND = (173, 216, 230)
_VIDEO_BORDER = (0, 0, 139)
_TEXT_COLOR = (0, 0, 0)


def encode(
    kind: MediaKind,
    record_id: str,
    file_name: str,
    content_type: str,
    fingerprint: Optional[str] = None,
    *,
    width: int = 100,
    height: int = 100,
    draw_label: bool = True,
) -> bytes:
    """產生帶有 metadata 的佔位 PNG。"""
    metadata = PlaceholderMetadata(
        id=record_id,
        file_name=file_name,
        content_type=content_type,
        content_fingerprint=fingerprint,
        media_kind=kind,
    )
    image_bytes = render(kind, record_id, file_name, width=width, height=height, draw_label=draw_label)
    return embed_metadata(image_bytes, metadata)


def embed_metadata(png_bytes: bytes, metadata: PlaceholderMetadata) -> bytes:
    payload = json.dumps(metadata.to_dict(), ensure_ascii=False, separators=(",", ":"))
    chunk = png_chunks.build_text_chunk(METADATA_KEYWORD, payload)
    return png_chunks.insert_before_iend(png_bytes, chunk)


def decode(data: bytes) -> Optional[PlaceholderMetadata]:
    """讀出佔位圖中的 metadata；不是佔位圖或內容損壞時回傳 ``None``。"""
    for chunk in png_chunks.iter_chunks(data):
        if chunk.chunk_type != png_chunks.TEXT:
            continue
        parsed = png_chunks.parse_text_chunk(chunk.data)
        if parsed is None or parsed[0] != METADATA_KEYWORD:
            continue
        if not chunk.crc_ok():
            return None
        try:
            payload = json.loads(parsed[1])
        except (ValueError, RecursionError):
            return None
        return PlaceholderMetadata.from_dict(payload)
    return None


def render(
    kind: MediaKind,
    record_id: str,
    file_name: str,
    *,
    width: int = 100,
    height: int = 100,
    draw_label: bool = True,
) -> bytes:
    is_video = kind is MediaKind.VIDEO
    background = _VIDEO_BACKGROUND if is_video else _IMAGE_BACKGROUND
    border = _VIDEO_BORDER if is_video else _IMAGE_BORDER

    image = Image.new("RGB", (width, height), background)
    if width >= 8 and height >= 8:
        draw = ImageDraw.Draw(image)
        draw.rectangle((1, 1, width - 2, height - 2), outline=border, width=2)
        if is_video:
            draw.polygon(
                [
                    (int(width * 0.40), int(height * 0.30)),
                    (int(width * 0.40), int(height * 0.70)),
                    (int(width * 0.70), int(height * 0.50)),
                ],
                fill=_VIDEO_BORDER,
            )
        if draw_label:
            _draw_label(draw, kind, record_id, file_name, width, height)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG", optimize=True)
    return buffer.getvalue()


def _draw_label(draw, kind: MediaKind, record_id: str, file_name: str, width: int, height: int) -> None:
    font = ImageFont.load_default()
    if kind is MediaKind.VIDEO:
        text = f"[VIDEO]\n{file_name}\n{record_id[:8]}"
    else:
        text = f"[PLACEHOLDER]\n{file_name}\nID: {record_id[:8]}..."
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, align="center")
    text_x = (width - (right - left)) / 2 - left
    if kind is MediaKind.VIDEO:
        text_y = height * 0.75 - top
    else:
        text_y = (height - (bottom - top)) / 2 - top
    draw.multiline_text((text_x, text_y), text, fill=_TEXT_COLOR, font=font, align="center")


def _shrinks(placeholder: bytes, original: bytes) -> bool:
    """佔位圖在 stored 與 deflate 兩種 zip 壓縮方式下都比原始內容小。"""
    if len(placeholder) >= len(original):
        return False
    return len(zlib.compress(placeholder)) < len(zlib.compress(original))


class PlaceholderGenerator:
    """依設定產生佔位圖；無法讓 part 變小時回傳 ``None``。"""

    def __init__(self, config: Optional[ConfigManager] = None, logger=None) -> None:
        self.config = config or ConfigManager()
        self.logger = logger or get_logger(self.__class__.__name__)

    def generate(
        self,
        kind: MediaKind,
        record_id: str,
        file_name: str,
        content_type: str,
        fingerprint: Optional[str] = None,
        original: Optional[bytes] = None,
    ) -> Optional[bytes]:
        placeholder = encode(
            kind,
            record_id,
            file_name,
            content_type,
            fingerprint,
            width=int(self.config.get("placeholder.width", 100)),
            height=int(self.config.get("placeholder.height", 100)),
            draw_label=bool(self.config.get("placeholder.draw_label", True)),
        )
        if original is None or _shrinks(placeholder, original):
            return placeholder

        minimal = encode(
            kind,
            record_id,
            file_name,
            content_type,
            fingerprint,
            width=1,
            height=1,
            draw_label=False,
        )
        if _shrinks(minimal, original):
            return minimal

        self.logger.info(f"原始內容小於佔位圖，保留原內容: {file_name} ({len(original)} bytes)")
        return None
