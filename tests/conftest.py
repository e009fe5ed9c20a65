import io
import random
import zipfile
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import pytest
from PIL import Image

REL = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
REL_MEDIA = "http://schemas.microsoft.com/office/2007/relationships/media"
PML = "application/vnd.openxmlformats-officedocument.presentationml"

CONTENT_TYPES = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Default Extension="png" ContentType="image/png"/>
  <Default Extension="jpeg" ContentType="image/jpeg"/>
  <Default Extension="mp4" ContentType="video/mp4"/>
  <Default Extension="wav" ContentType="audio/wav"/>
  <Override PartName="/ppt/presentation.xml" ContentType="{PML}.presentation.main+xml"/>
  <Override PartName="/ppt/slides/slide1.xml" ContentType="{PML}.slide+xml"/>
  <Override PartName="/ppt/slides/slide2.xml" ContentType="{PML}.slide+xml"/>
  <Override PartName="/ppt/slideMasters/slideMaster1.xml" ContentType="{PML}.slideMaster+xml"/>
  <Override PartName="/ppt/slideLayouts/slideLayout1.xml" ContentType="{PML}.slideLayout+xml"/>
  <Override PartName="/ppt/notesMasters/notesMaster1.xml" ContentType="{PML}.notesMaster+xml"/>
</Types>
"""

Rel = Tuple[str, str]


def _rels_xml(relationships: List[Rel], external: Tuple[str, ...] = ()) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>',
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">',
    ]
    for index, (rel_type, target) in enumerate(relationships, start=1):
        mode = ' TargetMode="External"' if target in external else ""
        lines.append(f'  <Relationship Id="rId{index}" Type="{rel_type}" Target="{target}"{mode}/>')
    lines.append("</Relationships>")
    return "\n".join(lines)


def noise_image(size: Tuple[int, int], fmt: str, seed: int) -> bytes:
    rng = random.Random(seed)
    image = Image.frombytes("RGB", size, rng.randbytes(size[0] * size[1] * 3))
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def fake_video(seed: int, length: int = 64 * 1024) -> bytes:
    rng = random.Random(seed)
    return b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom" + rng.randbytes(length)


def sample_media() -> Dict[str, bytes]:
    return {
        "ppt/media/image1.png": noise_image((96, 96), "PNG", seed=1),
        "ppt/media/image2.jpeg": noise_image((120, 80), "JPEG", seed=2),
        "ppt/media/media1.mp4": fake_video(seed=3),
        "ppt/media/audio1.wav": b"RIFF" + bytes(2048),
    }


def sample_structure() -> Dict[str, List[Rel]]:
    """3 個圖片參照（image1 出現兩次）加 1 個影片（video 與 media 兩個關聯）。"""
    return {
        "_rels/.rels": [(REL + "officeDocument", "ppt/presentation.xml")],
        "ppt/_rels/presentation.xml.rels": [
            (REL + "slideMaster", "slideMasters/slideMaster1.xml"),
            (REL + "slide", "slides/slide1.xml"),
            (REL + "slide", "slides/slide2.xml"),
            (REL + "notesMaster", "notesMasters/notesMaster1.xml"),
            (REL + "theme", "theme/theme1.xml"),
        ],
        "ppt/slides/_rels/slide1.xml.rels": [
            (REL + "slideLayout", "../slideLayouts/slideLayout1.xml"),
            (REL + "image", "../media/image1.png"),
            (REL + "image", "../media/image2.jpeg"),
        ],
        "ppt/slides/_rels/slide2.xml.rels": [
            (REL + "slideLayout", "../slideLayouts/slideLayout1.xml"),
            (REL + "image", "../media/image1.png"),
            (REL + "video", "../media/media1.mp4"),
            (REL_MEDIA, "../media/media1.mp4"),
            (REL_MEDIA, "../media/audio1.wav"),
            (REL + "hyperlink", "https://example.com/"),
        ],
        "ppt/slideMasters/_rels/slideMaster1.xml.rels": [
            (REL + "slideLayout", "../slideLayouts/slideLayout1.xml"),
        ],
        "ppt/slideLayouts/_rels/slideLayout1.xml.rels": [
            (REL + "slideMaster", "../slideMasters/slideMaster1.xml"),
        ],
        "ppt/notesMasters/_rels/notesMaster1.xml.rels": [],
    }


def build_pptx(
    path: Path,
    media: Dict[str, bytes],
    structure: Dict[str, List[Rel]],
) -> Path:
    xml_parts = [
        "ppt/presentation.xml",
        "ppt/slides/slide1.xml",
        "ppt/slides/slide2.xml",
        "ppt/slideMasters/slideMaster1.xml",
        "ppt/slideLayouts/slideLayout1.xml",
        "ppt/notesMasters/notesMaster1.xml",
        "ppt/theme/theme1.xml",
    ]
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        archive.writestr("[Content_Types].xml", CONTENT_TYPES)
        for rels_name, relationships in structure.items():
            external = tuple(target for _, target in relationships if target.startswith("http"))
            archive.writestr(rels_name, _rels_xml(relationships, external))
        for part_name in xml_parts:
            archive.writestr(part_name, f'<?xml version="1.0"?><part name="{part_name}"/>')
        for part_name, data in media.items():
            archive.writestr(part_name, data)
    return path


def read_entries(path: Path) -> Dict[str, bytes]:
    with zipfile.ZipFile(path) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


def rewrite_entries(path: Path, transform: Callable[[Dict[str, bytes]], Dict[str, bytes]]) -> None:
    """模擬外部工具編輯套件（例如重新編號 part）。"""
    entries = transform(read_entries(path))
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)


@pytest.fixture
def media_payloads() -> Dict[str, bytes]:
    return sample_media()


@pytest.fixture
def sample_pptx(tmp_path: Path, media_payloads: Dict[str, bytes]) -> Path:
    source_dir = tmp_path / "source"
    source_dir.mkdir()
    return build_pptx(source_dir / "deck.pptx", media_payloads, sample_structure())


@pytest.fixture
def pptx_builder(tmp_path: Path):
    def _build(name: str, media: Dict[str, bytes], structure: Dict[str, List[Rel]]) -> Path:
        return build_pptx(tmp_path / name, media, structure)

    return _build
