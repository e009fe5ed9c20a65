import json
from pathlib import Path

import pytest

from pptx_slim_swapper.core import (
    ManifestFormatError,
    ManifestNotFoundError,
    load_manifest,
    new_manifest,
    write_manifest,
)
from pptx_slim_swapper.models import MediaKind, MediaRecord


def _record(record_id: str, kind: MediaKind = MediaKind.IMAGE) -> MediaRecord:
    ext = ".png" if kind is MediaKind.IMAGE else ".mp4"
    return MediaRecord(
        id=record_id,
        original_file_name=f"{record_id}{ext}",
        media_kind=kind,
        content_type="image/png" if kind is MediaKind.IMAGE else "video/mp4",
        original_size_bytes=100,
        location_reference=f"/ppt/media/{record_id}{ext}",
        stored_path=f"media/{record_id}{ext}",
    )


def test_write_and_load_manifest(tmp_path: Path) -> None:
    manifest = new_manifest(tmp_path / "deck.pptx")
    manifest.append(_record("a"))
    manifest.append(_record("b", MediaKind.VIDEO))

    manifest_path = write_manifest(tmp_path / "out" / "swap-manifest.json", manifest)
    payload = json.loads(manifest_path.read_text(encoding="utf-8"))
    loaded = load_manifest(manifest_path)

    assert set(payload) == {"createdAt", "originalFileName", "mediaFiles"}
    assert payload["originalFileName"] == "deck.pptx"
    assert [item["id"] for item in payload["mediaFiles"]] == ["a", "b"]
    assert [record.id for record in loaded] == ["a", "b"]
    assert loaded.records[1].media_kind is MediaKind.VIDEO
    assert loaded.created_at == manifest.created_at


def test_load_manifest_missing(tmp_path: Path) -> None:
    with pytest.raises(ManifestNotFoundError):
        load_manifest(tmp_path / "swap-manifest.json")


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"createdAt": "nope", "mediaFiles": []}',
        '{"createdAt": "2025-01-01T00:00:00", "mediaFiles": "x"}',
        '{"createdAt": "2025-01-01T00:00:00", "mediaFiles": [{"id": "a"}]}',
        "[" * 200000,
    ],
)
def test_load_manifest_invalid(tmp_path: Path, content: str) -> None:
    manifest_path = tmp_path / "swap-manifest.json"
    manifest_path.write_text(content, encoding="utf-8")

    with pytest.raises(ManifestFormatError):
        load_manifest(manifest_path)


def test_load_manifest_written_by_other_implementation(tmp_path: Path) -> None:
    manifest_path = tmp_path / "swap-manifest.json"
    manifest_path.write_text(
        json.dumps(
            {
                "CreatedAt": "ignored",
                "createdAt": "2025-06-01T09:15:42.1234567+09:00",
                "originalFileName": "deck.pptx",
                "mediaFiles": [
                    {
                        "id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
                        "originalFileName": "image3.jpeg",
                        "mediaType": "image",
                        "contentType": "image/jpeg",
                        "originalSize": 52011,
                        "partUri": "/ppt/media/image3.jpeg",
                        "savedFilePath": "media\\1b4e28ba-2fa1-11d2-883f-0016d3cca427.jpg",
                    }
                ],
            }
        ),
        encoding="utf-8-sig",
    )

    manifest = load_manifest(manifest_path)

    assert manifest.created_at.year == 2025
    assert manifest.records[0].content_fingerprint is None
    assert manifest.records[0].original_size_bytes == 52011
