import io
import uuid

from PIL import Image

from pptx_slim_swapper.config import ConfigManager
from pptx_slim_swapper.core import placeholder
from pptx_slim_swapper.core.placeholder import METADATA_KEYWORD, PlaceholderGenerator
from pptx_slim_swapper.models import MediaKind, PlaceholderMetadata
from pptx_slim_swapper.utils import png_chunks


def test_encode_embeds_decodable_metadata() -> None:
    record_id = str(uuid.uuid4())
    data = placeholder.encode(
        MediaKind.IMAGE,
        record_id,
        "image1.png",
        "image/png",
        "c2hhMjU2",
    )

    metadata = placeholder.decode(data)

    assert metadata == PlaceholderMetadata(
        id=record_id,
        file_name="image1.png",
        content_type="image/png",
        content_fingerprint="c2hhMjU2",
        media_kind=MediaKind.IMAGE,
    )
    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (100, 100)
        assert image.format == "PNG"


def test_metadata_chunk_sits_before_iend() -> None:
    data = placeholder.encode(MediaKind.VIDEO, "abc", "media1.mp4", "video/mp4")
    chunks = list(png_chunks.iter_chunks(data))

    assert chunks[-1].chunk_type == png_chunks.IEND
    keyword, _ = png_chunks.parse_text_chunk(chunks[-2].data)
    assert keyword == METADATA_KEYWORD
    assert chunks[-2].crc_ok()


def test_decode_returns_none_for_foreign_payloads() -> None:
    plain_png = placeholder.render(MediaKind.IMAGE, "id", "x.png")
    encoded = placeholder.encode(MediaKind.IMAGE, "id-1", "x.png", "image/png")

    assert placeholder.decode(b"") is None
    assert placeholder.decode(b"\x00\x00\x00\x18ftypmp42" * 10) is None
    assert placeholder.decode(plain_png) is None
    assert placeholder.decode(encoded[:40]) is None
    assert placeholder.decode(encoded[: len(encoded) - 20]) is None


def test_decode_ignores_other_text_chunks_and_bad_json() -> None:
    plain_png = placeholder.render(MediaKind.IMAGE, "id", "x.png")
    other = png_chunks.insert_before_iend(plain_png, png_chunks.build_text_chunk("Comment", "{}"))
    broken = png_chunks.insert_before_iend(
        plain_png, png_chunks.build_text_chunk(METADATA_KEYWORD, "{not json")
    )
    no_id = png_chunks.insert_before_iend(
        plain_png, png_chunks.build_text_chunk(METADATA_KEYWORD, '{"contentType": "image/png"}')
    )
    deeply_nested = png_chunks.insert_before_iend(
        plain_png, png_chunks.build_text_chunk(METADATA_KEYWORD, "[" * 200000)
    )

    assert placeholder.decode(other) is None
    assert placeholder.decode(broken) is None
    assert placeholder.decode(no_id) is None
    assert placeholder.decode(deeply_nested) is None


def test_decode_rejects_corrupted_metadata_chunk() -> None:
    data = bytearray(placeholder.encode(MediaKind.IMAGE, "id-1", "x.png", "image/png"))
    iend_offset = png_chunks.find_iend_offset(bytes(data))
    data[iend_offset - 5] ^= 0xFF

    assert placeholder.decode(bytes(data)) is None


def test_generator_falls_back_to_minimal_placeholder() -> None:
    generator = PlaceholderGenerator(ConfigManager())
    full = generator.generate(MediaKind.IMAGE, "id-1", "a.png", "image/png")
    small = generator.generate(MediaKind.IMAGE, "id-1", "a.png", "image/png", original=full)

    assert len(small) < len(full)
    assert placeholder.decode(small).id == "id-1"
    with Image.open(io.BytesIO(small)) as image:
        assert image.size == (1, 1)


def test_generator_keeps_originals_smaller_than_any_placeholder() -> None:
    tiny = io.BytesIO()
    Image.new("RGB", (1, 1)).save(tiny, format="GIF")

    result = PlaceholderGenerator(ConfigManager()).generate(
        MediaKind.IMAGE, "id-3", "tiny.gif", "image/gif", original=tiny.getvalue()
    )

    assert result is None


def test_generator_uses_configured_size() -> None:
    config = ConfigManager()
    config.set("placeholder.width", 64)
    config.set("placeholder.height", 48)

    data = PlaceholderGenerator(config).generate(MediaKind.VIDEO, "id-2", "m.mp4", "video/mp4")

    with Image.open(io.BytesIO(data)) as image:
        assert image.size == (64, 48)
