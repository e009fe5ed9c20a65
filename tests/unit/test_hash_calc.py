import base64
import hashlib
from pathlib import Path

from pptx_slim_swapper.utils import hash_calc


def test_compute_fingerprint_is_base64_sha256() -> None:
    expected = base64.b64encode(hashlib.sha256(b"pptx-slim-swapper").digest()).decode("ascii")

    assert hash_calc.compute_fingerprint(b"pptx-slim-swapper") == expected


def test_file_fingerprint_matches_bytes(tmp_path: Path) -> None:
    sample_path = tmp_path / "sample.bin"
    payload = bytes(range(256)) * 4096
    sample_path.write_bytes(payload)

    assert hash_calc.compute_file_fingerprint(sample_path, chunk_size_kb=1) == (
        hash_calc.compute_fingerprint(payload)
    )


def test_file_fingerprint_missing_file(tmp_path: Path) -> None:
    assert hash_calc.compute_file_fingerprint(tmp_path / "missing.bin") is None


def test_fingerprints_match_is_lenient_on_absence() -> None:
    assert hash_calc.fingerprints_match(None, "abc") is True
    assert hash_calc.fingerprints_match("abc", "abc") is True
    assert hash_calc.fingerprints_match("abc", "abd") is False
