"""預設設定值。"""

DEFAULT_CONFIG = {
    "swap": {
        "manifest_file_name": "swap-manifest.json",
        "media_folder": "media",
        "slim_suffix": "_slim",
        "restored_suffix": "_restored",
        "default_output_folder": "output",
    },
    "placeholder": {
        "width": 100,
        "height": 100,
        "draw_label": True,
    },
    "matching": {
        "metadata_fallback": True,
        "name_fallback": True,
        "verify_fingerprint": True,
    },
    "hash": {
        "chunk_size_kb": 1024,
    },
    "content_type_extensions": {
        "image/jpeg": ".jpg",
        "image/png": ".png",
        "image/gif": ".gif",
        "image/bmp": ".bmp",
        "image/tiff": ".tif",
        "image/svg+xml": ".svg",
        "image/x-emf": ".emf",
        "image/x-wmf": ".wmf",
        "video/mp4": ".mp4",
        "video/avi": ".avi",
        "video/x-msvideo": ".avi",
        "video/wmv": ".wmv",
        "video/x-ms-wmv": ".wmv",
        "video/mov": ".mov",
        "video/quicktime": ".mov",
        "video/mpeg": ".mpg",
    },
    "logging": {
        "level": "INFO",
        "error_log": None,
    },
}

FALLBACK_EXTENSION = ".dat"
