from .curl import build_cli_call
from .destination import normalize_destination
from .form import UploadFile, encode_urlencoded, flatten_fields, process_files

__all__ = (
    "UploadFile",
    "build_cli_call",
    "encode_urlencoded",
    "flatten_fields",
    "normalize_destination",
    "process_files",
)
