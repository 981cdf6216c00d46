"""Export, import and share-link helpers."""

from .document import (
    EXPORT_VERSION,
    ConfigurationDocument,
    build_document,
    export_configuration,
    export_filename,
    import_configuration,
)
from .export import team_list_text, teams_to_csv
from .share import (
    Bracket,
    SharePayload,
    build_share_payload,
    build_share_url,
    decode_share_payload,
    encode_share_payload,
)

__all__ = [
    "Bracket",
    "ConfigurationDocument",
    "EXPORT_VERSION",
    "SharePayload",
    "build_document",
    "build_share_payload",
    "build_share_url",
    "decode_share_payload",
    "encode_share_payload",
    "export_configuration",
    "export_filename",
    "import_configuration",
    "team_list_text",
    "teams_to_csv",
]
