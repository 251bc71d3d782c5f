"""Utility modules."""
from funnel.utils.json_utils import (
    json_dump,
    json_load,
    read_json_file,
    write_json_file,
)
from funnel.utils.time_utils import ensure_aware, epoch_ms, utc_now
from funnel.utils.validation import validate_id

__all__ = [
    "json_dump",
    "json_load",
    "read_json_file",
    "write_json_file",
    "ensure_aware",
    "epoch_ms",
    "utc_now",
    "validate_id",
]
