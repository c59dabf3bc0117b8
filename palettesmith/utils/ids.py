"""
Palettesmith Request IDs
"""
import uuid
from datetime import datetime, timezone

REQUEST_ID_PREFIX = "pal"


def generate_request_id() -> str:
    """
    Build a request id of the form ``pal-<UTC yyyymmddHHMMSS>-<8 hex>``.

    The timestamp keeps ids sortable in log output; the suffix keeps
    concurrent requests in the same second apart.
    """
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{REQUEST_ID_PREFIX}-{stamp}-{uuid.uuid4().hex[:8]}"
