"""
JSON file download response.

Snapshot exports are served as an indented JSON document with a
Content-Disposition header so browsers save them as a file. Datetimes are
written in UTC with a 'Z' suffix and UUIDs as strings, matching the API's
regular responses.
"""

import json
import uuid
from datetime import datetime
from typing import Any

from fastapi.responses import JSONResponse


class UTCDateTimeEncoder(json.JSONEncoder):
    """JSON encoder for the non-native values that can appear in snapshots."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.strftime("%Y-%m-%dT%H:%M:%SZ")
        if isinstance(obj, uuid.UUID):
            return str(obj)
        return super().default(obj)


class JSONAttachmentResponse(JSONResponse):
    """JSON response delivered as a downloadable file."""

    def __init__(self, content: Any, filename: str, **kwargs: Any) -> None:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Content-Disposition"] = f'attachment; filename="{filename}"'
        super().__init__(content, headers=headers, **kwargs)

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            cls=UTCDateTimeEncoder,
            ensure_ascii=False,
            allow_nan=False,
            indent=2,
        ).encode("utf-8")
