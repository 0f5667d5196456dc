# backend/proposal_export/services/exporters/json_exporter.py
"""Raw dump of the export payload (no section assembly)."""
import json
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from proposal_export.config import settings
from proposal_export.models import ExportPayload
from proposal_export.utils.file_utils import sanitize_filename
from proposal_export.utils.logging import logger


class JsonExporter:
    """Pretty-printed JSON of the payload exactly as it was handed in."""

    file_extension = "json"
    content_type = "application/json"

    def export_to_json(
        self,
        payload: Union[ExportPayload, Mapping[str, Any]],
        filename: Optional[str] = None
    ) -> Tuple[bytes, str, str]:
        """
        Serialize the payload.

        A pydantic payload is dumped with its camelCase wire names and only the
        fields that were actually set; a plain mapping is dumped as-is.

        Returns:
            Tuple of (bytes, filename, content_type)
        """
        data = self._to_data(payload)
        content = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

        if not filename:
            title = data.get("title")
            filename = sanitize_filename(title) if isinstance(title, str) else settings.default_filename

        logger.info("Rendered JSON", extra={"bytes": len(content)})
        return content, f"{filename}.{self.file_extension}", self.content_type

    @staticmethod
    def _to_data(payload: Union[ExportPayload, Mapping[str, Any]]) -> Dict[str, Any]:
        if isinstance(payload, ExportPayload):
            return payload.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return dict(payload)
