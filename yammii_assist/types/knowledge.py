"""
Knowledge Types

Knowledge items are question/answer pairs added on top of the built-in
knowledge base, either typed in by hand or extracted from an uploaded
document.

Models:
    - KnowledgeItem: One question/answer pair
    - ExtractionRequest: An encoded file waiting to be analyzed
"""

import base64
import mimetypes
import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]*)*),(?P<data>.*)$", re.DOTALL)


class KnowledgeItem(BaseModel):
    """
    A support question with its answer.

    No uniqueness is enforced; the same pair may appear more than once.
    """

    model_config = ConfigDict(frozen=True)

    question: str = Field(..., description="The technical question extracted from the text.")
    answer: str = Field(..., description="The answer to the question.")


class ExtractionRequest(BaseModel):
    """
    A file payload prepared for knowledge extraction.

    Attributes:
        file_base64: Base64 payload with any data-URL prefix already removed
        mime_type: Media type of the file (text/plain, application/pdf, image/*)
        file_name: Optional original file name, used only for logging
    """

    model_config = ConfigDict(frozen=True)

    file_base64: str
    mime_type: str
    file_name: str | None = None

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        mime_type: str,
        *,
        file_name: str | None = None,
    ) -> "ExtractionRequest":
        """Encode raw file bytes."""
        return cls(
            file_base64=base64.b64encode(data).decode("ascii"),
            mime_type=mime_type,
            file_name=file_name,
        )

    @classmethod
    def from_data_url(cls, data_url: str) -> "ExtractionRequest":
        """
        Build a request from a browser-style data URL.

        Example:
            >>> req = ExtractionRequest.from_data_url("data:text/plain;base64,5L2g5aW9")
            >>> req.mime_type, req.file_base64
            ('text/plain', '5L2g5aW9')

        Raises:
            ValueError: If the string is not a base64 data URL
        """
        match = _DATA_URL_RE.match(data_url)
        if match is None or ";base64" not in match.group("params"):
            raise ValueError("Expected a base64 data URL (data:<mime>;base64,<payload>)")
        mime_type = match.group("mime") or "text/plain"
        return cls(file_base64=match.group("data"), mime_type=mime_type)

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        mime_type: str | None = None,
    ) -> "ExtractionRequest":
        """
        Read and encode a local file.

        Args:
            path: File to read
            mime_type: Media type. Guessed from the file name when omitted.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the media type cannot be determined
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        if mime_type is None:
            mime_type, _ = mimetypes.guess_type(path.name)
            if mime_type is None:
                raise ValueError(f"Cannot determine media type for {path.name}")

        return cls.from_bytes(path.read_bytes(), mime_type, file_name=path.name)
