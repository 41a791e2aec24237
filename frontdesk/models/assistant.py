from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class Reply(BaseModel):
    """Textual response that will be rendered to the user."""

    model_config = ConfigDict(extra="allow")

    text: str
    tone: Optional[str] = None
    title: Optional[str] = None
    display_hints: Optional[Dict[str, Any]] = None
