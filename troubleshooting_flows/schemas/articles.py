"""
Schemas - Content Articles

Payload of a knowledge article as stored by the remote article store. The
flow graph rides along, already encoded, under `decision_tree`.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Article(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: Optional[str] = None
    title: str = ""
    category: str = ""
    severity: str = "Medium"
    years_min: Optional[int] = None
    years_max: Optional[int] = None
    customer_summary: str = ""
    clarifying_questions: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    model_year_notes: List[str] = Field(default_factory=list)
    stop_and_escalate: List[str] = Field(default_factory=list)
    next_step: str = ""

    # Wire-format flow (see schemas.wire); None when the article has no flow.
    decision_tree: Optional[Dict[str, Any]] = None
