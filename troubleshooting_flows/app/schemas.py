"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from typing import Optional, Any

from pydantic import BaseModel


class FlowRequest(BaseModel):
    flow: dict[str, Any]
    # None falls back to the configured STRICT_FLOWS
    strict: Optional[bool] = None


class ViolationRead(BaseModel):
    kind: str
    node_id: Optional[str] = None
    option_index: Optional[int] = None
    message: str = ""


class ValidateResponse(BaseModel):
    valid: bool
    violation: Optional[ViolationRead] = None


class PositionRead(BaseModel):
    """Either `node_id` (waiting on a node) or `outcome` (run ended)."""
    node_id: Optional[str] = None
    outcome: Optional[str] = None


class PreviewRequest(FlowRequest):
    position: Optional[PositionRead] = None
    choice: Optional[str] = None


class PreviewResponse(BaseModel):
    position: PositionRead
    finished: bool
    transition: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    choices: list[str] = []


class SaveFlowResponse(BaseModel):
    article_id: str
    node_count: int
