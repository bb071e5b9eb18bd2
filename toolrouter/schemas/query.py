"""Schemas for the query and summarize endpoints."""

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Request body for POST /query."""

    query: str = Field(..., description="Customer support query to route to a department.")


class SummarizeRequest(BaseModel):
    """Request body for POST /summarize."""

    message: str = Field(..., description="User message, usually asking to summarize a URL.")


class ToolOutcomeOut(BaseModel):
    tool_name: str
    kind: str = Field(..., description="ticket, fallback, degraded, error or skipped.")
    text: str


class QueryResponse(BaseModel):
    """Response for POST /query and POST /summarize."""

    answer: str = Field(..., description="Final rendered answer.")
    tools_used: list[str] = Field(default_factory=list, description="Tools executed, in invocation order.")
    outcomes: list[ToolOutcomeOut] = Field(default_factory=list, description="Per-invocation results (ticket routing only).")

    model_config = {
        "json_schema_extra": {
            "examples": [{
                "answer": "Ticket No.: E-102, Classification: Hardware Damage",
                "tools_used": ["call_electronics_dept"],
                "outcomes": [{
                    "tool_name": "call_electronics_dept",
                    "kind": "ticket",
                    "text": "Ticket No.: E-102, Classification: Hardware Damage",
                }],
            }]
        }
    }
