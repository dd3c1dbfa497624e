"""
Pydantic models for capability payloads and results.

Payloads accept both camelCase (as sent by the web client) and snake_case
keys. Results use the camelCase keys the web client renders.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Payload(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class _Result(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )


# --- Payloads ---


class IdeaGenerationPayload(_Payload):
    interests: list[str] = Field(min_length=1)
    market_info: str | None = None
    constraints: list[str] = Field(default_factory=list)


class IdeaAnalysisPayload(_Payload):
    idea_title: str = Field(min_length=1)
    idea_description: str = Field(min_length=1)
    target_market: str = Field(min_length=1)


class PlanOutlinePayload(_Payload):
    business_name: str = Field(min_length=1)
    business_description: str = Field(min_length=1)
    target_market: str = Field(min_length=1)


class AssistancePayload(_Payload):
    query: str = Field(min_length=5, max_length=2000)
    business_context: str | None = None
    include_resources: bool = True
    format: Literal["text", "json"] = "text"


# --- Results ---


class BusinessIdea(_Result):
    title: str
    description: str
    market_potential: str
    difficulty_level: str
    startup_costs: str


class IdeasResult(_Result):
    ideas: list[BusinessIdea] = Field(min_length=1)
    provider: str


class StrengthsWeaknesses(_Result):
    strengths: list[str]
    weaknesses: list[str]


class IdeaAnalysisResult(_Result):
    valid: bool
    viability_score: float = Field(ge=0, le=10)
    strengths_weaknesses: StrengthsWeaknesses
    recommendations: list[str]
    accessibility_considerations: list[str]
    provider: str


class PlanSection(_Result):
    title: str
    description: str
    key_points: list[str]


class PlanOutlineResult(_Result):
    sections: list[PlanSection] = Field(min_length=1)
    provider: str


class AssistanceResult(_Result):
    response: str
    provider: str
