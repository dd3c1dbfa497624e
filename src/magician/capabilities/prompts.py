"""Prompt construction per capability."""

from collections.abc import Callable
from typing import TYPE_CHECKING

from magician.capabilities import Capability, CapabilityRequest
from magician.core.typing import JSONDict, MessageDict

if TYPE_CHECKING:
    from magician.capabilities.registry import CapabilitySpec


def _ideas_prompt(payload: JSONDict) -> str:
    market = payload.get("market_info")
    constraints = payload.get("constraints") or []
    header = [
        "Generate 3 innovative business ideas for a deaf entrepreneur with the "
        f"following interests: {', '.join(payload['interests'])}."
    ]
    if market:
        header.append(f"Consider this market information: {market}.")
    if constraints:
        header.append(f"The business must satisfy these constraints: {', '.join(constraints)}.")
    body = """
For each idea, provide:
1. A title
2. A brief description (1-2 sentences)
3. Market potential (High, Medium, or Low)
4. Difficulty level (High, Medium, or Low)
5. Estimated startup costs (as a range)

Focus on businesses that leverage the entrepreneur's unique perspective as a deaf \
individual and create value for both deaf and hearing communities.

Format your response as a JSON object with an 'ideas' array containing objects with \
the properties: title, description, marketPotential, difficultyLevel, and startupCosts."""
    return " ".join(header) + "\n" + body


def _analysis_prompt(payload: JSONDict) -> str:
    return f"""Analyze this business idea for a deaf entrepreneur:

Business Idea: {payload['idea_title']}
Description: {payload['idea_description']}
Target Market: {payload['target_market']}

Provide a comprehensive analysis including:
1. Overall viability (valid or needs improvement)
2. Viability score (1-10)
3. Key strengths and weaknesses
4. Recommendations for improvement
5. Accessibility considerations for deaf entrepreneurs

Format your response as a JSON object with these properties: valid (boolean), \
viabilityScore (number), strengthsWeaknesses (object with strengths and weaknesses \
arrays), recommendations (array), and accessibilityConsiderations (array)."""


def _plan_prompt(payload: JSONDict) -> str:
    return f"""Create a business plan outline for "{payload['business_name']}": \
{payload['business_description']}. The target market is: {payload['target_market']}.

Generate an outline with the standard business plan sections, providing a brief \
description and 3-5 key points to address for each section.

Keep in mind this is for a deaf entrepreneur who may require accommodations for \
communication with hearing clients/suppliers.

Format your response as a JSON object with a 'sections' array containing objects \
with the properties: title, description, and keyPoints (an array of strings)."""


def _assistance_prompt(payload: JSONDict) -> str:
    context = payload.get("business_context")
    prompt = f"Context: {context}\n\n" if context else ""
    prompt += f"Question: {payload['query']}"
    if payload.get("include_resources", True):
        prompt += "\n\nWhere relevant, point to resources for deaf business owners."
    if payload.get("format") == "json":
        prompt += "\n\nFormat your response as a JSON object with a 'response' string property."
    return prompt


PROMPT_BUILDERS: dict[Capability, Callable[[JSONDict], str]] = {
    Capability.BUSINESS_IDEA_GENERATION: _ideas_prompt,
    Capability.IDEA_ANALYSIS: _analysis_prompt,
    Capability.BUSINESS_PLAN_OUTLINE: _plan_prompt,
    Capability.BUSINESS_ASSISTANCE: _assistance_prompt,
}


def build_messages(request: CapabilityRequest) -> list[MessageDict]:
    """User message for the request. System prompt travels in LLMConfig."""
    prompt = PROMPT_BUILDERS[request.capability](request.payload)
    return [{"role": "user", "content": prompt}]


def wants_json(request: CapabilityRequest, spec: "CapabilitySpec") -> bool:
    """Whether the provider should be asked for, and parsed as, JSON."""
    return spec.json_output or request.payload.get("format") == "json"
