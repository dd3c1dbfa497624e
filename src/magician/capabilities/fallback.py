"""
Rule-based fallback content.

Used when no AI provider can answer. Every generator returns a result
that validates against the capability's result model, with no external
calls, so the router always has a terminal path that succeeds.
"""

import random
from collections.abc import Callable

from magician.capabilities import Capability
from magician.core.typing import JSONDict

FALLBACK_PROVIDER = "fallback"

BUSINESS_TYPES = [
    "e-commerce store",
    "consulting service",
    "mobile app",
    "subscription service",
    "online marketplace",
]

ASSISTANCE_TEMPLATES = {
    "business_plan": (
        "To create a business plan, focus on these key areas: executive summary, "
        "company description, market analysis, organization structure, product/service "
        "details, marketing strategy, financial projections, and funding requirements. "
        "Consider accessibility aspects in each section."
    ),
    "funding": (
        "For funding options, consider: SBA loans (especially those with accessibility "
        "provisions), grants for deaf entrepreneurs, angel investors familiar with the "
        "deaf community, and crowdfunding platforms. The NTID Center for Employment has "
        "specific resources."
    ),
    "marketing": (
        "When marketing as a deaf entrepreneur, emphasize your unique perspective as a "
        "strength. Use visual platforms like Instagram, YouTube, and TikTok. Ensure all "
        "marketing materials are accessible with captions, transcripts, and visual clarity."
    ),
    "legal": (
        "For legal considerations, focus on: proper business registration, trademark "
        "protection, accessibility compliance (ADA), and communication accommodation "
        "policies. Consider working with attorneys familiar with deaf business owners' needs."
    ),
    "general": (
        "As a deaf entrepreneur, leverage resources from organizations like the National "
        "Deaf Business Institute, National Association of the Deaf, and NTID Center for "
        "Employment. Build networks within both deaf and hearing business communities."
    ),
}

# Checked in order, first hit wins
ASSISTANCE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("business_plan", ("plan", "strategy")),
    ("funding", ("fund", "money", "invest", "capital")),
    ("marketing", ("market", "advertis", "promot")),
    ("legal", ("legal", "law", "regulat")),
]

FALLBACK_NOTE = (
    "\n\n[Note: This is a fallback response. For more detailed assistance, please try "
    "again when AI services are fully available.]"
)

PLAN_SECTIONS = [
    ("Executive Summary", "A concise overview of the business and its goals.", [
        "Mission statement and vision",
        "Products or services offered",
        "Summary of financial needs",
    ]),
    ("Company Description", "Who you are and what makes the business distinct.", [
        "Legal structure and ownership",
        "Problem being solved",
        "Value of a deaf-led perspective",
    ]),
    ("Market Analysis", "The customers you serve and the competition you face.", [
        "Target market size and demographics",
        "Competitor strengths and gaps",
        "Reach into deaf and hearing communities",
    ]),
    ("Operations and Accessibility", "How the business runs day to day.", [
        "Communication accommodations with hearing clients and suppliers",
        "Staffing and interpreter or relay service needs",
        "Key tools and vendors",
    ]),
    ("Marketing Strategy", "How customers will find and choose you.", [
        "Visual-first channels and captioned content",
        "Pricing strategy",
        "Partnerships with deaf community organizations",
    ]),
    ("Financial Projections", "Expected costs, revenue and funding.", [
        "Startup costs and funding sources",
        "Revenue forecast for the first three years",
        "Break-even analysis",
    ]),
]


def _title_case_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def fallback_ideas(payload: JSONDict, rng: random.Random) -> JSONDict:
    interests = payload["interests"]
    market = payload.get("market_info") or "general"
    business_type = rng.choice(BUSINESS_TYPES)
    primary = interests[0]
    secondary = interests[1] if len(interests) > 1 else interests[0]

    return {
        "ideas": [
            {
                "title": f"{_title_case_first(primary)} {business_type}",
                "description": (
                    f"A {business_type} focused on {primary} and {secondary} "
                    f"for the {market} market."
                ),
                "marketPotential": "Medium",
                "difficultyLevel": "Medium",
                "startupCosts": "$5,000 - $15,000",
            },
            {
                "title": f"Accessible {secondary} platform",
                "description": (
                    f"An accessible platform designed for the {primary} community, "
                    f"focusing on {secondary}."
                ),
                "marketPotential": "High",
                "difficultyLevel": "Medium",
                "startupCosts": "$10,000 - $25,000",
            },
        ],
        "provider": FALLBACK_PROVIDER,
    }


def fallback_analysis(payload: JSONDict, rng: random.Random) -> JSONDict:
    return {
        "valid": True,
        "viabilityScore": 7,
        "strengthsWeaknesses": {
            "strengths": [
                "Addresses a specific market need",
                "Leverages unique perspective of deaf entrepreneurs",
                "Has potential for both deaf and hearing customer bases",
            ],
            "weaknesses": [
                "May require specialized marketing strategies",
                "Could face competition from established businesses",
            ],
        },
        "recommendations": [
            f"Conduct market research with potential customers in {payload['target_market']}",
            "Develop a clear accessibility plan",
            "Consider starting with a minimum viable product",
        ],
        "accessibilityConsiderations": [
            "Ensure all customer communications have ASL options",
            "Design user interfaces with deaf users in mind",
            "Consider partnerships with deaf community organizations",
        ],
        "provider": FALLBACK_PROVIDER,
    }


def fallback_plan_outline(payload: JSONDict, rng: random.Random) -> JSONDict:
    sections = [
        {"title": title, "description": description, "keyPoints": list(points)}
        for title, description, points in PLAN_SECTIONS
    ]
    sections[0]["description"] = (
        f"A concise overview of {payload['business_name']} and its goals."
    )
    return {"sections": sections, "provider": FALLBACK_PROVIDER}


def pick_assistance_template(query: str) -> str:
    query = query.lower()
    for name, keywords in ASSISTANCE_KEYWORDS:
        if any(k in query for k in keywords):
            return name
    return "general"


def fallback_assistance(payload: JSONDict, rng: random.Random) -> JSONDict:
    text = ASSISTANCE_TEMPLATES[pick_assistance_template(payload["query"])] + FALLBACK_NOTE
    result: JSONDict = {"response": text, "provider": FALLBACK_PROVIDER}
    if payload.get("format") == "json":
        result["source"] = "internal"
        result["disclaimer"] = "This is a fallback response from the internal system."
    return result


GENERATORS: dict[Capability, Callable[[JSONDict, random.Random], JSONDict]] = {
    Capability.BUSINESS_IDEA_GENERATION: fallback_ideas,
    Capability.IDEA_ANALYSIS: fallback_analysis,
    Capability.BUSINESS_PLAN_OUTLINE: fallback_plan_outline,
    Capability.BUSINESS_ASSISTANCE: fallback_assistance,
}


def generate(capability: Capability, payload: JSONDict, rng: random.Random | None = None) -> JSONDict:
    """Produce a rule-based result for a validated payload."""
    return GENERATORS[capability](payload, rng or random.Random())
