"""Prompt material for pipeline stages.

The analysis provider receives an instruction plus an illustrative output
shape. The trends provider receives a system/user chat prompt.
"""

from langchain_core.prompts import ChatPromptTemplate

# =============================================================================
# Analysis provider (stages A, B, C, E)
# =============================================================================

SEGMENTATION_INSTRUCTIONS = (
    "Segment the content into meaningful blocks. Return strict JSON only."
)
ENGAGEMENT_INSTRUCTIONS = (
    "Analyze engagement risks for each segment. Return strict JSON only."
)
AUDIENCE_FIT_INSTRUCTIONS = (
    "Assess audience mismatch, clarity problems, and tone. Return strict JSON only."
)
SYNTHESIS_INSTRUCTIONS = (
    "Synthesize a final diagnosis with rewrite priorities. Return strict JSON only."
)

# Illustrative shapes sent alongside each request. Values describe the type.
SEGMENTATION_SHAPE = {
    "segments": [
        {
            "id": "number",
            "text": "string",
            "purpose": "hook|context|story|value|cta|other",
        },
    ],
}

ENGAGEMENT_SHAPE = {
    "dropOffRisks": [
        {
            "segmentId": "number",
            "reason": "string",
            "severity": "low|medium|high",
        },
    ],
    "engagementIssues": [
        {
            "segmentId": "number",
            "issue": "string",
        },
    ],
}

AUDIENCE_FIT_SHAPE = {
    "audienceMismatch": ["string"],
    "clarityIssues": [
        {
            "segmentId": "number",
            "problem": "string",
        },
    ],
    "toneProblems": ["string"],
}

SYNTHESIS_SHAPE = {
    "overallPotential": "low|medium|high",
    "highestImpactFixes": ["string"],
    "rewritePriorities": [
        {
            "segmentId": "number",
            "recommendedChange": "string",
            "expectedImpact": "string",
        },
    ],
    "contentPositioningAdvice": ["string"],
}

# =============================================================================
# Trends provider (stage D)
# =============================================================================

TRENDS_SYSTEM_PROMPT = (
    "You are a trends analyst for creator content. Respond with strict JSON only."
)

# Note: literal braces must be escaped as {{ }} for LangChain templates
TRENDS_USER_PROMPT = (
    'Analyze current trends and saturation for the topic: "{topic}". '
    "Return JSON with currentTrends, saturationSignals, similarPopularFormats arrays."
)

TRENDS_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", TRENDS_SYSTEM_PROMPT),
        ("human", TRENDS_USER_PROMPT),
    ]
)

# =============================================================================
# Event log lines
# =============================================================================

STAGE_LOG_MESSAGES = {
    "A": "Splitting content into structural segments.",
    "B": "Evaluating engagement risks and drop-off triggers.",
    "C": "Checking audience fit, clarity, and tone.",
    "D": "Pulling live trend and saturation signals.",
    "E": "Synthesizing final rewrite priorities.",
}

PIPELINE_COMPLETE_MESSAGE = "Analysis complete. Ready for next actions."
