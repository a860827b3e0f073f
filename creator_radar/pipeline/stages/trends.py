"""Stage D: Trends - live trend and saturation signals for the topic.

Depends only on the raw content (via the inferred topic), not on the
outputs of stages A-C.
"""

from typing import Any

from langchain_core.messages import BaseMessage

from creator_radar.config.prompts import TRENDS_PROMPT
from creator_radar.llm.client import TrendsClient
from creator_radar.models import StageKey
from creator_radar.pipeline.sanitize import infer_topic
from creator_radar.pipeline.schemas import output_json_schema
from creator_radar.pipeline.state import PipelineRunState

# LangChain message types -> chat-completions roles
ROLE_MAP = {
    "system": "system",
    "human": "user",
    "ai": "assistant",
}


def _to_chat_message(message: BaseMessage) -> dict[str, str]:
    return {
        "role": ROLE_MAP.get(message.type, message.type),
        "content": str(message.content),
    }


def build_trends_messages(state: PipelineRunState) -> list[dict[str, str]]:
    topic = infer_topic(state.content)
    return [_to_chat_message(m) for m in TRENDS_PROMPT.format_messages(topic=topic)]


async def run_trends(state: PipelineRunState, client: TrendsClient) -> Any:
    return await client.run_prompt(
        build_trends_messages(state),
        response_schema=output_json_schema(StageKey.D),
    )
