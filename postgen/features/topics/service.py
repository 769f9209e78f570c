# postgen/features/topics/service.py
from typing import List, Optional

from google import genai

from postgen.config import Config, config
from postgen.errors import ProviderError
from postgen.lib.genai_client import make_client
from postgen.lib.json_tools import parse_model_json
from postgen.lib.sanitize import sanitize_field
from postgen.logger import get_logger
from .prompt import build_related_topics_prompt, related_topics_schema

log = get_logger(__name__)

MAX_TOPICS = 5


async def suggest_topics(
    topic: str,
    client: Optional[genai.Client] = None,
    *,
    cfg: Config = config,
) -> List[str]:
    """
    Ask the text model for catchy post titles around `topic`.
    Suggestions are optional UI sugar: any failure yields an empty list.
    """
    topic = (topic or "").strip()
    if not topic:
        return []

    try:
        client = client or make_client(cfg.gemini_api_key, base_url=cfg.gemini_base_url,
                                       timeout_ms=cfg.http_timeout_ms)
        resp = await client.aio.models.generate_content(
            model=cfg.gemini_text_model,
            contents=build_related_topics_prompt(topic=topic, count=MAX_TOPICS),
            config={
                "response_mime_type": "application/json",
                "response_schema": related_topics_schema(),
            },
        )
        data = parse_model_json(resp.text or "[]")
    except Exception as e:
        err = ProviderError.from_exception(e)
        log.warning(f"related topics failed ({err.kind.value}): {err.raw_message}")
        return []

    if not isinstance(data, list):
        log.warning(f"related topics: expected a JSON array, got {type(data).__name__}")
        return []
    topics = [sanitize_field(t) for t in data if isinstance(t, str)]
    return [t for t in topics if t][:MAX_TOPICS]
