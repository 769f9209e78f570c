# postgen/features/post_text/service.py
import re
from typing import Any, Optional

from google import genai
from pydantic import ValidationError

from postgen.config import Config, config
from postgen.errors import API_EMPTY_RESPONSE, ErrorKind, MALFORMED_OUTPUT, ProviderError
from postgen.lib.genai_client import make_client
from postgen.lib.json_tools import parse_model_json
from postgen.lib.sanitize import sanitize_post
from postgen.logger import get_logger
from postgen.schemas import CoverSummary, GeneratedPost, GenerationRequest
from .prompt import build_post_prompt, post_response_schema

log = get_logger(__name__)

BODY_PREVIEW_CHARS = 150


def _normalize_tags(raw: Any) -> list:
    if isinstance(raw, str):
        raw = re.split(r"[,\s，、]+", raw)
    if not isinstance(raw, list):
        return []
    tags = []
    for t in raw:
        if not isinstance(t, str):
            continue
        t = t.strip().lstrip("#＃").strip()
        if t:
            tags.append(t)
    return tags


def _preview(content: str) -> str:
    if len(content) <= BODY_PREVIEW_CHARS:
        return content
    return content[:BODY_PREVIEW_CHARS] + "..."


def _fill_summary(post: GeneratedPost) -> CoverSummary:
    s = post.cover_summary or CoverSummary()
    return CoverSummary(
        main_title=s.main_title or post.title,
        highlight_text=s.highlight_text,
        body_preview=s.body_preview or _preview(post.content),
    )


def to_generated_post(data: Any, *, template_mode: bool) -> GeneratedPost:
    """Validate parsed model JSON into a GeneratedPost and clean it up."""
    if not isinstance(data, dict):
        raise ProviderError(f"{MALFORMED_OUTPUT}: expected a JSON object, got {type(data).__name__}",
                            ErrorKind.MALFORMED_OUTPUT)
    data = dict(data)
    data["tags"] = _normalize_tags(data.get("tags"))
    if not template_mode or not isinstance(data.get("cover_summary"), dict):
        data["cover_summary"] = None
    try:
        post = GeneratedPost.model_validate(data)
    except ValidationError as e:
        raise ProviderError(f"{MALFORMED_OUTPUT}: {e.error_count()} field error(s): {e.errors()[0]['msg']}",
                            ErrorKind.MALFORMED_OUTPUT) from e

    post = sanitize_post(post)
    if template_mode:
        post = post.model_copy(update={"cover_summary": _fill_summary(post)})
    return post


class TextGenerationClient:
    """
    Generates the post text. `client` may be injected (tests, proxies);
    otherwise a fresh client is built per call from the current config.
    """

    def __init__(self, client: Optional[genai.Client] = None, *, cfg: Config = config):
        self._client = client
        self._config = cfg

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client
        return make_client(
            self._config.gemini_api_key,
            base_url=self._config.gemini_base_url,
            timeout_ms=self._config.http_timeout_ms,
        )

    async def generate_text(self, req: GenerationRequest) -> GeneratedPost:
        template_mode = req.cover_mode == "template"
        prompt = build_post_prompt(topic=req.topic, style=req.style, length=req.length, template_mode=template_mode)
        log.debug(f"post prompt is: {prompt}")

        try:
            client = self._get_client()
            resp = await client.aio.models.generate_content(
                model=self._config.gemini_text_model,
                contents=prompt,
                config={
                    "response_mime_type": "application/json",
                    "response_schema": post_response_schema(),
                    "max_output_tokens": self._config.text_max_output_tokens,
                    "temperature": self._config.text_temperature,
                },
            )
            raw = (resp.text or "").strip()
            if not raw:
                raise ProviderError(API_EMPTY_RESPONSE, ErrorKind.EMPTY_RESPONSE)
            post = to_generated_post(parse_model_json(raw), template_mode=template_mode)
        except ProviderError as e:
            log.error(f"text generation failed ({e.kind.value}): {e.raw_message}")
            raise
        except Exception as e:
            err = ProviderError.from_exception(e)
            log.error(f"text generation failed ({err.kind.value}): {err.raw_message}")
            raise err from e

        log.info(f"generated post '{post.title}' with {len(post.tags)} tags")
        return post
