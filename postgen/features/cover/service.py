# postgen/features/cover/service.py
import random
from typing import Any, Optional
from urllib.parse import quote, urlencode

from google import genai
from google.genai import types

from postgen.config import Config, config
from postgen.errors import API_EMPTY_RESPONSE, ErrorKind, ProviderError
from postgen.lib.genai_client import make_client
from postgen.lib.imaging import encode_b64, image_mime_type
from postgen.logger import get_logger
from postgen.schemas import CoverResult, CoverSummary, GeneratedPost, GenerationRequest
from .prompt import build_cover_prompt, build_fallback_prompt

log = get_logger(__name__)

SEED_RANGE = 1_000_000


def fallback_cover_url(
    *,
    topic: str,
    style: str,
    image_prompt: Optional[str],
    seed: int,
    cfg: Config = config,
) -> str:
    """Keyless image-by-prompt URL; building it makes no request."""
    prompt = build_fallback_prompt(topic=topic, style=style, image_prompt=image_prompt)
    query = urlencode({
        "width": cfg.fallback_image_width,
        "height": cfg.fallback_image_height,
        "seed": seed,
        "nologo": "true",
        "model": "flux",
    })
    return f"{cfg.fallback_image_url.rstrip('/')}/{quote(prompt, safe='')}?{query}"


def _first_inline_image(resp: Any) -> Optional[tuple]:
    """Return (bytes, mime) of the first inline image part, if any."""
    for cand in getattr(resp, "candidates", None) or []:
        content = getattr(cand, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            data = getattr(inline, "data", None) if inline is not None else None
            if not data:
                continue
            if isinstance(data, str):
                # some transports hand back base64 text instead of bytes
                return data, getattr(inline, "mime_type", None) or "image/png"
            data = bytes(data)
            return data, getattr(inline, "mime_type", None) or image_mime_type(data)
    return None


class CoverResolutionClient:
    """
    Resolves the cover for a generated post. Image-model failures never reach
    the caller: they turn into a fallback URL.
    """

    def __init__(self, client: Optional[genai.Client] = None, *, cfg: Config = config,
                 rng: Optional[random.Random] = None):
        self._client = client
        self._config = cfg
        self._rng = rng or random.Random()

    def _get_client(self) -> genai.Client:
        if self._client is not None:
            return self._client
        return make_client(
            self._config.gemini_api_key,
            base_url=self._config.gemini_base_url,
            timeout_ms=self._config.http_timeout_ms,
        )

    async def resolve_cover(self, req: GenerationRequest, post: GeneratedPost) -> CoverResult:
        if req.cover_mode == "template":
            # rendered by the UI; nothing to call
            return CoverResult(kind="template", template=post.cover_summary or CoverSummary(main_title=post.title))

        try:
            return await self._generate_image(req, post)
        except Exception as e:
            err = ProviderError.from_exception(e)
            log.warning(f"cover image failed ({err.kind.value}): {err.raw_message}; using fallback image")
            return self._fallback(req, post)

    async def _generate_image(self, req: GenerationRequest, post: GeneratedPost) -> CoverResult:
        reference = req.reference_image if req.cover_mode == "reference" else None
        prompt = build_cover_prompt(
            topic=req.topic,
            style=req.style,
            image_prompt=post.image_prompt,
            has_reference=reference is not None,
        )
        log.debug(f"cover prompt is: {prompt}")

        parts = []
        if reference is not None:
            parts.append(types.Part.from_bytes(data=reference, mime_type=image_mime_type(reference)))
        parts.append(types.Part.from_text(text=prompt))

        client = self._get_client()
        resp = await client.aio.models.generate_content(
            model=self._config.gemini_image_model,
            contents=[types.Content(role="user", parts=parts)],
            config=types.GenerateContentConfig(
                response_modalities=["IMAGE", "TEXT"],
                image_config=types.ImageConfig(aspect_ratio=self._config.image_aspect_ratio),
            ),
        )
        found = _first_inline_image(resp)
        if found is None:
            raise ProviderError(f"{API_EMPTY_RESPONSE}: no image part in response", ErrorKind.EMPTY_RESPONSE)
        data, mime = found
        b64 = data if isinstance(data, str) else encode_b64(data)
        log.info(f"cover image generated ({mime}, {len(b64)} b64 chars)")
        return CoverResult(kind="inline", image_base64=b64, mime_type=mime)

    def _fallback(self, req: GenerationRequest, post: GeneratedPost) -> CoverResult:
        url = fallback_cover_url(
            topic=req.topic,
            style=req.style,
            image_prompt=post.image_prompt,
            seed=self._rng.randrange(SEED_RANGE),
            cfg=self._config,
        )
        return CoverResult(kind="fallback_url", url=url)
