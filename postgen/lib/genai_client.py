# postgen/lib/genai_client.py
from typing import Optional

from google import genai
from google.genai import types

from postgen.config import config
from postgen.errors import API_KEY_MISSING, ErrorKind, ProviderError


def make_client(
    api_key: Optional[str] = None,
    *,
    base_url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
) -> genai.Client:
    """
    Build a Gemini client. `base_url` points every call at a proxy host
    instead of the public endpoint; nothing process-wide is patched.
    The key is checked on every call so a missing key surfaces as AuthMissing.
    """
    key = api_key if api_key is not None else config.gemini_api_key
    if not key:
        raise ProviderError(f"{API_KEY_MISSING}: set GEMINI_API_KEY", ErrorKind.AUTH_MISSING)

    base_url = base_url if base_url is not None else config.gemini_base_url
    timeout_ms = timeout_ms if timeout_ms is not None else config.http_timeout_ms
    http_options = types.HttpOptions(base_url=base_url, timeout=timeout_ms) if base_url \
        else types.HttpOptions(timeout=timeout_ms)
    return genai.Client(api_key=key, http_options=http_options)
