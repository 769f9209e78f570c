# tests/conftest.py
import dataclasses
import json
from io import BytesIO

import pytest
from PIL import Image

from postgen.config import config


# -------- Utilities --------
def tiny_png_bytes(w: int = 8, h: int = 8) -> bytes:
    im = Image.new("RGB", (w, h), (123, 45, 67))
    buf = BytesIO()
    im.save(buf, format="PNG")
    return buf.getvalue()


def make_config(**overrides):
    base = dict(
        gemini_api_key="test-key",
        progress_tick_seconds=0.01,
        progress_done_hold_seconds=0.05,
    )
    base.update(overrides)
    return dataclasses.replace(config, **base)


def post_payload(**overrides) -> dict:
    data = {
        "title": "周末去哪儿",
        "content": "✨ 第一段：城市漫步。\n\n🌿 第二段：公园野餐。",
        "tags": ["周末", "旅行", "城市漫步"],
        "image_prompt": "A sunny park picnic, pastel tones",
        "cover_summary": None,
    }
    data.update(overrides)
    return data


# -------- Mocks for google-genai --------
class _FakeBlob:
    def __init__(self, data, mime_type):
        self.data = data
        self.mime_type = mime_type

class _FakePart:
    def __init__(self, text=None, inline_data=None):
        self.text = text
        self.inline_data = inline_data

class _FakeContent:
    def __init__(self, parts):
        self.parts = parts

class _FakeCandidate:
    def __init__(self, parts):
        self.content = _FakeContent(parts)

class FakeResponse:
    def __init__(self, text=None, image=None, mime_type="image/png"):
        self.text = text
        parts = []
        if text is not None:
            parts.append(_FakePart(text=text))
        if image is not None:
            parts.append(_FakePart(inline_data=_FakeBlob(image, mime_type)))
        self.candidates = [_FakeCandidate(parts)]


class _FakeModels:
    def __init__(self, owner):
        self._owner = owner

    async def generate_content(self, *, model, contents, config=None):
        owner = self._owner
        owner.calls.append({"model": model, "contents": contents, "config": config})
        if "image" in model:
            if owner.image_error is not None:
                raise owner.image_error
            return FakeResponse(image=owner.image)
        if owner.text_error is not None:
            raise owner.text_error
        return FakeResponse(text=owner.text)


class _FakeAio:
    def __init__(self, owner):
        self.models = _FakeModels(owner)


class FakeGenaiClient:
    """
    Minimal shape of genai.Client used by the services: client.aio.models.generate_content.
    Models with 'image' in their name get the image response, everything else the text.
    """

    def __init__(self, text=None, image=None, text_error=None, image_error=None):
        self.text = json.dumps(post_payload(), ensure_ascii=False) if text is None else text
        self.image = tiny_png_bytes() if image is None else image
        self.text_error = text_error
        self.image_error = image_error
        self.calls = []
        self.aio = _FakeAio(self)

    def calls_for(self, needle: str):
        return [c for c in self.calls if needle in c["model"]]


@pytest.fixture(autouse=True)
def mock_genai(monkeypatch):
    """
    Auto-mock genai.Client everywhere so tests don't hit the network,
    even when a real GEMINI_API_KEY is present in the environment.
    """
    from postgen.lib import genai_client

    monkeypatch.setattr(genai_client.genai, "Client", lambda *a, **kw: FakeGenaiClient())
    yield


@pytest.fixture
def cfg():
    return make_config()


@pytest.fixture
def png_bytes():
    return tiny_png_bytes()
