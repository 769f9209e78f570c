# tests/test_topics_service.py
import json

import pytest

from postgen.features.topics.service import suggest_topics
from conftest import FakeGenaiClient, make_config


@pytest.mark.asyncio
async def test_suggest_topics_returns_at_most_five(cfg):
    titles = ["露营装备清单", '"新手露营"', "露营避坑", "", "周末露营", "露营美食", "第七个"]
    fake = FakeGenaiClient(text=json.dumps(titles, ensure_ascii=False))
    topics = await suggest_topics("露营", fake, cfg=cfg)
    assert topics == ["露营装备清单", "新手露营", "露营避坑", "周末露营", "露营美食"]
    assert fake.calls[0]["config"]["response_schema"] == {"type": "ARRAY", "items": {"type": "STRING"}}


@pytest.mark.asyncio
async def test_suggest_topics_repairs_truncated_array(cfg):
    fake = FakeGenaiClient(text='["露营装备清单", "新手露')
    assert await suggest_topics("露营", fake, cfg=cfg) == ["露营装备清单", "新手露"]


@pytest.mark.asyncio
@pytest.mark.parametrize("fake", [
    FakeGenaiClient(text_error=RuntimeError("429 RESOURCE_EXHAUSTED")),
    FakeGenaiClient(text="no json here"),
    FakeGenaiClient(text='{"titles": ["a"]}'),
])
async def test_suggest_topics_never_raises(cfg, fake):
    assert await suggest_topics("露营", fake, cfg=cfg) == []


@pytest.mark.asyncio
async def test_blank_topic_makes_no_call(cfg):
    fake = FakeGenaiClient()
    assert await suggest_topics("   ", fake, cfg=cfg) == []
    assert fake.calls == []


@pytest.mark.asyncio
async def test_missing_key_yields_no_suggestions():
    assert await suggest_topics("露营", cfg=make_config(gemini_api_key="")) == []
