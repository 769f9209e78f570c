# postgen/features/topics/prompt.py
def build_related_topics_prompt(*, topic: str, count: int) -> str:
    return (
        f"Suggest {count} viral Xiaohongshu (RED) post titles for the topic \"{topic}\". "
        "Each title at most 20 characters, in the same language as the topic. "
        f"Return a JSON array of exactly {count} strings and nothing else."
    )


def related_topics_schema() -> dict:
    return {"type": "ARRAY", "items": {"type": "STRING"}}
