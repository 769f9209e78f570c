# postgen/features/post_text/prompt.py
STYLE_DESCRIPTIONS = {
    "emotional": "heartfelt and sentimental, written to make readers feel understood",
    "educational": "practical know-how, clearly structured, worth bookmarking",
    "promotion": "excited product recommendation, a must-buy tone",
    "rant": "honest and sharp, a warning guide that helps readers avoid pitfalls",
}

LENGTH_INSTRUCTIONS = {
    "short": (
        "Keep the body under 200 characters. "
        "One hook line, two or three short lines of substance, one closing line."
    ),
    "medium": (
        "Aim for about 400 characters. "
        "Open with a hook, then 3-4 short paragraphs, each led by an emoji, then a call to comment."
    ),
    "long": (
        "Write 800 characters or more. "
        "Use a hook, a numbered or emoji-bulleted list of 5+ points with a short explanation each, "
        "a personal takeaway paragraph, and a closing question for the comments."
    ),
}


def build_post_prompt(*, topic: str, style: str, length: str, template_mode: bool) -> str:
    summary_rule = (
        "5. Fill cover_summary for a text-only memo-style cover: main_title (a short headline), "
        "highlight_text (one punchy phrase), body_preview (2-3 sentences teasing the post). "
        "Values only, never repeat the key names inside the values.\n"
        if template_mode else
        "5. Set cover_summary to null.\n"
    )
    return (
        "You are a top Xiaohongshu (RED) creator. Write one post from the brief below.\n\n"
        f"Topic: {topic}\n"
        f"Style: {style} ({STYLE_DESCRIPTIONS.get(style, style)})\n"
        f"Length: {length}. {LENGTH_INSTRUCTIONS.get(length, LENGTH_INSTRUCTIONS['medium'])}\n\n"
        "Rules:\n"
        "1. title: suspenseful or emotional, at most 20 characters.\n"
        "2. content: clear logic, short paragraphs, plenty of emoji.\n"
        "3. tags: 5-8 topic tags without the leading '#'.\n"
        "4. image_prompt: an English description of a high-quality, Instagram-style background image "
        "matching the post. No text in the image.\n"
        f"{summary_rule}"
        "Write title, content, tags and cover_summary in the same language as the topic.\n"
        "Return only the JSON object."
    )


def post_response_schema() -> dict:
    string = {"type": "STRING"}
    return {
        "type": "OBJECT",
        "properties": {
            "title": string,
            "content": string,
            "tags": {"type": "ARRAY", "items": string},
            "image_prompt": string,
            "cover_summary": {
                "type": "OBJECT",
                "nullable": True,
                "properties": {
                    "main_title": string,
                    "highlight_text": string,
                    "body_preview": string,
                },
            },
        },
        "required": ["title", "content", "tags", "image_prompt"],
    }
