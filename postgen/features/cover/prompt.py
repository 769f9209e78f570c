# postgen/features/cover/prompt.py
# Visual vocabulary per post style; also feeds the fallback image URL.
STYLE_VISUAL_KEYWORDS = {
    "emotional": "warm golden-hour light, soft focus, film grain, quiet intimate mood",
    "educational": "clean flat-lay, neat desk, bright even light, minimal composition",
    "promotion": "vibrant product shot, glossy highlights, pastel backdrop, lifestyle styling",
    "rant": "high contrast, moody shadows, urban street, candid snapshot feel",
}
DEFAULT_VISUAL_KEYWORDS = "aesthetic, high resolution, soft lighting"


def visual_keywords(style: str) -> str:
    return STYLE_VISUAL_KEYWORDS.get(style, DEFAULT_VISUAL_KEYWORDS)


def build_cover_prompt(*, topic: str, style: str, image_prompt: str | None, has_reference: bool) -> str:
    subject = image_prompt or f"A scene that captures: {topic}"
    ref_line = (
        "Use the attached reference image as the visual anchor: keep its subject, palette and composition "
        "recognisable while restyling it for the cover.\n"
        if has_reference else ""
    )
    return (
        "Create a vertical 3:4 cover image for a lifestyle social-media post.\n"
        f"{ref_line}"
        f"Subject: {subject}\n"
        f"Look: {visual_keywords(style)}, Instagram aesthetic, high resolution.\n"
        "CRITICAL: no text, letters, captions, logos or watermarks anywhere in the image."
    )


def build_fallback_prompt(*, topic: str, style: str, image_prompt: str | None) -> str:
    return f"{image_prompt or topic}, {visual_keywords(style)}, {DEFAULT_VISUAL_KEYWORDS}"
