from typing import Optional, Sequence

from trendhaven.core.taxonomy import CATEGORIES, MAX_TAGS


def build_analysis_prompt() -> str:
    return (
        "Analyze this outfit photo as a professional fashion consultant. "
        "Rate the outfit on a scale of 1-10 and provide detailed feedback on:\n"
        "1. Overall style score (1-10)\n"
        "2. Color coordination (1-10)\n"
        "3. Trend alignment (1-10)\n"
        f"4. Category ({', '.join(CATEGORIES)})\n"
        f'5. Style tags (max {MAX_TAGS} tags like "minimalist", "bohemian", "edgy", etc.)\n'
        "6. Constructive feedback (2-3 sentences)\n\n"
        "Respond in JSON format:\n"
        "{\n"
        '  "overallRating": number,\n'
        '  "styleScore": number,\n'
        '  "colorCoordination": number,\n'
        '  "trendAlignment": number,\n'
        '  "category": string,\n'
        '  "tags": string[],\n'
        '  "feedback": string\n'
        "}"
    )


def _describe_outfit(index: int, outfit) -> str:
    tags = ", ".join(outfit.tags)
    return f"{index}. Category: {outfit.category}, Rating: {outfit.rating}/10, Tags: {tags}"


def build_ranking_prompt(
    outfits: Sequence,
    *,
    mood: Optional[str],
    occasion: Optional[str],
    weather: Optional[str],
    limit: int,
) -> str:
    listing = "\n".join(_describe_outfit(i, o) for i, o in enumerate(outfits, start=1))
    return (
        f"Based on the following context, recommend the best {limit} outfits from the user's wardrobe:\n\n"
        "Context:\n"
        f"- Mood: {mood or 'any'}\n"
        f"- Occasion: {occasion or 'any'}\n"
        f"- Weather: {weather or 'any'}\n\n"
        "Available outfits:\n"
        f"{listing}\n\n"
        f"Respond with just the outfit numbers (1-{len(outfits)}) in order of recommendation, "
        "separated by commas."
    )
