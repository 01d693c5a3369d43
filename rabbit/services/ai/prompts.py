"""
Prompt construction and reply post-processing for social media content.

Shared by every text provider: platform guidelines, tone/format/niche
instructions, the "Content: / Hashtags:" reply contract, hashtag cleanup
and theme-based image prompts.
"""

import random
import re

from rabbit.services.ai.schemas import ChatRequest, ContentRequest, GenerationResult, PlatformContent

# X/Twitter posts are trimmed to this many characters
X_CHAR_LIMIT = 240
MAX_HASHTAGS = 5
MAX_HASHTAG_LEN = 25

DEFAULT_HASHTAGS = "#social #content #creator"

PLATFORM_GUIDELINES = {
    "linkedin": """LinkedIn content guidelines:
- Professional and business-focused
- Length: 1-3 paragraphs (up to 1,300 characters)
- Avoid excessive hashtags (3-5 max)
- Include a call to action
- Share industry insights or career advice""",
    "x": """X (Twitter) content guidelines:
- Keep under 240 characters
- Concise and engaging
- Include 1-2 hashtags maximum
- Ask thought-provoking questions
- Use short, impactful sentences""",
    "instagram": """Instagram content guidelines:
- Engaging first 1-2 sentences before line break
- Include relevant emojis
- Tell a visual story that resonates with the audience
- Include 5-10 relevant hashtags""",
    "discord": """Discord content guidelines:
- Conversational and community-focused
- Markdown formatting and emojis are welcome
- Pose questions to spark discussion""",
    "tiktok": """TikTok content guidelines:
- Extremely concise script format
- Eye-catching opener (first 3 seconds are crucial)
- Structure as hook, value, call-to-action
- Keep it under 30 seconds when read aloud""",
    "youtube": """YouTube content guidelines:
- Long-form storytelling with a full narrative arc
- Introspective, detailed personal insights
- Close with a question for the comments""",
    "facebook": """Facebook content guidelines:
- Community discussion and authentic sharing
- Relatable stories that inspire conversation
- End with a conversation-starting question""",
}

# Completion budget per platform
PLATFORM_MAX_TOKENS = {
    "linkedin": 300,
    "instagram": 250,
    "x": 180,
    "tiktok": 120,
    "youtube": 400,
    "facebook": 300,
}
DEFAULT_MAX_TOKENS = 280

PLATFORM_CTAS = {
    "instagram": [
        "What inspires you most in moments like these?",
        "How do you find meaning in everyday experiences?",
    ],
    "linkedin": [
        "How do you approach similar challenges in your work?",
        "What strategies have worked best for you?",
    ],
    "facebook": [
        "What are your thoughts on this?",
        "Share your experience in the comments!",
    ],
    "tiktok": ["Drop your thoughts below!", "Who else relates to this?"],
    "x": ["What are your thoughts?", "Share your perspective!"],
    "youtube": ["What's your take on this story?", "Let me know your thoughts in the comments!"],
}

TONE_INSTRUCTIONS = {
    "professional": "Write with polished expertise and industry authority. Use precise, confident language.",
    "casual": "Write like you are sharing a genuine moment with a close friend. Use warm, personal language.",
    "humorous": "Create genuine laughter through unexpected observations and clever wordplay.",
    "witty": "Be sharp and playful; favour clever twists over generic jokes.",
    "genz": "Write with authentic youth energy and natural, current slang.",
    "inspirational": "Share transformative moments with powerful sensory detail.",
    "educational": "Reveal knowledge through vivid examples, like a trusted mentor.",
    "storytelling": "Craft an immersive narrative with rich sensory detail.",
    "bold": "Command attention with fearless conviction and striking imagery.",
    "authentic": "Share raw, honest moments with vulnerable detail.",
    "persuasive": "Build a compelling case through vivid examples and emotional proof.",
    "tactical": "Give concrete, actionable steps the reader can apply today.",
}

FORMAT_INSTRUCTIONS = {
    "paragraph": "Write in flowing, natural paragraph format with seamless transitions",
    "poetic": "Create rhythmic, artistic prose with meaningful line breaks",
    "bullet": "Structure content with clear bullet points while maintaining natural flow",
    "concise": "Craft brief, punchy content with maximum impact in minimal words",
    "story": "Develop a complete narrative arc with beginning, middle and conclusion",
}

NICHE_CONTEXT = {
    "general": "broad audience appeal",
    "writer": "literary community with appreciation for craft and storytelling",
    "tech": "technology enthusiasts who value innovation and technical insights",
    "food": "culinary community passionate about flavors, recipes and food culture",
    "travel": "adventure seekers and culture enthusiasts",
    "fitness": "health-conscious individuals focused on wellness",
    "lifestyle": "individuals interested in personal development and modern living",
    "business": "professionals and entrepreneurs focused on growth",
    "creative": "artists, designers and creative professionals",
}

STRUCTURE_INSTRUCTIONS = {
    "short-sentences": "Break content into 1-2 short, readable sentences per paragraph.",
    "flowing-paragraphs": "Create flowing narrative paragraphs with smooth transitions between ideas.",
    "bullet-points": "Structure content with clear bullet points while maintaining natural flow.",
}

CONTENT_STYLE_INSTRUCTIONS = {
    "story": "Build a clear narrative arc: problem, emotional impact, call to action.",
    "data-driven": "Focus on facts, statistics and logical arguments with supporting evidence.",
    "call-to-action": "Emphasize actionable steps and direct engagement with strong CTAs.",
}

EMOTIONAL_TONE_INSTRUCTIONS = {
    "emotional": "Include emotional hooks, feelings and personal connection.",
    "factual": "Focus on objective information and logical reasoning without emotional language.",
}

WORD_TARGETS = {"short": 50, "medium": 100, "long": 200}

TONE_HASHTAGS = {
    "professional": ["#BusinessInsights", "#Leadership"],
    "casual": ["#LifeStyle", "#RealTalk"],
    "humorous": ["#Funny", "#Relatable"],
    "witty": ["#Humor", "#Relatable"],
    "inspirational": ["#Motivation", "#Inspiration"],
    "educational": ["#Learning", "#Knowledge"],
    "bold": ["#Bold", "#Fearless"],
    "authentic": ["#Authentic", "#Honest"],
}

NICHE_HASHTAGS = {
    "travel": ["#TravelVibes", "#Journey"],
    "food": ["#FoodCulture", "#Culinary"],
    "tech": ["#TechLife", "#Innovation"],
    "fitness": ["#FitnessJourney", "#Wellness"],
    "lifestyle": ["#PersonalGrowth", "#Mindfulness"],
    "business": ["#BusinessGrowth", "#Entrepreneurship"],
    "creative": ["#CreativeProcess", "#Design"],
    "writer": ["#WritingLife", "#Storytelling"],
}

PLATFORM_HASHTAGS = {
    "instagram": ["#InstaDaily", "#PhotoOfTheDay"],
    "linkedin": ["#ProfessionalGrowth", "#CareerAdvice"],
    "x": ["#ThoughtLeadership", "#Community"],
    "tiktok": ["#ForYou", "#Trending"],
    "youtube": ["#Creator", "#Subscribe"],
    "facebook": ["#Community", "#Connect"],
}

# (keywords, image theme, photographic style)
IMAGE_THEMES = [
    (("ocean", "sea", "water"), "ocean conservation scene with marine life", "environmental documentary style"),
    (("shopping", "retail", "store"), "modern retail shopping experience", "lifestyle photography"),
    (("creative", "art", "design"), "creative workspace with artistic elements", "artistic and inspiring"),
    (("business", "work", "professional"), "professional business environment", "clean corporate photography"),
    (("nature", "outdoor", "landscape"), "natural landscape scene", "nature photography"),
    (("food", "cooking", "restaurant"), "culinary scene with food presentation", "food photography"),
    (("travel", "journey", "adventure"), "travel and adventure scene", "travel photography"),
    (("technology", "tech", "digital"), "modern technology setup", "tech photography"),
    (("fitness", "health", "workout"), "fitness and wellness scene", "health and fitness photography"),
    (("emotion", "feel", "heart"), "emotionally engaging human moment", "authentic lifestyle photography"),
]

IMAGE_FRAMING = {
    "instagram": "Create a visually striking {theme} in {style} optimized for Instagram square format with warm, engaging lighting",
    "linkedin": "Professional {theme} in {style} suitable for LinkedIn with business-appropriate composition",
    "x": "Attention-grabbing {theme} in {style} optimized for X with bold, shareable visual elements",
    "tiktok": "Dynamic, vertical {theme} in {style} perfect for TikTok with vibrant colors",
    "youtube": "Cinematic {theme} in {style} suitable for a YouTube thumbnail",
    "facebook": "Community-friendly {theme} in {style} optimized for Facebook with a relatable feel",
}

_CONTENT_RE = re.compile(r"Content:\s*(.*?)(?=\n\s*Hashtags:|$)", re.DOTALL | re.IGNORECASE)
_HASHTAGS_RE = re.compile(r"Hashtags:\s*(.*)$", re.DOTALL | re.IGNORECASE)


def platform_key(platform: str) -> str:
    """Normalize platform names ("Twitter" and "X" are the same network)."""
    key = platform.strip().lower()
    return "x" if key == "twitter" else key


def platform_guidelines(platform: str) -> str:
    key = platform_key(platform)
    return PLATFORM_GUIDELINES.get(
        key,
        f"""{platform} content guidelines:
- Create engaging content appropriate for the platform
- Include hashtags if relevant
- Adjust tone to match platform expectations""",
    )


def _lookup(table: dict[str, str], value: str | None, default: str) -> str:
    if value is None:
        return table[default]
    return table.get(str(value).lower(), table[default])


def _enum_value(value: object, default: str) -> str:
    if value is None:
        return default
    return getattr(value, "value", str(value))


def word_target(request: ContentRequest) -> int:
    return WORD_TARGETS.get(_enum_value(request.length, "medium"), 100)


def emoji_instruction(request: ContentRequest) -> str:
    if not request.include_emojis:
        return "Do not use any emojis"
    return f"Use at most 2 emojis from the {request.emoji_pack or 'mixed'} theme, only if they enhance the message"


def build_system_prompt(request: ContentRequest) -> str:
    """System prompt for the conversational part of a chat turn."""
    tone = request.tone or "Casual"
    return f"""You are a masterful social media storyteller who creates vivid, authentic content with a distinct {tone.lower()} voice.

TONE: {_lookup(TONE_INSTRUCTIONS, request.tone, "casual")}
FORMAT: {_lookup(FORMAT_INSTRUCTIONS, request.format, "paragraph")}
NICHE: Create content that resonates with {_lookup(NICHE_CONTEXT, request.niche, "general")}
LENGTH: about {word_target(request)} words

RULES:
- Use original, specific language; avoid buzzwords like "Let's dive in"
- {emoji_instruction(request)}
- Show real moments and feelings rather than generic advice
- End with a satisfying reflection, insight or invitation

Your mission: transform "{request.subject}" into compelling {tone.lower()} content."""


def build_platform_prompt(request: ContentRequest, platform: str) -> tuple[str, str, int]:
    """Return (system prompt, user prompt, max tokens) for one platform."""
    key = platform_key(platform)
    words = word_target(request)
    structure = _lookup(STRUCTURE_INSTRUCTIONS, _enum_value(request.structure_preference, "short-sentences"), "short-sentences")
    style = _lookup(CONTENT_STYLE_INSTRUCTIONS, _enum_value(request.content_style, "story"), "story")
    emotion = _lookup(EMOTIONAL_TONE_INSTRUCTIONS, _enum_value(request.emotional_tone, "emotional"), "emotional")
    ctas = PLATFORM_CTAS.get(key)

    system = f"""You are an expert social media content creator writing for {platform}.
TONE: {_lookup(TONE_INSTRUCTIONS, request.tone, "casual")}
{structure} {style} {emotion}
- {emoji_instruction(request)}
- Never use numbered lists
- Target {words} words"""

    lines = [
        f'Create a {platform} post about "{request.subject}".',
        "",
        platform_guidelines(platform),
    ]
    if request.audience:
        lines.append(f"Target audience: {request.audience}")
    if request.content_type:
        lines.append(f"Content type: {request.content_type}")
    if request.custom_keywords:
        lines.append(f"Keywords/ideas: {request.custom_keywords}")
    if request.niche:
        lines.append(f"Niche: {_lookup(NICHE_CONTEXT, request.niche, 'general')}")
    if ctas:
        lines.append(f"End with one of these calls to action: {' OR '.join(ctas)}")
    if key == "x":
        lines.append(f"CRITICAL: the whole post must be under {X_CHAR_LIMIT} characters.")
    lines += [
        "",
        "Format your response as:",
        "Content: [the post]",
        "Hashtags: [3-5 hashtags separated by spaces]",
    ]
    return system, "\n".join(lines), PLATFORM_MAX_TOKENS.get(key, DEFAULT_MAX_TOKENS)


def parse_reply(text: str) -> tuple[str, str]:
    """Split a "Content: ... Hashtags: ..." reply into its two parts."""
    text = (text or "").strip()
    content_match = _CONTENT_RE.search(text)
    hashtag_match = _HASHTAGS_RE.search(text)
    content = content_match.group(1).strip() if content_match else text
    hashtags = hashtag_match.group(1).strip() if hashtag_match else ""
    return content, hashtags


def format_hashtags(raw: str) -> str:
    """Normalize a whitespace-separated hashtag string.

    Strips stray characters, shortens very long tags at a CamelCase
    boundary, prefixes tags starting with a digit, and keeps at most five.
    """
    formatted = []
    for tag in raw.split():
        clean = tag.lstrip("#")
        if len(clean) > MAX_HASHTAG_LEN:
            words = re.findall(r"[A-Z][^A-Z]*", clean)
            clean = "".join(words[:2]) if len(words) > 1 else clean[:MAX_HASHTAG_LEN]
        clean = re.sub(r"[^a-zA-Z0-9]", "", clean)
        if clean and clean[0].isdigit():
            clean = "tag" + clean
        if clean and len(clean) < 30 and f"#{clean}" not in formatted:
            formatted.append(f"#{clean}")
    return " ".join(formatted[:MAX_HASHTAGS])


def suggest_hashtags(
    content: str,
    platform: str,
    tone: str | None,
    niche: str | None,
    rng: random.Random | None = None,
) -> str:
    """Build hashtags from platform, tone, niche and content keywords."""
    rng = rng or random.Random()
    key = platform_key(platform)
    platform_tags = list(PLATFORM_HASHTAGS.get(key, ["#Content"]))
    rng.shuffle(platform_tags)

    lowered = content.lower()
    content_tags = [
        f"#{word.capitalize()}"
        for word in ("travel", "food", "tech", "fitness", "business", "design", "nature")
        if word in lowered
    ]

    candidates = [
        *platform_tags[:2],
        *TONE_HASHTAGS.get((tone or "").lower(), ["#Content"])[:1],
        *NICHE_HASHTAGS.get((niche or "").lower(), [])[:1],
        *content_tags[:2],
    ]
    unique = list(dict.fromkeys(candidates))
    return " ".join(unique[:MAX_HASHTAGS])


def image_prompt_for(content: str, platform: str) -> str:
    """Describe an image matching the content's dominant theme."""
    lowered = content.lower()
    theme, style = "modern lifestyle scene", "contemporary social media photography"
    for keywords, candidate_theme, candidate_style in IMAGE_THEMES:
        if any(k in lowered for k in keywords):
            theme, style = candidate_theme, candidate_style
            break
    template = IMAGE_FRAMING.get(
        platform_key(platform),
        "Engaging {theme} in {style} with social media optimized composition and lighting",
    )
    return template.format(theme=theme, style=style)


def enforce_platform_limits(content: str, platform: str) -> str:
    if platform_key(platform) == "x" and len(content) > X_CHAR_LIMIT:
        return content[: X_CHAR_LIMIT - 3] + "..."
    return content


def finalize_platform_content(
    request: ContentRequest,
    platform: str,
    reply: str,
    rng: random.Random | None = None,
) -> PlatformContent:
    """Turn a raw model reply into a PlatformContent entry."""
    content, hashtags = parse_reply(reply)
    if len(hashtags) < 5:
        hashtags = suggest_hashtags(content, platform, request.tone, request.niche, rng)
    else:
        hashtags = format_hashtags(hashtags)
    content = enforce_platform_limits(content, platform)
    return PlatformContent(
        platform=platform,
        content=content or f"Unable to generate content for {platform}",
        hashtags=hashtags or DEFAULT_HASHTAGS,
        image_prompt=image_prompt_for(content, platform),
    )


def platform_hashtag(platform: str) -> str:
    """Single hashtag naming the platform ("Google Business" -> "#googlebusiness")."""
    tag = re.sub(r"[^a-z0-9]", "", platform_key(platform))
    return f"#{tag}" if tag else "#social"


def fallback_platform_content(platform: str) -> PlatformContent:
    """Deterministic placeholder used when one platform's generation fails."""
    return PlatformContent(
        platform=platform,
        content=f"Unable to generate {platform} content due to AI service unavailability. Please try again.",
        hashtags=platform_hashtag(platform),
    )


def degraded_result(request: ContentRequest, error_message: str) -> GenerationResult:
    """Clearly-labelled answer returned when no provider could serve a request."""
    return GenerationResult(
        message=(
            "I'm experiencing technical difficulties connecting to AI services. "
            f"The error was: {error_message}. Please try again in a moment."
        ),
        suggested_content=[fallback_platform_content(p) for p in request.platforms],
    )


def chat_history(request: ChatRequest, system_prompt: str) -> list[dict[str, str]]:
    """OpenAI-style message list: system prompt, history, then the new query."""
    messages = [{"role": "system", "content": system_prompt}]
    messages += [{"role": m.role, "content": m.content} for m in request.messages]
    messages.append({"role": "user", "content": request.topic.strip()})
    return messages
