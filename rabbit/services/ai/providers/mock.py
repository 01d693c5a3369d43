"""
Mock Provider

Template-based content that needs no credential and never fails. Used when
USE_MOCK_AI is set, when no provider is configured, and as the last resort
of the content and image fallback chains.

Pass a seeded random.Random for reproducible output.
"""

import asyncio
import random

import structlog

from rabbit.services.ai import prompts
from rabbit.services.ai.interface import ContentProvider
from rabbit.services.ai.schemas import (
    ChatRequest,
    ContentRequest,
    GenerationResult,
    PlatformContent,
)

logger = structlog.get_logger()

DEFAULT_TONE = "professional"

CONTENT_TEMPLATES: dict[str, dict[str, list[str]]] = {
    "instagram": {
        "professional": [
            "Sharing insights from today's work session. Sometimes the best solutions come from stepping back and looking at the bigger picture. What's your approach to problem-solving?",
            "Excited to announce our latest project milestone! Hard work and dedication always pay off. Grateful for the amazing team that makes it all possible.",
            "Monday motivation: Every expert was once a beginner. Keep pushing forward, embrace the learning process, and celebrate small wins along the way.",
        ],
        "casual": [
            "Just finished an amazing coffee and feeling ready to tackle the day! What's your go-to morning ritual?",
            "Weekend vibes: Sometimes the best ideas come when you're not actively looking for them. Nature walks are my secret weapon for creativity.",
            "That moment when everything just clicks... Anyone else love those 'aha!' moments?",
        ],
        "witty": [
            "My relationship with Monday: It's complicated. But hey, at least coffee exists! How do you make peace with the start of the week?",
            "Plot twist: I actually enjoy debugging code. There's something satisfying about solving puzzles, even when they're created by past me.",
            "Life hack: If you can't find the motivation, create the environment where motivation finds you. Works 60% of the time, every time.",
        ],
    },
    "x": {
        "professional": [
            "Key insight: The best leaders listen more than they speak. Active listening builds trust and uncovers opportunities others miss.",
            "Productivity tip: Time blocking isn't just about scheduling work. It's about protecting your energy for what matters most.",
            "Innovation happens at the intersection of curiosity and persistence. What's driving your curiosity today?",
        ],
        "casual": [
            "Current mood: Optimistically caffeinated and ready to make things happen",
            "Reminder: You don't have to be perfect, you just have to be consistent. Small daily actions compound into big results.",
            "Sometimes the universe aligns perfectly and you get a green light at every intersection. Today feels like one of those days.",
        ],
        "witty": [
            "My code works on my machine. My machine works in my house. Therefore, my house is the only place my code works. This is fine.",
            "Breaking: Local person discovers that taking breaks actually increases productivity. Scientists everywhere are shocked.",
            "I told my computer a joke about UDP, but it didn't get it. I told it a TCP joke, and it asked me to repeat it.",
        ],
    },
    "linkedin": {
        "professional": [
            "Leadership lesson: The most successful teams aren't necessarily the most talented. They're the most aligned. When everyone understands the vision and their role in achieving it, magic happens.",
            "Reflecting on career growth: The skills that got you here won't necessarily get you there. Continuous learning and adaptability are your best investments.",
            "Industry insight: Companies that prioritize employee development see 34% higher retention rates. Investing in people is essential business.",
        ],
        "casual": [
            "Grateful for mentors who saw potential in me before I saw it in myself. Their belief became the foundation of my confidence. Who's been that person for you?",
            "Weekend project turned into a learning opportunity. Sometimes the best education comes from rolling up your sleeves and figuring it out as you go.",
            "Celebrating small wins today. Progress isn't always linear, but every step forward counts. What small victory are you celebrating?",
        ],
        "witty": [
            "LinkedIn wisdom: Your network is your net worth. Also, your coffee consumption is directly proportional to your productivity. These are the facts.",
            "Career advice: Be yourself, unless you can be Batman. Then be Batman. (But seriously, authenticity is your superpower.)",
            "The secret to work-life balance: Realizing that some days work wins, some days life wins, and that's perfectly okay.",
        ],
    },
}

HASHTAG_SETS = {
    "professional": ["#productivity", "#leadership", "#growth", "#innovation", "#success", "#teamwork", "#strategy"],
    "casual": ["#motivation", "#inspiration", "#lifestyle", "#mindset", "#positivity", "#creativity", "#authentic"],
    "witty": ["#humor", "#relatable", "#truth", "#mondaymood", "#worklife", "#funny", "#real"],
}

PLATFORM_TAGS = {
    "instagram": ["#instagood", "#photooftheday", "#instadaily"],
    "x": ["#TwitterTips", "#ThoughtLeadership", "#Community"],
    "linkedin": ["#ProfessionalGrowth", "#CareerAdvice", "#NetworkingTips"],
    "facebook": ["#Community", "#Sharing", "#Connect"],
    "tiktok": ["#ForYou", "#Trending", "#Creative"],
    "youtube": ["#Content", "#Creator", "#Subscribe"],
}

IMAGE_PROMPTS = {
    "professional": [
        "A clean, modern office workspace with natural lighting, minimalist desk setup, and plants",
        "Professional team meeting in a bright conference room with people collaborating",
        "Inspirational mountain landscape during sunrise symbolizing growth and achievement",
    ],
    "casual": [
        "Cozy coffee shop scene with warm lighting and comfortable seating",
        "Person walking in nature on a peaceful trail surrounded by trees",
        "Beautiful sunset over a calm lake reflecting golden light",
    ],
    "witty": [
        "Funny office scene with cat sitting on laptop keyboard",
        "Creative workspace with colorful sticky notes and coffee mug",
        "Humorous representation of work-life balance with organized chaos",
    ],
}

# (trigger words, photo) in priority order
_UNSPLASH = "https://images.unsplash.com/{photo}?w=400&h=400&fit=crop&crop=center"
IMAGE_KEYWORDS = [
    (("dog", "puppy"), "photo-1552053831-71594a27632d"),
    (("animal", "welfare", "pet"), "photo-1601758228041-f3b2795255f1"),
    (("food", "cook", "recipe"), "photo-1565299624946-b28f40a0ca4b"),
    (("travel", "vacation", "explore"), "photo-1488646953014-85cb44e25828"),
    (("work", "office", "business"), "photo-1497032205916-ac775f0649ae"),
    (("fitness", "gym", "exercise"), "photo-1571019613454-1cb2f99b2d8b"),
    (("nature", "outdoor", "hike"), "photo-1441974231531-c6227db76b6e"),
    (("tech", "code", "computer"), "photo-1461749280684-dccba630e2f6"),
]
CHASE_IDEA_PHOTO = "photo-1507003211169-0a1dd7228f2d"
CHASE_PHOTO = "photo-1544717297-fa95b6ee9643"

CHAT_OPENERS = [
    (("help", "ideas"), "I'd love to help you brainstorm some content ideas! Based on your platforms, here are some suggestions that could work well:"),
    (("hashtag",), "Great question about hashtags! Here are some platform-specific hashtag strategies:"),
    (("schedule", "time"), "Timing is crucial for social media success! Here are some optimal posting suggestions:"),
]
DEFAULT_CHAT_OPENER = "That's an interesting point! Let me share some thoughts and content ideas that might help:"


class MockProvider(ContentProvider):
    """Deterministic-shape provider backed by template pools."""

    def __init__(self, rng: random.Random | None = None, delay_max: float = 0.0):
        self.rng = rng or random.Random()
        self.delay_max = delay_max

    @property
    def provider_name(self) -> str:
        return "mock"

    async def _simulate_latency(self) -> None:
        if self.delay_max > 0:
            await asyncio.sleep(self.rng.uniform(0, self.delay_max))

    def _templates(self, platform: str, tone: str) -> list[str]:
        by_tone = CONTENT_TEMPLATES.get(prompts.platform_key(platform), CONTENT_TEMPLATES["instagram"])
        return by_tone.get(tone, by_tone[DEFAULT_TONE])

    def _hashtags(self, tone: str, platform: str, count: int = 5) -> str:
        tags = [*HASHTAG_SETS.get(tone, HASHTAG_SETS[DEFAULT_TONE]), *PLATFORM_TAGS.get(prompts.platform_key(platform), [])]
        self.rng.shuffle(tags)
        return " ".join(tags[:count])

    def _platform_content(self, platform: str, tone: str, hashtag_count: int = 5) -> PlatformContent:
        return PlatformContent(
            platform=platform,
            content=self.rng.choice(self._templates(platform, tone)),
            hashtags=self._hashtags(tone, platform, hashtag_count),
            image_prompt=self.rng.choice(IMAGE_PROMPTS.get(tone, IMAGE_PROMPTS[DEFAULT_TONE])),
        )

    async def generate_multi_platform_content(self, request: ContentRequest) -> GenerationResult:
        await self._simulate_latency()
        tone = (request.tone or DEFAULT_TONE).lower()
        suggestions = [self._platform_content(p, tone) for p in request.platforms]
        logger.info("ai_generate_content_success", provider=self.provider_name, platforms=len(suggestions))
        return GenerationResult(
            message=f"Generated content for {len(suggestions)} platform(s)",
            suggested_content=suggestions,
        )

    async def generate_chat_response(self, request: ChatRequest) -> GenerationResult:
        await self._simulate_latency()
        query = request.topic.lower()
        message = DEFAULT_CHAT_OPENER
        for keywords, opener in CHAT_OPENERS:
            if any(k in query for k in keywords):
                message = opener
                break

        tone = (request.tone or DEFAULT_TONE).lower()
        suggestions = [self._platform_content(p, tone, hashtag_count=3) for p in request.platforms]
        logger.info("ai_chat_success", provider=self.provider_name, platforms=len(suggestions))
        return GenerationResult(message=message, suggested_content=suggestions)

    async def generate_image(self, prompt: str) -> str | None:
        """Keyword-matched stock photo, or a random placeholder."""
        await self._simulate_latency()
        lowered = prompt.lower()

        if any(k in lowered for k in ("chase", "chased", "chasing")):
            idea = any(k in lowered for k in ("idea", "innovation", "thought"))
            return _UNSPLASH.format(photo=CHASE_IDEA_PHOTO if idea else CHASE_PHOTO)

        for keywords, photo in IMAGE_KEYWORDS:
            if any(k in lowered for k in keywords):
                return _UNSPLASH.format(photo=photo)

        return f"https://picsum.photos/400/400?random={self.rng.randint(1, 100)}"

    async def health_check(self) -> bool:
        return True
