"""Realm catalog: the six realms in unlock order and their lesson scripts."""
from dataclasses import dataclass
from types import MappingProxyType

LESSON_TYPES = ("education", "exercise", "reflection")


@dataclass(frozen=True)
class Lesson:
    id: str
    title: str
    content: str
    type: str  # education | exercise | reflection
    duration: int  # seconds


@dataclass(frozen=True)
class Realm:
    id: str
    name: str
    description: str
    ordinal: int  # 1-based; defines unlock order
    lessons: tuple[Lesson, ...]


REALMS: tuple[Realm, ...] = (
    Realm(
        id="fear",
        name="Fear",
        description="Face your deepest fears and transform them into strength.",
        ordinal=1,
        lessons=(
            Lesson(
                "fear-1",
                "Understanding Fear",
                "Fear is a natural emotion designed to protect us. However, when fear becomes overwhelming, "
                "it can limit our growth and potential. Let's explore the nature of fear and learn to transform "
                "it into courage.",
                "education",
                300,
            ),
            Lesson(
                "fear-2",
                "Breathing Exercise",
                "Take a deep breath in for 4 counts, hold for 4 counts, and exhale for 6 counts. This technique "
                "activates your parasympathetic nervous system, naturally reducing fear and anxiety.",
                "exercise",
                180,
            ),
            Lesson(
                "fear-3",
                "Facing Your Fears",
                "What is one fear that has been holding you back? Write it down and imagine yourself moving "
                "through it with confidence and strength.",
                "reflection",
                240,
            ),
        ),
    ),
    Realm(
        id="doubt",
        name="Doubt",
        description="Question your limiting beliefs and discover your truth.",
        ordinal=2,
        lessons=(
            Lesson(
                "doubt-1",
                "The Nature of Self-Doubt",
                "Self-doubt often stems from past experiences and limiting beliefs. Recognizing these patterns "
                "is the first step toward building unshakeable confidence.",
                "education",
                280,
            ),
            Lesson(
                "doubt-2",
                "Affirmation Practice",
                'Repeat after each statement: "I am capable", "I trust my decisions", "I believe in my '
                'abilities". Feel the truth of these words resonate within you.',
                "exercise",
                200,
            ),
            Lesson(
                "doubt-3",
                "Evidence of Your Strength",
                "List three achievements you're proud of, no matter how small. These are proof of your "
                "capabilities and inner strength.",
                "reflection",
                300,
            ),
        ),
    ),
    Realm(
        id="anxiety",
        name="Anxiety",
        description="Calm the storms within and find your center.",
        ordinal=3,
        lessons=(
            Lesson(
                "anxiety-1",
                "Understanding Anxiety",
                "Anxiety is your mind's way of preparing for potential threats. While this can be helpful, "
                "excessive anxiety can overwhelm us. Learning to calm your nervous system is key.",
                "education",
                320,
            ),
            Lesson(
                "anxiety-2",
                "Grounding Technique",
                "Notice 5 things you can see, 4 things you can touch, 3 things you can hear, 2 things you can "
                "smell, and 1 thing you can taste. This brings you back to the present moment.",
                "exercise",
                240,
            ),
            Lesson(
                "anxiety-3",
                "Creating Your Safe Space",
                "Imagine a place where you feel completely safe and calm. Describe this space in detail and "
                "remember you can return here in your mind whenever you need peace.",
                "reflection",
                260,
            ),
        ),
    ),
    Realm(
        id="self-worth",
        name="Self-Worth",
        description="Discover your inherent value and embrace self-love.",
        ordinal=4,
        lessons=(
            Lesson(
                "worth-1",
                "Your Inherent Value",
                "Your worth is not determined by achievements, others' opinions, or external validation. "
                "You are valuable simply because you exist.",
                "education",
                290,
            ),
            Lesson(
                "worth-2",
                "Self-Compassion Practice",
                "Place your hand on your heart and speak to yourself as you would to a beloved friend. "
                "Offer yourself the same kindness and understanding.",
                "exercise",
                220,
            ),
            Lesson(
                "worth-3",
                "Celebrating Yourself",
                "Write about a quality you possess that makes you unique and valuable. How has this quality "
                "helped you or others?",
                "reflection",
                280,
            ),
        ),
    ),
    Realm(
        id="forgiveness",
        name="Forgiveness",
        description="Release the past and step into healing light.",
        ordinal=5,
        lessons=(
            Lesson(
                "forgiveness-1",
                "The Power of Forgiveness",
                "Forgiveness is not about excusing harmful behavior, but about freeing yourself from the "
                "burden of resentment. It's a gift you give yourself.",
                "education",
                310,
            ),
            Lesson(
                "forgiveness-2",
                "Loving-Kindness Meditation",
                "Send thoughts of loving-kindness first to yourself, then to loved ones, neutral people, "
                "difficult people, and finally to all beings everywhere.",
                "exercise",
                300,
            ),
            Lesson(
                "forgiveness-3",
                "Letter of Release",
                "Write a letter to someone you need to forgive (including yourself). You don't need to send "
                "it - this is for your healing.",
                "reflection",
                360,
            ),
        ),
    ),
    Realm(
        id="wisdom",
        name="Wisdom",
        description="Integrate your journey and become your wisest self.",
        ordinal=6,
        lessons=(
            Lesson(
                "wisdom-1",
                "Integration and Wisdom",
                "True wisdom comes from integrating all aspects of your experience - light and shadow, joy "
                "and pain. You are becoming whole.",
                "education",
                340,
            ),
            Lesson(
                "wisdom-2",
                "Mindfulness Practice",
                "Sit quietly and observe your thoughts without judgment. Notice how they arise and pass away "
                "like clouds in the sky of your awareness.",
                "exercise",
                360,
            ),
            Lesson(
                "wisdom-3",
                "Your Wisdom Journey",
                "Reflect on how you've grown through your journey in Inner Flame. What wisdom would you share "
                "with someone just beginning their path?",
                "reflection",
                400,
            ),
        ),
    ),
)

REALM_ORDER: tuple[str, ...] = tuple(r.id for r in REALMS)
FIRST_REALM = REALM_ORDER[0]

_BY_ID = MappingProxyType({r.id: r for r in REALMS})


def is_known_realm(realm_id: str | None) -> bool:
    return realm_id in _BY_ID


def get_realm(realm_id: str) -> Realm | None:
    """Return catalog entry or None."""
    return _BY_ID.get(realm_id)


def successor_of(realm_id: str) -> str | None:
    """Return the realm unlocked by completing realm_id, or None for the last realm."""
    realm = _BY_ID.get(realm_id)
    if realm is None or realm.ordinal >= len(REALMS):
        return None
    return REALMS[realm.ordinal].id


def starts_unlocked(realm_id: str) -> bool:
    return realm_id == FIRST_REALM
