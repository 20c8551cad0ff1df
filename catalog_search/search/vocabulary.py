"""
Search Vocabulary
Static bilingual reference tables used by query analysis.

- Color names (Hebrew -> English slugs, English color words)
- Size-indicator stop-words
- Irregular Hebrew inflections for product types and colors
"""

from typing import Dict, FrozenSet, Optional, Tuple

# Hebrew color name -> English color slugs.
# Gray has two common spellings in stored slugs.
HEBREW_TO_ENGLISH_COLORS: Dict[str, Tuple[str, ...]] = {
    "שחור": ("black",),
    "לבן": ("white",),
    "אדום": ("red",),
    "כחול": ("blue",),
    "ירוק": ("green",),
    "צהוב": ("yellow",),
    "חום": ("brown",),
    "אפור": ("gray", "grey"),
    "ורוד": ("pink",),
    "סגול": ("purple",),
    "כתום": ("orange",),
    "זהב": ("gold",),
    "כסף": ("silver",),
    "תכלת": ("light-blue",),
    "בורדו": ("bordeaux",),
    "זית": ("olive",),
    "שקוף": ("transparent",),
    "כאמל": ("camel",),
    "קרמל": ("caramel",),
    "ארד": ("bronze",),
    "מולטיקולור": ("multicolor",),
    "בז": ("beige",),
    "חום בהיר": ("light-brown",),
    "חום כהה": ("dark-brown",),
    "כחול כהה": ("navy", "dark-blue"),
    "ורוד בהיר": ("light-pink",),
}

ENGLISH_COLORS: FrozenSet[str] = frozenset({
    "black", "white", "red", "blue", "green", "yellow", "brown",
    "gray", "grey", "pink", "purple", "orange",
    "beige", "gold", "silver", "navy", "bordeaux", "olive", "camel",
    "caramel", "bronze", "transparent", "multicolor",
    "light-blue", "light-brown", "dark-brown", "dark-blue", "light-pink",
})

# Words that only announce a size ("size 37", "מידה 37")
SIZE_STOP_WORDS: FrozenSet[str] = frozenset({"size", "sizes", "מידה", "מידות"})

# Irregular / known inflections of color adjectives, keyed by base form
HEBREW_COLOR_INFLECTIONS: Dict[str, Tuple[str, ...]] = {
    "אדום": ("אדומים", "אדומה", "אדומות"),
    "שחור": ("שחורים", "שחורה", "שחורות"),
    "לבן": ("לבנים", "לבנה", "לבנות"),
    "כחול": ("כחולים", "כחולה", "כחולות"),
    "ירוק": ("ירוקים", "ירוקה", "ירוקות"),
    "צהוב": ("צהובים", "צהובה", "צהובות"),
    "חום": ("חומים", "חומה", "חומות"),
    "אפור": ("אפורים", "אפורה", "אפורות"),
    "ורוד": ("ורודים", "ורודה", "ורודות"),
    "סגול": ("סגולים", "סגולה", "סגולות"),
    "כתום": ("כתומים", "כתומה", "כתומות"),
    "שקוף": ("שקופים", "שקופה", "שקופות"),
    "בז": ("בזים", "בזה", "בזות"),
    "חום בהיר": ("חומים בהירים", "חומה בהירה", "חומות בהירות"),
    "חום כהה": ("חומים כהים", "חומה כהה", "חומות כהות"),
    "כחול כהה": ("כחולים כהים", "כחולה כהה", "כחולות כהות"),
    "ורוד בהיר": ("ורודים בהירים", "ורודה בהירה", "ורודות בהירות"),
    "שחור ולבן": ("שחורים ולבנים", "שחורה ולבנה", "שחורות ולבנות"),
    "שחור ואדום": ("שחורים ואדומים", "שחורה ואדומה", "שחורות ואדומות"),
}

# Irregular plural/singular forms of product types.
# Each group lists every form that should match the others.
HEBREW_PRODUCT_TYPE_GROUPS: Tuple[Tuple[str, ...], ...] = (
    ("כפכף", "כפכפים"),
    ("נעל", "נעלה", "נעליים", "נעלי"),
    ("נעלי סירה", "נעל סירה", "נעלי סירות"),
    ("מגף", "מגפיים", "מגפה"),
    ("מגפון", "מגפונים", "מגפונה"),
    ("סניקר", "סניקרס", "סניקרים"),
    ("סנדל", "סנדלים", "סנדלה"),
    ("מוקסין", "מוקסינים"),
    ("בלרינה", "בלרינות"),
    ("סירה שטוחה", "סירות שטוחות"),
    ("אוקספורד", "אוקספורדים"),
    ("תיק", "תיקים"),
    ("מעיל", "מעילים"),
)


def _build_inflection_index() -> Dict[str, FrozenSet[str]]:
    index: Dict[str, set] = {}

    def link(forms):
        group = set(forms)
        for form in forms:
            index.setdefault(form, set()).update(group)

    for base, forms in HEBREW_COLOR_INFLECTIONS.items():
        link((base,) + forms)
    for group in HEBREW_PRODUCT_TYPE_GROUPS:
        link(group)

    return {form: frozenset(group) for form, group in index.items()}


# form -> every known form of the same word (including itself)
INFLECTION_INDEX: Dict[str, FrozenSet[str]] = _build_inflection_index()

# inflected color form -> base color
_COLOR_BASE_BY_FORM: Dict[str, str] = {
    form: base
    for base, forms in HEBREW_COLOR_INFLECTIONS.items()
    for form in (base,) + forms
}


def known_inflections(word: str) -> FrozenSet[str]:
    """All listed inflections of a word (empty if the word is not listed)."""
    return INFLECTION_INDEX.get(word, frozenset())


def hebrew_color_base(word: str) -> Optional[str]:
    """
    Resolve a Hebrew color token to its base form.

    Returns:
        Base color name if the word is a known color (base or inflected), else None
    """
    if word in HEBREW_TO_ENGLISH_COLORS:
        return word
    base = _COLOR_BASE_BY_FORM.get(word)
    if base in HEBREW_TO_ENGLISH_COLORS:
        return base
    return None


def translate_hebrew_color(word: str) -> Tuple[str, ...]:
    """English slugs for a Hebrew color word (base or inflected form)."""
    base = hebrew_color_base(word)
    if base is None:
        return ()
    return HEBREW_TO_ENGLISH_COLORS[base]


def is_english_color(word: str) -> bool:
    return word.lower() in ENGLISH_COLORS


def is_size_stop_word(word: str) -> bool:
    """Exact match for Hebrew, case-insensitive for English."""
    return word in SIZE_STOP_WORDS or word.lower() in SIZE_STOP_WORDS
