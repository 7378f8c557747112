"""Locale-specific stopword filtering for search indexing.

Stopwords are matched exactly against the lowercased token with
punctuation removed. There is no stemming: "pianists" survives even
though "pianist" might be considered a variant. Surviving tokens keep
their punctuation, so "nr." stays "nr." in the indexed text.
"""
import re

_PUNCTUATION = re.compile(r"[.,!?;:()\"\[\]{}]")

GERMAN_STOPWORDS: frozenset[str] = frozenset({
    "aber", "alle", "allem", "allen", "aller", "alles", "als", "also", "am",
    "an", "ander", "andere", "anderem", "anderen", "anderer", "anderes",
    "auch", "auf", "aus", "bei", "bin", "bis", "bist", "da", "damit", "dann",
    "das", "dass", "daß", "dasselbe", "dazu", "dein", "deine", "deinem",
    "deinen", "deiner", "dem", "demselben", "den", "denn", "denselben",
    "der", "derer", "derselbe", "derselben", "des", "desselben", "dessen",
    "dich", "die", "dies", "diese", "dieselbe", "dieselben", "diesem",
    "diesen", "dieser", "dieses", "dir", "doch", "dort", "du", "durch",
    "ein", "eine", "einem", "einen", "einer", "eines", "einig", "einige",
    "einigem", "einigen", "einiger", "einiges", "einmal", "er", "es",
    "etwas", "euch", "euer", "eure", "eurem", "euren", "eurer", "für",
    "gegen", "gewesen", "hab", "habe", "haben", "hat", "hatte", "hatten",
    "hier", "hin", "hinter", "ich", "ihm", "ihn", "ihnen", "ihr", "ihre",
    "ihrem", "ihren", "ihrer", "im", "in", "indem", "ins", "ist", "jede",
    "jedem", "jeden", "jeder", "jedes", "jene", "jenem", "jenen", "jener",
    "jenes", "jetzt", "kann", "kein", "keine", "keinem", "keinen", "keiner",
    "könnte", "man", "manche", "manchem", "manchen", "mancher", "manches",
    "mein", "meine", "meinem", "meinen", "meiner", "mich", "mir", "mit",
    "muss", "musste", "nach", "nicht", "nichts", "noch", "nun", "nur", "ob",
    "oder", "ohne", "sehr", "sein", "seine", "seinem", "seinen", "seiner",
    "seit", "sich", "sie", "sind", "so", "solche", "solchem", "solchen",
    "solcher", "sollte", "sondern", "sonst", "über", "um", "und", "uns",
    "unser", "unsere", "unserem", "unseren", "unter", "viel", "vom", "von",
    "vor", "während", "war", "waren", "warst", "was", "weg", "weil",
    "weiter", "welche", "welchem", "welchen", "welcher", "welches", "wenn",
    "werde", "werden", "wie", "wieder", "will", "wir", "wird", "wirst",
    "wo", "wollen", "wollte", "würde", "würden", "zu", "zum", "zur", "zwar",
    "zwischen",
})

ENGLISH_STOPWORDS: frozenset[str] = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "also", "am",
    "an", "and", "any", "are", "as", "at", "be", "because", "been",
    "before", "being", "below", "between", "both", "but", "by", "can",
    "could", "did", "do", "does", "doing", "down", "during", "each", "few",
    "for", "from", "further", "had", "has", "have", "having", "he", "her",
    "here", "hers", "herself", "him", "himself", "his", "how", "i", "if",
    "in", "into", "is", "it", "its", "itself", "just", "me", "more", "most",
    "my", "myself", "no", "nor", "not", "now", "of", "off", "on", "once",
    "only", "or", "other", "our", "ours", "ourselves", "out", "over", "own",
    "same", "she", "should", "so", "some", "such", "than", "that", "the",
    "their", "theirs", "them", "themselves", "then", "there", "these",
    "they", "this", "those", "through", "to", "too", "under", "until", "up",
    "very", "was", "we", "well", "were", "what", "when", "where", "which",
    "while", "who", "whom", "why", "will", "with", "would", "you", "your",
    "yours", "yourself", "yourselves",
})


def get_stopwords(locale: str) -> frozenset[str]:
    """Return the German set for "de" and the English set for any other locale."""
    if locale == "de":
        return GERMAN_STOPWORDS
    return ENGLISH_STOPWORDS


def filter_stopwords(text: str, locale: str) -> str:
    """Remove stopwords from text based on locale.

    Tokens that consist only of punctuation are dropped as well.

    Args:
        text: Text to filter.
        locale: Locale code ("de" or "en"). Any other code uses English.

    Returns:
        Lowercased text with stopwords removed, single-space separated.
    """
    stopwords = get_stopwords(locale)
    kept: list[str] = []

    for word in text.lower().split():
        clean = _PUNCTUATION.sub("", word)
        if clean and clean not in stopwords:
            kept.append(word)

    return " ".join(kept)
