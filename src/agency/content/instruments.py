"""Instrument codes and their display labels per locale."""

INSTRUMENT_LABELS: dict[str, dict[str, str]] = {
    "piano": {"de": "Klavier", "en": "Piano"},
    "piano-forte": {"de": "Hammerklavier", "en": "Piano Forte"},
    "harpsichord": {"de": "Cembalo", "en": "Harpsichord"},
    "conductor": {"de": "Dirigent", "en": "Conductor"},
    "violin": {"de": "Violine", "en": "Violin"},
    "viola": {"de": "Viola", "en": "Viola"},
    "cello": {"de": "Violoncello", "en": "Cello"},
    "bass": {"de": "Kontrabass", "en": "Double Bass"},
    "horn": {"de": "Horn", "en": "Horn"},
    "recorder": {"de": "Blockflöte", "en": "Recorder"},
    "chamber-music": {"de": "Kammermusik", "en": "Chamber Music"},
}


def instrument_labels(code: str) -> list[str]:
    """Return every locale's label for an instrument code.

    Both languages are returned so a German visitor typing "cello" and an
    English visitor typing "violoncello" find the same artist.

    Args:
        code: Instrument code such as "cello".

    Returns:
        Distinct labels in German-then-English order, or the code itself
        when it is unknown.
    """
    labels = INSTRUMENT_LABELS.get(code)
    if labels is None:
        return [code]
    return list(dict.fromkeys(labels.values()))
