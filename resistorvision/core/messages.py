"""User-facing messages for scan outcomes, in English and Polish."""
from typing import Any, Dict

DEFAULT_LANGUAGE = "en"

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "resistor_not_detected": "Resistor not found. Center it in the frame and try again.",
        "no_color_results": "The color model returned no results.",
        "no_bands_detected": "No color bands were detected on the resistor.",
        "need_more_bands": "Only {count} band(s) detected, at least 3 are needed. Try a different angle.",
        "processing_error": "Processing failed: {error}",
        "detected_bands": "Detected {count} bands: {colors}",
        "unrecognized_color": "Unrecognized band color at RGB({r}, {g}, {b})",
        "resistance": "Resistance",
    },
    "pl": {
        "resistor_not_detected": "Nie wykryto rezystora. Umieść go na środku kadru i spróbuj ponownie.",
        "no_color_results": "Model kolorów nie zwrócił wyników.",
        "no_bands_detected": "Nie wykryto pasków na rezystorze.",
        "need_more_bands": "Wykryto tylko {count} pask(i), potrzebne są co najmniej 3. Spróbuj pod innym kątem.",
        "processing_error": "Błąd przetwarzania: {error}",
        "detected_bands": "Wykryto {count} pasków: {colors}",
        "unrecognized_color": "Nierozpoznany kolor paska RGB({r}, {g}, {b})",
        "resistance": "Rezystancja",
    },
}


def supported_languages():
    return sorted(MESSAGES)


def translate(key: str, language: str = DEFAULT_LANGUAGE, **params: Any) -> str:
    """Look up ``key`` for ``language``; unknown keys come back unchanged."""
    table = MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
    template = table.get(key) or MESSAGES[DEFAULT_LANGUAGE].get(key)
    if template is None:
        return key
    try:
        return template.format(**params)
    except (KeyError, IndexError):
        return template
