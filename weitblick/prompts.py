"""
Prompt construction.

One instruction string per call, assembled from fixed per-language tables.
Unknown keys raise PromptBuildError instead of leaving a hole in the prompt.
"""

from models import Perspective
from .errors import PromptBuildError


LANGUAGE_INSTRUCTIONS = {
    "de": "Antworte auf Deutsch in einem akademischen aber verständlichen Stil.",
    "en": "Respond in English in an academic but understandable style.",
}

LEVEL_INSTRUCTIONS = {
    "de": {
        "basic": "Erkläre es einfach und verständlich, ohne zu viele Fachbegriffe.",
        "intermediate": "Verwende eine durchdachte Analyse mit einigen philosophischen Begriffen.",
        "advanced": "Führe eine tiefgreifende philosophische Analyse durch, verwende Fachterminologie präzise.",
    },
    "en": {
        "basic": "Explain it simply and clearly, without too many technical terms.",
        "intermediate": "Use a thoughtful analysis with some philosophical terms.",
        "advanced": "Conduct a deep philosophical analysis, use terminology precisely.",
    },
}

LEVEL_ADJECTIVES = {
    "de": {"basic": "verständliche", "intermediate": "durchdachte", "advanced": "tiefgreifende"},
    "en": {"basic": "clear", "intermediate": "thoughtful", "advanced": "in-depth"},
}

PERSONA_INSTRUCTIONS = {
    "Kant": {
        "de": "Analysiere aus Kants erkenntnistheoretischer Perspektive: Erkenntnisbedingungen, transzendentale Kategorien, Grenzen der Vernunft.",
        "en": "Analyze from Kant's epistemological perspective: conditions of knowledge, transcendental categories, limits of reason.",
    },
    "Heidegger": {
        "de": "Analysiere aus Heideggers existenzial-ontologischer Perspektive: Dasein, In-der-Welt-sein, Geworfenheit, existenziale Verfasstheit.",
        "en": "Analyze from Heidegger's existential-ontological perspective: Dasein, Being-in-the-world, thrownness, existential constitution.",
    },
    "Hegel": {
        "de": "Analysiere aus Hegels dialektischer Perspektive: These-Antithese-Synthese, Weltgeist, Aufhebung von Widersprüchen.",
        "en": "Analyze from Hegel's dialectical perspective: thesis-antithesis-synthesis, world spirit, resolution of contradictions.",
    },
    "Nagarjuna": {
        "de": "Analysiere aus Nagarjunas Perspektive der Madhyamaka-Philosophie: Sunyata (Leerheit), abhängige Entstehung (Pratityasamutpada), Dekonstruktion fester Begriffe.",
        "en": "Analyze from Nagarjuna's Madhyamaka perspective: Sunyata (emptiness), dependent origination (Pratityasamutpada), deconstruction of fixed concepts.",
    },
    "Wissenschaft": {
        "de": "Analysiere aus wissenschaftlicher Perspektive: Empirische Überprüfbarkeit, Falsifizierbarkeit, messbare Korrelationen, Forschungsmethodik.",
        "en": "Analyze from a scientific perspective: empirical testability, falsifiability, measurable correlations, research methodology.",
    },
    "thesis": {
        "de": "Formuliere die stärkste Fassung dieser Idee als These: ihre Kernannahme, ihre Begründung und was aus ihr folgt.",
        "en": "State the strongest version of this idea as a thesis: its core assumption, its justification and what follows from it.",
    },
    "antithesis": {
        "de": "Formuliere die stärkste Gegenposition als Antithese: welche Annahme wird bestritten, welche Einwände wiegen am schwersten?",
        "en": "State the strongest counter-position as an antithesis: which assumption is disputed, which objections weigh most?",
    },
    "quintessence": {
        "de": "Verdichte die folgenden Positionen zu einer Quintessenz: was bleibt bestehen, was wird aufgehoben, welche neue Frage entsteht?",
        "en": "Condense the following positions into a quintessence: what endures, what is transcended, which new question emerges?",
    },
}

# Personas whose answer should start with their own name
PERSPECTIVE_PERSONAS = [p.value for p in Perspective]

TEXT_INTROS = {
    "de": "Analysiere folgenden Text:",
    "en": "Analyze the following text:",
}


def _key(value) -> str:
    """Accept enum members as well as their plain string values."""
    return getattr(value, "value", value)


def _discourse_instruction(language: str) -> str:
    tags = " | ".join(f"{p.tag}: ..." for p in Perspective)
    if language == "de":
        return (
            "Simuliere einen Diskurs zwischen Kant, Heidegger, Hegel, Nagarjuna und der Wissenschaft. "
            "Gib genau einen Abschnitt pro Stimme aus, getrennt durch '|'. "
            "Jeder Abschnitt beginnt mit dem Namen der Stimme in Großbuchstaben und einem Doppelpunkt, "
            f"in dieser Form: {tags}"
        )
    return (
        "Simulate a discourse between Kant, Heidegger, Hegel, Nagarjuna and Science (WISSENSCHAFT). "
        "Emit exactly one segment per voice, separated by '|'. "
        "Each segment starts with the voice's name in capitals followed by a colon, "
        f"in this form: {tags}"
    )


def persona_instruction(persona: str, language: str) -> str:
    if persona == "discourse":
        return _discourse_instruction(language)
    try:
        return PERSONA_INSTRUCTIONS[persona][language]
    except KeyError:
        raise PromptBuildError(f"Unknown persona: {persona!r}") from None


def build_prompt(text: str, persona: str, level: str, language: str) -> str:
    """
    Assemble the instruction string for one analysis call.

    Raises PromptBuildError for an unknown persona, level or language.
    """
    persona, level, language = _key(persona), _key(level), _key(language)
    if language not in LANGUAGE_INSTRUCTIONS:
        raise PromptBuildError(f"Unknown language: {language!r}")
    if level not in LEVEL_INSTRUCTIONS[language]:
        raise PromptBuildError(f"Unknown sophistication level: {level!r}")

    persona_text = persona_instruction(persona, language)
    adjective = LEVEL_ADJECTIVES[language][level]

    if persona == "discourse":
        closing = (
            f"Halte jeden Abschnitt {adjective} und eigenständig."
            if language == "de"
            else f"Keep each segment {adjective} and self-contained."
        )
    elif language == "de":
        closing = f'Beginne deine Antwort mit "{persona}:" und gib eine strukturierte, {adjective} Analyse aus dieser Perspektive.'
    else:
        closing = f'Begin your answer with "{persona}:" and give a structured, {adjective} analysis from this perspective.'

    return f"""{LANGUAGE_INSTRUCTIONS[language]}

{LEVEL_INSTRUCTIONS[language][level]}

{persona_text}

{TEXT_INTROS[language]}
"{text}"

{closing}"""
