"""
Static fallback text, used when no provider is configured or none succeeded.

Pure lookups. fallback() never raises and never returns an empty string.
"""

from typing import Optional, Union

from models import Perspective


PERSPECTIVE_TEXT = {
    "de": {
        Perspective.KANT: "Kant: Unter welchen Bedingungen ist die Erkenntnis möglich, dass {idea}? Zu prüfen ist, welche Kategorien des Verstandes diese Hypothese voraussetzt und wo sie die Grenzen möglicher Erfahrung überschreitet.",
        Perspective.HEIDEGGER: "Heidegger: Die Idee, dass {idea}, verweist auf unser In-der-Welt-sein. Sie zeigt sich nicht als vorhandenes Ding, sondern in der Weise, wie Dasein sich immer schon in Bezügen vorfindet.",
        Perspective.HEGEL: "Hegel: Die These, dass {idea}, trägt ihren Widerspruch bereits in sich. Erst in der Aufhebung dieses Gegensatzes gewinnt sie ihre eigentliche Wahrheit.",
        Perspective.NAGARJUNA: "Nagarjuna: Auch die Aussage, dass {idea}, ist leer von Eigensein. Sie entsteht in Abhängigkeit von anderen Begriffen und verliert ihre Festigkeit, sobald man sie als letzte Wahrheit fassen will.",
        Perspective.WISSENSCHAFT: "Wissenschaft: Um zu prüfen, ob {idea}, braucht es eine falsifizierbare Vorhersage, messbare Korrelationen und eine Methodik, die Alternativerklärungen ausschließt.",
    },
    "en": {
        Perspective.KANT: "Kant: Under which conditions can we know that {idea}? We must ask which categories of understanding this hypothesis presupposes and where it exceeds the limits of possible experience.",
        Perspective.HEIDEGGER: "Heidegger: The idea that {idea} points to our being-in-the-world. It does not appear as a present-at-hand thing but in the way Dasein always already finds itself in relations.",
        Perspective.HEGEL: "Hegel: The thesis that {idea} already carries its own contradiction. Only in the sublation of this opposition does it gain its actual truth.",
        Perspective.NAGARJUNA: "Nagarjuna: Even the claim that {idea} is empty of inherent existence. It arises in dependence on other concepts and loses its solidity once taken as ultimate truth.",
        Perspective.WISSENSCHAFT: "Science: Testing whether {idea} requires a falsifiable prediction, measurable correlations and a methodology that rules out alternative explanations.",
    },
}

KIND_TEXT = {
    "de": {
        "thesis": "These: {idea}. Diese Annahme stellt eine etablierte Sichtweise in Frage und beansprucht, ein grundlegendes Prinzip zu benennen.",
        "antithesis": "Antithese: Dagegen lässt sich einwenden, dass die Idee \"{idea}\" ihre eigenen Voraussetzungen nicht ausweist und wesentliche Gegenbeispiele übergeht.",
        "quintessence": "Quintessenz: Aus den Perspektiven auf \"{idea}\" bleibt eine gemeinsame Einsicht bestehen. Die Idee gewinnt an Tiefe, wo sie ihre Grenzen anerkennt, und wirft die Frage auf, was aus ihr praktisch folgt.",
        "generic": "Zur Idee \"{idea}\" liegt derzeit keine ausführliche Analyse vor.",
    },
    "en": {
        "thesis": "Thesis: {idea}. This assumption challenges an established view and claims to name a fundamental principle.",
        "antithesis": "Antithesis: Against this one can object that the idea \"{idea}\" does not account for its own presuppositions and passes over significant counterexamples.",
        "quintessence": "Quintessence: Across the perspectives on \"{idea}\" one shared insight endures. The idea gains depth where it acknowledges its limits and raises the question of what follows from it in practice.",
        "generic": "No detailed analysis is currently available for the idea \"{idea}\".",
    },
}

LEVEL_CLOSINGS = {
    "de": {
        "basic": "Einfach gesagt: Es lohnt sich, diese Idee Schritt für Schritt weiterzudenken.",
        "intermediate": "Damit eröffnet sich ein Feld für eine genauere begriffliche Prüfung.",
        "advanced": "Die weitere Analyse müsste die impliziten ontologischen und epistemischen Voraussetzungen explizit machen.",
    },
    "en": {
        "basic": "Put simply: this idea is worth thinking through step by step.",
        "intermediate": "This opens a field for closer conceptual examination.",
        "advanced": "Further analysis would need to make the implicit ontological and epistemic presuppositions explicit.",
    },
}

PLACEHOLDER_IDEA = {"de": "diese Idee", "en": "this idea"}


def _norm(value, allowed, default):
    value = getattr(value, "value", value)
    return value if value in allowed else default


def _idea_snippet(idea: str, language: str, limit: int = 160) -> str:
    idea = " ".join((idea or "").split()).rstrip(".")
    if not idea:
        return PLACEHOLDER_IDEA[language]
    return idea if len(idea) <= limit else idea[:limit].rstrip() + "…"


def perspective_fallback(perspective, idea: str, language: str = "de", level: str = "basic") -> str:
    language = _norm(language, PERSPECTIVE_TEXT, "en")
    level = _norm(level, LEVEL_CLOSINGS[language], "basic")
    try:
        template = PERSPECTIVE_TEXT[language][Perspective(perspective)]
    except ValueError:
        template = KIND_TEXT[language]["generic"]
    body = template.format(idea=_idea_snippet(idea, language))
    return f"{body} {LEVEL_CLOSINGS[language][level]}"


def fallback(
    kind: str,
    idea: str,
    language: str = "de",
    level: str = "basic",
    perspective: Optional[str] = None,
) -> Union[str, list[str]]:
    """
    Canned text for one discourse node kind.

    kind "perspectives" returns one text per perspective in display order;
    "perspective" needs the perspective name. Unknown kinds get a generic text.
    """
    kind = getattr(kind, "value", kind)
    if kind == "perspectives":
        return [perspective_fallback(p, idea, language, level) for p in Perspective]
    if kind == "perspective":
        return perspective_fallback(perspective, idea, language, level)

    language = _norm(language, KIND_TEXT, "en")
    level = _norm(level, LEVEL_CLOSINGS[language], "basic")
    template = KIND_TEXT[language].get(kind, KIND_TEXT[language]["generic"])
    body = template.format(idea=_idea_snippet(idea, language))
    return f"{body} {LEVEL_CLOSINGS[language][level]}"
