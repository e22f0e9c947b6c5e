"""
Compass - guided walk through four fixed phases of thinking an idea through.

Core hypothesis -> direct problem solving -> cascade of possibilities ->
resilience check. Each answered phase is annotated with static perspective
notes, opportunities and risks. No provider calls.
"""

from models import CompassRun, PhaseAnalysis, Perspective
from .errors import CompassError


PHASES = [
    {
        "de": {
            "title": "Kernhypothese",
            "description": "Das Axiom der Revolution",
            "question": "Was ist die eine fundamentale Eigenschaft oder das Prinzip, das Ihre Idee zur Grundlage macht? Welche etablierte Annahme wird dadurch in Frage gestellt?",
        },
        "en": {
            "title": "Core hypothesis",
            "description": "The axiom of the revolution",
            "question": "What is the one fundamental property or principle your idea rests on? Which established assumption does it challenge?",
        },
    },
    {
        "de": {
            "title": "Direkte Problemlösung",
            "description": "Kausale Ebene 1",
            "question": "Welches spezifische Problem löst Ihre Hypothese unmittelbar? Was funktioniert dadurch plötzlich, was vorher nicht funktionierte?",
        },
        "en": {
            "title": "Direct problem solving",
            "description": "Causal level 1",
            "question": "Which specific problem does your hypothesis solve directly? What suddenly works that did not work before?",
        },
    },
    {
        "de": {
            "title": "Kaskade der Möglichkeiten",
            "description": "Kausale Ebenen 2-N",
            "question": "Wenn das Problem gelöst ist - welche völlig neuen Möglichkeiten entstehen dadurch? Was wird dadurch erst denkbar?",
        },
        "en": {
            "title": "Cascade of possibilities",
            "description": "Causal levels 2-N",
            "question": "Once the problem is solved, which entirely new possibilities arise? What only becomes conceivable then?",
        },
    },
    {
        "de": {
            "title": "Resilienz-Prüfung",
            "description": "Der Advocatus Diaboli",
            "question": "Welche neuen Risiken entstehen? Was ist das größte Missbrauchspotenzial? Welches ethische Prinzip muss im Kern verankert sein?",
        },
        "en": {
            "title": "Resilience check",
            "description": "The devil's advocate",
            "question": "Which new risks arise? What is the greatest potential for misuse? Which ethical principle must be anchored at the core?",
        },
    },
]

PHASE_PERSPECTIVES = {
    "de": {
        Perspective.KANT: "Kant: Prüfung der Erkenntnisbedingungen dieser Hypothese",
        Perspective.HEIDEGGER: "Heidegger: Existenzielle Verwurzelung im Dasein",
        Perspective.HEGEL: "Hegel: Dialektisches Potenzial für Synthese",
        Perspective.NAGARJUNA: "Nagarjuna: Dekonstruktion fixierter Annahmen",
        Perspective.WISSENSCHAFT: "Wissenschaft: Empirische Überprüfbarkeit",
    },
    "en": {
        Perspective.KANT: "Kant: Examining the conditions of knowledge for this hypothesis",
        Perspective.HEIDEGGER: "Heidegger: Existential grounding in Dasein",
        Perspective.HEGEL: "Hegel: Dialectical potential for synthesis",
        Perspective.NAGARJUNA: "Nagarjuna: Deconstruction of fixed assumptions",
        Perspective.WISSENSCHAFT: "Science: Empirical testability",
    },
}

# phase -> (opportunities, risks)
PHASE_NOTES = {
    "de": {
        1: (["Neue Forschungsfelder werden möglich", "Bestehende Grenzen werden überwunden"],
            ["Mögliche unvorhergesehene Nebenwirkungen"]),
        2: (["Gesellschaftliche Transformation", "Wissenschaftliche Revolution", "Neue Technologien"],
            ["Systemische Instabilität"]),
        3: ([], ["Ethische Dilemmata", "Missbrauchspotenzial", "Unerwünschte Konsequenzen"]),
    },
    "en": {
        1: (["New fields of research become possible", "Existing limits are overcome"],
            ["Possible unforeseen side effects"]),
        2: (["Social transformation", "Scientific revolution", "New technologies"],
            ["Systemic instability"]),
        3: ([], ["Ethical dilemmas", "Potential for misuse", "Unintended consequences"]),
    },
}


def _lang(language: str) -> str:
    language = getattr(language, "value", language)
    return language if language in PHASE_PERSPECTIVES else "en"


def phase_info(phase: int, language: str = "de") -> dict:
    return PHASES[phase][_lang(language)]


def annotate(phase: int, language: str = "de") -> dict:
    """Static perspectives, opportunities and risks for a phase."""
    language = _lang(language)
    perspectives = list(PHASE_PERSPECTIVES[language].values()) if phase == 0 else []
    opportunities, risks = PHASE_NOTES[language].get(phase, ([], []))
    return {
        "perspectives": perspectives,
        "opportunities": list(opportunities),
        "risks": list(risks),
    }


def start_compass(idea: str, language: str = "de") -> CompassRun:
    idea = str(idea or "").strip()
    if not idea:
        raise CompassError("Idea text is empty")
    return CompassRun(idea=idea, language=_lang(language))


def answer_phase(run: CompassRun, answer: str) -> PhaseAnalysis:
    """Record the answer to the current phase and advance."""
    if run.completed:
        raise CompassError("All phases are already answered")
    answer = str(answer or "").strip()
    if not answer:
        raise CompassError("Answer is empty")

    phase = run.current_phase
    analysis = PhaseAnalysis(
        phase=phase,
        question=phase_info(phase, run.language)["question"],
        answer=answer,
        **annotate(phase, run.language),
    )
    run.analyses.append(analysis)
    if phase < len(PHASES) - 1:
        run.current_phase = phase + 1
    else:
        run.completed = True
    run.touch()
    return analysis


def progress(run: CompassRun) -> float:
    """Percent of phases answered."""
    return round(len(run.analyses) / len(PHASES) * 100, 1)


def compass_to_dict(run: CompassRun) -> dict:
    data = run.model_dump(mode="json")
    data["progress"] = progress(run)
    data["phase"] = None if run.completed else phase_info(run.current_phase, run.language)
    return data
