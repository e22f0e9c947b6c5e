"""
Weitblick - explore an idea through five philosophical perspectives.

Pipeline: idea -> classify -> build prompt -> fan out to AI providers
(or fall back to static text) -> discourse node forest.

Modules:
- classify: language, sophistication and topic heuristics
- prompts: per-language instruction tables
- providers: one HTTP client per AI vendor
- fanout: concurrent dispatch with per-call timeout and cancellation
- fallback: static locale-aware text
- discourse: session state machine (start, quintessence, think forward)
- compass: guided four-phase questionnaire
"""

from .errors import (
    WeitblickError,
    PromptBuildError,
    ProviderError,
    ProviderHttpError,
    ProviderRequestError,
    AnalysisCancelled,
    DiscourseParseError,
    InvalidCredential,
    TransitionRejected,
    EmptyIdea,
    AnalysisInFlight,
    QuintessenceUnavailable,
    NoSelection,
    UnknownNode,
    CompassError,
)
from .classify import classify, detect_language, detect_sophistication_level, categorize_idea
from .prompts import build_prompt
from .providers import (
    ProviderClient,
    GeminiClient,
    OpenAIClient,
    AnthropicClient,
    DeepSeekClient,
    DEFAULT_CLIENTS,
    get_client,
    unavailable_text,
)
from .fanout import FanOut, analyze_with_all, select_result, failure_text, is_failure
from .fallback import fallback
from .discourse import DiscourseSession, parse_discourse
from .compass import start_compass, answer_phase, progress, PHASES

__all__ = [
    # errors
    'WeitblickError',
    'PromptBuildError',
    'ProviderError',
    'ProviderHttpError',
    'ProviderRequestError',
    'AnalysisCancelled',
    'DiscourseParseError',
    'InvalidCredential',
    'TransitionRejected',
    'EmptyIdea',
    'AnalysisInFlight',
    'QuintessenceUnavailable',
    'NoSelection',
    'UnknownNode',
    'CompassError',
    # classify
    'classify',
    'detect_language',
    'detect_sophistication_level',
    'categorize_idea',
    # prompts
    'build_prompt',
    # providers
    'ProviderClient',
    'GeminiClient',
    'OpenAIClient',
    'AnthropicClient',
    'DeepSeekClient',
    'DEFAULT_CLIENTS',
    'get_client',
    'unavailable_text',
    # fanout
    'FanOut',
    'analyze_with_all',
    'select_result',
    'failure_text',
    'is_failure',
    # fallback
    'fallback',
    # discourse
    'DiscourseSession',
    'parse_discourse',
    # compass
    'start_compass',
    'answer_phase',
    'progress',
    'PHASES',
]
