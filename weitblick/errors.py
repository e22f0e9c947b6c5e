"""
Error taxonomy.

Provider failures are caught inside the fan-out and turned into strings;
transition errors reach the interface layer as rejected actions. Nothing
here is fatal.
"""


class WeitblickError(Exception):
    """Root of all application errors."""


class PromptBuildError(WeitblickError, ValueError):
    """Unknown persona, level or language key."""


class ProviderError(WeitblickError):
    """A single provider call failed."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class ProviderHttpError(ProviderError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, provider: str, status: int):
        self.status = status
        super().__init__(provider, f"HTTP {status}")


class ProviderRequestError(ProviderError):
    """Transport-level failure (connection, timeout, bad JSON)."""


class AnalysisCancelled(ProviderError):
    def __init__(self, provider: str):
        super().__init__(provider, "cancelled")


class DiscourseParseError(WeitblickError):
    """Multi-party response did not carry exactly one tagged segment per perspective."""


class InvalidCredential(WeitblickError, ValueError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Key does not match the expected format for {provider}")


class TransitionRejected(WeitblickError):
    """A discourse transition's guard did not hold."""


class EmptyIdea(TransitionRejected):
    pass


class AnalysisInFlight(TransitionRejected):
    pass


class QuintessenceUnavailable(TransitionRejected):
    pass


class NoSelection(TransitionRejected):
    pass


class UnknownNode(TransitionRejected):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Unknown node: {node_id}")


class CompassError(WeitblickError):
    """Invalid compass answer or answer after completion."""
