"""Exception hierarchy for the analyser."""


class AnalyserError(Exception):
    """Base class for all analyser errors."""


class ConfigurationError(AnalyserError, ValueError):
    """Raised when settings are missing or inconsistent."""


class InputFormatError(AnalyserError, ValueError):
    """Raised when an uploaded URL list or answer corpus cannot be read."""


class EmbeddingError(AnalyserError, RuntimeError):
    """Raised when an embedding cannot be produced and fallback is disabled."""


class AnalysisInProgressError(AnalyserError, RuntimeError):
    """Raised when a batch is started while another one is still running."""
