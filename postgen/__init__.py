# postgen/__init__.py
from .config import config
from .errors import ErrorKind, ProviderError, classify
from .logger import get_logger
from .orchestrator import GenerationOrchestrator, OrchestratorBusy
from .progress import ProgressSimulator
from .schemas import (
    CoverResult,
    CoverSummary,
    GeneratedPost,
    GenerationRequest,
    GenerationResult,
    Phase,
    ProgressState,
)


__all__ = ["config",
           "get_logger",
           "ErrorKind",
           "ProviderError",
           "classify",
           "GenerationOrchestrator",
           "OrchestratorBusy",
           "ProgressSimulator",
           "CoverResult",
           "CoverSummary",
           "GeneratedPost",
           "GenerationRequest",
           "GenerationResult",
           "Phase",
           "ProgressState",
           ]
