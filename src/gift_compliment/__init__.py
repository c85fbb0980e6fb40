"""Behaviour-seeded compliment selection and generation."""

from .config import ComplimentConfig, load_config
from .entropy import EnvData, UserSignals, build_fingerprint, compute_entropy_key, smooth01
from .generator import ComplimentGenerator, StyleVector, generate_compliment
from .reflection import generate_reflection
from .selection import CandidateSelector, EmptyPoolError, SelectionResult, select_candidate
from .service import ComplimentRequest, ComplimentResponse, ComplimentService
from .utils.random import SplitMix64

__all__ = [
    "CandidateSelector",
    "ComplimentConfig",
    "ComplimentGenerator",
    "ComplimentRequest",
    "ComplimentResponse",
    "ComplimentService",
    "EmptyPoolError",
    "EnvData",
    "SelectionResult",
    "SplitMix64",
    "StyleVector",
    "UserSignals",
    "build_fingerprint",
    "compute_entropy_key",
    "generate_compliment",
    "generate_reflection",
    "load_config",
    "select_candidate",
    "smooth01",
]

__version__ = "0.1.0"
