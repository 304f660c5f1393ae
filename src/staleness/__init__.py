from .checker import StalenessResult, check_staleness
from .hashing import HASH_LENGTH, compute_file_hash
from .verifier import StalenessVerifier, VerificationOutcome

__all__ = [
    "HASH_LENGTH",
    "StalenessResult",
    "StalenessVerifier",
    "VerificationOutcome",
    "check_staleness",
    "compute_file_hash",
]
