from reviewgate.policy.loader import load_policy, parse_policy, validate_policy_file
from reviewgate.policy.types import ApprovalGroup, ReviewPolicy

__all__ = [
    "ApprovalGroup",
    "ReviewPolicy",
    "load_policy",
    "parse_policy",
    "validate_policy_file",
]
