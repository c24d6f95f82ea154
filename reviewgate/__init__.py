from reviewgate.engine import ReviewGatekeeper, Verdict, evaluate
from reviewgate.errors import ConfigurationError, ReviewGateError

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ReviewGateError",
    "ReviewGatekeeper",
    "Verdict",
    "evaluate",
    "__version__",
]
