"""ciphertrace: step-by-step AES-128 and DES traces for teaching block ciphers.

Every encryption or decryption run is materialised as an ordered, immutable
sequence of steps so a caller can render, rewind and jump to any point of
the computation.

Research / education only. Do NOT use in production.
"""

from .cipher.registry import run_cipher, trace_message
from .cipher.trace import MessageTrace, Step, Trace

__all__ = [
    "run_cipher",
    "trace_message",
    "MessageTrace",
    "Step",
    "Trace",
]

__version__ = "0.3.0"
