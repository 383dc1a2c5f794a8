"""Verification code generator.

Produces fixed-width numeric one-time codes and never hands out a
degenerate code (all digits identical, e.g. "000000").
"""

import logging
import random
import secrets

from examiner_auth.exceptions import CodeGenerationError
from examiner_auth.schemas import CodeGenerationResult

logger = logging.getLogger(__name__)


def is_degenerate(code: str) -> bool:
    """Return True if every character of the code is the same."""
    return len(set(code)) <= 1


class VerificationCodeGenerator:
    """Generates numeric verification codes.

    Codes are sampled uniformly from ``[0, 10**length)`` and zero-padded.
    Degenerate samples are discarded and sampling is retried, up to
    ``max_attempts`` times. The generator keeps no state between calls.

    Examples
    --------
    >>> generator = VerificationCodeGenerator()
    >>> code = generator.generate_code()
    >>> len(code)
    6
    """

    CODE_LENGTH = 6
    DEFAULT_MAX_ATTEMPTS = 100

    def __init__(
        self,
        length: int = CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rng: random.Random | None = None,
    ):
        """Initialize the generator.

        Parameters
        ----------
        length
            Number of digits in a code (at least 2)
        max_attempts
            Upper bound on samples drawn before giving up
        rng
            Source of randomness; defaults to ``secrets.SystemRandom``
        """
        if length < 2:
            msg = "Code length must be at least 2 digits"
            raise ValueError(msg)
        if max_attempts < 1:
            msg = "max_attempts must be positive"
            raise ValueError(msg)

        self._length = length
        self._max_attempts = max_attempts
        self._rng = rng or secrets.SystemRandom()

    @property
    def length(self) -> int:
        return self._length

    def generate_code(self) -> str:
        """Return a non-degenerate numeric code.

        Raises
        ------
        CodeGenerationError
            If every sample within ``max_attempts`` was degenerate
        """
        upper = 10**self._length
        for attempt in range(1, self._max_attempts + 1):
            code = f"{self._rng.randrange(upper):0{self._length}d}"
            if not is_degenerate(code):
                return code
            logger.debug("Discarded degenerate verification code (attempt %d)", attempt)

        msg = f"No usable code after {self._max_attempts} attempts"
        raise CodeGenerationError(msg)

    def get_code(self) -> CodeGenerationResult:
        """Generate a code, reporting exhaustion as a failed result."""
        try:
            return CodeGenerationResult.generated(self.generate_code())
        except CodeGenerationError as e:
            logger.error("Verification code generation failed: %s", e.message)
            return CodeGenerationResult.failed("Code generation failed")
