"""Port for obtaining fresh verification codes."""

from abc import ABC, abstractmethod

from examiner_auth.schemas import CodeGenerationResult


class CodeService(ABC):
    """Source of one-time verification codes."""

    @abstractmethod
    async def get_code(self) -> CodeGenerationResult:
        """Return a new code, or a failed result if none is available."""
