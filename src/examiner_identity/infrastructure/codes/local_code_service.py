"""CodeService backed by the in-process code generator."""

from examiner_auth import CodeGenerationResult, VerificationCodeGenerator
from examiner_identity.application.ports import CodeService


class LocalCodeService(CodeService):
    """Generates verification codes in-process."""

    def __init__(self, generator: VerificationCodeGenerator | None = None):
        self._generator = generator or VerificationCodeGenerator()

    async def get_code(self) -> CodeGenerationResult:
        return self._generator.get_code()
