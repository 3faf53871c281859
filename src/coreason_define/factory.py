from coreason_define.config import DefineSettings
from coreason_define.executor import CallableExecutor, ModuleExecutor, PythonSourceExecutor


class ExecutorFactory:
    """
    Factory to create ModuleExecutor instances based on configuration.
    """

    @staticmethod
    def get_executor(settings: DefineSettings) -> ModuleExecutor:
        """
        Returns an instance of the configured ModuleExecutor.
        """
        if settings.executor == "callable":
            return CallableExecutor()
        elif settings.executor == "python":
            return PythonSourceExecutor()
        else:
            # This should be unreachable due to Pydantic validation, but for safety:
            raise ValueError(f"Unknown executor: {settings.executor}")  # pragma: no cover
