from abc import ABC, abstractmethod


class Module(ABC):
    """A runnable unit: the router job or one of the consumer services.

    ``run`` walks initialize -> validate -> execute and always finishes with
    ``teardown``. When a phase raises, its name is kept in ``failed_phase``.
    """

    phase: str = "created"
    failed_phase: str | None = None

    async def initialize(self) -> None:
        """Build settings and collaborators from the module config."""

    async def validate(self) -> None:
        """Check inputs before any message is produced or consumed."""

    @abstractmethod
    async def execute(self) -> int:
        """Do the work. Returns the process exit code."""

    async def teardown(self) -> None:
        """Flush and release broker handles."""

    async def run(self) -> int:
        try:
            self.phase = "initialize"
            await self.initialize()
            self.phase = "validate"
            await self.validate()
            self.phase = "execute"
            return await self.execute()
        except Exception:
            self.failed_phase = self.phase
            raise
        finally:
            self.phase = "teardown"
            await self.teardown()
