from abc import ABC, abstractmethod

class ILogSink(ABC):
    @abstractmethod
    def ship(self, level: str, message: str) -> None:
        """
        Fire-and-forget delivery of one log line. Must not block and must
        not raise on delivery failure.
        """
        pass

    async def aclose(self) -> None:
        pass
