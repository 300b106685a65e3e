from abc import ABC, abstractmethod


class ImageProvider(ABC):
    @property
    @abstractmethod
    def is_configured(self) -> bool:...

    @abstractmethod
    async def generate(self, prompt: str) -> bytes:
        """Return raw PNG bytes for the prompt or raise UpstreamError."""
