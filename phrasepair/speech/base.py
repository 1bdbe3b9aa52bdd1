from __future__ import annotations
from abc import ABC, abstractmethod
from phrasepair.contracts import SpeechRequest

class SpeechSynthesizer(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def default_voice(self, language: str) -> str: ...

    @abstractmethod
    async def synthesize(self, req: SpeechRequest) -> bytes: ...
