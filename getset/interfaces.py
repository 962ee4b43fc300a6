from abc import ABC, abstractmethod
from typing import Dict, NoReturn, Optional

from getset.models import CommandResult


class ComponentInterface(ABC):
    """Base interface for all GetSet components"""

    @abstractmethod
    async def shutdown(self):
        pass


class ConfigStoreInterface(ComponentInterface):
    """Flat key/value table with a backing file"""

    @abstractmethod
    def load(self):
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str):
        pass

    @abstractmethod
    def delete(self, key: str):
        pass

    @abstractmethod
    def items(self) -> Dict[str, str]:
        pass

    @abstractmethod
    async def save(self):
        pass


class CommandServiceInterface(ComponentInterface):
    """Parses and executes text commands"""

    @abstractmethod
    def handle_get(self) -> NoReturn:
        pass

    @abstractmethod
    async def handle_post(self, params) -> CommandResult:
        pass

    @abstractmethod
    async def dispatch(self, command: str) -> CommandResult:
        pass
