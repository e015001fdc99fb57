from abc import ABC, abstractmethod


class NavigatorPort(ABC):
    @abstractmethod
    def to(self, url: str) -> None:
        raise NotImplementedError
