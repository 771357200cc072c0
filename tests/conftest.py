import sys
import pytest

from topictree import ManualScheduler, Topic, TopicHandle, TopicTreeSettings



def pytest_configure(config: pytest.Config) -> None:
    if sys.flags.optimize:
        raise RuntimeError("Assertions are disabled (optimize > 0)")



@pytest.fixture
def settings() -> TopicTreeSettings:
    """Built-in defaults only, so a user settings file never leaks into tests."""
    return TopicTreeSettings()



@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()



@pytest.fixture
def topic(scheduler: ManualScheduler, settings: TopicTreeSettings) -> TopicHandle:
    return Topic(scheduler=scheduler, settings=settings)



class Accumulator:
    """Subscriber recording the path each delivery was seen at."""
    def __init__(self) -> None:
        self.calls: list[tuple[object, str]] = []

    def __call__(self, payload, meta) -> None:
        self.calls.append((payload, meta.path))

    @property
    def paths(self) -> list[str]:
        return [path for _, path in self.calls]

    @property
    def payloads(self) -> list[object]:
        return [payload for payload, _ in self.calls]



@pytest.fixture
def accumulator():
    return Accumulator
