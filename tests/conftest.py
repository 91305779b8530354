from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd
import pytest
from loguru import logger

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(autouse=True)
def disable_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def log_messages() -> list[str]:
    messages: list[str] = []
    logger.add(lambda msg: messages.append(str(msg).rstrip("\n")), level="DEBUG", format="{level}|{message}")
    return messages


@dataclass
class Person:
    age: int
    height: float


@dataclass
class Speaker:
    volume: int
    pleasure: int


@dataclass
class City:
    population: float


@pytest.fixture
def people() -> list[Person]:
    return [Person(10, 12.0), Person(12, 14.0), Person(21, 19.0)]


@pytest.fixture
def people_weights() -> list[float]:
    return [23.0, 323.0, 32.0]


@pytest.fixture(scope="session")
def foodchain() -> tuple[list[City], list[float]]:
    df = pd.read_csv(DATA_DIR / "foodchain.csv", header=None, names=["population", "profit"])
    assert len(df) == 97, "Cities dataset hasn't been read correctly."
    return [City(value) for value in df["population"]], df["profit"].tolist()


class PropertySpeaker:
    def __init__(self, volume, pleasure):
        self._volume = volume
        self._pleasure = pleasure

    @property
    def volume(self):
        return self._volume

    @property
    def pleasure(self):
        return self._pleasure


class SlotSpeaker:
    __slots__ = ("volume", "pleasure", "_label")

    def __init__(self, volume, pleasure):
        self.volume = volume
        self.pleasure = pleasure
        self._label = "speaker"
