from dataclasses import dataclass


@dataclass(frozen=True)
class TierBoardError:
    message: str


@dataclass(frozen=True)
class StorageError(TierBoardError):
    key: str


@dataclass(frozen=True)
class FetchError(TierBoardError):
    url: str
