from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar('T')


class SyncError(Exception):
    """Base class for failures raised by backend clients and source adapters."""


class TransientError(SyncError):
    """Network-level failure. Not retried by the coordinator; callers may re-trigger."""


class NetworkError(TransientError):
    pass


class BackendTimeoutError(TransientError):
    pass


class ServerError(SyncError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(f'{code}: {message}')
        self.code = code
        self.message = message


class UnknownError(SyncError):
    pass


class DataConsistencyError(UnknownError):
    """The backend broke an invariant the adapters rely on, e.g. a dangling image reference."""


class InvalidSelectionError(ValueError):
    """Raised for an unknown source index or name. Indicates a caller bug."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: SyncError


Result = Union[Ok[T], Err]


def log_failure(logger: logging.Logger, action: str, error: SyncError) -> None:
    if isinstance(error, TransientError):
        logger.warning('%s: transient failure: %s', action, error)
    elif isinstance(error, ServerError):
        logger.error('%s: server error %s %s', action, error.code, error.message)
    elif isinstance(error, DataConsistencyError):
        logger.error('%s: backend data inconsistency: %s', action, error)
    else:
        logger.error('%s: unexpected failure', action, exc_info=error)
