import logging
from enum import Enum

from .api import ApiError, DecodingError

logger = logging.getLogger(__name__)


def write_applied(error):
    """True when the server accepted the write but its reply was unusable."""
    if isinstance(error, DecodingError):
        return True
    return error.status_code is not None and error.status_code < 400


class Mutation:
    """A write against the API plus the cache keys it owns.

    `invalidates` lists keys and `invalidates_prefixes` whole key
    families; `related` takes the decoded result and returns further keys
    (e.g. the parent asset of an updated work order). Keys are only
    touched once the server has accepted the write, including when the
    write went through but the reply could not be decoded.
    """

    def __init__(self, cache, call, invalidates=(), invalidates_prefixes=(), related=None):
        self.cache = cache
        self.call = call
        self.invalidates = invalidates
        self.invalidates_prefixes = invalidates_prefixes
        self.related = related

    def run(self, *args, **kwargs):
        try:
            result = self.call(*args, **kwargs)
        except ApiError as e:
            if write_applied(e):
                logger.warning("Write applied but reply unusable, invalidating anyway: %s",
                               e.message)
                self._invalidate()
            else:
                logger.info("Mutation failed, cache left untouched: %s", e.message)
            raise
        self._invalidate(result)
        return result

    def _invalidate(self, result=None):
        keys = list(self.invalidates)
        if self.related is not None and result is not None:
            keys += self.related(result)
        self.cache.invalidate(*keys)
        for prefix in self.invalidates_prefixes:
            self.cache.invalidate_prefix(prefix)


class FieldState(str, Enum):
    PENDING = 'pending'
    COMMITTED = 'committed'
    REVERTED = 'reverted'


class OptimisticField:
    """A form field shown with its new value before the server confirms it.

    begin() shows the proposed value (pending); commit() makes it the
    confirmed value; revert() restores the last confirmed value. Only a
    failed mutation for this field should call revert().
    """

    def __init__(self, name, confirmed):
        self.name = name
        self.confirmed = confirmed
        self.value = confirmed
        self.state = FieldState.COMMITTED

    def begin(self, proposed):
        self.value = proposed
        self.state = FieldState.PENDING
        return self

    def commit(self):
        if self.state is not FieldState.PENDING:
            raise RuntimeError(f'{self.name}: nothing pending to commit')
        self.confirmed = self.value
        self.state = FieldState.COMMITTED

    def revert(self):
        if self.state is not FieldState.PENDING:
            raise RuntimeError(f'{self.name}: nothing pending to revert')
        self.value = self.confirmed
        self.state = FieldState.REVERTED

    def apply(self, proposed, mutation, *args, **kwargs):
        """Run `mutation` for `proposed`; commit on success, revert on ApiError."""
        self.begin(proposed)
        try:
            result = mutation.run(*args, **kwargs)
        except ApiError:
            self.revert()
            raise
        self.commit()
        return result

    def __repr__(self):
        return f'<OptimisticField {self.name}={self.value!r} ({self.state.value})>'
