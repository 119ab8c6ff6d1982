from ..api import decode, get_api
from ..cache import get_cache, query_key
from ..mutations import Mutation


class Service:
    """Reads go through the session's query cache; writes are Mutations
    that invalidate the keys they own once the API call succeeds."""

    def __init__(self, api, cache):
        self.api = api
        self.cache = cache

    @classmethod
    def current(cls):
        return cls(get_api(), get_cache())

    def query(self, key, model, path=None, params=None):
        return self.cache.fetch(key, lambda: decode(model, self.api.get(path or key, params=params)))

    def mutation(self, call, invalidates=(), invalidates_prefixes=(), related=None):
        return Mutation(self.cache, call, invalidates=invalidates,
                        invalidates_prefixes=invalidates_prefixes, related=related)


__all__ = ['Service', 'decode', 'query_key']
