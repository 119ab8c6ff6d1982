import threading

from cmms_manager.app.cache import CacheRegistry, QueryCache, query_key


def counting_loader(value):
    calls = []

    def load():
        calls.append(1)
        return value
    return load, calls


def test_query_keys():
    assert query_key('/api/assets', 42, 'details') == '/api/assets/42/details'
    assert query_key('/api/documents', 'asset', 7) == '/api/documents/asset/7'
    assert query_key('/api/assets', tab='open', page=2) == '/api/assets?page=2&tab=open'
    assert query_key('/api/assets', q=None) == '/api/assets'


def test_second_read_is_served_from_cache(cache):
    load, calls = counting_loader(['a'])
    assert cache.fetch('/api/assets', load) == ['a']
    assert cache.fetch('/api/assets', load) == ['a']
    assert len(calls) == 1
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1


def test_invalidated_key_is_refetched(cache):
    load, calls = counting_loader('x')
    cache.fetch('/api/assets/42/details', load)
    cache.invalidate('/api/assets/42/details')
    assert cache.is_stale('/api/assets/42/details')
    cache.fetch('/api/assets/42/details', load)
    assert len(calls) == 2


def test_invalidate_leaves_other_keys_alone(cache):
    cache.set('/api/assets', 1)
    cache.set('/api/work-orders', 2)
    cache.invalidate('/api/assets')
    assert cache.is_stale('/api/assets')
    assert not cache.is_stale('/api/work-orders')


def test_invalidate_prefix_hits_the_family_only(cache):
    for key in ('/api/assets', '/api/assets/details', '/api/assets/42/details',
                '/api/assets?tab=open', '/api/asset-types'):
        cache.set(key, object())
    cache.invalidate_prefix('/api/assets')
    assert cache.is_stale('/api/assets')
    assert cache.is_stale('/api/assets/details')
    assert cache.is_stale('/api/assets/42/details')
    assert cache.is_stale('/api/assets?tab=open')
    assert not cache.is_stale('/api/asset-types')


def test_late_response_for_invalidated_key_is_stored_stale(cache):
    started = threading.Event()
    release = threading.Event()

    def slow_loader():
        started.set()
        release.wait(timeout=5)
        return 'old'

    worker = threading.Thread(target=cache.fetch, args=('/api/assets', slow_loader))
    worker.start()
    started.wait(timeout=5)
    cache.invalidate('/api/assets')
    release.set()
    worker.join(timeout=5)

    assert cache.peek('/api/assets') == 'old'
    assert cache.is_stale('/api/assets')
    assert cache.fetch('/api/assets', lambda: 'new') == 'new'


def test_clear_forgets_everything(cache):
    cache.set('/api/assets', 1)
    cache.clear()
    assert '/api/assets' not in cache
    assert len(cache) == 0


def test_registry_gives_each_session_its_own_cache():
    registry = CacheRegistry()
    first = registry.for_session('a')
    assert registry.for_session('a') is first
    assert registry.for_session('b') is not first
    registry.discard('a')
    assert registry.for_session('a') is not first


def test_registry_evicts_least_recently_used():
    registry = CacheRegistry(max_sessions=2)
    a = registry.for_session('a')
    registry.for_session('b')
    registry.for_session('a')
    registry.for_session('c')
    assert len(registry) == 2
    assert registry.for_session('a') is a
    assert isinstance(registry.for_session('b'), QueryCache)
