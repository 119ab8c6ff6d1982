import pytest

from cmms_manager.app.api import ApiError, DecodingError
from cmms_manager.app.models import AssetStatus
from cmms_manager.app.mutations import FieldState, Mutation, OptimisticField


def failing_call():
    raise ApiError('Invalid status', status_code=400)


def test_successful_mutation_invalidates_its_keys(cache):
    cache.set('/api/assets', [])
    cache.set('/api/assets/42/details', {})
    cache.set('/api/work-orders', [])

    result = Mutation(cache, lambda: 'ok',
                      invalidates=['/api/assets', '/api/assets/42/details']).run()

    assert result == 'ok'
    assert cache.is_stale('/api/assets')
    assert cache.is_stale('/api/assets/42/details')
    assert not cache.is_stale('/api/work-orders')


def test_keys_can_depend_on_the_result(cache):
    cache.set('/api/assets/7/details', {})
    Mutation(cache, lambda: {'parent': 7}, invalidates=['/api/assets'],
             related=lambda result: [f"/api/assets/{result['parent']}/details"]).run()
    assert cache.is_stale('/api/assets/7/details')
    assert cache.is_stale('/api/assets')


def test_prefix_invalidation(cache):
    cache.set('/api/notifications', [])
    cache.set('/api/notifications/count', {'count': 1})
    Mutation(cache, lambda: None, invalidates_prefixes=['/api/notifications']).run()
    assert cache.is_stale('/api/notifications')
    assert cache.is_stale('/api/notifications/count')


def test_failed_mutation_leaves_cache_untouched(cache):
    cache.set('/api/assets', ['cached'])
    with pytest.raises(ApiError):
        Mutation(cache, failing_call, invalidates=['/api/assets']).run()
    assert not cache.is_stale('/api/assets')
    assert cache.peek('/api/assets') == ['cached']


def malformed_reply():
    raise DecodingError('Asset', [])


def test_write_with_malformed_reply_still_invalidates(cache):
    cache.set('/api/assets', ['cached'])
    cache.set('/api/assets/7/details', {})
    with pytest.raises(DecodingError):
        Mutation(cache, malformed_reply, invalidates=['/api/assets'],
                 related=lambda result: ['/api/assets/7/details']).run()
    assert cache.is_stale('/api/assets')
    # no result to derive related keys from
    assert not cache.is_stale('/api/assets/7/details')


def test_success_status_error_counts_as_applied(cache):
    def unreadable():
        raise ApiError('Unreadable reply', status_code=200)

    cache.set('/api/work-orders', [])
    with pytest.raises(ApiError):
        Mutation(cache, unreadable, invalidates_prefixes=['/api/work-orders']).run()
    assert cache.is_stale('/api/work-orders')


def test_optimistic_field_commits(cache):
    field = OptimisticField('status', AssetStatus.OPERATIONAL)
    field.apply(AssetStatus.RETIRED, Mutation(cache, lambda: 'saved'))
    assert field.value is AssetStatus.RETIRED
    assert field.confirmed is AssetStatus.RETIRED
    assert field.state is FieldState.COMMITTED


def test_optimistic_field_reverts_on_failure(cache):
    field = OptimisticField('status', AssetStatus.OPERATIONAL)
    with pytest.raises(ApiError):
        field.apply(AssetStatus.RETIRED, Mutation(cache, failing_call))
    assert field.value is AssetStatus.OPERATIONAL
    assert field.state is FieldState.REVERTED


def test_pending_value_is_visible_before_confirmation():
    field = OptimisticField('status', 'operational').begin('retired')
    assert field.value == 'retired'
    assert field.confirmed == 'operational'
    assert field.state is FieldState.PENDING


def test_nothing_to_commit_or_revert():
    field = OptimisticField('status', 'operational')
    with pytest.raises(RuntimeError):
        field.commit()
    with pytest.raises(RuntimeError):
        field.revert()
