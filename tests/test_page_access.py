import pytest

from visitrack.core.page_access import (
    BACKFILL_MARKER, PageAccess, PageKey, backfill_page_access, generate_default_page_access,
    get_accessible_pages, has_page_access, has_page_access_by_path, validate_page_access
)


def test_field_names_keep_true_suffix():
    assert PageKey.REPORTS.field_name == 'reports:true'
    assert PageKey.BADGE_MANAGEMENT.field_name == 'badge-management:true'
    assert PageKey.from_field_name('entry-log:true') is PageKey.ENTRY_LOG
    assert PageKey.from_field_name('entry-log') is None
    assert PageKey.from_field_name('unknown:true') is None


def test_defaults_grant_every_page():
    defaults = generate_default_page_access()

    assert len(defaults) == len(PageKey)
    assert all(value is True for value in defaults.values())
    assert BACKFILL_MARKER in defaults


@pytest.mark.parametrize('user', [
    {'reports:true': False},
    {},
    {'reports:true': 'true'},
    None,
])
def test_reports_denied_unless_flag_is_true(user):
    assert has_page_access(user, PageKey.REPORTS) is False


def test_access_by_path():
    user = {'visitors:true': True, 'scanner:true': False}

    assert has_page_access_by_path(user, '/admin/visitors') is True
    assert has_page_access_by_path(user, '/admin/scanner') is False
    assert has_page_access_by_path(user, '/admin/unknown') is False


def test_accessible_pages_lists_paths():
    user = {'dashboard:true': True, 'events:true': True, 'reports:true': False}

    assert get_accessible_pages(user) == ['/admin', '/admin/events']


def test_validate_page_access():
    assert validate_page_access({'reports:true': False, 'scanner:true': True}) is True
    assert validate_page_access({'reports': False}) is False
    assert validate_page_access({'reports:true': 'no'}) is False
    assert validate_page_access(['reports:true']) is False


def test_page_access_structure_round_trips_storage_fields():
    user = {'events:true': True, 'messages:true': False}

    access = PageAccess.from_document(user)
    document = access.to_document()

    assert access.allows(PageKey.EVENTS)
    assert not access.allows(PageKey.MESSAGES)
    assert not access.allows(PageKey.PROFILE)
    assert document['events:true'] is True
    assert document['profile:true'] is False


def test_backfill_grants_defaults_to_legacy_users(db):
    db.users.insert_many([
        {'email': 'old1@example.com', 'ownerId': 'o1'},
        {'email': 'old2@example.com', 'ownerId': 'o2'},
    ])

    result = backfill_page_access(db)

    assert result == {'matched': 2, 'updated': 2, 'failed': 0}
    for user in db.users.find():
        assert all(user[key.field_name] is True for key in PageKey)
        assert 'updatedAt' in user


def test_backfill_is_idempotent(db):
    restricted = {**generate_default_page_access(), 'reports:true': False, 'scanner:true': False}
    db.users.insert_one({'email': 'new@example.com', 'ownerId': 'o1', **restricted})
    db.users.insert_one({'email': 'old@example.com', 'ownerId': 'o1'})

    first = backfill_page_access(db)
    second = backfill_page_access(db)

    assert first['updated'] == 1
    assert second == {'matched': 0, 'updated': 0, 'failed': 0}
    kept = db.users.find_one({'email': 'new@example.com'})
    assert kept['reports:true'] is False
    assert kept['scanner:true'] is False
    assert 'updatedAt' not in kept


def test_backfill_limited_to_one_owner(db):
    db.users.insert_many([
        {'email': 'mine@example.com', 'ownerId': 'o1'},
        {'email': 'theirs@example.com', 'ownerId': 'o2'},
    ])

    result = backfill_page_access(db, owner_id='o1')

    assert result == {'matched': 1, 'updated': 1, 'failed': 0}
    assert db.users.find_one({'email': 'mine@example.com'})[BACKFILL_MARKER] is True
    assert BACKFILL_MARKER not in db.users.find_one({'email': 'theirs@example.com'})


def test_my_page_access_endpoint(client, admin_headers):
    response = client.get('/api/users/me/page-access', headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body['pageAccess']['reports:true'] is True
    assert '/admin/settings' in body['accessiblePages']


def test_revoked_page_is_enforced_on_api(client, admin_headers, create_member):
    staff_headers, staff = create_member(admin_headers, 'gatekeeper')
    assert client.get('/api/entry-log', headers=staff_headers).status_code == 200

    response = client.put(
        f"/api/users/{staff['_id']}/page-access",
        json={'entry-log:true': False},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()['pageAccess']['entry-log:true'] is False

    denied = client.get('/api/entry-log', headers=staff_headers)
    assert denied.status_code == 403
    assert denied.json()['detail'] == 'Access denied for page entry-log'


def test_legacy_user_without_flags_is_denied(client, db, admin_headers, create_member):
    staff_headers, staff = create_member(admin_headers, 'legacy')
    db.users.update_one({'email': 'legacy@example.com'}, {'$unset': {'events:true': ''}})

    assert client.get('/api/events', headers=staff_headers).status_code == 403


@pytest.mark.parametrize('body', [{'unknown:true': True}, {'reports:true': 'yes'}, {}])
def test_invalid_page_access_update_is_rejected(client, admin_headers, create_member, body):
    _, staff = create_member(admin_headers, 'flagged')

    response = client.put(f"/api/users/{staff['_id']}/page-access", json=body, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()['detail'] == 'Invalid page access data'


def test_admin_page_access_cannot_be_edited(client, tenant_a, create_member):
    admin_headers, admin = tenant_a
    sub_admin_headers, _ = create_member(admin_headers, 'deputy', role='sub-admin')

    response = client.put(
        f"/api/users/{admin['_id']}/page-access",
        json={'reports:true': False},
        headers=sub_admin_headers,
    )

    assert response.status_code == 403


def test_backfill_endpoint_runs_in_background(client, db, tenant_a):
    admin_headers, admin = tenant_a
    db.users.insert_one({'email': 'pre-flags@example.com', 'ownerId': admin['ownerId']})

    response = client.post('/api/users/page-access/backfill', headers=admin_headers)

    assert response.status_code == 202
    assert db.users.find_one({'email': 'pre-flags@example.com'})[BACKFILL_MARKER] is True


def test_backfill_endpoint_leaves_other_tenants_alone(client, db, tenant_a, tenant_b):
    admin_headers, _ = tenant_a
    _, other = tenant_b
    db.users.insert_one({'email': 'bravo-legacy@example.com', 'ownerId': other['ownerId'], 'reports:true': False})

    response = client.post('/api/users/page-access/backfill', headers=admin_headers)

    assert response.status_code == 202
    untouched = db.users.find_one({'email': 'bravo-legacy@example.com'})
    assert untouched['reports:true'] is False
    assert BACKFILL_MARKER not in untouched


def test_backfill_endpoint_is_admin_only(client, admin_headers, create_member):
    staff_headers, _ = create_member(admin_headers, 'runner')

    response = client.post('/api/users/page-access/backfill', headers=staff_headers)

    assert response.status_code == 403
