import pytest
from bson import ObjectId

from visitrack.core.entry_types import ENTRY_LOG_SYNONYMS


@pytest.fixture
def event(admin_headers, create_event):
    return create_event(admin_headers)


def seed_visitors(db, owner_id: str, entry_types) -> None:
    db.visitors.insert_many([
        {'ownerId': owner_id, 'fullName': f'Visitor {index}', 'email': f'v{index}@example.com',
         'entryType': entry_type, 'status': 'Visited'}
        for index, entry_type in enumerate(entry_types)
    ])


def test_registration_is_stamped_from_event(client, db, event, register_visitor):
    body = register_visitor(event['_id'], status='Visited', ownerId='forged')

    assert body['status'] == 'Registration'
    assert body['eventName'] == 'Tech Expo'
    visitor = db.visitors.find_one({'_id': ObjectId(body['visitorId'])})
    assert visitor['ownerId'] == event['ownerId']
    assert visitor['status'] == 'Registration'
    assert 'entryType' not in visitor
    assert visitor['source'] == 'Website'
    assert db.events.find_one({'_id': ObjectId(event['_id'])})['visitorCount'] == 1


def test_custom_answers_are_stored_under_labels(client, db, admin_headers, event, register_visitor):
    client.post('/api/forms', json={
        'formName': 'Expo Registration',
        'eventId': event['_id'],
        'fields': [{'id': 'f_designation', 'type': 'text', 'label': 'Designation'}],
    }, headers=admin_headers)

    body = register_visitor(event['_id'], f_designation='CTO', notes='vegetarian')

    visitor = db.visitors.find_one({'_id': ObjectId(body['visitorId'])})
    assert visitor['Designation'] == 'CTO'
    assert visitor['notes'] == 'vegetarian'
    assert 'f_designation' not in visitor


def test_duplicate_registration_is_rejected(client, event, register_visitor):
    register_visitor(event['_id'])

    same_email = client.post('/api/register-visitor', json={
        'eventId': event['_id'], 'fullName': 'Again', 'email': 'VISITOR@example.com', 'phoneNumber': '9999999999',
    })
    same_phone = client.post('/api/register-visitor', json={
        'eventId': event['_id'], 'fullName': 'Again', 'email': 'new@example.com', 'phoneNumber': '9000000001',
    })

    assert same_email.status_code == 409
    assert same_phone.status_code == 409


def test_check_visitor_finds_existing_registration(client, event, register_visitor):
    visitor_id = register_visitor(event['_id'])['visitorId']

    found = client.post('/api/check-visitor', json={'eventId': event['_id'], 'email': 'VISITOR@example.com'})
    unknown = client.post('/api/check-visitor', json={'eventId': event['_id'], 'email': 'new@example.com'})

    assert found.status_code == 200
    body = found.json()
    assert body['isRegistered'] is True
    assert body['visitorData']['visitorId'] == visitor_id
    assert body['visitorData']['eventName'] == 'Tech Expo'
    assert body['visitorData']['eventStartTime'] == '09:00'
    assert body['visitorData']['status'] == 'Registration'
    assert unknown.json() == {'isRegistered': False}


def test_check_visitor_stays_within_event(client, other_admin_headers, create_event, event, register_visitor):
    register_visitor(event['_id'])
    other_event = create_event(other_admin_headers)

    response = client.post('/api/check-visitor', json={'eventId': other_event['_id'], 'email': 'visitor@example.com'})

    assert response.json() == {'isRegistered': False}


@pytest.mark.parametrize('body, message', [
    ({'email': 'visitor@example.com'}, 'Email and event ID are required'),
    ({'eventId': 'bad-id', 'email': 'visitor@example.com'}, 'Invalid event ID format'),
    ({'eventId': str(ObjectId()), 'email': 'not-an-email'}, 'Invalid email format'),
])
def test_check_visitor_validation(client, body, message):
    response = client.post('/api/check-visitor', json=body)

    assert response.status_code == 400
    assert response.json()['detail'] == message


def test_registration_validation(client, event):
    missing = client.post('/api/register-visitor', json={'eventId': event['_id'], 'fullName': 'A'})
    unknown_event = client.post('/api/register-visitor', json={
        'eventId': str(ObjectId()), 'fullName': 'A', 'email': 'a@example.com', 'phoneNumber': '1',
    })

    assert missing.status_code == 400
    assert unknown_event.status_code == 404


def test_visitor_listing_is_tenant_scoped(client, admin_headers, other_admin_headers, event, register_visitor):
    register_visitor(event['_id'])

    alpha = client.get('/api/visitors', headers=admin_headers).json()
    bravo = client.get('/api/visitors', headers=other_admin_headers).json()

    assert alpha['totalCount'] == 1
    assert alpha['visitors'][0]['email'] == 'visitor@example.com'
    assert bravo['totalCount'] == 0
    assert bravo['visitors'] == []


def test_visitor_search_and_filters(client, admin_headers, event, register_visitor):
    register_visitor(event['_id'], email='riya@example.com', phone='9000000001')
    register_visitor(event['_id'], email='kabir@example.com', phone='9000000002', fullName='Kabir (VIP)')

    search = client.get('/api/visitors', params={'search': '(vip)'}, headers=admin_headers).json()
    by_event = client.get('/api/visitors', params={'eventId': event['_id'], 'status': 'all'},
                          headers=admin_headers).json()
    visited = client.get('/api/visitors', params={'status': 'Visited'}, headers=admin_headers).json()

    assert [visitor['email'] for visitor in search['visitors']] == ['kabir@example.com']
    assert by_event['totalCount'] == 2
    assert visited['totalCount'] == 0


def test_page_beyond_last_is_empty(client, admin_headers, event, register_visitor):
    for index in range(3):
        register_visitor(event['_id'], email=f'p{index}@example.com', phone=f'90000000{index}0')

    last = client.get('/api/visitors', params={'page': 2, 'limit': 2}, headers=admin_headers).json()
    beyond = client.get('/api/visitors', params={'page': 5, 'limit': 2}, headers=admin_headers).json()

    assert len(last['visitors']) == 1
    assert last['hasNextPage'] is False
    assert last['hasPrevPage'] is True
    assert beyond['visitors'] == []
    assert beyond['hasNextPage'] is False
    assert beyond['totalPages'] == 2
    assert beyond['currentPage'] == 5


def test_huge_page_numbers_return_empty_pages(client, db, tenant_a, event, register_visitor):
    headers, admin = tenant_a
    register_visitor(event['_id'])
    seed_visitors(db, admin['ownerId'], ['Manual'])
    huge = 99999999999999999999

    visitors = client.get('/api/visitors', params={'page': huge}, headers=headers)
    entry_log = client.get('/api/entry-log', params={'page': huge}, headers=headers)

    assert visitors.status_code == entry_log.status_code == 200
    assert visitors.json()['visitors'] == entry_log.json()['visitors'] == []
    assert visitors.json()['totalCount'] == 2
    assert entry_log.json()['hasNextPage'] is False


def test_entry_log_includes_only_entry_type_synonyms(client, db, tenant_a):
    headers, admin = tenant_a
    seed_visitors(db, admin['ownerId'], ENTRY_LOG_SYNONYMS + ['Email', None])

    body = client.get('/api/entry-log', params={'limit': 50}, headers=headers).json()

    assert body['totalCount'] == 6
    assert sorted(visitor['entryType'] for visitor in body['visitors']) == sorted(ENTRY_LOG_SYNONYMS)


def test_entry_log_is_tenant_scoped(client, db, tenant_a, other_admin_headers):
    _, admin = tenant_a
    seed_visitors(db, admin['ownerId'], ['Manual', 'QR'])

    assert client.get('/api/entry-log', headers=other_admin_headers).json()['totalCount'] == 0


def test_manual_entry_checks_visitor_in(client, db, admin_headers, event, register_visitor):
    visitor_id = register_visitor(event['_id'])['visitorId']

    response = client.post('/api/entry-log/manual-entry', json={'visitorId': visitor_id}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()['newEntryType'] == 'Manual'
    visitor = db.visitors.find_one({'_id': ObjectId(visitor_id)})
    assert visitor['entryType'] == 'Manual'
    assert visitor['status'] == 'Visited'
    log = db.entryLogs.find_one({'visitorId': ObjectId(visitor_id)})
    assert log['entryType'] == 'Manual'
    assert log['ownerId'] == event['ownerId']
    assert log['previousStatus'] == 'Registration'

    entry_log = client.get('/api/entry-log', headers=admin_headers).json()
    assert [item['_id'] for item in entry_log['visitors']] == [visitor_id]


@pytest.mark.parametrize('visitor_id, status_code', [(None, 400), ('bad-id', 400), (str(ObjectId()), 404)])
def test_manual_entry_rejects_bad_ids(client, admin_headers, visitor_id, status_code):
    response = client.post('/api/entry-log/manual-entry', json={'visitorId': visitor_id}, headers=admin_headers)

    assert response.status_code == status_code


def test_other_tenant_cannot_check_in_visitor(client, other_admin_headers, event, register_visitor):
    visitor_id = register_visitor(event['_id'])['visitorId']

    manual = client.post('/api/entry-log/manual-entry', json={'visitorId': visitor_id}, headers=other_admin_headers)
    qr = client.post('/api/scanner/qr-entry', json={'visitorId': visitor_id}, headers=other_admin_headers)

    assert manual.status_code == qr.status_code == 404


def test_qr_entry_records_scan_once(client, db, admin_headers, event, register_visitor):
    visitor_id = register_visitor(event['_id'])['visitorId']

    first = client.post('/api/scanner/qr-entry', json={'visitorId': f' {visitor_id} ', 'qrData': 'VT-1'},
                        headers=admin_headers)
    second = client.post('/api/scanner/qr-entry', json={'visitorId': visitor_id}, headers=admin_headers)

    assert first.status_code == second.status_code == 200
    assert first.json()['alreadyCheckedIn'] is False
    assert first.json()['newStatus'] == 'Visited'
    assert second.json()['alreadyCheckedIn'] is True

    visitor = db.visitors.find_one({'_id': ObjectId(visitor_id)})
    assert visitor['entryType'] == 'QR'
    assert visitor['lastScannedAt'] is not None
    logs = list(db.entryLogs.find({'visitorId': ObjectId(visitor_id)}))
    assert len(logs) == 1
    assert logs[0]['qrData'] == 'VT-1'
    stats = db.scanStats.find_one({'ownerId': event['ownerId']})
    assert stats['totalScans'] == stats['qrScans'] == 1


def test_qr_entry_by_path(client, db, admin_headers, other_admin_headers, event, register_visitor):
    visitor_id = register_visitor(event['_id'])['visitorId']

    foreign = client.post(f'/api/scanner/qr-entry/{visitor_id}', headers=other_admin_headers)
    response = client.post(f'/api/scanner/qr-entry/{visitor_id}', headers=admin_headers)
    invalid = client.post('/api/scanner/qr-entry/not-an-id', headers=admin_headers)

    assert foreign.status_code == 404
    assert response.status_code == 200
    assert response.json()['alreadyCheckedIn'] is False
    assert db.visitors.find_one({'_id': ObjectId(visitor_id)})['entryType'] == 'QR'
    assert invalid.status_code == 400


def test_legacy_qr_spelling_counts_as_checked_in(client, db, tenant_a):
    headers, admin = tenant_a
    visitor_id = db.visitors.insert_one({
        'ownerId': admin['ownerId'], 'fullName': 'Old Scan', 'entryType': 'QR Code', 'status': 'Visited',
    }).inserted_id

    response = client.post('/api/scanner/qr-entry', json={'visitorId': str(visitor_id)}, headers=headers)

    assert response.json()['alreadyCheckedIn'] is True
    assert db.entryLogs.count_documents({}) == 0


def test_scanner_page_flag_is_required(client, db, admin_headers, create_member, event, register_visitor):
    staff_headers, _ = create_member(admin_headers, 'scanless')
    db.users.update_one({'username': 'scanless'}, {'$set': {'scanner:true': False}})
    visitor_id = register_visitor(event['_id'])['visitorId']

    response = client.post('/api/scanner/qr-entry', json={'visitorId': visitor_id}, headers=staff_headers)

    assert response.status_code == 403
