import io
import json
from datetime import datetime, timezone

import pytest
from openpyxl import Workbook

from visitrack.core import importer


def xlsx_bytes(rows) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


CSV = (
    "Name,Email Address,Mobile,Organization,Badge Colour\n"
    "Riya Shah, RIYA@Example.com ,9000000001,Acme,Blue\n"
    ",,,,\n"
    "Arjun Mehta,arjun@example.com,9000000002,,Green\n"
).encode('utf-8')


def test_csv_rows_skip_blank_cells_and_lines():
    rows = importer.parse_spreadsheet(CSV, 'visitors.csv')

    assert len(rows) == 2
    assert rows[0]['Email Address'] == 'RIYA@Example.com'
    assert 'Organization' not in rows[1]


def test_xlsx_is_parsed_with_openpyxl():
    content = xlsx_bytes([
        ['Full Name', 'Email', 'Phone Number', 'City'],
        ['Riya Shah', 'riya@example.com', '9000000001', 'Pune'],
    ])

    rows = importer.parse_spreadsheet(content, 'visitors.xlsx')

    assert rows == [{'Full Name': 'Riya Shah', 'Email': 'riya@example.com',
                     'Phone Number': '9000000001', 'City': 'Pune'}]


def test_unsupported_extension_is_rejected():
    with pytest.raises(importer.SpreadsheetError, match='Unsupported file format'):
        importer.parse_spreadsheet(b'{}', 'visitors.json')


def test_empty_csv_has_no_rows():
    assert importer.parse_spreadsheet(b'', 'empty.csv') == []


def test_staged_file_is_removed(tmp_path):
    importer.parse_spreadsheet(CSV, 'visitors.csv', tmp_dir=str(tmp_path))

    assert list(tmp_path.iterdir()) == []


def test_staged_file_is_removed_when_parsing_fails(tmp_path):
    with pytest.raises(importer.SpreadsheetError):
        importer.parse_spreadsheet(b'not a workbook', 'broken.xlsx', tmp_dir=str(tmp_path))

    assert list(tmp_path.iterdir()) == []


def test_headers_are_normalized():
    row = importer.normalize_headers({'Name': 'Riya', 'E-mail': 'x', 'ZIP': '411001', 'Badge Colour': 'Blue'})

    assert row == {'fullName': 'Riya', 'E-mail': 'x', 'pincode': '411001', 'Badge Colour': 'Blue'}


def test_column_mappings_are_applied():
    mappings = importer.parse_column_mappings(json.dumps({
        'Attendee': 'fullName',
        'Mail': 'email',
        'Notes': 'ignore',
        'Extra': '',
    }))

    row = importer.apply_column_mappings(
        {'Attendee': 'Riya', 'Mail': 'riya@example.com', 'Notes': 'vip', 'Extra': 'x'}, mappings
    )

    assert row == {'fullName': 'Riya', 'email': 'riya@example.com'}


@pytest.mark.parametrize('raw, message', [
    (None, 'No column mappings provided'),
    ('', 'No column mappings provided'),
    ('{}', 'No column mappings provided'),
    ('{not json', 'Invalid column mappings format'),
    ('{"Name": "fullName", "Age": 7}', 'Invalid column mappings format'),
    ('{"Name": "fullName", "Email": ["email"]}', 'Invalid column mappings format'),
    ('{"Name": "fullName", "Role": "$where"}', 'Invalid column mappings format'),
    ('{"Name": "fullName", "City": "address.city"}', 'Invalid column mappings format'),
    ('{"Company": "company", "Notes": "ignore"}', 'At least one required field'),
])
def test_bad_column_mappings_are_rejected(raw, message):
    with pytest.raises(ValueError, match=message):
        importer.parse_column_mappings(raw)


def test_records_are_stamped_and_filtered():
    now = datetime(2026, 1, 5, tzinfo=timezone.utc)
    rows = [
        {'fullName': 'Riya', 'email': ' RIYA@Example.com', 'Badge Colour': 'Blue', 'ownerId': 'forged', '_id': 'x'},
        {'company': 'No identity Ltd'},
        {'phoneNumber': '9000000002'},
    ]

    records = importer.build_dataset_records(rows, 'owner-1', now)

    assert len(records) == 2
    first = records[0]
    assert first['email'] == 'riya@example.com'
    assert first['ownerId'] == 'owner-1'
    assert first['Badge Colour'] == 'Blue'
    assert first['company'] == ''
    assert '_id' not in first
    assert first['createdAt'] == first['updatedAt'] == now
