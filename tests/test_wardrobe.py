import pytest

from fashion_api.core.exceptions import ConflictError
from fashion_api.schemas.wardrobe import WardrobeItemCreate
from fashion_api.services.wardrobe import CODE_ALLOCATION_ATTEMPTS, WardrobeService


ITEM = {
    'domain': 'APPAREL',
    'brand': 'Nike®',
    'pieceType': 'Shirts',
    'category': {'page': 'Apparel', 'blueSubcategory': 'Tops'},
    'brandDetails': {'line': 'sb'},
    'metadata': {'size': 'M', 'composition': [{'material': 'Cotton', 'percentage': 100}]},
    'condition': {'status': 'Good'},
    'images': ['https://cdn.example.com/wardrobe/u/1-shirt.jpg'],
}


def create_item(client, headers, **overrides):
    response = client.post('/wardrobe/items', json={**ITEM, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class StaleSequenceService(WardrobeService):
    """Reads the sequence as if another request had not committed yet."""

    def __init__(self, db, stale_reads=1):
        super().__init__(db)
        self.stale_reads = stale_reads
        self.reads = 0

    def _next_sequence(self, prefix):
        self.reads += 1
        if self.reads <= self.stale_reads:
            return 1
        return super()._next_sequence(prefix)


def test_create_item_assigns_vufs_code(client, auth_headers):
    headers = auth_headers('alice')

    item = create_item(client, headers)

    assert item['vufsCode'] == 'APP-NIK-SHI-0001'
    assert item['ownerId'] == 'alice'
    assert item['category'] == {'whiteSubcategory': 'Shirts', 'page': 'Apparel', 'blueSubcategory': 'Tops'}
    assert item['brand'] == {'brand': 'Nike®', 'line': 'sb'}
    assert item['metadata']['size'] == 'M'
    assert item['visibility'] == 'private'


def test_codes_increment_per_prefix(client, auth_headers):
    create_item(client, auth_headers('alice'))
    second = create_item(client, auth_headers('bob'))
    sneaker = create_item(client, auth_headers('bob'), domain='FOOTWEAR', brand='Adidas®', pieceType='Sneakers')

    assert second['vufsCode'] == 'APP-NIK-SHI-0002'
    assert sneaker['vufsCode'] == 'FTW-ADI-SNE-0001'


def test_code_collision_retries_with_fresh_sequence(db_session):
    data = WardrobeItemCreate(domain='APPAREL', brand='Nike®', piece_type='Shirts')
    WardrobeService(db_session).create_item('alice', data)

    racer = StaleSequenceService(db_session)
    item = racer.create_item('bob', data)

    assert item.vufs_code == 'APP-NIK-SHI-0002'
    assert item.owner_id == 'bob'
    assert racer.reads == 2


def test_code_allocation_gives_up_with_conflict(db_session):
    data = WardrobeItemCreate(domain='APPAREL', brand='Nike®', piece_type='Shirts')
    WardrobeService(db_session).create_item('alice', data)

    racer = StaleSequenceService(db_session, stale_reads=CODE_ALLOCATION_ATTEMPTS)
    with pytest.raises(ConflictError):
        racer.create_item('bob', data)

    assert racer.reads == CODE_ALLOCATION_ATTEMPTS
    # The session is still usable after the rolled-back attempts
    assert WardrobeService(db_session).create_item('bob', data).vufs_code == 'APP-NIK-SHI-0002'


def test_create_item_validates_domain(client, auth_headers):
    response = client.post('/wardrobe/items', json={**ITEM, 'domain': 'BAGS'}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'VALIDATION_ERROR'


def test_list_items_filters_by_domain(client, auth_headers):
    headers = auth_headers('alice')
    create_item(client, headers)
    create_item(client, headers, domain='FOOTWEAR', brand='Vans®', pieceType='Sneakers')
    create_item(client, auth_headers('bob'))

    everything = client.get('/wardrobe/items', headers=headers).json()
    footwear = client.get('/wardrobe/items', params={'domain': 'FOOTWEAR'}, headers=headers).json()

    assert everything['pagination'] == {'page': 1, 'limit': 20, 'total': 2, 'totalPages': 1}
    assert [i['vufsCode'] for i in footwear['items']] == ['FTW-VAN-SNE-0001']


def test_private_item_hidden_from_others(client, auth_headers):
    item = create_item(client, auth_headers('alice'))

    assert client.get(f'/wardrobe/items/{item["id"]}', headers=auth_headers('alice')).status_code == 200
    response = client.get(f'/wardrobe/items/{item["id"]}', headers=auth_headers('bob'))
    assert response.status_code == 404
    assert response.json()['error']['code'] == 'NOT_FOUND'


def test_public_item_visible_to_others(client, auth_headers):
    item = create_item(client, auth_headers('alice'), visibility='public')

    assert client.get(f'/wardrobe/items/{item["id"]}', headers=auth_headers('bob')).status_code == 200


def test_update_merges_sections(client, auth_headers):
    headers = auth_headers('alice')
    item = create_item(client, headers)

    response = client.patch(
        f'/wardrobe/items/{item["id"]}',
        json={'metadata': {'colors': [{'primary': 'Blue'}]}, 'visibility': 'public'},
        headers=headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated['metadata']['size'] == 'M'
    assert updated['metadata']['colors'] == [{'primary': 'Blue'}]
    assert updated['visibility'] == 'public'
    assert updated['vufsCode'] == item['vufsCode']


def test_only_owner_can_modify(client, auth_headers):
    item = create_item(client, auth_headers('alice'), visibility='public')

    patch = client.patch(f'/wardrobe/items/{item["id"]}', json={'images': []}, headers=auth_headers('bob'))
    delete = client.delete(f'/wardrobe/items/{item["id"]}', headers=auth_headers('bob'))

    assert patch.status_code == 403
    assert delete.status_code == 403
    assert patch.json()['error']['code'] == 'FORBIDDEN'


def test_delete_item(client, auth_headers):
    headers = auth_headers('alice')
    item = create_item(client, headers)

    assert client.delete(f'/wardrobe/items/{item["id"]}', headers=headers).status_code == 204
    assert client.get(f'/wardrobe/items/{item["id"]}', headers=headers).status_code == 404


def test_presigned_upload_url(client, auth_headers):
    response = client.post(
        '/wardrobe/upload-url',
        json={'filename': 'blue shirt.jpg', 'contentType': 'image/jpeg'},
        headers=auth_headers('alice'),
    )

    assert response.status_code == 200
    body = response.json()
    assert body['key'].startswith('wardrobe/alice/')
    assert body['key'].endswith('-blue-shirt.jpg')
    assert body['imageUrl'] == f'https://cdn.example.com/{body["key"]}'
    assert body['uploadUrl'].startswith('https://test-bucket.s3.amazonaws.com/wardrobe/alice/')
    assert body['expiresIn'] == 3600
