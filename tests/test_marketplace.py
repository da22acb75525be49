import pytest


LISTING = {
    'title': 'Nike SB shirt',
    'description': 'Worn twice, no defects',
    'price': 120.0,
    'condition': 'like_new',
    'category': 'Shirts',
    'brand': 'Nike®',
    'images': ['https://cdn.example.com/l/1.jpg'],
}


def create_listing(client, headers, **overrides):
    response = client.post('/marketplace/listings', json={**LISTING, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def seeded(client, auth_headers):
    seller = auth_headers('seller')
    return {
        'shirt': create_listing(client, seller),
        'boots': create_listing(
            client, seller, title='Leather boots', category='Boots', brand='Vans®', price=300.0, condition='good'
        ),
        'jacket': create_listing(
            client, seller, title='Denim jacket', category='Jackets', brand='Levi\'s®', price=80.0, condition='fair'
        ),
    }


def test_create_listing_defaults(client, auth_headers):
    listing = create_listing(client, auth_headers('seller'))

    assert listing['sellerId'] == 'seller'
    assert listing['status'] == 'active'
    assert listing['currency'] == 'BRL'
    assert listing['views'] == 0
    assert listing['likesCount'] == 0


def test_create_listing_requires_images_and_positive_price(client, auth_headers):
    no_images = client.post('/marketplace/listings', json={**LISTING, 'images': []}, headers=auth_headers())
    free = client.post('/marketplace/listings', json={**LISTING, 'price': 0}, headers=auth_headers())

    assert no_images.status_code == 400
    assert free.status_code == 400


def test_listing_from_someone_elses_wardrobe_is_forbidden(client, auth_headers):
    item = client.post(
        '/wardrobe/items',
        json={'domain': 'APPAREL', 'brand': 'Zara®', 'pieceType': 'Dresses'},
        headers=auth_headers('alice'),
    ).json()

    response = client.post('/marketplace/listings', json={**LISTING, 'itemId': item['id']}, headers=auth_headers('bob'))

    assert response.status_code == 403


def test_search_filters(client, auth_headers, seeded):
    headers = auth_headers('buyer')

    by_text = client.get('/marketplace/listings', params={'q': 'denim'}, headers=headers).json()
    by_price = client.get(
        '/marketplace/listings', params={'minPrice': 100, 'maxPrice': 200}, headers=headers
    ).json()
    by_condition = client.get(
        '/marketplace/listings', params=[('condition', 'good'), ('condition', 'fair')], headers=headers
    ).json()

    assert [x['id'] for x in by_text['listings']] == [seeded['jacket']['id']]
    assert [x['id'] for x in by_price['listings']] == [seeded['shirt']['id']]
    assert {x['id'] for x in by_condition['listings']} == {seeded['boots']['id'], seeded['jacket']['id']}


def test_search_sort_by_price(client, auth_headers, seeded):
    response = client.get('/marketplace/listings', params={'sortBy': 'price_low'}, headers=auth_headers('buyer'))

    assert [x['price'] for x in response.json()['listings']] == [80.0, 120.0, 300.0]


def test_search_pagination(client, auth_headers, seeded):
    response = client.get(
        '/marketplace/listings', params={'sortBy': 'price_high', 'limit': 2, 'page': 2}, headers=auth_headers()
    )

    body = response.json()
    assert body['pagination'] == {'page': 2, 'limit': 2, 'total': 3, 'totalPages': 2}
    assert [x['price'] for x in body['listings']] == [80.0]


def test_search_rejects_inverted_price_range(client, auth_headers):
    response = client.get('/marketplace/listings', params={'minPrice': 200, 'maxPrice': 100}, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'VALIDATION_ERROR'


def test_search_hides_inactive_listings(client, auth_headers, seeded):
    seller = auth_headers('seller')
    client.patch(f'/marketplace/listings/{seeded["boots"]["id"]}/status', json={'status': 'sold'}, headers=seller)

    public = client.get('/marketplace/listings', headers=auth_headers('buyer')).json()
    own = client.get('/marketplace/sellers/seller/listings', headers=seller).json()
    others_view = client.get('/marketplace/sellers/seller/listings', headers=auth_headers('buyer')).json()

    assert public['pagination']['total'] == 2
    assert own['pagination']['total'] == 3
    assert others_view['pagination']['total'] == 2


def test_views_count_only_other_users(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']

    client.get(f'/marketplace/listings/{listing_id}', headers=auth_headers('seller'))
    client.get(f'/marketplace/listings/{listing_id}', headers=auth_headers('buyer'))
    response = client.get(f'/marketplace/listings/{listing_id}', headers=auth_headers('other'))

    assert response.json()['views'] == 2


def test_like_toggles(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']
    headers = auth_headers('buyer')

    first = client.post(f'/marketplace/listings/{listing_id}/like', headers=headers).json()
    second = client.post(f'/marketplace/listings/{listing_id}/like', headers=headers).json()

    assert first == {'liked': True, 'likesCount': 1}
    assert second == {'liked': False, 'likesCount': 0}


def test_only_seller_updates(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']

    forbidden = client.patch(f'/marketplace/listings/{listing_id}', json={'price': 1}, headers=auth_headers('buyer'))
    updated = client.patch(f'/marketplace/listings/{listing_id}', json={'price': 99.9}, headers=auth_headers('seller'))

    assert forbidden.status_code == 403
    assert updated.json()['price'] == 99.9


def test_sold_listing_is_locked(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']
    seller = auth_headers('seller')
    client.patch(f'/marketplace/listings/{listing_id}/status', json={'status': 'sold'}, headers=seller)

    edit = client.patch(f'/marketplace/listings/{listing_id}', json={'price': 10}, headers=seller)
    reopen = client.patch(f'/marketplace/listings/{listing_id}/status', json={'status': 'active'}, headers=seller)

    assert edit.status_code == 400
    assert reopen.status_code == 400


def test_inactive_listing_can_be_reactivated(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']
    seller = auth_headers('seller')
    client.patch(f'/marketplace/listings/{listing_id}/status', json={'status': 'inactive'}, headers=seller)

    edit = client.patch(f'/marketplace/listings/{listing_id}', json={'price': 45}, headers=seller)
    reopen = client.patch(f'/marketplace/listings/{listing_id}/status', json={'status': 'active'}, headers=seller)

    assert edit.status_code == 200
    assert edit.json()['price'] == 45
    assert reopen.status_code == 200
    assert reopen.json()['status'] == 'active'


def test_unknown_listing_status_is_rejected(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']

    response = client.patch(
        f'/marketplace/listings/{listing_id}/status', json={'status': 'removed'}, headers=auth_headers('seller')
    )

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'VALIDATION_ERROR'


def test_delete_listing(client, auth_headers, seeded):
    listing_id = seeded['shirt']['id']
    client.post(f'/marketplace/listings/{listing_id}/like', headers=auth_headers('buyer'))

    response = client.delete(f'/marketplace/listings/{listing_id}', headers=auth_headers('seller'))

    assert response.status_code == 204
    assert client.get(f'/marketplace/listings/{listing_id}', headers=auth_headers('buyer')).status_code == 404
