import pytest


@pytest.fixture
def admin(auth_headers):
    return auth_headers('admin-1', roles=['admin'])


@pytest.fixture
def standards(client, admin):
    created = {}
    for code, name in (('br', 'Brazil'), ('us', 'United States')):
        response = client.post('/admin/size-standards', json={'code': code, 'name': name}, headers=admin)
        assert response.status_code == 201, response.text
        created[code.upper()] = response.json()
    return created


def create_size(client, headers, **body):
    return client.post('/admin/sizes', json=body, headers=headers)


def test_non_admin_is_forbidden(client, auth_headers):
    response = client.get('/admin/sizes', headers=auth_headers('shopper'))

    assert response.status_code == 403
    assert response.json() == {'error': {'code': 'FORBIDDEN', 'message': 'Admin access required'}}


def test_admin_requires_authentication(client):
    assert client.post('/admin/size-standards', json={'code': 'EU', 'name': 'Europe'}).status_code == 401


def test_standard_codes_are_uppercased_and_unique(client, admin, standards):
    duplicate = client.post('/admin/size-standards', json={'code': ' Br ', 'name': 'Again'}, headers=admin)

    assert standards['BR']['code'] == 'BR'
    assert duplicate.status_code == 409
    assert duplicate.json()['error']['code'] == 'CONFLICT'


def test_create_size_with_conversions(client, admin, standards):
    response = create_size(
        client,
        admin,
        name='M',
        sortOrder=2,
        conversions=[{'standard': 'br', 'value': '40'}, {'standard': 'US', 'value': '8'}],
        validCategoryIds=[3, 1, 3],
    )

    assert response.status_code == 201
    size = response.json()
    assert size['sortOrder'] == 2
    assert size['conversions'] == [{'standard': 'BR', 'value': '40'}, {'standard': 'US', 'value': '8'}]
    assert size['validCategoryIds'] == [1, 3]
    assert size['isActive'] is True


def test_conversion_must_name_known_standard(client, admin, standards):
    response = create_size(client, admin, name='L', conversions=[{'standard': 'JP', 'value': '11'}])

    assert response.status_code == 400
    assert response.json()['error']['message'] == "Unknown size standard 'JP'"


def test_one_conversion_per_standard(client, admin, standards):
    response = create_size(
        client, admin, name='L', conversions=[{'standard': 'BR', 'value': '42'}, {'standard': 'br', 'value': '44'}]
    )

    assert response.status_code == 400


def test_size_names_are_unique(client, admin, standards):
    assert create_size(client, admin, name='S').status_code == 201
    assert create_size(client, admin, name='S').status_code == 409


def test_update_size(client, admin, standards):
    size_id = create_size(client, admin, name='S').json()['id']
    create_size(client, admin, name='XS')

    renamed_clash = client.patch(f'/admin/sizes/{size_id}', json={'name': 'XS'}, headers=admin)
    updated = client.patch(
        f'/admin/sizes/{size_id}',
        json={'conversions': [{'standard': 'US', 'value': '4'}], 'isActive': False},
        headers=admin,
    )

    assert renamed_clash.status_code == 409
    assert updated.json()['conversions'] == [{'standard': 'US', 'value': '4'}]
    assert updated.json()['isActive'] is False


def test_standard_in_use_cannot_be_deleted(client, admin, standards):
    create_size(client, admin, name='M', conversions=[{'standard': 'BR', 'value': '40'}])

    in_use = client.delete(f'/admin/size-standards/{standards["BR"]["id"]}', headers=admin)
    unused = client.delete(f'/admin/size-standards/{standards["US"]["id"]}', headers=admin)

    assert in_use.status_code == 409
    assert unused.status_code == 204


def test_delete_size(client, admin, standards):
    size_id = create_size(client, admin, name='M').json()['id']

    assert client.delete(f'/admin/sizes/{size_id}', headers=admin).status_code == 204
    assert client.delete(f'/admin/sizes/{size_id}', headers=admin).status_code == 404


def test_public_catalog_lists_active_entries(client, admin, standards):
    client.patch(f'/admin/size-standards/{standards["US"]["id"]}', json={'isActive': False}, headers=admin)
    create_size(client, admin, name='L', sortOrder=3)
    create_size(client, admin, name='S', sortOrder=1)
    create_size(client, admin, name='XXL', sortOrder=5, isActive=False)

    response = client.get('/sizes')

    assert response.status_code == 200
    body = response.json()
    assert [s['code'] for s in body['standards']] == ['BR']
    assert [s['name'] for s in body['sizes']] == ['S', 'L']
