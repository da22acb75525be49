POST = {
    'postType': 'outfit',
    'title': 'Rainy Day Layers!',
    'description': 'Trench over knit',
    'imageUrls': ['https://cdn.example.com/p/1.jpg'],
    'tags': ['autumn'],
}


def create_post(client, headers, **overrides):
    response = client.post('/social/posts', json={**POST, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_post_slug_from_title(client, auth_headers):
    post = create_post(client, auth_headers('alice'))

    assert post['slug'].startswith('rainy-day-layers-')
    assert len(post['slug']) == len('rainy-day-layers-') + 8
    assert post['likesCount'] == 0


def test_post_without_title_uses_type(client, auth_headers):
    post = create_post(client, auth_headers('alice'), title=None, postType='inspiration')

    assert post['slug'].startswith('inspiration-')


def test_post_requires_images(client, auth_headers):
    response = client.post('/social/posts', json={**POST, 'imageUrls': []}, headers=auth_headers())

    assert response.status_code == 400


def test_visibility_rules(client, auth_headers):
    alice, bob = auth_headers('alice'), auth_headers('bob')
    followers_only = create_post(client, alice, visibility='followers')
    private = create_post(client, alice, visibility='private')

    assert client.get(f'/social/posts/{followers_only["id"]}', headers=bob).status_code == 404

    client.post('/social/users/alice/follow', headers=bob)

    assert client.get(f'/social/posts/{followers_only["id"]}', headers=bob).status_code == 200
    assert client.get(f'/social/posts/{private["id"]}', headers=bob).status_code == 404
    assert client.get(f'/social/posts/{private["id"]}', headers=alice).status_code == 200


def test_user_posts_respect_visibility(client, auth_headers):
    alice = auth_headers('alice')
    create_post(client, alice)
    create_post(client, alice, visibility='private')

    own = client.get('/social/users/alice/posts', headers=alice).json()
    stranger = client.get('/social/users/alice/posts', headers=auth_headers('bob')).json()

    assert own['pagination']['total'] == 2
    assert stranger['pagination']['total'] == 1


def test_update_and_delete_post(client, auth_headers):
    alice = auth_headers('alice')
    post = create_post(client, alice)

    forbidden = client.patch(f'/social/posts/{post["id"]}', json={'title': 'Mine'}, headers=auth_headers('bob'))
    updated = client.patch(f'/social/posts/{post["id"]}', json={'tags': ['rain', 'trench']}, headers=alice)
    deleted = client.delete(f'/social/posts/{post["id"]}', headers=alice)

    assert forbidden.status_code == 403
    assert updated.json()['tags'] == ['rain', 'trench']
    assert updated.json()['slug'] == post['slug']
    assert deleted.status_code == 204
    assert client.get(f'/social/posts/{post["id"]}', headers=alice).status_code == 404


def test_like_toggle(client, auth_headers):
    post = create_post(client, auth_headers('alice'))
    bob = auth_headers('bob')

    assert client.post(f'/social/posts/{post["id"]}/like', headers=bob).json() == {'liked': True, 'likesCount': 1}
    assert client.post(f'/social/posts/{post["id"]}/like', headers=bob).json() == {'liked': False, 'likesCount': 0}


def test_comments(client, auth_headers):
    alice, bob, carol = auth_headers('alice'), auth_headers('bob'), auth_headers('carol')
    post = create_post(client, alice)

    comment = client.post(f'/social/posts/{post["id"]}/comments', json={'content': '  Love it  '}, headers=bob)
    assert comment.status_code == 201
    assert comment.json()['content'] == 'Love it'

    listing = client.get(f'/social/posts/{post["id"]}/comments', headers=carol).json()
    assert listing['pagination']['total'] == 1
    assert client.get(f'/social/posts/{post["id"]}', headers=alice).json()['commentsCount'] == 1

    comment_id = comment.json()['id']
    assert client.delete(f'/social/comments/{comment_id}', headers=carol).status_code == 403
    # Post author moderates comments on their post
    assert client.delete(f'/social/comments/{comment_id}', headers=alice).status_code == 204
    assert client.get(f'/social/posts/{post["id"]}', headers=alice).json()['commentsCount'] == 0


def test_empty_comment_rejected(client, auth_headers):
    post = create_post(client, auth_headers('alice'))

    response = client.post(f'/social/posts/{post["id"]}/comments', json={'content': ''}, headers=auth_headers('bob'))

    assert response.status_code == 400


def test_follow_rules(client, auth_headers):
    bob = auth_headers('bob')

    first = client.post('/social/users/alice/follow', headers=bob)
    again = client.post('/social/users/alice/follow', headers=bob)
    self_follow = client.post('/social/users/bob/follow', headers=bob)

    assert first.status_code == 201
    assert first.json() == {'followerId': 'bob', 'followingId': 'alice', 'following': True}
    assert again.status_code == 409
    assert self_follow.status_code == 400


def test_unfollow(client, auth_headers):
    bob = auth_headers('bob')
    client.post('/social/users/alice/follow', headers=bob)

    assert client.delete('/social/users/alice/follow', headers=bob).json()['following'] is False
    assert client.delete('/social/users/alice/follow', headers=bob).status_code == 404


def test_followers_and_following(client, auth_headers):
    client.post('/social/users/alice/follow', headers=auth_headers('bob'))
    client.post('/social/users/alice/follow', headers=auth_headers('carol'))
    client.post('/social/users/carol/follow', headers=auth_headers('alice'))

    followers = client.get('/social/users/alice/followers', headers=auth_headers()).json()
    following = client.get('/social/users/alice/following', headers=auth_headers()).json()

    assert set(followers['userIds']) == {'bob', 'carol'}
    assert following['userIds'] == ['carol']


def test_feed_shows_followed_and_own_posts(client, auth_headers):
    alice, bob, carol = auth_headers('alice'), auth_headers('bob'), auth_headers('carol')
    own = create_post(client, bob)
    followed = create_post(client, alice, visibility='followers')
    create_post(client, alice, visibility='private')
    create_post(client, carol)
    client.post('/social/users/alice/follow', headers=bob)

    feed = client.get('/social/feed', headers=bob).json()

    assert {p['id'] for p in feed['posts']} == {own['id'], followed['id']}
