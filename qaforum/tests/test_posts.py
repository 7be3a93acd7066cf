from datetime import datetime, timedelta

import pytest
from sqlalchemy import event, select, func

from qaforum.models.posts import Post
from qaforum.models.comments import Comment

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0)


async def _seed_posts(sessions, author_id, count):
    async with sessions() as s:
        for i in range(count):
            s.add(Post(title=f'post {i}', content=f'body {i}', author_id=author_id,
                       created_at=BASE_TIME + timedelta(minutes=i)))
        await s.commit()


async def _seed_comments(sessions, post_id, author_id, count):
    async with sessions() as s:
        for i in range(count):
            s.add(Comment(content=f'comment {i}', post_id=post_id, author_id=author_id,
                          created_at=BASE_TIME + timedelta(minutes=i)))
        await s.commit()


async def _first_post_id(sessions):
    async with sessions() as s:
        return await s.scalar(select(Post.post_id).order_by(Post.post_id))


async def _comment_count(sessions, post_id):
    async with sessions() as s:
        return await s.scalar(select(func.count()).select_from(Comment).where(Comment.post_id == post_id))


class TestListing:

    @pytest.mark.asyncio
    async def test_first_page_of_twelve(self, client, sessions, make_user):
        uid = await make_user('writer')
        await _seed_posts(sessions, uid, 12)

        r = await client.get('/api/posts', params={'page': 1, 'limit': 5})
        assert r.status_code == 200, r.text
        data = r.json()['data']
        assert [p['title'] for p in data['posts']] == ['post 11', 'post 10', 'post 9', 'post 8', 'post 7']
        assert data['pagination'] == {'currentPage': 1, 'pageSize': 5, 'totalPages': 3, 'totalPosts': 12}

        newest = data['posts'][0]
        assert newest['author'] == {'user_id': uid, 'username': 'writer'}
        assert newest['created_at'] == '2024-05-01 04:11:00'

    @pytest.mark.asyncio
    async def test_last_page_and_defaults(self, client, sessions, make_user):
        uid = await make_user('writer')
        await _seed_posts(sessions, uid, 12)

        last = await client.get('/api/posts', params={'page': 3, 'limit': 5})
        assert [p['title'] for p in last.json()['data']['posts']] == ['post 1', 'post 0']

        default = await client.get('/api/posts')
        assert len(default.json()['data']['posts']) == 5
        assert default.json()['data']['pagination']['currentPage'] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('params', [{'page': -2}, {'limit': -1}, {'limit': 21}])
    async def test_bad_paging_parameters(self, client, params):
        r = await client.get('/api/posts', params=params)
        assert r.status_code == 400
        assert r.json()['success'] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize('params', [{'page': 0}, {'limit': 0}, {'page': 'abc'}, {'limit': 'ten'}])
    async def test_zero_or_non_numeric_paging_falls_back_to_defaults(self, client, params):
        r = await client.get('/api/posts', params=params)
        assert r.status_code == 200, r.text
        pagination = r.json()['data']['pagination']
        assert pagination['currentPage'] == 1
        assert pagination['pageSize'] == 5

    @pytest.mark.asyncio
    async def test_empty_store(self, client):
        r = await client.get('/api/posts')
        assert r.json()['data'] == {
            'posts': [],
            'pagination': {'currentPage': 1, 'pageSize': 5, 'totalPages': 0, 'totalPosts': 0},
        }

    @pytest.mark.asyncio
    async def test_missing_author_shows_anonymous(self, client, sessions):
        async with sessions() as s:
            s.add(Post(title='orphan', content='c', author_id=None, created_at=BASE_TIME))
            await s.commit()
        post_id = await _first_post_id(sessions)

        r = await client.get(f'/api/posts/{post_id}')
        assert r.status_code == 200
        assert r.json()['data']['post']['author'] == {'user_id': None, 'username': 'anonymous'}

    @pytest.mark.asyncio
    async def test_detail(self, client, sessions, make_user):
        uid = await make_user('writer')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)

        r = await client.get(f'/api/posts/{post_id}')
        post = r.json()['data']['post']
        assert post['post_id'] == post_id
        assert post['title'] == 'post 0'
        assert post['created_at'] == '2024-05-01 04:00:00'


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_and_list(self, client, make_user):
        uid = await make_user('asker')
        r = await client.post('/api/posts', json={'title': 'How?', 'content': 'Like this?', 'author_id': uid})
        assert r.status_code == 200, r.text
        assert r.json()['success'] is True

        posts = (await client.get('/api/posts')).json()['data']['posts']
        assert len(posts) == 1
        assert posts[0]['title'] == 'How?'
        assert posts[0]['author']['username'] == 'asker'

    @pytest.mark.asyncio
    async def test_unknown_author_forbidden(self, client):
        r = await client.post('/api/posts', json={'title': 't', 'content': 'c', 'author_id': 404})
        assert r.status_code == 403

    @pytest.mark.asyncio
    @pytest.mark.parametrize('payload', [
        {'content': 'c', 'author_id': 1},
        {'title': 't', 'author_id': 1},
        {'title': 't', 'content': 'c'},
        {'title': '', 'content': 'c', 'author_id': 1},
        {'title': 'x' * 201, 'content': 'c', 'author_id': 1},
    ])
    async def test_invalid_payload(self, client, payload):
        r = await client.post('/api/posts', json=payload)
        assert r.status_code == 400


class TestDelete:

    @pytest.mark.asyncio
    async def test_author_deletes_post_and_its_comments(self, client, sessions, make_user):
        uid = await make_user('owner')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)
        await _seed_comments(sessions, post_id, uid, 4)

        r = await client.request('DELETE', f'/api/posts/{post_id}', json={'operator_id': uid})
        assert r.status_code == 200, r.text
        assert (await client.get(f'/api/posts/{post_id}')).status_code == 404
        assert await _comment_count(sessions, post_id) == 0

    @pytest.mark.asyncio
    async def test_admin_deletes_any_post(self, client, sessions, make_user):
        uid = await make_user('owner')
        admin = await make_user('boss', role='admin')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)

        r = await client.request('DELETE', f'/api/posts/{post_id}', json={'operator_id': admin})
        assert r.status_code == 200

    @pytest.mark.asyncio
    async def test_other_user_forbidden_and_post_remains(self, client, sessions, make_user):
        uid = await make_user('owner')
        other = await make_user('intruder')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)
        await _seed_comments(sessions, post_id, uid, 2)

        r = await client.request('DELETE', f'/api/posts/{post_id}', json={'operator_id': other})
        assert r.status_code == 403
        assert (await client.get(f'/api/posts/{post_id}')).status_code == 200
        assert await _comment_count(sessions, post_id) == 2

    @pytest.mark.asyncio
    async def test_unknown_operator_forbidden(self, client, sessions, make_user):
        uid = await make_user('owner')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)

        r = await client.request('DELETE', f'/api/posts/{post_id}', json={'operator_id': 9999})
        assert r.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_post(self, client, make_user):
        uid = await make_user('owner')
        r = await client.request('DELETE', '/api/posts/777', json={'operator_id': uid})
        assert r.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_operator_id(self, client):
        r = await client.request('DELETE', '/api/posts/1', json={})
        assert r.status_code == 400

    @pytest.mark.asyncio
    async def test_failure_midway_changes_nothing(self, client, database, sessions, make_user):
        uid = await make_user('owner')
        await _seed_posts(sessions, uid, 1)
        post_id = await _first_post_id(sessions)
        await _seed_comments(sessions, post_id, uid, 3)

        def fail_on_post_delete(conn, cursor, statement, parameters, context, executemany):
            if statement.lstrip().upper().startswith('DELETE FROM POSTS'):
                raise RuntimeError('simulated outage')

        engine = database.engine.sync_engine
        event.listen(engine, 'before_cursor_execute', fail_on_post_delete)
        try:
            r = await client.request('DELETE', f'/api/posts/{post_id}', json={'operator_id': uid})
        finally:
            event.remove(engine, 'before_cursor_execute', fail_on_post_delete)

        assert r.status_code == 500
        assert 'simulated outage' in r.json()['message']
        assert (await client.get(f'/api/posts/{post_id}')).status_code == 200
        assert await _comment_count(sessions, post_id) == 3
