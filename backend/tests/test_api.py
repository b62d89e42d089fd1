def test_index_counts_live_rooms(flask_app, client):
    res = client.get('/')
    assert res.status_code == 200
    assert res.get_json()['rooms'] == 0

    flask_app.extensions['slopeshot'].registry.create_room('sid-a', 'Alice')
    assert client.get('/').get_json()['rooms'] == 1


def test_guest_login_flow(client):
    assert client.get('/check_login').status_code == 401

    res = client.post('/login', json={'name': '  Alice  '})
    assert res.status_code == 200
    data = res.get_json()
    assert data['success'] is True
    assert data['user']['name'] == 'Alice'

    res = client.get('/check_login')
    assert res.status_code == 200
    assert res.get_json()['user'] == data['user']

    assert client.post('/logout').get_json() == {'success': True}
    assert client.get('/check_login').status_code == 401


def test_login_requires_a_name(client):
    res = client.post('/login', json={})
    assert res.status_code == 400
    assert res.get_json()['success'] is False
    assert client.post('/login', json={'name': 'x' * 40}).status_code == 400


def test_sample_round_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['sample-round', '--grid-max', '5', '--count', '3'])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert len(lines) == 3
    assert all(line.startswith('target=(') and 'slope=' in line for line in lines)
