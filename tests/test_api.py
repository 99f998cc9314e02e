def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_state_snapshot(client):
    res = client.get('/api/state')
    assert res.status_code == 200
    state = res.get_json()
    assert state['phase'] == 'LOBBY'
    assert state['round_index'] == 0
    assert state['tally'] == {'AI': 0, 'REAL': 0}
    assert state['total_rounds'] == 3
    assert state['player_count'] == 0
    assert state['result'] is None


def test_state_snapshot_follows_socket_joins(client, sio_client):
    sio_client.emit('join', {'name': 'Alice', 'session_id': 'tok-alice'})
    state = client.get('/api/state').get_json()
    assert state['player_count'] == 1


def test_hash_host_password_command(flask_app, hasher):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['hash-host-password', 's3cret'])
    assert result.exit_code == 0
    assert hasher.check_password_hash(result.output.strip(), 's3cret')


def test_check_catalog_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['check-catalog'])
    assert result.exit_code == 0
    assert '3 rounds' in result.output
    assert '/assets/q1.webp' in result.output
