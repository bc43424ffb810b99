from bingo.services.games.ledger import InMemoryLedger
from conftest import starting_balances


def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'connected' for pkt in received)

    # Join a room and expect a joined ack
    sio_client.emit('join_game', {'game_id': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'game:1' for pkt in received)


def test_join_requires_game_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_game_events_reach_the_room(flask_app, sio_client, client, clock):
    # keep the Socket.IO notifier, but control time and balances
    registry = flask_app.extensions['bingo']
    registry.clock = clock
    registry.ledger = InMemoryLedger(starting_balances())

    res = client.post('/api/games/create', json={'creator': 'alice'})
    game_id = res.get_json()['id']
    created = sio_client.get_received('/ws')
    assert any(e['name'] == 'session_created' and e['args'][0]['id'] == game_id for e in created)

    sio_client.emit('join_game', {'game_id': game_id}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    client.post(f'/api/games/{game_id}/join', json={'participant': 'bob'})
    clock.advance(60)
    number = client.post(f'/api/games/{game_id}/draw', json={'caller': 'alice'}).get_json()['number']

    events = sio_client.get_received('/ws')
    names = [e['name'] for e in events]
    assert 'participant_joined' in names
    drawn = [e['args'][0] for e in events if e['name'] == 'number_drawn']
    assert drawn == [{'id': game_id, 'number': number}]
