from flask import Blueprint, jsonify

from voteparty import get_game

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the VoteParty game server!'})

@main.route('/api/state', methods=['GET'])
def get_state():
    """Public game state, same payload as the ``state_update`` event."""
    return jsonify(get_game().snapshot())
