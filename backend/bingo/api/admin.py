from flask import Blueprint, jsonify, request
from bingo import db
from bingo.services.games.registry import get_registry


admin = Blueprint('admin', __name__)

SETTINGS_FIELDS = ('entry_fee', 'join_duration', 'turn_duration')


def _admin_key() -> str:
    return request.headers.get('X-Admin-Key') or ''


@admin.route('/settings', methods=['GET'])
def get_settings():
    return jsonify(get_registry().settings.to_dict())


@admin.route('/settings', methods=['PUT'])
def update_settings():
    """
    Changes the entry fee and/or phase durations for games created from now on.
    """
    data = request.get_json(silent=True) or {}
    changes = {}
    for field in SETTINGS_FIELDS:
        if field not in data:
            continue
        try:
            changes[field] = int(data[field])
        except (TypeError, ValueError):
            return jsonify({'error': f'{field} must be an integer'}), 400
    if not changes:
        return jsonify({'error': f'One of {", ".join(SETTINGS_FIELDS)} is required'}), 400

    registry = get_registry()
    registry.update_settings(_admin_key(), **changes)
    return jsonify(registry.settings.to_dict())


@admin.route('/accounts/<string:holder>', methods=['GET'])
def get_account(holder):
    return jsonify({'holder': holder, 'balance': get_registry().ledger.balance_of(holder)})


@admin.route('/accounts/<string:holder>/credit', methods=['POST'])
def credit_account(holder):
    """
    Tops up a participant's balance so they can pay entry fees.
    """
    registry = get_registry()
    registry.settings.require_admin(_admin_key())
    data = request.get_json(silent=True) or {}
    try:
        amount = int(data.get('amount'))
    except (TypeError, ValueError):
        return jsonify({'error': 'amount must be an integer'}), 400
    if amount <= 0:
        return jsonify({'error': 'amount must be positive'}), 400

    registry.ledger.credit(holder, amount)
    db.session.commit()
    registry.logger.info(f"[credit] holder={holder} amount={amount}")
    return jsonify({'holder': holder, 'balance': registry.ledger.balance_of(holder)})
