from bingo import db
import json

PHASE_JOIN = 'join'
PHASE_DRAW = 'draw'
PHASE_ENDED = 'ended'
PHASE_CANCELLED = 'cancelled'


class Account(db.Model):
    __tablename__ = 'account'
    id = db.Column(db.Integer, primary_key=True)
    holder = db.Column(db.String(64), unique=True, nullable=False, index=True)
    balance = db.Column(db.BigInteger, default=0, nullable=False)


class Player(db.Model):
    __tablename__ = 'player'
    __table_args__ = (
        db.UniqueConstraint('game_id', 'participant', name='uq_player_game_participant'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('bingo_game.id'), nullable=False, index=True)
    participant = db.Column(db.String(64), nullable=False)
    board = db.Column(db.Text, nullable=False)  # JSON-encoded 5x5 grid
    joined_at = db.Column(db.Float, nullable=False)
    game = db.relationship('BingoGame', back_populates='players')

    @property
    def grid(self):
        return json.loads(self.board)


class BingoGame(db.Model):
    __tablename__ = 'bingo_game'
    id = db.Column(db.Integer, primary_key=True)
    creator = db.Column(db.String(64), nullable=False, index=True)
    # Snapshot of the global settings at creation time
    entry_fee = db.Column(db.BigInteger, nullable=False)
    join_duration = db.Column(db.Integer, nullable=False)
    turn_duration = db.Column(db.Integer, nullable=False)
    start_time = db.Column(db.Float, nullable=False)
    last_draw_time = db.Column(db.Float, nullable=False)
    end_time = db.Column(db.Float, default=0, nullable=False)  # 0 while active
    pot = db.Column(db.BigInteger, default=0, nullable=False)
    winner = db.Column(db.String(64), nullable=True)
    cancelled = db.Column(db.Boolean, default=False, nullable=False)
    drawn_numbers = db.Column(db.Text, default='[]', nullable=False)  # JSON-encoded list
    players = db.relationship('Player', back_populates='game', order_by='Player.id')

    @property
    def join_deadline(self):
        return self.start_time + self.join_duration

    def phase(self, now):
        """Derive the phase from the stored timestamps; never cached."""
        if self.cancelled:
            return PHASE_CANCELLED
        if self.end_time:
            return PHASE_ENDED
        if now < self.join_deadline:
            return PHASE_JOIN
        return PHASE_DRAW

    def drawn_set(self):
        return set(json.loads(self.drawn_numbers or '[]'))

    def add_drawn(self, number):
        drawn = self.drawn_set()
        drawn.add(int(number))
        self.drawn_numbers = json.dumps(sorted(drawn))

    def to_dict(self, now=None):
        payload = {
            'id': self.id,
            'creator': self.creator,
            'entry_fee': self.entry_fee,
            'join_duration': self.join_duration,
            'turn_duration': self.turn_duration,
            'start_time': self.start_time,
            'last_draw_time': self.last_draw_time,
            'end_time': self.end_time,
            'pot': self.pot,
            'winner': self.winner,
            'cancelled': self.cancelled,
            'players': [p.participant for p in self.players],
            'drawn_numbers': sorted(self.drawn_set()),
        }
        if now is not None:
            payload['phase'] = self.phase(now)
        return payload
