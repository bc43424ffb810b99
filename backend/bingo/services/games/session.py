import json
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from bingo import db
from bingo.models import BingoGame, Player, PHASE_CANCELLED, PHASE_DRAW, PHASE_ENDED, PHASE_JOIN
from .boards import generate_board
from .errors import (
    AlreadyJoined,
    NoWinningPattern,
    NotCreator,
    NotParticipant,
    SessionNotActive,
    SessionNotJoinable,
    LedgerError,
    TooEarly,
)
from .evaluator import is_winning_board
from .settings import SessionTerms


class GameSession:
    """State machine for a single persisted game.

    Callers must hold the game's lock (see SessionRegistry) for the whole
    call. Every operation checks its guards first, then performs the ledger
    movement, then updates the row and commits. A failure at any step leaves
    the game as it was.
    """

    def __init__(self, game: BingoGame, ledger, randomness, notifier, logger):
        self.game = game
        self.ledger = ledger
        self.randomness = randomness
        self.notifier = notifier
        self.logger = logger

    @classmethod
    def create(cls, creator: str, terms: SessionTerms, now: float,
               ledger, randomness, notifier, logger) -> 'GameSession':
        game = BingoGame(
            creator=creator,
            entry_fee=terms.entry_fee,
            join_duration=terms.join_duration,
            turn_duration=terms.turn_duration,
            start_time=now,
            last_draw_time=now,
            end_time=0,
            pot=0,
            cancelled=False,
            drawn_numbers='[]',
        )
        session = cls(game, ledger, randomness, notifier, logger)
        session._transfer(ledger.deposit, creator, terms.entry_fee)
        try:
            db.session.add(game)
            db.session.flush()  # allocates the id the board derivation needs
            session._seat(creator, now)
            db.session.commit()
        except Exception:
            session._rollback_deposit(creator, terms.entry_fee)
            raise
        logger.info(f"[create] game={game.id} creator={creator} fee={game.entry_fee} join={game.join_duration}s turn={game.turn_duration}s")
        notifier.emit('session_created', {
            'id': game.id,
            'creator': creator,
            'fee': game.entry_fee,
            'join_duration': game.join_duration,
            'turn_duration': game.turn_duration,
            'start_time': game.start_time,
        }, game_id=game.id)
        return session

    # ---- guards ----

    def _require_creator(self, caller):
        if caller != self.game.creator:
            raise NotCreator(game_id=self.game.id)

    def _require_member(self, caller) -> Player:
        player = self._member(caller)
        if player is None:
            raise NotParticipant(game_id=self.game.id)
        return player

    def _member(self, participant) -> Optional[Player]:
        return Player.query.filter_by(game_id=self.game.id, participant=participant).first()

    # ---- helpers ----

    def _seat(self, participant, now):
        board = generate_board(self.game.id, participant, self.randomness, now)
        db.session.add(Player(game=self.game, participant=participant, board=json.dumps(board), joined_at=now))
        self.game.pot = (self.game.pot or 0) + self.game.entry_fee

    def _transfer(self, move, participant, amount):
        try:
            move(participant, amount)
        except LedgerError:
            # a refused movement may still have opened a write transaction
            db.session.rollback()
            raise

    def _rollback_deposit(self, participant, amount):
        game_id = self.game.id
        db.session.rollback()
        if not self.ledger.transactional:
            # The in-memory ledger is outside the transaction; hand the fee back.
            self.ledger.payout(participant, amount)
        self.logger.warning(f"[rollback] game={game_id} participant={participant} refunded={amount}")

    def _commit_after_payout(self, participant, amount):
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            if not self.ledger.transactional:
                self.logger.error(f"[ledger-desync] game={self.game.id} paid {amount} to {participant} but the game update failed")
            raise

    # ---- operations ----

    def join(self, participant: str, now: float) -> None:
        game = self.game
        if game.phase(now) != PHASE_JOIN:
            raise SessionNotJoinable(game_id=game.id)
        if self._member(participant) is not None:
            raise AlreadyJoined(game_id=game.id)

        self._transfer(self.ledger.deposit, participant, game.entry_fee)
        try:
            self._seat(participant, now)
            db.session.commit()
        except Exception:
            self._rollback_deposit(participant, game.entry_fee)
            raise
        self.logger.info(f"[join] game={game.id} participant={participant} pot={game.pot}")
        self.notifier.emit('participant_joined', {'id': game.id, 'participant': participant}, game_id=game.id)

    def cancel(self, caller: str, now: float) -> bool:
        """Refund and tombstone a game nobody else joined.

        Only possible once the join window has passed. When the game is not
        eligible this does nothing and returns False; callers re-read the
        game to learn its state.
        """
        game = self.game
        self._require_creator(caller)
        eligible = (
            not game.end_time
            and game.pot == game.entry_fee
            and now >= game.join_deadline
        )
        if not eligible:
            self.logger.info(f"[cancel-skip] game={game.id} pot={game.pot} phase={game.phase(now)}")
            return False

        self._transfer(self.ledger.payout, game.creator, game.pot)
        game.cancelled = True
        self._commit_after_payout(game.creator, game.pot)
        self.logger.info(f"[cancel] game={game.id} refunded={game.pot} to={game.creator}")
        self.notifier.emit('session_cancelled', {'id': game.id}, game_id=game.id)
        return True

    def draw_number(self, caller: str, now: float) -> int:
        game = self.game
        self._require_creator(caller)
        if game.phase(now) != PHASE_DRAW:
            raise SessionNotActive(game_id=game.id)
        next_draw_at = game.last_draw_time + game.turn_duration
        if now < next_draw_at:
            raise TooEarly(game_id=game.id, next_draw_at=next_draw_at)

        number = int(self.randomness.next())
        game.add_drawn(number)
        game.last_draw_time = now
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        self.logger.info(f"[draw] game={game.id} number={number} drawn={len(game.drawn_set())}")
        self.notifier.emit('number_drawn', {'id': game.id, 'number': number}, game_id=game.id)
        return number

    def shout_bingo(self, caller: str, now: float) -> None:
        game = self.game
        if game.phase(now) in (PHASE_ENDED, PHASE_CANCELLED):
            raise SessionNotActive(game_id=game.id)
        player = self._require_member(caller)
        if not is_winning_board(player.grid, game.drawn_set()):
            raise NoWinningPattern(game_id=game.id)

        pot = game.pot
        self._transfer(self.ledger.payout, caller, pot)
        game.end_time = now
        game.winner = caller
        self._commit_after_payout(caller, pot)
        self.logger.info(f"[bingo] game={game.id} winner={caller} pot={pot}")
        self.notifier.emit('session_ended', {'id': game.id, 'winner': caller}, game_id=game.id)
