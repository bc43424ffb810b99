import logging
import threading
import time
from contextlib import contextmanager
from typing import Dict, List, Optional

from flask import current_app

from bingo import db
from bingo.models import BingoGame, Player
from bingo.notifications import NotificationSink
from .errors import SessionNotFound
from .ledger import ledger_from_config
from .randomness import provider_from_config
from .session import GameSession
from .settings import GameSettings


class SessionRegistry:
    """All games of one app, plus the collaborators they share.

    Mutating calls for a game run under that game's lock, so joins, draws,
    claims and cancellation on one game never interleave. Different games
    proceed in parallel.
    """

    def __init__(self, ledger=None, randomness=None, notifier=None, clock=None, settings=None):
        self.ledger = ledger
        self.randomness = randomness
        self.notifier = notifier or NotificationSink()
        self.clock = clock or time.time
        self.settings = settings or GameSettings()
        self.logger = logging.getLogger(__name__)
        self._locks: Dict[int, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._create_lock = threading.Lock()

    def init_app(self, app):
        cfg = app.config
        self.settings = GameSettings.from_config(cfg)
        if self.ledger is None:
            self.ledger = ledger_from_config(cfg.get('LEDGER_BACKEND', 'accounts'))
        if self.randomness is None:
            self.randomness = provider_from_config(cfg.get('RANDOM_SEED'))
        self.logger = app.logger
        app.extensions['bingo'] = self

    def now(self) -> float:
        return float(self.clock())

    @contextmanager
    def _locked(self, game_id):
        """Hold the lock of a live game for the duration of the block.

        Unknown and cancelled ids fail before any lock exists. Ended games
        no longer change, so their calls run unlocked, and a game's lock is
        dropped as soon as it ends or is cancelled.
        """
        game = self._load(game_id)
        if game.end_time:
            yield
            return
        with self._locks_guard:
            lock = self._locks.setdefault(game.id, threading.Lock())
        with lock:
            try:
                yield
            finally:
                if game.end_time or game.cancelled:
                    self._release(game.id)

    def _release(self, game_id):
        with self._locks_guard:
            self._locks.pop(game_id, None)

    def _load(self, game_id) -> BingoGame:
        # populate_existing: another thread may have committed since this
        # session last saw the row
        game = db.session.get(BingoGame, game_id, populate_existing=True) if game_id else None
        if game is None or game.cancelled:
            raise SessionNotFound(game_id=game_id)
        return game

    def _session(self, game_id) -> GameSession:
        return GameSession(self._load(game_id), self.ledger, self.randomness, self.notifier, self.logger)

    # ---- mutating operations ----

    def create(self, creator: str) -> BingoGame:
        terms = self.settings.snapshot()
        with self._create_lock:
            session = GameSession.create(
                creator, terms, self.now(),
                self.ledger, self.randomness, self.notifier, self.logger,
            )
        return session.game

    def join(self, game_id: int, participant: str) -> BingoGame:
        with self._locked(game_id):
            session = self._session(game_id)
            session.join(participant, self.now())
            return session.game

    def cancel(self, game_id: int, caller: str) -> bool:
        with self._locked(game_id):
            return self._session(game_id).cancel(caller, self.now())

    def draw_number(self, game_id: int, caller: str) -> int:
        with self._locked(game_id):
            return self._session(game_id).draw_number(caller, self.now())

    def shout_bingo(self, game_id: int, caller: str) -> BingoGame:
        with self._locked(game_id):
            session = self._session(game_id)
            session.shout_bingo(caller, self.now())
            return session.game

    # ---- queries ----

    def get_session(self, game_id: int) -> BingoGame:
        return self._load(game_id)

    def get_board(self, game_id: int, participant: str) -> Optional[List[List[int]]]:
        game = self._load(game_id)
        player = Player.query.filter_by(game_id=game.id, participant=participant).first()
        return player.grid if player else None

    def list_sessions(self, page_size: int, page_index: int) -> List[BingoGame]:
        """Games in creation order, one page at a time. Out-of-range pages are empty."""
        if page_size <= 0 or page_index < 0:
            return []
        start = page_size * page_index
        return (
            BingoGame.query.filter_by(cancelled=False)
            .order_by(BingoGame.id)
            .offset(start)
            .limit(page_size)
            .all()
        )

    # ---- administration ----

    def update_settings(self, admin_key: str, **changes):
        terms = self.settings.update(admin_key, **changes)
        self.logger.info(f"[settings] entry_fee={terms.entry_fee} join={terms.join_duration}s turn={terms.turn_duration}s")
        return terms

    def set_entry_fee(self, value: int, admin_key: str):
        terms = self.settings.set_entry_fee(value, admin_key)
        self.logger.info(f"[settings] entry_fee={terms.entry_fee}")
        return terms

    def set_join_duration(self, value: int, admin_key: str):
        terms = self.settings.set_join_duration(value, admin_key)
        self.logger.info(f"[settings] join_duration={terms.join_duration}s")
        return terms

    def set_turn_duration(self, value: int, admin_key: str):
        terms = self.settings.set_turn_duration(value, admin_key)
        self.logger.info(f"[settings] turn_duration={terms.turn_duration}s")
        return terms


def get_registry() -> SessionRegistry:
    return current_app.extensions['bingo']
