import hmac
import threading
from dataclasses import asdict, dataclass

from .errors import InvalidConfiguration, NotAdministrator


@dataclass(frozen=True)
class SessionTerms:
    """Settings copied into a session when it is created."""
    entry_fee: int
    join_duration: int
    turn_duration: int


class GameSettings:
    """Process-wide entry fee and phase durations.

    Initialised from the Flask config and changed only through the
    admin-gated setters. Sessions take a snapshot at creation, so updates
    never reach games already running.
    """

    def __init__(self, entry_fee=10, join_duration=60, turn_duration=60,
                 min_entry_fee=1, min_duration=1, admin_key=None):
        self.min_entry_fee = int(min_entry_fee)
        self.min_duration = int(min_duration)
        self._admin_key = admin_key
        self._lock = threading.Lock()
        self._entry_fee = int(entry_fee)
        self._join_duration = int(join_duration)
        self._turn_duration = int(turn_duration)

    @classmethod
    def from_config(cls, config):
        return cls(
            entry_fee=config.get('ENTRY_FEE', 10),
            join_duration=config.get('JOIN_DURATION_SEC', 60),
            turn_duration=config.get('TURN_DURATION_SEC', 60),
            min_entry_fee=config.get('MIN_ENTRY_FEE', 1),
            min_duration=config.get('MIN_DURATION_SEC', 1),
            admin_key=config.get('ADMIN_KEY'),
        )

    def require_admin(self, admin_key):
        if not self._admin_key or not admin_key:
            raise NotAdministrator()
        if not hmac.compare_digest(str(admin_key), str(self._admin_key)):
            raise NotAdministrator()

    def snapshot(self) -> SessionTerms:
        with self._lock:
            terms = SessionTerms(self._entry_fee, self._join_duration, self._turn_duration)
        self.validate(terms)
        return terms

    def validate(self, terms: SessionTerms) -> None:
        if terms.entry_fee < self.min_entry_fee:
            raise InvalidConfiguration(f"Entry fee must be at least {self.min_entry_fee}", field='entry_fee')
        if terms.join_duration < self.min_duration:
            raise InvalidConfiguration(f"Join duration must be at least {self.min_duration}s", field='join_duration')
        if terms.turn_duration < self.min_duration:
            raise InvalidConfiguration(f"Turn duration must be at least {self.min_duration}s", field='turn_duration')

    def update(self, admin_key, **changes):
        """Apply several changes at once; nothing changes if any is invalid."""
        self.require_admin(admin_key)
        with self._lock:
            current = SessionTerms(self._entry_fee, self._join_duration, self._turn_duration)
            proposed = SessionTerms(**{**asdict(current), **{k: int(v) for k, v in changes.items()}})
            self.validate(proposed)
            self._entry_fee = proposed.entry_fee
            self._join_duration = proposed.join_duration
            self._turn_duration = proposed.turn_duration
            return proposed

    def set_entry_fee(self, value, admin_key):
        return self.update(admin_key, entry_fee=value)

    def set_join_duration(self, value, admin_key):
        return self.update(admin_key, join_duration=value)

    def set_turn_duration(self, value, admin_key):
        return self.update(admin_key, turn_duration=value)

    def to_dict(self):
        with self._lock:
            return {
                'entry_fee': self._entry_fee,
                'join_duration': self._join_duration,
                'turn_duration': self._turn_duration,
                'min_entry_fee': self.min_entry_fee,
                'min_duration': self.min_duration,
            }
