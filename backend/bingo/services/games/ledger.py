import threading
from typing import Dict, Optional

from sqlalchemy import update

from bingo import db
from bingo.models import Account
from .errors import InsufficientFunds, TransferFailed

ESCROW_HOLDER = '__escrow__'


class Ledger:
    """Escrow for entry fees.

    ``deposit`` moves an amount from a participant into escrow, ``payout``
    moves it back out. Both raise a LedgerError and leave balances untouched
    when the movement cannot happen.

    ``transactional`` ledgers write through the SQLAlchemy session, so their
    movements commit or roll back together with the game row.
    """

    transactional = False

    def deposit(self, participant: str, amount: int) -> None:
        raise NotImplementedError

    def payout(self, participant: str, amount: int) -> None:
        raise NotImplementedError

    def credit(self, participant: str, amount: int) -> None:
        raise NotImplementedError

    def balance_of(self, participant: str) -> int:
        raise NotImplementedError

    def escrow_balance(self) -> int:
        return self.balance_of(ESCROW_HOLDER)


class InMemoryLedger(Ledger):
    def __init__(self, balances: Optional[Dict[str, int]] = None):
        self._balances: Dict[str, int] = dict(balances or {})
        self._lock = threading.Lock()

    def deposit(self, participant, amount):
        with self._lock:
            balance = self._balances.get(participant, 0)
            if balance < amount:
                raise InsufficientFunds(participant=participant, amount=amount, balance=balance)
            self._balances[participant] = balance - amount
            self._balances[ESCROW_HOLDER] = self._balances.get(ESCROW_HOLDER, 0) + amount

    def payout(self, participant, amount):
        with self._lock:
            escrow = self._balances.get(ESCROW_HOLDER, 0)
            if escrow < amount:
                raise TransferFailed(participant=participant, amount=amount)
            self._balances[ESCROW_HOLDER] = escrow - amount
            self._balances[participant] = self._balances.get(participant, 0) + amount

    def credit(self, participant, amount):
        with self._lock:
            self._balances[participant] = self._balances.get(participant, 0) + amount

    def balance_of(self, participant):
        with self._lock:
            return self._balances.get(participant, 0)


class AccountLedger(Ledger):
    """Balances kept in the ``account`` table. Callers own the commit.

    Each movement is a single conditional UPDATE evaluated by the database,
    so games running in parallel can share the escrow row, and a participant
    cannot spend the same balance in two games at once.
    """

    transactional = True

    def _adjust(self, holder, delta, floor=None) -> bool:
        stmt = update(Account).where(Account.holder == holder)
        if floor is not None:
            stmt = stmt.where(Account.balance >= floor)
        stmt = stmt.values(balance=Account.balance + delta).execution_options(synchronize_session=False)
        return db.session.execute(stmt).rowcount > 0

    def _add(self, holder, amount):
        if not self._adjust(holder, amount):
            db.session.add(Account(holder=holder, balance=amount))
            db.session.flush()

    def deposit(self, participant, amount):
        if not self._adjust(participant, -amount, floor=amount):
            raise InsufficientFunds(participant=participant, amount=amount, balance=self.balance_of(participant))
        self._add(ESCROW_HOLDER, amount)

    def payout(self, participant, amount):
        if not self._adjust(ESCROW_HOLDER, -amount, floor=amount):
            raise TransferFailed(participant=participant, amount=amount)
        self._add(participant, amount)

    def credit(self, participant, amount):
        self._add(participant, amount)

    def balance_of(self, participant):
        balance = db.session.query(Account.balance).filter_by(holder=participant).scalar()
        return balance or 0


def ledger_from_config(backend: str) -> Ledger:
    if backend == 'memory':
        return InMemoryLedger()
    if backend == 'accounts':
        return AccountLedger()
    raise ValueError(f"Unknown LEDGER_BACKEND: {backend!r}")
