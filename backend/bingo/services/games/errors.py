"""Error taxonomy for game sessions.

Every error raised by the session state machine derives from BingoError and
carries a stable ``code`` plus the HTTP status the API layer answers with.
Nothing is mutated before one of these is raised, so callers may simply retry
or report.
"""


class BingoError(Exception):
    code = 'bingo_error'
    status = 400
    message = 'Bingo operation failed'

    def __init__(self, message=None, **context):
        super().__init__(message or self.message)
        self.context = context

    def to_dict(self):
        payload = {'error': self.code, 'message': str(self)}
        payload.update(self.context)
        return payload


class SessionNotFound(BingoError):
    code = 'session_not_found'
    status = 404
    message = 'Game not found'


class SessionNotJoinable(BingoError):
    code = 'session_not_joinable'
    status = 409
    message = 'Game is not open for joining'


class AlreadyJoined(BingoError):
    code = 'already_joined'
    status = 409
    message = 'Participant already joined this game'


class NotCreator(BingoError):
    code = 'not_creator'
    status = 403
    message = 'Only the game creator may do this'


class NotParticipant(BingoError):
    code = 'not_participant'
    status = 403
    message = 'You are not a player in this game'


class SessionNotActive(BingoError):
    code = 'session_not_active'
    status = 409
    message = 'Game is not active'


class TooEarly(BingoError):
    code = 'too_early'
    status = 425
    message = 'It is not time to draw a number yet'


class NoWinningPattern(BingoError):
    code = 'no_winning_pattern'
    status = 422
    message = 'Board has no winning pattern yet'


class InvalidConfiguration(BingoError):
    code = 'invalid_configuration'
    status = 400
    message = 'Configuration value is out of policy'


class NotAdministrator(BingoError):
    code = 'not_administrator'
    status = 403
    message = 'Administrator key required'


class LedgerError(BingoError):
    code = 'ledger_error'
    status = 502


class InsufficientFunds(LedgerError):
    code = 'insufficient_funds'
    status = 402
    message = 'Insufficient balance for entry fee'


class TransferFailed(LedgerError):
    code = 'transfer_failed'
    status = 502
    message = 'Escrow transfer failed'
