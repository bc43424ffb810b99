import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///bingo.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Global game settings (snapshotted into each session at creation)
    ENTRY_FEE = int(os.environ.get('ENTRY_FEE', '10'))
    JOIN_DURATION_SEC = int(os.environ.get('JOIN_DURATION_SEC', '60'))
    TURN_DURATION_SEC = int(os.environ.get('TURN_DURATION_SEC', '60'))
    # Administrator policy floors
    MIN_ENTRY_FEE = int(os.environ.get('MIN_ENTRY_FEE', '1'))
    MIN_DURATION_SEC = int(os.environ.get('MIN_DURATION_SEC', '1'))
    # Capability required by the admin endpoints and settings setters
    ADMIN_KEY = os.environ.get('ADMIN_KEY') or 'admin'
    # 'accounts' persists balances in the database, 'memory' keeps them in-process
    LEDGER_BACKEND = os.environ.get('LEDGER_BACKEND', 'accounts')
    # Optional: fixed seed for reproducible draws. Unset uses system randomness.
    RANDOM_SEED = os.environ.get('RANDOM_SEED')
    # Balance given to each demo account by `flask db-reset`
    STARTING_BALANCE = int(os.environ.get('STARTING_BALANCE', '1000'))
