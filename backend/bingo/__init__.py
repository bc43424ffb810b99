from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One registry per app; routes reach it through current_app.extensions
    from bingo.notifications import SocketIONotifier
    from bingo.services.games.registry import SessionRegistry
    registry = SessionRegistry(notifier=SocketIONotifier(socketio))
    registry.init_app(flask_app)

    # Import and register blueprints here
    from bingo.main import main
    flask_app.register_blueprint(main)

    from bingo.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from bingo.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    from bingo.services.games.errors import BingoError

    @flask_app.errorhandler(BingoError)
    def handle_bingo_error(exc):
        return jsonify(exc.to_dict()), exc.status

    # Register Socket.IO event handlers on the initialized socketio instance
    from bingo.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from bingo.models import Account
        from bingo.services.games.ledger import ESCROW_HOLDER
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed demo accounts
            balance = int(flask_app.config.get('STARTING_BALANCE', 1000))
            for holder in ['alice', 'bob', 'carol']:
                db.session.add(Account(holder=holder, balance=balance))
            db.session.add(Account(holder=ESCROW_HOLDER, balance=0))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
