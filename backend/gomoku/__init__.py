from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    if origins == ['*']:
        origins = '*'
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # In-memory game state lives for the lifetime of the app
    from gomoku.services.leaderboard import Leaderboard
    from gomoku.services.rooms import RoomRegistry
    leaderboard = Leaderboard()
    flask_app.extensions['gomoku_leaderboard'] = leaderboard
    flask_app.extensions['gomoku_rooms'] = RoomRegistry(
        leaderboard,
        board_size=flask_app.config['BOARD_SIZE'],
        win_length=flask_app.config['WIN_LENGTH'],
        code_length=flask_app.config['ROOM_CODE_LENGTH'],
    )

    from gomoku.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from gomoku.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    return flask_app
