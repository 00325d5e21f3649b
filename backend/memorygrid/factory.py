from flask import Flask
from flask_cors import CORS
from config import Config
from memorygrid.extensions import allowed_origins, db, migrate, socketio

def create_app(config_class=Config):
    flask_app = Flask('memorygrid')
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from memorygrid.main import main
    flask_app.register_blueprint(main)

    from memorygrid.api.games import games
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from memorygrid.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    from memorygrid.commands import register_commands
    register_commands(flask_app)

    return flask_app
