from memorygrid.extensions import socketio
from memorygrid.factory import create_app

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, debug=True)
