import os
from app import create_app, socketio

app = create_app()

if __name__ == '__main__':
    # Socket.IO server so the /ws namespace works in dev
    socketio.run(
        app,
        host=os.environ.get('HOST', '127.0.0.1'),
        port=int(os.environ.get('PORT', '8000')),
        debug=True,
    )
