import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Comma-separated list, or '*' for any origin
    CORS_ORIGINS = os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3001,http://127.0.0.1:3001,http://localhost:5173,http://127.0.0.1:5173',
    )
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # How long a finished game stays visible before removal (seconds)
    SESSION_LINGER_SEC = float(os.environ.get('SESSION_LINGER_SEC', '1.0'))
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '10'))
    MIN_TOURNAMENT_PLAYERS = int(os.environ.get('MIN_TOURNAMENT_PLAYERS', '2'))
