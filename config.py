import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Shared host secret. A precomputed bcrypt hash takes precedence.
    HOST_PASSWORD = os.environ.get('HOST_PASSWORD') or 'admin'
    HOST_PASSWORD_HASH = os.environ.get('HOST_PASSWORD_HASH')
    BCRYPT_LOG_ROUNDS = int(os.environ.get('BCRYPT_LOG_ROUNDS', '12'))
    # Round countdown (seconds)
    ROUND_DURATION_SEC = int(os.environ.get('ROUND_DURATION_SEC', '15'))
    POINTS_PER_CORRECT = int(os.environ.get('POINTS_PER_CORRECT', '100'))
    # Minimum gap between two accepted votes from one player (ms). 0 disables.
    VOTE_DEBOUNCE_MS = int(os.environ.get('VOTE_DEBOUNCE_MS', '500'))
    ROUND_LEADERBOARD_SIZE = int(os.environ.get('ROUND_LEADERBOARD_SIZE', '5'))
    FINAL_LEADERBOARD_SIZE = int(os.environ.get('FINAL_LEADERBOARD_SIZE', '10'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '12'))
    # JSON round catalog; the bundled one is used when unset
    ROUND_CATALOG_PATH = os.environ.get('ROUND_CATALOG_PATH')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
