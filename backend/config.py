import os


def _origins(raw):
    return [o.strip() for o in raw.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Half-width of the square playing grid; targets live in [-GRID_MAX, GRID_MAX]^2
    GRID_MAX = int(os.environ.get('GRID_MAX', '10'))
    # Absolute tolerance for a slope guess to count as a hit (exclusive)
    SLOPE_TOLERANCE = float(os.environ.get('SLOPE_TOLERANCE', '0.01'))
    # Pause between a hit and the next round (seconds)
    NEXT_ROUND_DELAY_SEC = float(os.environ.get('NEXT_ROUND_DELAY_SEC', '1.5'))
    STARTING_LIVES = int(os.environ.get('STARTING_LIVES', '3'))
    # Optional: bind every connection to one shared room on connect. None disables.
    LOBBY_ROOM_CODE = os.environ.get('LOBBY_ROOM_CODE') or None
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    CORS_ALLOWED_ORIGINS = _origins(os.environ.get(
        'CORS_ALLOWED_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
    ))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    PORT = int(os.environ.get('PORT', '3000'))
