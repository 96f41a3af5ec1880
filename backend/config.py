import os


def _flag(name, default='false'):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3001'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Game rules
    BINGO_WIN_THRESHOLD = int(os.environ.get('BINGO_WIN_THRESHOLD', '5'))
    # 'turns': 1..25 per-player grids, players take turns picking numbers
    # 'draw': 25 of 1..100 per grid, the server draws numbers on a timer
    BINGO_VARIANT = os.environ.get('BINGO_VARIANT', 'turns')
    # Recompute scores server-side instead of trusting the reporting client
    BINGO_AUTHORITATIVE_SCORING = _flag('BINGO_AUTHORITATIVE_SCORING')
    # Delay between automatic draws (seconds)
    BINGO_DRAW_INTERVAL_SEC = float(os.environ.get('BINGO_DRAW_INTERVAL_SEC', '5'))
