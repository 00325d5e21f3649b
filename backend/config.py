import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///memorygrid.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Presentation pauses (milliseconds); per-cell pacing comes from the difficulty
    START_DELAY_MS = int(os.environ.get('START_DELAY_MS', '1000'))
    INPUT_FEEDBACK_MS = int(os.environ.get('INPUT_FEEDBACK_MS', '500'))
    NEXT_ROUND_DELAY_MS = int(os.environ.get('NEXT_ROUND_DELAY_MS', '1000'))
    DEFAULT_DIFFICULTY = os.environ.get('DEFAULT_DIFFICULTY', 'normal')
    # Drop timers left over from a restarted game. 0 keeps the legacy behaviour.
    DISCARD_STALE_TIMERS = os.environ.get('DISCARD_STALE_TIMERS', '1') not in ('0', 'false', 'False')
    # 'socketio' runs timers as background tasks; 'manual' waits for an explicit clock advance
    SCHEDULER = os.environ.get('SCHEDULER', 'socketio')
    # Optional: debounce start requests (ms). 0 disables.
    CONTROLLER_DEBOUNCE_MS = int(os.environ.get('CONTROLLER_DEBOUNCE_MS', '0'))
    # Seconds to wait after the last session owner disconnects before ending the game
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2.0'))
