from memorygrid.extensions import db
import string
import random


def generate_game_code(length=4):
    """Generate a unique, short game code."""
    while True:
        code = ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
        if not GameSession.query.filter_by(game_code=code).first():
            return code


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.Integer, primary_key=True)
    game_code = db.Column(db.String(4), unique=True, index=True, nullable=False)
    difficulty = db.Column(db.String(16), nullable=False, default='normal')
    phase = db.Column(db.String(32), nullable=False, default='idle')  # mirrors GamePhase values
    level = db.Column(db.Integer, nullable=False, default=0)

    def __init__(self, **kwargs):
        super(GameSession, self).__init__(**kwargs)
        if not self.game_code:
            self.game_code = generate_game_code()
        if self.phase is None:
            self.phase = 'idle'
        if self.level is None:
            self.level = 0

    def to_dict(self):
        return {
            'id': self.id,
            'game_code': self.game_code,
            'difficulty': self.difficulty,
            'phase': self.phase,
            'level': self.level,
        }
