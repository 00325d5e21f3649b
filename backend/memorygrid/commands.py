import click

from memorygrid.extensions import db
from memorygrid.services.memory import (
    CallbackNotifier,
    Difficulty,
    GameManager,
    ManualScheduler,
    describe_difficulties,
)


def register_commands(flask_app) -> None:
    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the session tables."""
        import memorygrid.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('difficulties')
    def difficulties_command():
        """Prints grid size, length and pacing for every difficulty."""
        for row in describe_difficulties():
            print(f"{row['difficulty']:<7} grid={row['grid_size']}x{row['grid_size']} "
                  f"max_length={row['max_sequence_length']:<3} "
                  f"interval={row['highlight_interval_ms']}ms duration={row['highlight_duration_ms']}ms")

    @click.command('demo')
    @click.option('--difficulty', type=click.Choice([d.value for d in Difficulty]), default='easy')
    def demo_command(difficulty):
        """Plays a perfect game on a virtual clock and prints each round."""
        scheduler = ManualScheduler()
        manager = GameManager(difficulty, CallbackNotifier(), scheduler)
        manager.start_game()
        while not manager.is_game_over:
            scheduler.run_until_idle()
            print(f"[{scheduler.now_ms:>7}ms] level {manager.level}: {manager.sequence}")
            for cell in list(manager.sequence):
                manager.handle_player_input(cell)
                # let the click flash clear so a repeated cell is accepted
                scheduler.advance(manager.timing.input_feedback_ms)
        scheduler.run_until_idle()
        print(f"Cleared {difficulty} at level {manager.level} after {scheduler.now_ms}ms of virtual time")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(difficulties_command)
    flask_app.cli.add_command(demo_command)
