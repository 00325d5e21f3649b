import pytest

from memorygrid.services.memory import (
    Difficulty,
    DifficultyParams,
    UnknownDifficulty,
    describe_difficulties,
    difficulty_params,
    parse_difficulty,
    timing_for,
)


@pytest.mark.parametrize('difficulty, expected', [
    (Difficulty.EASY, DifficultyParams(2, 4, 1500)),
    (Difficulty.NORMAL, DifficultyParams(3, 9, 1000)),
    (Difficulty.HARD, DifficultyParams(4, 16, 500)),
    (Difficulty.EXPERT, DifficultyParams(5, 25, 250)),
    (Difficulty.ONI, DifficultyParams(5, 50, 100)),
])
def test_table(difficulty, expected):
    assert difficulty_params(difficulty) == expected


def test_table_is_total():
    for difficulty in Difficulty:
        params = difficulty_params(difficulty)
        assert params.grid_dimension >= 2
        assert params.max_sequence_length > 0


def test_parse_names():
    assert parse_difficulty('easy') is Difficulty.EASY
    assert parse_difficulty(' ONI ') is Difficulty.ONI
    assert parse_difficulty(Difficulty.HARD) is Difficulty.HARD
    assert difficulty_params('expert').grid_dimension == 5


@pytest.mark.parametrize('value', ['impossible', '', None, 3])
def test_parse_rejects_unknown(value):
    with pytest.raises(UnknownDifficulty):
        parse_difficulty(value)


def test_unknown_difficulty_is_value_error():
    with pytest.raises(ValueError):
        difficulty_params('medium')


def test_timing_duration_is_three_quarters_of_interval():
    timing = timing_for(Difficulty.EASY)
    assert timing.highlight_interval_ms == 1500
    assert timing.highlight_duration_ms == 1125
    assert timing.start_delay_ms == 1000
    assert timing.input_feedback_ms == 500
    assert timing.next_round_delay_ms == 1000


def test_timing_overrides():
    timing = timing_for(Difficulty.ONI, start_delay_ms=0, input_feedback_ms=100, next_round_delay_ms=250)
    assert timing.highlight_duration_ms == 75
    assert (timing.start_delay_ms, timing.input_feedback_ms, timing.next_round_delay_ms) == (0, 100, 250)


def test_describe_difficulties():
    rows = describe_difficulties()
    assert [r['difficulty'] for r in rows] == ['easy', 'normal', 'hard', 'expert', 'oni']
    normal = rows[1]
    assert normal['cell_count'] == 9
    assert normal['highlight_duration_ms'] == 750
