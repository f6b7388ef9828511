import math

import pytest

from countnum.errors import InvalidInput
from countnum.services.rooms.validation import (
    validate_max_players,
    validate_new_score,
    validate_player_name,
    validate_points,
    validate_ready_flag,
    validate_room_code,
)


def test_player_name_is_trimmed():
    assert validate_player_name('  Bob ') == 'Bob'
    assert validate_player_name('x' * 20) == 'x' * 20


@pytest.mark.parametrize('name', ['', ' \t ', 'x' * 21, 42, None])
def test_player_name_rejected(name):
    with pytest.raises(InvalidInput):
        validate_player_name(name)


def test_max_players_bounds():
    assert validate_max_players(2) == 2
    assert validate_max_players(10.0) == 10
    for bad in (1, 11, 3.5, False, math.nan, '5'):
        with pytest.raises(InvalidInput):
            validate_max_players(bad)


def test_points_accept_any_finite_number():
    assert validate_points(-12) == -12
    assert validate_points(0.25) == 0.25
    assert validate_points(0) == 0
    for bad in (math.nan, -math.inf, True, '1', None):
        with pytest.raises(InvalidInput):
            validate_points(bad)


def test_room_code_normalized():
    assert validate_room_code(' ab12cd ') == 'AB12CD'
    for bad in ('ABC12', 'ABC1234', 'AB-12C', None):
        with pytest.raises(InvalidInput):
            validate_room_code(bad)


def test_ready_flag_must_be_bool():
    assert validate_ready_flag(True) is True
    with pytest.raises(InvalidInput):
        validate_ready_flag('true')


def test_ints_beyond_float_range_are_rejected():
    huge = 10 ** 400
    with pytest.raises(InvalidInput):
        validate_points(huge)
    with pytest.raises(InvalidInput):
        validate_points(-huge)
    with pytest.raises(InvalidInput):
        validate_max_players(huge)


def test_new_score_must_stay_finite():
    assert validate_new_score(1.5e308) == 1.5e308
    with pytest.raises(InvalidInput):
        validate_new_score(1.7e308 + 1.7e308)
    with pytest.raises(InvalidInput):
        validate_new_score(10 ** 400)
