from otd_game.core.history import flatten_history, nest_history, record_day


def test_record_day_creates_entry_without_mutating_input():
    history = {}
    updated = record_day(history, 2024, 6, 15, [True, False])
    assert updated == {(2024, 6, 15): (True, False)}
    assert history == {}


def test_record_day_overwrites_instead_of_merging():
    history = {(2024, 6, 15): (True, True, True)}
    updated = record_day(history, 2024, 6, 15, [False, False, False])
    assert updated[(2024, 6, 15)] == (False, False, False)


def test_record_day_keeps_other_days():
    history = {(2023, 12, 31): (True,)}
    updated = record_day(history, 2024, 1, 1, [False])
    assert updated == {(2023, 12, 31): (True,), (2024, 1, 1): (False,)}


def test_nest_history_builds_year_month_day_levels():
    history = {
        (2024, 6, 15): (True, False),
        (2024, 6, 16): (False, False),
        (2023, 1, 2): (True, True),
    }
    assert nest_history(history) == {
        2023: {1: {2: [True, True]}},
        2024: {6: {15: [True, False], 16: [False, False]}},
    }


def test_flatten_history_accepts_string_keys():
    nested = {"2024": {"6": {"15": [1, 0]}}}
    assert flatten_history(nested) == {(2024, 6, 15): (True, False)}


def test_nest_and_flatten_are_inverse():
    history = {(2024, 2, 29): (True,) * 10, (2025, 3, 1): (False,) * 10}
    assert flatten_history(nest_history(history)) == history
