from collections import Counter

from quizi.utils.seeded_shuffle import seed_from_string, seeded_shuffle, xorshift_random


def test_seed_folds_character_codes():
    assert seed_from_string("") == 0
    assert seed_from_string("a") == 97
    assert seed_from_string("ab") == 97 * 31 + 98


def test_seed_uses_utf16_code_units():
    # U+1F600 is the surrogate pair D83D DE00
    assert seed_from_string("\U0001F600") == 0xD83D * 31 + 0xDE00


def test_seed_stays_within_32_bits():
    seed = seed_from_string("550e8400-e29b-41d4-a716-446655440000-14")
    assert 0 <= seed < 2 ** 32


def test_xorshift_first_value():
    rand = xorshift_random(1)
    assert rand() == 270369 / 4294967296


def test_xorshift_values_in_unit_interval():
    rand = xorshift_random(seed_from_string("session-3"))
    for _ in range(1000):
        value = rand()
        assert 0 <= value < 1


def test_zero_seed_always_swaps_with_first():
    assert seeded_shuffle([1, 2, 3], "") == [2, 3, 1]


def test_same_seed_same_order():
    items = ["Paris", "London", "Berlin", "Madrid"]
    assert seeded_shuffle(items, "abc-0") == seeded_shuffle(items, "abc-0")


def test_result_is_permutation_and_input_untouched():
    items = ["a", "b", "b", "c", "d"]
    original = list(items)
    result = seeded_shuffle(items, "some-session-2")
    assert Counter(result) == Counter(items)
    assert items == original


def test_different_seeds_vary_the_order():
    items = ["w", "x", "y", "z"]
    orders = {tuple(seeded_shuffle(items, f"session-{i}")) for i in range(20)}
    assert len(orders) > 1


def test_short_inputs():
    assert seeded_shuffle([], "seed") == []
    assert seeded_shuffle(["only"], "seed") == ["only"]
    assert seeded_shuffle(("t", "f"), "seed") in (["t", "f"], ["f", "t"])
