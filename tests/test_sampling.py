import pytest

from moviegrid.util.sampling import Sampler


def test_sample_without_replacement() -> None:
    sampler = Sampler(seed=1)
    items = list(range(20))
    picked = sampler.sample(items, 8)
    assert len(picked) == 8
    assert len(set(picked)) == 8
    assert set(picked) <= set(items)


def test_sample_short_pool_returns_everything() -> None:
    sampler = Sampler(seed=1)
    assert sorted(sampler.sample(["a", "b"], 5)) == ["a", "b"]
    assert sampler.sample([], 3) == []


def test_sample_rejects_negative_count() -> None:
    with pytest.raises(ValueError):
        Sampler().sample([1, 2], -1)


def test_seeded_samplers_agree() -> None:
    items = list(range(100))
    assert Sampler(seed=42).sample(items, 10) == Sampler(seed=42).sample(items, 10)
    assert Sampler(seed=42).shuffled(items) == Sampler(seed=42).shuffled(items)


def test_shuffled_is_a_new_permutation() -> None:
    items = list(range(12))
    result = Sampler(seed=3).shuffled(items)
    assert sorted(result) == items
    assert items == list(range(12))
