import random

from kthselect.selector import partition, sort_range


def assert_partitioned(work, begin, end, p):
    value = work[p]
    assert all(x <= value for x in work[begin:p])
    assert all(x >= value for x in work[p + 1:end])


def test_partition_random_ranges():
    rng = random.Random(7)
    for _ in range(300):
        n = rng.randint(1, 60)
        work = [rng.uniform(-100, 100) for _ in range(n)]
        original = list(work)
        begin = rng.randint(0, n - 1)
        end = rng.randint(begin + 1, n)
        pivot = rng.randint(begin, end - 1)
        value = work[pivot]
        p = partition(work, begin, end, pivot)
        assert begin <= p < end
        assert work[p] == value
        assert_partitioned(work, begin, end, p)
        # outside the range nothing moves, inside it is a permutation
        assert work[:begin] == original[:begin]
        assert work[end:] == original[end:]
        assert sorted(work[begin:end]) == sorted(original[begin:end])


def test_partition_with_many_ties():
    rng = random.Random(11)
    for _ in range(200):
        work = [float(rng.randint(0, 3)) for _ in range(40)]
        pivot = rng.randint(0, 39)
        p = partition(work, 0, 40, pivot)
        assert_partitioned(work, 0, 40, p)


def test_partition_single_element():
    work = [3.0, 1.0, 2.0]
    assert partition(work, 1, 2, 1) == 1
    assert work == [3.0, 1.0, 2.0]


def test_partition_pivot_is_maximum():
    work = [5.0, 9.0, 1.0, 4.0, 7.0]
    p = partition(work, 0, 5, 1)
    assert p == 4
    assert work[4] == 9.0
    assert_partitioned(work, 0, 5, p)


def test_partition_pivot_is_minimum():
    work = [5.0, 9.0, 1.0, 4.0, 7.0]
    p = partition(work, 0, 5, 2)
    assert p == 0
    assert work[0] == 1.0
    assert_partitioned(work, 0, 5, p)


def test_sort_range_only_touches_range():
    work = [9.0, 5.0, 3.0, 4.0, 1.0, 0.0]
    sort_range(work, 1, 5)
    assert work == [9.0, 1.0, 3.0, 4.0, 5.0, 0.0]
