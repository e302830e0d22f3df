import numpy as np
import pytest

from ambitrans.operators.indexing import (
    acn_degree,
    acn_degree_order,
    acn_index,
    acn_indices,
    sh_size,
)


def test_sh_size_matches_square() -> None:
    for p in range(0, 10):
        assert sh_size(p) == (p + 1) ** 2

    with pytest.raises(ValueError):
        _ = sh_size(-1)


def test_acn_index_blocks_are_contiguous() -> None:
    for n in range(0, 8):
        indices = [acn_index(n, m) for m in range(-n, n + 1)]
        assert indices[0] == n * n
        assert indices[-1] == (n + 1) * (n + 1) - 1
        assert indices == list(range(n * n, (n + 1) * (n + 1)))


def test_acn_index_known_channels() -> None:
    # W, Y, Z, X for first-order ambisonics.
    assert acn_index(0, 0) == 0
    assert acn_index(1, -1) == 1
    assert acn_index(1, 0) == 2
    assert acn_index(1, 1) == 3
    assert acn_index(3, 2) == 14


def test_acn_index_rejects_invalid_pairs() -> None:
    with pytest.raises(ValueError):
        _ = acn_index(2, 3)
    with pytest.raises(ValueError):
        _ = acn_index(2, -3)
    with pytest.raises(ValueError):
        _ = acn_index(-1, 0)


def test_acn_degree_inverts_index() -> None:
    for n in range(0, 12):
        for m in range(-n, n + 1):
            assert acn_degree(acn_index(n, m)) == n

    with pytest.raises(ValueError):
        _ = acn_degree(-1)


def test_acn_degree_order_is_vectorized_inverse() -> None:
    order = 9
    n, m = acn_degree_order(np.arange(sh_size(order)))
    assert n.shape == (sh_size(order),)
    for idx in range(sh_size(order)):
        assert acn_index(int(n[idx]), int(m[idx])) == idx

    n, m = acn_degree_order(range(4))
    np.testing.assert_array_equal(n, [0, 1, 1, 1])
    np.testing.assert_array_equal(m, [0, -1, 0, 1])


def test_acn_degree_order_rejects_bad_input() -> None:
    with pytest.raises(ValueError):
        _ = acn_degree_order(np.array([0, -2]))
    with pytest.raises(ValueError):
        _ = acn_degree_order(np.array([0.5, 1.0]))


def test_acn_indices_matches_scalar_index() -> None:
    n = np.array([0, 1, 1, 3, 5])
    m = np.array([0, -1, 1, -2, 5])
    expected = [acn_index(int(a), int(b)) for a, b in zip(n, m)]
    np.testing.assert_array_equal(acn_indices(n, m), expected)

    # Scalar order broadcasts against a degree range.
    degrees = np.arange(2, 7)
    np.testing.assert_array_equal(
        acn_indices(degrees, 2), [acn_index(int(d), 2) for d in degrees]
    )


def test_acn_indices_rejects_invalid_pairs() -> None:
    with pytest.raises(ValueError):
        _ = acn_indices(np.array([1, 2]), np.array([0, 3]))
    with pytest.raises(ValueError):
        _ = acn_indices(np.array([-1]), 0)
    with pytest.raises(ValueError):
        _ = acn_indices(np.array([1.0]), 0)
