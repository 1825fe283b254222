from collections.abc import Sequence


def constant_time_equals(expected: Sequence[int], actual: Sequence[int]) -> bool:
    """Compare two byte sequences without short-circuiting.

    Every index of actual is visited no matter where, or whether, the two
    sequences differ.

    Args:
        expected (Sequence[int]): The stored bytes.
        actual (Sequence[int]): The freshly computed bytes.

    Returns:
        bool: True if both sequences hold the same bytes.
    """
    zero = len(expected) ^ len(actual)

    if zero:
        # keep the loop length independent of the mismatch
        expected = actual

    for idx in range(len(actual)):
        zero |= expected[idx] ^ actual[idx]

    return zero == 0
