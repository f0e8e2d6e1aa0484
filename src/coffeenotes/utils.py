from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def hash_string(value: str) -> int:
    """Return a signed 32-bit hash of value, stable across processes and platforms."""
    result = 0
    for char in value:
        result = ((result << 5) - result + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return result
