"""Hide hostnames and usernames in failure logs."""

MASK = "***"


def mask_value(value: str | None, visible: int = 2) -> str:
    """Keep the first `visible` characters of `value` and replace the rest.

    The replacement has a fixed width so the log line does not leak the
    length of the hidden part. Values no longer than `visible` are fully
    masked.
    """
    if not value:
        return ""
    if len(value) <= visible:
        return MASK
    return value[:visible] + MASK
