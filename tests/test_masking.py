from __future__ import annotations

import pytest

from sshconnection.ssh.utils import mask_value


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("", ""),
        ("db", "***"),
        ("example.com", "ex***"),
        ("a-much-longer-hostname.internal", "a-***"),
    ],
)
def test_mask_value(value, expected) -> None:
    assert mask_value(value) == expected


def test_mask_value_visible_prefix() -> None:
    assert mask_value("deploy", visible=3) == "dep***"
