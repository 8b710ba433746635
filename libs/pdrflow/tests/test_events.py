from __future__ import annotations

import pytest

from pdrflow.events import account_id_from_arn, extract_manifest_location
from pdrflow.exceptions import InputParseError
from pdrflow.models.manifest import ManifestLocation


def test_s3_notification_key_is_url_decoded() -> None:
    event = {
        "Records": [
            {
                "eventSource": "aws:s3",
                "s3": {
                    "bucket": {"name": "pdr-input"},
                    "object": {"key": "requests/Case+42%2C+March.csv", "size": 120},
                },
            }
        ]
    }
    assert extract_manifest_location(event) == ManifestLocation("pdr-input", "requests/Case 42, March.csv")


def test_eventbridge_object_created() -> None:
    event = {
        "source": "aws.s3",
        "detail-type": "Object Created",
        "detail": {"bucket": {"name": "pdr-input"}, "object": {"key": "requests/a b.csv"}},
    }
    assert extract_manifest_location(event) == ManifestLocation("pdr-input", "requests/a b.csv")


def test_direct_invocation() -> None:
    assert extract_manifest_location({"bucket": " pdr-input ", "key": "req.csv"}).bucket == "pdr-input"


@pytest.mark.parametrize(
    "event",
    [
        None,
        [],
        {},
        {"Records": [{"s3": {"bucket": {"name": "b"}}}]},
        {"detail": {"object": {"key": "k"}}},
        {"bucket": "b", "key": "  "},
    ],
)
def test_events_without_a_manifest_are_rejected(event) -> None:
    with pytest.raises(InputParseError):
        extract_manifest_location(event)


def test_account_id_from_function_arn() -> None:
    assert account_id_from_arn("arn:aws:lambda:us-east-1:123456789012:function:pdr") == "123456789012"
    assert account_id_from_arn(None) is None
    assert account_id_from_arn("not-an-arn") is None
