"""Unit tests for tenant slugs, subdomain parsing and audit path parsing."""

import pytest

from groundwork.core.tenancy import subdomain_of
from groundwork.middleware.audit import entity_from_path
from groundwork.services.tenant import slugify

ID = "3f2b8c1e-9a4d-4e5f-8b6a-1c2d3e4f5a6b"


@pytest.mark.parametrize(
    "name,slug",
    [
        ("Bob's Builders Inc", "bobs-builders-inc"),
        ("  Acme   Construction ", "acme-construction"),
        ("ACME", "acme"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


@pytest.mark.parametrize(
    "host,expected",
    [
        ("acme.groundwork.app", "acme"),
        ("Acme.groundwork.app:8443", "acme"),
        ("groundwork.app", None),
        ("localhost", None),
        ("127.0.0.1", None),
        (None, None),
    ],
)
def test_subdomain_of(host, expected):
    assert subdomain_of(host) == expected


@pytest.mark.parametrize(
    "path,expected",
    [
        (f"/api/v1/bids/{ID}/convert-to-project", ("bid", ID)),
        (f"/api/v1/projects/{ID}/rfis", ("rfi", None)),
        (f"/api/v1/pay-periods/{ID}/close", ("pay-period", ID)),
        ("/api/v1/time-entries", ("time-entry", None)),
        (f"/api/v1/companies/{ID}", ("company", ID)),
        ("/api/v1", ("unknown", None)),
    ],
)
def test_entity_from_path(path, expected):
    assert entity_from_path(path) == expected
