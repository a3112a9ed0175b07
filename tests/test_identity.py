import pytest

from app.core.config import STUDENT_NAME_KEY
from app.core.errors import ValidationError
from app.services.identity_store import IdentityStore


def test_empty_store_has_no_identity(kv_store):
    assert IdentityStore(kv_store).load() is None


def test_set_trims_and_persists(kv_store):
    identities = IdentityStore(kv_store)

    assert identities.set("  Ada Lovelace  ") == "Ada Lovelace"
    assert identities.load() == "Ada Lovelace"
    assert kv_store.get(STUDENT_NAME_KEY) == "Ada Lovelace"


@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
def test_blank_name_is_rejected_and_store_unchanged(kv_store, raw):
    identities = IdentityStore(kv_store)
    identities.set("Ada")

    with pytest.raises(ValidationError):
        identities.set(raw)

    assert identities.load() == "Ada"


def test_set_replaces_previous_name(kv_store):
    identities = IdentityStore(kv_store)
    identities.set("Ada")
    identities.set("Grace Hopper")

    assert identities.load() == "Grace Hopper"


def test_blank_stored_value_counts_as_absent(kv_store):
    kv_store.set(STUDENT_NAME_KEY, "   ")

    assert IdentityStore(kv_store).load() is None


def test_session_keeps_identity_when_name_is_blank(named_session):
    with pytest.raises(ValidationError):
        named_session.set_identity("  ")

    assert named_session.identity == "Ada"


def test_identity_survives_restart(make_session):
    make_session().set_identity("  Ada Lovelace  ")

    assert make_session().identity == "Ada Lovelace"
