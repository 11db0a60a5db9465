import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from lazada_erp.core.enums import SyncStatus
from lazada_erp.database import Base
from lazada_erp.models.inventory import InventoryItem


def make_item(**kwargs):
    return InventoryItem(sku="LZ-001", name="Item", price=10.0, quantity=1, **kwargs)


def test_remote_id_can_be_set_once():
    item = make_item()
    item.remote_id = "111"
    assert item.is_linked

    # Re-assigning the same value is harmless
    item.remote_id = "111"

    with pytest.raises(ValueError):
        item.remote_id = "222"
    with pytest.raises(ValueError):
        item.remote_id = None
    assert item.remote_id == "111"


def test_sku_cannot_change():
    item = make_item()
    with pytest.raises(ValueError):
        item.sku = "LZ-002"


def test_mark_synced_clears_errors():
    item = make_item(remote_id="111", sync_errors=["old failure"])
    item.mark_synced()

    assert item.sync_status == SyncStatus.SYNCED.value
    assert item.last_synced_at is not None
    assert item.sync_errors == []


def test_mark_error_replaces_errors():
    item = make_item(remote_id="111", sync_errors=["first run failure"])
    item.mark_error("second run failure")

    assert item.sync_status == SyncStatus.ERROR.value
    assert item.sync_errors == ["second run failure"]


def test_empty_remote_id_is_not_linked():
    item = make_item(remote_id="")
    assert not item.is_linked

    # An empty id can still be replaced by a real one
    item.remote_id = "111"
    assert item.is_linked


def test_remote_id_guard_survives_expiry(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'model.db'}")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        item = make_item(remote_id="111", sync_status=SyncStatus.SYNCED.value, sync_errors=[])
        session.add(item)
        session.commit()

        # Nothing known locally until the row is loaded again
        session.expire(item)
        with pytest.raises(ValueError):
            item.remote_id = "222"

        session.refresh(item)
        with pytest.raises(ValueError):
            item.remote_id = "222"
        assert item.remote_id == "111"
    engine.dispose()
