import json

import pytest

import tracking
from tracking import reset, snapshot, t


@pytest.fixture(autouse=True)
def in_memory_tracking():
    tracking.configure(False)
    reset()
    yield
    tracking.configure(False)
    reset()


def test_t_counts_calls_in_memory():
    t("pricing.tiers.PricingTier.for_hour")
    t("pricing.tiers.PricingTier.for_hour")
    t("sessions.customer_session.CustomerSession.advance")

    counts = snapshot()
    assert counts["pricing.tiers.PricingTier.for_hour"] == 2
    assert counts["sessions.customer_session.CustomerSession.advance"] == 1
    assert tracking.is_persisting() is False


def test_snapshot_is_a_copy():
    t("bays.models.BayStatus.occupy")

    counts = snapshot()
    counts["bays.models.BayStatus.occupy"] = 99

    assert snapshot()["bays.models.BayStatus.occupy"] == 1


def test_empty_name_is_ignored():
    t("")
    assert snapshot() == {}


def test_environment_alone_does_not_enable_persistence(monkeypatch):
    monkeypatch.setenv("FUNCTION_TRACKING_PERSIST", "true")

    t("booking.booking_manager.BookingManager.advance")

    assert tracking.is_persisting() is False


def test_configure_writes_counts_file(tmp_path):
    target = tmp_path / "counts.json"
    tracking.configure(True, target)

    t("booking.booking_manager.BookingManager.advance")

    assert tracking.counts_file() == target
    assert json.loads(target.read_text()) == {"booking.booking_manager.BookingManager.advance": 1}


def test_configure_merges_existing_counts(tmp_path):
    target = tmp_path / "counts.json"
    target.write_text(json.dumps({"bays.models.BayStatus.release": 4, "broken": "x"}))

    tracking.configure(True, target)
    t("bays.models.BayStatus.release")

    assert snapshot()["bays.models.BayStatus.release"] == 5
    assert "broken" not in snapshot()
