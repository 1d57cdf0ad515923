from datetime import date, timedelta

import pytest

from app.bills import status as bill_status


TODAY = date(2024, 3, 15)


def due(days: int) -> str:
    return (TODAY + timedelta(days=days)).isoformat()


class TestDisplayStatus:
    """Status shown to the user, recomputed on every read."""

    def test_paid_wins_over_due_date(self):
        assert bill_status.display_status("paid", due(-30), TODAY) == "paid"
        assert bill_status.display_status("paid", due(30), TODAY) == "paid"

    @pytest.mark.parametrize("stored", ["unpaid", "overdue"])
    def test_past_due_is_overdue(self, stored):
        assert bill_status.display_status(stored, due(-1), TODAY) == "overdue"

    def test_due_today_is_due_soon(self):
        assert bill_status.display_status("unpaid", due(0), TODAY) == "due_soon"

    def test_seven_day_boundary(self):
        assert bill_status.display_status("unpaid", due(7), TODAY) == "due_soon"
        assert bill_status.display_status("unpaid", due(8), TODAY) == "upcoming"

    def test_stale_stored_overdue_is_recomputed(self):
        assert bill_status.display_status("overdue", due(30), TODAY) == "upcoming"

    def test_same_inputs_same_result(self):
        first = bill_status.display_status("unpaid", due(3), TODAY)
        second = bill_status.display_status("unpaid", due(3), TODAY)
        assert first == second == "due_soon"

    def test_defaults_to_local_today(self, monkeypatch):
        monkeypatch.setattr(bill_status, "local_today", lambda: TODAY)
        assert bill_status.display_status("unpaid", due(-1)) == "overdue"


class TestPersistedStatus:
    """Status written to the database on create/update."""

    def test_unpaid_past_due_becomes_overdue(self):
        assert bill_status.persisted_status("unpaid", due(-1), TODAY) == "overdue"

    def test_paid_is_never_overwritten(self):
        assert bill_status.persisted_status("paid", due(-365), TODAY) == "paid"

    def test_unpaid_due_today_stays_unpaid(self):
        assert bill_status.persisted_status("unpaid", due(0), TODAY) == "unpaid"

    def test_overdue_is_not_client_chosen(self):
        assert bill_status.persisted_status("overdue", due(10), TODAY) == "unpaid"


class TestParseDueDate:

    def test_plain_date(self):
        assert bill_status.parse_due_date("2024-03-15") == TODAY

    def test_time_part_is_ignored(self):
        assert bill_status.parse_due_date("2024-03-15T23:59:00.000Z") == TODAY

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            bill_status.parse_due_date("next tuesday")
