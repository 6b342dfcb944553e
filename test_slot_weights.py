import logging

import pytest

from tutor_scheduler.exceptions import BadRequestError
from tutor_scheduler.models import SlotWeight
from tutor_scheduler.schemas import SlotWeightUpdate
from tutor_scheduler.scheduling import WeightConfig
from tutor_scheduler.services import slot_weights as weights_service

# ----------------- Service --------------------------


def test_get_or_create_is_idempotent(db, teacher):
    first = weights_service.get_or_create_weights(db, teacher.id)
    second = weights_service.get_or_create_weights(db, teacher.id)
    assert first.id == second.id
    assert db.query(SlotWeight).count() == 1


def test_default_row_matches_default_config(db, teacher):
    config = weights_service.load_weight_config(db, teacher.id)
    assert config.to_dict() == WeightConfig().to_dict()


def test_from_row_fills_empty_columns_with_defaults():
    row = SlotWeight(
        user_id=1, w_time=None, w_compact=None, w_priority=None, working_days=[],
        preferred_times=None, min_gap_minutes=0, max_gap_minutes=None, gap_importance=None,
    )
    config = WeightConfig.from_row(row)
    assert config.w_time == 0.33
    assert config.working_days == {1, 2, 3, 4, 5}
    assert config.min_gap_minutes == 0
    assert config.max_gap_minutes == 180
    assert config.gap_importance == 0.5
    assert config.preferred_times.day.enabled is True


def test_update_rejects_min_gap_above_stored_max(db, teacher):
    weights_service.update_weights(db, teacher.id, SlotWeightUpdate(max_gap_minutes=90))
    with pytest.raises(BadRequestError):
        weights_service.update_weights(db, teacher.id, SlotWeightUpdate(min_gap_minutes=120))


def test_rejected_update_does_not_create_default_row(db, teacher):
    with pytest.raises(BadRequestError):
        weights_service.update_weights(db, teacher.id, SlotWeightUpdate(min_gap_minutes=500))
    assert weights_service.get_weights(db, teacher.id) is None


def test_rejected_update_keeps_stored_values(db, teacher):
    weights_service.update_weights(db, teacher.id, SlotWeightUpdate(w_time=0.4, max_gap_minutes=120))
    with pytest.raises(BadRequestError):
        weights_service.update_weights(db, teacher.id, SlotWeightUpdate(w_time=0.2, min_gap_minutes=150))

    db.expire_all()
    stored = weights_service.get_weights(db, teacher.id)
    assert stored.w_time == 0.4
    assert stored.min_gap_minutes == 60


def test_weight_sum():
    assert WeightConfig().weight_sum == pytest.approx(1.0)
    assert WeightConfig(w_time=0.9, w_compact=0.9, w_priority=0.9).weight_sum == pytest.approx(2.7)


def test_update_warns_when_weights_drift_from_one(db, teacher, caplog):
    with caplog.at_level(logging.WARNING):
        weights = weights_service.update_weights(
            db, teacher.id, SlotWeightUpdate(w_time=0.9, w_compact=0.9, w_priority=0.9)
        )
    assert weights.w_time == 0.9
    assert "sum to 2.70" in caplog.text


def test_update_within_tolerance_does_not_warn(db, teacher, caplog):
    with caplog.at_level(logging.WARNING):
        weights_service.update_weights(db, teacher.id, SlotWeightUpdate(w_time=0.4))
    assert "sum to" not in caplog.text


def test_delete_weights(db, teacher):
    assert weights_service.delete_weights(db, teacher.id) is False
    weights_service.get_or_create_weights(db, teacher.id)
    assert weights_service.delete_weights(db, teacher.id) is True
    assert weights_service.get_weights(db, teacher.id) is None

# ----------------- API ------------------------------


def test_get_my_weights_returns_defaults(api, auth_headers, teacher):
    response = api.get("/slot-weights/me", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["userId"] == teacher.id
    assert body["wTime"] == 0.33
    assert body["wCompact"] == 0.33
    assert body["wPriority"] == 0.34
    assert body["workingDays"] == [1, 2, 3, 4, 5]
    assert body["minGapMinutes"] == 60
    assert body["maxGapMinutes"] == 180
    assert body["gapImportance"] == 0.5
    assert body["preferredTimes"] == {
        "morning": {"enabled": False, "weight": 0.5},
        "day": {"enabled": True, "weight": 0.7},
        "evening": {"enabled": False, "weight": 0.5},
    }


def test_partial_update_keeps_other_fields(api, auth_headers):
    response = api.put(
        "/slot-weights/me",
        json={"wTime": 0.5, "workingDays": [6, 0, 6], "minGapMinutes": 30},
        headers=auth_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["wTime"] == 0.5
    assert body["wCompact"] == 0.33
    assert body["workingDays"] == [0, 6]
    assert body["minGapMinutes"] == 30
    assert body["maxGapMinutes"] == 180

    assert api.get("/slot-weights/me", headers=auth_headers).json()["workingDays"] == [0, 6]


def test_preferred_times_update_merges_periods(api, auth_headers):
    response = api.put(
        "/slot-weights/me",
        json={"preferredTimes": {"morning": {"enabled": True}}},
        headers=auth_headers,
    )
    assert response.status_code == 200
    prefs = response.json()["preferredTimes"]
    assert prefs["morning"] == {"enabled": True, "weight": 0.5}
    assert prefs["day"] == {"enabled": True, "weight": 0.7}


def test_update_rejects_min_gap_above_max(api, auth_headers):
    response = api.put(
        "/slot-weights/me",
        json={"minGapMinutes": 200, "maxGapMinutes": 100},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert "minGapMinutes" in response.json()["detail"]


def test_rejected_put_leaves_no_weights_behind(api, admin_headers, auth_headers):
    response = api.put("/slot-weights/me", json={"minGapMinutes": 500}, headers=auth_headers)
    assert response.status_code == 400
    assert api.get("/slot-weights/", headers=admin_headers).json() == []


@pytest.mark.parametrize("payload", [
    {"workingDays": []},
    {"workingDays": [1, 7]},
    {"gapImportance": 0.95},
    {"wTime": 1.5},
    {"preferredTimes": {"day": {"enabled": True, "weight": 0.05}}},
    {"maxGapMinutes": 0},
])
def test_update_rejects_out_of_range_values(api, auth_headers, payload):
    response = api.put("/slot-weights/me", json=payload, headers=auth_headers)
    assert response.status_code == 422


def test_delete_then_read_recreates_defaults(api, auth_headers):
    api.put("/slot-weights/me", json={"wTime": 0.6}, headers=auth_headers)

    response = api.delete("/slot-weights/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert api.delete("/slot-weights/me", headers=auth_headers).status_code == 404
    assert api.get("/slot-weights/me", headers=auth_headers).json()["wTime"] == 0.33


def test_weights_require_authentication(api):
    assert api.get("/slot-weights/me").status_code == 401
    assert api.put("/slot-weights/me", json={"wTime": 0.5}).status_code == 401


def test_admin_lists_all_weights(api, admin_headers, auth_headers, teacher):
    api.get("/slot-weights/me", headers=auth_headers)

    response = api.get("/slot-weights/", headers=admin_headers)
    assert response.status_code == 200
    assert [row["userId"] for row in response.json()] == [teacher.id]


def test_teacher_cannot_list_all_weights(api, auth_headers):
    assert api.get("/slot-weights/", headers=auth_headers).status_code == 403
