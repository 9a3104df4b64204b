"""Tests for derived presentation helpers."""

from datetime import date, datetime

import pytest

from mediqueue.models.appointment import AppointmentView, MedicalRecord, TodayQueue
from mediqueue.models.queue import QueuePatient
from mediqueue.models.view import BadgeTone
from mediqueue.services import presentation

from .helpers import appointment_payload


class TestProgressPercentage:

    def test_partial_progress(self):
        assert presentation.progress_percentage(9, 12) == 75

    def test_reaching_own_token_is_complete(self):
        assert presentation.progress_percentage(12, 12) == 100

    def test_clamped_past_own_token(self):
        assert presentation.progress_percentage(15, 12) == 100

    @pytest.mark.parametrize("token_number", [0, None])
    def test_missing_token_number_is_zero(self, token_number):
        assert presentation.progress_percentage(5, token_number) == 0

    def test_missing_current_token_is_zero(self):
        assert presentation.progress_percentage(None, 12) == 0

    def test_always_within_bounds(self):
        for current in range(0, 30):
            for token in range(0, 30):
                assert 0 <= presentation.progress_percentage(current, token) <= 100


class TestSearchFilter:

    def _appointments(self):
        return [
            AppointmentView.model_validate(appointment_payload(_id="a1")),
            AppointmentView.model_validate(appointment_payload(
                _id="a2", department="Orthopedics", reason="Knee pain",
                doctor={"name": "Dr. Arjun Rao"}
            )),
            AppointmentView.model_validate(appointment_payload(_id="a3", reason=None, department="Dermatology")),
        ]

    def test_empty_query_returns_everything_in_order(self):
        appointments = self._appointments()
        result = presentation.filter_appointments(appointments, "")
        assert [a.id for a in result] == ["a1", "a2", "a3"]
        assert result is not appointments

    def test_case_insensitive_match_on_doctor(self):
        result = presentation.filter_appointments(self._appointments(), "ARJUN")
        assert [a.id for a in result] == ["a2"]

    def test_matches_department_and_reason(self):
        assert [a.id for a in presentation.filter_appointments(self._appointments(), "derma")] == ["a3"]
        assert [a.id for a in presentation.filter_appointments(self._appointments(), "knee")] == ["a2"]

    def test_missing_reason_never_matches(self):
        result = presentation.filter_by_query(self._appointments(), "chest", lambda a: (a.reason,))
        assert [a.id for a in result] == ["a1"]

    def test_date_filters(self):
        appointments = [
            AppointmentView.model_validate(appointment_payload(_id="past", date="2024-01-04")),
            AppointmentView.model_validate(appointment_payload(_id="today", date="2024-01-05T09:00:00")),
            AppointmentView.model_validate(appointment_payload(_id="later", date="2024-02-01")),
        ]
        today = date(2024, 1, 5)
        assert [a.id for a in presentation.filter_appointments(appointments, when="today", today=today)] == ["today"]
        assert [a.id for a in presentation.filter_appointments(appointments, when="upcoming", today=today)] == ["today", "later"]

    def test_queue_patient_status_then_search(self):
        patients = [
            QueuePatient.model_validate({"_id": "p1", "tokenNumber": 7, "status": "waiting",
                                         "patientInfo": {"name": "Asha", "email": "asha@example.com"}}),
            QueuePatient.model_validate({"_id": "p2", "tokenNumber": "A-8", "status": "completed",
                                         "patientInfo": {"name": "Ravi"}}),
            QueuePatient.model_validate({"_id": "p3", "tokenNumber": 9, "status": "waiting"}),
        ]
        assert [p.id for p in presentation.filter_queue_patients(patients, status="waiting")] == ["p1", "p3"]
        assert [p.id for p in presentation.filter_queue_patients(patients, "a-8")] == ["p2"]
        # no patient details, no search hit
        assert presentation.filter_queue_patients(patients, "9") == []
        assert [p.id for p in presentation.filter_queue_patients(patients, "EXAMPLE.com", "waiting")] == ["p1"]


class TestGroupByMonth:

    def test_groups_in_encounter_order(self):
        records = [
            MedicalRecord(id="r1", date=datetime(2024, 1, 5), doctor="Dr. A", department="ENT"),
            MedicalRecord(id="r2", date=datetime(2024, 1, 20), doctor="Dr. B", department="ENT"),
            MedicalRecord(id="r3", date=datetime(2024, 2, 1), doctor="Dr. C", department="ENT"),
        ]
        groups = presentation.group_by_month(records)
        assert list(groups) == ["January 2024", "February 2024"]
        assert [r.id for r in groups["January 2024"]] == ["r1", "r2"]
        assert [r.id for r in groups["February 2024"]] == ["r3"]

    def test_does_not_resort(self):
        records = [
            MedicalRecord(id="late", date=datetime(2024, 3, 28), doctor="x", department="y"),
            MedicalRecord(id="early", date=datetime(2024, 3, 1), doctor="x", department="y"),
            MedicalRecord(id="feb", date=datetime(2024, 2, 1), doctor="x", department="y"),
        ]
        groups = presentation.group_by_month(records)
        assert list(groups) == ["March 2024", "February 2024"]
        assert [r.id for r in groups["March 2024"]] == ["late", "early"]


class TestStatusBadge:

    @pytest.mark.parametrize("status, tone", [
        ("scheduled", BadgeTone.WARNING),
        ("waiting", BadgeTone.WARNING),
        ("in-progress", BadgeTone.SUCCESS),
        ("completed", BadgeTone.INFO),
        ("cancelled", BadgeTone.DANGER),
    ])
    def test_known_statuses(self, status, tone):
        assert presentation.status_badge(status).tone == tone

    def test_in_progress_pulses(self):
        assert presentation.status_badge("in-progress").pulse is True
        assert presentation.status_badge("completed").pulse is False

    def test_unknown_status_is_neutral(self):
        badge = presentation.status_badge("archived")
        assert badge.tone == BadgeTone.NEUTRAL
        assert badge.label == "archived"

    def test_missing_status_is_neutral(self):
        assert presentation.status_badge(None).tone == BadgeTone.NEUTRAL

    def test_my_turn_overrides_status(self):
        assert presentation.status_badge("waiting", is_my_turn=True).tone == BadgeTone.SUCCESS


class TestTurnMessage:

    def test_messages(self):
        assert presentation.turn_message(TodayQueue(is_my_turn=True, status="waiting")) == "It's Your Turn!"
        assert presentation.turn_message(TodayQueue(status="waiting", patients_ahead=3)) == "Waiting: 3 ahead of you"
        assert presentation.turn_message(TodayQueue(status="in-progress")) == "Your consultation is in progress"
        assert presentation.turn_message(TodayQueue(status="paused")) == "Status unknown"


class TestStats:

    def test_appointment_stats(self):
        appointments = [
            AppointmentView.model_validate(appointment_payload(_id="1", status="scheduled", date="2024-01-05")),
            AppointmentView.model_validate(appointment_payload(_id="2", status="in-progress", date="2024-01-06")),
            AppointmentView.model_validate(appointment_payload(_id="3", status="completed", date="2024-01-05")),
        ]
        stats = presentation.appointment_stats(appointments, today=date(2024, 1, 5))
        assert stats == {
            "total_appointments": 3,
            "today_appointments": 2,
            "waiting_appointments": 1,
            "in_progress_appointments": 1,
        }

    def test_dashboard_token_placeholder(self):
        stats = presentation.patient_dashboard_stats([], [], None)
        assert stats["token"] == "-"
        stats = presentation.patient_dashboard_stats([], [{}], TodayQueue(token_number=4))
        assert stats["token"] == "4"
        assert stats["completed"] == 1
