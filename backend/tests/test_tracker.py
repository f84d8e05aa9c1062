"""
Tests for patient request tracking
"""
import pytest

from tracker import PatientRequestTracker, parse_patient_path


@pytest.fixture
def tracker(patient_store):
    return PatientRequestTracker(patient_store)


class TestParsePatientPath:

    def test_profile_path(self):
        assert parse_patient_path("/patients/1") == ("1", "")

    def test_sub_resource_path(self):
        assert parse_patient_path("/patients/1/heart-rate/events") == ("1", "heart-rate/events")

    @pytest.mark.parametrize("path", ["/patients", "/patients/", "/health", "/", ""])
    def test_non_patient_paths(self, path):
        assert parse_patient_path(path) is None


class TestPatientRequestTracker:
    """Which requests bump the per-patient counter"""

    @pytest.mark.parametrize("path", [
        "/patients/1",
        "/patients/1/heart-rate/events",
        "/patients/1/heart-rate/analytics",
    ])
    def test_patient_data_reads_are_counted(self, tracker, patient_store, path):
        tracker.observe("GET", path)
        assert patient_store.get_request_count("1") == 1

    def test_requests_endpoint_is_not_counted(self, tracker, patient_store):
        """Reading the counter must not change it"""
        tracker.observe("GET", "/patients/1/requests")
        assert patient_store.get_request_count("1") == 0

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE"])
    def test_non_read_methods_are_ignored(self, tracker, patient_store, method):
        tracker.observe(method, "/patients/1")
        assert patient_store.get_request_count("1") == 0

    @pytest.mark.parametrize("path", ["/patients", "/health", "/patients/1/notes", "nonsense"])
    def test_other_paths_are_ignored(self, tracker, patient_store, path):
        tracker.observe("GET", path)
        assert patient_store.get_request_count("1") == 0

    @pytest.mark.parametrize("path", ["/patients/1/", "/patients/1/heart-rate/events/"])
    def test_trailing_slash_paths_are_left_to_the_redirect(self, tracker, patient_store, path):
        """The router redirects these; only the canonical path is counted"""
        tracker.observe("GET", path)
        assert patient_store.get_request_count("1") == 0

    def test_unknown_patient_is_dropped_silently(self, tracker, patient_store):
        tracker.observe("GET", "/patients/999")
        assert patient_store.get_request_count("999") == 0

    def test_counts_accumulate_per_patient(self, tracker, patient_store):
        tracker.observe("GET", "/patients/1")
        tracker.observe("GET", "/patients/1/heart-rate/events")
        tracker.observe("GET", "/patients/2")
        assert patient_store.get_request_count("1") == 2
        assert patient_store.get_request_count("2") == 1

    def test_store_failure_never_raises(self, patient_store, monkeypatch):
        """A broken store does not fail the observed request"""
        def boom(patient_id):
            raise RuntimeError("boom")

        monkeypatch.setattr(patient_store, "increment_request_count", boom)
        PatientRequestTracker(patient_store).observe("GET", "/patients/1")
