"""
Tests for the shared access code gate.
"""

from perf_dashboard.services.gate import GateState, code_matches, gate_state, lock, unlock


class TestGate:
    def test_new_session_is_locked(self):
        assert gate_state({}) is GateState.LOCKED

    def test_correct_code_unlocks(self):
        session = {}
        assert unlock(session, "8448", "8448") is True
        assert gate_state(session) is GateState.UNLOCKED

    def test_surrounding_whitespace_ignored(self):
        session = {}
        assert unlock(session, " 8448 ", "8448") is True

    def test_wrong_code_keeps_locked(self):
        session = {}
        assert unlock(session, "1234", "8448") is False
        assert gate_state(session) is GateState.LOCKED

    def test_wrong_code_relocks_unlocked_session(self):
        session = {}
        unlock(session, "8448", "8448")
        unlock(session, "nope", "8448")
        assert gate_state(session) is GateState.LOCKED

    def test_empty_code_never_matches(self):
        assert not code_matches("", "8448")
        assert not code_matches("", "")

    def test_lock(self):
        session = {}
        unlock(session, "8448", "8448")
        lock(session)
        assert gate_state(session) is GateState.LOCKED
