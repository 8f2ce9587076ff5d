from types import SimpleNamespace

from shipdash.services.session import AnonymousSession


class FakeAuth:
    def __init__(self, session=None, fail: bool = False):
        self.session = session
        self.fail = fail
        self.sign_ins = 0

    def get_session(self):
        if self.fail:
            raise ConnectionError("auth unreachable")
        return self.session

    def sign_in_anonymously(self):
        self.sign_ins += 1
        return SimpleNamespace(user=SimpleNamespace(id="anon-123"))


def test_local_identity_without_client():
    session = AnonymousSession(None)

    assert session.ensure_identity() is True
    assert session.user_id.startswith("local-")
    first = session.user_id
    assert session.ensure_identity() is True
    assert session.user_id == first


def test_anonymous_sign_in_is_idempotent():
    auth = FakeAuth()
    session = AnonymousSession(SimpleNamespace(auth=auth))

    assert session.ensure_identity() is True
    assert session.ensure_identity() is True

    assert session.user_id == "anon-123"
    assert auth.sign_ins == 1
    assert session.established


def test_existing_session_is_reused():
    existing = SimpleNamespace(user=SimpleNamespace(id="returning-user"))
    auth = FakeAuth(session=existing)
    session = AnonymousSession(SimpleNamespace(auth=auth))

    assert session.ensure_identity() is True
    assert session.user_id == "returning-user"
    assert auth.sign_ins == 0


def test_sign_in_failure_is_reported():
    session = AnonymousSession(SimpleNamespace(auth=FakeAuth(fail=True)))

    assert session.ensure_identity() is False
    assert session.established is False
    assert "auth unreachable" in session.last_error
