"""
Tests for photostrip.controller.session

Test Coverage:
- Tap counting into the login and exit prompts
- Password check and login error flag
- Prompt cancellation and invalid transitions
"""
import pytest

from photostrip.controller.session import AdminSession, SessionState


def _tap(session, times):
    state = None
    for _ in range(times):
        state = session.tap()
    return state


@pytest.fixture
def session():
    return AdminSession(password="123456")


def test_starts_in_user_mode(session):
    assert session.state is SessionState.USER
    assert not session.is_admin


def test_five_taps_open_login_prompt(session):
    assert _tap(session, 4) is SessionState.USER
    assert session.tap_count == 4

    assert session.tap() is SessionState.LOGIN_PROMPT
    assert session.tap_count == 0


def test_correct_password_enters_admin(session):
    _tap(session, 5)

    assert session.login("123456") is True
    assert session.state is SessionState.ADMIN
    assert session.is_admin
    assert not session.login_error


def test_wrong_password_stays_at_prompt(session):
    _tap(session, 5)

    assert session.login("000000") is False
    assert session.state is SessionState.LOGIN_PROMPT
    assert session.login_error


def test_cancel_login_returns_to_user(session):
    _tap(session, 5)
    session.login("bad")

    session.cancel_login()

    assert session.state is SessionState.USER
    assert not session.login_error


def test_three_taps_in_admin_open_exit_prompt(session):
    _tap(session, 5)
    session.login("123456")

    assert _tap(session, 3) is SessionState.EXIT_PROMPT
    assert session.is_admin


def test_confirm_exit(session):
    _tap(session, 5)
    session.login("123456")
    _tap(session, 3)

    session.confirm_exit()

    assert session.state is SessionState.USER


def test_cancel_exit_stays_admin(session):
    _tap(session, 5)
    session.login("123456")
    _tap(session, 3)

    session.cancel_exit()

    assert session.state is SessionState.ADMIN


def test_taps_ignored_while_prompt_open(session):
    _tap(session, 5)

    assert _tap(session, 10) is SessionState.LOGIN_PROMPT


def test_login_without_prompt_raises(session):
    with pytest.raises(RuntimeError, match="No login prompt"):
        session.login("123456")


def test_confirm_exit_without_prompt_raises(session):
    with pytest.raises(RuntimeError, match="No exit prompt"):
        session.confirm_exit()


def test_custom_thresholds():
    session = AdminSession("pw", enter_taps=2, exit_taps=1)

    assert _tap(session, 2) is SessionState.LOGIN_PROMPT
    session.login("pw")
    assert session.tap() is SessionState.EXIT_PROMPT


@pytest.mark.parametrize("kwargs", [{"password": ""}, {"password": "x", "enter_taps": 0}])
def test_invalid_configuration(kwargs):
    with pytest.raises(ValueError):
        AdminSession(**kwargs)
