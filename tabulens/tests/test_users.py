# tabulens/tests/test_users.py
import pytest

from tabulens.core.errors import FormValidationError, ServerError
from tabulens.schemas.dataset import Dataset
from tabulens.schemas.user import DatasetPrefs, NotificationPrefs
from tabulens.services.dataset_store import DatasetStore
from tabulens.services.session import AuthStore, sign_out
from tabulens.services.users import AuthService, UserService

from conftest import StubGateway, make_response


@pytest.fixture
def auth(http):
    return AuthService(http)


@pytest.fixture
def users(http):
    return UserService(http)


# -----------------------------------------------------------
# Forms never reach the network when invalid
# -----------------------------------------------------------
def test_login_rejects_bad_email(auth, fake_session):
    with pytest.raises(FormValidationError) as exc:
        auth.login({"email": "not-an-email", "password": ""})

    errors = exc.value.field_errors
    assert errors["email"] == ["Invalid email address"]
    assert errors["password"] == ["Password is required"]
    assert fake_session.calls == []


def test_register_requires_matching_passwords(auth, fake_session):
    with pytest.raises(FormValidationError) as exc:
        auth.register({
            "name": "Ada",
            "email": "ada@example.com",
            "password": "longenough",
            "confirm_password": "different1",
        })

    assert exc.value.field_errors == {"confirm_password": ["Passwords don't match"]}
    assert fake_session.calls == []


def test_register_short_fields(auth):
    with pytest.raises(FormValidationError) as exc:
        auth.register({"name": "A", "email": "a@example.com", "password": "short", "confirm_password": "short"})

    errors = exc.value.field_errors
    assert errors["name"] == ["Full name must be at least 2 characters"]
    assert errors["password"] == ["Password must be at least 8 characters"]


def test_login_posts_credentials_and_returns_user(auth, fake_session):
    fake_session.queue(make_response(200, {"user": {"name": "Ada", "email": "ada@example.com"}}))

    user = auth.login({"email": "ada@example.com", "password": "pw", "remember_me": True})

    assert user == {"name": "Ada", "email": "ada@example.com"}
    call = fake_session.calls[0]
    assert fake_session.paths == [("POST", "/auth/login")]
    assert call["json"] == {"email": "ada@example.com", "password": "pw", "rememberMe": True}


def test_register_does_not_send_confirmation(auth, fake_session):
    fake_session.queue(make_response(201, {"user": {"name": "Ada"}}))

    auth.register({
        "name": "Ada",
        "email": "ada@example.com",
        "password": "longenough",
        "confirm_password": "longenough",
    })

    assert fake_session.calls[0]["json"] == {
        "name": "Ada",
        "email": "ada@example.com",
        "password": "longenough",
    }


# -----------------------------------------------------------
# Account management
# -----------------------------------------------------------
def test_get_profile_defaults(users, fake_session):
    fake_session.queue(make_response(200, {"id": 1, "name": "Ada", "provider": "GOOGLE"}))

    profile = users.get_profile()

    assert profile.name == "Ada"
    assert profile.dataset_prefs is None
    assert profile.can_change_email is False


def test_update_preferences_uses_wire_names(users, fake_session):
    fake_session.queue(make_response(200, {}))

    users.update_preferences(DatasetPrefs(auto_delete=True), NotificationPrefs(weekly_report=True))

    body = fake_session.calls[0]["json"]
    assert fake_session.paths == [("PUT", "/user/preferences")]
    assert body["datasetPrefs"] == {
        "autoDelete": True,
        "autoDeleteDays": 30,
        "maxFileSize": 50,
        "defaultChartType": "line",
    }
    assert body["notificationPrefs"]["weeklyReport"] is True
    assert body["notificationPrefs"]["uploadComplete"] is True


def test_update_profile_and_delete_account(users, fake_session):
    fake_session.queue(make_response(200, {}), make_response(204))

    users.update_profile("Ada L.")
    users.delete_account()

    assert fake_session.paths == [("PUT", "/user/profile"), ("DELETE", "/user/account")]
    assert fake_session.calls[0]["json"] == {"name": "Ada L."}


# -----------------------------------------------------------
# Sign out
# -----------------------------------------------------------
def test_sign_out_clears_local_state_even_if_request_fails(auth, fake_session, clock):
    fake_session.queue(make_response(500))
    auth_store = AuthStore()
    auth_store.set_user({"name": "Ada"})
    dataset_store = DatasetStore(StubGateway(), cache_duration=300, clock=clock)
    dataset_store.add_dataset(Dataset(id=1, name="a.csv"))

    with pytest.raises(ServerError):
        sign_out(auth, auth_store, dataset_store)

    assert auth_store.is_authenticated is False
    assert dataset_store.datasets == []
