"""
Pytest Configuration and Fixtures

Shared fixtures for building requests, identities, settings and a fully
wired service container without a database.
"""

import pytest
from unittest.mock import MagicMock

from mnp_admin.config.settings import Settings
from mnp_admin.domain.enums import Operator
from mnp_admin.domain.models import AdminIdentity
from mnp_admin.repositories.session_state_repo import SessionStateStore
from mnp_admin.services.container import AppServices
from mnp_admin.services.request_feed import RequestFeed

from .factories import TEST_APP_ID, TEST_JWT_SECRET


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment: no feed, temp session file"""
    return Settings(
        app_id=TEST_APP_ID,
        feed_enabled=False,
        session_state_path=str(tmp_path / "session_state.json"),
        logs_path=str(tmp_path / "logs"),
        jwt_secret=TEST_JWT_SECRET,
        initial_auth_token=None,
        allow_role_selection=True,
        require_pending_for_transition=False,
        feed_mode="change_stream",
        environment="test",
        _env_file=None,
    )


@pytest.fixture
def super_admin() -> AdminIdentity:
    return AdminIdentity.super_admin()


@pytest.fixture
def orange_admin() -> AdminIdentity:
    return AdminIdentity.provider_admin(Operator.ORANGE)


@pytest.fixture
def guest() -> AdminIdentity:
    return AdminIdentity.guest()


@pytest.fixture
def request_repo() -> MagicMock:
    return MagicMock(name="RequestRepository")


@pytest.fixture
def role_repo() -> MagicMock:
    repo = MagicMock(name="AdminRoleRepository")
    repo.get_identity.return_value = None
    return repo


@pytest.fixture
def services(settings, request_repo, role_repo) -> AppServices:
    """Service container over mocked repositories and an idle feed"""
    return AppServices(
        settings=settings,
        request_repo=request_repo,
        role_repo=role_repo,
        state_store=SessionStateStore(settings.session_state_path),
        feed=RequestFeed(settings, MagicMock(name="AsyncMongoContext")),
    )
