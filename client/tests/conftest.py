import pytest

from backend.tests.conftest import db_engine, db_session, api  # noqa: F401
from client.api_client import ApiClient


@pytest.fixture
def client_api(api):
    """ApiClient talking to the in-process app"""
    return ApiClient(base_url="http://testserver", session=api)
