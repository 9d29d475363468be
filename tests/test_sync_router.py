"""Tests for revision polling"""
import redis


def test_all_resources_by_default(client_with_user, mock_redis):
    client, _, _ = client_with_user
    mock_redis.mget.side_effect = lambda keys: [None] * len(keys)

    resp = client.get("/sync/revisions")

    assert resp.status_code == 200
    revisions = resp.json()["revisions"]
    assert revisions["profiles"] == 0
    assert "funnel_templates" in revisions


def test_selected_resources(client_with_user, mock_redis):
    client, _, _ = client_with_user
    mock_redis.mget.return_value = [b"12", None]

    resp = client.get("/sync/revisions?resources=profiles, smart_link_pages")

    assert resp.json() == {"revisions": {"profiles": 12, "smart_link_pages": 0}}
    mock_redis.mget.assert_called_once_with(["revision:profiles", "revision:smart_link_pages"])


def test_unknown_resource(client_with_user, mock_redis):
    client, _, _ = client_with_user

    resp = client.get("/sync/revisions?resources=profiles,bogus")

    assert resp.status_code == 400
    assert "bogus" in resp.json()["detail"]
    mock_redis.mget.assert_not_called()


def test_redis_down(client_with_user, mock_redis):
    client, _, _ = client_with_user
    mock_redis.mget.side_effect = redis.ConnectionError("refused")

    resp = client.get("/sync/revisions?resources=profiles")

    assert resp.status_code == 503
