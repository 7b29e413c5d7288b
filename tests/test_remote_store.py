from unittest.mock import MagicMock, patch

import requests

from give.options.remote import HttpOptionStore


def _response(status=200, payload=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = payload
    if status >= 400 and status != 404:
        resp.raise_for_status.side_effect = requests.HTTPError(str(status))
    else:
        resp.raise_for_status.return_value = None
    return resp


def test_batch_get_issues_single_request():
    with patch("give.options.remote.requests.get") as mock_get:
        mock_get.return_value = _response(
            payload=[
                {"option_name": "give_version", "option_value": "2.4.0"},
                {"option_name": "other", "option_value": "x"},
            ]
        )
        store = HttpOptionStore("http://wp.test/api/")
        rows = store.batch_get(["give_settings", "give_version"])

    mock_get.assert_called_once_with(
        "http://wp.test/api/options",
        params={"names": "give_settings,give_version"},
        timeout=10,
    )
    assert [(r.option_name, r.option_value) for r in rows] == [("give_version", "2.4.0")]
    assert store.query_count == 1


def test_batch_get_network_error_returns_no_rows():
    with patch(
        "give.options.remote.requests.get", side_effect=requests.ConnectionError
    ):
        assert HttpOptionStore("http://wp.test").batch_get(["give_version"]) == []


def test_get_option_missing_returns_default():
    with patch("give.options.remote.requests.get") as mock_get:
        mock_get.return_value = _response(status=404)
        assert HttpOptionStore("http://wp.test").get_option("nope", "d") == "d"


def test_update_option_puts_serialized_value_and_notifies():
    handler = MagicMock()
    with patch("give.options.remote.requests.get") as mock_get, patch(
        "give.options.remote.requests.put"
    ) as mock_put:
        mock_get.return_value = _response(payload={"option_value": '{"a": 1}'})
        mock_put.return_value = _response()
        store = HttpOptionStore("http://wp.test", timeout=3)
        store.on_mutation(handler)

        assert store.update_option("give_settings", {"a": 2}) is True

    mock_put.assert_called_once_with(
        "http://wp.test/options/give_settings",
        json={"option_value": '{"a": 2}', "insert": False},
        timeout=3,
    )
    handler.assert_called_once_with("give_settings", "updated")


def test_failed_write_does_not_notify():
    handler = MagicMock()
    with patch("give.options.remote.requests.get") as mock_get, patch(
        "give.options.remote.requests.put"
    ) as mock_put:
        mock_get.return_value = _response(status=404)
        mock_put.return_value = _response(status=500)
        store = HttpOptionStore("http://wp.test")
        store.on_mutation(handler)

        assert store.add_option("give_version", "2.4.0") is False

    handler.assert_not_called()


def test_delete_missing_option():
    with patch("give.options.remote.requests.delete") as mock_delete:
        mock_delete.return_value = _response(status=404)
        assert HttpOptionStore("http://wp.test").delete_option("give_version") is False


def test_non_object_read_payload_degrades_to_missing():
    handler = MagicMock()
    with patch("give.options.remote.requests.get") as mock_get, patch(
        "give.options.remote.requests.put"
    ) as mock_put:
        mock_get.return_value = _response(payload=["not", "a", "dict"])
        mock_put.return_value = _response(status=500)
        store = HttpOptionStore("http://wp.test")
        store.on_mutation(handler)

        assert store.get_option("give_version", "d") == "d"
        assert store.update_option("give_version", "2") is False

    handler.assert_not_called()


def test_batch_get_skips_malformed_rows():
    with patch("give.options.remote.requests.get") as mock_get:
        mock_get.return_value = _response(
            payload=[
                "junk",
                {"option_name": "give_version", "option_value": 2},
                {"option_name": "give_settings", "option_value": "{}"},
            ]
        )
        rows = HttpOptionStore("http://wp.test").batch_get(
            ["give_settings", "give_version"]
        )

    assert [(r.option_name, r.option_value) for r in rows] == [("give_settings", "{}")]


def test_batch_get_non_list_payload_returns_no_rows():
    with patch("give.options.remote.requests.get") as mock_get:
        mock_get.return_value = _response(payload={"error": "nope"})
        assert HttpOptionStore("http://wp.test").batch_get(["give_version"]) == []
