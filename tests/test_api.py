"""Unit tests for the Gofile API client."""

import json
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock, patch

import httpx
import pytest

from pygofile.api import GofileClient, _GofileOperations
from pygofile.exceptions import GofileConfigError, GofileHTTPError
from pygofile.models import UNSET
from pygofile.outcome import Failure, FailureKind, Success


def envelope(data, status_code=200, status="ok"):
    """Build a Gofile response envelope."""
    return httpx.Response(status_code, json={"status": status, "data": data})


class Recorder:
    """MockTransport handler that records requests and replays responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


def make_client(handler, **kwargs):
    return GofileClient(transport=httpx.MockTransport(handler), **kwargs)


class TestGofileClient:
    """Tests for GofileClient initialization and basic functionality."""

    def test_init_defaults(self):
        """Test client defaults to anonymous access and automatic upload routing."""
        client = GofileClient()
        assert client.token is None
        assert client.settings.api_url == "https://api.gofile.io/"
        assert client.settings.upload_url == "https://upload.gofile.io/"
        assert client.settings.timeout == 30.0
        client.close()

    def test_init_with_upload_region(self):
        """Test that a region name selects the regional upload host."""
        client = GofileClient(token="t", upload_region="eu-par")
        assert client.settings.upload_url == "https://upload-eu-par.gofile.io/"
        client.close()

    def test_explicit_upload_url_wins_over_region(self):
        """Test that an explicit upload URL takes precedence."""
        client = GofileClient(
            upload_url="https://store9.gofile.io/", upload_region="na-phx"
        )
        assert client.settings.upload_url == "https://store9.gofile.io/"
        client.close()

    def test_unknown_upload_region_raises(self):
        """Test that an unknown region is a configuration error."""
        with pytest.raises(GofileConfigError, match="Unknown upload region"):
            GofileClient(upload_region="moon")

    def test_empty_token_is_anonymous(self):
        """Test that an empty token is treated as no token."""
        client = GofileClient(token="")
        assert client.token is None
        client.close()

    def test_settings_repr_hides_token(self):
        """Test that the token is not shown in the settings repr."""
        client = GofileClient(token="secret-token")
        assert "secret-token" not in repr(client.settings)
        client.close()

    def test_context_manager_closes(self):
        """Test that leaving the context closes both senders."""
        with GofileClient() as client:
            pass
        assert client._transport.is_closed

    def test_operations_base_is_abstract(self):
        """Test that the shared operations base cannot be used on its own."""
        with pytest.raises(TypeError):
            _GofileOperations()

    def test_clients_are_independent(self):
        """Test that several differently configured clients can coexist."""
        first = GofileClient(token="one")
        second = GofileClient(token="two", upload_region="ap-sgp")
        assert first.token == "one"
        assert second.token == "two"
        assert first.settings.upload_url != second.settings.upload_url
        first.close()
        second.close()

    def test_from_config_uses_configured_values(self):
        """Test that from_config fills missing values from the config."""
        with patch("pygofile.api.config") as mock_config:
            mock_config.token = "cfg_token"
            mock_config.api_url = "https://api.example/"
            mock_config.upload_url = "https://upload.example/"
            client = GofileClient.from_config()
        assert client.token == "cfg_token"
        assert client.settings.api_url == "https://api.example/"
        assert client.settings.upload_url == "https://upload.example/"
        client.close()

    def test_from_config_prefers_explicit_arguments(self):
        """Test that explicit arguments override the config."""
        with patch("pygofile.api.config") as mock_config:
            mock_config.token = "cfg_token"
            mock_config.api_url = "https://api.example/"
            mock_config.upload_url = "https://upload.example/"
            client = GofileClient.from_config(token="arg_token", upload_region="ap-tyo")
        assert client.token == "arg_token"
        assert client.settings.upload_url == "https://upload-ap-tyo.gofile.io/"
        client.close()


class TestTransport:
    """Tests for authentication and timeouts applied to every request."""

    def test_bearer_header_on_control_requests(self):
        """Test that the token is sent as a bearer header."""
        recorder = Recorder(envelope({"server": "store1"}))
        client = make_client(recorder, token="test_token")
        client.get_best_server()
        assert recorder.last.headers["Authorization"] == "Bearer test_token"

    def test_bearer_header_on_upload_requests(self, tmp_path):
        """Test that uploads carry the bearer header as well."""
        file_path = tmp_path / "a.txt"
        file_path.write_bytes(b"data")
        recorder = Recorder(envelope({"fileId": "f1"}))
        client = make_client(recorder, token="test_token")
        client.upload_file(file_path)
        assert recorder.last.headers["Authorization"] == "Bearer test_token"

    def test_no_authorization_header_without_token(self):
        """Test that anonymous clients send no Authorization header."""
        recorder = Recorder(envelope({"server": "store1"}))
        client = make_client(recorder)
        client.get_best_server()
        assert "Authorization" not in recorder.last.headers

    def test_timeouts_are_thirty_seconds(self):
        """Test that connect, read and write timeouts are 30 seconds."""
        recorder = Recorder(envelope({"server": "store1"}))
        client = make_client(recorder)
        client.get_best_server()
        timeout = recorder.last.extensions["timeout"]
        assert timeout["connect"] == 30.0
        assert timeout["read"] == 30.0
        assert timeout["write"] == 30.0

    def test_control_requests_use_api_host(self):
        """Test that control-plane requests go to the API host."""
        recorder = Recorder(envelope("acc1"))
        client = make_client(recorder)
        client.get_account_id()
        assert str(recorder.last.url) == "https://api.gofile.io/accounts/getid"

    def test_uploads_use_upload_host(self, tmp_path):
        """Test that uploads go to the configured regional upload host."""
        file_path = tmp_path / "a.txt"
        file_path.write_bytes(b"data")
        recorder = Recorder(envelope({"fileId": "f1"}))
        client = make_client(recorder, upload_region="na-phx")
        client.upload_file(file_path)
        assert str(recorder.last.url) == "https://upload-na-phx.gofile.io/uploadfile"

    def test_unparsable_api_url_fails_on_first_request(self):
        """Test that a malformed API URL is a network failure, not a crash."""
        recorder = Recorder(envelope("acc1"))
        client = make_client(recorder, api_url="http://[::1")
        outcome = client.get_account_id()
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.NETWORK
        assert outcome.status_code is None
        assert outcome.message.startswith("Get account ID failed: Network error:")
        assert recorder.requests == []
        client.close()

    def test_unparsable_upload_url_fails_on_upload(self, tmp_path):
        """Test that a malformed upload URL only affects uploads."""
        file_path = tmp_path / "a.txt"
        file_path.write_bytes(b"data")
        recorder = Recorder(envelope("acc1"))
        client = make_client(recorder, upload_url="http://[::1")

        outcome = client.upload_file(file_path)
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.NETWORK
        assert outcome.message.startswith("Upload failed: Network error:")

        assert client.get_account_id() == Success("acc1")
        client.close()

    def test_request_after_close_is_failure(self):
        """Test that a closed client reports failures instead of reconnecting."""
        recorder = Recorder(envelope("acc1"))
        client = make_client(recorder)
        client.close()
        outcome = client.get_account_id()
        assert isinstance(outcome, Failure)
        assert recorder.requests == []


class TestDispatch:
    """Tests for the normalization of responses into outcomes."""

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 429, 500, 503])
    def test_non_success_status_embeds_code(self, status_code):
        """Test that a non-2xx status yields a failure containing the code."""
        response = httpx.Response(status_code, json={"status": "error"})
        client = make_client(Recorder(response))
        outcome = client.create_folder("root", "docs")
        assert isinstance(outcome, Failure)
        assert str(status_code) in outcome.message
        assert outcome.message == f"Create folder failed: {status_code}"
        assert outcome.status_code == status_code
        assert outcome.kind is FailureKind.HTTP_STATUS

    def test_error_body_is_not_inspected(self):
        """Test that the body of a failed response does not leak into the message."""
        response = httpx.Response(500, json={"status": "error-internal", "data": "x"})
        outcome = make_client(Recorder(response)).get_account_id()
        assert outcome.message == "Get account ID failed: 500"

    def test_null_data_is_failure(self):
        """Test that a successful status with null data is a failure."""
        outcome = make_client(Recorder(envelope(None))).get_account_id()
        assert isinstance(outcome, Failure)
        assert outcome.message == "Get account ID failed: No data received"
        assert outcome.kind is FailureKind.EMPTY_RESPONSE
        assert outcome.status_code is None

    def test_missing_data_is_failure(self):
        """Test that an envelope without a data field is a failure."""
        response = httpx.Response(200, json={"status": "ok"})
        outcome = make_client(Recorder(response)).get_account_details("acc1")
        assert isinstance(outcome, Failure)
        assert "No data received" in outcome.message

    def test_invalid_json_is_failure(self):
        """Test that an undecodable body is a failure, not an exception."""
        response = httpx.Response(200, content=b"<html>oops</html>")
        outcome = make_client(Recorder(response)).get_account_id()
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.EMPTY_RESPONSE

    def test_non_object_envelope_is_failure(self):
        """Test that a JSON body that is not an envelope is a failure."""
        response = httpx.Response(200, json=["a", "b"])
        outcome = make_client(Recorder(response)).search_within_folder("f", "a")
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.EMPTY_RESPONSE

    def test_success_wraps_data_unmodified(self):
        """Test that the success value is exactly the envelope data."""
        data = {
            "id": "folder1",
            "name": "docs",
            "type": "folder",
            "children": {"c1": {"id": "c1", "name": "a.txt", "type": "file"}},
        }
        outcome = make_client(Recorder(envelope(data))).get_folder_details("folder1")
        assert isinstance(outcome, Success)
        assert outcome.value == data

    def test_non_ok_status_string_is_not_revalidated(self):
        """Test that only the HTTP status and data presence decide success."""
        response = envelope({"id": "x"}, status="error-notFound")
        outcome = make_client(Recorder(response)).get_account_details("x")
        assert isinstance(outcome, Success)

    def test_empty_but_present_data_is_success(self):
        """Test that an empty object is data, not an absence of data."""
        outcome = make_client(Recorder(envelope({}))).move_content(["a"], "dest")
        assert isinstance(outcome, Success)
        assert outcome.value == {}

    def test_connect_error_is_network_failure(self):
        """Test that a connection error becomes a failure without status code."""
        recorder = Recorder(httpx.ConnectError("Connection refused"))
        outcome = make_client(recorder).get_best_server()
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.NETWORK
        assert outcome.status_code is None
        assert "Network error" in outcome.message
        assert "Connection refused" in outcome.message

    def test_timeout_is_timeout_failure(self):
        """Test that a timeout becomes a timeout failure."""
        recorder = Recorder(httpx.ReadTimeout("read timed out"))
        outcome = make_client(recorder).get_best_server()
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.TIMEOUT
        assert outcome.status_code is None
        assert "timed out" in outcome.message

    def test_unexpected_exception_is_caught(self):
        """Test that unanticipated exceptions do not escape to the caller."""
        recorder = Recorder(RuntimeError("boom"))
        outcome = make_client(recorder).get_best_server()
        assert isinstance(outcome, Failure)
        assert outcome.kind is FailureKind.UNEXPECTED
        assert "boom" in outcome.message

    def test_keyboard_interrupt_propagates(self):
        """Test that BaseExceptions are not turned into failures."""
        recorder = Recorder(KeyboardInterrupt())
        with pytest.raises(KeyboardInterrupt):
            make_client(recorder).get_best_server()

    def test_unauthenticated_account_lookup_reports_401(self):
        """Test anonymous account lookup against a server requiring auth."""

        def handler(request):
            if "Authorization" not in request.headers:
                return httpx.Response(401, json={"status": "error-auth"})
            return envelope("acc1")

        outcome = make_client(handler).get_account_id()
        assert isinstance(outcome, Failure)
        assert "401" in outcome.message
        assert outcome.status_code == 401

    def test_failure_unwrap_raises(self):
        """Test that unwrap bridges a failure to an exception."""
        outcome = make_client(Recorder(httpx.Response(404))).get_account_details("x")
        with pytest.raises(GofileHTTPError, match="404") as exc_info:
            outcome.unwrap()
        assert exc_info.value.status_code == 404


class TestBestServer:
    """Tests for the best server lookup."""

    def test_returns_server_name(self):
        """Test that the server name is extracted from the data."""
        recorder = Recorder(envelope({"server": "store4"}))
        outcome = make_client(recorder).get_best_server()
        assert outcome == Success("store4")
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == "/getServer"

    def test_missing_server_is_failure(self):
        """Test that data without a server name is a failure."""
        outcome = make_client(Recorder(envelope({"other": 1}))).get_best_server()
        assert isinstance(outcome, Failure)
        assert outcome.message == "Get best server failed: No data received"

    def test_repeated_lookups_are_independent(self):
        """Test that two lookups each hit the server."""
        recorder = Recorder(
            envelope({"server": "store1"}), envelope({"server": "store2"})
        )
        client = make_client(recorder)
        first = client.get_best_server()
        second = client.get_best_server()
        assert len(recorder.requests) == 2
        assert first == Success("store1")
        assert second == Success("store2")


class TestUploadFile:
    """Tests for multipart file upload."""

    def test_upload_without_folder_omits_folder_part(self, tmp_path):
        """Test that no folderId part is sent when folder_id is None."""
        file_path = tmp_path / "hello.txt"
        file_path.write_bytes(b"hello world")
        data = {"fileId": "f1", "downloadPage": "https://gofile.io/d/x"}
        recorder = Recorder(envelope(data))
        outcome = make_client(recorder).upload_file(file_path, folder_id=None)

        body = recorder.last.content
        assert isinstance(outcome, Success)
        assert recorder.last.method == "POST"
        assert recorder.last.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="file"; filename="hello.txt"' in body
        assert b"hello world" in body
        assert b'name="folderId"' not in body

    def test_upload_with_folder_includes_folder_part(self, tmp_path):
        """Test that a folderId text part carries the folder ID."""
        file_path = tmp_path / "hello.txt"
        file_path.write_bytes(b"hello world")
        recorder = Recorder(envelope({"fileId": "f1"}))
        make_client(recorder).upload_file(file_path, folder_id="F1")

        body = recorder.last.content
        assert b'name="folderId"' in body
        assert b'name="folderId"\r\n\r\nF1\r\n' in body

    def test_upload_from_file_object(self, tmp_path):
        """Test uploading from an open binary file object."""
        file_path = tmp_path / "report.pdf"
        file_path.write_bytes(b"%PDF")
        recorder = Recorder(envelope({"fileId": "f1"}))
        with open(file_path, "rb") as f:
            outcome = make_client(recorder).upload_file(f)
            assert not f.closed
        assert isinstance(outcome, Success)
        assert b'filename="report.pdf"' in recorder.last.content

    def test_upload_with_custom_filename(self, tmp_path):
        """Test that the stored file name can be overridden."""
        file_path = tmp_path / "tmp123"
        file_path.write_bytes(b"x")
        recorder = Recorder(envelope({"fileId": "f1"}))
        make_client(recorder).upload_file(file_path, filename="final.bin")
        assert b'filename="final.bin"' in recorder.last.content

    def test_upload_missing_file_is_failure(self, tmp_path):
        """Test that a missing local file is reported as a failure."""
        recorder = Recorder(envelope({"fileId": "f1"}))
        outcome = make_client(recorder).upload_file(tmp_path / "missing.txt")
        assert isinstance(outcome, Failure)
        assert outcome.message.startswith("Upload failed")
        assert recorder.requests == []

    def test_upload_failure_status(self, tmp_path):
        """Test upload failure message on a non-success status."""
        file_path = tmp_path / "a.txt"
        file_path.write_bytes(b"x")
        outcome = make_client(Recorder(httpx.Response(413))).upload_file(file_path)
        assert outcome == Failure("Upload failed: 413", FailureKind.HTTP_STATUS, 413)


class TestContentOperations:
    """Tests for the request shape of content operations."""

    def test_create_folder(self):
        """Test create folder request body."""
        recorder = Recorder(envelope({"id": "new", "name": "docs"}))
        outcome = make_client(recorder).create_folder("root1", "docs")
        assert outcome == Success({"id": "new", "name": "docs"})
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/contents/createFolder"
        assert recorder.last_json() == {"parentFolderId": "root1", "folderName": "docs"}

    def test_update_content(self):
        """Test update content path substitution and body."""
        recorder = Recorder(envelope({"id": "c1", "public": True}))
        make_client(recorder).update_content("c1", "public", True)
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/contents/c1/update"
        assert recorder.last_json() == {"attribute": "public", "attributeValue": True}

    def test_path_parameters_are_encoded(self):
        """Test that path parameters cannot escape their segment."""
        recorder = Recorder(envelope({"id": "x"}))
        make_client(recorder).get_account_details("a/b")
        assert recorder.last.url.raw_path == b"/accounts/a%2Fb"

    def test_delete_content_joins_ids(self):
        """Test that content IDs are sent as one comma-joined string."""
        recorder = Recorder(envelope({"a": {"status": "ok"}}))
        make_client(recorder).delete_content(["a", "b", "c"])
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/contents"
        assert recorder.last_json() == {"contentsId": "a,b,c"}

    def test_delete_content_rejects_empty_list(self):
        """Test that deleting nothing is a programming error."""
        client = make_client(Recorder(envelope({})))
        with pytest.raises(ValueError):
            client.delete_content([])

    def test_get_folder_details_without_password(self):
        """Test that no password query parameter is sent when unset."""
        recorder = Recorder(envelope({"id": "f1"}))
        make_client(recorder).get_folder_details("f1")
        assert recorder.last.url.path == "/contents/f1"
        assert "password" not in recorder.last.url.params

    def test_get_folder_details_with_password(self):
        """Test that the password is sent as a query parameter."""
        recorder = Recorder(envelope({"id": "f1"}))
        make_client(recorder).get_folder_details("f1", password="abc123")
        assert recorder.last.url.params["password"] == "abc123"

    def test_search_within_folder(self):
        """Test search query parameters."""
        recorder = Recorder(envelope([{"id": "c1", "name": "a.txt"}]))
        outcome = make_client(recorder).search_within_folder("f1", "a.t")
        assert outcome == Success([{"id": "c1", "name": "a.txt"}])
        assert recorder.last.url.path == "/contents/search"
        assert recorder.last.url.params["contentId"] == "f1"
        assert recorder.last.url.params["searchedString"] == "a.t"

    def test_copy_content(self):
        """Test copy content body."""
        recorder = Recorder(envelope(["n1", "n2"]))
        outcome = make_client(recorder).copy_content(["a", "b"], "dest")
        assert outcome == Success(["n1", "n2"])
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/contents/copy"
        assert recorder.last_json() == {"contentsId": "a,b", "folderId": "dest"}

    def test_move_content(self):
        """Test move content body."""
        recorder = Recorder(envelope({}))
        make_client(recorder).move_content(["a"], "dest")
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/contents/move"
        assert recorder.last_json() == {"contentsId": "a", "folderId": "dest"}

    def test_import_public_content(self):
        """Test import content body."""
        recorder = Recorder(envelope(["i1"]))
        make_client(recorder).import_public_content(["x", "y"])
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/contents/import"
        assert recorder.last_json() == {"contentsId": "x,y"}


class TestDirectLinks:
    """Tests for direct link management."""

    def test_create_without_options_sends_empty_body(self):
        """Test that unset restrictions are not transmitted."""
        recorder = Recorder(envelope({"id": "l1", "directLink": "https://x"}))
        make_client(recorder).create_direct_link("c1")
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/contents/c1/directlinks"
        assert recorder.last_json() == {}

    def test_create_omits_unset_expiry(self):
        """Test that an unset expiry key is absent from the body."""
        recorder = Recorder(envelope({"id": "l1"}))
        make_client(recorder).create_direct_link(
            "c1", domains_allowed=["example.com"], auth=["user:pw"]
        )
        body = recorder.last_json()
        assert "expireTime" not in body
        assert "sourceIpsAllowed" not in body
        assert body == {"domainsAllowed": ["example.com"], "auth": ["user:pw"]}

    def test_create_omits_none_fields(self):
        """Test that None is treated as absent, never sent as null."""
        recorder = Recorder(envelope({"id": "l1"}))
        make_client(recorder).create_direct_link("c1", expire_time=None)
        assert b"null" not in recorder.last.content
        assert recorder.last_json() == {}

    def test_create_keeps_empty_list(self):
        """Test that an explicit empty list is sent, unlike an unset field."""
        recorder = Recorder(envelope({"id": "l1"}))
        make_client(recorder).create_direct_link("c1", source_ips_allowed=[])
        assert recorder.last_json() == {"sourceIpsAllowed": []}

    def test_create_with_expiry(self):
        """Test that a given expiry is sent."""
        recorder = Recorder(envelope({"id": "l1"}))
        make_client(recorder).create_direct_link("c1", expire_time=1700000000)
        assert recorder.last_json() == {"expireTime": 1700000000}

    def test_update_direct_link(self):
        """Test update path and body."""
        recorder = Recorder(envelope({"id": "l1"}))
        make_client(recorder).update_direct_link(
            "c1", "l1", source_ips_allowed=["1.2.3.4"], expire_time=UNSET
        )
        assert recorder.last.method == "PUT"
        assert recorder.last.url.path == "/contents/c1/directlinks/l1"
        assert recorder.last_json() == {"sourceIpsAllowed": ["1.2.3.4"]}

    def test_delete_direct_link(self):
        """Test delete direct link path."""
        recorder = Recorder(envelope({}))
        outcome = make_client(recorder).delete_direct_link("c1", "l1")
        assert isinstance(outcome, Success)
        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == "/contents/c1/directlinks/l1"
        assert recorder.last.content == b""


class TestAccountOperations:
    """Tests for account operations."""

    def test_get_account_id(self):
        """Test account ID lookup."""
        outcome = make_client(Recorder(envelope("acc123"))).get_account_id()
        assert outcome == Success("acc123")

    def test_get_account_details(self):
        """Test account details path."""
        recorder = Recorder(envelope({"id": "acc123", "email": "a@b.c"}))
        outcome = make_client(recorder).get_account_details("acc123")
        assert recorder.last.url.path == "/accounts/acc123"
        assert outcome.value["email"] == "a@b.c"

    def test_reset_auth_token_does_not_change_client_token(self):
        """Test that resetting the token returns it without switching to it."""
        recorder = Recorder(envelope("new_token"), envelope("acc123"))
        client = make_client(recorder, token="old_token")
        outcome = client.reset_auth_token("acc123")
        assert outcome == Success("new_token")
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/accounts/acc123/resetToken"

        client.get_account_id()
        assert client.token == "old_token"
        assert recorder.last.headers["Authorization"] == "Bearer old_token"


class TestSharedInstance:
    """Tests for the lazily created shared client."""

    @pytest.fixture(autouse=True)
    def reset_shared_instance(self):
        GofileClient.reset_instance()
        yield
        GofileClient.reset_instance()

    def test_get_instance_returns_same_client(self):
        """Test that repeated calls return the same instance."""
        first = GofileClient.get_instance(token="t")
        second = GofileClient.get_instance(token="other")
        assert first is second
        assert second.token == "t"

    def test_reset_instance_creates_new_client(self):
        """Test that a reset allows a differently configured instance."""
        first = GofileClient.get_instance(token="t1")
        GofileClient.reset_instance()
        second = GofileClient.get_instance(token="t2")
        assert first is not second
        assert first._transport.is_closed
        assert second.token == "t2"

    def test_concurrent_first_access_builds_one_instance(self):
        """Test that racing first callers all observe a single instance."""
        constructed = []
        barrier = threading.Barrier(16)

        def slow_init(self, **kwargs):
            time.sleep(0.05)
            constructed.append(self)
            self._transport = Mock(is_closed=False)

        def get():
            barrier.wait()
            return GofileClient.get_instance(token="t")

        with patch.object(GofileClient, "__init__", slow_init):
            with ThreadPoolExecutor(max_workers=16) as executor:
                instances = list(executor.map(lambda _: get(), range(16)))

        assert len(constructed) == 1
        assert all(instance is instances[0] for instance in instances)
