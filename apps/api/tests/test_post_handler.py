"""Post request handler tests exercised without the HTTP layer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
import unittest

import jwt

from postboard.adapters.auth import JwtTokenVerifier
from postboard.repositories.memory import InMemoryStore
from postboard.schemas.envelope import ResponseStatus
from postboard.schemas.post import PostKind, PostOperation
from postboard.services.posts import PostRequest, PostRequestHandler, parse_post_payload, resolve_kind
from postboard.errors import NotFoundError, ValidationError

SECRET = "test-signing-secret-0123456789abcdef"


def _token(*, expired: bool = False) -> str:
    now = datetime.now(UTC)
    if expired:
        now -= timedelta(days=2)
    return jwt.encode(
        {
            "sub": "user-1",
            "name": "Lester Tester",
            "email": "test@user.com",
            "iat": now,
            "exp": now + timedelta(days=1),
        },
        SECRET,
        algorithm="HS256",
    )


def _document(title: object = "Hello", body: object = "World", **extra: object) -> dict:
    attributes: dict[str, object] = {}
    if title is not None:
        attributes["title"] = title
    if body is not None:
        attributes["body"] = body
    return {"data": {"attributes": attributes, **extra}}


class PostHandlerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryStore()
        self.handler = PostRequestHandler(self.store, JwtTokenVerifier(SECRET))

    def _handle(self, kind: PostKind | str, operation: PostOperation | str, **kwargs: object):
        return self.handler.handle(PostRequest(kind=kind, operation=operation, **kwargs))


class AnonymousAccessTests(PostHandlerTestCase):
    def test_public_reads_never_require_credential(self) -> None:
        post = self.store.create_post(PostKind.PUBLIC, title="T", body="B")

        listed = self._handle(PostKind.PUBLIC, PostOperation.LIST)
        read = self._handle(PostKind.PUBLIC, PostOperation.READ, post_id=post.id)

        self.assertEqual(listed.status, ResponseStatus.OK)
        self.assertEqual(read.status, ResponseStatus.OK)
        self.assertEqual(read.body()["data"]["id"], post.id)

    def test_private_operations_without_credential_are_unauthorized(self) -> None:
        post = self.store.create_post(PostKind.PRIVATE, title="T", body="B")
        calls_before = self.store.post_call_count

        for operation in PostOperation:
            with self.subTest(operation=operation):
                response = self._handle(
                    PostKind.PRIVATE,
                    operation,
                    post_id=post.id,
                    payload=_document(),
                )
                self.assertEqual(response.status, ResponseStatus.UNAUTHORIZED)
                error = response.body()["errors"][0]
                self.assertEqual(error["code"], "unauthorized")
                self.assertEqual(error["details"], {"reason": "authentication_required"})
        self.assertEqual(self.store.post_call_count, calls_before)

    def test_public_writes_without_credential_are_unauthorized(self) -> None:
        post = self.store.create_post(PostKind.PUBLIC, title="T", body="B")

        for operation in (PostOperation.CREATE, PostOperation.UPDATE, PostOperation.DELETE):
            with self.subTest(operation=operation):
                response = self._handle(PostKind.PUBLIC, operation, post_id=post.id, payload=_document())
                self.assertEqual(response.status_code, 401)

        self.assertEqual(self.store.post_write_count, 1)

    def test_anonymous_write_with_bad_payload_is_unauthorized_not_invalid(self) -> None:
        response = self._handle(PostKind.PRIVATE, PostOperation.CREATE, payload={"nope": True})

        self.assertEqual(response.status, ResponseStatus.UNAUTHORIZED)


class AuthenticatedAccessTests(PostHandlerTestCase):
    def test_create_then_read_round_trips_attributes(self) -> None:
        created = self._handle(
            PostKind.PRIVATE,
            PostOperation.CREATE,
            credential=_token(),
            payload=_document(title="Secret title", body="Secret body"),
        )
        self.assertEqual(created.status, ResponseStatus.CREATED)
        post_id = created.body()["data"]["id"]

        read = self._handle(PostKind.PRIVATE, PostOperation.READ, credential=_token(), post_id=post_id)
        data = read.body()["data"]
        self.assertEqual(data["type"], "private-posts")
        self.assertEqual(data["attributes"]["title"], "Secret title")
        self.assertEqual(data["attributes"]["body"], "Secret body")

    def test_public_writes_with_valid_credential_reach_store(self) -> None:
        created = self._handle(PostKind.PUBLIC, PostOperation.CREATE, credential=_token(), payload=_document())
        post_id = created.body()["data"]["id"]

        updated = self._handle(
            PostKind.PUBLIC,
            PostOperation.UPDATE,
            credential=_token(),
            post_id=post_id,
            payload=_document(title="Changed", body=None),
        )
        self.assertEqual(updated.status, ResponseStatus.OK)
        self.assertEqual(updated.body()["data"]["attributes"]["title"], "Changed")
        self.assertEqual(updated.body()["data"]["attributes"]["body"], "World")
        self.assertIn("updated_at", updated.body()["data"]["attributes"])

        deleted = self._handle(PostKind.PUBLIC, PostOperation.DELETE, credential=_token(), post_id=post_id)
        self.assertEqual(deleted.status, ResponseStatus.OK)
        self.assertEqual(deleted.body(), {"data": {"type": "public-posts", "id": post_id}})
        self.assertEqual(self.store.post_write_count, 3)

    def test_each_successful_request_issues_one_store_call(self) -> None:
        before = self.store.post_call_count
        self._handle(PostKind.PRIVATE, PostOperation.CREATE, credential=_token(), payload=_document())
        self._handle(PostKind.PRIVATE, PostOperation.LIST, credential=_token())

        self.assertEqual(self.store.post_call_count, before + 2)

    def test_deleting_missing_post_twice_returns_not_found_both_times(self) -> None:
        for _ in range(2):
            response = self._handle(PostKind.PRIVATE, PostOperation.DELETE, credential=_token(), post_id="missing")
            self.assertEqual(response.status, ResponseStatus.NOT_FOUND)
            self.assertEqual(response.body()["errors"][0]["code"], "not_found")

    def test_read_and_update_of_missing_post_return_not_found(self) -> None:
        read = self._handle(PostKind.PUBLIC, PostOperation.READ, post_id="missing")
        update = self._handle(
            PostKind.PUBLIC,
            PostOperation.UPDATE,
            credential=_token(),
            post_id="missing",
            payload=_document(),
        )

        self.assertEqual(read.status, ResponseStatus.NOT_FOUND)
        self.assertEqual(update.status, ResponseStatus.NOT_FOUND)

    def test_post_kinds_are_stored_separately(self) -> None:
        post = self.store.create_post(PostKind.PRIVATE, title="T", body="B")

        response = self._handle(PostKind.PUBLIC, PostOperation.READ, post_id=post.id)
        self.assertEqual(response.status, ResponseStatus.NOT_FOUND)

    def test_expired_credential_is_unauthorized_with_reason(self) -> None:
        response = self._handle(PostKind.PRIVATE, PostOperation.LIST, credential=_token(expired=True))

        self.assertEqual(response.status, ResponseStatus.UNAUTHORIZED)
        self.assertEqual(response.body()["errors"][0]["details"], {"reason": "expired_credential"})

    def test_invalid_credential_on_public_read_is_treated_as_anonymous(self) -> None:
        response = self._handle(PostKind.PUBLIC, PostOperation.LIST, credential="garbage")

        self.assertEqual(response.status, ResponseStatus.OK)

    def test_empty_title_is_validation_failed(self) -> None:
        response = self._handle(
            PostKind.PRIVATE,
            PostOperation.CREATE,
            credential=_token(),
            payload=_document(title="", body="x"),
        )

        self.assertEqual(response.status, ResponseStatus.BAD_REQUEST)
        error = response.body()["errors"][0]
        self.assertEqual(error["code"], "validation_failed")
        self.assertEqual(error["details"], {"fields": ["title"]})
        self.assertEqual(self.store.post_write_count, 0)

    def test_missing_identifier_is_validation_failed(self) -> None:
        response = self._handle(PostKind.PUBLIC, PostOperation.READ)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.body()["errors"][0]["code"], "validation_failed")

    def test_list_returns_every_stored_post(self) -> None:
        for index in range(3):
            self.store.create_post(PostKind.PUBLIC, title=f"T{index}", body="B")

        response = self._handle(PostKind.PUBLIC, PostOperation.LIST)
        body = response.body()
        self.assertEqual(response.status, ResponseStatus.OK)
        self.assertEqual(len(body["data"]), 3)
        self.assertEqual(body["meta"], {"count": 3})
        self.assertEqual([item["attributes"]["title"] for item in body["data"]], ["T0", "T1", "T2"])


class DispatchTests(PostHandlerTestCase):
    def test_string_tags_resolve_to_kinds_and_operations(self) -> None:
        self.store.create_post(PostKind.PUBLIC, title="T", body="B")

        response = self._handle("public-posts", "list")
        self.assertEqual(response.status, ResponseStatus.OK)
        self.assertEqual(resolve_kind("private_posts"), PostKind.PRIVATE)
        self.assertEqual(resolve_kind("Public"), PostKind.PUBLIC)

    def test_unknown_resource_kind_is_not_found(self) -> None:
        response = self._handle("draft-posts", "list")

        self.assertEqual(response.status, ResponseStatus.NOT_FOUND)
        with self.assertRaises(NotFoundError):
            resolve_kind("comments")

    def test_unknown_operation_is_bad_request(self) -> None:
        response = self._handle(PostKind.PUBLIC, "archive")

        self.assertEqual(response.status, ResponseStatus.BAD_REQUEST)

    def test_store_failure_is_retryable_server_error(self) -> None:
        self.store.unavailable_message = "database offline"

        response = self._handle(PostKind.PUBLIC, PostOperation.LIST)
        self.assertEqual(response.status, ResponseStatus.SERVER_ERROR)
        self.assertEqual(response.status_code, 503)
        error = response.body()["errors"][0]
        self.assertEqual(error["code"], "store_unavailable")
        self.assertEqual(error["details"], {"retryable": True})
        self.assertEqual(self.store.post_call_count, 1)


class PayloadParsingTests(unittest.TestCase):
    def _parse(self, payload: object, operation: PostOperation = PostOperation.CREATE, post_id: str | None = None):
        return parse_post_payload(payload, kind=PostKind.PUBLIC, operation=operation, post_id=post_id)

    def test_valid_create_document(self) -> None:
        changes = self._parse(_document(type="public-posts"))

        self.assertEqual((changes.title, changes.body), ("Hello", "World"))

    def test_rejected_documents(self) -> None:
        cases = {
            "missing_body": None,
            "not_an_object": ["title"],
            "no_data": {"attributes": {"title": "T", "body": "B"}},
            "wrong_type": _document(type="private-posts"),
            "client_id_on_create": _document(id="abc"),
            "unknown_attribute": {"data": {"attributes": {"title": "T", "body": "B", "author": "me"}}},
            "missing_title": _document(title=None),
            "blank_body": _document(body="   "),
            "non_text_title": _document(title=5),
            "unknown_data_member": _document(relationships={}),
        }
        for label, payload in cases.items():
            with self.subTest(case=label):
                with self.assertRaises(ValidationError) as context:
                    self._parse(payload)
                self.assertEqual(context.exception.payload.code, "validation_failed")

    def test_update_accepts_partial_attributes_and_matching_id(self) -> None:
        changes = self._parse(_document(title=None, body="New", id="post-1"), PostOperation.UPDATE, "post-1")

        self.assertIsNone(changes.title)
        self.assertEqual(changes.body, "New")

    def test_update_rejects_mismatched_id_and_empty_attributes(self) -> None:
        for payload in (_document(id="other"), _document(title=None, body=None)):
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError):
                    self._parse(payload, PostOperation.UPDATE, "post-1")


class _FailingStore(InMemoryStore):
    def list_posts(self, kind: PostKind):
        raise OSError("disk gone")


class UnexpectedFailureTests(unittest.TestCase):
    def test_unexpected_store_failure_becomes_internal_error_envelope(self) -> None:
        handler = PostRequestHandler(_FailingStore(), JwtTokenVerifier(SECRET))

        with self.assertLogs("postboard.services.posts", level="ERROR"):
            response = handler.handle(PostRequest(kind=PostKind.PUBLIC, operation=PostOperation.LIST))

        self.assertEqual(response.status, ResponseStatus.SERVER_ERROR)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.body(),
            {"errors": [{"status": "500", "code": "internal_error", "message": "Internal server error"}]},
        )
