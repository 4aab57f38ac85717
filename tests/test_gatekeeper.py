"""Tests for the request gatekeeper: token extraction, the decision state machine, and the dependency."""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from app.api.deps import (
    GateOutcome,
    evaluate_request,
    extract_token,
    get_current_user,
    require_admin,
    require_role,
)
from app.core.exceptions import register_exception_handlers
from app.core.roles import Role
from app.core.security import create_access_token
from app.models import User
from tests.utils import bearer, make_user, reset_db


def _request(headers: dict[str, str]) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in headers.items()]
    return Request(
        {"type": "http", "method": "GET", "path": "/", "headers": raw, "query_string": b""}
    )


def _actor(user_id: int = 1, role: str = "staff", is_active: bool = True) -> SimpleNamespace:
    return SimpleNamespace(
        id=user_id, email=f"user{user_id}@example.com", role=role, name="U", is_active=is_active
    )


class TestExtractToken(unittest.TestCase):
    def test_bearer_header(self) -> None:
        self.assertEqual(extract_token(_request({"Authorization": "Bearer abc.def.ghi"})), "abc.def.ghi")

    def test_bearer_scheme_is_case_insensitive(self) -> None:
        self.assertEqual(extract_token(_request({"Authorization": "bearer abc"})), "abc")

    def test_bare_header_value(self) -> None:
        self.assertEqual(extract_token(_request({"Authorization": "abc.def.ghi"})), "abc.def.ghi")

    def test_cookie(self) -> None:
        self.assertEqual(extract_token(_request({"Cookie": "token=from-cookie"})), "from-cookie")

    def test_header_wins_over_cookie(self) -> None:
        req = _request({"Authorization": "Bearer from-header", "Cookie": "token=from-cookie"})
        self.assertEqual(extract_token(req), "from-header")

    def test_empty_bearer_falls_back_to_cookie(self) -> None:
        req = _request({"Authorization": "Bearer ", "Cookie": "token=from-cookie"})
        self.assertEqual(extract_token(req), "from-cookie")

    def test_absent(self) -> None:
        self.assertIsNone(extract_token(_request({})))
        self.assertIsNone(extract_token(_request({"Cookie": "other=1"})))


class TestEvaluateRequest(unittest.TestCase):
    def setUp(self) -> None:
        self.actors = {
            1: _actor(1, "staff"),
            2: _actor(2, "moderator"),
            3: _actor(3, "admin"),
            4: _actor(4, "admin", is_active=False),
        }
        self.lookups: list[int] = []

    def find(self, user_id: int):
        self.lookups.append(user_id)
        return self.actors.get(user_id)

    def token_for(self, user_id: int, role: str = "staff") -> str:
        return create_access_token(_actor(user_id, role))

    def test_missing_token(self) -> None:
        decision = evaluate_request(None, self.find, None)
        self.assertIs(decision.outcome, GateOutcome.UNAUTHENTICATED)
        self.assertEqual(self.lookups, [])

    def test_invalid_token_skips_lookup(self) -> None:
        decision = evaluate_request("invalid.token.here", self.find, None)
        self.assertIs(decision.outcome, GateOutcome.UNAUTHENTICATED)
        self.assertEqual(self.lookups, [])

    def test_expired_token(self) -> None:
        token = create_access_token(_actor(3, "admin"), now=datetime.now(UTC) - timedelta(days=8))
        decision = evaluate_request(token, self.find, Role.ADMIN)
        self.assertIs(decision.outcome, GateOutcome.UNAUTHENTICATED)

    def test_unknown_subject(self) -> None:
        decision = evaluate_request(self.token_for(99), self.find, None)
        self.assertIs(decision.outcome, GateOutcome.UNAUTHENTICATED)
        self.assertEqual(self.lookups, [99])

    def test_inactive_actor(self) -> None:
        decision = evaluate_request(self.token_for(4, "admin"), self.find, None)
        self.assertIs(decision.outcome, GateOutcome.UNAUTHENTICATED)
        self.assertEqual(decision.reason, "Account is inactive")

    def test_insufficient_role(self) -> None:
        decision = evaluate_request(self.token_for(1), self.find, Role.ADMIN)
        self.assertIs(decision.outcome, GateOutcome.FORBIDDEN)

    def test_forward_attaches_actor(self) -> None:
        decision = evaluate_request(self.token_for(3, "admin"), self.find, Role.ADMIN)
        self.assertIs(decision.outcome, GateOutcome.FORWARD)
        self.assertIs(decision.actor, self.actors[3])

    def test_no_required_role_admits_any_active_actor(self) -> None:
        for user_id in (1, 2, 3):
            decision = evaluate_request(self.token_for(user_id), self.find, None)
            self.assertIs(decision.outcome, GateOutcome.FORWARD)

    def test_stored_role_overrides_token_claim(self) -> None:
        # Token claims admin, but the account has since been demoted to staff.
        decision = evaluate_request(self.token_for(1, "admin"), self.find, Role.ADMIN)
        self.assertIs(decision.outcome, GateOutcome.FORBIDDEN)

    def test_moderator_route(self) -> None:
        self.assertIs(
            evaluate_request(self.token_for(1), self.find, Role.MODERATOR).outcome,
            GateOutcome.FORBIDDEN,
        )
        self.assertIs(
            evaluate_request(self.token_for(2), self.find, Role.MODERATOR).outcome,
            GateOutcome.FORWARD,
        )


def _gated_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/admin-only")
    def admin_only(request: Request, user: Annotated[User, Depends(require_admin)]) -> dict:
        return {"handled": True, "email": user.email, "state_user_id": request.state.user.id}

    @app.get("/moderator-only")
    def moderator_only(user: Annotated[User, Depends(require_role(Role.MODERATOR))]) -> dict:
        return {"role": user.role}

    @app.get("/any-user")
    def any_user(user: Annotated[User, Depends(get_current_user)]) -> list[int]:
        return [user.id, 7, 11]

    return app


class TestGatekeeperDependency(unittest.TestCase):
    """The dependency turns decisions into 401/403 or forwards with the handler's result unchanged."""

    def setUp(self) -> None:
        reset_db()
        self.staff = make_user("staff@example.com", Role.STAFF)
        self.moderator = make_user("mod@example.com", Role.MODERATOR)
        self.admin = make_user("admin@example.com", Role.ADMIN)
        self.client = TestClient(_gated_app())

    def test_no_token_is_401(self) -> None:
        resp = self.client.get("/admin-only")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "No token provided"})
        self.assertEqual(resp.headers.get("www-authenticate"), "Bearer")

    def test_garbage_token_is_401(self) -> None:
        resp = self.client.get("/admin-only", headers=bearer("invalid.token.here"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json(), {"error": "Invalid token"})

    def test_staff_token_on_admin_route_is_403(self) -> None:
        resp = self.client.get("/admin-only", headers=bearer(create_access_token(self.staff)))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json(), {"error": "Insufficient permissions"})

    def test_admin_token_forwards_handler_result(self) -> None:
        resp = self.client.get("/admin-only", headers=bearer(create_access_token(self.admin)))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(
            resp.json(),
            {"handled": True, "email": "admin@example.com", "state_user_id": self.admin.id},
        )

    def test_cookie_token_is_accepted(self) -> None:
        cookie = f"token={create_access_token(self.admin)}"
        resp = self.client.get("/admin-only", headers={"Cookie": cookie})
        self.assertEqual(resp.status_code, 200)

    def test_role_hierarchy_on_moderator_route(self) -> None:
        self.assertEqual(
            self.client.get("/moderator-only", headers=bearer(create_access_token(self.staff))).status_code,
            403,
        )
        for user in (self.moderator, self.admin):
            resp = self.client.get("/moderator-only", headers=bearer(create_access_token(user)))
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json(), {"role": user.role})

    def test_authenticated_only_route(self) -> None:
        resp = self.client.get("/any-user", headers=bearer(create_access_token(self.staff)))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), [self.staff.id, 7, 11])

    def test_token_for_deleted_row_is_401(self) -> None:
        ghost = SimpleNamespace(id=9999, email="ghost@example.com", role="admin", name="Ghost")
        resp = self.client.get("/any-user", headers=bearer(create_access_token(ghost)))
        self.assertEqual(resp.status_code, 401)


if __name__ == "__main__":
    unittest.main()
