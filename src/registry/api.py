"""
Registry HTTP API.

Provides endpoints for:
- Initializing a project for the calling identity
- Adding, removing and verifying members
- Reading project records and their raw account layout

The caller identity arrives in the X-Caller-Identity header and is trusted
as already authenticated upstream.
"""

from typing import Callable, Optional

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from ..shared.logger import get_logger
from .codec import PROJECT_ACCOUNT_SIZE, encode_project
from .errors import (
    AddressMismatchError,
    ConcurrentModificationError,
    InvalidIdentityError,
    ProjectAlreadyInitializedError,
    ProjectNotFoundError,
    RegistryErrorCode,
)
from .types import CALLER_HEADER, MemberRequest, OperationResult, Project

logger = get_logger("registry-api", __name__)

ERROR_STATUS = {
    RegistryErrorCode.UNAUTHORIZED: 403,
    RegistryErrorCode.MEMBER_ALREADY_EXISTS: 409,
    RegistryErrorCode.MAX_MEMBERS_REACHED: 409,
    RegistryErrorCode.MEMBER_NOT_FOUND: 404,
}

# Flask Blueprint for registry routes
registry_bp = Blueprint("registry", __name__, url_prefix="/api/projects")

# Set by the server at startup; returns None when storage is unavailable
_service_provider: Optional[Callable] = None


def set_service_provider(provider: Optional[Callable]) -> None:
    global _service_provider
    _service_provider = provider


def _service():
    return _service_provider() if _service_provider is not None else None


def _project_body(project: Project, address: Optional[str] = None) -> dict:
    body = project.model_dump()
    body["member_count"] = len(project.members)
    if address is not None:
        body["address"] = address
    return body


def _result_response(result: OperationResult, success_status: int = 200):
    if result.ok:
        body = {"ok": True, "address": result.address}
        if result.project is not None:
            body["project"] = _project_body(result.project, result.address)
        return jsonify(body), success_status
    return jsonify({
        "ok": False,
        "error": result.message,
        "code": result.error.value,
        "error_number": result.error_number,
        "address": result.address,
    }), ERROR_STATUS[result.error]


def _error(message: str, status: int, code: Optional[str] = None):
    body = {"error": message}
    if code:
        body["code"] = code
    return jsonify(body), status


def _caller() -> Optional[str]:
    return request.headers.get(CALLER_HEADER)


def _dispatch(operation: str, handler: Callable):
    """Run a service call and translate hosting-layer exceptions to HTTP."""
    service = _service()
    if service is None:
        return _error("Database unavailable", 503)
    try:
        return handler(service)
    except InvalidIdentityError as e:
        return _error(str(e), 400, "InvalidIdentity")
    except ProjectNotFoundError as e:
        return _error(str(e), 404, "ProjectNotFound")
    except ProjectAlreadyInitializedError as e:
        return _error(str(e), 409, "ProjectAlreadyInitialized")
    except ConcurrentModificationError as e:
        logger.warning(f"{operation} gave up after revision conflicts: {e}")
        return _error(str(e), 409, "ConcurrentModification")
    except AddressMismatchError as e:
        return _error(str(e), 409, "AddressMismatch")
    except RuntimeError as e:
        logger.error(f"Storage failure during {operation}: {e}", exc_info=True)
        return _error(f"Failed to {operation.replace('_', ' ')}", 503)
    except Exception as e:
        logger.error(f"Unexpected error during {operation}: {e}", exc_info=True)
        return _error("Internal server error", 500)


@registry_bp.route("", methods=["POST"])
def initialize_project():
    """Initialize a project owned by the caller.

    Response:
        201 {"ok": true, "address": ..., "project": {...}}

    Errors:
        400: Missing or malformed caller identity
        409: Project already initialized for this owner
        503: Database unavailable
    """
    caller = _caller()
    if not caller:
        return _error(f"{CALLER_HEADER} header is required", 400)
    return _dispatch(
        "initialize_project",
        lambda service: _result_response(service.initialize_project(caller), 201),
    )


@registry_bp.route("", methods=["GET"])
def list_projects():
    """List project summaries, or resolve one owner with ?owner=."""
    owner = request.args.get("owner")

    def handler(service):
        if owner:
            address, project = service.find_project(owner)
            return jsonify(_project_body(project, address)), 200
        return jsonify([s.model_dump() for s in service.list_projects()]), 200

    return _dispatch("list_projects", handler)


@registry_bp.route("/<address>", methods=["GET"])
def get_project(address: str):
    return _dispatch(
        "get_project",
        lambda service: (jsonify(_project_body(service.get_project(address), address.lower())), 200),
    )


@registry_bp.route("/<address>/account", methods=["GET"])
def get_project_account(address: str):
    """Return the fixed-size account layout of a project as hex."""
    def handler(service):
        data = encode_project(service.get_project(address))
        return jsonify({"address": address.lower(), "size": PROJECT_ACCOUNT_SIZE, "data": data.hex()}), 200

    return _dispatch("get_project_account", handler)


@registry_bp.route("/<address>/members", methods=["POST"])
def add_member(address: str):
    """Add a member. Request body: {"member": "<64 hex chars>"}."""
    caller = _caller()
    if not caller:
        return _error(f"{CALLER_HEADER} header is required", 400)
    try:
        payload = MemberRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return jsonify({"error": "Validation failed", "details": e.errors(include_context=False)}), 400

    return _dispatch(
        "add_member",
        lambda service: _result_response(service.add_member(address, caller, payload.member)),
    )


@registry_bp.route("/<address>/members/<member>", methods=["DELETE"])
def remove_member(address: str, member: str):
    caller = _caller()
    if not caller:
        return _error(f"{CALLER_HEADER} header is required", 400)
    return _dispatch(
        "remove_member",
        lambda service: _result_response(service.remove_member(address, caller, member)),
    )


@registry_bp.route("/<address>/members/<member>", methods=["GET"])
def check_membership(address: str, member: str):
    """Verify membership.

    Query params:
        expected_owner: Owner identity the caller believes holds this project (required)

    Response:
        200 {"ok": true, "is_member": true}
    """
    expected_owner = request.args.get("expected_owner")
    if not expected_owner:
        return _error("expected_owner query parameter is required", 400)

    def handler(service):
        result = service.check_membership(address, member, expected_owner)
        if result.ok:
            return jsonify({"ok": True, "is_member": True, "address": result.address}), 200
        return _result_response(result)

    return _dispatch("check_membership", handler)
