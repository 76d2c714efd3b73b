"""
Snippets Routes - JSON API over SnippetService.
"""
from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request, session

from gitsnip.application.dto.snippet_input_dto import SnippetInputDTO, Viewer
from gitsnip.domain.errors import (
    AuthenticationRequiredError,
    ConflictError,
    GitSnipError,
    NotFoundError,
    PermissionDeniedError,
    RemoteError,
)
from gitsnip.domain.services.patch_parser import parse_patch

logger = logging.getLogger(__name__)

snippets_bp = Blueprint("snippets_api", __name__, url_prefix="/api/snippets")

# session keys populated by the external OAuth flow
SESSION_LOGIN_KEY = "github_login"
SESSION_TOKEN_KEY = "github_token"


def _service():
    service = current_app.config.get("SNIPPET_SERVICE")
    if service is None:
        from gitsnip.infrastructure.composition import get_snippet_service

        service = get_snippet_service()
    return service


def _viewer() -> Viewer:
    return Viewer(
        username=session.get(SESSION_LOGIN_KEY) or None,
        credential=session.get(SESSION_TOKEN_KEY) or None,
    )


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def _input_from_request() -> SnippetInputDTO:
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValueError("request body must be JSON")
    return SnippetInputDTO.from_payload(payload)


@snippets_bp.errorhandler(ValueError)
def _invalid_input(e):
    return _error(str(e) or "invalid input", 400)


@snippets_bp.errorhandler(AuthenticationRequiredError)
def _unauthenticated(e):
    return _error("Unauthorized", 401)


@snippets_bp.errorhandler(PermissionDeniedError)
def _forbidden(e):
    return _error("Forbidden", 403)


@snippets_bp.errorhandler(NotFoundError)
def _not_found(e):
    return _error("Not found", 404)


@snippets_bp.errorhandler(ConflictError)
def _conflict(e):
    return _error("Snippet was modified concurrently, reload and retry", 409)


@snippets_bp.errorhandler(RemoteError)
def _remote_failure(e):
    logger.error("remote store failure: %s", e)
    return _error("Remote store failure", 502)


@snippets_bp.errorhandler(GitSnipError)
def _internal(e):
    logger.exception("snippets api failed: %s", e)
    return _error("Internal error", 500)


@snippets_bp.route("", methods=["GET"])
async def api_list_snippets():
    snippets = await _service().list_snippets(_viewer())
    return jsonify({"snippets": [s.to_dict() for s in snippets]})


@snippets_bp.route("/new", methods=["POST"])
async def api_create_snippet():
    viewer = _viewer()
    service = _service()
    # identity is checked before the body is validated
    service.require_writer(viewer)
    dto = _input_from_request()
    snippet = await service.create_snippet(dto, viewer)
    return jsonify({"snippet": snippet.to_dict()})


@snippets_bp.route("/<snippet_id>", methods=["GET"])
async def api_get_snippet(snippet_id: str):
    snippet = await _service().get_snippet(snippet_id, _viewer())
    if snippet is None:
        return _error("Snippet not found", 404)
    return jsonify({"snippet": snippet.to_dict()})


@snippets_bp.route("/<snippet_id>", methods=["PUT"])
async def api_update_snippet(snippet_id: str):
    viewer = _viewer()
    service = _service()
    service.require_writer(viewer)
    dto = _input_from_request()
    snippet = await service.update_snippet(snippet_id, dto, viewer)
    if snippet is None:
        return _error("Snippet not found", 404)
    return jsonify({"snippet": snippet.to_dict()})


@snippets_bp.route("/<snippet_id>", methods=["DELETE"])
async def api_delete_snippet(snippet_id: str):
    deleted = await _service().delete_snippet(snippet_id, _viewer())
    if not deleted:
        return _error("Snippet not found", 404)
    return jsonify({"success": True})


@snippets_bp.route("/<snippet_id>/revisions", methods=["GET"])
async def api_list_revisions(snippet_id: str):
    limit = request.args.get("limit", default=50, type=int)
    revisions = await _service().list_revisions(snippet_id, _viewer(), limit=limit)
    if revisions is None:
        return _error("Snippet not found", 404)
    return jsonify({"revisions": [r.to_dict() for r in revisions]})


@snippets_bp.route("/<snippet_id>/revisions/<sha>", methods=["GET"])
async def api_get_revision(snippet_id: str, sha: str):
    snippet = await _service().get_revision(snippet_id, sha, _viewer())
    if snippet is None:
        return _error("Revision not found", 404)
    return jsonify({"snippet": snippet.to_dict()})


@snippets_bp.route("/<snippet_id>/revisions/<sha>/diff", methods=["GET"])
async def api_get_revision_diff(snippet_id: str, sha: str):
    diff = await _service().get_revision_diff(snippet_id, sha, _viewer())
    if diff is None:
        return _error("Diff not found", 404)
    data = diff.to_dict()
    for entry, change in zip(data["files"], diff.files):
        entry["lines"] = [line.to_dict() for line in parse_patch(change.patch)]
    return jsonify({"diff": data})
