"""JSON API consumed by the book club pages.

Books:        /api/books (GET/POST), /api/books/<id> (DELETE, admin)
Study guides: /api/guides (GET/POST), /api/guides/<id> (DELETE, admin),
              /api/guides/upload (POST multipart .docx)
Voting:       /api/votes (GET/POST/DELETE admin), /api/votes/<id>/vote (POST)
Genres:       /api/genres (GET/DELETE admin), /api/genres/vote (POST),
              /api/genres/history (GET)
Profile:      /api/profile (GET/PUT), /api/schema (GET)

Each browser session reads and writes its own local mirror scope.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Blueprint, jsonify, request

from bookclub.services import (
    Book,
    LocalMirror,
    StudyGuide,
    UserProfile,
    ValidationError,
    VotingOption,
    books_service,
    genre_votes_service,
    profile_service,
    schema,
    study_guides_service,
    voting_service,
)
from bookclub.utils import PermissionError, get_mirror_scope
from bookclub.utils.logging import get_logger

LOG = get_logger("bookclub.routes")

bp = Blueprint("bookclub_api", __name__, url_prefix="/api")

_ERROR_MESSAGES = {
    "permission_denied": "Administrator access required.",
    "invalid_payload": "Request body must be a JSON object.",
    "file_required": "Select at least one .docx file.",
}


def _json_error(code: str, status: int = 400, *, message: Optional[str] = None):
    payload: Dict[str, Any] = {"error": code}
    final = message or _ERROR_MESSAGES.get(code)
    if final:
        payload["message"] = final
    return jsonify(payload), status


def _mirror() -> LocalMirror:
    return LocalMirror(get_mirror_scope())


def _identity(mirror: LocalMirror) -> UserProfile:
    return profile_service.get_current_user(mirror)


def _ensure_admin(mirror: LocalMirror) -> None:
    if not profile_service.is_admin(_identity(mirror)):
        raise PermissionError("Admin privileges required")


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(_ERROR_MESSAGES["invalid_payload"])
    return data


@bp.errorhandler(ValidationError)
def _on_validation_error(exc: ValidationError):
    return _json_error("validation_error", 400, message=str(exc))


@bp.errorhandler(PermissionError)
def _on_permission_error(exc: PermissionError):
    return _json_error("permission_denied", 403)


# ---------------- Books ---------------

@bp.route("/books", methods=["GET"])
def list_books():
    books = books_service.list_books(_mirror())
    return jsonify({"books": [b.as_dict() for b in books]})


@bp.route("/books", methods=["POST"])
def create_book():
    mirror = _mirror()
    data = _json_body()
    if not data.get("addedBy"):
        data["addedBy"] = _identity(mirror).name
    book = books_service.save_book(mirror, Book.from_dict(data))
    return jsonify({"book": book.as_dict()}), 201


@bp.route("/books/<book_id>", methods=["DELETE"])
def delete_book(book_id: str):
    mirror = _mirror()
    _ensure_admin(mirror)
    books_service.delete_book(mirror, book_id)
    return jsonify({"status": "deleted", "id": book_id})


# ---------------- Study guides ---------------

@bp.route("/guides", methods=["GET"])
def list_guides():
    guides = study_guides_service.list_study_guides(_mirror())
    return jsonify({"guides": [g.as_dict() for g in guides]})


@bp.route("/guides", methods=["POST"])
def create_guide():
    guide = study_guides_service.save_study_guide(_mirror(), StudyGuide.from_dict(_json_body()))
    return jsonify({"guide": guide.as_dict()}), 201


@bp.route("/guides/upload", methods=["POST"])
def upload_guides():
    files = request.files.getlist("files")
    if not files:
        return _json_error("file_required")
    mirror = _mirror()
    title = (request.form.get("title") or "").strip()
    book_title = (request.form.get("bookTitle") or "").strip()
    for item in files:
        if not study_guides_service.is_docx(item.filename or "", item.mimetype):
            raise ValidationError("Only .docx files are allowed")
    saved = []
    for item in files:
        content = item.read()
        handle = study_guides_service.upload_study_guide_file(item.filename or "", item.mimetype)
        guide = StudyGuide(
            title=title or study_guides_service.default_title(item.filename or ""),
            book_title=book_title,
            file_url=handle,
            file_name=item.filename,
            file_size=len(content),
        )
        saved.append(study_guides_service.save_study_guide(mirror, guide))
    return jsonify({"guides": [g.as_dict() for g in saved]}), 201


@bp.route("/guides/<guide_id>", methods=["DELETE"])
def delete_guide(guide_id: str):
    mirror = _mirror()
    _ensure_admin(mirror)
    study_guides_service.delete_study_guide(mirror, guide_id)
    return jsonify({"status": "deleted", "id": guide_id})


# ---------------- Voting ---------------

@bp.route("/votes", methods=["GET"])
def list_votes():
    options = voting_service.rank_options(voting_service.list_voting_options(_mirror()))
    leader = voting_service.leading_option(options)
    return jsonify({
        "options": [o.as_dict() for o in options],
        "leader": leader.as_dict() if leader else None,
    })


@bp.route("/votes", methods=["POST"])
def create_vote_option():
    mirror = _mirror()
    data = _json_body()
    if not data.get("suggestedBy"):
        data["suggestedBy"] = _identity(mirror).name
    option = voting_service.save_voting_option(mirror, VotingOption.from_dict(data))
    return jsonify({"option": option.as_dict()}), 201


@bp.route("/votes/<option_id>/vote", methods=["POST"])
def vote_option(option_id: str):
    updated = voting_service.vote_for_option(_mirror(), option_id)
    return jsonify({"status": "recorded", "option": updated.as_dict() if updated else None})


@bp.route("/votes", methods=["DELETE"])
def clear_votes():
    mirror = _mirror()
    _ensure_admin(mirror)
    voting_service.clear_voting_options(mirror)
    return jsonify({"status": "cleared"})


# ---------------- Genres ---------------

@bp.route("/genres", methods=["GET"])
def list_genres():
    genres = genre_votes_service.list_genre_votes(_mirror())
    leader = genre_votes_service.leading_genre(genres)
    return jsonify({
        "genres": [g.as_dict() for g in genres],
        "leader": leader.as_dict() if leader else None,
    })


@bp.route("/genres/vote", methods=["POST"])
def vote_genre():
    mirror = _mirror()
    name = _json_body().get("name")
    record = genre_votes_service.vote_for_genre(mirror, _identity(mirror), name if isinstance(name, str) else "")
    return jsonify({"status": "recorded", "vote": record.as_dict()})


@bp.route("/genres", methods=["DELETE"])
def reset_genres():
    mirror = _mirror()
    _ensure_admin(mirror)
    genre_votes_service.reset_genre_votes(mirror)
    return jsonify({"status": "reset"})


@bp.route("/genres/history", methods=["GET"])
def genre_history():
    mirror = _mirror()
    records = genre_votes_service.user_genre_history(mirror, _identity(mirror))
    return jsonify({"history": [r.as_dict() for r in records]})


# ---------------- Profile ---------------

@bp.route("/profile", methods=["GET"])
def get_profile():
    identity = _identity(_mirror())
    return jsonify({"profile": identity.as_dict(), "is_admin": profile_service.is_admin(identity)})


@bp.route("/profile", methods=["PUT"])
def update_profile():
    mirror = _mirror()
    data = _json_body()
    name = data.get("name") if isinstance(data.get("name"), str) else ""
    email = data.get("email") if isinstance(data.get("email"), str) else ""
    if not name.strip() or not email.strip():
        raise ValidationError("name and email are required")
    profile = profile_service.set_current_user(mirror, UserProfile(name=name, email=email))
    profile_service.sync_profile(profile)
    return jsonify({"profile": profile.as_dict(), "is_admin": profile_service.is_admin(profile)})


@bp.route("/schema", methods=["GET"])
def get_schema():
    return jsonify({"schemas": schema.schema_manifest()})


def register_api(app: Any) -> None:
    if getattr(app, "_bookclub_api_bp", None):  # idempotent
        return
    app.register_blueprint(bp)
    setattr(app, "_bookclub_api_bp", bp)
    LOG.debug("api blueprint registered")


__all__ = ["bp", "register_api"]
