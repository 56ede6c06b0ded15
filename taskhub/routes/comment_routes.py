from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy.exc import IntegrityError

from taskhub.errors import AuthorizationDenied, NotFound
from taskhub.models import Comment, Mention
from taskhub.services.notification_service import notify_comment
from taskhub.services.task_service import get_task_or_404
from taskhub.utils.db import db
from taskhub.utils.validation import FieldErrors, clean_id_list, clean_string, get_payload

comments_bp = Blueprint("comments", __name__)


@comments_bp.get("/<int:task_id>/comments")
@jwt_required()
def list_comments(task_id):
    get_task_or_404(task_id)
    comments = db.session.execute(
        db.select(Comment)
        .filter_by(task_id=task_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    ).scalars().all()
    return jsonify(items=[comment.to_dict() for comment in comments]), 200


@comments_bp.post("/<int:task_id>/comments")
@jwt_required()
def create_comment(task_id):
    actor = current_user
    payload = get_payload()
    errors = FieldErrors()
    content = clean_string(payload, "content", errors, required=True, max_length=1000)
    mentioned_user_ids = clean_id_list(payload, "mentioned_user_ids", errors)
    errors.raise_if_any()

    task = get_task_or_404(task_id)

    # Mention targets are not looked up first; the users FK rejects unknown ids
    # and the whole comment is rolled back with it.
    try:
        comment = Comment(content=content, task_id=task.id, user_id=actor.id)
        db.session.add(comment)
        db.session.flush()
        for user_id in mentioned_user_ids:
            comment.mentions.append(Mention(mentioned_user_id=user_id))
        notify_comment(task, comment, actor, mentioned_user_ids)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        current_app.logger.warning("Comment on task %s rejected: %s", task_id, exc.orig)
        return jsonify(error="Failed to create comment"), 500

    return jsonify(item=comment.to_dict()), 201


@comments_bp.delete("/<int:task_id>/comments/<int:comment_id>")
@jwt_required()
def delete_comment(task_id, comment_id):
    comment = db.session.get(Comment, comment_id)
    if comment is None or comment.task_id != task_id:
        raise NotFound("Comment not found")
    if comment.user_id != current_user.id:
        raise AuthorizationDenied("Only the author can delete this comment")

    # Mentions go with the comment; notifications already sent stay
    db.session.delete(comment)
    db.session.commit()
    return jsonify(status="deleted", id=comment_id), 200
