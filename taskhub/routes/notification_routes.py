from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy import func, update

from taskhub.errors import NotFound
from taskhub.models import Notification
from taskhub.utils.db import db

notifications_bp = Blueprint("notifications", __name__)

PAGE_SIZE = 50


def _get_own_notification(notification_id):
    notification = db.session.execute(
        db.select(Notification).filter_by(id=notification_id, user_id=current_user.id)
    ).scalar_one_or_none()
    if notification is None:
        raise NotFound("Notification not found")
    return notification


def _mark_all_read():
    db.session.execute(
        update(Notification)
        .where(Notification.user_id == current_user.id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    db.session.commit()
    return jsonify(status="ok"), 200


@notifications_bp.get("/")
@jwt_required()
def list_notifications():
    user_id = current_user.id
    query = db.select(Notification).filter_by(user_id=user_id)
    if request.args.get("unread_only") == "true":
        query = query.filter_by(is_read=False)
    notifications = db.session.execute(
        query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(PAGE_SIZE)
    ).scalars().all()

    unread_count = db.session.execute(
        db.select(func.count(Notification.id)).filter_by(user_id=user_id, is_read=False)
    ).scalar_one()
    return jsonify(
        items=[notification.to_dict() for notification in notifications],
        unread_count=unread_count,
    ), 200


@notifications_bp.patch("/<int:notification_id>/mark-read")
@jwt_required()
def mark_read(notification_id):
    notification = _get_own_notification(notification_id)
    notification.is_read = True
    db.session.commit()
    return jsonify(item=notification.to_dict()), 200


@notifications_bp.patch("/mark-all-read")
@jwt_required()
def mark_all_read():
    return _mark_all_read()


@notifications_bp.patch("/")
@jwt_required()
def mark_all_read_legacy():
    return _mark_all_read()


@notifications_bp.delete("/<int:notification_id>")
@jwt_required()
def delete_notification(notification_id):
    notification = _get_own_notification(notification_id)
    db.session.delete(notification)
    db.session.commit()
    return jsonify(status="deleted", id=notification_id), 200
