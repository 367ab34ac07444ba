from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..container import Container
from ..core.constants import GENERIC_FAILURE_MESSAGE
from ..core.enums import CONSULTATION_STATUS_LABELS
from ..core.exceptions import ApiError, ValidationError
from ..web.helpers import form_data
from .availability import min_selectable_date
from .public_service import GRADE_OPTIONS

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "존재하지 않는 페이지입니다"


def register(app: Flask, container: Container) -> None:
    """Unauthenticated booking pages addressed by the academy's slug."""

    booking = container.public_booking_service

    def load_or_404(slug: str):
        try:
            return booking.load_form(slug)
        except ApiError as e:
            logger.warning("public form %s unavailable: %s", slug, e)
            return None

    def not_found():
        return render_template("public/message.html", message=NOT_FOUND_MESSAGE), 404

    @app.route("/c/<slug>", methods=["GET", "POST"], endpoint="public_booking")
    def public_booking(slug: str):
        form = load_or_404(slug)
        if form is None:
            return not_found()

        values = form_data() if request.method == "POST" else {}
        if request.method == "POST":
            try:
                reservation_number = booking.submit(form, values)
            except ValidationError as e:
                flash(str(e), "danger")
            except ApiError as e:
                logger.warning("public booking for %s failed: %s", slug, e)
                flash("신청에 실패했습니다. 잠시 후 다시 시도해주세요", "danger")
            else:
                return redirect(url_for("public_booking_success", slug=slug, reservation=reservation_number or ""))

        return render_template(
            "public/booking.html",
            form=form,
            values=values,
            grade_options=GRADE_OPTIONS,
            min_date=min_selectable_date(today_local()).isoformat(),
        )

    @app.route("/c/<slug>/slots", endpoint="public_booking_slots")
    def public_booking_slots(slug: str):
        form = load_or_404(slug)
        if form is None:
            return jsonify({"error": NOT_FOUND_MESSAGE}), 404
        try:
            day = booking.day_availability(form, request.args.get("date", ""))
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        return jsonify({"date": day.date, "available": day.available, "slots": day.slots})

    @app.route("/c/<slug>/success", endpoint="public_booking_success")
    def public_booking_success(slug: str):
        return render_template(
            "public/success.html",
            slug=slug,
            reservation_number=request.args.get("reservation", ""),
        )

    @app.route("/consultation/<reservation_number>", endpoint="public_reservation")
    def public_reservation(reservation_number: str):
        try:
            reservation = booking.lookup_reservation(reservation_number)
        except ApiError as e:
            logger.warning("reservation lookup failed: %s", e)
            return render_template("public/message.html", message=GENERIC_FAILURE_MESSAGE), 502
        if reservation is None:
            return render_template("public/message.html", message="예약 정보를 찾을 수 없습니다"), 404
        return render_template(
            "public/reservation.html",
            reservation=reservation,
            status_label=CONSULTATION_STATUS_LABELS.get(reservation.status, reservation.status.value),
        )
