from __future__ import annotations

import io
import logging

from flask import Flask, g, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import current_year_month
from ..container import Container
from ..core.exceptions import ApiError, ValidationError
from ..web.guards import make_guards
from ..web.helpers import flash_failure, load_item
from ..web.views import Field, Link
from .service import EXPORT_TYPES, PERIODS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    guards = make_guards(container)
    reports = container.report_service

    @app.route("/dashboard", endpoint="dashboard")
    @guards.login_required
    def dashboard():
        period = request.args.get("period", "month")
        data = load_item(reports.dashboard, period=period) or {}
        trend, max_amount = reports.monthly_trend(data)
        return render_template(
            "dashboard.html",
            user=g.current_user,
            period=period,
            periods=PERIODS,
            data=data,
            trend=trend,
            max_amount=max_amount,
            branches=container.academy_context.fetch(),
        )

    @app.route("/reports", endpoint="reports")
    @guards.permission_required("reports")
    def report_overview():
        period = request.args.get("period", "month")
        year_month = request.args.get("year_month") or current_year_month()
        summary = load_item(reports.dashboard, period=period) or {}
        performance = load_item(reports.performance, year_month=year_month) or {}
        return render_template(
            "page.html",
            title="리포트",
            filters=[
                Field("period", "기간", kind="select", options=PERIODS),
                Field("year_month", "조회월", kind="month"),
            ],
            filter_values={"period": period, "year_month": year_month},
            pairs=[(str(k), v) for k, v in {**summary, **performance}.items() if not isinstance(v, (dict, list))],
            actions=[
                Link(f"{label} 내려받기", url_for("report_export", report_type=key, year_month=year_month))
                for key, label in EXPORT_TYPES.items()
            ],
        )

    @app.route("/reports/export/<report_type>", endpoint="report_export")
    @guards.permission_required("reports")
    def report_export(report_type: str):
        try:
            download = reports.export(report_type, year_month=request.args.get("year_month"))
        except (ValidationError, ApiError) as e:
            flash_failure(e, "리포트 내려받기에 실패했습니다")
            return redirect(url_for("reports"))
        logger.info("report %s exported (%d bytes)", report_type, len(download.content))
        return send_file(
            io.BytesIO(download.content),
            mimetype=download.mimetype,
            as_attachment=True,
            download_name=download.filename,
        )
