from flask import Blueprint, jsonify, request

from ..decorators import require_auth
from ..services import reporting_service


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
@require_auth
def summary_report():
    start = request.args.get("start")
    end = request.args.get("end")
    preset = request.args.get("preset") or ("custom" if start or end else "today")

    try:
        report = reporting_service.ledger_summary(
            preset=preset,
            start=start,
            end=end,
            staff_id=request.args.get("staff_id"),
        )
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400


@reports_bp.get("/daily")
@require_auth
def daily_report():
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)

    try:
        report = reporting_service.monthly_daily_summary(year=year, month=month)
        return jsonify(report), 200
    except reporting_service.ReportError as exc:
        return jsonify({"error": str(exc)}), 400
