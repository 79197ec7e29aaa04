from __future__ import annotations

import io
from collections.abc import Mapping

from flask import Flask, flash, jsonify, redirect, render_template, request, send_file, session, url_for

from ..container import Container
from ..core.exceptions import GatewayError, SessionBusyError, ValidationError
from .session import SessionController

TOKEN_KEY = "attendance_token"


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    def _controller() -> SessionController:
        token = session.get(TOKEN_KEY)
        if not token:
            token = container.sessions.new_token()
            session[TOKEN_KEY] = token
        return container.sessions.get(token)

    @app.route("/", methods=["GET"], endpoint="index")
    async def index():
        ctrl = _controller()
        try:
            await ctrl.load_classes()
        except GatewayError:
            flash("Could not load classes from the attendance service", "danger")

        return render_template(
            "index.html",
            classes=ctrl.classes,
            selected_class=ctrl.class_name,
            date_key=ctrl.date_key,
            students=ctrl.students,
            records=ctrl.records,
            state=ctrl.state.value,
            saving=ctrl.is_saving,
            notice_seconds=app.config.get("NOTICE_SECONDS", 2),
        )

    @app.route("/classes/select", methods=["POST"], endpoint="select_class")
    async def select_class():
        ctrl = _controller()
        class_name = request.form.get("class_name", "")
        date_key = request.form.get("date") or None
        try:
            await ctrl.select(class_name, date_key)
        except ValidationError as e:
            flash(str(e), "warning")
        except GatewayError:
            flash("Could not load attendance for this class", "danger")
        return redirect(url_for("index"))

    @app.route("/classes", methods=["POST"], endpoint="create_class")
    async def create_class():
        ctrl = _controller()
        try:
            name = await ctrl.create_class(request.form.get("class_name", ""))
            flash(f"Class {name} created", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except GatewayError:
            flash("Could not create the class", "danger")
        return redirect(url_for("index"))

    @app.route("/classes/<path:name>/delete", methods=["POST"], endpoint="delete_class")
    async def delete_class(name: str):
        ctrl = _controller()
        try:
            await ctrl.delete_class(name)
            flash(f"Class {name} deleted", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except GatewayError:
            flash("Could not delete the class", "danger")
        return redirect(url_for("index"))

    @app.route("/students", methods=["POST"], endpoint="add_student")
    async def add_student():
        ctrl = _controller()
        try:
            await ctrl.add_student(request.form.get("roll", ""), request.form.get("name", ""))
            flash("Student added", "success")
        except ValidationError as e:
            flash(str(e), "warning")
        except GatewayError:
            flash("Could not add the student", "danger")
        return redirect(url_for("index"))

    @app.route("/attendance/mark", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        """Mark one roll. JSON callers (the radio buttons) get the session back."""

        ctrl = _controller()
        if request.is_json:
            data = request.get_json(silent=True)
            if not isinstance(data, Mapping):
                return jsonify({"success": False, "message": "Expected a JSON object with roll and status"}), 400
        else:
            data = request.form
        try:
            ctrl.mark(str(data.get("roll", "")), data.get("status"))
        except ValidationError as e:
            if request.is_json:
                return jsonify({"success": False, "message": str(e)}), 400
            flash(str(e), "warning")

        if request.is_json:
            return jsonify({"success": True, "session": ctrl.to_dict()})
        return redirect(url_for("index"))

    @app.route("/attendance/save", methods=["POST"], endpoint="save_attendance")
    async def save_attendance():
        ctrl = _controller()
        try:
            await ctrl.save()
            flash("Attendance saved", "success")
        except (ValidationError, SessionBusyError) as e:
            flash(str(e), "warning")
        except GatewayError:
            flash("Could not save attendance, your marks are kept", "danger")
        return redirect(url_for("index"))

    @app.route("/attendance/export.csv", methods=["GET"], endpoint="export_csv")
    async def export_csv():
        ctrl = _controller()
        try:
            filename, content = await ctrl.export_csv()
        except ValidationError as e:
            flash(str(e), "warning")
            return redirect(url_for("index"))
        except GatewayError:
            flash("Could not download the CSV export", "danger")
            return redirect(url_for("index"))

        return send_file(io.BytesIO(content), mimetype="text/csv", as_attachment=True, download_name=filename)

    @app.route("/api/session", methods=["GET"], endpoint="api_session")
    def api_session():
        # Read-only: a request without a token gets an empty view and no stored controller.
        ctrl = container.sessions.find(session.get(TOKEN_KEY)) or container.sessions.blank()
        return jsonify(ctrl.to_dict())
