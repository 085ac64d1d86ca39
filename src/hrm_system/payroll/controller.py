from __future__ import annotations

from flask import Flask, current_app, request

from ..common.http import fail, json_body, ok
from ..core.exceptions import EmptyBatchError, PartialLinkFailure
from ..container import Container
from .calculator.factory import net_pay


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service

    @app.route("/api/payroll/generate", methods=["POST"], endpoint="api_payroll_generate")
    def api_payroll_generate():
        try:
            result = payroll.generate()
        except EmptyBatchError as e:
            return ok({"processed": 0, "payroll_ids": []}, message=str(e))
        except PartialLinkFailure as e:
            current_app.logger.error("payroll generation partially failed: %s", e)
            return fail(
                str(e),
                500,
                created_payroll_ids=e.created_payroll_ids,
                failures=[f.to_dict() for f in e.failures],
            )

        return ok(
            {
                "processed": result.employees_processed,
                "payroll_ids": result.payroll_ids,
                "attendance_linked": result.attendance_linked,
                "generated_on": result.generated_on,
            },
            message=result.message,
        )

    @app.route("/api/payroll/summaries", methods=["GET"], endpoint="api_payroll_summaries")
    def api_payroll_summaries():
        return ok(payroll.employee_summaries())

    @app.route("/api/payroll/net-pay", methods=["GET"], endpoint="api_payroll_net_pay")
    def api_payroll_net_pay():
        amount = net_pay(
            request.args.get("salary_type"),
            request.args.get("salary_rate"),
            total_working_days=request.args.get("total_working_days", 0),
            total_hours=request.args.get("total_hours", 0),
        )
        return ok({"net_pay": amount})

    @app.route("/api/employees/<int:employee_id>/payroll", methods=["GET"], endpoint="api_payroll_for_employee")
    def api_payroll_for_employee(employee_id: int):
        return ok(payroll.payrolls_for(employee_id))

    @app.route("/api/payroll/<int:payroll_id>", methods=["GET"], endpoint="api_payroll_get")
    def api_payroll_get(payroll_id: int):
        p = payroll.get(payroll_id)
        return ok(
            {
                "payroll": p,
                "attendance": container.attendance_repo.list_for_payroll(payroll_id),
            }
        )

    @app.route("/api/payroll/<int:payroll_id>", methods=["PUT"], endpoint="api_payroll_update")
    def api_payroll_update(payroll_id: int):
        payroll.update_payroll(payroll_id, json_body())
        return ok({"payroll_id": payroll_id}, message="Payroll updated")

    @app.route("/api/payroll/<int:payroll_id>", methods=["DELETE"], endpoint="api_payroll_delete")
    def api_payroll_delete(payroll_id: int):
        released = payroll.delete_payroll(payroll_id)
        return ok(
            {"payroll_id": payroll_id, "attendance_released": released},
            message="Payroll deleted; its attendance can be processed again",
        )
