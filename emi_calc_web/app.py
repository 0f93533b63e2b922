import os
from datetime import date
from typing import Optional

from flask import Flask, jsonify, render_template, request

from emi_calc.engine import amortize_text
from emi_calc.formatter import CURRENCY_STYLES, currency_formatter, schedule_rows
from emi_calc.main import serialize_entry, serialize_result
from emi_calc.utils import parse_year_month

app = Flask(__name__)
app.config["DEFAULT_CURRENCY"] = os.environ.get("EMI_CALC_CURRENCY", "INR").upper()
app.config["SCHEDULE_START"] = os.environ.get("EMI_CALC_SCHEDULE_START")
app.config["MAX_ROWS"] = int(os.environ.get("EMI_CALC_MAX_ROWS", "240"))

CURRENCY_LABELS = {
    "INR": "Indian rupee",
    "USD": "US dollar",
    "EUR": "Euro",
    "GBP": "British pound",
}

DEFAULT_INPUTS = {"amount": "1000000", "rate": "8.5", "tenure": "20"}


def _normalized_currency(form) -> str:
    default = app.config["DEFAULT_CURRENCY"]
    if default not in CURRENCY_STYLES:
        default = "INR"
    code = form.get("currency", default).upper()
    return code if code in CURRENCY_STYLES else default


def _schedule_start(override: Optional[str] = None) -> Optional[date]:
    """Return the configured start month, or None for the current month."""
    value = override or app.config.get("SCHEDULE_START")
    return parse_year_month(value) if value else None


def _form_inputs(form) -> dict:
    return {key: form.get(key, default).strip() for key, default in DEFAULT_INPUTS.items()}


@app.route("/", methods=["GET", "POST"])
def index():
    source = request.form if request.method == "POST" else request.args
    inputs = _form_inputs(source)
    currency_code = _normalized_currency(source)
    fmt = currency_formatter(currency_code)

    try:
        start = _schedule_start()
    except ValueError as exc:
        app.logger.warning("Ignoring EMI_CALC_SCHEDULE_START: %s", exc)
        start = None
    amortization = amortize_text(inputs["amount"], inputs["rate"], inputs["tenure"], start)
    summary = None
    rows = []
    truncated = 0
    if amortization is not None:
        result, schedule = amortization
        summary = {
            "emi": fmt(result.emi),
            "total_interest": fmt(result.total_interest),
            "total_payable": fmt(result.total_payable),
        }
        max_rows = app.config["MAX_ROWS"]
        rows = list(schedule_rows(result, schedule[:max_rows], fmt))
        truncated = max(0, len(schedule) - max_rows)
    else:
        app.logger.debug("Incomplete loan inputs %s", inputs)

    return render_template(
        "index.html",
        inputs=inputs,
        summary=summary,
        rows=rows,
        truncated=truncated,
        currency_code=currency_code,
        currency_labels=CURRENCY_LABELS,
    )


@app.get("/api/amortization")
def amortization_api():
    try:
        start = _schedule_start(request.args.get("start"))
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    amortization = amortize_text(
        request.args.get("amount"),
        request.args.get("rate"),
        request.args.get("tenure"),
        start,
    )
    if amortization is None:
        return jsonify({"result": None, "schedule": []})
    result, schedule = amortization
    app.logger.info("Amortization computed for %d months", len(schedule))
    return jsonify(
        {
            "result": serialize_result(result),
            "schedule": [serialize_entry(entry) for entry in schedule],
        }
    )


if __name__ == "__main__":
    print("Starting EMI calculator web app...")
    app.run(debug=True)
