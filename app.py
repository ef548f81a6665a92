"""Flask application for the Fix & Flip property flyer service."""

import os
import uuid
import asyncio
import threading
import logging
from flask import Flask, Response, render_template, request, jsonify, send_file

from config import OUTPUT_DIR, PORT, DEBUG, SECRET_KEY
from models.property_data import address_slug, from_dict
from services.errors import USER_FACING_MESSAGE, FlyerGenerationError
from services.flyer_generator import FlyerOptions, generate_flyer_for_property
from services.api_clients.attom_client import AttomClient
from services.api_clients.property_store import PropertyStore
from services.api_clients.webhook_client import FlyerWebhookClient, extract_printable_html
from services.share_links import build_property_share_url

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = SECRET_KEY

# In-memory job store
jobs: dict[str, dict] = {}


def _run_flyer(job_id: str, data, options: FlyerOptions):
    """Render and paginate the flyer in a background thread."""
    jobs[job_id]["status"] = "generating_pdf"
    logger.info(f"[{job_id}] Generating flyer PDF for {data.address}...")
    try:
        result = asyncio.run(generate_flyer_for_property(
            data, options,
            output_dir=jobs[job_id]["output_dir"],
            should_cancel=lambda: jobs[job_id].get("cancelled", False),
        ))
    except FlyerGenerationError as e:
        jobs[job_id].update({"status": "error", "message": str(e)})
        return

    jobs[job_id].update({
        "status": "complete",
        "pdf_path": result.path,
        "summary": result.summary,
        "skipped": [key.value for key in result.skipped],
    })
    logger.info(f"[{job_id}] Flyer complete: {result.page_count} page(s)")


# --- Routes ---

@app.route("/")
def index():
    return render_template("index.html")


@app.route("/api/flyer", methods=["POST"])
def create_flyer():
    payload = request.get_json(silent=True) or request.form.to_dict(flat=True)
    try:
        data = from_dict(payload)
        options = FlyerOptions.from_dict(payload.get("options"))
    except Exception as e:
        return jsonify({"error": f"Invalid input: {e}"}), 400

    if not data.address.strip():
        return jsonify({"error": "Address is required"}), 400

    job_id = uuid.uuid4().hex[:12]
    output_dir = os.path.join(OUTPUT_DIR, job_id)
    os.makedirs(output_dir, exist_ok=True)
    jobs[job_id] = {"status": "pending", "output_dir": output_dir, "file_name": options.file_name}

    thread = threading.Thread(target=_run_flyer, args=(job_id, data, options), daemon=True)
    thread.start()

    return jsonify({"job_id": job_id})


@app.route("/api/status/<job_id>")
def status(job_id):
    if job_id not in jobs:
        return jsonify({"status": "not_found"}), 404
    job = jobs[job_id]
    resp = {"status": job["status"]}
    if job["status"] == "error":
        resp["message"] = job.get("message", USER_FACING_MESSAGE)
    if job["status"] == "complete":
        resp["summary"] = job.get("summary")
        resp["skipped"] = job.get("skipped", [])
    return jsonify(resp)


@app.route("/api/cancel/<job_id>", methods=["POST"])
def cancel(job_id):
    if job_id not in jobs:
        return jsonify({"error": "Not found"}), 404
    jobs[job_id]["cancelled"] = True
    return jsonify({"cancelled": True})


@app.route("/api/download/<job_id>")
def download(job_id):
    if job_id not in jobs:
        return jsonify({"error": "Not found"}), 404
    job = jobs[job_id]
    if job["status"] != "complete":
        return jsonify({"error": "Flyer not ready"}), 400

    path = job.get("pdf_path")
    if path and os.path.exists(path):
        return send_file(path, as_attachment=True, download_name=job.get("file_name") or os.path.basename(path))
    return jsonify({"error": "File not found"}), 404


@app.route("/api/property-details", methods=["POST"])
def property_details():
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"error": "Invalid request body"}), 400
    result = AttomClient().fetch_property_details(body.get("address"))
    if result.get("error"):
        return jsonify(result), 400 if "Address" in result["error"] else 502
    return jsonify(result)


@app.route("/api/properties", methods=["POST"])
def publish_property():
    """Generate the printable HTML flyer through the webhook and store it."""
    payload = request.get_json(silent=True)
    if not payload:
        return jsonify({"error": "No property data provided"}), 400
    if not address_slug(payload.get("address", "")):
        return jsonify({"error": "Address is required"}), 400

    generated = FlyerWebhookClient().generate_html(payload)
    if generated.get("error"):
        logger.error(f"Webhook generation failed: {generated['error']}")
        return jsonify({"error": "Failed to generate flyer. Please try again."}), 502

    saved = PropertyStore().save_property(payload, generated["html"])
    if saved.get("error"):
        logger.error(f"Saving property failed: {saved['error']}")
        return jsonify({"error": "Failed to save property. Please try again."}), 502

    slug = saved.get("property_address") or address_slug(payload["address"])
    return jsonify({
        "slug": slug,
        "share_url": build_property_share_url(slug, fallback=request.host_url),
    })


@app.route("/property")
def property_page():
    """Printable HTML flyer for a published property."""
    slug = request.args.get("address", "")
    record = PropertyStore().get_public_property(slug)
    if record.get("error"):
        logger.warning(f"Property lookup failed for '{slug}': {record['error']}")
        return render_template("not_found.html", message=record["error"]), 404
    return Response(extract_printable_html(record["html_content"]), mimetype="text/html")


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=PORT, debug=DEBUG, use_reloader=False)
