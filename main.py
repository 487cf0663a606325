# main.py ─────────────────────────────────────────────────────────────
from flask import Flask, request, jsonify
import os
from dotenv import load_dotenv
from partner_scraper import scrape_partners_investors, is_valid_url

load_dotenv()
app = Flask(__name__)


# ── main route ───────────────────────────────────────────────────────
@app.route("/extract_partners", methods=["POST"])
def extract_partners():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    url = body.get("url")
    if not url:
        return jsonify({"error": "Missing 'url'"}), 400
    if not isinstance(url, str) or not is_valid_url(url):
        return jsonify({"error": "Invalid URL"}), 400

    print(f"\n============  EXTRACT START  {url}  ============\n")
    try:
        results = scrape_partners_investors(url, body.get("session_id"))
    except Exception as e:
        print("[ERROR]", e)
        return jsonify({"error": str(e)}), 500

    print("\n============  EXTRACT DONE   ============\n")
    return jsonify({
        "url":       url,
        "partners":  results["partners"],
        "investors": results["investors"],
        "all_names": results["all_names"],
    })


if __name__ == "__main__":
    from waitress import serve
    port = int(os.getenv("PORT", "8080"))
    print(f"🚀 Production server running on :{port}")
    serve(app, host="0.0.0.0", port=port)
