#!/usr/bin/env python3
"""
Weitblick Web Interface

Flask app exposing discourse sessions, credentials and the compass as a
JSON API, plus a minimal page shell.
"""

from flask import Flask, render_template, jsonify

from config import WEB_PORT, PROVIDERS
from repositories import get_credential_store
from routes import discourse_bp, credentials_bp, compass_bp

app = Flask(__name__, template_folder="templates_html")

app.register_blueprint(discourse_bp)
app.register_blueprint(credentials_bp)
app.register_blueprint(compass_bp)


@app.route("/")
def index():
    """Main page"""
    return render_template("index.html", providers=PROVIDERS)


@app.route("/api/health")
def health():
    configured = [p.value for p in get_credential_store().load().configured()]
    return jsonify({
        "status": "ok",
        "providers": PROVIDERS,
        "configured": configured,
        # Without keys every node is filled from static text
        "mode": "ai" if configured else "fallback",
    })


if __name__ == "__main__":
    print("\n" + "="*60)
    print("  Weitblick Web Interface")
    print("="*60)
    print(f"  Open http://localhost:{WEB_PORT} in your browser")
    print("="*60 + "\n")
    app.run(debug=True, port=WEB_PORT)
