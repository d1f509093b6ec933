from __future__ import annotations

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from ftlab.errors import InvalidInputError, NotFoundError

load_dotenv()


def create_app(predictor=None) -> Flask:
    app = Flask(__name__)

    if predictor is None:
        # Build the shared predictor lazily to keep onnxruntime out of imports
        from ftlab.serve.predictor import load_predictor  # local import

        predictor = load_predictor()
    app.config["predictor"] = predictor

    @app.post("/")
    def classify():
        # Expect raw bytes
        if request.headers.get("Content-Type", "") != "application/octet-stream":
            return jsonify({"error": "expecting application/octet-stream"}), 400

        debug_enabled = (
            request.headers.get("X-Debug", "").strip() == "1"
            or request.args.get("debug", "").strip() == "1"
        )

        bytez = request.get_data() or b""
        try:
            if debug_enabled:
                pred, dbg = app.config["predictor"].predict_debug(bytez)
                return jsonify({**pred.to_dict(), "debug": dbg}), 200
            pred = app.config["predictor"].predict(bytez)
            return jsonify(pred.to_dict()), 200
        except (InvalidInputError, NotFoundError) as e:
            return jsonify({"error": str(e)}), 400
        except Exception as e:
            app.logger.exception("prediction failed: %s", e)
            resp = {"error": "prediction failed"}
            if debug_enabled:
                resp["reason"] = str(e)
            return jsonify(resp), 500

    @app.get("/model")
    def model():
        return jsonify(app.config["predictor"].model_info()), 200

    return app


if __name__ == "__main__":
    # Dev server
    create_app().run(host="0.0.0.0", port=8080, debug=True)
