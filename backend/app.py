import logging

from flask import Flask, request, jsonify
from flask_cors import CORS

import compiler
from config import Config

app = Flask(__name__)
app.config.from_object(Config)
CORS(app, origins=app.config["CORS_ORIGINS"])  # allow cross-origin requests

logger = logging.getLogger("tal.app")


def token_to_dict(token):
    return {
        "kind": token.kind,
        "text": token.text,
        "line": token.line,
        "column": token.column,
    }


def empty_response(errors):
    return {
        "tokens": [],
        "listing": "",
        "output": [],
        "errors": errors,
        "symbol_table": {},
    }


def read_request():
    """Return (code, run, error) from the JSON body; error is None when the body is usable."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, None, "Request body must be a JSON object"
    code = data.get("code", "")
    if not isinstance(code, str):
        return None, None, "'code' must be a string"
    run = data.get("run", True)
    if not isinstance(run, bool):
        return None, None, "'run' must be a boolean"
    return code, run, None


@app.route("/compile", methods=["POST"])
def compile_code():
    code, run, problem = read_request()
    if problem:
        return jsonify(empty_response([problem])), 400
    try:
        result = compiler.compile_source(code, run=run)

        # EOF is an artifact of the scanner, not part of the program
        tokens = [token_to_dict(t) for t in result['tokens'] if t.kind != 'EOF']

        response = {
            "tokens": tokens,
            "listing": result['listing'],
            "output": result['output'],
            "errors": result['errors'],
            "symbol_table": result['symbol_table'],
        }
        return jsonify(response)
    except Exception as e:
        logger.exception("compile request failed")
        return jsonify(empty_response([f"Unexpected error: {str(e)}"])), 500


@app.route("/tokens", methods=["POST"])
def scan_code():
    code, _, problem = read_request()
    if problem:
        return jsonify({"tokens": [], "errors": [problem]}), 400
    try:
        tokens = compiler.Scanner(code).tokenize()
    except compiler.CompilerError as e:
        return jsonify({"tokens": [], "errors": [str(e)]})
    except Exception as e:
        logger.exception("tokens request failed")
        return jsonify({"tokens": [], "errors": [f"Unexpected error: {str(e)}"]}), 500
    return jsonify({
        "tokens": [token_to_dict(t) for t in tokens if t.kind != 'EOF'],
        "errors": [],
    })


if __name__ == "__main__":
    logging.basicConfig(level=app.config["LOG_LEVEL"])
    app.run(debug=app.config["DEBUG"])
