# tmips/app.py
import os
import logging
from flask import Flask, request, jsonify
from flask_cors import CORS

from tmips.tmips_assembler import TmipsAssembler
from tmips.tmips_writer import format_output
from tmips.cli import configure_logging

logger = logging.getLogger(__name__)


def create_app():
    app = Flask(__name__)
    origins = [o.strip() for o in os.environ.get("TMIPS_CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins}})

    @app.route('/')
    def index():
        return "TMIPS assembler backend is running!"

    @app.route('/api/ping', methods=['GET'])
    def ping():
        logger.debug("Ping endpoint called")
        return jsonify({"message": "pong"})

    @app.route('/api/assemble', methods=['POST'])
    def handle_assemble():
        try:
            data = request.get_json(silent=True)
            if not data or not isinstance(data.get('assembly'), str):
                return jsonify({"errors": [{"message": "Missing 'assembly' key in request."}]}), 400
            assembly_code = data['assembly']
            logger.debug(f"Received assembly: {assembly_code[:100]}...")

            # a fresh assembler per request, nothing is shared between runs
            program = TmipsAssembler().assemble(assembly_code)
            result = program.to_dict()
            result["report"] = format_output(program)
            if program.has_errors:
                logger.warning(f"Assembly failed with {len(result['errors'])} errors")
            else:
                logger.debug(f"Assembly successful. Words: {len(result['object'])}")
            return jsonify(result)
        except Exception as e:
            logger.error(f"Error during assembly: {e}", exc_info=True)
            return jsonify({"errors": [{"message": f"Internal server error during assembly: {e}"}]}), 500

    return app


app = create_app()


if __name__ == '__main__':
    configure_logging(default="INFO")
    app.run(debug=False, port=int(os.environ.get("TMIPS_PORT", "5001")))
