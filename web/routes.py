"""Route handlers for the tweetstorm API."""

import logging

from flask import Blueprint, current_app, jsonify, request

from tweetstorm.blocks import ContentBlock, parse_blocks
from tweetstorm.boundary import locate_boundary
from tweetstorm.errors import ConfigurationError, InputError
from tweetstorm.length import LIMIT, estimate, get_platform, measure
from tweetstorm.segmenter import segment

logger = logging.getLogger(__name__)

bp = Blueprint("main", __name__)


def _platform_for(data: dict):
    """Platform requested in the body, falling back to the configured default."""
    name = data.get("platform")
    if not name:
        return current_app.config["TWEETSTORM_SETTINGS"].platform
    return get_platform(name)


@bp.errorhandler(InputError)
def handle_input_error(e):
    return jsonify({"error": str(e)}), 400


@bp.errorhandler(ConfigurationError)
def handle_configuration_error(e):
    logger.error("Configuration error: %s", e)
    return jsonify({"error": str(e)}), 500


@bp.route("/api/tweetstorm/parse", methods=["POST"])
def parse():
    """Split the posted blocks into tweets."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    blocks = parse_blocks(data.get("blocks"))
    selected = data.get("selectedBlocks") or []
    if not isinstance(selected, list):
        return jsonify({"error": "selectedBlocks must be a list"}), 400

    tweets = segment(blocks, selected, config=_platform_for(data))
    return jsonify([tweet.to_dict() for tweet in tweets])


@bp.route("/api/tweetstorm/boundary", methods=["POST"])
def boundary():
    """Locate the attribute offset for a character offset in a block's text."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    offset = data.get("offset")
    if not isinstance(offset, int) or isinstance(offset, bool):
        return jsonify({"error": "offset must be an integer"}), 400

    block = ContentBlock.from_dict(data.get("block"))
    return jsonify(locate_boundary(block, offset).to_dict())


@bp.route("/api/tweetstorm/estimate", methods=["POST"])
def estimate_fill():
    """Report how much of a single post the given text uses."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Expected a JSON object"}), 400

    text = data.get("text") or ""
    if not isinstance(text, str):
        return jsonify({"error": "text must be a string"}), 400
    config = _platform_for(data)
    fill = estimate(text, config)
    count = measure(text, config)
    return jsonify({
        "fill": fill,
        "count": count,
        "limit": config.char_limit,
        "over": fill > LIMIT,
    })
