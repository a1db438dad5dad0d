"""
API module for chatprompt.
"""

from flask import Flask, jsonify
from flask_cors import CORS

from chatprompt import __version__


def create_app(test_config=None):
    """Create and configure the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Enable CORS for all routes and origins
    CORS(app)

    # Load configuration
    if test_config is None:
        app.config.from_mapping(
            SECRET_KEY='dev',
        )
    else:
        app.config.from_mapping(test_config)

    # Preserve key order and UTF-8 text in JSON responses
    app.json.sort_keys = False
    app.json.ensure_ascii = False

    @app.route('/api/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({'status': 'ok', 'version': __version__})

    @app.route('/api')
    def api_root():
        """API root endpoint."""
        return jsonify({
            'status': 'ok',
            'message': 'chatprompt API',
            'endpoints': [
                '/api/health',
                '/api/search',
                '/api/search/suggestions',
                '/api/cursor',
                '/api/conversations',
                '/api/prompts',
                '/api/prompts/categories',
                '/api/dashboard',
            ]
        })

    # Register blueprints
    from chatprompt.api.routes.conversations import bp as conversations_bp
    from chatprompt.api.routes.cursor import bp as cursor_bp
    from chatprompt.api.routes.prompts import bp as prompts_bp, dashboard_bp
    from chatprompt.api.routes.search import bp as search_bp

    app.register_blueprint(search_bp)
    app.register_blueprint(cursor_bp)
    app.register_blueprint(conversations_bp)
    app.register_blueprint(prompts_bp)
    app.register_blueprint(dashboard_bp)

    return app
