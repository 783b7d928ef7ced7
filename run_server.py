#!/usr/bin/env python3
"""
PR Retest Webhook Server

Simple Flask server receiving issue_comment webhooks and rerunning
failed workflow runs when /retest is commented on a pull request.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from pr_retest.config import AppConfig, ConfigManager
from pr_retest.server import create_app


if __name__ == '__main__':
    manager = ConfigManager(AppConfig.from_env())
    config = manager.config
    app = create_app(config)

    print("🚀 Starting PR Retest Webhook Server...")
    print(f"📍 Server will be available at: http://{config.server.host}:{config.server.port}")
    print("📋 API Documentation:")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhook: POST /api/v1/webhooks/github")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.debug
    )
