from src.app_factory import create_app


if __name__ == "__main__":
    """
    Entrypoint for the hospital admin dashboard.
    Redis must be reachable at REDIS_URL for logins to work.
    """
    app = create_app()
    app.run(host="0.0.0.0", port=5001, debug=app.config.get("DEBUG", False))
