"""Development entry point: ``python app.py`` (settings chosen by APP_ENV)."""

from src.academy_dashboard.academy_dashboard.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
