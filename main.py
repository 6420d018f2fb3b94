"""Tweetstorm: serve the block segmentation API."""

from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project directory
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


def main():
    from tweetstorm.config import configure_logging, load_settings
    from web.app import create_app

    settings = load_settings()
    configure_logging(settings.log_level)

    app = create_app(settings)
    app.run(host=settings.host, port=settings.port, debug=False)


if __name__ == "__main__":
    main()
