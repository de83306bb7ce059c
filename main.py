import uvicorn

from catalog.config import configure_logging, get_config


def main():
    """Run the catalog API with settings from config.yaml and .env."""
    config = get_config()
    configure_logging(config.logging.level)
    uvicorn.run("catalog.api:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
