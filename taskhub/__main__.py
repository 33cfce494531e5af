import uvicorn

from taskhub.infra.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "taskhub.infra.rest_api.main:create_app",
        factory=True,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
        reload=settings.is_development,
    )


if __name__ == "__main__":
    main()
