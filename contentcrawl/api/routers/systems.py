from fastapi import APIRouter


def create_systems_router(container_env: dict, standby_settings=None):
    """Create systems router with access to container environment config."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        return {"status": "ok"}

    @router.get("/config")
    def get_config():
        """Return current environment configuration values and standby crawl limits."""
        payload = {
            "environment": {
                key: str(value) if value is not None else None
                for key, value in container_env.items()
            }
        }
        if standby_settings is not None:
            payload["standby"] = {
                "max_depth": standby_settings.max_depth,
                "max_pages_per_domain": standby_settings.max_pages_per_domain,
                "enable_recursive_crawling": standby_settings.enable_recursive_crawling,
                "include_patterns": standby_settings.include_patterns,
                "exclude_patterns": standby_settings.exclude_patterns,
            }
        return payload

    return router
