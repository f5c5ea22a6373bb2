"""HTTP runner for deployment behind the authenticating reverse proxy."""
import uvicorn

from transcript_hub.config import settings
from transcript_hub.server import create_app

app = create_app(settings)

if __name__ == "__main__":
    # Client addresses (used by the report rate limit) come from X-Forwarded-For
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
