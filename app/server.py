"""DNS configuration backend HTTP server.

Copyright (c) 2024 MultiFactor
License: https://github.com/MultiDirectoryLab/MultiDirectory/blob/main/LICENSE
"""

import uvicorn

from config import Settings


def main() -> None:
    """Run HTTP server."""
    settings = Settings.from_os()

    uvicorn.run(
        "web_app:create_prod_app",
        host=str(settings.HOST),
        port=settings.HTTP_PORT,
        reload=settings.AUTO_RELOAD,
        loop="uvloop",
        factory=True,
    )
