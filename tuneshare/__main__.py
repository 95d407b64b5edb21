"""
Serve the API with uvicorn:

  python -m tuneshare

Host and port come from HOST and PORT (defaults 0.0.0.0 and 8000).
JWT_SECRET must be set in the environment or .env.
"""
import os

import uvicorn


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(
        "tuneshare.main:build_default_app",
        factory=True,
        host=host,
        port=port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
